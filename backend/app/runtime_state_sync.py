from __future__ import annotations

from typing import Any

from .runtime_types import RoomRuntime


def build_state_payload(room: RoomRuntime) -> dict[str, Any]:
    return {
        "room": room.room_id,
        "players": [
            {"id": player.peer_id, "name": player.name}
            for player in sorted(room.players, key=lambda p: p.slot)
        ],
        "scores": list(room.scores),
        "target": room.target,
        "secs": room.round_seconds,
        "turn": room.turn,
        "timeLeft": room.time_left,
        "prompt": room.challenge.prompt if room.challenge else None,
    }


def build_result_payload(
    room: RoomRuntime,
    *,
    ok: bool,
    answer: str | None = None,
    skipped: bool = False,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "ok": ok,
        "expect": room.challenge.expect if room.challenge else None,
        "turn": room.turn,
    }
    if answer is not None:
        payload["answer"] = answer
    if skipped:
        payload["skipped"] = True
    return payload


def build_end_payload(room: RoomRuntime, winner: int) -> dict[str, Any]:
    return {"winner": winner, "scores": list(room.scores)}
