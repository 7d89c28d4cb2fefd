from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .runtime_constants import MAX_PLAYERS
from .runtime_errors import RoomFull, Unauthorized
from .runtime_state_sync import build_state_payload
from .runtime_types import PlayerConnection
from .runtime_utils import clamp_round_seconds, clamp_target

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from .runtime import GameRuntime
    from .runtime_types import RoomRuntime, SessionContext


def reset_room_for_first_player(runtime: "GameRuntime", room: "RoomRuntime") -> None:
    runtime._clear_timers(room)
    room.phase = "lobby"
    room.scores = [0, 0]
    room.turn = 0
    room.challenge = None
    room.round_id = None
    room.time_left = 0


async def join_room(
    runtime: "GameRuntime",
    room: "RoomRuntime",
    session: "SessionContext",
    name: str,
) -> PlayerConnection:
    if len(room.players) >= MAX_PLAYERS:
        raise RoomFull()
    slot = room.free_slot()
    if slot is None:
        raise RoomFull()

    if not room.players:
        reset_room_for_first_player(runtime, room)

    player = PlayerConnection(
        peer_id=session.peer_id,
        name=name,
        slot=slot,
        websocket=session.websocket,
    )
    room.players.append(player)
    room.players.sort(key=lambda p: p.slot)

    session.room_id = room.room_id
    session.slot = slot
    session.name = name

    is_full = len(room.players) == MAX_PLAYERS
    if is_full and room.phase == "lobby":
        room.phase = "ready"

    runtime._log_ws_event(
        "join",
        roomId=room.room_id,
        peerId=player.peer_id,
        slot=slot,
        players=len(room.players),
    )
    await runtime._broadcast(room, "lobby", build_state_payload(room))
    if is_full:
        await runtime._broadcast(room, "lobby-ready", build_state_payload(room))
    return player


async def configure_room(
    runtime: "GameRuntime",
    room: "RoomRuntime",
    player: PlayerConnection,
    target: int | None,
    round_seconds: int | None,
) -> None:
    if player.slot != 0:
        raise Unauthorized("Only the host can configure the room")

    room.target = clamp_target(target, runtime.settings.default_target)
    room.round_seconds = clamp_round_seconds(round_seconds, runtime.settings.default_round_seconds)
    logger.info(
        "room configured room=%s target=%s secs=%s",
        room.room_id,
        room.target,
        room.round_seconds,
    )
    await runtime._broadcast(room, "lobby", build_state_payload(room))


async def leave_room(
    runtime: "GameRuntime",
    room: "RoomRuntime",
    peer_id: str,
) -> PlayerConnection | None:
    removed = room.player_by_peer(peer_id)
    if removed is None:
        return None

    room.players = [p for p in room.players if p.peer_id != peer_id]
    runtime._clear_timers(room)

    # No round may continue with a single participant; the host restarts once a
    # second player is back.
    room.phase = "lobby"
    room.challenge = None
    room.round_id = None
    room.time_left = 0

    if not room.players:
        runtime.registry.remove(room.room_id, room)
    else:
        await runtime._broadcast(room, "lobby", build_state_payload(room))
    return removed
