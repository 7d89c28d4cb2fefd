from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .runtime_constants import MAX_PLAYERS, NEXT_ROUND_TIMER_KEY, ROUND_TIMER_KEY
from .runtime_errors import InvalidTurn, NotEnoughPlayers, Unauthorized
from .runtime_state_sync import build_end_payload, build_result_payload, build_state_payload
from .runtime_utils import next_turn, pick_winner, random_id

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from .runtime import GameRuntime
    from .runtime_types import Challenge, PlayerConnection, RoomRuntime


async def start_match(
    runtime: "GameRuntime",
    room: "RoomRuntime",
    player: "PlayerConnection",
) -> None:
    if len(room.players) < MAX_PLAYERS:
        raise NotEnoughPlayers()
    if player.slot != 0:
        raise Unauthorized("Only the host can start the match")

    runtime._clear_timers(room)
    room.scores = [0, 0]
    room.turn = 0 if runtime.rng.random() < 0.5 else 1
    room.challenge = None
    logger.info("match started room=%s first_turn=%s target=%s", room.room_id, room.turn, room.target)
    await begin_round(runtime, room)


async def begin_round(runtime: "GameRuntime", room: "RoomRuntime") -> None:
    if room.scores[0] >= room.target or room.scores[1] >= room.target:
        winner = pick_winner(room.scores)
        runtime._cancel_timer(room, ROUND_TIMER_KEY)
        room.phase = "ended"
        room.challenge = None
        room.round_id = None
        room.time_left = 0
        runtime._increment_stat("matchesEnded")
        runtime._log_ws_event("match_end", roomId=room.room_id, winner=winner, scores=room.scores)
        await runtime._broadcast(room, "end", build_end_payload(room, winner))
        return

    room.challenge = runtime.challenge_source()
    room.time_left = room.round_seconds
    room.round_id = random_id()
    room.phase = "round"
    runtime._increment_stat("roundsStarted")
    logger.debug("round started room=%s round=%s turn=%s", room.room_id, room.round_id, room.turn)

    await runtime._broadcast(room, "challenge", build_state_payload(room))
    runtime._schedule_interval(
        room,
        ROUND_TIMER_KEY,
        runtime.settings.tick_interval_ms,
        runtime._tick_round,
    )


async def tick_round(runtime: "GameRuntime", room: "RoomRuntime") -> None:
    if room.phase != "round" or room.challenge is None:
        runtime._cancel_timer(room, ROUND_TIMER_KEY)
        return

    room.time_left -= 1
    if room.time_left <= 0:
        await resolve_round(runtime, room, ok=False, timed_out=True)
        return

    await runtime._broadcast(room, "tick", {"timeLeft": room.time_left})


async def resolve_round(
    runtime: "GameRuntime",
    room: "RoomRuntime",
    *,
    ok: bool,
    answer: str | None = None,
    skipped: bool = False,
    timed_out: bool = False,
) -> bool:
    """Single entry point that closes the current round.

    Returns False when there is no round left to resolve, so a timeout and a
    submission racing for the same round produce one result only.
    """
    if room.phase != "round" or room.challenge is None:
        return False

    runtime._cancel_timer(room, ROUND_TIMER_KEY)
    room.phase = "resolved"
    resolved_turn = room.turn

    if timed_out:
        room.time_left = 0
        await runtime._broadcast(room, "tick", {"timeLeft": 0})

    await runtime._broadcast(
        room,
        "result",
        build_result_payload(room, ok=ok, answer=answer, skipped=skipped),
    )
    if ok:
        room.scores[resolved_turn] += 1
    room.turn = next_turn(resolved_turn)

    runtime._increment_stat("roundsResolved")
    runtime._log_ws_event(
        "round_resolved",
        level=logging.DEBUG,
        roomId=room.room_id,
        roundId=room.round_id,
        turn=resolved_turn,
        ok=ok,
        skipped=skipped,
        timedOut=timed_out,
        scores=room.scores,
    )

    runtime._schedule_timer(
        room,
        NEXT_ROUND_TIMER_KEY,
        runtime.settings.next_round_delay_ms,
        runtime._continue_after_result,
    )
    return True


async def continue_after_result(runtime: "GameRuntime", room: "RoomRuntime") -> None:
    if not runtime.registry.is_live(room):
        logger.debug("next round dropped room=%s reason=room_removed", room.room_id)
        return
    if len(room.players) < MAX_PLAYERS or room.phase != "resolved":
        logger.debug(
            "next round dropped room=%s reason=stale players=%s phase=%s",
            room.room_id,
            len(room.players),
            room.phase,
        )
        return
    await begin_round(runtime, room)


def _require_turn_owner(room: "RoomRuntime", player: "PlayerConnection") -> "Challenge":
    if room.phase != "round" or room.challenge is None:
        raise InvalidTurn("No round in progress")
    if player.slot != room.turn:
        raise InvalidTurn("Not your turn")
    return room.challenge


async def submit_answer(
    runtime: "GameRuntime",
    room: "RoomRuntime",
    player: "PlayerConnection",
    answer: str,
) -> None:
    challenge = _require_turn_owner(room, player)
    ok = answer == challenge.expect
    await resolve_round(runtime, room, ok=ok, answer=answer)


async def skip_round(
    runtime: "GameRuntime",
    room: "RoomRuntime",
    player: "PlayerConnection",
) -> None:
    _require_turn_owner(room, player)
    await resolve_round(runtime, room, ok=False, skipped=True)
