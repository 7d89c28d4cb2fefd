from __future__ import annotations

from typing import TYPE_CHECKING, Any, Awaitable, Callable

from pydantic import ValidationError

from .runtime_errors import MalformedMessage
from .runtime_utils import now_ms, sanitize_player_name, sanitize_room_id
from .schemas.messages import ConfigureMessage, JoinMessage, SubmitMessage

if TYPE_CHECKING:
    from .runtime import GameRuntime
    from .runtime_types import PlayerConnection, RoomRuntime, SessionContext

SessionHandler = Callable[["GameRuntime", "SessionContext", dict[str, Any]], Awaitable[None]]
RoomHandler = Callable[
    ["GameRuntime", "RoomRuntime", "PlayerConnection", dict[str, Any]],
    Awaitable[None],
]


async def handle_ping(runtime: "GameRuntime", session: "SessionContext", data: dict[str, Any]) -> None:
    runtime._increment_stat("pingReceived")
    await runtime._send_event(session.websocket, "pong", {"serverTime": now_ms()}, peer_id=session.peer_id)


async def handle_join(runtime: "GameRuntime", session: "SessionContext", data: dict[str, Any]) -> None:
    if session.room_id is not None:
        return
    message = JoinMessage.model_validate(data)
    room_id = sanitize_room_id(message.room, runtime.settings.default_room_id)
    name = sanitize_player_name(message.name, session.name, runtime.settings.max_name_length)
    await runtime._join_room(session, room_id, name)


async def handle_configure(
    runtime: "GameRuntime",
    room: "RoomRuntime",
    player: "PlayerConnection",
    data: dict[str, Any],
) -> None:
    message = ConfigureMessage.model_validate(data)
    await runtime._configure_room(room, player, message.target, message.secs)


async def handle_start(
    runtime: "GameRuntime",
    room: "RoomRuntime",
    player: "PlayerConnection",
    data: dict[str, Any],
) -> None:
    await runtime._start_match(room, player)


async def handle_submit(
    runtime: "GameRuntime",
    room: "RoomRuntime",
    player: "PlayerConnection",
    data: dict[str, Any],
) -> None:
    message = SubmitMessage.model_validate(data)
    await runtime._submit_answer(room, player, message.answer)


async def handle_skip(
    runtime: "GameRuntime",
    room: "RoomRuntime",
    player: "PlayerConnection",
    data: dict[str, Any],
) -> None:
    await runtime._skip_round(room, player)


SESSION_HANDLERS: dict[str, SessionHandler] = {
    "join": handle_join,
    "ping": handle_ping,
}

ROOM_HANDLERS: dict[str, RoomHandler] = {
    "configure": handle_configure,
    # Older clients send "config".
    "config": handle_configure,
    "start": handle_start,
    "submit": handle_submit,
    "skip": handle_skip,
}


async def handle_message(
    runtime: "GameRuntime",
    session: "SessionContext",
    data: dict[str, Any],
) -> None:
    message_type = data.get("type")
    if not isinstance(message_type, str):
        raise MalformedMessage("Missing message type")

    try:
        session_handler = SESSION_HANDLERS.get(message_type)
        if session_handler is not None:
            await session_handler(runtime, session, data)
            return

        room_handler = ROOM_HANDLERS.get(message_type)
        if room_handler is None:
            raise MalformedMessage(f"Unknown message type: {message_type[:32]}")

        room = runtime.registry.get(session.room_id)
        if room is None:
            return
        async with room.lock:
            player = room.player_by_peer(session.peer_id)
            if player is None:
                return
            await room_handler(runtime, room, player, data)
    except ValidationError as exc:
        raise MalformedMessage(f"Invalid {message_type} payload") from exc
