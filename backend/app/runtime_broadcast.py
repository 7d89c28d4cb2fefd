from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

from fastapi import WebSocket

from .runtime_types import RoomRuntime

logger = logging.getLogger(__name__)

FailureHook = Callable[[], None]


async def send_safe(
    websocket: WebSocket,
    data: dict[str, Any],
    room_id: str | None = None,
    peer_id: str | None = None,
    on_failure: FailureHook | None = None,
    timeout: float | None = None,
) -> bool:
    try:
        await asyncio.wait_for(websocket.send_json(data), timeout=timeout)
    except Exception as exc:
        # Connection may already be closed, or the peer stopped reading.
        if on_failure is not None:
            on_failure()
        logger.debug(
            "[SEND_FAIL] room=%s peer=%s type=%s reason=%s ws_client_state=%s",
            room_id or "-",
            peer_id or "-",
            data.get("type"),
            repr(exc),
            getattr(websocket, "client_state", None),
        )
        return False
    return True


async def send_event(
    websocket: WebSocket,
    event_type: str,
    payload: dict[str, Any] | None = None,
    room_id: str | None = None,
    peer_id: str | None = None,
    on_failure: FailureHook | None = None,
    timeout: float | None = None,
) -> bool:
    return await send_safe(
        websocket,
        {"type": event_type, **(payload or {})},
        room_id=room_id,
        peer_id=peer_id,
        on_failure=on_failure,
        timeout=timeout,
    )


async def broadcast(
    room: RoomRuntime,
    event_type: str,
    payload: dict[str, Any] | None = None,
    on_failure: FailureHook | None = None,
    timeout: float | None = None,
) -> int:
    """Send one event to every participant of the room; returns the delivered count.

    Each send is bounded by ``timeout``; one that runs out counts as a failed delivery.
    """
    message = {"type": event_type, **(payload or {})}
    delivered = 0
    for player in list(room.players):
        if await send_safe(
            player.websocket,
            message,
            room_id=room.room_id,
            peer_id=player.peer_id,
            on_failure=on_failure,
            timeout=timeout,
        ):
            delivered += 1
    return delivered
