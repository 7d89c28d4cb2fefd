from __future__ import annotations

import asyncio
import json
import logging
import random
from typing import Any, Awaitable, Callable

from fastapi import WebSocket, WebSocketDisconnect

from .challenge_generation import ChallengeSource, new_challenge
from .config import Settings, settings as default_settings
from .runtime_broadcast import broadcast as broadcast_room_event
from .runtime_broadcast import send_event
from .runtime_constants import TIMER_KEYS
from .runtime_errors import GameRuleError
from .runtime_lobby_flow import (
    configure_room as configure_room_settings,
    join_room as join_room_slot,
    leave_room as leave_room_slot,
)
from .runtime_message_handlers import handle_message as handle_session_message
from .runtime_registry import RoomRegistry
from .runtime_round_flow import (
    continue_after_result as continue_room_after_result,
    skip_round as skip_room_round,
    start_match as start_room_match,
    submit_answer as submit_room_answer,
    tick_round as tick_room_round,
)
from .runtime_types import PlayerConnection, RoomRuntime, SessionContext
from .runtime_utils import default_player_name, now_ms, random_id

logger = logging.getLogger(__name__)

TimerCallback = Callable[[RoomRuntime], Awaitable[None]]


class GameRuntime:
    def __init__(
        self,
        settings: Settings | None = None,
        challenge_source: ChallengeSource | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.settings = settings or default_settings
        self.challenge_source: ChallengeSource = challenge_source or new_challenge
        self.rng = rng or random.Random()
        self.registry = RoomRegistry(self.settings)
        self._ws_stats: dict[str, int] = {
            "connectSuccess": 0,
            "disconnects": 0,
            "sendFailures": 0,
            "messageReceived": 0,
            "messageDropped": 0,
            "pingReceived": 0,
            "joinRejected": 0,
            "roundsStarted": 0,
            "roundsResolved": 0,
            "matchesEnded": 0,
            "activeConnections": 0,
            "peakConnections": 0,
        }

    @property
    def _send_timeout_s(self) -> float:
        return self.settings.send_timeout_ms / 1000

    @property
    def active_rooms_count(self) -> int:
        return len(self.registry)

    def _increment_stat(self, key: str, amount: int = 1) -> None:
        self._ws_stats[key] = int(self._ws_stats.get(key, 0)) + amount

    def _on_connect(self) -> None:
        self._increment_stat("connectSuccess")
        active_connections = int(self._ws_stats.get("activeConnections", 0)) + 1
        self._ws_stats["activeConnections"] = active_connections
        if active_connections > int(self._ws_stats.get("peakConnections", 0)):
            self._ws_stats["peakConnections"] = active_connections

    def _on_disconnect(self) -> None:
        self._increment_stat("disconnects")
        active_connections = max(0, int(self._ws_stats.get("activeConnections", 0)) - 1)
        self._ws_stats["activeConnections"] = active_connections

    def _log_ws_event(self, event: str, level: int = logging.INFO, **fields: object) -> None:
        logger.log(
            level,
            "ws.%s %s",
            event,
            json.dumps(fields, ensure_ascii=False, separators=(",", ":")),
        )

    def get_ws_stats(self) -> dict[str, Any]:
        room_summaries = [
            {
                "roomId": room.room_id,
                "connections": len(room.players),
                "phase": room.phase,
                "scores": list(room.scores),
            }
            for room in self.registry.rooms()
        ]
        room_summaries.sort(key=lambda item: int(item.get("connections", 0)), reverse=True)

        return {
            "generatedAt": now_ms(),
            "activeRooms": len(room_summaries),
            "stats": dict(self._ws_stats),
            "rooms": room_summaries[:50],
        }

    async def shutdown(self) -> None:
        for room in self.registry.clear():
            async with room.lock:
                self._clear_timers(room)
        self._ws_stats["activeConnections"] = 0

    # ---- connections ----

    def open_session(self, websocket: WebSocket) -> SessionContext:
        peer_id = random_id()
        self._on_connect()
        return SessionContext(
            peer_id=peer_id,
            websocket=websocket,
            name=default_player_name(peer_id),
        )

    async def handle_websocket(self, websocket: WebSocket) -> None:
        await websocket.accept()
        session = self.open_session(websocket)
        self._log_ws_event("connect", peerId=session.peer_id)

        disconnect_code: int | None = None
        disconnect_reason = "unknown"

        try:
            while True:
                raw = await self._receive_raw(websocket)
                await self.handle_raw_message(session, raw)
        except WebSocketDisconnect as exc:
            disconnect_code = exc.code
            disconnect_reason = "websocket_disconnect"
        except Exception:
            disconnect_reason = "server_error"
            logger.exception(
                "Unexpected websocket error for room %s peer %s",
                session.room_id or "-",
                session.peer_id,
            )
        finally:
            await self.close_session(session, reason=disconnect_reason, close_code=disconnect_code)

    @staticmethod
    async def _receive_raw(websocket: WebSocket) -> str:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            raise WebSocketDisconnect(message.get("code", 1000), message.get("reason"))
        if message.get("text") is not None:
            return str(message["text"])
        return (message.get("bytes") or b"").decode("utf-8", errors="replace")

    async def handle_raw_message(self, session: SessionContext, raw: str) -> None:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            self._increment_stat("messageDropped")
            logger.debug("dropped unparseable message peer=%s", session.peer_id)
            return
        if not isinstance(data, dict):
            self._increment_stat("messageDropped")
            return
        self._increment_stat("messageReceived")
        await self.handle_message(session, data)

    async def handle_message(self, session: SessionContext, data: dict[str, Any]) -> None:
        try:
            await handle_session_message(self, session, data)
        except GameRuleError as exc:
            if exc.notify_client:
                await self._send_event(
                    session.websocket,
                    "error",
                    {"message": exc.message},
                    room_id=session.room_id,
                    peer_id=session.peer_id,
                )
                return
            self._increment_stat("messageDropped")
            logger.debug(
                "dropped message room=%s peer=%s type=%s code=%s reason=%s",
                session.room_id or "-",
                session.peer_id,
                data.get("type"),
                exc.code,
                exc,
            )

    async def close_session(
        self,
        session: SessionContext,
        reason: str = "unknown",
        close_code: int | None = None,
    ) -> None:
        self._on_disconnect()
        room = self.registry.get(session.room_id)
        removed: PlayerConnection | None = None
        if room is not None:
            async with room.lock:
                removed = await leave_room_slot(self, room, session.peer_id)

        self._log_ws_event(
            "disconnect",
            roomId=session.room_id or "-",
            peerId=session.peer_id,
            slot=removed.slot if removed else None,
            reason=reason,
            closeCode=close_code,
        )
        session.room_id = None
        session.slot = None

    async def _join_room(self, session: SessionContext, room_id: str, name: str) -> None:
        while True:
            room = self.registry.get_or_create(room_id)
            async with room.lock:
                # The room may have emptied and been dropped while we waited for its lock.
                if not self.registry.is_live(room):
                    continue
                try:
                    await join_room_slot(self, room, session, name)
                except GameRuleError as exc:
                    self._increment_stat("joinRejected")
                    self._log_ws_event(
                        "join_rejected",
                        level=logging.WARNING,
                        roomId=room_id,
                        peerId=session.peer_id,
                        code=exc.code,
                    )
                    raise
                return

    # ---- state machine entry points ----

    async def _configure_room(
        self,
        room: RoomRuntime,
        player: PlayerConnection,
        target: int | None,
        round_seconds: int | None,
    ) -> None:
        await configure_room_settings(self, room, player, target, round_seconds)

    async def _start_match(self, room: RoomRuntime, player: PlayerConnection) -> None:
        await start_room_match(self, room, player)

    async def _submit_answer(self, room: RoomRuntime, player: PlayerConnection, answer: str) -> None:
        await submit_room_answer(self, room, player, answer)

    async def _skip_round(self, room: RoomRuntime, player: PlayerConnection) -> None:
        await skip_room_round(self, room, player)

    async def _tick_round(self, room: RoomRuntime) -> None:
        await tick_room_round(self, room)

    async def _continue_after_result(self, room: RoomRuntime) -> None:
        await continue_room_after_result(self, room)

    # ---- broadcast ----

    async def _send_event(
        self,
        websocket: WebSocket,
        event_type: str,
        payload: dict[str, Any] | None = None,
        room_id: str | None = None,
        peer_id: str | None = None,
    ) -> bool:
        return await send_event(
            websocket,
            event_type,
            payload,
            room_id=room_id,
            peer_id=peer_id,
            on_failure=lambda: self._increment_stat("sendFailures"),
            timeout=self._send_timeout_s,
        )

    async def _broadcast(
        self,
        room: RoomRuntime,
        event_type: str,
        payload: dict[str, Any] | None = None,
    ) -> None:
        await broadcast_room_event(
            room,
            event_type,
            payload,
            on_failure=lambda: self._increment_stat("sendFailures"),
            timeout=self._send_timeout_s,
        )

    # ---- timers ----

    def _cancel_timer(self, room: RoomRuntime, key: str) -> None:
        task = room.timers.get(key)
        # A timer that resolves its own round only detaches itself.
        if task and not task.done() and task is not asyncio.current_task():
            task.cancel()
        room.timers[key] = None

    def _clear_timers(self, room: RoomRuntime) -> None:
        for key in TIMER_KEYS:
            self._cancel_timer(room, key)

    async def _run_timer_callback(self, room: RoomRuntime, key: str, callback: TimerCallback) -> None:
        try:
            await callback(room)
        except Exception:
            logger.exception("Timer callback failed room=%s timer=%s", room.room_id, key)

    def _schedule_timer(
        self,
        room: RoomRuntime,
        key: str,
        delay_ms: int,
        callback: TimerCallback,
    ) -> None:
        self._cancel_timer(room, key)
        delay_s = max(0.0, (delay_ms or 0) / 1000)

        async def runner() -> None:
            me = asyncio.current_task()
            try:
                await asyncio.sleep(delay_s)
            except asyncio.CancelledError:
                return
            async with room.lock:
                if room.timers.get(key) is not me:
                    return
                room.timers[key] = None
                await self._run_timer_callback(room, key, callback)

        room.timers[key] = asyncio.create_task(runner(), name=f"{room.room_id}:{key}")

    def _schedule_interval(
        self,
        room: RoomRuntime,
        key: str,
        interval_ms: int,
        callback: TimerCallback,
    ) -> None:
        self._cancel_timer(room, key)
        interval_s = max(0.001, (interval_ms or 0) / 1000)

        async def runner() -> None:
            me = asyncio.current_task()
            while True:
                try:
                    await asyncio.sleep(interval_s)
                except asyncio.CancelledError:
                    return
                async with room.lock:
                    if room.timers.get(key) is not me:
                        return
                    await self._run_timer_callback(room, key, callback)
                    if room.timers.get(key) is not me:
                        return

        room.timers[key] = asyncio.create_task(runner(), name=f"{room.room_id}:{key}")
