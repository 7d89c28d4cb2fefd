from __future__ import annotations

import logging

from .config import Settings
from .runtime_types import RoomRuntime

logger = logging.getLogger(__name__)


class RoomRegistry:
    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._rooms: dict[str, RoomRuntime] = {}

    def __len__(self) -> int:
        return len(self._rooms)

    def __contains__(self, room_id: object) -> bool:
        return room_id in self._rooms

    def rooms(self) -> list[RoomRuntime]:
        return list(self._rooms.values())

    def get(self, room_id: str | None) -> RoomRuntime | None:
        if room_id is None:
            return None
        return self._rooms.get(room_id)

    def get_or_create(self, room_id: str) -> RoomRuntime:
        existing = self._rooms.get(room_id)
        if existing is not None:
            return existing

        room = RoomRuntime(
            room_id=room_id,
            target=self._settings.default_target,
            round_seconds=self._settings.default_round_seconds,
        )
        self._rooms[room_id] = room
        logger.info("room created room=%s", room_id)
        return room

    def is_live(self, room: RoomRuntime) -> bool:
        return self._rooms.get(room.room_id) is room

    def remove(self, room_id: str, room: RoomRuntime | None = None) -> None:
        current = self._rooms.get(room_id)
        if current is None:
            return
        if room is not None and current is not room:
            return
        del self._rooms[room_id]
        logger.info("room removed room=%s", room_id)

    def clear(self) -> list[RoomRuntime]:
        rooms = list(self._rooms.values())
        self._rooms.clear()
        return rooms
