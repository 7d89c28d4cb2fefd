from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Literal

from fastapi import WebSocket

from .runtime_constants import SLOTS

Slot = Literal[0, 1]
Phase = Literal[
    "lobby",
    "ready",
    "round",
    "resolved",
    "ended",
]


@dataclass(frozen=True)
class Challenge:
    prompt: str
    expect: str


@dataclass
class PlayerConnection:
    peer_id: str
    name: str
    slot: int
    websocket: WebSocket


@dataclass
class SessionContext:
    peer_id: str
    websocket: WebSocket
    name: str
    room_id: str | None = None
    slot: int | None = None


@dataclass
class RoomRuntime:
    room_id: str
    target: int
    round_seconds: int
    players: list[PlayerConnection] = field(default_factory=list)
    scores: list[int] = field(default_factory=lambda: [0, 0])
    phase: Phase = "lobby"
    turn: int = 0
    challenge: Challenge | None = None
    time_left: int = 0
    round_id: str | None = None
    timers: dict[str, asyncio.Task[Any] | None] = field(default_factory=dict)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    def player_by_peer(self, peer_id: str) -> PlayerConnection | None:
        return next((p for p in self.players if p.peer_id == peer_id), None)

    def free_slot(self) -> int | None:
        taken = {p.slot for p in self.players}
        return next((slot for slot in SLOTS if slot not in taken), None)
