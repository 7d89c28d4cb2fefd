from __future__ import annotations

import math
import re
import time
import uuid
from typing import Any

from .runtime_constants import (
    DEFAULT_PLAYER_NAME_PREFIX,
    DEFAULT_ROUND_SECONDS,
    DEFAULT_TARGET,
    ROUND_SECONDS_MAX,
    ROUND_SECONDS_MIN,
    TARGET_MAX,
    TARGET_MIN,
)

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def now_ms() -> int:
    return int(time.time() * 1000)


def random_id() -> str:
    return str(uuid.uuid4())


def default_player_name(peer_id: str) -> str:
    return f"{DEFAULT_PLAYER_NAME_PREFIX}{peer_id[:4]}"


def sanitize_player_name(raw: Any, fallback: str, max_length: int = 20) -> str:
    value = str(raw or "").strip()
    if not value:
        value = fallback
    return value[:max_length]


def sanitize_room_id(raw: Any, fallback: str) -> str:
    value = str(raw or "").strip()
    return value or fallback


def parse_int(value: Any) -> int | None:
    """Lenient integer parsing: ``"12abc"`` gives 12, ``7.9`` gives 7, junk gives None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    match = _LEADING_INT_RE.match(str(value))
    if not match:
        return None
    return int(match.group(1))


def clamp_target(value: int | None, default: int = DEFAULT_TARGET) -> int:
    num = value if value else default
    return max(TARGET_MIN, min(TARGET_MAX, num))


def clamp_round_seconds(value: int | None, default: int = DEFAULT_ROUND_SECONDS) -> int:
    num = value if value else default
    return max(ROUND_SECONDS_MIN, min(ROUND_SECONDS_MAX, num))


def next_turn(turn: int) -> int:
    return 1 - turn


def pick_winner(scores: list[int]) -> int:
    # Equal scores go to slot 1.
    return 0 if scores[0] > scores[1] else 1
