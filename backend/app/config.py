from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


class Settings:
    def __init__(self, **overrides: object) -> None:
        self.host = os.getenv("HOST", "0.0.0.0").strip() or "0.0.0.0"
        self.port = _env_int("PORT", _env_int("WS_PORT", 3000))
        self.log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
        self.service_name = os.getenv("SERVICE_NAME", "Clavier Ninja server").strip()
        self.default_room_id = os.getenv("DEFAULT_ROOM_ID", "salon").strip() or "salon"
        self.default_target = min(20, max(1, _env_int("DEFAULT_TARGET", 5)))
        self.default_round_seconds = min(30, max(3, _env_int("DEFAULT_ROUND_SECONDS", 10)))
        self.max_name_length = max(1, _env_int("MAX_NAME_LENGTH", 20))
        # Timer granularity of the round countdown; one tick is one second of game time.
        self.tick_interval_ms = max(1, _env_int("TICK_INTERVAL_MS", 1000))
        self.next_round_delay_ms = max(0, _env_int("NEXT_ROUND_DELAY_MS", 600))
        # Upper bound for a single outbound frame; a peer that stops reading is skipped.
        self.send_timeout_ms = max(1, _env_int("SEND_TIMEOUT_MS", 2000))

        for key, value in overrides.items():
            if not hasattr(self, key):
                raise TypeError(f"Unknown setting: {key}")
            setattr(self, key, value)


settings = Settings()
