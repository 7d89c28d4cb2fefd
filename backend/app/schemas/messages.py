from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.runtime_utils import parse_int


def _coerce_text(value: Any) -> str | None:
    if isinstance(value, (dict, list)):
        raise ValueError("Expected a scalar value")
    # 0, false and "" fall back to the caller's default.
    if not value:
        return None
    if isinstance(value, bool):
        return "true"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class InboundMessage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str = Field(min_length=1, max_length=32)


class JoinMessage(InboundMessage):
    room: str | None = None
    name: str | None = None

    @field_validator("room", "name", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> str | None:
        return _coerce_text(value)


class ConfigureMessage(InboundMessage):
    target: int | None = None
    secs: int | None = None

    @field_validator("target", "secs", mode="before")
    @classmethod
    def lenient_int(cls, value: Any) -> int | None:
        if isinstance(value, (dict, list)):
            raise ValueError("Expected a number")
        return parse_int(value)


class SubmitMessage(InboundMessage):
    answer: str = ""

    @field_validator("answer", mode="before")
    @classmethod
    def coerce_answer(cls, value: Any) -> str:
        if not value:
            return ""
        return _coerce_text(value) or ""
