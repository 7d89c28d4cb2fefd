from __future__ import annotations

from .runtime_constants import NOT_ENOUGH_PLAYERS_MESSAGE, ROOM_FULL_MESSAGE


class GameRuleError(RuntimeError):
    """A rejected player action.

    Only errors with ``notify_client`` set are reported back to the sender as
    an ``error`` event; the rest are dropped so stray or late client messages
    stay quiet.
    """

    notify_client = False
    code = "REJECTED"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.code)
        self.message = message


class RoomFull(GameRuleError):
    notify_client = True
    code = "ROOM_FULL"

    def __init__(self, message: str = ROOM_FULL_MESSAGE) -> None:
        super().__init__(message)


class NotEnoughPlayers(GameRuleError):
    notify_client = True
    code = "NOT_ENOUGH_PLAYERS"

    def __init__(self, message: str = NOT_ENOUGH_PLAYERS_MESSAGE) -> None:
        super().__init__(message)


class Unauthorized(GameRuleError):
    code = "UNAUTHORIZED"


class InvalidTurn(GameRuleError):
    code = "INVALID_TURN"


class MalformedMessage(GameRuleError):
    code = "MALFORMED_MESSAGE"
