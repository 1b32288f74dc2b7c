"""Error codes and exceptions raised by the engine."""
from enum import Enum
from typing import Any

from pydantic import BaseModel

from slot_engine.config import settings


class ErrorCode(str, Enum):
    """Error codes surfaced to callers."""

    INVALID_BET = "INVALID_BET"
    INVALID_PAYLINE_SELECTION = "INVALID_PAYLINE_SELECTION"
    INVALID_GRID = "INVALID_GRID"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    BONUS_STATE_ERROR = "BONUS_STATE_ERROR"


# Recoverable: the caller can retry with corrected input against the same engine
ERROR_RECOVERABLE: dict[ErrorCode, bool] = {
    ErrorCode.INVALID_BET: True,
    ErrorCode.INVALID_PAYLINE_SELECTION: True,
    ErrorCode.INVALID_GRID: True,
    ErrorCode.CONFIGURATION_ERROR: False,
    ErrorCode.BONUS_STATE_ERROR: True,
}


class ErrorBody(BaseModel):
    """Error body shape handed to embedding applications."""

    protocolVersion: str = settings.protocol_version
    code: str
    message: str
    recoverable: bool
    details: dict[str, Any] = {}


class GameError(Exception):
    """Base engine error carrying an error code."""

    code: ErrorCode = ErrorCode.CONFIGURATION_ERROR

    def __init__(
        self,
        message: str | None = None,
        code: ErrorCode | None = None,
        **details: Any,
    ):
        if code is not None:
            self.code = code
        self.message = message or f"Error: {self.code.value}"
        self.recoverable = ERROR_RECOVERABLE[self.code]
        self.details = details
        super().__init__(self.message)

    def to_body(self) -> ErrorBody:
        """Convert to an ErrorBody for logging or forwarding."""
        return ErrorBody(
            code=self.code.value,
            message=self.message,
            recoverable=self.recoverable,
            details=self.details,
        )


class InvalidBet(GameError):
    """Bet is not positive or exceeds the allowed maximum."""

    code = ErrorCode.INVALID_BET


class InvalidPaylineSelection(GameError):
    """An active payline id is not in the payline table."""

    code = ErrorCode.INVALID_PAYLINE_SELECTION


class InvalidGrid(GameError):
    """Grid handed to evaluate is not a 3x3 grid of symbols."""

    code = ErrorCode.INVALID_GRID


class ConfigurationError(GameError):
    """Game configuration value out of range."""

    code = ErrorCode.CONFIGURATION_ERROR


class BonusStateError(GameError):
    """Bonus round operation not valid for the current round."""

    code = ErrorCode.BONUS_STATE_ERROR
