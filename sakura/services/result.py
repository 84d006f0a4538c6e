from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorCode(str, Enum):
    TIMEOUT = "timeout"
    AI_ERROR = "ai_error"
    EMPTY_RESPONSE = "empty_response"
    DELIVERY_ERROR = "delivery_error"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a call that reports failure instead of raising."""

    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_code: Optional[ErrorCode] = None

    @staticmethod
    def success(value: T) -> "Result[T]":
        return Result(ok=True, value=value)

    @staticmethod
    def failure(error: str, code: ErrorCode = ErrorCode.UNKNOWN) -> "Result[T]":
        return Result(ok=False, error=error, error_code=ErrorCode(code))

    def unwrap_or(self, default: T) -> T:
        return self.value if self.ok else default

    def describe(self) -> dict:
        """Log context for a failed result."""
        return {"error_code": self.error_code.value if self.error_code else None, "error": self.error}
