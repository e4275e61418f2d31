"""
Error taxonomy and Result type.

Every effectful step in the mention loop returns a Result instead of raising,
so the caller at each step decides whether to log and continue or stop.
Only InitializationError is fatal.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


class BotError(Exception):
    """Base class for all bot errors."""

    kind = "BotError"
    fatal = False

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause

    def __str__(self) -> str:
        message = super().__str__()
        if self.cause is not None:
            return f"{self.kind}: {message} ({self.cause})"
        return f"{self.kind}: {message}"


class InitializationError(BotError):
    """Credentials or client construction failed. Process exits."""

    kind = "InitializationError"
    fatal = True


class PlatformAPIError(BotError):
    """Twitter API call failed (network, status, malformed body)."""

    kind = "PlatformAPIError"


class ActivityFeedError(PlatformAPIError):
    """GitHub activity feed could not be fetched or parsed."""

    kind = "ActivityFeedError"


class CompletionAPIError(BotError):
    """Chat completion request failed or returned no text."""

    kind = "CompletionAPIError"


class FileSystemError(BotError):
    """Cursor file could not be written."""

    kind = "FileSystemError"


class InvalidCallback(BotError):
    """OAuth callback without a matching active session or verifier."""

    kind = "InvalidCallback"


class TokenExchangeError(BotError):
    """Twitter rejected the verifier exchange."""

    kind = "TokenExchangeError"


@dataclass(frozen=True)
class Result(Generic[T]):
    """Tagged success/failure value."""

    value: T | None = None
    error: BotError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T | None = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: BotError) -> "Result[T]":
        return cls(error=error)

    def unwrap(self) -> T:
        """Return the value or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.value
