"""
Errors raised when a timing entry cannot be attached to a response.

Disabled timing is never an error. These are raised only on the force-submit
path, when the decision to send an entry has already been made and the
current execution context cannot take it.
"""

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Machine-readable codes for server timing failures."""

    NO_ACTIVE_RESPONSE = "TIMING_001"
    UNSUPPORTED_RESPONSE = "TIMING_002"
    RESPONSE_COMMITTED = "TIMING_003"


class ServerTimingError(RuntimeError):
    """
    Base exception for server timing submission failures.

    Usage:
        raise ServerTimingError(
            code=ErrorCode.NO_ACTIVE_RESPONSE,
            detail="No active response to attach timing to",
        )
    """

    def __init__(self, code: ErrorCode, detail: str, entry: Optional[str] = None):
        self.code = code
        self.detail = detail
        self.entry = entry
        super().__init__(detail)

    def __str__(self) -> str:
        if self.entry:
            return f"[{self.code.value}] {self.detail} (entry: {self.entry})"
        return f"[{self.code.value}] {self.detail}"


class NoActiveResponseError(ServerTimingError):
    """No response is bound to the current request context."""

    def __init__(self, entry: Optional[str] = None, detail: Optional[str] = None):
        super().__init__(
            code=ErrorCode.NO_ACTIVE_RESPONSE,
            detail=detail or "No active response to attach timing to",
            entry=entry,
        )


class ResponseCommittedError(NoActiveResponseError):
    """The bound response has already sent its headers."""

    def __init__(self, entry: Optional[str] = None):
        super().__init__(entry=entry, detail="Response headers were already sent")
        self.code = ErrorCode.RESPONSE_COMMITTED


class UnsupportedResponseError(ServerTimingError):
    """The bound response object cannot append header values."""

    def __init__(self, response_type: str, entry: Optional[str] = None):
        self.response_type = response_type
        super().__init__(
            code=ErrorCode.UNSUPPORTED_RESPONSE,
            detail=f"Unsupported response type: {response_type}",
            entry=entry,
        )
