"""
Server-Timing instrumentation for Starlette and FastAPI applications.

Provides:
- A timing engine with stopwatches and wrapping adapters
- Request-scoped response binding via context variables
- Middleware that writes collected entries as Server-Timing headers
"""

from .config import Settings, get_settings
from .data import DataProvider, ListDataProvider, Query, TimedDataProvider
from .entry import HEADER_NAME, TimingEntry
from .exceptions import (
    ErrorCode,
    NoActiveResponseError,
    ResponseCommittedError,
    ServerTimingError,
    UnsupportedResponseError,
)
from .middleware import ServerTimingMiddleware
from .policy import EnabledCheck, always_enabled, default_enabled_check, never_enabled
from .response import (
    PendingResponse,
    ResponseHandle,
    bind_deployment,
    bind_response,
    current_deployment,
    get_current_response,
)
from .stopwatch import NOP_STOPWATCH, ActiveStopwatch, Stopwatch
from .timer import ServerTimer, set_enabled_check, timing

__all__ = [
    "Settings",
    "get_settings",
    "DataProvider",
    "ListDataProvider",
    "Query",
    "TimedDataProvider",
    "HEADER_NAME",
    "TimingEntry",
    "ErrorCode",
    "NoActiveResponseError",
    "ResponseCommittedError",
    "ServerTimingError",
    "UnsupportedResponseError",
    "ServerTimingMiddleware",
    "EnabledCheck",
    "always_enabled",
    "default_enabled_check",
    "never_enabled",
    "PendingResponse",
    "ResponseHandle",
    "bind_deployment",
    "bind_response",
    "current_deployment",
    "get_current_response",
    "NOP_STOPWATCH",
    "ActiveStopwatch",
    "Stopwatch",
    "ServerTimer",
    "set_enabled_check",
    "timing",
]
