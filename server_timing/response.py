"""
Request-scoped response and deployment bindings.

The timing engine never holds on to a response. It resolves one at submission
time from context variables that the middleware (or route code) binds for the
duration of a request. Context variables follow the request across asyncio
tasks and Starlette's thread pool.

Usage:
    from server_timing.response import bind_response

    @app.get("/items")
    async def items(response: Response):
        with bind_response(response):
            timing.set("cacheMiss")
"""

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator, List, Optional, Protocol, Tuple, runtime_checkable

from starlette.responses import Response

from server_timing.config import Settings
from server_timing.exceptions import (
    NoActiveResponseError,
    ResponseCommittedError,
    UnsupportedResponseError,
)

response_ctx: ContextVar[Optional[Any]] = ContextVar("server_timing_response", default=None)
deployment_ctx: ContextVar[Optional[Settings]] = ContextVar("server_timing_deployment", default=None)


@runtime_checkable
class ResponseHandle(Protocol):
    """A response that can take additional header occurrences."""

    def add_header(self, name: str, value: str) -> None:
        """Append one header occurrence without replacing existing ones."""
        ...


class PendingResponse:
    """
    Headers for a response that has not been produced yet.

    Bound by ServerTimingMiddleware before the route runs. The middleware
    copies the collected headers onto the real response and then commits,
    after which no more headers are accepted.
    """

    def __init__(self) -> None:
        self.headers: List[Tuple[str, str]] = []
        self.committed = False

    def add_header(self, name: str, value: str) -> None:
        if self.committed:
            raise ResponseCommittedError(entry=value)
        self.headers.append((name, value))

    def get_all(self, name: str) -> List[str]:
        name = name.lower()
        return [value for key, value in self.headers if key.lower() == name]

    def commit(self) -> List[Tuple[str, str]]:
        self.committed = True
        return list(self.headers)


class StarletteResponseHandle:
    """Adapts a Starlette/FastAPI Response to ResponseHandle."""

    def __init__(self, response: Response):
        self.response = response

    def add_header(self, name: str, value: str) -> None:
        # MutableHeaders.append keeps earlier values, __setitem__ would not
        self.response.headers.append(name, value)


def as_response_handle(response: Any) -> ResponseHandle:
    """Resolve an object to something that can append headers."""
    if isinstance(response, Response):
        return StarletteResponseHandle(response)
    if isinstance(response, ResponseHandle):
        return response
    raise UnsupportedResponseError(type(response).__name__)


def get_current_response() -> ResponseHandle:
    """
    Get the response bound to the current request context.

    Raises:
        NoActiveResponseError: nothing is bound
        UnsupportedResponseError: the bound object cannot append headers
    """
    response = response_ctx.get()
    if response is None:
        raise NoActiveResponseError()
    return as_response_handle(response)


@contextmanager
def bind_response(response: Any) -> Iterator[Any]:
    """Bind a response to the current context for the duration of the block."""
    if response is None:
        raise ValueError("Response must not be None")
    token = response_ctx.set(response)
    try:
        yield response
    finally:
        response_ctx.reset(token)


def current_deployment() -> Optional[Settings]:
    """Get the deployment settings of the request being processed, if any."""
    return deployment_ctx.get()


@contextmanager
def bind_deployment(settings: Settings) -> Iterator[Settings]:
    """Mark the current context as processing a request for this deployment."""
    if settings is None:
        raise ValueError("Settings must not be None")
    token = deployment_ctx.set(settings)
    try:
        yield settings
    finally:
        deployment_ctx.reset(token)
