"""
Server timing engine.

Sends server-side timing information as Server-Timing headers on the current
response. Browsers show these entries in the network panel of their developer
tools.

Entries are usually produced with the engine's shortcuts rather than built by
hand:

    from server_timing import timing

    timing.set("cacheMiss")

    stopwatch = timing.start("addText")
    ...
    stopwatch.complete()

    rows = timing.supply("loadData", load_rows)
    provider = timing.wrap_data_provider("personGrid", provider)

    @timing.timed("render")
    async def render(...):
        ...

Whether anything is sent is decided by the engine's enabled check. By default
entries are only sent while a request is processed outside production, which
keeps responses small and avoids leaking internals. The check can be replaced
with set_enabled_check() while the application starts up; replacing it is not
synchronized.
"""

import inspect
import logging
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

from server_timing.data import DataProvider, TimedDataProvider
from server_timing.emitter import force_submit
from server_timing.entry import TimingEntry, require_name
from server_timing.policy import EnabledCheck, default_enabled_check
from server_timing.stopwatch import NOP_STOPWATCH, ActiveStopwatch, Stopwatch

logger = logging.getLogger(__name__)

T = TypeVar("T")
E = TypeVar("E")


def _require_callable(callback: Any, what: str) -> None:
    if callback is None:
        raise ValueError(f"{what} must not be None")
    if not callable(callback):
        raise TypeError(f"{what} must be callable, got {type(callback).__name__}")


class ServerTimer:
    """Creates and submits timing entries, gated by an enabled check."""

    def __init__(self, enabled_check: EnabledCheck = default_enabled_check):
        self.set_enabled_check(enabled_check)

    def set_enabled_check(self, enabled_check: EnabledCheck) -> None:
        """
        Replace the callback deciding whether entries are sent.

        Not synchronized. Call it while the application is being configured,
        not while requests are being served.
        """
        _require_callable(enabled_check, "Enabled check")
        self.enabled_check = enabled_check
        logger.debug(f"Server timing enabled check set to {getattr(enabled_check, '__name__', enabled_check)!r}")

    def is_enabled(self) -> bool:
        return bool(self.enabled_check())

    # Entries

    def set(self, name: str, duration: Optional[float] = None) -> None:
        """
        Send an entry with the given name and optional duration in
        milliseconds. Nothing is sent if timing is disabled.

        Raises:
            NoActiveResponseError: timing is enabled but no response is bound
        """
        entry = TimingEntry(name)
        if duration is not None:
            entry.set_duration(duration)
        if self.is_enabled():
            force_submit(entry)

    def submit(self, entry: TimingEntry, response: Optional[Any] = None) -> None:
        """Send a hand-built entry if timing is enabled."""
        if not self.is_enabled():
            return
        force_submit(entry, response)

    def force_submit(self, entry: TimingEntry, response: Optional[Any] = None) -> None:
        """Send a hand-built entry regardless of the enabled check."""
        force_submit(entry, response)

    # Stopwatches

    def start(self, name: str) -> Stopwatch:
        """
        Start a stopwatch that sends an entry when completed.

        The enabled check runs now. A stopwatch started while disabled never
        sends anything, and one started while enabled always does.
        """
        require_name(name)
        if not self.is_enabled():
            return NOP_STOPWATCH
        return self._force_start(name)

    def _force_start(self, name: str) -> Stopwatch:
        return ActiveStopwatch(name, force_submit)

    # Wrapping adapters

    def run(self, name: str, command: Callable[[], Any]) -> None:
        """Run the command now and send an entry for how long it took."""
        require_name(name)
        _require_callable(command, "Command")
        if not self.is_enabled():
            command()
            return

        stopwatch = self._force_start(name)
        command()
        stopwatch.complete()

    def supply(self, name: str, supplier: Callable[[], T]) -> T:
        """
        Run the supplier now and send an entry for how long it took. The
        entry is sent even if the supplier raises.

        Returns:
            The supplier's value
        """
        require_name(name)
        _require_callable(supplier, "Supplier")
        if not self.is_enabled():
            return supplier()

        stopwatch = self._force_start(name)
        try:
            return supplier()
        finally:
            stopwatch.complete()

    def wrap_listener(self, name: str, listener: Callable[[E], Any]) -> Callable[[E], Any]:
        """
        Wrap an event listener so every invocation sends an entry.

        The listener is returned unchanged if timing is disabled now.
        """
        require_name(name)
        _require_callable(listener, "Listener")
        if not self.is_enabled():
            return listener

        @wraps(listener)
        def timed_listener(event: E) -> None:
            stopwatch = self._force_start(name)
            listener(event)
            stopwatch.complete()

        return timed_listener

    def wrap_data_provider(self, name: str, provider: DataProvider[T]) -> DataProvider[T]:
        """
        Wrap a data provider so fetches send `<name>.fetch` entries and counts
        send `<name>.size` entries.

        The provider is returned unchanged if timing is disabled now.
        """
        require_name(name)
        if provider is None:
            raise ValueError("Data provider must not be None")
        if not self.is_enabled():
            return provider
        return TimedDataProvider(name, provider, self._force_start)

    def timed(self, name: Optional[str] = None) -> Callable[[Callable[..., T]], Callable[..., T]]:
        """
        Decorator sending an entry for every call of the decorated function.

        Unlike the wrap_* adapters the enabled check runs on each call, since
        decorators are applied at import time when no request is active.
        Coroutine functions are awaited inside the measured interval.

        Example:
            @timing.timed("loadCustomers")
            async def load_customers(db):
                ...
        """

        def decorator(func: Callable[..., T]) -> Callable[..., T]:
            entry_name = require_name(name or func.__name__)

            if inspect.iscoroutinefunction(func):
                @wraps(func)
                async def async_wrapper(*args, **kwargs):
                    if not self.is_enabled():
                        return await func(*args, **kwargs)

                    stopwatch = self._force_start(entry_name)
                    try:
                        return await func(*args, **kwargs)
                    finally:
                        stopwatch.complete()

                return async_wrapper

            @wraps(func)
            def sync_wrapper(*args, **kwargs):
                return self.supply(entry_name, lambda: func(*args, **kwargs))

            return sync_wrapper

        return decorator


# Process-wide engine, configured once at startup
timing = ServerTimer()


def set_enabled_check(enabled_check: EnabledCheck) -> None:
    """Replace the enabled check of the process-wide engine."""
    timing.set_enabled_check(enabled_check)
