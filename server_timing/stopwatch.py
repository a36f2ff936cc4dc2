"""
Stopwatches measure an operation and submit an entry when completed.

A stopwatch is either active (it captured a start instant) or inert. Inert
stopwatches are handed out while timing is disabled; there is exactly one.
"""

import time
from typing import Callable

from server_timing.entry import TimingEntry


class Stopwatch:
    """Base class for the two stopwatch variants."""

    def complete(self) -> None:
        """
        Mark the timed task as done and submit an entry.

        Each call submits another entry with the same name. The duration is
        always measured from the original start, it is not reset.
        """
        raise NotImplementedError

    def __enter__(self) -> "Stopwatch":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.complete()


class _InertStopwatch(Stopwatch):
    def complete(self) -> None:
        pass

    def __repr__(self) -> str:
        return "NOP_STOPWATCH"


NOP_STOPWATCH: Stopwatch = _InertStopwatch()


class ActiveStopwatch(Stopwatch):
    """A started measurement. Completing it always submits."""

    def __init__(
        self,
        name: str,
        submit: Callable[[TimingEntry], None],
        clock: Callable[[], int] = time.perf_counter_ns,
    ):
        self.name = name
        self._submit = submit
        self._clock = clock
        self.start_ns = clock()

    def elapsed_ms(self) -> float:
        return (self._clock() - self.start_ns) / 1e6

    def complete(self) -> None:
        self._submit(TimingEntry(self.name).set_duration(self.elapsed_ms()))

    def __repr__(self) -> str:
        return f"ActiveStopwatch(name={self.name!r})"
