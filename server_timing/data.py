"""
Paged data providers.

A data provider answers two questions for a query: which items are on the
requested page, and how many items match in total. Grids and list endpoints
call both, which is why both are timed separately when wrapped.
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, List, Optional, Protocol, Sequence, TypeVar

from server_timing.stopwatch import Stopwatch

T = TypeVar("T")


@dataclass(frozen=True)
class Query:
    """A page request with an optional filter predicate."""

    offset: int = 0
    limit: Optional[int] = None
    filter: Optional[Callable[[Any], bool]] = None

    def __post_init__(self):
        if self.offset < 0:
            raise ValueError(f"offset must be >= 0, got {self.offset}")
        if self.limit is not None and self.limit < 0:
            raise ValueError(f"limit must be >= 0, got {self.limit}")


class DataProvider(Protocol[T]):
    def fetch(self, query: Query) -> Sequence[T]:
        ...

    def count(self, query: Query) -> int:
        ...


class ListDataProvider(Generic[T]):
    """In-memory data provider backed by a list."""

    def __init__(self, items: Sequence[T]):
        self.items: List[T] = list(items)

    def _matching(self, query: Query) -> List[T]:
        if query.filter is None:
            return self.items
        return [item for item in self.items if query.filter(item)]

    def fetch(self, query: Query) -> List[T]:
        matching = self._matching(query)
        end = None if query.limit is None else query.offset + query.limit
        return matching[query.offset:end]

    def count(self, query: Query) -> int:
        return len(self._matching(query))


class TimedDataProvider(Generic[T]):
    """
    Data provider that submits a timing entry for each fetch and count.

    Fetches are reported as `<name>.fetch` and counts as `<name>.size`. The
    entry is submitted even when the wrapped provider raises. Anything else is
    delegated to the wrapped provider unchanged.
    """

    def __init__(self, name: str, provider: DataProvider[T], start: Callable[[str], Stopwatch]):
        self.name = name
        self.provider = provider
        self._start = start

    def fetch(self, query: Query) -> Sequence[T]:
        stopwatch = self._start(f"{self.name}.fetch")
        try:
            return self.provider.fetch(query)
        finally:
            stopwatch.complete()

    def count(self, query: Query) -> int:
        stopwatch = self._start(f"{self.name}.size")
        try:
            return self.provider.count(query)
        finally:
            stopwatch.complete()

    def __getattr__(self, attr: str) -> Any:
        return getattr(self.provider, attr)

    def __repr__(self) -> str:
        return f"TimedDataProvider(name={self.name!r}, provider={self.provider!r})"
