import time

import pytest
import pytest_asyncio
from fastapi import FastAPI, Response
from httpx import AsyncClient, ASGITransport

from server_timing import (
    ListDataProvider,
    PendingResponse,
    Query,
    ServerTimer,
    ServerTimingMiddleware,
    Settings,
    TimingEntry,
    bind_response,
    default_enabled_check,
    timing,
)


class SlowListDataProvider(ListDataProvider):
    """List provider that takes a noticeable time to answer."""

    def __init__(self, items, fetch_delay=0.02, count_delay=0.01):
        super().__init__(items)
        self.fetch_delay = fetch_delay
        self.count_delay = count_delay

    def fetch(self, query):
        time.sleep(self.fetch_delay)
        return super().fetch(query)

    def count(self, query):
        time.sleep(self.count_delay)
        return super().count(query)


class Switch:
    """Enabled check that tests can flip."""

    def __init__(self, enabled=True):
        self.enabled = enabled
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return self.enabled


def timing_values(response):
    """All Server-Timing header values of a PendingResponse."""
    return response.get_all("Server-Timing")


@pytest.fixture
def switch():
    return Switch(enabled=True)


@pytest.fixture
def timer(switch):
    """Engine gated by a flippable switch."""
    return ServerTimer(enabled_check=switch)


@pytest.fixture
def pending():
    """A response bound to the current context for the whole test."""
    response = PendingResponse()
    with bind_response(response):
        yield response


@pytest.fixture
def slow_provider():
    return SlowListDataProvider(["Person 1", "Person 2", "Person 3"])


@pytest.fixture
def restore_default_check():
    yield
    timing.set_enabled_check(default_enabled_check)


def create_app(settings: Settings) -> FastAPI:
    """Small app exercising the engine the way application code would."""
    app = FastAPI()
    app.add_middleware(ServerTimingMiddleware, settings=settings)

    def say_hello(event):
        timing.set("cacheMiss")
        timing.run("loadData", lambda: time.sleep(0.01))
        stopwatch = timing.start("addText")
        event.append("Hello there")
        stopwatch.complete()

    @app.get("/hello")
    async def hello():
        messages = []
        listener = timing.wrap_listener("clickListener", say_hello)
        listener(messages)
        return {"messages": messages}

    @app.get("/grid")
    def grid():
        provider = timing.wrap_data_provider(
            "personGrid", SlowListDataProvider(["Person 1", "Person 2", "Person 3"])
        )
        query = Query(offset=0, limit=2)
        return {"items": provider.fetch(query), "total": provider.count(query)}

    @app.get("/plain")
    async def plain():
        return {"status": "ok"}

    @app.get("/direct")
    async def direct(response: Response):
        with bind_response(response):
            timing.set("direct", 1.5)
        return {"status": "ok"}

    @app.get("/bad-desc")
    async def bad_desc():
        try:
            timing.submit(TimingEntry("db").set_parameter("desc", "\u65e5\u672c"))
        except ValueError:
            return {"rejected": True}
        return {"rejected": False}

    @app.get("/fails")
    async def fails():
        timing.supply("load", lambda: 1 / 0)
        return {"status": "unreachable"}

    return app


@pytest_asyncio.fixture
async def dev_client():
    """Client for an app deployed in development mode."""
    app = create_app(Settings(ENVIRONMENT="development"))
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def prod_client():
    """Client for an app deployed in production mode."""
    app = create_app(Settings(ENVIRONMENT="production"))
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
