from collections.abc import AsyncGenerator
from dataclasses import dataclass, field

import anyio
import httpx
import pytest
import sse_starlette
from packaging import version

from jokes_mcp.jokes import CategoryCache, ChuckNorrisClient, DadJokeClient, JokeTools, YoMamaClient


@pytest.fixture
def anyio_backend():
    return "asyncio"


SSE_STARLETTE_VERSION = version.parse(sse_starlette.__version__)
NEEDS_RESET = SSE_STARLETTE_VERSION < version.parse("3.0.0")


@pytest.fixture(autouse=True)
def reset_sse_app_status():
    """Reset sse-starlette's global AppStatus singleton before each test.

    AppStatus.should_exit_event is a global asyncio.Event that gets bound to
    an event loop. This ensures each test gets a fresh Event and prevents
    RuntimeError("bound to a different event loop") between tests.

    NOTE: This fixture is only necessary for sse-starlette < 3.0.0.
    """
    if not NEEDS_RESET:
        yield
        return

    # lazy import to avoid import errors
    from sse_starlette.sse import AppStatus

    AppStatus.should_exit_event = anyio.Event()  # type: ignore[attr-defined]

    yield

    AppStatus.should_exit_event = anyio.Event()  # type: ignore[attr-defined]


@dataclass
class FakeJokeApis:
    """In-process stand-in for the three joke services, served through httpx.MockTransport."""

    categories: list[str] = field(default_factory=lambda: ["animal", "dev", "food"])
    requests: list[httpx.Request] = field(default_factory=list)
    status_overrides: dict[str, int] = field(default_factory=dict)

    def calls(self, path: str, category: str | None = None) -> list[httpx.Request]:
        return [
            r
            for r in self.requests
            if r.url.path == path and (category is None or r.url.params.get("category") == category)
        ]

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status = self.status_overrides.get(request.url.path)
        if status is not None:
            return httpx.Response(status, json={"error": "nope"})

        host = request.url.host
        path = request.url.path
        if host == "api.chucknorris.io":
            if path == "/jokes/categories":
                return httpx.Response(200, json=self.categories)
            if path == "/jokes/random":
                category = request.url.params.get("category")
                if category is None:
                    return httpx.Response(200, json={"value": "Chuck Norris counted to infinity. Twice."})
                if category not in self.categories:
                    return httpx.Response(404, json={"error": "Not Found"})
                return httpx.Response(200, json={"value": f"A {category} joke about Chuck Norris."})
        if host == "icanhazdadjoke.com":
            if request.headers.get("accept") != "application/json":
                return httpx.Response(200, text="<html>dad joke</html>")
            return httpx.Response(200, json={"id": "x", "joke": "I'm afraid for the calendar. Its days are numbered."})
        if host == "www.yomama-jokes.com":
            return httpx.Response(200, json={"joke": "Yo mama is so kind, she holds the door for revolving doors."})
        return httpx.Response(404)


@pytest.fixture
def joke_apis() -> FakeJokeApis:
    return FakeJokeApis()


@pytest.fixture
async def http_client(joke_apis: FakeJokeApis) -> AsyncGenerator[httpx.AsyncClient, None]:
    async with httpx.AsyncClient(transport=httpx.MockTransport(joke_apis.handle)) as client:
        yield client


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def joke_tools(http_client: httpx.AsyncClient, clock: FakeClock) -> JokeTools:
    chuck_norris = ChuckNorrisClient(http_client)
    return JokeTools(
        chuck_norris,
        DadJokeClient(http_client),
        YoMamaClient(http_client),
        CategoryCache(chuck_norris.categories, clock=clock),
    )
