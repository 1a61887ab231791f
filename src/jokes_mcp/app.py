"""JokesMCP - composition root wiring upstream clients, tools and the SSE transport."""

from __future__ import annotations as _annotations

import time
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any

import anyio
import httpx
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import PlainTextResponse
from starlette.routing import Route
from starlette.types import Receive, Scope, Send

from jokes_mcp.jokes import CategoryCache, ChuckNorrisClient, DadJokeClient, JokeTools, YoMamaClient, register_joke_tools
from jokes_mcp.server import JokesServer
from jokes_mcp.settings import Settings
from jokes_mcp.tools import ToolManager
from jokes_mcp.transport import InMemorySessionRegistry, SessionRegistry, SseServerTransport
from jokes_mcp.utilities.http_client import create_http_client
from jokes_mcp.utilities.logging import configure_logging, get_logger

logger = get_logger(__name__)

SERVER_NAME = "jokesMCP"
SERVER_VERSION = "1.0.0"
SERVER_INSTRUCTIONS = "A server that provides jokes"
HEALTH_MESSAGE = "The Jokes MCP server is running!"


class SseASGIApp:
    """
    ASGI application that opens an SSE session and serves it until the client goes away.
    """

    def __init__(self, transport: SseServerTransport, server: JokesServer):
        self.transport = transport
        self.server = server

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        async with self.transport.connect_sse(scope, receive, send) as (read_stream, write_stream):
            await self.server.run(read_stream, write_stream)


class MessagesASGIApp:
    """
    ASGI application routing POSTed client messages to their SSE session.
    """

    def __init__(self, transport: SseServerTransport):
        self.transport = transport

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self.transport.handle_post_message(scope, receive, send)


class JokesMCP:
    """The jokes server: five joke tools served over SSE.

    Args:
        settings: server settings; read from the environment if not given
        http_client: client used for all upstream calls. When given, the caller
            owns it and is responsible for closing it.
        session_registry: where open SSE sessions are tracked
        clock: monotonic clock used by the category cache

    Examples:
        ```python
        from jokes_mcp import JokesMCP

        if __name__ == "__main__":
            JokesMCP().run()
        ```
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        session_registry: SessionRegistry | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.settings = settings if settings is not None else Settings()

        self._owns_http_client = http_client is None
        self.http_client = http_client or create_http_client(timeout=httpx.Timeout(self.settings.upstream_timeout))

        self.chuck_norris = ChuckNorrisClient(self.http_client, self.settings.chuck_norris_base_url)
        self.dad_jokes = DadJokeClient(self.http_client, self.settings.dad_joke_url)
        self.yo_mama = YoMamaClient(self.http_client, self.settings.yo_mama_url)
        self.category_cache = CategoryCache(
            self.chuck_norris.categories,
            ttl=self.settings.category_cache_ttl,
            clock=clock,
        )

        self.tool_manager = ToolManager(warn_on_duplicate_tools=self.settings.warn_on_duplicate_tools)
        register_joke_tools(
            self.tool_manager,
            JokeTools(self.chuck_norris, self.dad_jokes, self.yo_mama, self.category_cache),
        )

        self.server = JokesServer(
            name=SERVER_NAME,
            version=SERVER_VERSION,
            instructions=SERVER_INSTRUCTIONS,
            tool_manager=self.tool_manager,
        )
        self.session_registry = session_registry if session_registry is not None else InMemorySessionRegistry()
        self.transport = SseServerTransport(
            self.settings.message_path,
            registry=self.session_registry,
            callback_scheme=self.settings.callback_scheme,
        )

        configure_logging(self.settings.log_level)

    @property
    def name(self) -> str:
        return self.server.name

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> Any:
        """Call a registered tool by name, bypassing the transport."""
        return await self.tool_manager.call_tool(name, arguments)

    @asynccontextmanager
    async def _lifespan(self, app: Starlette) -> AsyncIterator[None]:
        logger.info(f"{self.name} {SERVER_VERSION} starting")
        try:
            yield
        finally:
            if self._owns_http_client:
                with anyio.CancelScope(shield=True):
                    await self.http_client.aclose()
            logger.info(f"{self.name} stopped")

    def sse_app(self) -> Starlette:
        """Return an instance of the SSE server app."""

        async def health(request: Request) -> PlainTextResponse:
            return PlainTextResponse(HEALTH_MESSAGE)

        routes = [
            Route(self.settings.sse_path, endpoint=SseASGIApp(self.transport, self.server), methods=["GET"]),
            Route(self.settings.message_path, endpoint=MessagesASGIApp(self.transport), methods=["POST"]),
            Route("/", endpoint=health, methods=["GET"]),
        ]
        return Starlette(debug=self.settings.debug, routes=routes, lifespan=self._lifespan)

    async def run_sse_async(self) -> None:
        """Run the server using SSE transport."""
        import uvicorn

        starlette_app = self.sse_app()

        config = uvicorn.Config(
            starlette_app,
            host=self.settings.host,
            port=self.settings.port,
            log_level=self.settings.log_level.lower(),
        )
        server = uvicorn.Server(config)
        logger.info(f"Server is running at http://localhost:{self.settings.port}")
        await server.serve()

    def run(self) -> None:
        """Run the server. This is a synchronous function."""
        anyio.run(self.run_sse_async)
