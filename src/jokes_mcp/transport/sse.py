"""
SSE Server Transport Module

This module implements a Server-Sent Events (SSE) transport layer for the jokes server.

Example usage:
```
    # Create an SSE transport whose callback route is /jokes
    sse = SseServerTransport("/jokes")

    # Define handler functions
    async def handle_sse(request):
        async with sse.connect_sse(
                request.scope, request.receive, request._send
        ) as streams:
            await server.run(streams[0], streams[1])
        return Response()

    # Create Starlette routes for SSE and message handling
    routes = [
        Route("/sse", endpoint=handle_sse, methods=["GET"]),
        Route("/jokes", endpoint=sse.handle_post_message, methods=["POST"]),
    ]
```

See jokes_mcp.app for the application actually served.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import anyio
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream
from pydantic import ValidationError
from sse_starlette import EventSourceResponse
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import Receive, Scope, Send

from jokes_mcp import types
from jokes_mcp.transport.session_registry import InMemorySessionRegistry, SessionRegistry, SseSession
from jokes_mcp.utilities.logging import get_logger

logger = get_logger(__name__)

SESSION_ID_PARAM = "sessionId"


class SseServerTransport:
    """
    SSE server transport. This class provides two ASGI applications, suitable to be
    used with a framework like Starlette and a server like Uvicorn:

    1. connect_sse() is an ASGI application which receives incoming GET requests,
       and sets up a new SSE stream to send server messages to the client.
    2. handle_post_message() is an ASGI application which receives incoming POST
       requests, which should contain client messages that link to a
       previously-established SSE session.
    """

    _endpoint: str
    _callback_scheme: str | None

    def __init__(
        self,
        endpoint: str,
        registry: SessionRegistry | None = None,
        callback_scheme: str | None = None,
    ) -> None:
        """
        Creates a new SSE server transport, which will direct the client to POST
        messages to the route given by ``endpoint``.

        Args:
            endpoint: Path of the route that receives client messages.
            registry: Where open sessions are tracked. A private in-memory registry
                is used if not given.
            callback_scheme: When set, the endpoint event advertises an absolute
                URL built from this scheme and the request's Host header instead
                of a bare path.
        """
        super().__init__()
        self._endpoint = endpoint
        self._callback_scheme = callback_scheme
        self.registry: SessionRegistry = registry if registry is not None else InMemorySessionRegistry()
        logger.debug(f"SseServerTransport initialized with endpoint: {endpoint}")

    def _callback_endpoint(self, scope: Scope) -> str:
        host = Request(scope).headers.get("host")
        if self._callback_scheme and host:
            return f"{self._callback_scheme}://{host}{self._endpoint}"
        return self._endpoint

    @asynccontextmanager
    async def connect_sse(
        self, scope: Scope, receive: Receive, send: Send
    ) -> AsyncIterator[
        tuple[
            MemoryObjectReceiveStream[types.JSONRPCMessage | Exception],
            MemoryObjectSendStream[types.JSONRPCMessage],
        ]
    ]:
        if scope["type"] != "http":
            logger.error("connect_sse received non-HTTP request")
            raise ValueError("connect_sse can only handle HTTP requests")

        logger.debug("Setting up SSE connection")
        read_stream_writer: MemoryObjectSendStream[types.JSONRPCMessage | Exception]
        read_stream: MemoryObjectReceiveStream[types.JSONRPCMessage | Exception]
        write_stream: MemoryObjectSendStream[types.JSONRPCMessage]
        write_stream_reader: MemoryObjectReceiveStream[types.JSONRPCMessage]

        read_stream_writer, read_stream = anyio.create_memory_object_stream(0)
        write_stream, write_stream_reader = anyio.create_memory_object_stream(0)

        session = SseSession(endpoint=self._callback_endpoint(scope), writer=read_stream_writer, scope=scope)
        session_id = self.registry.register(session)
        logger.info(f"Opened session {session_id}")

        sse_stream_writer, sse_stream_reader = anyio.create_memory_object_stream[dict[str, Any]](0)

        async def sse_writer():
            logger.debug("Starting SSE writer")
            async with sse_stream_writer, write_stream_reader:
                await sse_stream_writer.send({"event": "endpoint", "data": session.callback_url})
                logger.debug(f"Sent endpoint event: {session.callback_url}")

                async for message in write_stream_reader:
                    logger.debug(f"Sending message via SSE: {message}")
                    await sse_stream_writer.send(
                        {
                            "event": "message",
                            "data": message.model_dump_json(by_alias=True, exclude_none=True),
                        }
                    )

        try:
            async with anyio.create_task_group() as tg:

                async def response_wrapper(scope: Scope, receive: Receive, send: Send):
                    """
                    The EventSourceResponse returning signals a client close / disconnect.
                    In this case we forget the session and close our side of the streams
                    so the server loop for this connection winds down.
                    """
                    try:
                        await EventSourceResponse(content=sse_stream_reader, data_sender_callable=sse_writer)(
                            scope, receive, send
                        )
                    finally:
                        self.registry.unregister(session_id)
                        await read_stream_writer.aclose()
                        await write_stream_reader.aclose()
                        logger.info(f"Closed session {session_id}")

                logger.debug("Starting SSE response task")
                tg.start_soon(response_wrapper, scope, receive, send)

                logger.debug("Yielding read and write streams")
                yield (read_stream, write_stream)
        finally:
            self.registry.unregister(session_id)

    async def handle_post_message(self, scope: Scope, receive: Receive, send: Send) -> None:
        logger.debug("Handling POST message")
        request = Request(scope, receive)

        session_id = request.query_params.get(SESSION_ID_PARAM)
        if session_id is None:
            logger.warning(f"Received request without {SESSION_ID_PARAM}")
            response = Response(f"{SESSION_ID_PARAM} is required", status_code=400)
            return await response(scope, receive, send)

        session = self.registry.lookup(session_id)
        if session is None:
            logger.warning(f"Could not find session for ID: {session_id}")
            response = Response("No transport found for sessionId", status_code=400)
            return await response(scope, receive, send)

        body = await request.body()
        logger.debug(f"Received JSON: {body}")

        try:
            message = types.JSONRPCMessageAdapter.validate_json(body)
            logger.debug(f"Validated client message: {message}")
        except ValidationError as err:
            logger.exception("Failed to parse message")
            response = Response("Could not parse message", status_code=400)
            await response(scope, receive, send)
            await self._forward(session, err)
            return

        logger.debug(f"Sending message to session {session_id}: {message}")
        response = Response("Accepted", status_code=202)
        await response(scope, receive, send)
        await self._forward(session, message)

    async def _forward(self, session: SseSession, message: types.JSONRPCMessage | Exception) -> None:
        try:
            await session.writer.send(message)
        except (anyio.ClosedResourceError, anyio.BrokenResourceError):
            logger.warning(f"Session {session.session_id} closed before message could be delivered")
