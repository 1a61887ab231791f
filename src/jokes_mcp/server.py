"""Protocol server: handler registry, dispatch and the per-connection run loop.

The server knows nothing about HTTP. A transport hands it a pair of memory
streams; every inbound JSON-RPC message is dispatched in its own task and any
response is written back to the outbound stream.

Usage:
    server = JokesServer(name="jokesMCP", version="1.0.0", tool_manager=manager)

    async with transport.connect_sse(scope, receive, send) as (read_stream, write_stream):
        await server.run(read_stream, write_stream)
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

import anyio
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream
from pydantic import BaseModel, ValidationError

from jokes_mcp import types
from jokes_mcp.exceptions import McpError, ToolError
from jokes_mcp.tools import ToolManager
from jokes_mcp.utilities.logging import get_logger

logger = get_logger(__name__)

RequestHandler = Callable[[dict[str, Any] | None], Awaitable[BaseModel | dict[str, Any]]]
NotificationHandler = Callable[[dict[str, Any] | None], Awaitable[None]]


def _validate_params(model: type[types.RequestParams], params: dict[str, Any] | None) -> Any:
    try:
        return model.model_validate(params or {})
    except ValidationError as e:
        raise McpError(types.ErrorData(code=types.INVALID_PARAMS, message=f"Invalid params: {e}")) from e


class JokesServer:
    """Pure handler registry plus dispatch, with a run loop for one connection."""

    def __init__(
        self,
        name: str,
        version: str,
        instructions: str | None = None,
        tool_manager: ToolManager | None = None,
    ) -> None:
        self.name = name
        self.version = version
        self.instructions = instructions
        self.tool_manager = tool_manager or ToolManager()
        self._request_handlers: dict[str, RequestHandler] = {}
        self._notification_handlers: dict[str, NotificationHandler] = {}
        self._setup_handlers()

    def request_handler(self, method: str) -> Callable[[RequestHandler], RequestHandler]:
        """Decorator to register a request handler for a given method."""

        def decorator(fn: RequestHandler) -> RequestHandler:
            self._request_handlers[method] = fn
            return fn

        return decorator

    def notification_handler(self, method: str) -> Callable[[NotificationHandler], NotificationHandler]:
        """Decorator to register a notification handler for a given method."""

        def decorator(fn: NotificationHandler) -> NotificationHandler:
            self._notification_handlers[method] = fn
            return fn

        return decorator

    def _setup_handlers(self) -> None:
        self.request_handler("initialize")(self._initialize)
        self.request_handler("ping")(self._ping)
        self.request_handler("tools/list")(self._list_tools)
        self.request_handler("tools/call")(self._call_tool)
        self.notification_handler("notifications/initialized")(self._initialized)

    def get_capabilities(self) -> types.ServerCapabilities:
        caps = types.ServerCapabilities()
        if "tools/list" in self._request_handlers or "tools/call" in self._request_handlers:
            caps.tools = {}
        return caps

    async def _initialize(self, params: dict[str, Any] | None) -> types.InitializeResult:
        request = _validate_params(types.InitializeRequestParams, params)
        if request.protocol_version in types.SUPPORTED_PROTOCOL_VERSIONS:
            protocol_version = request.protocol_version
        else:
            protocol_version = types.LATEST_PROTOCOL_VERSION
        logger.info("Initializing client %s %s", request.client_info.name, request.client_info.version)
        return types.InitializeResult(
            protocol_version=protocol_version,
            capabilities=self.get_capabilities(),
            server_info=types.Implementation(name=self.name, version=self.version),
            instructions=self.instructions,
        )

    async def _initialized(self, params: dict[str, Any] | None) -> None:
        logger.debug("Client finished initialization")

    async def _ping(self, params: dict[str, Any] | None) -> types.EmptyResult:
        return types.EmptyResult()

    async def _list_tools(self, params: dict[str, Any] | None) -> types.ListToolsResult:
        # All tools fit on one page, so a cursor is accepted and ignored.
        _validate_params(types.ListToolsRequestParams, params)
        return types.ListToolsResult(
            tools=[
                types.Tool(name=tool.name, description=tool.description, input_schema=tool.parameters)
                for tool in self.tool_manager.list_tools()
            ]
        )

    async def _call_tool(self, params: dict[str, Any] | None) -> types.CallToolResult:
        request = _validate_params(types.CallToolRequestParams, params)
        try:
            content = await self.tool_manager.call_tool(request.name, request.arguments or {})
        except ToolError as e:
            logger.warning("Tool call failed: %s", e)
            return self._make_error_result(str(e))
        return types.CallToolResult(content=list(content))

    def _make_error_result(self, error_message: str) -> types.CallToolResult:
        """Create an error CallToolResult."""
        return types.CallToolResult(content=[types.TextContent(text=error_message)], is_error=True)

    async def dispatch_request(self, request: types.JSONRPCRequest) -> types.JSONRPCResponse:
        """Dispatch a request to the appropriate handler."""
        handler = self._request_handlers.get(request.method)
        if not handler:
            return types.JSONRPCErrorResponse(
                id=request.id,
                error=types.ErrorData(code=types.METHOD_NOT_FOUND, message=f"Method not found: {request.method}"),
            )
        logger.debug("Dispatching request %s (id=%s)", request.method, request.id)
        try:
            result = await handler(request.params)
        except McpError as err:
            return types.JSONRPCErrorResponse(id=request.id, error=err.error)
        except Exception as err:
            logger.exception("Handler error for %s", request.method)
            return types.JSONRPCErrorResponse(
                id=request.id,
                error=types.ErrorData(code=types.INTERNAL_ERROR, message=str(err)),
            )

        if isinstance(result, BaseModel):
            result_data = result.model_dump(by_alias=True, exclude_none=True)
        else:
            result_data = result
        return types.JSONRPCResultResponse(id=request.id, result=result_data)

    async def dispatch_notification(self, notification: types.JSONRPCNotification) -> None:
        """Dispatch a notification to the appropriate handler."""
        handler = self._notification_handlers.get(notification.method)
        if handler:
            try:
                await handler(notification.params)
            except Exception:
                logger.exception("Notification handler error for %s", notification.method)

    async def handle_message(
        self, message: types.JSONRPCMessage | Exception
    ) -> types.JSONRPCResponse | None:
        """Handle one inbound message and return the response to send, if any."""
        match message:
            case types.JSONRPCRequest():
                return await self.dispatch_request(message)
            case types.JSONRPCNotification():
                await self.dispatch_notification(message)
            case Exception():
                logger.warning("Received exception from stream: %s", message)
            case _:
                # This server never issues requests, so there is nothing to correlate responses with.
                logger.debug("Ignoring unexpected response message: %s", message)
        return None

    async def run(
        self,
        read_stream: MemoryObjectReceiveStream[types.JSONRPCMessage | Exception],
        write_stream: MemoryObjectSendStream[types.JSONRPCMessage],
    ) -> None:
        """Serve one connection until its inbound stream is closed."""

        async def handle(message: types.JSONRPCMessage | Exception) -> None:
            response = await self.handle_message(message)
            if response is not None:
                try:
                    await write_stream.send(response)
                except (anyio.ClosedResourceError, anyio.BrokenResourceError):
                    logger.debug("Connection closed before response could be sent")

        async with read_stream, write_stream:
            async with anyio.create_task_group() as tg:
                async for message in read_stream:
                    logger.debug("Received message: %s", message)
                    tg.start_soon(handle, message)
