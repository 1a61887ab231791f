from jokes_mcp.types.base import (
    LATEST_PROTOCOL_VERSION,
    SUPPORTED_PROTOCOL_VERSIONS,
    EmptyResult,
    MCPModel,
    Meta,
    RequestParams,
    Result,
)
from jokes_mcp.types.content import ContentBlock, TextContent
from jokes_mcp.types.initialize import (
    ClientCapabilities,
    Implementation,
    InitializeRequestParams,
    InitializeResult,
    ServerCapabilities,
)
from jokes_mcp.types.json_rpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    JSONRPC_VERSION,
    METHOD_NOT_FOUND,
    ErrorData,
    JSONRPCErrorResponse,
    JSONRPCMessage,
    JSONRPCMessageAdapter,
    JSONRPCNotification,
    JSONRPCRequest,
    JSONRPCResponse,
    JSONRPCResultResponse,
    RequestId,
)
from jokes_mcp.types.tools import (
    CallToolRequestParams,
    CallToolResult,
    ListToolsRequestParams,
    ListToolsResult,
    Tool,
)

__all__ = [
    "CallToolRequestParams",
    "CallToolResult",
    "ClientCapabilities",
    "ContentBlock",
    "EmptyResult",
    "ErrorData",
    "INTERNAL_ERROR",
    "INVALID_PARAMS",
    "Implementation",
    "InitializeRequestParams",
    "InitializeResult",
    "JSONRPCErrorResponse",
    "JSONRPCMessage",
    "JSONRPCMessageAdapter",
    "JSONRPCNotification",
    "JSONRPCRequest",
    "JSONRPCResponse",
    "JSONRPCResultResponse",
    "JSONRPC_VERSION",
    "LATEST_PROTOCOL_VERSION",
    "ListToolsRequestParams",
    "ListToolsResult",
    "MCPModel",
    "METHOD_NOT_FOUND",
    "Meta",
    "RequestId",
    "RequestParams",
    "Result",
    "SUPPORTED_PROTOCOL_VERSIONS",
    "ServerCapabilities",
    "TextContent",
    "Tool",
]
