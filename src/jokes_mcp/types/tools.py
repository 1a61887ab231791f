"""Types for tool listing and invocation."""

from typing import Annotated, Any

from pydantic import Field

from jokes_mcp.types.base import MCPModel, Meta, RequestParams, Result
from jokes_mcp.types.content import ContentBlock


class Tool(MCPModel):
    """Definition of a tool the server provides, as advertised to clients."""

    name: str
    description: str | None = None
    input_schema: Annotated[dict[str, Any], Field(alias="inputSchema")]


class ListToolsRequestParams(RequestParams):
    """Parameters for tools/list request."""

    cursor: str | None = None


class ListToolsResult(Result[Meta]):
    """Server's response to a tools/list request."""

    tools: list[Tool]
    next_cursor: Annotated[str | None, Field(alias="nextCursor")] = None


class CallToolRequestParams(RequestParams):
    """Parameters for tools/call request."""

    name: str
    arguments: dict[str, Any] | None = None


class CallToolResult(Result[Meta]):
    """Server's response to a tools/call request."""

    content: list[ContentBlock]
    is_error: Annotated[bool, Field(alias="isError")] = False
