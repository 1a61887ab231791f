"""Content blocks returned by tool calls."""

from typing import Literal

from jokes_mcp.types.base import MCPModel


class TextContent(MCPModel):
    """Text provided to or from an LLM.

    Every joke operation answers with exactly one of these, whether it
    succeeded or failed in a way it knows how to describe.
    """

    type: Literal["text"] = "text"
    text: str


# Only text is ever produced by this server.
ContentBlock = TextContent
