from __future__ import annotations as _annotations

from collections.abc import Callable, Sequence
from typing import Any

from jokes_mcp.exceptions import ToolError
from jokes_mcp.tools.base import Tool
from jokes_mcp.types import ContentBlock
from jokes_mcp.utilities.logging import get_logger

logger = get_logger(__name__)


class ToolManager:
    """Registry of named tools. Tools are added at startup and never mutated."""

    def __init__(
        self,
        warn_on_duplicate_tools: bool = True,
        *,
        tools: list[Tool] | None = None,
    ):
        self._tools: dict[str, Tool] = {}
        self.warn_on_duplicate_tools = warn_on_duplicate_tools
        if tools is not None:
            for tool in tools:
                self._add(tool)

    def _add(self, tool: Tool) -> Tool:
        existing = self._tools.get(tool.name)
        if existing is not None:
            if self.warn_on_duplicate_tools:
                logger.warning(f"Tool already exists: {tool.name}")
            return existing
        self._tools[tool.name] = tool
        return tool

    def get_tool(self, name: str) -> Tool | None:
        """Get tool by name."""
        return self._tools.get(name)

    def list_tools(self) -> list[Tool]:
        """List all registered tools in registration order."""
        return list(self._tools.values())

    def add_tool(
        self,
        fn: Callable[..., Any],
        name: str | None = None,
        description: str | None = None,
        parameters: dict[str, Any] | None = None,
    ) -> Tool:
        """Add a tool to the server."""
        tool = Tool.from_function(fn, name=name, description=description, parameters=parameters)
        return self._add(tool)

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> Sequence[ContentBlock]:
        """Call a tool by name with arguments."""
        tool = self.get_tool(name)
        if not tool:
            raise ToolError(f"Unknown tool: {name}")

        return await tool.run(arguments)
