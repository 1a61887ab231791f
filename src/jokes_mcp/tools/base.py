from __future__ import annotations as _annotations

import functools
import inspect
from collections.abc import Callable, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from jokes_mcp.exceptions import ToolError
from jokes_mcp.types import ContentBlock, TextContent

EMPTY_PARAMETERS: dict[str, Any] = {"type": "object", "properties": {}}


class Tool(BaseModel):
    """Internal tool registration info."""

    model_config = ConfigDict(frozen=True)

    fn: Callable[..., Any] = Field(exclude=True)
    name: str = Field(description="Name of the tool")
    description: str = Field(description="Description of what the tool does")
    parameters: dict[str, Any] = Field(description="JSON schema for tool parameters")
    is_async: bool = Field(description="Whether the tool is async")
    accepted_arguments: frozenset[str] | None = Field(
        None, description="Argument names the function accepts, or None if it takes **kwargs"
    )

    @classmethod
    def from_function(
        cls,
        fn: Callable[..., Any],
        name: str | None = None,
        description: str | None = None,
        parameters: dict[str, Any] | None = None,
    ) -> Tool:
        """Create a Tool from a function."""
        func_name = name or fn.__name__

        if func_name == "<lambda>":
            raise ValueError("You must provide a name for lambda functions")

        func_doc = description or inspect.getdoc(fn) or ""

        return cls(
            fn=fn,
            name=func_name,
            description=func_doc,
            parameters=parameters if parameters is not None else dict(EMPTY_PARAMETERS),
            is_async=_is_async_callable(fn),
            accepted_arguments=_accepted_arguments(fn),
        )

    async def run(self, arguments: dict[str, Any]) -> Sequence[ContentBlock]:
        """Run the tool with arguments."""
        if self.accepted_arguments is None:
            kwargs = dict(arguments)
        else:
            kwargs = {key: value for key, value in arguments.items() if key in self.accepted_arguments}

        try:
            result = self.fn(**kwargs)
            if self.is_async:
                result = await result
        except Exception as e:
            raise ToolError(f"Error executing tool {self.name}: {e}") from e

        return _convert_to_content(result)


def _convert_to_content(result: Any) -> Sequence[ContentBlock]:
    if isinstance(result, TextContent):
        return [result]
    if isinstance(result, str):
        return [TextContent(text=result)]
    if isinstance(result, list | tuple) and all(isinstance(item, TextContent) for item in result):
        return list(result)
    raise ToolError(f"Unexpected return type from tool: {type(result).__name__}")


def _accepted_arguments(fn: Callable[..., Any]) -> frozenset[str] | None:
    parameters = inspect.signature(fn).parameters.values()
    if any(p.kind is inspect.Parameter.VAR_KEYWORD for p in parameters):
        return None
    return frozenset(
        p.name for p in parameters if p.kind in (inspect.Parameter.POSITIONAL_OR_KEYWORD, inspect.Parameter.KEYWORD_ONLY)
    )


def _is_async_callable(obj: Any) -> bool:
    while isinstance(obj, functools.partial):
        obj = obj.func

    return inspect.iscoroutinefunction(obj) or (
        callable(obj) and inspect.iscoroutinefunction(getattr(obj, "__call__", None))
    )
