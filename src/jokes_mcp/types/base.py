"""Base types shared by every protocol message the server speaks."""

from typing import Annotated, Any, Final, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

LATEST_PROTOCOL_VERSION: Final[str] = "2025-06-18"
SUPPORTED_PROTOCOL_VERSIONS: Final[tuple[str, ...]] = ("2024-11-05", "2025-03-26", LATEST_PROTOCOL_VERSION)


class MCPModel(BaseModel):
    """Base class for all protocol domain types. Allows extra fields for forward compatibility."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class Meta(MCPModel):
    """Base class for meta information models."""


class RequestParams(MCPModel):
    """Base class for request parameters with _meta support."""

    meta: Annotated[dict[str, Any] | None, Field(alias="_meta")] = None


MetaT = TypeVar("MetaT", bound=Meta | dict[str, Any] | None)


class Result(MCPModel, Generic[MetaT]):
    """Base class for results with _meta support."""

    meta: Annotated[MetaT | None, Field(alias="_meta")] = None


class EmptyResult(Result[Meta]):
    """A response that indicates success but carries no data."""
