"""Custom exceptions for jokes-mcp."""

from jokes_mcp.types import ErrorData


class JokesMCPError(Exception):
    """Base error for jokes-mcp."""


class ToolError(JokesMCPError):
    """Error in tool operations."""


class UpstreamError(JokesMCPError):
    """A third-party joke service could not be reached or answered garbage."""


class UpstreamStatusError(UpstreamError):
    """A third-party joke service answered with a non-success HTTP status."""

    def __init__(self, status_code: int, url: str):
        super().__init__(f"Upstream request to {url} failed with status {status_code}")
        self.status_code = status_code
        self.url = url


class McpError(JokesMCPError):
    """Exception type raised when a protocol error should be returned to the client."""

    error: ErrorData

    def __init__(self, error: ErrorData):
        """Initialize McpError."""
        super().__init__(error.message)
        self.error = error
