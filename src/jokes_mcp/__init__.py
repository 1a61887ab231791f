"""A Model Context Protocol server that tells jokes.

Five tools proxy to third-party joke APIs and are served over the SSE transport:

```python
from jokes_mcp import JokesMCP

JokesMCP().run()
```
"""

from jokes_mcp.app import JokesMCP
from jokes_mcp.exceptions import JokesMCPError, McpError, ToolError, UpstreamError, UpstreamStatusError
from jokes_mcp.server import JokesServer
from jokes_mcp.settings import Settings

__all__ = [
    "JokesMCP",
    "JokesMCPError",
    "JokesServer",
    "McpError",
    "Settings",
    "ToolError",
    "UpstreamError",
    "UpstreamStatusError",
]
