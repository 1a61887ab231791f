"""Server settings."""

import os
from typing import Any, Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """jokes-mcp server settings.

    All settings can be configured via environment variables with the prefix JOKES_MCP_.
    For example, JOKES_MCP_DEBUG=true will set debug=True. The listening port is
    also read from a bare PORT variable, which is what most hosting platforms set.
    """

    model_config = SettingsConfigDict(
        env_prefix="JOKES_MCP_",
        env_file=".env",
        extra="ignore",
    )

    # Server settings
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # HTTP settings
    host: str = "0.0.0.0"
    port: int = 3001
    sse_path: str = "/sse"
    message_path: str = "/jokes"
    callback_scheme: Literal["http", "https"] = "https"
    """Scheme of the callback address advertised in the SSE endpoint event."""

    # tool settings
    warn_on_duplicate_tools: bool = True

    # upstream settings
    category_cache_ttl: float = 600.0
    """Seconds the Chuck Norris category list is served from memory."""

    chuck_norris_base_url: str = "https://api.chucknorris.io/jokes"
    dad_joke_url: str = "https://icanhazdadjoke.com/"
    yo_mama_url: str = "https://www.yomama-jokes.com/api/v1/jokes/random"
    upstream_timeout: float | None = None
    """Timeout for upstream joke requests in seconds. None waits forever."""

    @model_validator(mode="before")
    @classmethod
    def _port_from_platform_env(cls, data: Any) -> Any:
        # Explicit values and JOKES_MCP_PORT win over the bare PORT variable.
        if isinstance(data, dict) and "port" not in data and os.environ.get("PORT"):
            data = {**data, "port": os.environ["PORT"]}
        return data
