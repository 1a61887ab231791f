"""Utilities for creating standardized httpx AsyncClient instances."""

from typing import Any

import httpx

__all__ = ["USER_AGENT", "create_http_client"]

USER_AGENT = "jokes-mcp/1.0.0"


def create_http_client(**kwargs: Any) -> httpx.AsyncClient:
    """Create an httpx AsyncClient with the defaults used for upstream joke services.

    Defaults:
    - follow_redirects=True
    - no timeout; an unresponsive upstream stalls only the call waiting on it
    - a User-Agent identifying this server (icanhazdadjoke asks for one)

    Any keyword argument accepted by httpx.AsyncClient overrides the defaults.

    Note:
        The returned AsyncClient must be closed, either by using it as a context
        manager or by awaiting ``aclose()`` on shutdown.

    Examples:
        async with create_http_client() as client:
            response = await client.get("https://api.chucknorris.io/jokes/random")

        async with create_http_client(timeout=httpx.Timeout(10.0)) as client:
            response = await client.get("https://icanhazdadjoke.com/")
    """
    default_kwargs: dict[str, Any] = {
        "follow_redirects": True,
        "timeout": httpx.Timeout(None),
        "headers": {"User-Agent": USER_AGENT},
    }
    default_kwargs.update(kwargs)
    return httpx.AsyncClient(**default_kwargs)
