"""Thin async clients for the third-party joke APIs.

Each client wraps a shared :class:`httpx.AsyncClient` and knows one service's
URL layout and payload shape. Non-success statuses raise
:class:`~jokes_mcp.exceptions.UpstreamStatusError`; connection failures surface
as the underlying :class:`httpx.HTTPError`.
"""

from __future__ import annotations

from typing import Any

import httpx

from jokes_mcp.exceptions import UpstreamError, UpstreamStatusError
from jokes_mcp.utilities.logging import get_logger

logger = get_logger(__name__)

CHUCK_NORRIS_BASE_URL = "https://api.chucknorris.io/jokes"
DAD_JOKE_URL = "https://icanhazdadjoke.com/"
YO_MAMA_URL = "https://www.yomama-jokes.com/api/v1/jokes/random"


async def _get_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    params: dict[str, str] | None = None,
    headers: dict[str, str] | None = None,
) -> Any:
    logger.debug("GET %s params=%s", url, params)
    response = await client.get(url, params=params, headers=headers)
    if not response.is_success:
        raise UpstreamStatusError(response.status_code, str(response.request.url))
    return response.json()


def _field(data: Any, key: str, url: str) -> Any:
    if not isinstance(data, dict) or key not in data:
        raise UpstreamError(f"Unexpected response from {url}: missing '{key}'")
    return data[key]


class ChuckNorrisClient:
    """Client for https://api.chucknorris.io."""

    def __init__(self, client: httpx.AsyncClient, base_url: str = CHUCK_NORRIS_BASE_URL):
        self._client = client
        self.base_url = base_url.rstrip("/")

    async def random_joke(self) -> str:
        url = f"{self.base_url}/random"
        return _field(await _get_json(self._client, url), "value", url)

    async def random_joke_by_category(self, category: str) -> str:
        """Fetch a random joke from ``category``.

        Raises:
            UpstreamStatusError: if the service does not know the category or fails
        """
        url = f"{self.base_url}/random"
        data = await _get_json(self._client, url, params={"category": category})
        return _field(data, "value", url)

    async def categories(self) -> list[str]:
        url = f"{self.base_url}/categories"
        data = await _get_json(self._client, url)
        if not isinstance(data, list):
            raise UpstreamError(f"Unexpected response from {url}: expected a list of categories")
        return [str(category) for category in data]


class DadJokeClient:
    """Client for https://icanhazdadjoke.com, which only answers JSON when asked to."""

    def __init__(self, client: httpx.AsyncClient, url: str = DAD_JOKE_URL):
        self._client = client
        self.url = url

    async def random_joke(self) -> str:
        data = await _get_json(self._client, self.url, headers={"Accept": "application/json"})
        return _field(data, "joke", self.url)


class YoMamaClient:
    """Client for the yomama-jokes.com random joke endpoint."""

    def __init__(self, client: httpx.AsyncClient, url: str = YO_MAMA_URL):
        self._client = client
        self.url = url

    async def random_joke(self) -> str:
        return _field(await _get_json(self._client, self.url), "joke", self.url)
