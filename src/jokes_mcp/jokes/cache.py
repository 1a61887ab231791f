"""Time-bounded memoization of the Chuck Norris category list."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

from jokes_mcp.utilities.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CATEGORY_TTL = 60.0 * 10


class CategoryCache:
    """Serve the category list from memory for ``ttl`` seconds after each fetch.

    A read before the TTL has elapsed returns the stored list object itself and
    does not touch the upstream. A read at or after the TTL awaits ``fetch`` once
    and replaces both the list and its timestamp. If ``fetch`` raises, the error
    propagates and the stored list and timestamp are left exactly as they were.

    Concurrent readers that all miss will each call ``fetch``; refreshes are not
    coalesced.

    Args:
        fetch: coroutine function returning the current category list
        ttl: seconds a fetched list stays fresh
        clock: monotonic clock in seconds; injectable for tests
    """

    def __init__(
        self,
        fetch: Callable[[], Awaitable[list[str]]],
        ttl: float = DEFAULT_CATEGORY_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._fetch = fetch
        self.ttl = ttl
        self._clock = clock
        self._value: list[str] | None = None
        self._fetched_at: float = 0.0

    @property
    def fetched_at(self) -> float | None:
        """Clock reading of the last successful fetch, or None if nothing is cached."""
        return self._fetched_at if self._value is not None else None

    async def get(self) -> list[str]:
        now = self._clock()
        if self._value is not None and now - self._fetched_at < self.ttl:
            return self._value

        logger.debug("Category cache miss, fetching from upstream")
        value = await self._fetch()
        self._value = value
        self._fetched_at = now
        return value

    def invalidate(self) -> None:
        """Drop the stored list so the next read fetches again."""
        self._value = None
        self._fetched_at = 0.0
