"""Registry of open SSE sessions, keyed by an opaque generated identifier."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol
from uuid import uuid4

from anyio.streams.memory import MemoryObjectSendStream
from starlette.types import Scope

from jokes_mcp.types import JSONRPCMessage
from jokes_mcp.utilities.logging import get_logger

logger = get_logger(__name__)


@dataclass(eq=False)
class SseSession:
    """One long-lived SSE connection.

    ``writer`` feeds messages POSTed by the client into the server loop serving
    this connection. ``session_id`` is empty until the session is registered.
    """

    endpoint: str
    writer: MemoryObjectSendStream[JSONRPCMessage | Exception]
    scope: Scope = field(default_factory=dict, repr=False)
    session_id: str = ""

    @property
    def callback_url(self) -> str:
        """Address the client must POST its messages to."""
        return f"{self.endpoint}?sessionId={self.session_id}"


class SessionRegistry(Protocol):
    """Maps session identifiers to open sessions."""

    def register(self, session: SseSession) -> str:
        """Store ``session`` under a freshly generated identifier and return it."""
        ...

    def lookup(self, session_id: str) -> SseSession | None:
        """Return the open session for ``session_id``, if any."""
        ...

    def unregister(self, session_id: str) -> None:
        """Forget ``session_id``. Unknown identifiers are ignored."""
        ...


class InMemorySessionRegistry:
    """SessionRegistry backed by a plain dict.

    All callers run on one event loop, so no locking is needed.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, SseSession] = {}

    def register(self, session: SseSession) -> str:
        session_id = uuid4().hex
        session.session_id = session_id
        self._sessions[session_id] = session
        logger.debug("Registered session %s (%d open)", session_id, len(self._sessions))
        return session_id

    def lookup(self, session_id: str) -> SseSession | None:
        return self._sessions.get(session_id)

    def unregister(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is not None:
            logger.debug("Unregistered session %s (%d open)", session_id, len(self._sessions))

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
