from .session_registry import InMemorySessionRegistry, SessionRegistry, SseSession
from .sse import SseServerTransport

__all__ = ["InMemorySessionRegistry", "SessionRegistry", "SseServerTransport", "SseSession"]
