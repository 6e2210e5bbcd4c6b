"""Session storage package."""

from .json_session_store import JsonSessionStore
from .memory_session_store import InMemorySessionStore

__all__ = ['JsonSessionStore', 'InMemorySessionStore']
