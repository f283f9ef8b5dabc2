"""Credentials and session handling."""

from tracker.auth.dependencies import get_current_user, get_session_registry, get_session_tokens
from tracker.auth.sessions import (
    MemorySessionStore,
    Session,
    SessionRegistry,
    SessionStore,
    SessionUser,
    SQLSessionStore,
    get_session_store,
)

__all__ = [
    "MemorySessionStore",
    "Session",
    "SessionRegistry",
    "SessionStore",
    "SessionUser",
    "SQLSessionStore",
    "get_current_user",
    "get_session_registry",
    "get_session_store",
    "get_session_tokens",
]
