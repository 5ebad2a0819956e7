from .errors import ConfigurationError, SessionError, SessionNotFound, StoreFailure
from .models import Session
from .store import (
    FileSessionStore,
    MemorySessionStore,
    SessionStore,
    available_stores,
    create_store,
    register_store,
)

__all__ = [
    "ConfigurationError",
    "SessionError",
    "SessionNotFound",
    "StoreFailure",
    "Session",
    "SessionStore",
    "FileSessionStore",
    "MemorySessionStore",
    "available_stores",
    "create_store",
    "register_store",
]
