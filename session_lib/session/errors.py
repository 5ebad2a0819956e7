"""Exceptions raised by session stores and the session manager."""


class SessionError(Exception):
    """Base class for session errors."""


class SessionNotFound(SessionError, KeyError):
    """A presented session id has no record in the store.

    Subclasses `KeyError` so code written against the storage layer's
    missing-key convention keeps working.
    """

    def __init__(self, session_id: str) -> None:
        super().__init__(session_id)
        self.session_id = session_id

    def __str__(self) -> str:
        return f"Session {self.session_id} does not exist in the data store"


class StoreFailure(SessionError):
    """The store failed for a reason other than a missing record."""


class ConfigurationError(SessionError):
    """The session store or cookie settings are unusable."""
