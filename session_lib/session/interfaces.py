from typing import Iterable, Optional, Protocol, runtime_checkable

from .models import Session


@runtime_checkable
class SessionStoreProtocol(Protocol):
    """Surface the session manager relies on.

    `resolve_or_create` must raise `SessionNotFound` for an explicit id
    without a record, and `StoreFailure` for any other backend problem.
    """

    def resolve_or_create(self, session_id: Optional[str] = None) -> Session: ...

    def save(self, session: Session) -> None: ...

    def delete(self, session: Session) -> None: ...

    def exists(self, session_id: str) -> bool: ...

    def list_ids(self) -> Iterable[str]: ...
