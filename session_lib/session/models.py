from __future__ import annotations
from typing import Any, Dict, Iterator, MutableMapping, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .store import SessionStore


class Session(MutableMapping[str, Any]):
    """A session record loaded from a `SessionStore`.

    Behaves as a mapping of string keys to values. Changes stay in memory
    until `save()` is called; the session middleware does that once the
    handler has run. `delete()` removes the record from the store and
    leaves this object dead.
    """

    def __init__(
        self,
        session_id: str,
        data: Optional[Dict[str, Any]] = None,
        store: Optional["SessionStore"] = None,
        new: bool = False,
    ) -> None:
        self._id = session_id
        self._data: Dict[str, Any] = dict(data or {})
        self._store = store
        self.new = new
        self.modified = False
        self.deleted = False

    @property
    def id(self) -> str:
        return self._id

    @property
    def store(self) -> Optional["SessionStore"]:
        return self._store

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._data[key] = value
        self.modified = True

    def __delitem__(self, key: str) -> None:
        del self._data[key]
        self.modified = True

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def set(self, key: str, value: Any) -> None:
        self[key] = value

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._data)

    def save(self, force: bool = False) -> bool:
        """Persist the session if it changed. Returns True when written."""
        if self.deleted:
            raise RuntimeError(f"Session {self._id} has been deleted")
        if self._store is None or not (self.modified or force):
            return False
        self._store.save(self)
        self.modified = False
        return True

    def delete(self) -> None:
        """Remove the session from its store."""
        if self._store is not None and not self.deleted:
            self._store.delete(self)
        self.deleted = True

    def __repr__(self) -> str:
        return f"Session(id={self._id!r}, data={self._data!r})"
