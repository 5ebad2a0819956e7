"""Session stores.

A session store maps session ids to records kept in a storage backend.
Stores are selected by name from a registry at application start-up:

    store = create_store('file', directory='/tmp/sessions',
                         lock_directory='/tmp/sessionlock')

Additional stores can be plugged in with `register_store`.
"""
from __future__ import annotations
import logging
import re
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Iterator, Optional

from session_lib.storage import create_storage
from session_lib.storage.interfaces import StorageProtocol
from session_lib.storage.lock import KeyedThreadLocks, file_lock, remove_lock_file

from .errors import ConfigurationError, SessionNotFound, StoreFailure
from .models import Session

logger = logging.getLogger(__name__)

SESSION_NS = "sessions"

_SESSION_ID_RE = re.compile(r"[A-Za-z0-9_-]{1,128}")


def generate_session_id() -> str:
    return uuid.uuid4().hex


def is_valid_session_id(session_id: str) -> bool:
    """True when `session_id` can name a stored record and its lock file."""
    return bool(_SESSION_ID_RE.fullmatch(session_id))


class SessionStore:
    """Resolve, create, save and delete sessions held in a storage backend.

    Missing records raise `SessionNotFound`; every other storage error is
    wrapped in `StoreFailure`. Ids that fail `is_valid_session_id` are
    reported as missing without touching the backend or taking a lock.
    """

    name = "base"

    def __init__(self, storage: StorageProtocol, namespace: str = SESSION_NS,
                 id_factory: Callable[[], str] = generate_session_id) -> None:
        self._storage = storage
        self._namespace = namespace
        self._id_factory = id_factory
        self._thread_locks = KeyedThreadLocks()

    @contextmanager
    def lock(self, session_id: str) -> Iterator[None]:
        with self._thread_locks.get(session_id):
            yield

    def release_lock(self, session_id: str) -> None:
        """Drop the lock state kept for `session_id`."""
        self._thread_locks.discard(session_id)

    @contextmanager
    def _locked(self, session_id: str) -> Iterator[None]:
        try:
            with self.lock(session_id):
                yield
        except (OSError, ValueError) as e:
            raise StoreFailure(f"Failed to lock session {session_id}: {e}") from e

    def resolve_or_create(self, session_id: Optional[str] = None) -> Session:
        """Load the session for `session_id`, or create one when it is None.

        Raises `SessionNotFound` when an explicit id has no record.
        """
        if session_id is None:
            return self._create()

        if not is_valid_session_id(session_id):
            logger.debug("Ignoring malformed session id %r", session_id[:40])
            raise SessionNotFound(session_id)
        if not self.exists(session_id):
            raise SessionNotFound(session_id)

        try:
            with self._locked(session_id):
                try:
                    data = self._storage.load(self._namespace, session_id)
                except KeyError:
                    raise SessionNotFound(session_id)
                except Exception as e:
                    raise StoreFailure(f"Failed to load session {session_id}: {e}") from e
        except SessionNotFound:
            # Deleted between the lookup and the load.
            self.release_lock(session_id)
            raise

        if not isinstance(data, dict):
            raise StoreFailure(f"Session {session_id} holds a {type(data).__name__}, expected a mapping")
        logger.debug("Loaded session %s (%d keys)", session_id, len(data))
        return Session(session_id, data, store=self)

    def _create(self) -> Session:
        session_id = self._id_factory()
        while self.exists(session_id):
            logger.warning("Generated session id %s already exists; retrying", session_id)
            session_id = self._id_factory()
        if not is_valid_session_id(session_id):
            raise StoreFailure(f"Generated session id {session_id!r} is not a valid session id")
        session = Session(session_id, {}, store=self, new=True)
        # Write the empty record immediately so the id resolves on the
        # next request even if nothing is stored in it.
        self.save(session)
        logger.debug("Created session %s", session_id)
        return session

    def save(self, session: Session) -> None:
        with self._locked(session.id):
            try:
                self._storage.save(self._namespace, session.id, session.to_dict())
            except Exception as e:
                raise StoreFailure(f"Failed to save session {session.id}: {e}") from e

    def delete(self, session: Session) -> None:
        """Remove the record for `session`. Raises `SessionNotFound` if it is gone."""
        with self._locked(session.id):
            try:
                self._storage.delete(self._namespace, session.id)
            except KeyError:
                raise SessionNotFound(session.id)
            except Exception as e:
                raise StoreFailure(f"Failed to delete session {session.id}: {e}") from e
        self.release_lock(session.id)
        logger.debug("Deleted session %s", session.id)

    def exists(self, session_id: str) -> bool:
        try:
            return self._storage.exists(self._namespace, session_id)
        except Exception as e:
            raise StoreFailure(f"Failed to look up session {session_id}: {e}") from e

    def list_ids(self) -> Iterable[str]:
        try:
            return list(self._storage.list_keys(self._namespace))
        except Exception as e:
            raise StoreFailure(f"Failed to list sessions: {e}") from e


class MemorySessionStore(SessionStore):
    """Sessions kept in process memory. Records are still serialized so
    handlers never share mutable state with the store."""

    name = "memory"

    def __init__(self, serializer: str = "pickle", **serializer_options: Any) -> None:
        super().__init__(create_storage(backend="memory", serializer=serializer, data_dir=None,
                                        **serializer_options))


class FileSessionStore(SessionStore):
    """Sessions kept as one file per record under `directory`.

    Reads and writes hold an exclusive lock file in `lock_directory`, so
    several worker processes can share the same directories.
    """

    name = "file"

    def __init__(self, directory: str | Path, lock_directory: str | Path,
                 serializer: str = "pickle", **serializer_options: Any) -> None:
        self.directory = Path(directory)
        self.lock_directory = Path(lock_directory)
        try:
            storage = create_storage(backend="file", serializer=serializer, data_dir=self.directory,
                                     **serializer_options)
            self.lock_directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigurationError(f"Cannot use session directories {directory}, {lock_directory}: {e}") from e
        # The data directory already scopes the records; no extra namespace level.
        super().__init__(storage, namespace=".")

    @contextmanager
    def lock(self, session_id: str) -> Iterator[None]:
        with super().lock(session_id):
            with file_lock(self.lock_directory, session_id):
                yield

    def release_lock(self, session_id: str) -> None:
        super().release_lock(session_id)
        remove_lock_file(self.lock_directory, session_id)


_STORES: Dict[str, Callable[..., SessionStore]] = {}


def register_store(name: str, factory: Callable[..., SessionStore]) -> None:
    """Make a store available to `create_store` under `name`."""
    _STORES[name] = factory


def available_stores() -> list[str]:
    return sorted(_STORES)


def create_store(name: str, **args: Any) -> SessionStore:
    """Build the store registered as `name` with `args`.

    Raises `ConfigurationError` for unknown names, unknown serializers or
    arguments the store does not accept.
    """
    factory = _STORES.get(name)
    if factory is None:
        raise ConfigurationError(
            f"Unknown session store {name!r}; available: {', '.join(available_stores())}")
    try:
        store = factory(**args)
    except (TypeError, ValueError, KeyError) as e:
        raise ConfigurationError(f"Couldn't create session store {name!r}: {e}") from e
    logger.info("Using %s session store", name)
    return store


register_store(MemorySessionStore.name, MemorySessionStore)
register_store(FileSessionStore.name, FileSessionStore)
