"""Storage backend interface definitions.

Defines the StorageBackend abstract class used by the session stores to
persist and retrieve raw records. Backends deal in bytes; the
`SerializedStorage` wrapper in `session_lib.storage.serialized` turns
Python values into bytes and back.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Iterable


class StorageBackend(ABC):
    """Abstract storage backend.

    Implementations must be thread-safe if used concurrently.
    """

    @abstractmethod
    def save(self, namespace: str, key: str, value: bytes) -> None:
        """Save `value` under `namespace` and `key`.

        Implementations should create directories as needed and ensure
        atomic writes when possible.
        """

    @abstractmethod
    def load(self, namespace: str, key: str) -> bytes:
        """Load and return the bytes stored under `namespace`/`key`.

        Should raise `KeyError` if the key does not exist.
        """

    @abstractmethod
    def delete(self, namespace: str, key: str) -> None:
        """Delete the stored record. Raise `KeyError` if not found."""

    @abstractmethod
    def list_keys(self, namespace: str) -> Iterable[str]:
        """Return an iterable of keys stored in `namespace`."""

    @abstractmethod
    def exists(self, namespace: str, key: str) -> bool:
        """Return True if `key` exists under `namespace`."""

    def configure(self, **options) -> None:
        """Accept runtime options. Backends without options ignore them."""
        return
