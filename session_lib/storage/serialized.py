"""Storage wrapper that serializes values on top of a raw bytes backend."""
from __future__ import annotations
from typing import Any, Iterable

from .base import StorageBackend
from .serializer import Serializer


class SerializedStorage:
    """Compose a `StorageBackend` with a `Serializer`.

    `load` always returns a freshly deserialized value, so callers can
    mutate it without touching the stored copy until they `save` again.
    """

    def __init__(self, backend: StorageBackend, serializer: Serializer) -> None:
        self.backend = backend
        self.serializer = serializer
        backend.configure(file_extension=serializer.extension)

    def save(self, namespace: str, key: str, value: Any) -> None:
        self.backend.save(namespace, key, self.serializer.dump(value))

    def load(self, namespace: str, key: str) -> Any:
        return self.serializer.load(self.backend.load(namespace, key))

    def delete(self, namespace: str, key: str) -> None:
        self.backend.delete(namespace, key)

    def list_keys(self, namespace: str) -> Iterable[str]:
        return self.backend.list_keys(namespace)

    def exists(self, namespace: str, key: str) -> bool:
        return self.backend.exists(namespace, key)

    def configure(self, **options) -> None:
        self.backend.configure(**options)
