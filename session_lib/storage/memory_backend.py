"""Simple memory-backed storage backend

This backend stores raw bytes in memory as a data structure `[<namespace>][<key>]`.
Nothing survives the process; it is meant for development servers and tests.
"""
from threading import RLock
from typing import Dict, Iterable

from .base import StorageBackend


class MemoryStorage(StorageBackend):
    def __init__(self):
        self._lock = RLock()
        self._store: Dict[str, Dict[str, bytes]] = {}

    def save(self, namespace: str, key: str, value: bytes) -> None:
        with self._lock:
            self._store.setdefault(namespace, {})[key] = bytes(value)

    def load(self, namespace: str, key: str) -> bytes:
        with self._lock:
            ns = self._store.get(namespace, {})
            if key not in ns:
                raise KeyError(key)
            return ns[key]

    def delete(self, namespace: str, key: str) -> None:
        with self._lock:
            ns = self._store.get(namespace, {})
            if key not in ns:
                raise KeyError(key)
            del ns[key]

    def list_keys(self, namespace: str) -> Iterable[str]:
        with self._lock:
            return list(self._store.get(namespace, {}).keys())

    def exists(self, namespace: str, key: str) -> bool:
        with self._lock:
            return key in self._store.get(namespace, {})

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
