"""Storage abstraction package for session_lib."""
from __future__ import annotations
from pathlib import Path
from typing import Callable, Dict

from .base import StorageBackend
from .file_backend import FileStorageBackend
from .memory_backend import MemoryStorage
from .serialized import SerializedStorage
from .serializer import Serializer, get_serializer

BACKENDS: Dict[str, Callable[..., StorageBackend]] = {
    "file": lambda data_dir="./data": FileStorageBackend(data_dir=data_dir),
    "memory": lambda data_dir=None: MemoryStorage(),
}


def create_storage(
    backend: str = "file",
    serializer: str = "pickle",
    data_dir: str | Path | None = "./data",
    **serializer_options,
) -> SerializedStorage:
    """Compose a raw backend and a serializer by name.

    Extra keyword arguments are handed to the serializer (e.g. `password`
    or `key` for the `encrypted` serializer). Raises `KeyError` for unknown
    backend or serializer names.
    """
    raw = BACKENDS[backend](data_dir=data_dir)
    return SerializedStorage(raw, get_serializer(serializer, **serializer_options))


__all__ = [
    "StorageBackend",
    "FileStorageBackend",
    "MemoryStorage",
    "SerializedStorage",
    "Serializer",
    "create_storage",
    "get_serializer",
]
