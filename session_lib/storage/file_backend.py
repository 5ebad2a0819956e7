"""Simple file-backed storage backend.

This backend stores raw bytes under `<data_dir>/<namespace>/<key><ext>`.
It provides atomic writes by writing to a temporary file then renaming.
The extension defaults to `.bin`; `create_storage` sets it from the
serializer in use so files on disk are recognisable.
"""
from __future__ import annotations
import os
from pathlib import Path
from typing import Iterable

from .base import StorageBackend


class FileStorageBackend(StorageBackend):
    def __init__(self, data_dir: str | Path = "./data", file_extension: str = ".bin") -> None:
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.file_extension = file_extension

    def _ns_dir(self, namespace: str) -> Path:
        ns = self.data_dir / namespace
        ns.mkdir(parents=True, exist_ok=True)
        return ns

    def _path_for(self, namespace: str, key: str) -> Path:
        # One file per key, directly under the namespace directory.
        if key in ("", ".", "..") or "/" in key or "\\" in key or "\x00" in key:
            raise KeyError(key)
        return self._ns_dir(namespace) / f"{key}{self.file_extension}"

    def save(self, namespace: str, key: str, value: bytes) -> None:
        path = self._path_for(namespace, key)
        tmp = path.with_name(path.name + ".tmp")
        with open(tmp, "wb") as f:
            f.write(bytes(value))
            f.flush()
            os.fsync(f.fileno())
        tmp.replace(path)

    def load(self, namespace: str, key: str) -> bytes:
        path = self._path_for(namespace, key)
        if not path.exists():
            raise KeyError(key)
        with open(path, "rb") as f:
            return f.read()

    def delete(self, namespace: str, key: str) -> None:
        path = self._path_for(namespace, key)
        if not path.exists():
            raise KeyError(key)
        path.unlink()

    def list_keys(self, namespace: str) -> Iterable[str]:
        ns = self._ns_dir(namespace)
        for p in ns.iterdir():
            if p.is_file() and p.name.endswith(self.file_extension):
                yield p.name[: -len(self.file_extension)] if self.file_extension else p.name

    def exists(self, namespace: str, key: str) -> bool:
        try:
            return self._path_for(namespace, key).exists()
        except KeyError:
            return False

    def configure(self, **options) -> None:
        # Allow the serializer layer to set the on-disk extension.
        ext = options.get("file_extension")
        if ext is not None:
            if ext and not ext.startswith("."):
                ext = "." + ext
            self.file_extension = ext
        return
