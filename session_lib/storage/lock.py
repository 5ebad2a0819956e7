"""Lock helpers for session records.

File stores take an exclusive `flock` on `<lock_dir>/<key>.lock` while a
record is read or written so concurrent workers never interleave on the
same session. Within one process a per-key `threading.Lock` is held as
well, since `flock` is per open file description.
"""
from __future__ import annotations
import os
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator

try:
    import fcntl
except ImportError:  # pragma: no cover - non-POSIX platforms
    fcntl = None  # type: ignore[assignment]


class KeyedThreadLocks:
    """Hand out one `threading.Lock` per key."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}

    def get(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    def discard(self, key: str) -> None:
        with self._guard:
            self._locks.pop(key, None)

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


def lock_path(lock_dir: str | Path, key: str) -> str:
    if not key or "/" in key or "\\" in key or "\x00" in key or key in (".", ".."):
        raise ValueError(f"Cannot use {key!r} as a lock file name")
    return os.path.join(lock_dir, f"{key}.lock")


@contextmanager
def file_lock(lock_dir: str | Path, key: str) -> Iterator[None]:
    """Hold an exclusive lock file for `key` under `lock_dir`."""
    path = lock_path(lock_dir, key)
    os.makedirs(lock_dir, exist_ok=True)
    f = open(path, "a+")
    try:
        if fcntl is not None:
            fcntl.flock(f, fcntl.LOCK_EX)
        yield
    finally:
        try:
            if fcntl is not None:
                fcntl.flock(f, fcntl.LOCK_UN)
        finally:
            f.close()


def remove_lock_file(lock_dir: str | Path, key: str) -> None:
    """Remove the lock file for `key`, if there is one."""
    try:
        os.unlink(lock_path(lock_dir, key))
    except (FileNotFoundError, ValueError):
        pass
