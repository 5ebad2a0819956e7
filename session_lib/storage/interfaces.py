from typing import Protocol, Any, Iterable, runtime_checkable


@runtime_checkable
class StorageProtocol(Protocol):
    """Storage protocol mirroring `session_lib.storage.StorageBackend`.

    Implementations should follow the semantics documented on the abstract
    base class in `session_lib.storage.base` (KeyError for missing keys,
    thread-safety where required, etc.). The value type is whatever the
    layer deals in: bytes for raw backends, Python objects for
    `SerializedStorage`.
    """

    def save(self, namespace: str, key: str, value: Any) -> None: ...

    def load(self, namespace: str, key: str) -> Any: ...

    def delete(self, namespace: str, key: str) -> None: ...

    def list_keys(self, namespace: str) -> Iterable[str]: ...

    def exists(self, namespace: str, key: str) -> bool: ...

    def configure(self, **options) -> None: ...
