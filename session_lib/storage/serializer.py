from typing import Any, Callable, Dict, Protocol
import base64
import json
import os
import pickle
import yaml


class Serializer(Protocol):
    """Serialize/deserialize session records for backends that store bytes.

    Implementations should be symmetric: `dump` -> bytes, `load` <- bytes.
    `extension` is the file suffix used by the file backend.
    """

    extension: str

    def dump(self, value: Any) -> bytes: ...

    def load(self, data: bytes) -> Any: ...


class PickleSerializer:
    """Default serializer using pickle (binary).

    Session values may be arbitrary Python objects, so this is the
    practical default. Only use it with storage the server alone can write.
    """

    extension = ".pkl"

    def dump(self, value: Any) -> bytes:
        return pickle.dumps(value, protocol=pickle.HIGHEST_PROTOCOL)

    def load(self, data: bytes) -> Any:
        return pickle.loads(data)


class JSONSerializer:
    """Serializer using JSON (text). Session values must be JSON-serializable."""

    extension = ".json"

    def dump(self, value: Any) -> bytes:
        return json.dumps(value, default=lambda o: o.__dict__).encode("utf-8")

    def load(self, data: bytes) -> Any:
        return json.loads(data.decode("utf-8"))


class YAMLSerializer:
    """Serializer using YAML (text). Session values must be YAML-serializable."""

    extension = ".yml"

    def dump(self, value: Any) -> bytes:
        return yaml.safe_dump(value).encode("utf-8")

    def load(self, data: bytes) -> Any:
        return yaml.safe_load(data.decode("utf-8"))


class EncryptedSerializer:
    """Serializer that encrypts session records using Fernet.

    Useful when the session directory is shared or backed up and records
    hold user data. Provide either `key` (a Fernet key) or `password`; in
    password mode each record carries its own salt and PBKDF2 parameters so
    the key can be derived again on load. The plaintext is produced by
    `base_serializer` (JSON unless told otherwise).
    """

    extension = ".enc"

    def __init__(
        self,
        *,
        key: bytes | str | None = None,
        password: str | None = None,
        iterations: int = 390000,
        base_serializer: Serializer | None = None,
    ) -> None:
        if key is None and password is None:
            raise ValueError("EncryptedSerializer requires either `key` or `password`")
        self._key = key.encode("ascii") if isinstance(key, str) else key
        self._password = password
        self._iterations = iterations
        self.base_serializer = base_serializer or JSONSerializer()

    def _derive_key(self, password: str, salt: bytes, iterations: int) -> bytes:
        from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
        from cryptography.hazmat.primitives import hashes

        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=salt,
            iterations=iterations,
        )
        return base64.urlsafe_b64encode(kdf.derive(password.encode("utf-8")))

    def dump(self, value: Any) -> bytes:
        """Serialize and encrypt value, returning a framed JSON blob."""
        from cryptography.fernet import Fernet

        inner = self.base_serializer.dump(value)
        if self._password is not None:
            salt = os.urandom(16)
            f = Fernet(self._derive_key(self._password, salt, self._iterations))
            frame = {
                "v": 1,
                "mode": "password",
                "kdf": "pbkdf2",
                "iterations": self._iterations,
                "salt": base64.urlsafe_b64encode(salt).decode("ascii"),
                "ct": base64.urlsafe_b64encode(f.encrypt(inner)).decode("ascii"),
            }
        else:
            f = Fernet(self._key)
            frame = {"v": 1, "mode": "key", "ct": base64.urlsafe_b64encode(f.encrypt(inner)).decode("ascii")}
        return json.dumps(frame).encode("utf-8")

    def load(self, data: bytes) -> Any:
        """Parse framed blob, derive key if needed, decrypt and deserialize."""
        from cryptography.fernet import Fernet

        frame = json.loads(data.decode("utf-8"))
        mode = frame.get("mode")
        ct = base64.urlsafe_b64decode(frame["ct"].encode("ascii"))
        if mode == "password":
            if self._password is None:
                raise ValueError("serializer was not configured with a password")
            salt = base64.urlsafe_b64decode(frame["salt"].encode("ascii"))
            key = self._derive_key(self._password, salt, frame.get("iterations", self._iterations))
            return self.base_serializer.load(Fernet(key).decrypt(ct))
        if mode == "key":
            if self._key is None:
                raise ValueError("serializer was not configured with a key")
            return self.base_serializer.load(Fernet(self._key).decrypt(ct))
        raise ValueError("unknown frame format")


SERIALIZERS: Dict[str, Callable[..., Serializer]] = {
    "pickle": PickleSerializer,
    "json": JSONSerializer,
    "yaml": YAMLSerializer,
    "encrypted": EncryptedSerializer,
}


def get_serializer(name: str, **options) -> Serializer:
    """Instantiate a serializer by name. Raises `KeyError` for unknown names."""
    factory = SERIALIZERS[name]
    return factory(**options)
