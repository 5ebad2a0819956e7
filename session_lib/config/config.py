"""Session configuration.

`SessionConfig` is built once at start-up and never changed during a
request. It can be constructed directly or read from a YAML file:

    session:
      cookie_name: sessionid
      cookie_expiry: +3M
      store: file
      store_args:
        directory: /tmp/sessions
        lock_directory: /tmp/sessionlock
"""
from __future__ import annotations
import dataclasses
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import urlsplit

import yaml

from session_lib.session.errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_ENV = "SESSION_CONFIG"
DEFAULT_CONFIG_PATH = Path("data/config/session_config.yml")

DEFAULT_COOKIE_NAME = "sessionid"
DEFAULT_COOKIE_EXPIRY = "+3M"
DEFAULT_STORE = "file"
DEFAULT_STORE_ARGS: Dict[str, Any] = {
    "directory": "/tmp/sessions",
    "lock_directory": "/tmp/sessionlock",
}


@dataclass(frozen=True)
class SessionConfig:
    cookie_name: str = DEFAULT_COOKIE_NAME
    cookie_expiry: Union[str, int, None] = DEFAULT_COOKIE_EXPIRY
    store: str = DEFAULT_STORE
    # None selects DEFAULT_STORE_ARGS for the file store and no arguments otherwise
    store_args: Optional[Mapping[str, Any]] = None
    uri_base: Optional[str] = None
    domain: Optional[str] = None
    secure: bool = False
    httponly: bool = True
    samesite: Optional[str] = "lax"
    debug: bool = False
    log_level: Optional[str] = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def effective_store_args(self) -> Dict[str, Any]:
        if self.store_args is not None:
            return dict(self.store_args)
        if self.store == DEFAULT_STORE:
            return dict(DEFAULT_STORE_ARGS)
        return {}

    def cookie_path(self) -> Optional[str]:
        """Path component of `uri_base`, or None when no base is configured."""
        if not self.uri_base:
            return None
        return urlsplit(self.uri_base).path or "/"


_FIELDS = {f.name for f in dataclasses.fields(SessionConfig)} - {"extra"}


def config_from_mapping(raw: Mapping[str, Any]) -> SessionConfig:
    """Build a `SessionConfig` from a plain mapping.

    Unknown keys are kept in `extra` and logged, so configs written for a
    newer version still load.
    """
    if not isinstance(raw, Mapping):
        raise ConfigurationError(f"Session configuration must be a mapping, got {type(raw).__name__}")
    known = {k: v for k, v in raw.items() if k in _FIELDS}
    extra = {k: v for k, v in raw.items() if k not in _FIELDS}
    if extra:
        logger.warning("Ignoring unknown session config keys: %s", ", ".join(sorted(extra)))
    if known.get("store_args") is not None and not isinstance(known["store_args"], Mapping):
        raise ConfigurationError("store_args must be a mapping")
    if not known.get("cookie_name", DEFAULT_COOKIE_NAME):
        raise ConfigurationError("cookie_name must not be empty")
    return SessionConfig(**known, extra=extra)


def load_config(config_path: Optional[Path] = None) -> SessionConfig:
    """Load the session configuration from YAML.

    The path defaults to `$SESSION_CONFIG`, then `DEFAULT_CONFIG_PATH`. A
    missing file yields the defaults. The settings may sit under a
    top-level `session:` key or at the top level.
    """
    if config_path is None:
        env = os.environ.get(CONFIG_ENV)
        config_path = Path(env) if env else DEFAULT_CONFIG_PATH
    path = Path(config_path)
    if not path.exists():
        logger.debug("No session config at %s; using defaults", path)
        return SessionConfig()
    try:
        with path.open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid session config {path}: {e}") from e
    if isinstance(raw, Mapping) and isinstance(raw.get("session"), Mapping):
        section = dict(raw["session"])
        if "log_level" in raw and "log_level" not in section:
            section["log_level"] = raw["log_level"]
        raw = section
    logger.info("Loaded session config from %s", path)
    return config_from_mapping(raw)
