from .config import DEFAULT_STORE_ARGS, SessionConfig, config_from_mapping, load_config

__all__ = ["DEFAULT_STORE_ARGS", "SessionConfig", "config_from_mapping", "load_config"]
