from env.env import (
    ConfigError,
    Environment,
    get_env,
    get_logging_env,
    load_persisted_refresh_token,
    persist_refresh_token,
    reset_env_caches,
)

from env.paths import CONFIG_DIR, PROJECT_ROOT

__all__ = [
    "CONFIG_DIR",
    "ConfigError",
    "Environment",
    "PROJECT_ROOT",
    "get_env",
    "get_logging_env",
    "load_persisted_refresh_token",
    "persist_refresh_token",
    "reset_env_caches",
]
