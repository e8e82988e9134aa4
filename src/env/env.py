from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from env.paths import refresh_token_file
from playlists.errors import ConfigIncomplete, TubelistError
from playlists.models import PRIVACY_STATUSES

# ------------------------------------------------------------
# Errors / helpers
# ------------------------------------------------------------


class ConfigError(TubelistError, RuntimeError):
    """A configuration value is present but unusable."""


def _as_bool(v: str) -> bool:
    return v.strip().lower() in {"1", "true", "yes", "on"}


def _as_int(v: str, default: int) -> int:
    try:
        return int(v)
    except (TypeError, ValueError):
        return default


def _as_float(v: str, default: float) -> float:
    try:
        return float(v)
    except (TypeError, ValueError):
        return default


def _mask(secret: str) -> str:
    if not secret:
        return "(unset)"
    return f"{secret[:4]}… ({len(secret)} chars)"


# ------------------------------------------------------------
# Logging environment (SAFE ANYWHERE)
# ------------------------------------------------------------


@dataclass(frozen=True)
class LoggingEnvironment:
    log_level: str
    log_retention: int
    verbose: bool
    quiet: bool


def get_logging_env() -> LoggingEnvironment:
    return LoggingEnvironment(
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
        log_retention=_as_int(os.environ.get("LOG_RETENTION", "30"), 30),
        verbose=_as_bool(os.environ.get("TUBELIST_VERBOSE", "0")),
        quiet=_as_bool(os.environ.get("TUBELIST_QUIET", "0")),
    )


# ------------------------------------------------------------
# Persisted refresh token
# ------------------------------------------------------------


def load_persisted_refresh_token(path: Optional[Path] = None) -> str:
    path = path or refresh_token_file()
    if not path.exists():
        return ""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logging.getLogger(__name__).warning(
            f"Ignoring unreadable refresh token file {path}: {e}"
        )
        return ""
    return str(data.get("refresh_token") or "") if isinstance(data, dict) else ""


def persist_refresh_token(token: str, path: Optional[Path] = None) -> Path:
    path = path or refresh_token_file()
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps({"refresh_token": token}, indent=2), encoding="utf-8")
    try:
        os.chmod(tmp, 0o600)
    except OSError:
        pass
    tmp.replace(path)
    return path


# ------------------------------------------------------------
# Full runtime environment
# ------------------------------------------------------------


class Environment:
    def __init__(self):
        # Logging snapshot (immutable)
        self._logging = get_logging_env()

        # ---- OAUTH ----
        self.client_id = os.environ.get("YOUTUBE_CLIENT_ID", "").strip()
        self.client_secret = os.environ.get("YOUTUBE_CLIENT_SECRET", "").strip()

        # A token rotated at runtime wins over the (older) configured one.
        self.refresh_token = (
            load_persisted_refresh_token()
            or os.environ.get("YOUTUBE_REFRESH_TOKEN", "").strip()
        )

        # ---- CACHE / DEDUPE ----
        self.cache_minutes = _as_int(os.environ.get("TUBELIST_CACHE_MINUTES", "10"), 10)
        if self.cache_minutes <= 0:
            self.cache_minutes = 10

        self.title_threshold = _as_float(
            os.environ.get("TUBELIST_TITLE_THRESHOLD", "0.1"), 0.1
        )
        if not 0.0 <= self.title_threshold <= 1.0:
            raise ConfigError(
                f"TUBELIST_TITLE_THRESHOLD must be within [0, 1]: {self.title_threshold}"
            )

        # ---- TOKEN ROTATION ----
        self.rotation_interval = _as_float(
            os.environ.get("TUBELIST_ROTATION_INTERVAL_SEC", str(7 * 24 * 60 * 60)),
            7 * 24 * 60 * 60,
        )
        if self.rotation_interval <= 0:
            raise ConfigError(
                "TUBELIST_ROTATION_INTERVAL_SEC must be positive: "
                f"{self.rotation_interval}"
            )

        # ---- REQUESTS ----
        self.request_timeout = _as_float(
            os.environ.get("TUBELIST_REQUEST_TIMEOUT", "30"), 30.0
        )
        self.default_privacy = (
            os.environ.get("TUBELIST_DEFAULT_PRIVACY", "private").strip().lower()
        )
        if self.default_privacy not in PRIVACY_STATUSES:
            raise ConfigError(
                f"TUBELIST_DEFAULT_PRIVACY must be one of {', '.join(PRIVACY_STATUSES)}: "
                f"{self.default_privacy!r}"
            )
        self.user = os.environ.get("TUBELIST_USER", "")

    @property
    def cache_ttl_seconds(self) -> float:
        return self.cache_minutes * 60.0

    def require_youtube_credentials(self) -> None:
        missing = [
            name
            for name, value in (
                ("YOUTUBE_CLIENT_ID", self.client_id),
                ("YOUTUBE_CLIENT_SECRET", self.client_secret),
                ("YOUTUBE_REFRESH_TOKEN", self.refresh_token),
            )
            if not value
        ]
        if missing:
            raise ConfigIncomplete(
                f"youtube oauth config is incomplete; missing: {', '.join(missing)}"
            )

    def as_dict(self) -> dict:
        return {
            "Logging": {
                "log_level": self.log_level,
                "log_retention": self.log_retention,
                "verbose": self.verbose,
                "quiet": self.quiet,
            },
            "OAuth": {
                "client_id": self.client_id or "(unset)",
                "client_secret": _mask(self.client_secret),
                "refresh_token": _mask(self.refresh_token),
                "rotation_interval_sec": self.rotation_interval,
            },
            "Behavior": {
                "cache_minutes": self.cache_minutes,
                "title_threshold": self.title_threshold,
                "request_timeout": self.request_timeout,
                "default_privacy": self.default_privacy,
            },
        }

    # ---- logging passthrough ----
    @property
    def log_level(self) -> str:
        return self._logging.log_level

    @property
    def log_retention(self) -> int:
        return self._logging.log_retention

    @property
    def verbose(self) -> bool:
        return self._logging.verbose

    @property
    def quiet(self) -> bool:
        return self._logging.quiet


_ENV: Optional[Environment] = None


def reset_env_caches() -> None:
    """Invalidate cached views of environment variables."""
    global _ENV
    _ENV = None


def get_env() -> Environment:
    global _ENV
    if _ENV is None:
        _ENV = Environment()
    return _ENV
