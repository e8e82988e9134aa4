from __future__ import annotations

import os
from pathlib import Path

# ---------------------------------------------------------------------
# Project root
# ---------------------------------------------------------------------

# This file lives in src/env/, so project root is two levels up
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"


# ---------------------------------------------------------------------
# Base directories (override-friendly)
# ---------------------------------------------------------------------


def _resolve_dir(env_var: str, default: Path) -> Path:
    """
    Resolve a directory path from an environment variable or default.
    Ensures the directory exists.
    """
    raw = os.environ.get(env_var)
    path = Path(raw).expanduser().resolve() if raw else default
    path.mkdir(parents=True, exist_ok=True)
    return path


def logs_dir() -> Path:
    return _resolve_dir("TUBELIST_LOGS_DIR", PROJECT_ROOT / "logs")


def auth_dir() -> Path:
    """OAuth material (persisted refresh token)."""
    return _resolve_dir("TUBELIST_AUTH_DIR", PROJECT_ROOT / "auth")


def data_dir() -> Path:
    """Additions store and other small state files."""
    return _resolve_dir("TUBELIST_DATA_DIR", PROJECT_ROOT / "data")


# ---------------------------------------------------------------------
# Utility / internal paths
# ---------------------------------------------------------------------


def refresh_token_file(filename: str = "refresh_token.json") -> Path:
    return auth_dir() / filename


def additions_file(filename: str = "additions.json") -> Path:
    return data_dir() / filename


# ---------------------------------------------------------------------
# Log layout helpers
# ---------------------------------------------------------------------


def module_logs_dir(module: str) -> Path:
    """
    Base log directory for a CLI command (e.g. add, auth).
    """
    path = logs_dir() / module
    path.mkdir(parents=True, exist_ok=True)
    return path
