"""bootstrap.py

Process start-up for the tubelist command line.

Order at the entrypoint:
1) bootstrap_base_env()     load config/.env, stamp the run id
2) argparse
3) bootstrap_run_context()  stamp command / verbosity for logging
4) logger.init_logging()

Only this module writes shared run context into os.environ.
"""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from env import CONFIG_DIR, reset_env_caches

_LOADED: Optional[Path] = None
_DONE = False


def _dotenv_path(env_file: Optional[Path]) -> Path:
    if env_file is not None:
        return Path(env_file)
    override = os.environ.get("TUBELIST_ENV_FILE")
    if override:
        return Path(override).expanduser()
    return CONFIG_DIR / ".env"


def bootstrap_base_env(
    env_file: Optional[Path] = None,
    required: bool = False,
) -> Optional[Path]:
    """
    Load the dotenv file once per process. Shell variables win over the file.

    Returns the file that was loaded, or None when there was none.
    """
    global _LOADED, _DONE
    if _DONE:
        return _LOADED

    path = _dotenv_path(env_file)
    if path.is_file():
        load_dotenv(path, override=False)
        _LOADED = path
    elif required:
        raise FileNotFoundError(f"Missing env file: {path}")

    os.environ.setdefault(
        "TUBELIST_RUN_ID", datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    )

    reset_env_caches()
    _DONE = True
    return _LOADED


def bootstrap_run_context(
    *,
    command: str,
    verbose: Optional[bool] = None,
    quiet: Optional[bool] = None,
) -> None:
    os.environ["TUBELIST_COMMAND"] = command

    if verbose is not None:
        os.environ["TUBELIST_VERBOSE"] = "1" if verbose else "0"
    if quiet is not None:
        os.environ["TUBELIST_QUIET"] = "1" if quiet else "0"

    reset_env_caches()
