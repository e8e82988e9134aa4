"""
Process-wide logging.

Handlers live on the root logger only; module loggers propagate. One file per
command run plus an optional Rich console on stderr.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import Optional

from env import get_logging_env
from env.paths import module_logs_dir
from .console import RedactTokensFilter, build_console_handler
from .file import (
    build_file_handler,
    log_file_for,
    prune_command_logs,
    repoint_file_handler,
)
from .state import STATE

DEFAULT_COMMAND = "tubelist"

_NOISY_LOGGERS = {
    "googleapiclient.discovery_cache": logging.ERROR,
    "googleapiclient": logging.WARNING,
    "google": logging.WARNING,
    "google_auth_httplib2": logging.WARNING,
    "google_auth_oauthlib": logging.WARNING,
    "urllib3": logging.WARNING,
}


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def _level(name: str) -> int:
    value = logging.getLevelName(str(name).upper())
    return value if isinstance(value, int) else logging.INFO


def _run_id() -> str:
    run_id = os.environ.get("TUBELIST_RUN_ID")
    if not run_id:
        run_id = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        os.environ["TUBELIST_RUN_ID"] = run_id
    return run_id


def init_logging(command: Optional[str] = None) -> None:
    """
    Attach (or re-target) the root handlers for this command run.

    Calling it again for the same command only re-applies the level; a new
    command moves the existing file handler instead of adding another.
    """
    env = get_logging_env()
    for name, lvl in _NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(lvl)

    command = command or os.environ.get("TUBELIST_COMMAND") or DEFAULT_COMMAND
    run_id = _run_id()
    logfile = log_file_for(module_logs_dir(command), command, run_id)
    level = logging.DEBUG if env.verbose else _level(env.log_level)

    root = logging.getLogger()
    root.setLevel(level)

    if STATE.initialized and STATE.log_file_path == logfile:
        return

    file_handler = next(
        (h for h in root.handlers if isinstance(h, logging.FileHandler)), None
    )
    for h in list(root.handlers):
        root.removeHandler(h)

    if file_handler is None:
        file_handler = build_file_handler(logfile)
    else:
        repoint_file_handler(file_handler, logfile)

    handlers = [file_handler]
    if not env.quiet:
        handlers.append(build_console_handler(level))

    redact = RedactTokensFilter()
    for h in handlers:
        if not any(isinstance(f, RedactTokensFilter) for f in h.filters):
            h.addFilter(redact)
        root.addHandler(h)

    removed = prune_command_logs(
        logfile.parent, command, env.log_retention, active=logfile
    )

    STATE.initialized = True
    STATE.command = command
    STATE.run_id = run_id
    STATE.log_file_path = logfile

    if removed:
        get_logger(__name__).debug(f"logs.pruned command={command} removed={removed}")


def reset_logging() -> None:
    """Detach and close all root handlers and forget the current run."""
    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    STATE.reset()


__all__ = ["DEFAULT_COMMAND", "STATE", "get_logger", "init_logging", "reset_logging"]
