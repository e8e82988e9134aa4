"""
Per-command log files: logs/<command>/<command>-<run_id>.log
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

FILE_FORMAT = "%(asctime)s | [%(levelname)s] | %(threadName)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def log_file_for(log_dir: Path, command: str, run_id: str) -> Path:
    return log_dir / f"{command}-{run_id}.log"


def build_file_handler(logfile: Path) -> logging.FileHandler:
    logfile.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(logfile, encoding="utf-8")
    handler.setLevel(logging.NOTSET)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def repoint_file_handler(handler: logging.FileHandler, logfile: Path) -> None:
    """Switch an attached handler to another file (e.g. a new command)."""
    logfile.parent.mkdir(parents=True, exist_ok=True)

    handler.acquire()
    try:
        handler.close()
        handler.baseFilename = str(logfile)
        handler.stream = handler._open()
    finally:
        handler.release()


def prune_command_logs(
    log_dir: Path, command: str, keep: int, active: Optional[Path] = None
) -> int:
    """
    Delete all but the `keep` newest <command>-*.log files in log_dir.

    The active file is never deleted and does not count against `keep`.
    Returns how many files were removed.
    """
    if keep <= 0 or not log_dir.is_dir():
        return 0

    candidates = [p for p in log_dir.glob(f"{command}-*.log") if p != active]
    candidates.sort(key=lambda p: p.stat().st_mtime, reverse=True)

    removed = 0
    for old in candidates[keep:]:
        try:
            old.unlink()
            removed += 1
        except FileNotFoundError:
            continue
    return removed
