from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class LogState:
    """Where the current process is logging to. One instance per process."""

    initialized: bool = False
    command: Optional[str] = None
    run_id: Optional[str] = None
    log_file_path: Optional[Path] = None

    @property
    def log_dir(self) -> Optional[Path]:
        return self.log_file_path.parent if self.log_file_path else None

    def reset(self) -> None:
        self.initialized = False
        self.command = None
        self.run_id = None
        self.log_file_path = None


STATE = LogState()
