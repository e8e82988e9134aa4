from __future__ import annotations

import logging
import re
import sys

from rich.console import Console
from rich.logging import RichHandler

from env import get_logging_env

# Google OAuth refresh tokens start with "1//", access tokens with "ya29."
_TOKEN_PATTERN = re.compile(r"\b(1//|ya29\.)[A-Za-z0-9_\-./]{4,}")


class ConsoleGateFilter(logging.Filter):
    """Drop console output when quiet mode is enabled."""

    def filter(self, record: logging.LogRecord) -> bool:
        return not get_logging_env().quiet


class RedactTokensFilter(logging.Filter):
    """Mask OAuth tokens in rendered messages, for every handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = _TOKEN_PATTERN.sub(lambda m: f"{m.group(1)}***", message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def build_console_handler(level: int = logging.INFO) -> logging.Handler:
    # Log output goes to stderr; stdout is reserved for command results.
    handler = RichHandler(
        console=Console(file=sys.stderr, soft_wrap=True),
        show_level=True,
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler.addFilter(ConsoleGateFilter())
    return handler
