from __future__ import annotations

import argparse
import json
from typing import Any, Callable, Iterable

from rich.console import Console
from rich.table import Table
from rich.text import Text

from auth.errors import AuthInvalid
from env import ConfigError
from logger import get_logger
from playlists.errors import (
    ConfigIncomplete,
    InvalidRequest,
    NotFound,
    RemoteUnavailable,
)

# Exit codes
EXIT_OK = 0
EXIT_INVALID = 2
EXIT_NOT_FOUND = 3
EXIT_REMOTE = 4
EXIT_CONFIG = 5
EXIT_AUTH = 6

console = Console()
log = get_logger("tubelist.cli")


# ----------------------------
# Help dispatch (subparser-local)
# ----------------------------


def dispatch_subparser_help(
    parser: argparse.ArgumentParser, path: list[str] | None
) -> int:
    """
    Implements consistent `X help [subcmd ...]` behavior for a subtree parser.
    """
    if not path:
        parser.print_help()
        return 0

    try:
        parser.parse_args(path + ["--help"])
    except SystemExit:
        pass
    return 0


# ----------------------------
# Error → exit code
# ----------------------------


def _fail(message: str, code: int) -> int:
    console.print(Text(message, style="red"))
    return code


def run_guarded(action: Callable[[], int]) -> int:
    """Run a command body, mapping domain errors onto exit codes."""
    try:
        return action()
    except ConfigIncomplete as e:
        log.error(f"config.incomplete: {e}")
        return _fail(f"Configuration incomplete: {e}", EXIT_CONFIG)
    except ConfigError as e:
        log.error(f"config.invalid: {e}")
        return _fail(f"Configuration invalid: {e}", EXIT_CONFIG)
    except InvalidRequest as e:
        log.warning(f"request.invalid: {e}")
        return _fail(str(e), EXIT_INVALID)
    except NotFound as e:
        log.warning(f"request.not_found: {e}")
        return _fail(str(e), EXIT_NOT_FOUND)
    except AuthInvalid as e:
        log.error(f"auth.invalid: {e}")
        return _fail(f"OAuth INVALID - reauthentication required ({e})", EXIT_AUTH)
    except RemoteUnavailable as e:
        log.error(f"remote.unavailable: {e}")
        return _fail(f"Remote call failed: {e}", EXIT_REMOTE)


# ----------------------------
# CLI output helpers
# ----------------------------


def print_json(data: Any) -> None:
    console.print_json(json.dumps(data, ensure_ascii=False))


def print_table(title: str, headers: list[str], rows: Iterable[list[Any]]) -> None:
    rows = list(rows)
    if not rows:
        console.print("(no results)")
        return

    table = Table(title=title, title_justify="left")
    for h in headers:
        table.add_column(h)
    for row in rows:
        table.add_row(*(str(c) for c in row))
    console.print(table)
