from __future__ import annotations

import argparse
import signal
import threading

from rich.text import Text

from auth.base import AuthHealthStatus
from auth.providers.youtube import YouTubeOAuthProvider
from cli.common import (
    EXIT_AUTH,
    EXIT_OK,
    console,
    dispatch_subparser_help,
    run_guarded,
)
from client import build_runtime
from env import get_env, persist_refresh_token
from logger import get_logger
from playlists.errors import ConfigIncomplete

log = get_logger("tubelist.cli.auth")


# ------------------------------------------------------------
# Parser
# ------------------------------------------------------------


def build_auth_parser(subparsers: argparse._SubParsersAction) -> None:
    auth = subparsers.add_parser(
        "auth",
        help="OAuth setup, health checks and refresh-token rotation",
    )
    sub = auth.add_subparsers(dest="auth_cmd", required=True)

    help_p = sub.add_parser("help", help="Show help for auth")
    help_p.add_argument("path", nargs="*", help="Subcommand path")
    help_p.set_defaults(action="help", _help_parser=auth)

    url_p = sub.add_parser("url", help="Print the OAuth consent URL")
    url_p.set_defaults(action="url")

    code_p = sub.add_parser(
        "exchange", help="Exchange a consent code for a refresh token and save it"
    )
    code_p.add_argument("code", help="Authorization code from the consent page")
    code_p.set_defaults(action="exchange")

    check_p = sub.add_parser("check", help="Validate the current refresh token")
    check_p.set_defaults(action="check")

    rotate_p = sub.add_parser("rotate", help="Run one rotation exchange now")
    rotate_p.set_defaults(action="rotate")

    keep_p = sub.add_parser(
        "keepalive", help="Run the rotation loop in the foreground until interrupted"
    )
    keep_p.set_defaults(action="keepalive")

    for p in (url_p, code_p, check_p, rotate_p, keep_p):
        p.add_argument("--verbose", action="store_true", help="Verbose console output")
        p.add_argument("--quiet", action="store_true", help="Suppress console output")


# ------------------------------------------------------------
# Helpers
# ------------------------------------------------------------


def _provider() -> YouTubeOAuthProvider:
    env = get_env()
    if not env.client_id or not env.client_secret:
        raise ConfigIncomplete(
            "YOUTUBE_CLIENT_ID and YOUTUBE_CLIENT_SECRET are required"
        )
    return YouTubeOAuthProvider(env.client_id, env.client_secret)


# ------------------------------------------------------------
# Handler
# ------------------------------------------------------------


def handle_auth(args: argparse.Namespace) -> int:
    if args.action == "help":
        return dispatch_subparser_help(
            args._help_parser, list(getattr(args, "path", []) or [])
        )

    handlers = {
        "url": _handle_url,
        "exchange": _handle_exchange,
        "check": _handle_check,
        "rotate": _handle_rotate,
        "keepalive": _handle_keepalive,
    }
    handler = handlers.get(args.action)
    if handler is None:
        raise RuntimeError(f"Unknown auth action: {args.action}")

    return run_guarded(lambda: handler(args))


def _handle_url(args: argparse.Namespace) -> int:
    console.print(_provider().authorization_url(), markup=False, soft_wrap=True)
    return EXIT_OK


def _handle_exchange(args: argparse.Namespace) -> int:
    token = _provider().exchange_code(args.code)
    if not token:
        console.print(
            Text(
                "No refresh token received; revoke the app's access and retry "
                "so consent is prompted again.",
                style="yellow",
            )
        )
        return EXIT_AUTH

    path = persist_refresh_token(token)
    log.info(f"oauth.exchange.saved path={path}")
    console.print(Text(f"Saved refresh token to {path}", style="green"))
    return EXIT_OK


def _handle_check(args: argparse.Namespace) -> int:
    env = get_env()
    env.require_youtube_credentials()

    result = _provider().health_check(env.refresh_token)

    if result.status == AuthHealthStatus.OK:
        msg = Text("OAuth OK", style="green")
        if args.verbose:
            msg.append(" (refresh token valid and usable)", style="dim")
        console.print(msg)
        return EXIT_OK

    if result.status == AuthHealthStatus.OK_API_QUOTA:
        msg = Text("OAuth OK", style="green")
        msg.append(" (API quota exhausted)", style="yellow")
        console.print(msg)
        return EXIT_OK

    console.print(Text(result.message, style="red"))
    return EXIT_AUTH


def _handle_rotate(args: argparse.Namespace) -> int:
    rt = build_runtime()
    if rt.tokens.rotate_once():
        console.print(Text("Refresh token rotated and saved", style="green"))
    else:
        console.print("Refresh token unchanged")
    return EXIT_OK


def _handle_keepalive(args: argparse.Namespace) -> int:
    rt = build_runtime()
    done = threading.Event()

    def _stop(signum, frame) -> None:
        log.info(f"keepalive.signal {signum}")
        done.set()

    signal.signal(signal.SIGINT, _stop)
    signal.signal(signal.SIGTERM, _stop)

    with rt:
        log.info(
            f"keepalive.start interval={rt.tokens.interval:.0f}s (Ctrl-C to stop)"
        )
        done.wait()

    log.info("keepalive.stop")
    return EXIT_OK
