from __future__ import annotations

import argparse

from cli.common import EXIT_OK, console, dispatch_subparser_help, print_json, run_guarded
from env import get_env
from env.paths import additions_file, logs_dir, refresh_token_file


def build_env_parser(subparsers: argparse._SubParsersAction) -> None:
    env = subparsers.add_parser("env", help="Configuration utilities")
    sub = env.add_subparsers(dest="env_cmd", required=True)

    help_p = sub.add_parser("help", help="Show help for env")
    help_p.add_argument("path", nargs="*", help="Subcommand path")
    help_p.set_defaults(action="help", _help_parser=env)

    dump_p = sub.add_parser("dump", help="Show resolved configuration (secrets masked)")
    dump_p.add_argument("--json", action="store_true", help="Print raw JSON")
    dump_p.set_defaults(action="dump")

    check_p = sub.add_parser(
        "check", help="Exit non-zero unless YouTube OAuth config is complete"
    )
    check_p.set_defaults(action="check")


def handle_env(args: argparse.Namespace) -> int:
    if args.action == "help":
        return dispatch_subparser_help(
            args._help_parser, list(getattr(args, "path", []) or [])
        )

    if args.action == "dump":
        as_json = bool(getattr(args, "json", False))
        return run_guarded(lambda: handle_env_dump(as_json=as_json))

    if args.action == "check":
        return run_guarded(_handle_check)

    raise RuntimeError(f"Unknown env action: {args.action}")


def _paths() -> dict:
    token_file = refresh_token_file()
    return {
        "logs": str(logs_dir()),
        "refresh_token_file": str(token_file),
        "refresh_token_persisted": token_file.exists(),
        "additions_file": str(additions_file()),
    }


def handle_env_dump(as_json: bool = False) -> int:
    data = get_env().as_dict()
    data["Paths"] = _paths()

    if as_json:
        print_json(data)
        return EXIT_OK

    console.print("\n[bold]Runtime Environment[/bold]")
    console.print("─" * 50)

    for section, values in data.items():
        console.print(f"\n[bold cyan]{section}[/bold cyan]")
        for key, value in values.items():
            console.print(f"  {key:<24} = {value}", markup=False)

    console.print()
    return EXIT_OK


def _handle_check() -> int:
    get_env().require_youtube_credentials()
    console.print("[green]YouTube OAuth configuration complete[/green]")
    return EXIT_OK
