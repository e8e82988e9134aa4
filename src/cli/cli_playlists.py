from __future__ import annotations

import argparse

from cli.common import (
    EXIT_OK,
    console,
    dispatch_subparser_help,
    print_json,
    print_table,
    run_guarded,
)
from client import build_runtime
from env import get_env
from logger import get_logger
from playlists.context import CallContext
from playlists.models import PRIVACY_STATUSES

log = get_logger("tubelist.cli.playlists")


# ------------------------------------------------------------
# Parser
# ------------------------------------------------------------


def build_playlist_parser(subparsers: argparse._SubParsersAction) -> None:
    pl = subparsers.add_parser("playlist", help="Playlist operations")
    sub = pl.add_subparsers(dest="playlist_cmd", required=True)

    help_p = sub.add_parser("help", help="Show help for playlist")
    help_p.add_argument("path", nargs="*", help="Subcommand path")
    help_p.set_defaults(action="help", _help_parser=pl)

    add_p = sub.add_parser("add", help="Add a video to a playlist (fuzzy name)")
    add_p.add_argument("name", help="Playlist name (closest match is used)")
    add_p.add_argument("video", help="Video id or URL")
    add_p.add_argument(
        "--force", action="store_true", help="Skip duplicate checks and insert anyway"
    )
    add_p.add_argument("--user", default=None, help="Who requested the addition")
    add_p.set_defaults(action="add")

    items_p = sub.add_parser("items", help="List the videos in a playlist")
    items_p.add_argument("name", help="Playlist name")
    items_p.add_argument("--fuzzy", action="store_true", help="Closest-name match")
    items_p.add_argument(
        "--metadata", action="store_true", help="Include recorded addition metadata"
    )
    items_p.set_defaults(action="items")

    create_p = sub.add_parser("create", help="Create a playlist")
    create_p.add_argument("name", help="Playlist title")
    create_p.add_argument("--privacy", choices=PRIVACY_STATUSES, default=None)
    create_p.set_defaults(action="create")

    meta_p = sub.add_parser("meta", help="Show addition metadata for one video")
    meta_p.add_argument("name", help="Playlist name")
    meta_p.add_argument("video_id", help="Video id")
    meta_p.add_argument(
        "--exact", action="store_true", help="Require an exact playlist name"
    )
    meta_p.set_defaults(action="meta")

    for p in (add_p, items_p, create_p, meta_p):
        p.add_argument("--json", action="store_true", help="Print raw JSON")
        p.add_argument("--verbose", action="store_true", help="Verbose console output")
        p.add_argument("--quiet", action="store_true", help="Suppress log output")


# ------------------------------------------------------------
# Handlers
# ------------------------------------------------------------


def handle_playlist(args: argparse.Namespace) -> int:
    if args.action == "help":
        return dispatch_subparser_help(
            args._help_parser, list(getattr(args, "path", []) or [])
        )

    handlers = {
        "add": _handle_add,
        "items": _handle_items,
        "create": _handle_create,
        "meta": _handle_meta,
    }
    handler = handlers.get(args.action)
    if handler is None:
        raise RuntimeError(f"Unknown playlist action: {args.action}")

    return run_guarded(lambda: handler(args))


def _context() -> CallContext:
    return CallContext(timeout=get_env().request_timeout)


def _handle_add(args: argparse.Namespace) -> int:
    rt = build_runtime()
    user = args.user if args.user is not None else get_env().user

    outcome = rt.service.add_video(
        _context(), args.name, args.video, force=args.force, user=user
    )

    if args.json:
        print_json(outcome.as_dict())
    elif outcome.added:
        console.print(
            f"[green]Added[/green] {outcome.video_id} to "
            f"[bold]{outcome.playlist_title}[/bold]"
        )
    else:
        console.print(
            f"[yellow]Skipped[/yellow] {outcome.video_id}: {outcome.reason} "
            f"([bold]{outcome.playlist_title}[/bold])"
        )
    return EXIT_OK


def _handle_items(args: argparse.Namespace) -> int:
    rt = build_runtime()
    ctx = _context()

    if args.metadata:
        rows, playlist = rt.service.items_with_metadata(ctx, args.name, args.fuzzy)
    else:
        items, playlist = rt.service.list_items(ctx, args.name, args.fuzzy)
        rows = [it.as_dict() for it in items]

    if args.json:
        print_json({"playlistId": playlist.id, "title": playlist.title, "items": rows})
        return EXIT_OK

    headers = ["videoId", "title"]
    if args.metadata:
        headers += ["date", "user", "force"]
    print_table(
        f"{playlist.title} ({playlist.id})",
        headers,
        ([row.get(h, "") for h in headers] for row in rows),
    )
    return EXIT_OK


def _handle_create(args: argparse.Namespace) -> int:
    rt = build_runtime()
    record = rt.service.create_playlist(_context(), args.name, args.privacy)

    if args.json:
        print_json({"playlistId": record.id, "title": record.title})
    else:
        console.print(f"[green]Created[/green] {record.title} ({record.id})")
    return EXIT_OK


def _handle_meta(args: argparse.Namespace) -> int:
    rt = build_runtime()
    meta = rt.service.video_metadata(
        _context(), args.name, args.video_id, fuzzy=not args.exact
    )

    if args.json:
        print_json(meta)
        return EXIT_OK

    for key, value in meta.items():
        console.print(f"  {key:<12} = {value}", markup=False)
    return EXIT_OK
