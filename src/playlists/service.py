"""
service.py

Playlist orchestration: add / list / create on top of the cache, resolver
and duplicate detector.

Known gap: two concurrent add_video() calls for the same playlist can both
pass the duplicate checks before either inserts. Writes are not serialized
per playlist.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from catalog.base import CatalogClient
from logger import get_logger
from playlists.additions import AdditionRecord, AdditionsStore
from playlists.cache import DEFAULT_CACHE_TTL_SECONDS, CacheStore
from playlists.context import CallContext
from playlists.duplicates import DuplicateDetector
from playlists.errors import InvalidRequest, PlaylistNotFound, RemoteUnavailable
from playlists.models import (
    PRIVACY_PRIVATE,
    PRIVACY_STATUSES,
    AddOutcome,
    PlaylistItem,
    PlaylistRecord,
    VideoRecord,
)
from playlists.references import parse_video_reference
from playlists.resolver import PlaylistResolver
from playlists.similarity import DEFAULT_TITLE_THRESHOLD

logger = get_logger(__name__)


class PlaylistService:
    def __init__(
        self,
        client: CatalogClient,
        *,
        cache_ttl: float = DEFAULT_CACHE_TTL_SECONDS,
        title_threshold: float = DEFAULT_TITLE_THRESHOLD,
        default_privacy: str = PRIVACY_PRIVATE,
        additions: Optional[AdditionsStore] = None,
        cache: Optional[CacheStore] = None,
    ) -> None:
        if default_privacy not in PRIVACY_STATUSES:
            raise InvalidRequest(f"unsupported privacy status: {default_privacy!r}")

        self.client = client
        self.cache = cache if cache is not None else CacheStore(client, cache_ttl)
        self.resolver = PlaylistResolver(self.cache)
        self.detector = DuplicateDetector(self.cache, client, title_threshold)
        self.additions = additions
        self.default_privacy = default_privacy

    # ------------------------------------------------------------
    # Add
    # ------------------------------------------------------------

    def add_video(
        self,
        ctx: CallContext,
        playlist_name: str,
        reference: str,
        force: bool = False,
        user: str = "",
    ) -> AddOutcome:
        video_id = parse_video_reference(reference)

        self.cache.ensure_fresh(ctx)
        playlist = self.resolver.fuzzy(playlist_name)
        if playlist is None:
            raise PlaylistNotFound(playlist_name)

        title: Optional[str] = None
        if not force:
            check = self.detector.check(ctx, playlist, video_id)
            if check.is_duplicate:
                logger.info(
                    f"playlist.add.skip {check.reason} playlist={playlist.title!r} "
                    f"video={video_id}"
                )
                return AddOutcome(
                    added=False,
                    playlist_id=playlist.id,
                    playlist_title=playlist.title,
                    video_id=video_id,
                    reason=check.reason,
                )
            title = check.title

        self.client.insert_playlist_item(ctx, playlist.id, video_id)

        if title is None:
            title = self._title_after_forced_insert(ctx, video_id)

        self.cache.patch(playlist.id, VideoRecord(id=video_id, title=title))
        self._record_addition(playlist_name, video_id, user, force)

        logger.info(
            f"playlist.add.ok playlist={playlist.title!r} video={video_id} force={force}"
        )
        return AddOutcome(
            added=True,
            playlist_id=playlist.id,
            playlist_title=playlist.title,
            video_id=video_id,
        )

    def _title_after_forced_insert(self, ctx: CallContext, video_id: str) -> str:
        # The insert already succeeded; a missing title only weakens future
        # title checks, so do not fail the call over it.
        try:
            return self.client.get_video_title(ctx, video_id) or ""
        except RemoteUnavailable as e:
            logger.warning(f"Could not fetch title for {video_id} after insert: {e}")
            return ""

    def _record_addition(
        self, playlist_name: str, video_id: str, user: str, force: bool
    ) -> None:
        if self.additions is None:
            return
        try:
            self.additions.record(video_id, playlist_name, user=user, force=force)
        except OSError as e:
            logger.warning(f"Failed to record addition of {video_id}: {e}")

    # ------------------------------------------------------------
    # List
    # ------------------------------------------------------------

    def resolve_playlist(
        self, ctx: CallContext, playlist_name: str, fuzzy: bool
    ) -> PlaylistRecord:
        self.cache.ensure_fresh(ctx)
        playlist = self.resolver.resolve(playlist_name, fuzzy)
        if playlist is None:
            raise PlaylistNotFound(playlist_name)
        return playlist

    def list_items(
        self, ctx: CallContext, playlist_name: str, fuzzy: bool = False
    ) -> Tuple[List[PlaylistItem], PlaylistRecord]:
        playlist = self.resolve_playlist(ctx, playlist_name, fuzzy)

        videos = self.cache.membership(playlist.id)
        if videos is None:
            logger.debug(f"cache.membership.miss playlist={playlist.id}")
            fetched = self.client.fetch_all_playlist_items(ctx, playlist.id)
            self.cache.set_membership(playlist.id, fetched)
            videos = {v.id: v for v in fetched}

        items = [PlaylistItem(video_id=v.id, title=v.title) for v in videos.values()]
        return items, playlist

    def items_with_metadata(
        self, ctx: CallContext, playlist_name: str, fuzzy: bool = False
    ) -> Tuple[List[dict], PlaylistRecord]:
        items, playlist = self.list_items(ctx, playlist_name, fuzzy)
        known: Dict[str, AdditionRecord] = (
            self.additions.all() if self.additions is not None else {}
        )

        out: List[dict] = []
        for it in items:
            row = it.as_dict()
            rec = known.get(it.video_id)
            row.update(
                {
                    "date": rec.date if rec else "",
                    "user": rec.user if rec else "",
                    "playlist": rec.playlist if rec else "",
                    "force": rec.force if rec else False,
                }
            )
            out.append(row)
        return out, playlist

    def video_metadata(
        self, ctx: CallContext, playlist_name: str, video_id: str, fuzzy: bool = True
    ) -> dict:
        if not playlist_name or not playlist_name.strip():
            raise InvalidRequest("playlist name is required")
        if not video_id or not video_id.strip():
            raise InvalidRequest("video id is required")

        playlist = self.resolve_playlist(ctx, playlist_name, fuzzy)
        rec = self.additions.get(video_id) if self.additions is not None else None

        return {
            "playlistId": playlist.id,
            "title": playlist.title,
            "videoId": video_id,
            "date": rec.date if rec else "",
            "user": rec.user if rec else "",
            "playlist": rec.playlist if rec else "",
            "force": rec.force if rec else False,
        }

    # ------------------------------------------------------------
    # Create
    # ------------------------------------------------------------

    def create_playlist(
        self, ctx: CallContext, name: str, privacy: Optional[str] = None
    ) -> PlaylistRecord:
        if not name or not name.strip():
            raise InvalidRequest("playlist name required")

        privacy = (privacy or self.default_privacy).strip().lower()
        if privacy not in PRIVACY_STATUSES:
            raise InvalidRequest(f"unsupported privacy status: {privacy!r}")

        record = self.client.create_playlist(ctx, name, privacy)
        self.cache.append_playlist(record)

        logger.info(f"playlist.create.ok id={record.id} title={record.title!r}")
        return record
