"""
duplicates.py

Decides whether a candidate video is already effectively in a playlist.

Two independent checks, either one is enough:
1. identity: the video id is already a member
2. title: the canonical title is within `title_threshold` (normalized edit
   distance) of a title already in the playlist
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from catalog.base import CatalogClient
from logger import get_logger
from playlists.cache import CacheStore
from playlists.context import CallContext
from playlists.errors import VideoNotFound
from playlists.models import REASON_DUPLICATE_ID, REASON_DUPLICATE_TITLE, PlaylistRecord
from playlists.similarity import (
    DEFAULT_TITLE_THRESHOLD,
    is_similar_title,
    normalize_title,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class DuplicateCheck:
    reason: Optional[str]
    title: Optional[str] = None
    matched_title: Optional[str] = None

    @property
    def is_duplicate(self) -> bool:
        return self.reason is not None


class DuplicateDetector:
    def __init__(
        self,
        cache: CacheStore,
        client: CatalogClient,
        title_threshold: float = DEFAULT_TITLE_THRESHOLD,
    ) -> None:
        if title_threshold < 0:
            raise ValueError("title_threshold must be >= 0")
        self._cache = cache
        self._client = client
        self.title_threshold = title_threshold

    def check(
        self, ctx: CallContext, playlist: PlaylistRecord, video_id: str
    ) -> DuplicateCheck:
        if self._cache.contains(playlist.id, video_id):
            logger.debug(f"dedupe.id_match playlist={playlist.id} video={video_id}")
            return DuplicateCheck(reason=REASON_DUPLICATE_ID)

        title = self._client.get_video_title(ctx, video_id)
        if title is None:
            raise VideoNotFound(video_id)

        matched = self.find_similar_title(playlist.id, title)
        if matched is not None:
            logger.debug(
                f"dedupe.title_match playlist={playlist.id} video={video_id} "
                f"title={title!r} existing={matched!r}"
            )
            return DuplicateCheck(
                reason=REASON_DUPLICATE_TITLE, title=title, matched_title=matched
            )

        return DuplicateCheck(reason=None, title=title)

    def find_similar_title(self, playlist_id: str, title: str) -> Optional[str]:
        candidate = normalize_title(title)
        for existing in self._cache.titles(playlist_id):
            if is_similar_title(
                normalize_title(existing), candidate, self.title_threshold
            ):
                return existing
        return None
