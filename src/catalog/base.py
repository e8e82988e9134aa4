from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from playlists.context import CallContext
from playlists.models import Page, PlaylistRecord, VideoRecord

# YouTube API max page size for playlists.list / playlistItems.list
PAGE_SIZE = 50


class CatalogClient(ABC):
    """
    Abstract interface to the remote video catalog.

    Implementations raise playlists.errors.RemoteUnavailable (or a subclass)
    for any network / API failure and never retry internally.
    """

    name: str

    @abstractmethod
    def list_playlists(
        self, ctx: CallContext, page_token: Optional[str] = None
    ) -> Page[PlaylistRecord]:
        """One page of playlists owned by the authorized principal."""
        raise NotImplementedError

    @abstractmethod
    def list_playlist_items(
        self, ctx: CallContext, playlist_id: str, page_token: Optional[str] = None
    ) -> Page[VideoRecord]:
        """One page of videos in a playlist."""
        raise NotImplementedError

    @abstractmethod
    def get_video_title(self, ctx: CallContext, video_id: str) -> Optional[str]:
        """Canonical title of a video, or None when the video does not exist."""
        raise NotImplementedError

    @abstractmethod
    def insert_playlist_item(
        self, ctx: CallContext, playlist_id: str, video_id: str
    ) -> str:
        """Append a video to a playlist. Returns the playlist item id."""
        raise NotImplementedError

    @abstractmethod
    def create_playlist(
        self, ctx: CallContext, title: str, privacy: str
    ) -> PlaylistRecord:
        raise NotImplementedError

    # ------------------------------------------------------------
    # Pagination helpers
    # ------------------------------------------------------------

    def fetch_all_playlists(self, ctx: CallContext) -> List[PlaylistRecord]:
        results: List[PlaylistRecord] = []
        page_token: Optional[str] = None

        while True:
            page = self.list_playlists(ctx, page_token)
            results.extend(page.items)
            page_token = page.next_page_token
            if not page_token:
                break

        return results

    def fetch_all_playlist_items(
        self, ctx: CallContext, playlist_id: str
    ) -> List[VideoRecord]:
        results: List[VideoRecord] = []
        page_token: Optional[str] = None

        while True:
            page = self.list_playlist_items(ctx, playlist_id, page_token)
            results.extend(page.items)
            page_token = page.next_page_token
            if not page_token:
                break

        return results
