"""
client.py

YouTube Data API v3 implementation of the catalog client.

Responsibilities:
- Build the API client from the Token Manager's current refresh token
- Paginated playlist / playlist item listings
- Video title lookup, playlist item insert, playlist create
- HTTP → domain error translation (see errors.py)

Does NOT:
- Cache anything
- Retry
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Optional

import google_auth_httplib2
import httplib2
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

from auth.providers.youtube import build_credentials
from auth.tokens import TokenManager
from catalog.base import PAGE_SIZE, CatalogClient
from catalog.youtube.errors import REMOTE_ERRORS, translate_error
from logger import get_logger
from playlists.context import CallContext
from playlists.errors import ConfigIncomplete
from playlists.models import Page, PlaylistRecord, VideoRecord

logger = get_logger(__name__)

USER_AGENT = "tubelist-youtube/1.0"
DEFAULT_HTTP_TIMEOUT_SEC = 30.0


class YouTubeCatalogClient(CatalogClient):
    name = "youtube"

    def __init__(
        self,
        tokens: TokenManager,
        client_id: str,
        client_secret: str,
        *,
        http_timeout: float = DEFAULT_HTTP_TIMEOUT_SEC,
    ) -> None:
        if not client_id or not client_secret:
            raise ConfigIncomplete("youtube oauth config is incomplete")

        self._tokens = tokens
        self._client_id = client_id
        self._client_secret = client_secret
        self._http_timeout = http_timeout

        self._lock = threading.Lock()
        self._service: Any = None
        self._credentials: Optional[Credentials] = None
        self._built_for: Optional[str] = None

    # ------------------------------------------------------------
    # Client construction
    # ------------------------------------------------------------

    def _current(self) -> tuple[Any, Credentials]:
        """API resource + credentials for the refresh token held right now."""
        refresh_token = self._tokens.refresh_token
        with self._lock:
            if self._service is None or self._built_for != refresh_token:
                creds = build_credentials(
                    self._client_id, self._client_secret, refresh_token
                )
                self._service = build(
                    "youtube",
                    "v3",
                    credentials=creds,
                    cache_discovery=False,
                )
                self._credentials = creds
                self._built_for = refresh_token
                logger.debug("youtube.client.built")
            return self._service, self._credentials

    def _http(self, ctx: CallContext, creds: Credentials) -> google_auth_httplib2.AuthorizedHttp:
        remaining = ctx.remaining()
        timeout = (
            self._http_timeout if remaining is None else min(remaining, self._http_timeout)
        )
        http = httplib2.Http(timeout=max(timeout, 0.001))
        http.user_agent = USER_AGENT
        return google_auth_httplib2.AuthorizedHttp(creds, http=http)

    def _execute(
        self,
        ctx: CallContext,
        operation: str,
        make_request: Callable[[Any], Any],
    ) -> dict:
        ctx.check()
        youtube, creds = self._current()
        try:
            return make_request(youtube).execute(http=self._http(ctx, creds))
        except REMOTE_ERRORS as e:
            err = translate_error(e, operation, ctx)
            logger.warning(f"youtube.call.failed {operation}: {err}")
            raise err from e

    # ------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------

    def list_playlists(
        self, ctx: CallContext, page_token: Optional[str] = None
    ) -> Page[PlaylistRecord]:
        resp = self._execute(
            ctx,
            "playlists.list",
            lambda yt: yt.playlists().list(
                part="id,snippet",
                mine=True,
                maxResults=PAGE_SIZE,
                pageToken=page_token,
            ),
        )

        items = []
        for it in resp.get("items", []):
            pid = it.get("id")
            title = (it.get("snippet") or {}).get("title", "")
            if isinstance(pid, str):
                items.append(PlaylistRecord(id=pid, title=str(title)))

        return Page(items=items, next_page_token=resp.get("nextPageToken") or None)

    def list_playlist_items(
        self, ctx: CallContext, playlist_id: str, page_token: Optional[str] = None
    ) -> Page[VideoRecord]:
        resp = self._execute(
            ctx,
            "playlistItems.list",
            lambda yt: yt.playlistItems().list(
                part="contentDetails,snippet",
                playlistId=playlist_id,
                maxResults=PAGE_SIZE,
                pageToken=page_token,
            ),
        )

        items = []
        for it in resp.get("items", []):
            cd = it.get("contentDetails") or {}
            video_id = cd.get("videoId")
            title = (it.get("snippet") or {}).get("title", "")
            if isinstance(video_id, str):
                items.append(VideoRecord(id=video_id, title=str(title)))

        return Page(items=items, next_page_token=resp.get("nextPageToken") or None)

    def get_video_title(self, ctx: CallContext, video_id: str) -> Optional[str]:
        resp = self._execute(
            ctx,
            "videos.list",
            lambda yt: yt.videos().list(part="snippet", id=video_id),
        )
        items = resp.get("items") or []
        if not items:
            return None
        return str((items[0].get("snippet") or {}).get("title", ""))

    # ------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------

    def insert_playlist_item(
        self, ctx: CallContext, playlist_id: str, video_id: str
    ) -> str:
        resp = self._execute(
            ctx,
            f"playlistItems.insert {video_id}",
            lambda yt: yt.playlistItems().insert(
                part="snippet",
                body={
                    "snippet": {
                        "playlistId": playlist_id,
                        "resourceId": {"kind": "youtube#video", "videoId": video_id},
                    }
                },
            ),
        )
        return str(resp.get("id", ""))

    def create_playlist(
        self, ctx: CallContext, title: str, privacy: str
    ) -> PlaylistRecord:
        resp = self._execute(
            ctx,
            "playlists.insert",
            lambda yt: yt.playlists().insert(
                part="snippet,status",
                body={
                    "snippet": {"title": title},
                    "status": {"privacyStatus": privacy},
                },
            ),
        )
        return PlaylistRecord(id=str(resp.get("id", "")), title=title)
