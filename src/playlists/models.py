from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Generic, List, Optional, Tuple, TypeVar

T = TypeVar("T")

REASON_DUPLICATE_ID = "duplicate by id"
REASON_DUPLICATE_TITLE = "duplicate by title"

PRIVACY_PRIVATE = "private"
PRIVACY_UNLISTED = "unlisted"
PRIVACY_PUBLIC = "public"
PRIVACY_STATUSES = (PRIVACY_PRIVATE, PRIVACY_UNLISTED, PRIVACY_PUBLIC)


@dataclass(frozen=True)
class PlaylistRecord:
    id: str
    title: str


@dataclass(frozen=True)
class VideoRecord:
    id: str
    title: str


@dataclass(frozen=True)
class PlaylistItem:
    video_id: str
    title: str

    def as_dict(self) -> dict:
        return {"videoId": self.video_id, "title": self.title}


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of a paginated remote listing."""

    items: List[T]
    next_page_token: Optional[str] = None


Membership = Dict[str, Dict[str, VideoRecord]]


@dataclass
class CacheSnapshot:
    """
    Consistent view of playlists + membership at one point in time.

    membership keys are always a subset of playlist ids. A playlist without a
    membership entry has never been populated (not the same as empty).
    """

    playlists: Tuple[PlaylistRecord, ...] = ()
    membership: Membership = field(default_factory=dict)
    last_refreshed: Optional[float] = None
    ttl: float = 600.0

    @property
    def is_empty(self) -> bool:
        return not self.playlists

    def playlist_ids(self) -> set[str]:
        return {p.id for p in self.playlists}


@dataclass(frozen=True)
class AddOutcome:
    added: bool
    playlist_id: str
    playlist_title: str
    video_id: str
    reason: Optional[str] = None

    @property
    def is_duplicate(self) -> bool:
        return not self.added and self.reason is not None

    def as_dict(self) -> dict:
        out = {
            "added": self.added,
            "playlistId": self.playlist_id,
            "playlistTitle": self.playlist_title,
            "videoId": self.video_id,
        }
        if self.reason:
            out["reason"] = self.reason
        return out
