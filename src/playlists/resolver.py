from __future__ import annotations

from typing import Optional, Sequence

from playlists.cache import CacheStore
from playlists.models import PlaylistRecord
from playlists.similarity import edit_distance


def resolve_exact(
    playlists: Sequence[PlaylistRecord], name: str
) -> Optional[PlaylistRecord]:
    """First playlist whose title equals `name` (case-sensitive, name trimmed)."""
    target = (name or "").strip()
    for pl in playlists:
        if pl.title == target:
            return pl
    return None


def resolve_fuzzy(
    playlists: Sequence[PlaylistRecord], name: str
) -> Optional[PlaylistRecord]:
    """
    Playlist whose lowercased title is closest to the lowercased query.

    Ties are broken by lowercased title, then title, then snapshot order, so
    the result does not depend on the order the API returned playlists in.
    Returns None only when there are no playlists at all.
    """
    target = (name or "").strip().lower()

    best: Optional[PlaylistRecord] = None
    best_key: Optional[tuple] = None

    for index, pl in enumerate(playlists):
        lowered = pl.title.lower()
        key = (edit_distance(lowered, target), lowered, pl.title, index)
        if best_key is None or key < best_key:
            best, best_key = pl, key

    return best


class PlaylistResolver:
    """Name → playlist lookups against the current cache snapshot."""

    def __init__(self, cache: CacheStore) -> None:
        self._cache = cache

    def exact(self, name: str) -> Optional[PlaylistRecord]:
        return resolve_exact(self._cache.playlists(), name)

    def fuzzy(self, name: str) -> Optional[PlaylistRecord]:
        return resolve_fuzzy(self._cache.playlists(), name)

    def resolve(self, name: str, fuzzy: bool) -> Optional[PlaylistRecord]:
        return self.fuzzy(name) if fuzzy else self.exact(name)
