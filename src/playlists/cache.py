"""
cache.py

In-memory, TTL-bounded snapshot of the user's playlists and their membership.

Rules:
- All remote fetches for a full refresh happen BEFORE the write lock is taken.
- The snapshot is swapped as a whole; readers never see a half-built one.
- A failed refresh leaves the previous snapshot untouched.
- Incremental patches (single video / single playlist) take the write lock.

Does NOT:
- Persist anything to disk
- Retry failed fetches
"""

from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from catalog.base import CatalogClient
from logger import get_logger
from playlists.context import CallContext
from playlists.models import CacheSnapshot, Membership, PlaylistRecord, VideoRecord

logger = get_logger(__name__)

DEFAULT_CACHE_TTL_SECONDS = 10 * 60


class ReadWriteLock:
    """
    Many concurrent readers or one writer.

    Writers are preferred: once a writer is waiting, new readers block so a
    steady stream of reads cannot starve a snapshot swap.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


class CacheStore:
    def __init__(
        self,
        client: CatalogClient,
        ttl: float = DEFAULT_CACHE_TTL_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl <= 0:
            ttl = DEFAULT_CACHE_TTL_SECONDS

        self._client = client
        self._clock = clock
        self._lock = ReadWriteLock()
        self._snapshot = CacheSnapshot(ttl=float(ttl))

    @property
    def ttl(self) -> float:
        return self._snapshot.ttl

    # ------------------------------------------------------------
    # Freshness
    # ------------------------------------------------------------

    def is_fresh(self) -> bool:
        with self._lock.read():
            snap = self._snapshot
            if snap.is_empty or snap.last_refreshed is None:
                return False
            return self._clock() - snap.last_refreshed < snap.ttl

    def ensure_fresh(self, ctx: CallContext) -> None:
        if self.is_fresh():
            return
        self.refresh(ctx)

    def refresh(self, ctx: CallContext) -> None:
        """
        Full rebuild from the remote catalog.

        Raises whatever the client raises; the prior snapshot is kept.
        """
        logger.debug("cache.refresh.start")

        playlists = self._client.fetch_all_playlists(ctx)

        membership: Membership = {}
        for pl in playlists:
            videos = self._client.fetch_all_playlist_items(ctx, pl.id)
            membership[pl.id] = {v.id: v for v in videos}

        # Last chance to bail before the swap.
        ctx.check()

        with self._lock.write():
            self._snapshot = CacheSnapshot(
                playlists=tuple(playlists),
                membership=membership,
                last_refreshed=self._clock(),
                ttl=self._snapshot.ttl,
            )

        logger.info(
            f"cache.refresh.ok playlists={len(playlists)} "
            f"videos={sum(len(v) for v in membership.values())}"
        )

    def invalidate(self) -> None:
        """Mark the snapshot stale without dropping it."""
        with self._lock.write():
            self._snapshot.last_refreshed = None

    # ------------------------------------------------------------
    # Incremental mutations
    # ------------------------------------------------------------

    def patch(self, playlist_id: str, video: VideoRecord) -> None:
        with self._lock.write():
            snap = self._snapshot
            if playlist_id not in snap.playlist_ids():
                logger.debug(f"cache.patch.skip unknown playlist {playlist_id}")
                return
            snap.membership.setdefault(playlist_id, {})[video.id] = video

    def append_playlist(self, record: PlaylistRecord) -> None:
        with self._lock.write():
            snap = self._snapshot
            if record.id not in snap.playlist_ids():
                snap.playlists = snap.playlists + (record,)
            snap.membership.setdefault(record.id, {})

    def set_membership(self, playlist_id: str, videos: Iterable[VideoRecord]) -> None:
        inner = {v.id: v for v in videos}
        with self._lock.write():
            snap = self._snapshot
            if playlist_id not in snap.playlist_ids():
                return
            snap.membership[playlist_id] = inner

    # ------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------

    def playlists(self) -> Tuple[PlaylistRecord, ...]:
        with self._lock.read():
            return self._snapshot.playlists

    def membership(self, playlist_id: str) -> Optional[Dict[str, VideoRecord]]:
        """Copy of a playlist's membership, or None if never populated."""
        with self._lock.read():
            inner = self._snapshot.membership.get(playlist_id)
            return dict(inner) if inner is not None else None

    def contains(self, playlist_id: str, video_id: str) -> bool:
        with self._lock.read():
            return video_id in self._snapshot.membership.get(playlist_id, {})

    def titles(self, playlist_id: str) -> List[str]:
        with self._lock.read():
            inner = self._snapshot.membership.get(playlist_id, {})
            return [v.title for v in inner.values()]

    def snapshot(self) -> CacheSnapshot:
        """Shallow, detached copy for inspection (tests, diagnostics)."""
        with self._lock.read():
            snap = self._snapshot
            return CacheSnapshot(
                playlists=snap.playlists,
                membership={k: dict(v) for k, v in snap.membership.items()},
                last_refreshed=snap.last_refreshed,
                ttl=snap.ttl,
            )
