"""
Playlist cache-and-reconciliation core.

Import the orchestrator from playlists.service; this package root only
re-exports the leaf types so it can be imported without pulling in the
remote client layer.
"""

from __future__ import annotations

from playlists.errors import (
    ConfigIncomplete,
    InvalidReference,
    InvalidRequest,
    NotFound,
    PlaylistNotFound,
    RemoteUnavailable,
    TubelistError,
    VideoNotFound,
)
from playlists.models import AddOutcome, PlaylistItem, PlaylistRecord, VideoRecord

__all__ = [
    "AddOutcome",
    "ConfigIncomplete",
    "InvalidReference",
    "InvalidRequest",
    "NotFound",
    "PlaylistItem",
    "PlaylistNotFound",
    "PlaylistRecord",
    "RemoteUnavailable",
    "TubelistError",
    "VideoNotFound",
    "VideoRecord",
]
