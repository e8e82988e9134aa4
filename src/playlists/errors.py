"""
errors.py

Typed failures raised by the playlist core.

Soft rejections (a video that is already present) are NOT errors; they come
back as AddOutcome(added=False).
"""

from __future__ import annotations


class TubelistError(Exception):
    """Base exception for everything raised by the playlist core."""


class ConfigIncomplete(TubelistError):
    """Required credentials are missing; construction cannot proceed."""


class InvalidRequest(TubelistError, ValueError):
    """Caller-supplied arguments failed validation."""


class InvalidReference(InvalidRequest):
    """A video reference could not be parsed into a canonical id."""

    def __init__(self, reference: str):
        super().__init__(f"invalid video identifier: {reference!r}")
        self.reference = reference


class NotFound(TubelistError):
    """Base for typed misses."""


class PlaylistNotFound(NotFound):
    def __init__(self, name: str):
        super().__init__(f"playlist not found: {name!r}")
        self.name = name


class VideoNotFound(NotFound):
    def __init__(self, video_id: str):
        super().__init__(f"video not found: {video_id}")
        self.video_id = video_id


class RemoteUnavailable(TubelistError):
    """Network or remote API failure during a fetch, insert or exchange."""


class QuotaExhausted(RemoteUnavailable):
    """The API reported quotaExceeded / dailyLimitExceeded."""


class DeadlineExceeded(RemoteUnavailable):
    """The caller's deadline passed before the remote call completed."""


class OperationCancelled(RemoteUnavailable):
    """The caller cancelled the operation."""


__all__ = [
    "TubelistError",
    "ConfigIncomplete",
    "InvalidRequest",
    "InvalidReference",
    "NotFound",
    "PlaylistNotFound",
    "VideoNotFound",
    "RemoteUnavailable",
    "QuotaExhausted",
    "DeadlineExceeded",
    "OperationCancelled",
]
