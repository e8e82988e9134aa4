"""
references.py

Turn whatever the caller typed (bare id, youtu.be link, watch link, embed
link) into the canonical 11-character video id.
"""

from __future__ import annotations

import re

from playlists.errors import InvalidReference

VIDEO_ID_LENGTH = 11

_BARE_ID = re.compile(r"^[A-Za-z0-9_-]{11}$")

_SHORT_LINK = re.compile(
    r"^(?:https?://)?(?:www\.)?youtu\.be/([A-Za-z0-9_-]{11})", re.IGNORECASE
)
_WATCH_LINK = re.compile(r"v=([A-Za-z0-9_-]{11})", re.IGNORECASE)
_EMBED_LINK = re.compile(r"embed/([A-Za-z0-9_-]{11})", re.IGNORECASE)

_URL_PATTERNS = (_SHORT_LINK, _WATCH_LINK, _EMBED_LINK)


def extract_video_id(reference: str) -> str:
    """Return the canonical id, or "" when nothing recognizable is found."""
    text = (reference or "").strip()
    if not text:
        return ""

    if _BARE_ID.match(text):
        return text

    for pattern in _URL_PATTERNS:
        m = pattern.search(text)
        if m:
            return m.group(1)

    return ""


def parse_video_reference(reference: str) -> str:
    video_id = extract_video_id(reference)
    if not video_id:
        raise InvalidReference(reference)
    return video_id
