from __future__ import annotations

from rapidfuzz.distance import Levenshtein

DEFAULT_TITLE_THRESHOLD = 0.1


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance; insert, delete and substitute each cost 1."""
    return Levenshtein.distance(a, b)


def normalize_title(title: str) -> str:
    return (title or "").strip().lower()


def is_similar_title(
    a: str, b: str, threshold: float = DEFAULT_TITLE_THRESHOLD
) -> bool:
    """
    True when the edit distance is at most `threshold` of the longer string.

    Callers normalize first. Two empty strings are never considered similar.
    """
    longest = max(len(a), len(b))
    if longest == 0:
        return False
    return edit_distance(a, b) <= threshold * longest
