"""
additions.py

Small structured record of videos added through this service, keyed by
video id. Latest addition wins.

File layout:
    {"version": 1, "items": {"<video_id>": {"date": ..., "playlist": ...,
                                            "user": ..., "force": ...}}}
"""

from __future__ import annotations

import json
import threading
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from logger import get_logger

logger = get_logger(__name__)

STORE_VERSION = 1


@dataclass(frozen=True)
class AdditionRecord:
    video_id: str
    playlist: str
    user: str = ""
    force: bool = False
    date: str = ""

    def as_dict(self) -> dict:
        return {
            "videoId": self.video_id,
            "playlist": self.playlist,
            "user": self.user,
            "force": self.force,
            "date": self.date,
        }


def _utc_now() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


class AdditionsStore:
    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()
        self._items: Dict[str, AdditionRecord] = self._load()

    def _load(self) -> Dict[str, AdditionRecord]:
        if not self.path.exists():
            return {}

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Additions store unreadable, starting fresh: {e}")
            return {}

        if not isinstance(data, dict) or data.get("version") != STORE_VERSION:
            logger.warning("Additions store version mismatch; starting fresh.")
            return {}

        items: Dict[str, AdditionRecord] = {}
        for vid, raw in (data.get("items") or {}).items():
            if not isinstance(raw, dict):
                continue
            items[vid] = AdditionRecord(
                video_id=vid,
                playlist=str(raw.get("playlist", "")),
                user=str(raw.get("user", "")),
                force=bool(raw.get("force", False)),
                date=str(raw.get("date", "")),
            )
        return items

    def _write(self) -> None:
        payload: Dict[str, Any] = {
            "version": STORE_VERSION,
            "items": {
                vid: {k: v for k, v in asdict(rec).items() if k != "video_id"}
                for vid, rec in self._items.items()
            },
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False, sort_keys=True)
        tmp.replace(self.path)

    def record(
        self, video_id: str, playlist: str, user: str = "", force: bool = False
    ) -> AdditionRecord:
        rec = AdditionRecord(
            video_id=video_id,
            playlist=playlist,
            user=user or "",
            force=bool(force),
            date=_utc_now(),
        )
        with self._lock:
            self._items[video_id] = rec
            self._write()
        return rec

    def get(self, video_id: str) -> Optional[AdditionRecord]:
        with self._lock:
            return self._items.get(video_id)

    def all(self) -> Dict[str, AdditionRecord]:
        with self._lock:
            return dict(self._items)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
