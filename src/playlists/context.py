"""
context.py

Per-request deadline + cancellation signal.

Every remote call takes a CallContext. Remote adapters call check() before
each request and use remaining() as their HTTP timeout, so a cancelled or
expired request fails before it can touch the cache.
"""

from __future__ import annotations

import threading
import time
from typing import Callable, Optional

from playlists.errors import DeadlineExceeded, OperationCancelled


class CallContext:
    def __init__(
        self,
        timeout: Optional[float] = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._clock = clock
        self._deadline = clock() + timeout if timeout is not None else None
        self._cancelled = threading.Event()

    @classmethod
    def background(cls) -> "CallContext":
        """A context that never expires."""
        return cls(None)

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def remaining(self) -> Optional[float]:
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - self._clock())

    def expired(self) -> bool:
        return self._deadline is not None and self._clock() >= self._deadline

    def check(self) -> None:
        if self._cancelled.is_set():
            raise OperationCancelled("operation cancelled by caller")
        if self.expired():
            raise DeadlineExceeded("deadline exceeded")
