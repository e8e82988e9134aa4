"""
tokens.py

Refresh-token custody and proactive rotation.

Responsibilities:
- Hold the current refresh token (CredentialState)
- Periodically exchange it for an access token to surface silent rotations
- Report every rotation to a persistence hook, exactly once

Does NOT:
- Write anything to disk (the hook does)
- Hold the playlist cache lock
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Protocol

from logger import get_logger
from playlists.errors import ConfigIncomplete

logger = get_logger(__name__)

DEFAULT_ROTATION_INTERVAL_SECONDS = 7 * 24 * 60 * 60

RotationHook = Callable[[str], None]


@dataclass(frozen=True)
class TokenExchange:
    access_token: str
    refresh_token: Optional[str] = None
    expiry: Optional[datetime] = None


@dataclass
class CredentialState:
    refresh_token: str
    last_rotated_at: Optional[float] = None


class TokenSource(Protocol):
    """Exchanges a refresh token for a fresh access token."""

    def exchange(self, refresh_token: str) -> TokenExchange: ...


class TokenManager:
    def __init__(
        self,
        source: TokenSource,
        refresh_token: str,
        on_rotated: Optional[RotationHook] = None,
        interval: float = DEFAULT_ROTATION_INTERVAL_SECONDS,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not refresh_token:
            raise ConfigIncomplete("refresh token is required")
        if interval <= 0:
            raise ValueError("rotation interval must be positive")

        self._source = source
        self._state = CredentialState(refresh_token=refresh_token)
        self._on_rotated = on_rotated
        self.interval = float(interval)
        self._clock = clock

        self._state_lock = threading.Lock()
        self._rotate_lock = threading.Lock()
        self._stop: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None

    # ------------------------------------------------------------
    # State
    # ------------------------------------------------------------

    @property
    def refresh_token(self) -> str:
        with self._state_lock:
            return self._state.refresh_token

    @property
    def state(self) -> CredentialState:
        with self._state_lock:
            return CredentialState(
                refresh_token=self._state.refresh_token,
                last_rotated_at=self._state.last_rotated_at,
            )

    def on_credential_rotated(self, hook: Optional[RotationHook]) -> None:
        self._on_rotated = hook

    # ------------------------------------------------------------
    # Rotation
    # ------------------------------------------------------------

    def rotate_once(self) -> bool:
        """
        One exchange. Returns True when the refresh token changed.

        Exchange errors propagate; the held token is left as-is.
        """
        with self._rotate_lock:
            current = self.refresh_token
            result = self._source.exchange(current)

            new_token = result.refresh_token
            if not new_token or new_token == current:
                logger.debug("token.rotation.unchanged")
                return False

            with self._state_lock:
                self._state.refresh_token = new_token
                self._state.last_rotated_at = self._clock()

            logger.info("token.rotation.changed")
            self._notify(new_token)
            return True

    def _notify(self, new_token: str) -> None:
        hook = self._on_rotated
        if hook is None:
            logger.warning("token.rotation.no_hook (new refresh token not persisted)")
            return
        try:
            hook(new_token)
        except Exception as e:
            logger.error(f"token.rotation.persist_failed: {e}", exc_info=e)

    # ------------------------------------------------------------
    # Background loop
    # ------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        # One stop event per loop: a loop that outlived stop() must not be
        # revived by the next start().
        stop = threading.Event()
        self._stop = stop
        self._thread = threading.Thread(
            target=self._run, args=(stop,), name="token-rotation", daemon=True
        )
        self._thread.start()
        logger.debug(f"token.rotation.loop.start interval={self.interval:.0f}s")

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        if self._stop is not None:
            self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
            if thread.is_alive():
                logger.warning("token.rotation.loop.stop_timeout (exits after current exchange)")
        self._stop = None
        self._thread = None
        logger.debug("token.rotation.loop.stop")

    def _run(self, stop: threading.Event) -> None:
        while not stop.wait(self.interval):
            try:
                self.rotate_once()
            except Exception as e:
                # Keep ticking; the next scheduled exchange may succeed.
                logger.error(f"token.rotation.failed: {e}", exc_info=e)

    def __enter__(self) -> "TokenManager":
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.stop()
