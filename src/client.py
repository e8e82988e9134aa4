"""
client.py

Shared service builder.

Responsibilities:
- Validate OAuth configuration
- Wire Token Manager → YouTube catalog client → Playlist Service
- Persist rotated refresh tokens

Does NOT:
- Start the rotation loop (callers own its lifetime)
- Contain hard-coded secrets
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from auth.providers.youtube import GoogleTokenSource
from auth.tokens import TokenManager, TokenSource
from catalog.youtube.client import YouTubeCatalogClient
from env import Environment, get_env, persist_refresh_token
from env.paths import additions_file
from logger import get_logger
from playlists.additions import AdditionsStore
from playlists.service import PlaylistService

logger = get_logger(__name__)


@dataclass
class Runtime:
    tokens: TokenManager
    catalog: YouTubeCatalogClient
    service: PlaylistService

    def __enter__(self) -> "Runtime":
        self.tokens.start()
        return self

    def __exit__(self, *exc) -> None:
        self.tokens.stop()


def _persist_rotated_token(new_token: str) -> None:
    path = persist_refresh_token(new_token)
    logger.info(f"token.rotation.persisted path={path}")


def build_runtime(
    env: Optional[Environment] = None,
    token_source: Optional[TokenSource] = None,
) -> Runtime:
    """
    Build the full object graph from the environment.

    Raises:
        ConfigIncomplete: client id, client secret or refresh token missing
    """
    env = env or get_env()
    env.require_youtube_credentials()

    source = token_source or GoogleTokenSource(env.client_id, env.client_secret)
    tokens = TokenManager(
        source,
        env.refresh_token,
        on_rotated=_persist_rotated_token,
        interval=env.rotation_interval,
    )

    catalog = YouTubeCatalogClient(
        tokens,
        env.client_id,
        env.client_secret,
        http_timeout=env.request_timeout,
    )

    service = PlaylistService(
        catalog,
        cache_ttl=env.cache_ttl_seconds,
        title_threshold=env.title_threshold,
        default_privacy=env.default_privacy,
        additions=AdditionsStore(additions_file()),
    )

    logger.debug("runtime.built")
    return Runtime(tokens=tokens, catalog=catalog, service=service)


__all__ = ["Runtime", "build_runtime"]
