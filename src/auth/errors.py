from __future__ import annotations

from playlists.errors import RemoteUnavailable


class AuthError(RemoteUnavailable):
    """Base auth error for any provider."""


class AuthInvalid(AuthError):
    """Credentials are missing/invalid/revoked; reauthorization required."""


class AuthFailed(AuthError):
    """Unexpected auth failure (transport, malformed response)."""
