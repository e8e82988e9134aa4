from __future__ import annotations

from auth.base import AuthHealthResult, AuthHealthStatus, AuthProvider
from auth.errors import AuthError, AuthFailed, AuthInvalid
from auth.tokens import CredentialState, TokenExchange, TokenManager, TokenSource

__all__ = [
    "AuthError",
    "AuthFailed",
    "AuthHealthResult",
    "AuthHealthStatus",
    "AuthInvalid",
    "AuthProvider",
    "CredentialState",
    "TokenExchange",
    "TokenManager",
    "TokenSource",
]
