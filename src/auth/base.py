from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class AuthHealthStatus(str, Enum):
    OK = "ok"
    OK_API_QUOTA = "ok_api_quota"
    AUTH_INVALID = "auth_invalid"
    FAILED = "failed"


@dataclass(frozen=True)
class AuthHealthResult:
    provider: str
    status: AuthHealthStatus
    message: str

    @property
    def ok(self) -> bool:
        return self.status in (AuthHealthStatus.OK, AuthHealthStatus.OK_API_QUOTA)


class AuthProvider(Protocol):
    """
    Provider interface. Keep it minimal.

    - authorization_url() returns the consent URL for headless setup
    - exchange_code() trades the pasted consent code for a refresh token
    - health_check() performs a cheap authenticated exchange to validate auth
    """

    name: str

    def authorization_url(self) -> str: ...

    def exchange_code(self, code: str) -> str: ...

    def health_check(self, refresh_token: str) -> AuthHealthResult: ...
