from __future__ import annotations

from typing import List, Optional

from google.auth.exceptions import RefreshError, TransportError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from googleapiclient.discovery import build

from auth.base import AuthHealthResult, AuthHealthStatus, AuthProvider
from auth.errors import AuthFailed, AuthInvalid
from auth.tokens import TokenExchange
from logger import get_logger
from playlists.errors import ConfigIncomplete

TOKEN_URI = "https://oauth2.googleapis.com/token"
AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
OOB_REDIRECT_URI = "urn:ietf:wg:oauth:2.0:oob"

YOUTUBE_OAUTH_SCOPES: List[str] = [
    "https://www.googleapis.com/auth/youtube",
    "https://www.googleapis.com/auth/youtube.force-ssl",
]


def _is_quota_exceeded_error(exc: Exception) -> bool:
    try:
        status = getattr(getattr(exc, "resp", None), "status", None)
        if status != 403:
            return False

        content = getattr(exc, "content", b"")
        if not content:
            return False

        if isinstance(content, bytes):
            content = content.decode("utf-8", errors="ignore")

        return "quotaExceeded" in content
    except Exception:
        return False


def build_credentials(
    client_id: str,
    client_secret: str,
    refresh_token: str,
    scopes: Optional[List[str]] = None,
    token_uri: str = TOKEN_URI,
) -> Credentials:
    return Credentials(
        token=None,
        refresh_token=refresh_token,
        token_uri=token_uri,
        client_id=client_id,
        client_secret=client_secret,
        scopes=scopes or YOUTUBE_OAUTH_SCOPES,
    )


class GoogleTokenSource:
    """TokenSource backed by google-auth's refresh-token grant."""

    def __init__(
        self, client_id: str, client_secret: str, token_uri: str = TOKEN_URI
    ) -> None:
        if not client_id or not client_secret:
            raise ConfigIncomplete("youtube oauth config is incomplete")
        self.client_id = client_id
        self.client_secret = client_secret
        self.token_uri = token_uri
        self._logger = get_logger("auth.youtube")

    def exchange(self, refresh_token: str) -> TokenExchange:
        creds = build_credentials(
            self.client_id, self.client_secret, refresh_token, token_uri=self.token_uri
        )
        try:
            creds.refresh(Request())
        except RefreshError as e:
            self._logger.error(f"Refresh token rejected: {e}")
            raise AuthInvalid(str(e)) from e
        except TransportError as e:
            self._logger.error(f"Token exchange transport failure: {e}")
            raise AuthFailed(str(e)) from e

        return TokenExchange(
            access_token=creds.token or "",
            refresh_token=creds.refresh_token,
            expiry=creds.expiry,
        )


class YouTubeOAuthProvider(AuthProvider):
    name = "youtube"

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str = OOB_REDIRECT_URI,
    ) -> None:
        if not client_id or not client_secret:
            raise ConfigIncomplete("youtube oauth config is incomplete")
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self._logger = get_logger("auth.youtube")

    def _flow(self) -> Flow:
        client_config = {
            "installed": {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "auth_uri": AUTH_URI,
                "token_uri": TOKEN_URI,
                "redirect_uris": [self.redirect_uri],
            }
        }
        return Flow.from_client_config(
            client_config,
            scopes=YOUTUBE_OAUTH_SCOPES,
            redirect_uri=self.redirect_uri,
        )

    def token_source(self) -> GoogleTokenSource:
        return GoogleTokenSource(self.client_id, self.client_secret)

    def authorization_url(self) -> str:
        """
        Consent URL for headless setup. Offline access + forced consent so
        Google always hands back a refresh token.
        """
        url, _state = self._flow().authorization_url(
            access_type="offline",
            prompt="consent",
            include_granted_scopes="true",
        )
        return url

    def exchange_code(self, code: str) -> str:
        """Trade a consent code for a refresh token ("" if none was issued)."""
        flow = self._flow()
        try:
            flow.fetch_token(code=code.strip())
        except Exception as e:
            self._logger.error(f"OAuth code exchange failed: {e}")
            raise AuthInvalid(str(e)) from e

        return flow.credentials.refresh_token or ""

    def _ping_api(self, exchanged: TokenExchange) -> None:
        creds = Credentials(token=exchanged.access_token)
        youtube = build("youtube", "v3", credentials=creds, cache_discovery=False)
        youtube.channels().list(part="id", mine=True, maxResults=1).execute()

    def health_check(self, refresh_token: str) -> AuthHealthResult:
        """
        Validates OAuth with one refresh-token exchange followed by a cheap
        authenticated API request. Treats API quota exhaustion as OAuth OK.
        """
        self._logger.info("oauth.check.start")

        try:
            exchanged = self.token_source().exchange(refresh_token)
            self._ping_api(exchanged)

            self._logger.info("oauth.check.ok")
            return AuthHealthResult(
                provider=self.name,
                status=AuthHealthStatus.OK,
                message="OAuth OK",
            )

        except Exception as e:
            if _is_quota_exceeded_error(e):
                self._logger.warning("oauth.check.ok_quota_exhausted")
                return AuthHealthResult(
                    provider=self.name,
                    status=AuthHealthStatus.OK_API_QUOTA,
                    message="OAuth OK (API quota exhausted)",
                )

            unauthorized = getattr(getattr(e, "resp", None), "status", None) == 401
            if isinstance(e, AuthInvalid) or unauthorized:
                self._logger.error("oauth.check.auth_invalid", exc_info=e)
                return AuthHealthResult(
                    provider=self.name,
                    status=AuthHealthStatus.AUTH_INVALID,
                    message="OAuth INVALID - reauthentication required",
                )

            self._logger.error("oauth.check.failed", exc_info=e)
            return AuthHealthResult(
                provider=self.name,
                status=AuthHealthStatus.FAILED,
                message="OAuth check failed (unexpected error)",
            )
