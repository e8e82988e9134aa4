import json
from urllib.parse import parse_qs, urlparse

import httplib2
import pytest
from googleapiclient.errors import HttpError

from auth.base import AuthHealthStatus
from auth.errors import AuthFailed, AuthInvalid
from auth.providers.youtube import (
    GoogleTokenSource,
    YouTubeOAuthProvider,
    _is_quota_exceeded_error,
    build_credentials,
)
from auth.tokens import TokenExchange
from playlists.errors import ConfigIncomplete


def quota_error() -> HttpError:
    body = {"error": {"errors": [{"reason": "quotaExceeded"}]}}
    return HttpError(httplib2.Response({"status": 403}), json.dumps(body).encode())


class StubSource:
    def __init__(self, result):
        self.result = result

    def exchange(self, refresh_token):
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


@pytest.fixture
def provider():
    return YouTubeOAuthProvider("client-id.apps.googleusercontent.com", "secret")


def test_quota_detection():
    assert _is_quota_exceeded_error(quota_error())
    assert not _is_quota_exceeded_error(RuntimeError("nope"))


def test_credentials_carry_refresh_token():
    creds = build_credentials("cid", "secret", "1//refresh")
    assert creds.refresh_token == "1//refresh"
    assert creds.client_id == "cid"


def test_authorization_url_requests_offline_access(provider):
    url = provider.authorization_url()

    query = parse_qs(urlparse(url).query)
    assert query["client_id"] == ["client-id.apps.googleusercontent.com"]
    assert query["access_type"] == ["offline"]
    assert query["prompt"] == ["consent"]
    assert "youtube" in query["scope"][0]


class StubApi:
    def __init__(self, error=None):
        self.error = error
        self.tokens = []

    def __call__(self, exchanged):
        self.tokens.append(exchanged.access_token)
        if self.error is not None:
            raise self.error


@pytest.mark.parametrize(
    "exchange_result, api_error, status",
    [
        (TokenExchange(access_token="ya29.ok"), None, AuthHealthStatus.OK),
        (TokenExchange(access_token="ya29.ok"), quota_error(), AuthHealthStatus.OK_API_QUOTA),
        (AuthInvalid("invalid_grant"), None, AuthHealthStatus.AUTH_INVALID),
        (AuthFailed("connection reset"), None, AuthHealthStatus.FAILED),
        (TokenExchange(access_token="ya29.ok"), RuntimeError("boom"), AuthHealthStatus.FAILED),
        (
            TokenExchange(access_token="ya29.ok"),
            HttpError(httplib2.Response({"status": 401}), b"{}"),
            AuthHealthStatus.AUTH_INVALID,
        ),
    ],
)
def test_health_check_statuses(provider, monkeypatch, exchange_result, api_error, status):
    api = StubApi(api_error)
    monkeypatch.setattr(provider, "token_source", lambda: StubSource(exchange_result))
    monkeypatch.setattr(provider, "_ping_api", api)

    outcome = provider.health_check("1//refresh")

    assert outcome.status == status
    assert outcome.ok is (status in (AuthHealthStatus.OK, AuthHealthStatus.OK_API_QUOTA))


def test_health_check_calls_api_with_exchanged_access_token(provider, monkeypatch):
    api = StubApi()
    monkeypatch.setattr(
        provider, "token_source", lambda: StubSource(TokenExchange(access_token="ya29.fresh"))
    )
    monkeypatch.setattr(provider, "_ping_api", api)

    provider.health_check("1//refresh")

    assert api.tokens == ["ya29.fresh"]


def test_failed_exchange_skips_api_call(provider, monkeypatch):
    api = StubApi()
    monkeypatch.setattr(provider, "token_source", lambda: StubSource(AuthInvalid("revoked")))
    monkeypatch.setattr(provider, "_ping_api", api)

    provider.health_check("1//refresh")

    assert api.tokens == []


def test_missing_client_config_is_incomplete():
    with pytest.raises(ConfigIncomplete):
        YouTubeOAuthProvider("", "secret")
    with pytest.raises(ConfigIncomplete):
        GoogleTokenSource("cid", "")
