import json

import httplib2
import pytest
from googleapiclient.errors import HttpError

from auth.tokens import TokenManager
from catalog.youtube.client import YouTubeCatalogClient
from fakes import ScriptedTokenSource
from playlists.context import CallContext
from playlists.errors import (
    ConfigIncomplete,
    OperationCancelled,
    QuotaExhausted,
    RemoteUnavailable,
)


class FakeRequest:
    def __init__(self, recorder, method, kwargs, response):
        self.recorder = recorder
        self.method = method
        self.kwargs = kwargs
        self.response = response

    def execute(self, http=None):
        self.recorder.append((self.method, self.kwargs))
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


class FakeCollection:
    def __init__(self, resource, name):
        self.resource = resource
        self.name = name

    def __getattr__(self, method):
        def call(**kwargs):
            key = f"{self.name}.{method}"
            queue = self.resource.responses[key]
            return FakeRequest(self.resource.requests, key, kwargs, queue.pop(0))

        return call


class FakeYouTube:
    def __init__(self, responses):
        self.responses = responses
        self.requests = []

    def playlists(self):
        return FakeCollection(self, "playlists")

    def playlistItems(self):
        return FakeCollection(self, "playlistItems")

    def videos(self):
        return FakeCollection(self, "videos")


def make_client(monkeypatch, responses):
    tokens = TokenManager(ScriptedTokenSource(), "1//refresh")
    client = YouTubeCatalogClient(tokens, "client-id", "client-secret")
    yt = FakeYouTube(responses)
    monkeypatch.setattr(client, "_current", lambda: (yt, None))
    monkeypatch.setattr(client, "_http", lambda ctx, creds: None)
    return client, yt


def ctx():
    return CallContext(30)


def test_requires_client_credentials():
    tokens = TokenManager(ScriptedTokenSource(), "1//refresh")
    with pytest.raises(ConfigIncomplete):
        YouTubeCatalogClient(tokens, "", "secret")


def test_fetch_all_playlists_follows_page_tokens(monkeypatch):
    client, yt = make_client(
        monkeypatch,
        {
            "playlists.list": [
                {
                    "items": [{"id": "PL1", "snippet": {"title": "Coding Tutorials"}}],
                    "nextPageToken": "p2",
                },
                {"items": [{"id": "PL2", "snippet": {"title": "Music"}}]},
            ]
        },
    )

    playlists = client.fetch_all_playlists(ctx())

    assert [p.title for p in playlists] == ["Coding Tutorials", "Music"]
    assert [kw["pageToken"] for _, kw in yt.requests] == [None, "p2"]
    assert all(kw["mine"] is True and kw["maxResults"] == 50 for _, kw in yt.requests)


def test_playlist_items_use_content_details_video_id(monkeypatch):
    client, _ = make_client(
        monkeypatch,
        {
            "playlistItems.list": [
                {
                    "items": [
                        {
                            "contentDetails": {"videoId": "V1aaaaaaaaa"},
                            "snippet": {"title": "Intro to Go"},
                        },
                        {"contentDetails": {}, "snippet": {"title": "Deleted video"}},
                    ]
                }
            ]
        },
    )

    page = client.list_playlist_items(ctx(), "PL1")

    assert [(v.id, v.title) for v in page.items] == [("V1aaaaaaaaa", "Intro to Go")]
    assert page.next_page_token is None


def test_video_title_missing_is_none(monkeypatch):
    client, _ = make_client(
        monkeypatch,
        {
            "videos.list": [
                {"items": [{"snippet": {"title": "Intro to Go"}}]},
                {"items": []},
            ]
        },
    )

    assert client.get_video_title(ctx(), "V1aaaaaaaaa") == "Intro to Go"
    assert client.get_video_title(ctx(), "Vzzzzzzzzzz") is None


def test_insert_and_create_bodies(monkeypatch):
    client, yt = make_client(
        monkeypatch,
        {
            "playlistItems.insert": [{"id": "item-1"}],
            "playlists.insert": [{"id": "PLnew"}],
        },
    )

    assert client.insert_playlist_item(ctx(), "PL1", "V1aaaaaaaaa") == "item-1"
    record = client.create_playlist(ctx(), "Road Trip", "private")

    insert_kw = yt.requests[0][1]
    assert insert_kw["body"]["snippet"]["playlistId"] == "PL1"
    assert insert_kw["body"]["snippet"]["resourceId"]["videoId"] == "V1aaaaaaaaa"

    create_kw = yt.requests[1][1]
    assert create_kw["body"]["status"]["privacyStatus"] == "private"
    assert record.id == "PLnew"
    assert record.title == "Road Trip"


def test_http_errors_are_translated(monkeypatch):
    body = {"error": {"errors": [{"reason": "quotaExceeded"}]}}
    err = HttpError(httplib2.Response({"status": 403}), json.dumps(body).encode())
    client, _ = make_client(monkeypatch, {"videos.list": [err]})

    with pytest.raises(QuotaExhausted):
        client.get_video_title(ctx(), "V1aaaaaaaaa")


def test_cancelled_context_makes_no_request(monkeypatch):
    client, yt = make_client(monkeypatch, {"videos.list": [{"items": []}]})
    c = ctx()
    c.cancel()

    with pytest.raises(OperationCancelled):
        client.get_video_title(c, "V1aaaaaaaaa")

    assert yt.requests == []


def test_transport_errors_become_remote_unavailable(monkeypatch):
    client, _ = make_client(
        monkeypatch, {"videos.list": [httplib2.ServerNotFoundError("www.googleapis.com")]}
    )

    with pytest.raises(RemoteUnavailable):
        client.get_video_title(ctx(), "V1aaaaaaaaa")


def test_programming_errors_are_not_masked_as_remote_failures(monkeypatch):
    client, _ = make_client(monkeypatch, {"videos.list": [KeyError("snippet")]})

    with pytest.raises(KeyError):
        client.get_video_title(ctx(), "V1aaaaaaaaa")
