import pytest

from fakes import FakeCatalogClient
from playlists.additions import AdditionsStore
from playlists.context import CallContext
from playlists.errors import (
    InvalidReference,
    InvalidRequest,
    PlaylistNotFound,
    RemoteUnavailable,
)
from playlists.models import VideoRecord
from playlists.service import PlaylistService

V1 = "V1aaaaaaaaa"
V2 = "V2bbbbbbbbb"
V3 = "V3ccccccccc"


@pytest.fixture
def client():
    c = FakeCatalogClient()
    c.add_playlist("PL1", "Coding Tutorials", [(V1, "Intro to Go")])
    c.add_playlist("PL2", "Music", [])
    c.titles[V2] = "Intro to Go "
    c.titles[V3] = "Advanced Rust Macros"
    return c


@pytest.fixture
def service(client, tmp_path):
    return PlaylistService(
        client, cache_ttl=600, additions=AdditionsStore(tmp_path / "additions.json")
    )


def ctx():
    return CallContext(30)


# ------------------------------------------------------------
# add_video
# ------------------------------------------------------------


def test_readding_same_id_is_duplicate_by_id(service, client):
    outcome = service.add_video(ctx(), "Coding Tutorials", V1)

    assert outcome.added is False
    assert outcome.reason == "duplicate by id"
    assert outcome.playlist_id == "PL1"
    assert outcome.video_id == V1
    assert client.inserted == []


def test_near_duplicate_title_is_duplicate_by_title(service, client):
    outcome = service.add_video(ctx(), "Coding Tutorials", V2)

    assert outcome.added is False
    assert outcome.reason == "duplicate by title"
    assert client.inserted == []


@pytest.mark.parametrize("video", [V1, V2])
def test_force_always_attempts_insert(service, client, video):
    outcome = service.add_video(ctx(), "Coding Tutorials", video, force=True)

    assert outcome.added is True
    assert outcome.reason is None
    assert client.inserted == [("PL1", video)]


def test_successful_add_patches_cache_without_refresh(service, client):
    url = f"https://www.youtube.com/watch?v={V3}"
    outcome = service.add_video(ctx(), "coding tutorial", url, user="sam")

    assert outcome.added is True
    assert outcome.playlist_title == "Coding Tutorials"
    assert client.inserted == [("PL1", V3)]

    fetched = client.fetch_count()
    again = service.add_video(ctx(), "Coding Tutorials", V3)
    assert again.reason == "duplicate by id"
    assert client.fetch_count() == fetched

    items, _ = service.list_items(ctx(), "Coding Tutorials")
    assert {i.video_id: i.title for i in items}[V3] == "Advanced Rust Macros"


def test_invalid_reference_fails_before_any_remote_call(service, client):
    with pytest.raises(InvalidReference):
        service.add_video(ctx(), "Coding Tutorials", "definitely not a video")

    assert sum(client.calls.values()) == 0


def test_add_to_account_without_playlists_is_not_found(tmp_path):
    service = PlaylistService(FakeCatalogClient())

    with pytest.raises(PlaylistNotFound):
        service.add_video(ctx(), "Anything", V1)


def test_insert_failure_propagates_and_leaves_cache_untouched(service, client):
    client.fail["insert_playlist_item"] = RemoteUnavailable("HTTP 500")

    with pytest.raises(RemoteUnavailable):
        service.add_video(ctx(), "Coding Tutorials", V3)

    assert not service.cache.contains("PL1", V3)
    assert len(service.additions) == 0


def test_add_records_structured_metadata(service):
    service.add_video(ctx(), "Coding Tutorials", V3, force=False, user="sam")

    rec = service.additions.get(V3)
    assert rec.playlist == "Coding Tutorials"
    assert rec.user == "sam"
    assert rec.force is False
    assert rec.date


def test_add_result_serializes_with_camel_case_keys(service):
    data = service.add_video(ctx(), "Coding Tutorials", V1).as_dict()
    assert data == {
        "added": False,
        "reason": "duplicate by id",
        "playlistId": "PL1",
        "playlistTitle": "Coding Tutorials",
        "videoId": V1,
    }


# ------------------------------------------------------------
# list_items
# ------------------------------------------------------------


def test_list_items_exact_requires_exact_title(service):
    with pytest.raises(PlaylistNotFound):
        service.list_items(ctx(), "coding tutorials", fuzzy=False)

    items, playlist = service.list_items(ctx(), "Coding Tutorials", fuzzy=False)
    assert playlist.id == "PL1"
    assert [i.video_id for i in items] == [V1]


def test_list_items_fuzzy(service):
    items, playlist = service.list_items(ctx(), "musik", fuzzy=True)
    assert playlist.id == "PL2"
    assert items == []


def test_first_listing_refreshes_once_second_is_free(service, client):
    service.list_items(ctx(), "Music")
    assert client.calls["list_playlists"] == 1
    fetched = client.fetch_count()

    service.list_items(ctx(), "Coding Tutorials")
    assert client.fetch_count() == fetched


def test_unpopulated_membership_is_fetched_lazily(service, client):
    service.list_items(ctx(), "Music")
    # Simulate a playlist whose membership was never loaded
    service.cache._snapshot.membership.pop("PL1")
    client.items["PL1"].append(VideoRecord(id=V3, title="Advanced"))

    items, _ = service.list_items(ctx(), "Coding Tutorials")

    assert {i.video_id for i in items} == {V1, V3}
    assert client.calls["list_playlists"] == 1
    assert service.cache.contains("PL1", V3)


def test_items_with_metadata_joins_additions(service):
    service.add_video(ctx(), "Coding Tutorials", V3, user="sam")

    rows, playlist = service.items_with_metadata(ctx(), "Coding Tutorials")

    by_id = {r["videoId"]: r for r in rows}
    assert by_id[V3]["user"] == "sam"
    assert by_id[V1]["user"] == ""
    assert by_id[V1]["force"] is False


def test_video_metadata(service):
    service.add_video(ctx(), "Coding Tutorials", V3, force=True, user="kim")

    meta = service.video_metadata(ctx(), "coding tutorials", V3)

    assert meta["playlistId"] == "PL1"
    assert meta["user"] == "kim"
    assert meta["force"] is True

    with pytest.raises(InvalidRequest):
        service.video_metadata(ctx(), "coding tutorials", "")


# ------------------------------------------------------------
# create_playlist
# ------------------------------------------------------------


def test_create_defaults_to_private_and_appends_to_cache(service, client):
    service.list_items(ctx(), "Music")
    fetched = client.fetch_count()

    record = service.create_playlist(ctx(), "Road Trip")

    assert client.created_privacy == "private"
    assert record.title == "Road Trip"

    items, playlist = service.list_items(ctx(), "Road Trip")
    assert playlist == record
    assert items == []
    assert client.fetch_count() == fetched


def test_create_with_explicit_privacy(service, client):
    service.create_playlist(ctx(), "Shared", privacy="Unlisted")
    assert client.created_privacy == "unlisted"


@pytest.mark.parametrize("name", ["", "   ", None])
def test_create_requires_name(service, client, name):
    with pytest.raises(InvalidRequest):
        service.create_playlist(ctx(), name)
    assert client.calls["create_playlist"] == 0


def test_create_rejects_unknown_privacy(service):
    with pytest.raises(InvalidRequest):
        service.create_playlist(ctx(), "X", privacy="friends-only")


@pytest.mark.parametrize("name", ["", "   ", None])
def test_video_metadata_requires_playlist_name(service, client, name):
    with pytest.raises(InvalidRequest):
        service.video_metadata(ctx(), name, V1)
    assert sum(client.calls.values()) == 0
