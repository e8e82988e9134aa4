import pytest

from playlists.similarity import edit_distance, is_similar_title, normalize_title


@pytest.mark.parametrize(
    "a,b,expected",
    [
        ("", "", 0),
        ("", "abc", 3),
        ("kitten", "sitting", 3),
        ("flaw", "lawn", 2),
        ("intro to go", "intro to go", 0),
    ],
)
def test_edit_distance(a, b, expected):
    assert edit_distance(a, b) == expected
    assert edit_distance(b, a) == expected


def test_normalize_title_trims_and_lowercases():
    assert normalize_title("  Intro to Go ") == "intro to go"
    assert normalize_title(None) == ""


def test_similar_title_threshold_is_relative_to_longer_string():
    base = "a" * 20
    assert is_similar_title(base, "a" * 18)  # distance 2 <= 0.1 * 20
    assert not is_similar_title(base, "a" * 17)  # distance 3 > 2.0


def test_empty_titles_are_never_similar():
    assert not is_similar_title("", "")


def test_threshold_is_tunable():
    assert not is_similar_title("intro to go", "intro to rust")
    assert is_similar_title("intro to go", "intro to rust", threshold=0.5)
