import sys

import pytest


@pytest.fixture(autouse=True)
def clean_env_and_modules(monkeypatch, tmp_path):
    """
    Ensure tests don't leak env, logger state, or cached path resolution.
    """

    keys = [
        "TUBELIST_LOGS_DIR",
        "TUBELIST_AUTH_DIR",
        "TUBELIST_DATA_DIR",
        "TUBELIST_COMMAND",
        "TUBELIST_RUN_ID",
        "TUBELIST_VERBOSE",
        "TUBELIST_QUIET",
        "TUBELIST_CACHE_MINUTES",
        "TUBELIST_TITLE_THRESHOLD",
        "TUBELIST_ROTATION_INTERVAL_SEC",
        "TUBELIST_REQUEST_TIMEOUT",
        "TUBELIST_DEFAULT_PRIVACY",
        "TUBELIST_USER",
        "TUBELIST_ENV_FILE",
        "YOUTUBE_CLIENT_ID",
        "YOUTUBE_CLIENT_SECRET",
        "YOUTUBE_REFRESH_TOKEN",
        "LOG_LEVEL",
    ]
    for k in keys:
        monkeypatch.delenv(k, raising=False)

    # Keep every file the code writes inside the test's tmp dir
    monkeypatch.setenv("TUBELIST_LOGS_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("TUBELIST_AUTH_DIR", str(tmp_path / "auth"))
    monkeypatch.setenv("TUBELIST_DATA_DIR", str(tmp_path / "data"))

    from env import reset_env_caches

    reset_env_caches()

    from logger import reset_logging

    reset_logging()

    yield

    reset_logging()
    reset_env_caches()
    sys.modules.pop("bootstrap", None)
    sys.modules.pop("tubelist", None)


@pytest.fixture
def youtube_env(monkeypatch):
    monkeypatch.setenv("YOUTUBE_CLIENT_ID", "client-id.apps.googleusercontent.com")
    monkeypatch.setenv("YOUTUBE_CLIENT_SECRET", "client-secret")
    monkeypatch.setenv("YOUTUBE_REFRESH_TOKEN", "1//refresh-original")

    from env import reset_env_caches

    reset_env_caches()
