import logging
import os

from logger import STATE, get_logger, init_logging


def _file_handlers():
    return [h for h in logging.getLogger().handlers if isinstance(h, logging.FileHandler)]


def _flush():
    for h in _file_handlers():
        h.flush()


def test_init_logging_writes_under_command_dir(tmp_path):
    init_logging("add")

    path = STATE.log_file_path
    assert path.parent == tmp_path / "logs" / "add"
    assert path.name == f"add-{os.environ['TUBELIST_RUN_ID']}.log"
    assert STATE.log_dir == path.parent

    get_logger("tubelist.test").info("cache.refresh.ok playlists=2")
    _flush()

    assert "cache.refresh.ok playlists=2" in path.read_text(encoding="utf-8")


def test_repeated_init_does_not_stack_handlers():
    init_logging("add")
    init_logging("add")
    init_logging("items")

    assert len(_file_handlers()) == 1
    assert STATE.command == "items"
    assert STATE.log_file_path.parent.name == "items"


def test_quiet_skips_console(monkeypatch):
    monkeypatch.setenv("TUBELIST_QUIET", "1")

    init_logging("add")

    root = logging.getLogger()
    assert all(isinstance(h, logging.FileHandler) for h in root.handlers)


def test_verbose_forces_debug(monkeypatch):
    monkeypatch.setenv("TUBELIST_VERBOSE", "1")
    init_logging("add")
    assert logging.getLogger().level == logging.DEBUG


def test_tokens_are_redacted_in_files(monkeypatch):
    monkeypatch.setenv("TUBELIST_QUIET", "1")
    init_logging("auth")

    get_logger("tubelist.test").info("exchanged 1//0gAbCdEfGhIjKlMn for ya29.a0AfH6SMB")
    _flush()

    text = STATE.log_file_path.read_text(encoding="utf-8")
    assert "0gAbCdEfGhIjKlMn" not in text
    assert "a0AfH6SMB" not in text
    assert "1//***" in text


def test_retention_keeps_newest_and_active(monkeypatch, tmp_path):
    monkeypatch.setenv("LOG_RETENTION", "2")
    log_dir = tmp_path / "logs" / "add"
    log_dir.mkdir(parents=True)
    for i in range(4):
        p = log_dir / f"add-old{i}.log"
        p.write_text("x", encoding="utf-8")
        os.utime(p, (1000 + i, 1000 + i))

    init_logging("add")

    remaining = sorted(p.name for p in log_dir.glob("add-old*.log"))
    assert remaining == ["add-old2.log", "add-old3.log"]
    assert STATE.log_file_path.exists()
