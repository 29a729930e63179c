import logging

import pytest
import structlog
from shared.logging import (
    MASK,
    add_context,
    clear_context,
    get_log_level,
    mask_sensitive_values,
    setup_stdlib_logging,
)


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
    clear_context()


def test_sensitive_values_are_masked():
    event = mask_sensitive_values(None, "info", {"event": "User logged in", "password": "hunter2", "user_id": 4})
    assert event == {"event": "User logged in", "password": MASK, "user_id": 4}


def test_missing_values_stay_missing():
    assert mask_sensitive_values(None, "info", {"event": "x", "phone": None}) == {"event": "x", "phone": None}


def test_explicit_log_level_wins(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "error")
    assert get_log_level() == "ERROR"


def test_environment_decides_default_level(monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.setenv("PROTEAN_ENV", "production")
    assert get_log_level() == "INFO"


def test_file_handlers_are_created(tmp_path):
    log_dir = setup_stdlib_logging(tmp_path / "logs")

    logging.getLogger("storefront.test").error("disk full")

    assert (log_dir / "storefront.log").exists()
    assert "disk full" in (log_dir / "storefront_error.log").read_text()


def test_context_is_merged_into_events():
    add_context(request_id="abc123")
    assert structlog.contextvars.get_contextvars()["request_id"] == "abc123"

    clear_context()
    assert structlog.contextvars.get_contextvars() == {}
