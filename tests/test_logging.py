import json
import logging
from collections.abc import Iterator

import pytest
import structlog

from faultline.config import Settings
from faultline.logging import configure_logging, get_logger


@pytest.fixture
def restore_logging() -> Iterator[None]:
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    logging.getLogger().handlers.clear()


def test_json_logs_include_bound_context(
    restore_logging: None, capsys: pytest.CaptureFixture[str]
) -> None:
    configure_logging(Settings(log_level="INFO", log_json=True))
    structlog.contextvars.bind_contextvars(request_id="req-9")

    get_logger("faultline.test").error("unhandled_exception", component="orders")

    line = capsys.readouterr().out.strip().splitlines()[-1]
    entry = json.loads(line)
    assert entry["event"] == "unhandled_exception"
    assert entry["component"] == "orders"
    assert entry["request_id"] == "req-9"
    assert entry["level"] == "error"
    assert "timestamp" in entry


def test_level_filters_lower_events(
    restore_logging: None, capsys: pytest.CaptureFixture[str]
) -> None:
    configure_logging(Settings(log_level="warning", log_json=True))

    get_logger("faultline.test.level").info("noise")

    assert capsys.readouterr().out == ""


def test_settings_read_prefixed_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FAULTLINE_LOG_JSON", "false")
    monkeypatch.setenv("FAULTLINE_REQUEST_ID_HEADER", "X-Correlation-ID")

    settings = Settings()

    assert settings.log_json is False
    assert settings.request_id_header == "X-Correlation-ID"
