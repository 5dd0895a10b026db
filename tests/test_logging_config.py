from __future__ import annotations

import logging

import pytest

import logging_config
from logging_config import QUIET_LOGGERS, ContextualFormatter, build_logging_config


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("services.fetcher", logging.WARNING, __file__, 1, "WU fetch failed", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_appends_known_context_in_order() -> None:
    formatter = ContextualFormatter(fmt="%(message)s")

    line = formatter.format(_record(error_kind="bad_status", station_id="KNYNEWYO1", state="awaiting_status"))

    assert line == "WU fetch failed | station_id=KNYNEWYO1 state=awaiting_status error_kind=bad_status"


def test_formatter_skips_unknown_and_empty_keys() -> None:
    formatter = ContextualFormatter(fmt="%(message)s")

    line = formatter.format(_record(api_key="secret", status_line=None))

    assert line == "WU fetch failed"


def test_formatter_quotes_values_with_spaces() -> None:
    formatter = ContextualFormatter(fmt="%(message)s")

    line = formatter.format(_record(status_line="HTTP/1.1 404 Not Found", fetch_ms=12))

    assert line == "WU fetch failed | status_line='HTTP/1.1 404 Not Found' fetch_ms=12"


def test_logging_config_keeps_http_stack_at_warning() -> None:
    config = build_logging_config("DEBUG")

    assert config["root"]["level"] == "DEBUG"
    assert config["handlers"]["stderr"]["level"] == "DEBUG"
    for name in QUIET_LOGGERS:
        assert config["loggers"][name] == {"level": "WARNING"}


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    saved_root = (root.level, list(root.handlers))
    saved_levels = {name: logging.getLogger(name).level for name in QUIET_LOGGERS}
    yield
    for handler in root.handlers:
        if handler not in saved_root[1]:
            handler.close()
    root.setLevel(saved_root[0])
    root.handlers[:] = saved_root[1]
    for name, level in saved_levels.items():
        logging.getLogger(name).setLevel(level)


def test_configure_logging_quiets_httpx_even_at_debug(monkeypatch, restore_logging) -> None:
    monkeypatch.setattr(logging_config, "_configured", False)

    logging_config.configure_logging("DEBUG")

    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("httpcore").level == logging.WARNING
    assert not logging.getLogger("httpx").isEnabledFor(logging.INFO)
    assert logging_config._configured is True


def test_configure_logging_runs_once(monkeypatch, restore_logging) -> None:
    monkeypatch.setattr(logging_config, "_configured", False)
    logging_config.configure_logging("INFO")

    logging_config.configure_logging("DEBUG")

    assert logging.getLogger().level == logging.INFO
