"""Tests for slither.utils.logging module."""

from __future__ import annotations

import logging

import structlog

from slither.utils.logging import (
    _add_correlation_ids,
    clear_correlation_context,
    configure_logging,
    get_logger,
    set_correlation_context,
)


def _process(event: str = "hello", **fields: object) -> dict[str, object]:
    event_dict: dict[str, object] = {"event": event, **fields}
    return dict(_add_correlation_ids(logging.getLogger("test"), "info", event_dict))


def test_configure_logging_sets_root_level() -> None:
    configure_logging(level="WARNING", log_format="console")
    assert logging.getLogger().level == logging.WARNING


def test_configure_logging_default_settings_do_not_error() -> None:
    configure_logging()


def test_configure_logging_json_uses_json_renderer() -> None:
    configure_logging(level="INFO", log_format="json")
    processors = structlog.get_config()["processors"]
    assert isinstance(processors[-1], structlog.processors.JSONRenderer)
    assert _add_correlation_ids in processors


def test_configure_logging_console_uses_console_renderer() -> None:
    configure_logging(level="INFO", log_format="console")
    processors = structlog.get_config()["processors"]
    assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)


def test_get_logger_returns_logger_proxy() -> None:
    configure_logging(level="DEBUG", log_format="console")
    logger = get_logger("test.module")
    assert hasattr(logger, "info")
    assert hasattr(logger, "debug")
    assert hasattr(logger, "warning")
    assert hasattr(logger, "error")


def test_correlation_ids_are_added_to_events() -> None:
    set_correlation_context(
        session_id="abc12345", level_path="levels/one.json", operation="paint"
    )

    payload = _process(foo="bar")

    assert payload["event"] == "hello"
    assert payload["foo"] == "bar"
    assert payload["session_id"] == "abc12345"
    assert payload["level_path"] == "levels/one.json"
    assert payload["operation"] == "paint"


def test_partial_context_only_adds_set_keys() -> None:
    set_correlation_context(operation="resize")

    payload = _process()

    assert payload["operation"] == "resize"
    assert "session_id" not in payload
    assert "level_path" not in payload


def test_set_correlation_context_keeps_unspecified_values() -> None:
    set_correlation_context(session_id="first", operation="new")
    set_correlation_context(operation="show")

    payload = _process()

    assert payload["session_id"] == "first"
    assert payload["operation"] == "show"


def test_clear_correlation_context_removes_ids() -> None:
    set_correlation_context(
        session_id="abc12345", level_path="levels/one.json", operation="paint"
    )
    clear_correlation_context()

    payload = _process()

    assert "session_id" not in payload
    assert "level_path" not in payload
    assert "operation" not in payload
