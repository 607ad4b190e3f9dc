"""
Logging setup: JSON lines to the configured destinations and task context fields.
"""

from __future__ import annotations

import json
import logging

import structlog

from shared.logging import bind_request_context, configure_logging, level_from_name


def test_file_destination_receives_json_with_bound_context(tmp_path):
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    log_file = tmp_path / "logs" / "republisher.log"
    structlog.contextvars.clear_contextvars()
    try:
        configure_logging(level=logging.INFO, log_file=str(log_file), log_stdout=False)
        assert len(root.handlers) == 1

        bind_request_context(group="dev-coreap", tab=2, module=None)
        structlog.get_logger("unit").info("publish.item.skipped", reason="not_in_warning")
        structlog.get_logger("unit").debug("publish.item.attempt")

        lines = log_file.read_text(encoding="utf-8").splitlines()
        event = json.loads(lines[-1])
        assert len(lines) == 1
        assert event["message"] == "publish.item.skipped"
        assert event["level"] == "info"
        assert event["group"] == "dev-coreap"
        assert event["tab"] == 2
        assert "module" not in event
    finally:
        for handler in root.handlers:
            handler.close()
        structlog.contextvars.clear_contextvars()
        configure_logging()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_no_destination_falls_back_to_stdout():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        configure_logging(log_stdout=False)
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], logging.StreamHandler)
    finally:
        configure_logging()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_bind_request_context_drops_empty_fields():
    structlog.contextvars.clear_contextvars()
    try:
        bound = bind_request_context(phase="scan", group=None, attempt=1)
        assert bound == {"phase": "scan", "attempt": 1}
    finally:
        structlog.contextvars.clear_contextvars()


def test_level_from_name():
    assert level_from_name("debug") == logging.DEBUG
    assert level_from_name("WARNING") == logging.WARNING
    assert level_from_name("chatty") == logging.INFO
