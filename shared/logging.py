"""
structlog setup for the republisher.

Events are rendered as JSON lines through the standard logging module.
Group, tab and module are bound per asyncio task, so interleaved lines from
concurrent tabs stay attributable.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Mapping, Optional

import structlog

_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    structlog.processors.EventRenamer("message"),
    structlog.processors.format_exc_info,
    structlog.processors.JSONRenderer(),
]


def _handler(target: logging.Handler, level: int) -> logging.Handler:
    target.setLevel(level)
    target.setFormatter(logging.Formatter("%(message)s"))
    return target


def configure_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    log_stdout: bool = True,
) -> None:
    """
    Route structlog through the root logger to stdout and/or `log_file`.

    Stdout is used when both destinations are disabled.
    """
    handlers: list[logging.Handler] = []
    if log_stdout:
        handlers.append(_handler(logging.StreamHandler(sys.stdout), level))
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(_handler(logging.FileHandler(log_file, encoding="utf-8"), level))
    if not handlers:
        handlers.append(_handler(logging.StreamHandler(sys.stdout), level))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers[:] = handlers

    structlog.configure(
        processors=_PROCESSORS,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.BoundLogger:
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(name) if name else structlog.get_logger()


def bind_request_context(
    *,
    group: Optional[str] = None,
    tab: Optional[int] = None,
    module: Optional[str] = None,
    phase: Optional[str] = None,
    **extra: Any,
) -> Mapping[str, Any]:
    """Bind the non-None fields into the current task's log context."""
    fields = {"group": group, "tab": tab, "module": module, "phase": phase, **extra}
    bound = {key: value for key, value in fields.items() if value is not None}
    structlog.contextvars.bind_contextvars(**bound)
    return bound


def level_from_name(name: str) -> int:
    """Map a LOG_LEVEL string to a logging level, defaulting to INFO."""
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO
