"""
Structured logging for devspine.

One structlog configuration per process, written to stderr so that command
output on stdout stays scriptable.

Processor chain::

    merge_contextvars          batch_id / operation bound by LogContext
    TimeStamper(iso)           optional
    add_log_level
    add_logger_name            module name given to get_logger()
    _add_service_metadata      service.name
    ── JSON ──────────────────────────────
    format_exc_info
    _ecs_compatible            @timestamp, log.level
    JSONRenderer
    ── console ───────────────────────────
    ConsoleRenderer

Usage::

    configure_logging(level="INFO")
    logger = get_logger(__name__)
    with LogContext(batch_id="3f9c0a1b2c4d"):
        logger.info("reconcile.outcome", identifier="web-1", status="succeeded")

Tags:
    logging, structlog, devspine
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

_SERVICE_NAME = "devspine"


class _StderrLogger(structlog.PrintLogger):
    """PrintLogger bound to the current ``sys.stderr`` that knows its name."""

    def __init__(self, name: str | None = None) -> None:
        super().__init__(file=sys.stderr)
        self.name = name


def _stderr_logger(*args: Any) -> _StderrLogger:
    # Built per logger so a swapped sys.stderr (CliRunner, capsys) is honoured.
    return _StderrLogger(args[0] if args else None)


def _add_service_metadata(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    event_dict.setdefault("service.name", _SERVICE_NAME)
    return event_dict


def _ecs_compatible(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Rename timestamp/level to ECS field names."""
    if "timestamp" in event_dict:
        event_dict["@timestamp"] = event_dict.pop("timestamp")
    if "level" in event_dict:
        event_dict["log.level"] = event_dict.pop("level")
    return event_dict


def _level_number(level: str) -> int:
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"unknown log level: {level!r}")
    return value


def configure_logging(
    level: str = "WARNING",
    json_format: bool | None = None,
    service: str = "devspine",
    add_timestamp: bool = True,
) -> None:
    """Configure structlog for the process.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: True for JSON, False for console, None to pick JSON
            whenever stderr is not a terminal
        service: Value of the ``service.name`` field
        add_timestamp: Include an ISO timestamp

    Raises:
        ValueError: ``level`` is not a known level name.
    """
    global _SERVICE_NAME
    level_no = _level_number(level)
    _SERVICE_NAME = service

    if json_format is None:
        json_format = not sys.stderr.isatty()

    processors: list[Processor] = [structlog.contextvars.merge_contextvars]
    if add_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))
    processors += [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_service_metadata,
    ]

    if json_format:
        processors += [
            structlog.processors.format_exc_info,
            _ecs_compatible,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_no),
        context_class=dict,
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level_no)


def get_logger(name: str | None = None) -> Any:
    """Lazy structlog logger, usually ``get_logger(__name__)``."""
    if name is None:
        return structlog.get_logger()
    return structlog.get_logger(name)


class LogContext:
    """Bind context variables for the duration of a ``with`` block.

    Previous values are restored on exit, so contexts nest.

    Example:
        async with LogContext(operation="stop", batch_id="abc123"):
            logger.info("reconcile.start")
    """

    def __init__(self, **kwargs: Any):
        self._context = kwargs
        self._tokens: Any = None

    def __enter__(self) -> LogContext:
        self._tokens = structlog.contextvars.bind_contextvars(**self._context)
        return self

    def __exit__(self, *args: Any) -> None:
        structlog.contextvars.reset_contextvars(**self._tokens)

    async def __aenter__(self) -> LogContext:
        return self.__enter__()

    async def __aexit__(self, *args: Any) -> None:
        self.__exit__(*args)


__all__ = ["configure_logging", "get_logger", "LogContext"]
