"""
Taskbind Logging - structured logging built on structlog.

Manifesto:
    Dispatch happens far from the call site that enqueued the work, so a
    trace of "which descriptor resolved to which target" is only useful
    when every line carries the task id. This module configures structlog
    once and hands out loggers that pick up bound context.

    - **Structures:** JSON output for log aggregation
    - **Correlates:** task_id bound for the duration of a dispatch
    - **Flexes:** Console output for development, JSON for production

Architecture:
    ::

        configure_logging(level="INFO", json_format=True, service="worker")
            ↓
        structlog processor chain:
          1. TimeStamper(fmt="iso")
          2. merge_contextvars
          3. add_log_level
          4. add_service_metadata
          5. elasticsearch_compatible (JSON only)
          6. JSONRenderer (or ConsoleRenderer for dev)

Examples:
    >>> from taskbind.core.logging import configure_logging, get_logger
    >>> configure_logging(level="DEBUG", json_format=False)
    >>> logger = get_logger(__name__)
    >>> with LogContext(task_id="01J..."):
    ...     logger.debug("task.resolved", target="core:MathOps")

Tags:
    logging, structlog, observability, taskbind

Doc-Types:
    - API Reference
    - Observability Guide
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from taskbind.core.settings import get_settings

_SERVICE_NAME = "taskbind"


def _add_service_metadata(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add service-level metadata to all logs."""
    event_dict.setdefault("service.name", _SERVICE_NAME)
    return event_dict


def _elasticsearch_compatible(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Make field names Elasticsearch/ECS compatible."""
    if "timestamp" in event_dict:
        event_dict["@timestamp"] = event_dict.pop("timestamp")

    if "level" in event_dict:
        event_dict["log.level"] = event_dict.pop("level")

    return event_dict


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    service: str = "taskbind",
    add_timestamp: bool = True,
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: True for JSON, False for console, None for auto (JSON if not tty)
        service: Service name to include in logs
        add_timestamp: Include ISO timestamp in logs
    """
    global _SERVICE_NAME
    _SERVICE_NAME = service

    if json_format is None:
        json_format = not sys.stdout.isatty()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        _add_service_metadata,
    ]

    if add_timestamp:
        shared_processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_format:
        shared_processors.append(_elasticsearch_compatible)
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper()),
    )


def configure_from_settings(settings: Any) -> None:
    """Configure logging from a :class:`~taskbind.core.settings.TaskbindSettings`."""
    configure_logging(
        level=settings.log_level,
        json_format=settings.log_format == "json",
    )


def ensure_configured() -> None:
    """Apply ``TASKBIND_LOG_*`` settings unless structlog is already configured.

    An application that calls :func:`configure_logging` (or
    ``structlog.configure``) itself keeps its own setup.
    """
    if structlog.is_configured():
        return
    configure_from_settings(get_settings())


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger (usually ``get_logger(__name__)``).

    The name is bound as the ``logger_name`` field; print-based loggers
    carry no name of their own. Module-level loggers are not cached, so a
    later :func:`configure_logging` still reaches them.
    """
    if name is None:
        return structlog.wrap_logger(None, cache_logger_on_first_use=False)
    return structlog.wrap_logger(None, cache_logger_on_first_use=False, logger_name=name)


def bind_context(**kwargs: Any) -> None:
    """Bind context to include in all subsequent logs."""
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    """Remove specific keys from logging context."""
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    """Clear all bound context."""
    structlog.contextvars.clear_contextvars()


class LogContext:
    """Context manager for scoped logging context.

    Example:
        with LogContext(task_id="01J...", method="Add"):
            logger.debug("task.dispatch")
        # Context cleared here
    """

    def __init__(self, **kwargs: Any):
        self._context = kwargs

    def __enter__(self) -> LogContext:
        bind_context(**self._context)
        return self

    def __exit__(self, *args) -> None:
        unbind_context(*self._context.keys())


__all__ = [
    "configure_logging",
    "configure_from_settings",
    "ensure_configured",
    "get_logger",
    "bind_context",
    "unbind_context",
    "clear_context",
    "LogContext",
]
