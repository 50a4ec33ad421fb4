"""structlog setup for RuleForge.

Every entry carries a level, logger name, ISO timestamp and a correlation ID.
The HTTP middleware binds the request's ID through :func:`bind_correlation_id`;
entries logged outside a request get a fresh one.
"""

import logging
import sys
import uuid
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from ruleforge.core.config import get_settings

DEFAULT_LOGGER_NAME = "ruleforge"


def new_correlation_id() -> str:
    return f"cid_{uuid.uuid4().hex[:12]}"


def add_correlation_id(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Ensure the entry has a correlation ID."""
    event_dict.setdefault("correlation_id", new_correlation_id())
    return event_dict


def add_logger_name(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Record the logger name.

    PrintLogger has no ``name``, so the bound name or the package name is used.
    """
    event_dict.setdefault("logger", getattr(logger, "name", DEFAULT_LOGGER_NAME))
    return event_dict


def rename_message_field(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Emit structlog's ``event`` key as ``message``."""
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        add_correlation_id,
        rename_message_field,
    ]


def configure_logging(settings: Any | None = None) -> None:
    """Configure structlog and the standard library root logger.

    Development, or ``log_format=console``, renders colored console output;
    every other combination writes one JSON object per line.

    Args:
        settings: Settings to read ``log_level`` and ``log_format`` from.
            Defaults to the cached application settings.
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level)
    console = settings.is_development or settings.log_format == "console"

    if console:
        renderer: Processor = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        )
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=_shared_processors() + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=not console,
    )

    # uvicorn and SQLAlchemy log through the standard library
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level, force=True)
    for name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
        logging.getLogger(name).setLevel(level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to ``name``."""
    return structlog.get_logger(name or DEFAULT_LOGGER_NAME)


def bind_correlation_id(correlation_id: str) -> None:
    """Attach ``correlation_id`` to every entry logged in the current context."""
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
