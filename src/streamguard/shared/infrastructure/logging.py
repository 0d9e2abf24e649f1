"""
Structured logging configuration using structlog.

Provides consistent, structured logging across all modules.
"""

import logging
import sys
from typing import Any

import structlog

from streamguard.shared.infrastructure.config import settings


def truncate_predicates(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Shorten long predicate text before it reaches the renderer.

    Predicate metadata is copied verbatim from user code and can be
    arbitrarily large.
    """
    for key, value in event_dict.items():
        if isinstance(value, str) and len(value) > 200 and key != "event":
            event_dict[key] = value[:200] + "... [TRUNCATED]"
    return event_dict


def configure_logging(stream: Any = sys.stderr) -> None:
    """
    Configure structlog for the application.

    Sets up:
    - Pretty console output for development
    - JSON output for production
    - Log level from settings
    """
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        truncate_predicates,
    ]

    if settings.is_development:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=settings.debug),
        ]
    else:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=stream,
        level=getattr(logging, settings.log_level.upper()),
        force=True,
    )


def _install_library_defaults() -> None:
    """
    Route structlog through stdlib logging until the host configures it.

    Unconfigured structlog prints every level to stdout. As a library we
    defer to the stdlib level and handlers of the embedding application,
    and stay silent when it has none.
    """
    logging.getLogger("streamguard").addHandler(logging.NullHandler())
    if structlog.is_configured():
        return
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.KeyValueRenderer(key_order=["event"]),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


_install_library_defaults()


def get_logger(name: str) -> Any:
    """
    Get a structured logger instance.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.debug("rule_matched", rule_id=5, index=1)
    """
    return structlog.get_logger(name)
