"""
Structured Logging Module

This module provides structured JSON logging with correlation ID support.

Pattern: Structured logging for observability
Pattern: Singleton configuration (configure once at startup)

Credentials are never passed to loggers; call sites log credential indices.
As a second line of defence, redact_secrets scrubs any registered secret
value from every rendered event.
"""

import contextvars
import logging
import sys
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Generator, Iterable, Optional, TextIO

import structlog
from structlog.types import EventDict, Processor

_configured: bool = False

_secrets: frozenset[str] = frozenset()

REDACTED = "[REDACTED]"


# =============================================================================
# Correlation ID Context
# =============================================================================

_correlation_id_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "correlation_id", default=None
)


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID for the current context."""
    _correlation_id_var.set(correlation_id)


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID, or None."""
    return _correlation_id_var.get()


def clear_correlation_id() -> None:
    """Clear the correlation ID for the current context."""
    _correlation_id_var.set(None)


@contextmanager
def correlation_id_context(correlation_id: str) -> Generator[None, None, None]:
    """
    Context manager for setting correlation ID.

    Example:
        >>> with correlation_id_context("req-12345"):
        ...     logger.info("processing request")
    """
    token = _correlation_id_var.set(correlation_id)
    try:
        yield
    finally:
        _correlation_id_var.reset(token)


# =============================================================================
# Secret Registry
# =============================================================================


def register_secrets(values: Iterable[str]) -> None:
    """Register secret values that must never appear in log output."""
    global _secrets
    _secrets = frozenset(value for value in values if value)


# =============================================================================
# Custom Processors
# =============================================================================


def add_correlation_id(
    logger: logging.Logger, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Add correlation ID to log event if set."""
    correlation_id = get_correlation_id()
    if correlation_id is not None:
        event_dict["correlation_id"] = correlation_id
    return event_dict


def add_timestamp(
    logger: logging.Logger, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Add ISO 8601 timestamp to log event."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def rename_level(
    logger: logging.Logger, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Rename log_level to level for cleaner output."""
    if "log_level" in event_dict:
        event_dict["level"] = event_dict.pop("log_level")
    return event_dict


def rename_logger_name(
    logger: logging.Logger, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Expose the bound logger_name as logger."""
    if "logger_name" in event_dict:
        event_dict["logger"] = event_dict.pop("logger_name")
    return event_dict


def redact_secrets(
    logger: logging.Logger, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Replace registered secret values in string fields."""
    if not _secrets:
        return event_dict
    for key, value in event_dict.items():
        if isinstance(value, str):
            for secret in _secrets:
                if secret in value:
                    value = value.replace(secret, REDACTED)
            event_dict[key] = value
    return event_dict


# =============================================================================
# Singleton Configuration
# =============================================================================


def configure_logging(
    level: str = "INFO",
    stream: Optional[TextIO] = None,
    force: bool = False,
) -> None:
    """
    Configure structlog for the application.

    This should be called once at application startup. Subsequent calls
    are no-ops unless force=True.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR)
        stream: Output stream (default: sys.stdout at write time)
        force: Force reconfiguration
    """
    global _configured

    if _configured and not force:
        return

    processors: list[Processor] = [
        structlog.stdlib.add_log_level,
        add_timestamp,
        add_correlation_id,
        rename_level,
        rename_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        redact_secrets,
        structlog.processors.JSONRenderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(_level_to_int(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=False,
    )

    # Stdlib loggers (middleware, uvicorn) get a handler if none is installed
    logging.basicConfig(level=_level_to_int(level), stream=stream or sys.stdout)

    _configured = True


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a structured logger bound to name.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("credential failed", credential_index=1)
    """
    configure_logging()
    # Lazy proxy: module-level loggers pick up later reconfiguration.
    # Bound as logger_name; "logger" collides with wrap_logger's first argument.
    return structlog.get_logger(logger_name=name)


def _level_to_int(level: str) -> int:
    """Convert level string to logging int."""
    levels = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return levels.get(level.upper(), logging.INFO)
