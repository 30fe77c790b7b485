"""
Observability Package

Structured JSON logging with correlation IDs. Prometheus metrics for the
failover path live in src.resilience.metrics.
"""

from src.observability.logging import (
    clear_correlation_id,
    configure_logging,
    correlation_id_context,
    get_correlation_id,
    get_logger,
    register_secrets,
    set_correlation_id,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "register_secrets",
    "set_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
    "correlation_id_context",
]
