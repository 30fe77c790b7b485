"""
Resilience patterns for the LLM Relay.

This module provides:
- CredentialPool: ordered credentials with cooldown health records
- SelectionPolicy: attempt ordering across the pool
- Prometheus metrics for attempts, failures and exhaustion
"""

from src.resilience.credential_pool import (
    DEFAULT_COOLDOWN_SECONDS,
    CredentialHealth,
    CredentialPool,
)
from src.resilience.metrics import (
    record_attempt,
    record_exhaustion,
    record_failure,
    record_regeneration,
    set_cooling_down,
)
from src.resilience.selection import SelectionPolicy

__all__ = [
    # Credentials
    "CredentialPool",
    "CredentialHealth",
    "DEFAULT_COOLDOWN_SECONDS",
    # Selection
    "SelectionPolicy",
    # Metrics
    "record_attempt",
    "record_failure",
    "record_regeneration",
    "record_exhaustion",
    "set_cooling_down",
]
