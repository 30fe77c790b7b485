"""
Resilience Metrics

This module provides Prometheus metrics for credential failover.

Metrics Provided:
- Upstream attempts per credential (counter)
- Upstream failures per credential and code (counter)
- Output-policy regenerations (counter)
- Exhausted requests (counter)
- Credentials currently cooling down (gauge)

Credentials are labelled by pool index only.
"""

from prometheus_client import Counter, Gauge

# =============================================================================
# Constants
# =============================================================================

METRIC_ATTEMPTS = "llm_relay_upstream_attempts_total"
METRIC_FAILURES = "llm_relay_upstream_failures_total"
METRIC_REGENERATIONS = "llm_relay_policy_regenerations_total"
METRIC_EXHAUSTED = "llm_relay_requests_exhausted_total"
METRIC_COOLING_DOWN = "llm_relay_credentials_cooling_down"


UPSTREAM_ATTEMPTS = Counter(
    name=METRIC_ATTEMPTS,
    documentation="Total number of upstream calls per credential",
    labelnames=["credential_index"],
)

UPSTREAM_FAILURES = Counter(
    name=METRIC_FAILURES,
    documentation="Total number of failed upstream calls per credential",
    labelnames=["credential_index", "code"],
)

POLICY_REGENERATIONS = Counter(
    name=METRIC_REGENERATIONS,
    documentation="Total number of regenerations triggered by the output policy",
)

REQUESTS_EXHAUSTED = Counter(
    name=METRIC_EXHAUSTED,
    documentation="Total number of requests where every credential failed",
)

CREDENTIALS_COOLING_DOWN = Gauge(
    name=METRIC_COOLING_DOWN,
    documentation="Number of credentials inside their cooldown window",
)


def record_attempt(credential_index: int) -> None:
    """Record an upstream call made with the credential at credential_index."""
    UPSTREAM_ATTEMPTS.labels(credential_index=str(credential_index)).inc()


def record_failure(credential_index: int, code: str) -> None:
    """
    Record a failed upstream call.

    Args:
        credential_index: Pool index of the credential used
        code: Normalized error code
    """
    UPSTREAM_FAILURES.labels(credential_index=str(credential_index), code=code).inc()


def record_regeneration() -> None:
    """Record one output-policy regeneration."""
    POLICY_REGENERATIONS.inc()


def record_exhaustion() -> None:
    """Record a request that ran out of credentials."""
    REQUESTS_EXHAUSTED.inc()


def set_cooling_down(count: int) -> None:
    """Set the number of credentials currently cooling down."""
    CREDENTIALS_COOLING_DOWN.set(count)
