"""
Credential Pool - per-credential health tracking

This module holds the ordered set of upstream credentials together with one
health record per credential. A credential that failed recently is "cooling
down" and is deprioritized by the selection policy until the cooldown window
has elapsed.

State per credential:
    HEALTHY: no failure recorded (or cleared by a later success)
    COOLING_DOWN: failure recorded, now - last_failure_time <= cooldown
    (a failure older than the cooldown window counts as healthy again)

Thread Safety:
    Each write replaces a single timestamp under a threading.Lock, so
    concurrent requests never observe a torn record. Concurrent writers
    race benignly (last writer wins).
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from pydantic import SecretStr

from src.core.exceptions import ConfigurationError

DEFAULT_COOLDOWN_SECONDS = 30.0


@dataclass
class CredentialHealth:
    """
    Health record for one credential.

    Attributes:
        last_failure_time: Clock reading of the most recent failure, or None.
    """

    last_failure_time: Optional[float] = None


class CredentialPool:
    """
    Ordered credentials with per-credential cooldown state.

    Credentials are addressed by index only; the secret values are handed out
    exclusively through credential() for the executor to authenticate with.

    Example:
        >>> pool = CredentialPool([SecretStr("a"), SecretStr("b")])
        >>> pool.record_failure(0, now=100.0)
        >>> pool.is_cooling_down(0, now=120.0)
        True
    """

    def __init__(
        self,
        credentials: Sequence[SecretStr],
        cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the pool.

        Args:
            credentials: Ordered credentials; must not be empty.
            cooldown_seconds: Cooldown window shared by every credential.
            clock: Time source, monotonic seconds by default.

        Raises:
            ConfigurationError: If no credentials are given.
        """
        if not credentials:
            raise ConfigurationError("At least one upstream credential is required")

        self._credentials = list(credentials)
        self._health = [CredentialHealth() for _ in self._credentials]
        self._cooldown_seconds = cooldown_seconds
        self._clock = clock
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._credentials)

    def __repr__(self) -> str:
        return f"CredentialPool(size={len(self)}, cooldown_seconds={self._cooldown_seconds})"

    @property
    def cooldown_seconds(self) -> float:
        """Cooldown window in seconds."""
        return self._cooldown_seconds

    def now(self) -> float:
        """Current reading of the pool clock."""
        return self._clock()

    def credential(self, index: int) -> str:
        """Secret value for the credential at index."""
        return self._credentials[index].get_secret_value()

    def last_failure_time(self, index: int) -> Optional[float]:
        """Clock reading of the credential's last failure, if any."""
        with self._lock:
            return self._health[index].last_failure_time

    # =========================================================================
    # Health Updates
    # =========================================================================

    def record_success(self, index: int) -> None:
        """Clear the credential's failure timestamp."""
        with self._lock:
            self._health[index].last_failure_time = None

    def record_failure(self, index: int, now: Optional[float] = None) -> None:
        """Mark the credential as failed at now (pool clock by default)."""
        stamp = self._clock() if now is None else now
        with self._lock:
            self._health[index].last_failure_time = stamp

    # =========================================================================
    # Health Queries
    # =========================================================================

    def is_cooling_down(self, index: int, now: float) -> bool:
        """
        Whether the credential failed within the cooldown window.

        Args:
            index: Credential index.
            now: Clock reading to evaluate against.

        Returns:
            True iff a failure is recorded and now - failure <= cooldown.
        """
        failed_at = self.last_failure_time(index)
        if failed_at is None:
            return False
        return now - failed_at <= self._cooldown_seconds

    def cooling_down_count(self, now: Optional[float] = None) -> int:
        """Number of credentials currently cooling down."""
        at = self._clock() if now is None else now
        return sum(1 for i in range(len(self)) if self.is_cooling_down(i, at))
