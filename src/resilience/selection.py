"""
Selection Policy - credential attempt ordering

Produces, for one inbound request, the full order in which credentials are
attempted. The lead credential is the first healthy one in pool order; when
every credential is cooling down, the one that failed longest ago leads
(lowest index on ties). All other indices follow in pool order.
"""

from src.resilience.credential_pool import CredentialPool


class SelectionPolicy:
    """
    Ranks pool indices for a single request.

    Every index appears exactly once, so every credential is tried before a
    request is declared exhausted.
    """

    def __init__(self, pool: CredentialPool) -> None:
        self._pool = pool

    def select_order(self, now: float) -> list[int]:
        """
        Compute the attempt order at time now.

        Args:
            now: Clock reading (same clock as the pool).

        Returns:
            A permutation of range(len(pool)), preferred credential first.
        """
        first = self._lead_index(now)
        return [first] + [i for i in range(len(self._pool)) if i != first]

    def _lead_index(self, now: float) -> int:
        for index in range(len(self._pool)):
            if not self._pool.is_cooling_down(index, now):
                return index

        # All cooling down: oldest failure first, min() keeps the lowest index on ties
        return min(
            range(len(self._pool)),
            key=lambda i: self._pool.last_failure_time(i) or 0.0,
        )
