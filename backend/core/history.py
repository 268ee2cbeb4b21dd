"""Per-pool slope history.

Keeps a bounded FIFO of ``SlopeRecord`` per pool address. The most recent
observation is what delta slope is measured against, so the delta for a new
slope must be read *before* that slope is appended.
"""

from __future__ import annotations

import logging
import time
from collections import deque

from core.models import SlopeRecord
from core.models.config import DEFAULT_HISTORY_SIZE

logger = logging.getLogger(__name__)


class SlopeHistoryTracker:
    """Track slope observations per pool.

    Parameters
    ----------
    max_history : int
        Maximum records kept per pool. Older records are discarded (FIFO).
    """

    def __init__(self, max_history: int = DEFAULT_HISTORY_SIZE):
        self.max_history = max_history
        self._history: dict[str, deque[SlopeRecord]] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def delta_slope(self, pool_address: str, current_slope: float) -> float | None:
        """Return ``current_slope - last recorded slope``.

        Returns ``None`` when the pool has no recorded slope yet.
        """
        buf = self._history.get(pool_address)
        if not buf:
            return None
        return current_slope - buf[-1].slope

    def update(
        self, pool_address: str, slope: float, timestamp: int | None = None
    ) -> SlopeRecord:
        """Append a slope observation, evicting the oldest when full."""
        if timestamp is None:
            timestamp = int(time.time() * 1000)
        if pool_address not in self._history:
            self._history[pool_address] = deque(maxlen=self.max_history)
            logger.debug("Tracking slope history for new pool %s", pool_address)
        record = SlopeRecord(timestamp=timestamp, slope=slope)
        self._history[pool_address].append(record)
        return record

    def get_history(self, pool_address: str) -> list[SlopeRecord]:
        """Return the pool's records, oldest first."""
        return list(self._history.get(pool_address, ()))

    def get_count(self, pool_address: str) -> int:
        """Return the number of records stored for a pool."""
        return len(self._history.get(pool_address, ()))

    def last_slope(self, pool_address: str) -> float | None:
        """Most recent slope for a pool, if any."""
        buf = self._history.get(pool_address)
        return buf[-1].slope if buf else None

    def pools(self) -> list[str]:
        """Pool addresses with at least one record."""
        return list(self._history)

    def reset(self) -> None:
        """Forget all pools."""
        self._history.clear()
