"""Signal generator for the pool slope strategy.

This module is pure business logic with no I/O dependencies.
It turns decoded pool records into slope observations and trading signals;
executing those signals is left to the caller (see ``core.engine``).
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from core.extractor import PoolRecordExtractor
from core.history import SlopeHistoryTracker
from core.models import PoolSnapshot, StrategyConfig
from core.slope import calculate_slope

logger = logging.getLogger(__name__)


class Signal(str, Enum):
    """Trading action derived from slope dynamics."""

    BUY = "BUY"
    SELL = "SELL"


# Type alias for signal callbacks
SignalCallback = Callable[["ProcessResult"], None]


@dataclass
class ProcessResult:
    """Result of processing one pool record."""
    snapshot: PoolSnapshot
    slope: float | None  # None when the price table can't produce a slope
    delta_slope: float | None  # None on the first observation of a pool
    signal: Signal | None  # None = hold


def generate_signal(
    slope: float | None,
    delta_slope: float | None,
    threshold: float,
) -> Signal | None:
    """
    Map slope dynamics to an action. First match wins:

    1. slope decreasing AND below threshold -> BUY
    2. slope increasing OR above threshold -> SELL
    3. otherwise -> hold (None)

    Returns None immediately if either input is None.
    """
    if slope is None or delta_slope is None:
        return None

    if delta_slope < 0 and slope < threshold:
        return Signal.BUY

    if delta_slope > 0 or slope > threshold:
        return Signal.SELL

    return None


class SignalGenerator:
    """
    Generate trading signals from pool price-impact data.

    Strategy Logic:
    - slope = relative price change between the 10bp and 100bp buckets
    - delta slope = change versus the pool's previous observation
    - BUY when the slope falls and sits below the threshold
    - SELL when the slope rises or sits above the threshold

    History is updated only for records that produce a slope, and the delta
    is taken before the new slope is stored.
    """

    def __init__(
        self,
        config: StrategyConfig,
        history: SlopeHistoryTracker | None = None,
    ):
        self.config = config
        self.extractor = PoolRecordExtractor(config)
        self.history = history or SlopeHistoryTracker(max_history=config.history_size)
        self._callbacks: list[SignalCallback] = []

    def on_signal(self, callback: SignalCallback) -> None:
        """Register callback for new signals.

        Note: Duplicate callbacks are ignored.
        """
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def off_signal(self, callback: SignalCallback) -> None:
        """Unregister callback for new signals."""
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def process_snapshot(self, snapshot: PoolSnapshot) -> ProcessResult:
        """Score an already extracted snapshot."""
        slope = calculate_slope(snapshot)
        if slope is None:
            logger.debug(f"Slope unresolved for pool {snapshot.pool_address}")
            return ProcessResult(snapshot=snapshot, slope=None, delta_slope=None, signal=None)

        delta_slope = self.history.delta_slope(snapshot.pool_address, slope)
        self.history.update(snapshot.pool_address, slope, snapshot.timestamp)

        signal = generate_signal(slope, delta_slope, self.config.slope_threshold)
        result = ProcessResult(
            snapshot=snapshot,
            slope=slope,
            delta_slope=delta_slope,
            signal=signal,
        )

        if signal is not None:
            for callback in self._callbacks:
                try:
                    callback(result)
                except Exception as e:
                    logger.error(f"Signal callback error: {e}")

        return result

    def process_record(self, record: Any) -> ProcessResult | None:
        """
        Extract, score and signal one decoded record.

        Returns:
            ProcessResult, or None when the record was filtered out or malformed
        """
        snapshot = self.extractor.extract(record)
        if snapshot is None:
            return None
        return self.process_snapshot(snapshot)
