"""Pool monitor: drives the trading engine from a stream of decoded records.

Records are handled one at a time. A failure while handling one record is
logged and the next record is processed normally.
"""

import asyncio
import logging
import time
from typing import Any, AsyncIterable

from app.report import ReportFormatter
from core.engine import TradingEngine
from core.models import Trade
from core.signal_generator import ProcessResult
from core.stats import PerformanceSummary

logger = logging.getLogger(__name__)


def _fmt(value: float | None) -> str:
    return f"{value:.6f}" if value is not None else "N/A"


class PoolMonitor:
    """
    Feed decoded pool records into a ``TradingEngine``.

    This service:
    1. Counts and processes each incoming record
    2. Logs pool, direction, slope and delta slope for kept records
    3. Executes BUY/SELL signals against the engine's ledger
    4. Logs a performance summary periodically and on shutdown
    """

    def __init__(self, engine: TradingEngine, summary_interval: float = 60.0):
        """
        Args:
            engine: Engine owning histories and ledger
            summary_interval: Seconds between periodic summaries (<= 0 disables)
        """
        self.engine = engine
        self.summary_interval = summary_interval
        self.messages_processed = 0
        self.errors = 0
        self._started_at = time.monotonic()
        self._summary_task: asyncio.Task | None = None

    @property
    def uptime(self) -> float:
        """Seconds since the monitor was created."""
        return time.monotonic() - self._started_at

    async def handle_message(self, record: Any) -> tuple[ProcessResult | None, list[Trade]]:
        """Process one decoded record.

        Returns:
            The process result (None if filtered or failed) and any trades
        """
        self.messages_processed += 1
        try:
            result = self.engine.process_record(record)
            if result is None:
                return None, []

            logger.info(
                f"Pool: {result.snapshot.pool_address}, "
                f"Direction: {result.snapshot.direction}, "
                f"Slope: {_fmt(result.slope)}, DeltaSlope: {_fmt(result.delta_slope)}"
            )

            if result.signal is None:
                return result, []
            return result, self.engine.execute_signal(result)

        except Exception as e:
            self.errors += 1
            logger.error(f"Error handling message {self.messages_processed}: {e}")
            return None, []

    def log_summary(self) -> PerformanceSummary:
        """Log the current performance summary."""
        summary = self.engine.performance_summary()
        logger.info(
            ReportFormatter.format_console(
                summary,
                uptime=self.uptime,
                messages_processed=self.messages_processed,
            )
        )
        return summary

    async def _periodic_summary(self) -> None:
        """Background task to periodically log the performance summary."""
        while True:
            await asyncio.sleep(self.summary_interval)
            try:
                self.log_summary()
            except Exception as e:
                logger.warning(f"Performance summary error: {e}")

    def start(self) -> None:
        """Start the periodic summary task."""
        if self.summary_interval > 0 and self._summary_task is None:
            self._summary_task = asyncio.create_task(self._periodic_summary())

    async def stop(self) -> PerformanceSummary:
        """Stop background work and log the final summary."""
        if self._summary_task:
            self._summary_task.cancel()
            try:
                await self._summary_task
            except asyncio.CancelledError:
                pass
            self._summary_task = None

        summary = self.log_summary()
        logger.info("Pool monitor stopped")
        return summary

    async def run(self, source: AsyncIterable[Any]) -> PerformanceSummary:
        """Consume a record source until it is exhausted.

        Returns:
            The final performance summary
        """
        self.start()
        try:
            async for record in source:
                await self.handle_message(record)
        finally:
            summary = await self.stop()
        return summary
