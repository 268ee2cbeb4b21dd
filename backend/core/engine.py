"""Trading engine: signal generation plus ledger execution.

One engine instance owns all mutable state (slope histories, the ledger and
its open-position slot). Callers create as many independent engines as they
need; nothing lives at module level.
"""

import logging
from typing import Any

from core.errors import PriceResolutionError
from core.history import SlopeHistoryTracker
from core.ledger import Clock, TradeLedger
from core.models import StrategyConfig, Trade
from core.signal_generator import ProcessResult, Signal, SignalGenerator
from core.stats import PerformanceCalculator, PerformanceSummary

logger = logging.getLogger(__name__)


class TradingEngine:
    """
    Run the slope strategy against a virtual ledger.

    Strategy A executes each signal once at ``slippage_threshold_a`` with the
    full trade size. Strategy B splits each signal into ``chunk_count`` equal
    executions at ``slippage_threshold_b``.
    """

    def __init__(self, config: StrategyConfig, clock: Clock | None = None):
        self.config = config
        self.history = SlopeHistoryTracker(max_history=config.history_size)
        self.signal_generator = SignalGenerator(config, history=self.history)
        self.ledger = TradeLedger(clock=clock)
        self._calculator = PerformanceCalculator()

    def process_record(self, record: Any) -> ProcessResult | None:
        """Extract and score a decoded record (no execution)."""
        return self.signal_generator.process_record(record)

    def execute_signal(self, result: ProcessResult) -> list[Trade]:
        """
        Execute the signal carried by a process result.

        A price failure aborts the remaining executions of this signal; it is
        logged and never raised.

        Returns:
            Trades opened or closed by this signal, in execution order
        """
        if result.signal is None:
            return []

        strategy = self.config.strategy
        slippage = self.config.slippage
        count = self.config.executions_per_signal
        size = self.config.execution_size

        logger.info(
            f"{result.signal.value} signal (Strategy {strategy}, "
            f"slope={result.slope:.6f}, delta={result.delta_slope:.6f})"
        )

        executed: list[Trade] = []
        try:
            for i in range(count):
                if result.signal == Signal.BUY:
                    trade = self.ledger.open_buy(result.snapshot, size, slippage, strategy)
                    logger.info(
                        f"BUY {i + 1}/{count}: id={trade.id} amount={trade.amount} "
                        f"price={trade.entry_price:.6f} slippage={slippage}"
                    )
                    executed.append(trade)
                else:
                    trade = self.ledger.close_sell(result.snapshot, size, slippage, strategy)
                    if trade is None:
                        continue
                    logger.info(
                        f"SELL {i + 1}/{count}: id={trade.id} "
                        f"entry={trade.entry_price:.6f} exit={trade.exit_price:.6f} "
                        f"pnl={trade.pnl:.6f}"
                    )
                    executed.append(trade)
        except PriceResolutionError as e:
            logger.error(f"Error executing {result.signal.value}: {e}")

        return executed

    def handle_record(self, record: Any) -> tuple[ProcessResult | None, list[Trade]]:
        """Process a record and execute its signal, if any."""
        result = self.process_record(record)
        if result is None or result.signal is None:
            return result, []
        return result, self.execute_signal(result)

    def performance_summary(self) -> PerformanceSummary:
        """Compute statistics over the current ledger."""
        return self._calculator.calculate(
            self.ledger.trades,
            has_open_position=self.ledger.has_open_position,
        )

    def reset(self) -> None:
        """Clear histories and the ledger."""
        self.history.reset()
        self.ledger.reset()
        logger.info("Engine state reset")
