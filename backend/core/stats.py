"""Performance statistics for the virtual ledger."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from core.models import Trade

logger = logging.getLogger(__name__)


@dataclass
class PerformanceSummary:
    """Summary of the ledger at one point in time."""

    total_trades: int = 0
    closed_trades: int = 0
    open_position: int = 0  # 1 if a position is open, else 0
    total_pnl: float = 0.0
    win_rate: float = 0.0  # fraction of closed trades with pnl > 0
    average_execution_price: float = 0.0  # mean entry price of closed trades
    wins: int = 0
    losses: int = 0
    trades: list[Trade] = field(default_factory=list)


class PerformanceCalculator:
    """Reduce a list of trades into a ``PerformanceSummary``."""

    def calculate(
        self,
        trades: list[Trade],
        has_open_position: bool = False,
    ) -> PerformanceSummary:
        summary = PerformanceSummary(
            total_trades=len(trades),
            open_position=1 if has_open_position else 0,
            trades=list(trades),
        )
        self._calc_closed(summary)
        return summary

    def _calc_closed(self, summary: PerformanceSummary) -> None:
        closed = [t for t in summary.trades if t.exit_price is not None]
        summary.closed_trades = len(closed)
        if not closed:
            return

        pnls = [t.pnl for t in closed]
        summary.total_pnl = sum(pnls)
        summary.wins = sum(1 for p in pnls if p > 0)
        summary.losses = sum(1 for p in pnls if p < 0)
        summary.win_rate = summary.wins / len(closed)
        summary.average_execution_price = sum(t.entry_price for t in closed) / len(closed)
