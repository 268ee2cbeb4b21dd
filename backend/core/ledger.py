"""Virtual trade ledger.

Simulates opening and closing positions at prices taken from a pool's
slippage-bucket table. Nothing is sent to any venue.

The ledger holds a single, global open-position slot: opening a trade
always takes the slot, whatever pool the previous open trade was on.
A trade displaced this way stays in the ledger unclosed.
"""

import logging
import math
import time
from typing import Callable

from core.errors import PriceResolutionError
from core.models import PoolSnapshot, StrategyName, Trade, TradeType

logger = logging.getLogger(__name__)

BPS_PER_UNIT = 10_000

# Returns the current time in epoch milliseconds
Clock = Callable[[], int]


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


def slippage_to_basis_points(slippage: float) -> int:
    """Convert a slippage fraction to basis points, rounding half up."""
    return int(math.floor(slippage * BPS_PER_UNIT + 0.5))


def resolve_execution_price(snapshot: PoolSnapshot, slippage: float) -> float | None:
    """
    Find the execution price for a slippage tolerance.

    1. Bucket whose basis points equal the requested value (first in table order)
    2. Otherwise the bucket with the smallest distance (ties -> earliest in table)
    3. Without any bucket table, the flat price map (int or str keys)

    Returns:
        The bucket price, or None if nothing matches or the bucket has no price
    """
    target = slippage_to_basis_points(slippage)
    buckets = snapshot.slippage_buckets

    if not buckets:
        prices = snapshot.prices or {}
        if target in prices:
            return prices[target]
        return prices.get(str(target))

    bucket = next((b for b in buckets if b.basis_points == target), None)
    if bucket is None:
        bucket = min(buckets, key=lambda b: abs(b.basis_points - target))

    return bucket.price


def calculate_pnl(trade: Trade) -> float:
    """Realized PnL of a trade (0 until it is closed)."""
    return trade.pnl


class TradeLedger:
    """
    In-memory record of simulated trades.

    This service:
    1. Opens BUY trades at the resolved execution price
    2. Closes the open trade in place on a SELL
    3. Keeps every trade, open or closed, in arrival order
    """

    def __init__(self, clock: Clock | None = None):
        """
        Args:
            clock: Source of epoch-millisecond timestamps (for testing)
        """
        self._clock = clock or _wall_clock_ms
        self._trades: list[Trade] = []
        self._open_position: Trade | None = None
        self._counter = 0

    def _next_id(self) -> str:
        self._counter += 1
        return f"trade-{self._clock()}-{self._counter}"

    def _resolve(self, snapshot: PoolSnapshot, slippage: float, side: str) -> float:
        price = resolve_execution_price(snapshot, slippage)
        if price is None or price <= 0:
            raise PriceResolutionError(
                side,
                slippage_to_basis_points(slippage),
                snapshot.pool_address,
            )
        return price

    def open_buy(
        self,
        snapshot: PoolSnapshot,
        amount: float,
        slippage: float,
        strategy: StrategyName,
    ) -> Trade:
        """
        Open a BUY position.

        Raises:
            PriceResolutionError: If no execution price can be resolved
        """
        price = self._resolve(snapshot, slippage, TradeType.BUY.value)

        trade = Trade(
            id=self._next_id(),
            type=TradeType.BUY,
            amount=amount,
            entry_price=price,
            entry_timestamp=self._clock(),
            pool_address=snapshot.pool_address,
            strategy=strategy,
            slippage=slippage,
        )

        previous = self._open_position
        if previous is not None:
            logger.warning(
                f"Open position {previous.id} ({previous.pool_address}) replaced by "
                f"{trade.id} ({trade.pool_address}); it will stay unclosed"
            )

        self._trades.append(trade)
        self._open_position = trade
        return trade

    def close_sell(
        self,
        snapshot: PoolSnapshot,
        amount: float,
        slippage: float,
        strategy: StrategyName,
    ) -> Trade | None:
        """
        Close the open position.

        ``amount`` and ``strategy`` describe the closing action; the trade keeps
        the values it was opened with.

        Returns:
            The closed trade, or None when there is no open position

        Raises:
            PriceResolutionError: If no execution price can be resolved
        """
        trade = self._open_position
        if trade is None:
            logger.warning("No open position to sell")
            return None

        price = self._resolve(snapshot, slippage, TradeType.SELL.value)

        trade.close(price, self._clock())
        self._open_position = None

        logger.debug(
            f"Closed {trade.id} with SELL amount={amount} strategy={strategy} "
            f"on {snapshot.pool_address}"
        )
        return trade

    @property
    def trades(self) -> list[Trade]:
        """All trades in arrival order (copy of the list, same objects)."""
        return list(self._trades)

    @property
    def open_position(self) -> Trade | None:
        """The currently open trade, if any."""
        return self._open_position

    @property
    def has_open_position(self) -> bool:
        return self._open_position is not None

    def __len__(self) -> int:
        return len(self._trades)

    def reset(self) -> None:
        """Clear all trades, the open slot and the id counter."""
        self._trades.clear()
        self._open_position = None
        self._counter = 0
