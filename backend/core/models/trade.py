"""Simulated trade models."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel


StrategyName = Literal["A", "B"]


class TradeType(str, Enum):
    """Action that opened a trade."""

    BUY = "BUY"
    SELL = "SELL"


class TradeStatus(str, Enum):
    """Trade lifecycle state."""

    OPEN = "open"
    CLOSED = "closed"


class Trade(BaseModel):
    """A position in the virtual ledger.

    Created OPEN by a buy. A later sell sets the exit fields in place,
    which moves the trade to CLOSED. A closed trade is never reopened.
    """

    id: str
    type: TradeType
    amount: float
    entry_price: float
    entry_timestamp: int  # Unix epoch milliseconds
    exit_price: float | None = None
    exit_timestamp: int | None = None
    pool_address: str
    strategy: StrategyName
    slippage: float

    @property
    def status(self) -> TradeStatus:
        """Current lifecycle state."""
        if self.exit_price is None:
            return TradeStatus.OPEN
        return TradeStatus.CLOSED

    @property
    def is_closed(self) -> bool:
        """Check if an exit price has been resolved."""
        return self.exit_price is not None

    @property
    def pnl(self) -> float:
        """Realized PnL (0 while the trade is open)."""
        if self.exit_price is None:
            return 0.0
        if self.type == TradeType.BUY:
            return (self.exit_price - self.entry_price) * self.amount
        return (self.entry_price - self.exit_price) * self.amount

    def close(self, price: float, timestamp: int) -> bool:
        """
        Record the exit of this trade.
        Returns True if the trade moved from OPEN to CLOSED.
        """
        if self.is_closed:
            return False

        self.exit_price = price
        self.exit_timestamp = timestamp
        return True
