"""Data models."""

from core.models.pool import (
    DIRECTION_A_TO_B,
    DIRECTION_B_TO_A,
    DirectionType,
    PoolSnapshot,
    SlippageBucket,
    SlopeRecord,
)
from core.models.trade import StrategyName, Trade, TradeStatus, TradeType
from core.models.config import StrategyConfig

__all__ = [
    # Hot path (dataclass)
    "DIRECTION_A_TO_B",
    "DIRECTION_B_TO_A",
    "DirectionType",
    "PoolSnapshot",
    "SlippageBucket",
    "SlopeRecord",
    # Ledger (Pydantic)
    "StrategyName",
    "Trade",
    "TradeStatus",
    "TradeType",
    "StrategyConfig",
]
