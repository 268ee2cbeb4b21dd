"""Trading configuration models."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator

from core.models.trade import StrategyName


# Ethereum mainnet WETH / USDT
WETH_ADDRESS = "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"
USDT_ADDRESS = "0xdac17f958d2ee523a2206206994597c13d831ec7"

# Reference points of the slope (0.1% and 1% slippage)
SLOPE_LOW_BPS = 10
SLOPE_HIGH_BPS = 100

DEFAULT_HISTORY_SIZE = 100


class StrategyConfig(BaseModel):
    """Strategy configuration parameters."""

    # Position sizing (in base token units)
    trade_size: float = Field(default=1.0, gt=0)

    # Slippage tolerance per strategy, as a fraction (0.01 = 1%)
    slippage_threshold_a: float = Field(default=0.01, gt=0, lt=1)
    slippage_threshold_b: float = Field(default=0.005, gt=0, lt=1)

    # BUY below / SELL above this slope (-0.001 = -0.1%)
    slope_threshold: float = -0.001

    strategy: StrategyName = "A"

    # Strategy B splits every action into this many equal executions
    chunk_count: int = Field(default=2, ge=1)

    # Token pair the strategy trades: base (e.g. WETH) priced in quote (e.g. USDT)
    base_token: str = WETH_ADDRESS
    quote_token: str = USDT_ADDRESS

    # Allow-set for the pool filter; empty = {base_token, quote_token}
    supported_tokens: list[str] = []

    history_size: int = Field(default=DEFAULT_HISTORY_SIZE, ge=1)

    @field_validator("base_token", "quote_token")
    @classmethod
    def _normalize_address(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("supported_tokens")
    @classmethod
    def _normalize_addresses(cls, value: list[str]) -> list[str]:
        return [v.strip().lower() for v in value]

    @model_validator(mode="after")
    def _default_supported_tokens(self):
        if not self.supported_tokens:
            self.supported_tokens = [self.base_token, self.quote_token]
        return self

    @property
    def slippage(self) -> float:
        """Slippage tolerance of the active strategy."""
        if self.strategy == "B":
            return self.slippage_threshold_b
        return self.slippage_threshold_a

    @property
    def executions_per_signal(self) -> int:
        """Number of ledger actions a single signal turns into."""
        if self.strategy == "B":
            return self.chunk_count
        return 1

    @property
    def execution_size(self) -> float:
        """Amount traded by each execution of a signal."""
        return self.trade_size / self.executions_per_signal
