"""Application configuration."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from core.models import StrategyConfig
from core.models.config import USDT_ADDRESS, WETH_ADDRESS


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Trading Configuration
    trade_size: float = 1.0
    slippage_threshold_a: float = 0.01  # 1%
    slippage_threshold_b: float = 0.005  # 0.5%
    slope_threshold: float = -0.001  # -0.1%
    strategy: Literal["A", "B"] = "A"

    # Token pair
    base_token: str = WETH_ADDRESS
    quote_token: str = USDT_ADDRESS

    # Optional YAML overrides for the strategy section
    trading_config_path: str = "trading.yaml"

    # Reporting
    summary_interval: float = 60.0  # seconds between performance summaries
    log_level: str = "INFO"

    def to_strategy_config(self) -> StrategyConfig:
        """Build the strategy parameters from these settings."""
        return StrategyConfig(
            trade_size=self.trade_size,
            slippage_threshold_a=self.slippage_threshold_a,
            slippage_threshold_b=self.slippage_threshold_b,
            slope_threshold=self.slope_threshold,
            strategy=self.strategy,
            base_token=self.base_token,
            quote_token=self.quote_token,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
