"""Trading configuration loaded from trading.yaml.

Supports:
- Overriding any strategy parameter (sizes, thresholds, token pair)
- Extra tokens in the pool allow-list
- Backward compatible: no YAML file = environment settings only
"""

import logging
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

from app.config import Settings, get_settings
from core.models import StrategyConfig
from core.models.trade import StrategyName

logger = logging.getLogger(__name__)


class TradingConfig(BaseModel):
    """Top-level trading.yaml configuration.

    Every field is optional; unset fields keep the value from ``Settings``.
    """

    model_config = ConfigDict(extra="forbid")

    trade_size: float | None = None
    slippage_threshold_a: float | None = None
    slippage_threshold_b: float | None = None
    slope_threshold: float | None = None
    strategy: StrategyName | None = None
    chunk_count: int | None = None
    base_token: str | None = None
    quote_token: str | None = None
    supported_tokens: list[str] = []
    history_size: int | None = None

    def to_strategy_config(self, settings: Settings) -> StrategyConfig:
        """Merge these overrides onto the environment settings."""
        base = settings.to_strategy_config().model_dump()
        overrides = self.model_dump(exclude_none=True)
        if not overrides.get("supported_tokens"):
            overrides.pop("supported_tokens", None)
            base.pop("supported_tokens", None)
        base.update(overrides)
        return StrategyConfig(**base)


_DEFAULT_PATH = Path(__file__).parent.parent / "trading.yaml"


def load_config_env(config_path: Path) -> None:
    """Load the .env next to a trading.yaml into the process environment.

    Existing variables win. Must run before ``get_settings()`` is first
    called for the values to reach ``Settings``.
    """
    load_dotenv(config_path.parent / ".env", override=False)


def load_trading_config(
    path: Path | None = None,
    settings: Settings | None = None,
) -> StrategyConfig:
    """Load strategy config from YAML file.

    Falls back to environment settings if the file doesn't exist.
    """
    config_path = path or _DEFAULT_PATH
    load_config_env(config_path)

    settings = settings or get_settings()

    if not config_path.exists():
        logger.info(
            "No trading.yaml found at %s, using environment settings",
            config_path,
        )
        return settings.to_strategy_config()

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    config = TradingConfig(**raw).to_strategy_config(settings)
    logger.info(
        "Loaded trading config: strategy=%s, trade_size=%s, slope_threshold=%s, %d tokens",
        config.strategy,
        config.trade_size,
        config.slope_threshold,
        len(config.supported_tokens),
    )
    return config
