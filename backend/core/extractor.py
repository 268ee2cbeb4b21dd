"""Pool record extractor.

Turns a decoded DEX pool record into a canonical ``PoolSnapshot``.

Records come from the wire decoder as nested mappings whose field names
appear either PascalCase (``Pool.SmartContract``) or camelCase
(``pool.smartContract``). All of that variance is absorbed here so the
rest of the engine works on one typed shape.
"""

import logging
import time
from typing import Any, Mapping

from core.errors import ExtractionError
from core.models import (
    DIRECTION_A_TO_B,
    DIRECTION_B_TO_A,
    PoolSnapshot,
    SlippageBucket,
    StrategyConfig,
)

logger = logging.getLogger(__name__)

_UINT32 = 4294967296  # 2^32, weight of the high word of a split 64-bit integer


def _camel(name: str) -> str:
    return name[:1].lower() + name[1:]


def get_field(record: Any, name: str, default: Any = None) -> Any:
    """Read ``name`` from a mapping, accepting PascalCase or camelCase.

    Args:
        record: Decoded record (or nested part of it)
        name: Field name in PascalCase, e.g. "SmartContract"
        default: Returned when neither spelling holds a value

    Returns:
        The first non-None value found, else ``default``
    """
    if not isinstance(record, Mapping):
        return default
    for key in (name, _camel(name)):
        value = record.get(key)
        if value is not None:
            return value
    return default


def to_address(value: Any) -> str:
    """Normalize an address field to a lower-case hex string."""
    if value is None:
        return ""
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if isinstance(value, Mapping):
        return to_address(get_field(value, "SmartContract"))
    return str(value).strip().lower()


def parse_timestamp(value: Any, now_ms: int | None = None) -> int:
    """Parse a record timestamp into epoch milliseconds.

    Accepts a split 64-bit integer (``{"low": .., "high": ..}``), a number,
    or a numeric string. Anything else falls back to the wall clock.
    """
    fallback = now_ms if now_ms is not None else int(time.time() * 1000)
    try:
        if isinstance(value, Mapping):
            if "low" in value and "high" in value:
                return int(value["low"]) + int(value["high"]) * _UINT32
            return fallback
        if isinstance(value, bool) or value is None:
            return fallback
        if isinstance(value, (int, float)):
            return int(value)
        if isinstance(value, str):
            return int(value.strip())
    except (TypeError, ValueError, OverflowError):
        pass
    return fallback


def _to_float(value: Any, field_name: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ExtractionError(f"Field {field_name} is not numeric: {value!r}")


def parse_buckets(raw_buckets: Any) -> tuple[SlippageBucket, ...]:
    """Convert a raw price table into ``SlippageBucket`` rows (order kept)."""
    if raw_buckets is None:
        return ()
    if not isinstance(raw_buckets, (list, tuple)):
        raise ExtractionError(f"Price table is not a list: {type(raw_buckets).__name__}")

    buckets = []
    for raw in raw_buckets:
        bp = get_field(raw, "SlippageBasisPoints", 0)
        price = get_field(raw, "Price")
        if isinstance(bp, bool) or (isinstance(bp, float) and not bp.is_integer()):
            raise ExtractionError(f"Field SlippageBasisPoints is not an integer: {bp!r}")
        try:
            basis_points = int(bp)
        except (TypeError, ValueError):
            raise ExtractionError(f"Field SlippageBasisPoints is not an integer: {bp!r}")
        if basis_points < 0:
            raise ExtractionError(f"Negative SlippageBasisPoints: {basis_points}")
        buckets.append(SlippageBucket(
            basis_points=basis_points,
            price=None if price is None else _to_float(price, "Price"),
        ))
    return tuple(buckets)


def build_price_map(buckets: tuple[SlippageBucket, ...]) -> dict[int, float]:
    """Build a ``basis_points -> price`` map, skipping buckets without a price.

    When a basis point repeats, the last bucket wins.
    """
    return {b.basis_points: b.price for b in buckets if b.price is not None}


class PoolRecordExtractor:
    """Normalize decoded pool records and filter them by token pair.

    Only pools whose two currencies are both in the configured allow-set
    are kept. The direction decides which price table is used:

    - token A = base, token B = quote -> AtoB, ``AtoBPrices``
    - token A = quote, token B = base -> BtoA, ``BtoAPrices``
    - any other allowed pairing -> AtoB
    """

    def __init__(self, config: StrategyConfig):
        self.base_token = config.base_token
        self.quote_token = config.quote_token
        self.supported_tokens = frozenset(config.supported_tokens)

    def is_supported(self, token_a: str, token_b: str) -> bool:
        """Check that both tokens belong to the allow-set."""
        return token_a in self.supported_tokens and token_b in self.supported_tokens

    def detect_direction(self, token_a: str, token_b: str) -> str:
        """Return the direction for a token pairing."""
        if token_a == self.quote_token and token_b == self.base_token:
            return DIRECTION_B_TO_A
        return DIRECTION_A_TO_B

    def extract(self, record: Any) -> PoolSnapshot | None:
        """
        Build a snapshot from a decoded record.

        Returns None when the pool's token pair is not supported or when the
        record is malformed (the failure is logged, never raised).
        """
        try:
            return self._extract(record)
        except ExtractionError as e:
            logger.warning(f"Dropping malformed pool record: {e}")
            return None

    def _extract(self, record: Any) -> PoolSnapshot | None:
        if not isinstance(record, Mapping):
            raise ExtractionError(f"Record is not a mapping: {type(record).__name__}")

        pool = get_field(record, "Pool", {})
        token_a = to_address(get_field(pool, "CurrencyA"))
        token_b = to_address(get_field(pool, "CurrencyB"))

        if not self.is_supported(token_a, token_b):
            logger.debug(f"Skipping unsupported pair {token_a or '?'}/{token_b or '?'}")
            return None

        pool_address = to_address(
            get_field(pool, "SmartContract") or get_field(record, "PoolAddress")
        )
        if not pool_address:
            raise ExtractionError("Missing pool address")

        header = get_field(record, "TransactionHeader", {})
        timestamp = parse_timestamp(get_field(header, "Time"))

        liquidity = get_field(record, "Liquidity", {})
        amount = get_field(liquidity, "AmountCurrencyA", 0)
        liquidity_value = _to_float(amount, "Liquidity.AmountCurrencyA")

        direction = self.detect_direction(token_a, token_b)
        price_table = get_field(record, "PoolPriceTable", {})
        if direction == DIRECTION_B_TO_A:
            raw_buckets = get_field(price_table, "BtoAPrices", [])
        else:
            raw_buckets = get_field(price_table, "AtoBPrices", [])

        buckets = parse_buckets(raw_buckets)

        return PoolSnapshot(
            pool_address=pool_address,
            token_a=token_a,
            token_b=token_b,
            direction=direction,
            liquidity=liquidity_value,
            timestamp=timestamp,
            slippage_buckets=buckets,
            prices=build_price_map(buckets),
        )
