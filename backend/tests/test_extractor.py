"""Tests for pool record extraction."""

import logging

import pytest

from core.errors import ExtractionError
from core.extractor import (
    PoolRecordExtractor,
    build_price_map,
    get_field,
    parse_buckets,
    parse_timestamp,
    to_address,
)
from core.models import DIRECTION_A_TO_B, DIRECTION_B_TO_A, SlippageBucket, StrategyConfig
from core.models.config import USDT_ADDRESS, WETH_ADDRESS


# ---------------------------------------------------------------------------
# Helper
# ---------------------------------------------------------------------------

def make_record(
    pool: str = "0xPOOL",
    token_a: str = WETH_ADDRESS,
    token_b: str = USDT_ADDRESS,
    atob: list[tuple[int, float | None]] | None = None,
    btoa: list[tuple[int, float | None]] | None = None,
    time=1700000000000,
    liquidity="1500.5",
) -> dict:
    """Build a PascalCase decoded record with sensible defaults."""
    if atob is None:
        atob = [(10, 100.0), (100, 99.0)]
    if btoa is None:
        btoa = [(10, 0.01), (100, 0.0098)]
    return {
        "Pool": {
            "SmartContract": pool,
            "CurrencyA": {"SmartContract": token_a, "Symbol": "A"},
            "CurrencyB": {"SmartContract": token_b, "Symbol": "B"},
        },
        "Liquidity": {"AmountCurrencyA": liquidity},
        "PoolPriceTable": {
            "AtoBPrices": [{"SlippageBasisPoints": bp, "Price": p} for bp, p in atob],
            "BtoAPrices": [{"SlippageBasisPoints": bp, "Price": p} for bp, p in btoa],
        },
        "TransactionHeader": {"Time": time},
    }


@pytest.fixture
def extractor():
    return PoolRecordExtractor(StrategyConfig())


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------

class TestFieldHelpers:
    """Tests for the schema-tolerant field helpers."""

    def test_get_field_pascal_case(self):
        assert get_field({"SmartContract": "0x1"}, "SmartContract") == "0x1"

    def test_get_field_camel_case(self):
        assert get_field({"smartContract": "0x1"}, "SmartContract") == "0x1"

    def test_get_field_keeps_zero(self):
        """A zero value is a value, not a missing field."""
        assert get_field({"SlippageBasisPoints": 0}, "SlippageBasisPoints", 7) == 0

    def test_get_field_default(self):
        assert get_field({}, "Price") is None
        assert get_field(None, "Price", "x") == "x"

    def test_to_address_from_bytes(self):
        assert to_address(b"\xab\xcd") == "0xabcd"

    def test_to_address_from_currency(self):
        assert to_address({"smartContract": "0xABC"}) == "0xabc"

    def test_to_address_missing(self):
        assert to_address(None) == ""


class TestParseTimestamp:
    """Tests for timestamp parsing."""

    def test_split_64bit(self):
        assert parse_timestamp({"low": 1000, "high": 1}) == 1000 + 4294967296

    def test_plain_number(self):
        assert parse_timestamp(1700000000000) == 1700000000000

    def test_numeric_string(self):
        assert parse_timestamp("1700000000123") == 1700000000123

    def test_garbage_falls_back_to_clock(self):
        assert parse_timestamp("not-a-time", now_ms=42) == 42
        assert parse_timestamp({"low": "x", "high": 1}, now_ms=42) == 42
        assert parse_timestamp(None, now_ms=42) == 42

    def test_non_finite_falls_back_to_clock(self):
        assert parse_timestamp(float("inf"), now_ms=42) == 42
        assert parse_timestamp(float("nan"), now_ms=42) == 42
        assert parse_timestamp({"low": float("inf"), "high": 0}, now_ms=42) == 42

    def test_non_finite_time_keeps_record(self, extractor):
        snapshot = extractor.extract(make_record(time=float("inf")))
        assert snapshot is not None
        assert snapshot.timestamp > 1_600_000_000_000

    def test_missing_uses_wall_clock(self):
        assert parse_timestamp(None) > 1_600_000_000_000


class TestBuckets:
    """Tests for price table parsing."""

    def test_order_and_missing_price(self):
        buckets = parse_buckets([
            {"SlippageBasisPoints": 100, "Price": 99.0},
            {"slippageBasisPoints": 10, "price": "100"},
            {"SlippageBasisPoints": 50},
        ])
        assert buckets == (
            SlippageBucket(100, 99.0),
            SlippageBucket(10, 100.0),
            SlippageBucket(50, None),
        )

    def test_price_map_skips_missing_price(self):
        buckets = (SlippageBucket(10, 100.0), SlippageBucket(50, None), SlippageBucket(100, 0.0))
        assert build_price_map(buckets) == {10: 100.0, 100: 0.0}

    def test_missing_basis_points_defaults_to_zero(self):
        buckets = parse_buckets([{"Price": 5.0}])
        assert buckets[0].basis_points == 0

    def test_integral_float_basis_points(self):
        buckets = parse_buckets([{"SlippageBasisPoints": 100.0, "Price": 99.0}])
        assert buckets == (SlippageBucket(100, 99.0),)

    @pytest.mark.parametrize("bp", [10.7, True, float("inf"), "10.5", -5])
    def test_invalid_basis_points_raise(self, bp):
        """Fractional, boolean or negative basis points are never truncated into a bucket."""
        with pytest.raises(ExtractionError, match="SlippageBasisPoints"):
            parse_buckets([{"SlippageBasisPoints": bp, "Price": 1.0}])

    def test_fractional_basis_points_drop_record(self, extractor):
        record = make_record(atob=[(10.7, 100.0), (100, 99.0)])
        assert extractor.extract(record) is None


# ---------------------------------------------------------------------------
# PoolRecordExtractor
# ---------------------------------------------------------------------------

class TestPoolRecordExtractor:
    """Tests for PoolRecordExtractor."""

    def test_extract_pascal_case(self, extractor):
        snapshot = extractor.extract(make_record())

        assert snapshot is not None
        assert snapshot.pool_address == "0xpool"
        assert snapshot.token_a == WETH_ADDRESS
        assert snapshot.token_b == USDT_ADDRESS
        assert snapshot.direction == DIRECTION_A_TO_B
        assert snapshot.liquidity == pytest.approx(1500.5)
        assert snapshot.timestamp == 1700000000000
        assert snapshot.prices == {10: 100.0, 100: 99.0}

    def test_extract_camel_case(self, extractor):
        record = {
            "pool": {
                "smartContract": "0xpool",
                "currencyA": {"smartContract": WETH_ADDRESS},
                "currencyB": {"smartContract": USDT_ADDRESS},
            },
            "liquidity": {"amountCurrencyA": 10},
            "poolPriceTable": {
                "atoBPrices": [
                    {"slippageBasisPoints": 10, "price": 2000.0},
                    {"slippageBasisPoints": 100, "price": 1990.0},
                ],
            },
            "transactionHeader": {"time": {"low": 5, "high": 0}},
        }
        snapshot = extractor.extract(record)

        assert snapshot is not None
        assert snapshot.pool_address == "0xpool"
        assert snapshot.timestamp == 5
        assert snapshot.prices == {10: 2000.0, 100: 1990.0}

    def test_addresses_are_case_insensitive(self, extractor):
        record = make_record(token_a=WETH_ADDRESS.upper().replace("0X", "0x"))
        assert extractor.extract(record) is not None

    def test_reverse_pair_uses_b_to_a_table(self, extractor):
        record = make_record(token_a=USDT_ADDRESS, token_b=WETH_ADDRESS)
        snapshot = extractor.extract(record)

        assert snapshot.direction == DIRECTION_B_TO_A
        assert snapshot.prices == {10: 0.01, 100: 0.0098}

    def test_other_allowed_pairing_defaults_to_a_to_b(self, extractor):
        record = make_record(token_a=WETH_ADDRESS, token_b=WETH_ADDRESS)
        snapshot = extractor.extract(record)

        assert snapshot.direction == DIRECTION_A_TO_B
        assert snapshot.prices == {10: 100.0, 100: 99.0}

    def test_unsupported_pair_is_filtered(self, extractor, caplog):
        record = make_record(token_b="0x6b175474e89094c44da98b954eedeac495271d0f")
        with caplog.at_level(logging.WARNING):
            assert extractor.extract(record) is None
        assert caplog.records == []

    def test_missing_tokens_are_filtered(self, extractor):
        record = make_record()
        del record["Pool"]["CurrencyB"]
        assert extractor.extract(record) is None

    def test_extra_supported_tokens(self):
        dai = "0x6b175474e89094c44da98b954eedeac495271d0f"
        config = StrategyConfig(supported_tokens=[WETH_ADDRESS, USDT_ADDRESS, dai])
        snapshot = PoolRecordExtractor(config).extract(make_record(token_b=dai))

        assert snapshot is not None
        assert snapshot.direction == DIRECTION_A_TO_B

    def test_bucket_without_price_kept_in_table(self, extractor):
        record = make_record(atob=[(10, 100.0), (50, None), (100, 99.0)])
        snapshot = extractor.extract(record)

        assert len(snapshot.slippage_buckets) == 3
        assert 50 not in snapshot.prices

    def test_missing_price_table(self, extractor):
        record = make_record()
        del record["PoolPriceTable"]
        snapshot = extractor.extract(record)

        assert snapshot is not None
        assert snapshot.slippage_buckets == ()
        assert snapshot.prices == {}

    def test_missing_liquidity_defaults_to_zero(self, extractor):
        record = make_record()
        del record["Liquidity"]
        assert extractor.extract(record).liquidity == 0.0

    def test_bytes_pool_address(self, extractor):
        record = make_record()
        record["Pool"]["SmartContract"] = b"\x01\x02"
        assert extractor.extract(record).pool_address == "0x0102"

    def test_missing_pool_address_is_logged(self, extractor, caplog):
        record = make_record()
        del record["Pool"]["SmartContract"]
        with caplog.at_level(logging.WARNING):
            assert extractor.extract(record) is None
        assert "Missing pool address" in caplog.text

    def test_malformed_liquidity_returns_none(self, extractor):
        assert extractor.extract(make_record(liquidity="lots")) is None

    def test_malformed_price_returns_none(self, extractor):
        record = make_record()
        record["PoolPriceTable"]["AtoBPrices"][0]["Price"] = "abc"
        assert extractor.extract(record) is None

    def test_non_mapping_record(self, extractor):
        assert extractor.extract(["not", "a", "record"]) is None
        assert extractor.extract(None) is None

    def test_bad_time_falls_back_to_clock(self, extractor):
        snapshot = extractor.extract(make_record(time="yesterday"))
        assert snapshot.timestamp > 1_600_000_000_000
