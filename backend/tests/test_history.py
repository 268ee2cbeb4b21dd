"""Tests for per-pool slope history."""

import pytest

from core.history import SlopeHistoryTracker
from core.models import SlopeRecord


class TestSlopeHistoryTracker:
    """Tests for SlopeHistoryTracker."""

    @pytest.fixture
    def tracker(self):
        return SlopeHistoryTracker()

    def test_first_observation_has_no_delta(self, tracker):
        assert tracker.delta_slope("0xpool", -0.01) is None

    def test_delta_against_last_slope(self, tracker):
        tracker.update("0xpool", -0.01, timestamp=1)
        assert tracker.delta_slope("0xpool", -0.015) == pytest.approx(-0.005)

    def test_delta_does_not_mutate(self, tracker):
        tracker.update("0xpool", 0.1, timestamp=1)
        tracker.delta_slope("0xpool", 0.2)
        assert tracker.get_count("0xpool") == 1
        assert tracker.last_slope("0xpool") == 0.1

    def test_update_returns_record(self, tracker):
        record = tracker.update("0xpool", 0.5, timestamp=123)
        assert record == SlopeRecord(timestamp=123, slope=0.5)

    def test_update_without_timestamp_uses_clock(self, tracker):
        record = tracker.update("0xpool", 0.5)
        assert record.timestamp > 1_600_000_000_000

    def test_capacity_keeps_most_recent(self, tracker):
        """Never more than 100 records; oldest are evicted first."""
        for i in range(150):
            tracker.update("0xpool", float(i), timestamp=i)
            assert tracker.get_count("0xpool") <= 100

        history = tracker.get_history("0xpool")
        assert len(history) == 100
        assert [r.slope for r in history] == [float(i) for i in range(50, 150)]

    def test_custom_capacity(self):
        tracker = SlopeHistoryTracker(max_history=3)
        for i in range(5):
            tracker.update("0xpool", float(i), timestamp=i)
        assert [r.slope for r in tracker.get_history("0xpool")] == [2.0, 3.0, 4.0]

    def test_pools_are_independent(self, tracker):
        tracker.update("0xa", 1.0, timestamp=1)
        assert tracker.delta_slope("0xb", 2.0) is None
        assert tracker.delta_slope("0xa", 2.0) == pytest.approx(1.0)
        assert tracker.pools() == ["0xa"]

    def test_unknown_pool(self, tracker):
        assert tracker.get_history("0xnone") == []
        assert tracker.get_count("0xnone") == 0
        assert tracker.last_slope("0xnone") is None

    def test_reset(self, tracker):
        tracker.update("0xa", 1.0, timestamp=1)
        tracker.reset()
        assert tracker.pools() == []
        assert tracker.delta_slope("0xa", 1.0) is None
