"""Slope of a pool's price-impact curve.

slope = (Price_1% - Price_0.1%) / Price_0.1%

A strongly negative slope means the price degrades quickly with size,
i.e. liquidity near the mid price is thin.
"""

from core.models import PoolSnapshot
from core.models.config import SLOPE_HIGH_BPS, SLOPE_LOW_BPS


def nearest_basis_points(available: list[int], target: int) -> int | None:
    """Pick the basis point closest to ``target``.

    Ties go to the smaller basis point.

    Returns:
        The chosen basis point, or None if ``available`` is empty
    """
    if not available:
        return None
    return min(sorted(available), key=lambda bp: (abs(bp - target), bp))


def resolve_price(prices: dict[int, float], target: int) -> float | None:
    """Price at ``target`` basis points, falling back to the nearest bucket."""
    if target in prices:
        return prices[target]
    bp = nearest_basis_points(list(prices), target)
    if bp is None:
        return None
    return prices[bp]


def calculate_slope(
    snapshot: PoolSnapshot,
    low_bps: int = SLOPE_LOW_BPS,
    high_bps: int = SLOPE_HIGH_BPS,
) -> float | None:
    """
    Calculate the slope between two reference points of the price table.

    Args:
        snapshot: Pool snapshot with its price map
        low_bps: Lower reference point (default 10bp = 0.1%)
        high_bps: Upper reference point (default 100bp = 1%)

    Returns:
        The slope, or None when a reference price cannot be resolved or the
        lower price is zero
    """
    low_price = resolve_price(snapshot.prices, low_bps)
    high_price = resolve_price(snapshot.prices, high_bps)

    if low_price is None or high_price is None:
        return None
    if low_price == 0:
        return None

    return (high_price - low_price) / low_price
