"""Pool observation models.

These are hot path models built once per incoming record:
- @dataclass(slots=True) for minimal memory footprint
- float prices and integer millisecond timestamps
- str literals instead of Enum for the direction
"""

from dataclasses import dataclass, field
from typing import Literal


# Which side of the pool's price table a snapshot was built from
DirectionType = Literal["AtoB", "BtoA"]

DIRECTION_A_TO_B: DirectionType = "AtoB"
DIRECTION_B_TO_A: DirectionType = "BtoA"


@dataclass(slots=True, frozen=True)
class SlippageBucket:
    """One row of a pool price table.

    ``price`` is None when the producer omitted it; a zero price is kept as 0.0.
    """

    basis_points: int
    price: float | None


@dataclass(slots=True)
class PoolSnapshot:
    """Canonical view of one pool observation.

    Built by the extractor from a decoded record. Downstream components only
    ever see this shape, never the raw record.
    """

    pool_address: str
    token_a: str
    token_b: str
    direction: DirectionType
    liquidity: float
    timestamp: int  # Unix epoch milliseconds
    slippage_buckets: tuple[SlippageBucket, ...] = ()
    prices: dict[int, float] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class SlopeRecord:
    """A slope observation appended to a pool's history."""

    timestamp: int  # Unix epoch milliseconds
    slope: float
