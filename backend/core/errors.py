"""Exceptions raised by the core engine."""


class SlopeTraderError(Exception):
    """Base class for engine errors."""


class ExtractionError(SlopeTraderError):
    """A decoded record is missing or has malformed critical fields."""


class PriceResolutionError(SlopeTraderError):
    """No usable execution price for the requested slippage."""

    def __init__(self, side: str, basis_points: int, pool_address: str = ""):
        self.side = side
        self.basis_points = basis_points
        self.pool_address = pool_address
        super().__init__(
            f"Unable to determine execution price for {side} "
            f"at {basis_points}bp (pool={pool_address or 'unknown'})"
        )
