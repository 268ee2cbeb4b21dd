"""Business services."""

from app.services.pool_monitor import PoolMonitor

__all__ = [
    "PoolMonitor",
]
