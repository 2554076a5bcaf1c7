"""Polymarket data API integration."""

from .client import PolymarketClient, create_polymarket_client
from .config import PolymarketConfig
from .exceptions import (
    PolymarketAPIError,
    PolymarketAuthError,
    PolymarketNotFoundError,
    PolymarketRateLimitError,
)
from .models import ClosedPosition, PositionValue

__all__ = [
    "PolymarketClient",
    "create_polymarket_client",
    "PolymarketConfig",
    "PolymarketAPIError",
    "PolymarketAuthError",
    "PolymarketNotFoundError",
    "PolymarketRateLimitError",
    "ClosedPosition",
    "PositionValue",
]
