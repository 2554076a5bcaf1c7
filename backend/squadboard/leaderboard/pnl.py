"""Per-member profit/loss aggregation over a timeframe window."""

from __future__ import annotations

import logging
import time
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Iterable

from squadboard.exceptions import InvalidTimeframeError
from squadboard.services.polymarket.models import ClosedPosition, PositionValue

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60
CENT = Decimal("0.01")


class Timeframe(str, Enum):
    ALL = "all"
    WEEKLY = "weekly"
    DAILY = "daily"

    @classmethod
    def parse(cls, value: str | Timeframe | None) -> Timeframe:
        if value is None or value == "":
            return cls.ALL
        try:
            return cls(value)
        except ValueError:
            raise InvalidTimeframeError(
                f"Invalid timeframe '{value}'. Expected one of: all, weekly, daily"
            ) from None


_WINDOW_DAYS = {
    Timeframe.WEEKLY: 7,
    Timeframe.DAILY: 1,
}


def window_start(timeframe: Timeframe, now: float | None = None) -> int | None:
    """Epoch-seconds cutoff for the timeframe, or None for all-time."""
    days = _WINDOW_DAYS.get(timeframe)
    if days is None:
        return None
    if now is None:
        now = time.time()
    return int(now - days * SECONDS_PER_DAY)


def filter_positions(
    positions: Iterable[ClosedPosition], start: int | None
) -> list[ClosedPosition]:
    """Drop positions closed before the cutoff. Untimestamped ones only survive without a cutoff."""
    positions = list(positions)
    if start is None:
        return positions
    return [p for p in positions if p.timestamp and p.timestamp >= start]


def realized_pnl(positions: Iterable[ClosedPosition]) -> float:
    return sum((p.realized_pnl or 0.0) for p in positions)


def aggregate_pnl(
    closed: Iterable[ClosedPosition],
    open_value: PositionValue | None,
    timeframe: Timeframe,
    start: int | None = None,
) -> float:
    """
    Combine realized and unrealized PnL for one member.

    Realized PnL is summed over closed positions inside the window. The open
    position value only counts toward the all-time total; daily and weekly
    totals are realized-only. The result is rounded to cents.
    """
    closed = list(closed)
    kept = filter_positions(closed, start)
    if start is not None:
        logger.debug(
            f"Timeframe: {timeframe.value}, total positions: {len(closed)}, "
            f"filtered: {len(kept)}, start: {start}"
        )

    total = realized_pnl(kept)
    if timeframe is Timeframe.ALL and open_value is not None:
        total += open_value.value or 0.0

    # Half-cents round away from zero, not to even
    return float(Decimal(total).quantize(CENT, rounding=ROUND_HALF_UP))
