"""Squad PnL leaderboards and weekly winners."""

from squadboard.leaderboard.builder import LeaderboardBuilder
from squadboard.leaderboard.cache import LeaderboardCache
from squadboard.leaderboard.models import (
    Leaderboard,
    LeaderboardEntry,
    MemberProfile,
    WinnerRecord,
    WinnerSummary,
)
from squadboard.leaderboard.pnl import Timeframe, aggregate_pnl, window_start
from squadboard.leaderboard.winner import WinnerSelector, week_number, winner_message

__all__ = [
    "LeaderboardBuilder",
    "LeaderboardCache",
    "Leaderboard",
    "LeaderboardEntry",
    "MemberProfile",
    "WinnerRecord",
    "WinnerSummary",
    "Timeframe",
    "aggregate_pnl",
    "window_start",
    "WinnerSelector",
    "week_number",
    "winner_message",
]
