"""Weekly MVP selection and announcement."""

from __future__ import annotations

import logging
from datetime import date

from squadboard.exceptions import NoLeaderboardDataError, NoMembersError
from squadboard.leaderboard.builder import LeaderboardBuilder
from squadboard.leaderboard.models import WinnerRecord, WinnerSummary
from squadboard.leaderboard.pnl import Timeframe
from squadboard.leaderboard.stores import AnnouncementChannel, WinnerStore

logger = logging.getLogger(__name__)

WINNER_ANNOUNCED_EVENT = "winner-announced"


def week_number(day: date) -> int:
    """1-based week of the year counted in 7-day blocks from January 1st."""
    return (day.timetuple().tm_yday - 1) // 7 + 1


def format_pnl(pnl: float) -> str:
    sign = "+" if pnl >= 0 else "-"
    return f"{sign}${abs(pnl):.2f}"


def winner_message(username: str, week: int, pnl: float) -> str:
    return (
        f"🏆 Week {week} MVP: {username} with {format_pnl(pnl)} PnL! "
        f"Congratulations! 🎉"
    )


class WinnerSelector:
    """Picks, stores and announces the weekly top performer of a squad."""

    def __init__(
        self,
        builder: LeaderboardBuilder,
        winners: WinnerStore,
        announcer: AnnouncementChannel,
    ):
        self.builder = builder
        self.winners = winners
        self.announcer = announcer

    async def calculate_winner(
        self,
        squad_id: int,
        caller: str,
        today: date | None = None,
    ) -> WinnerSummary:
        await self.builder.authorize(squad_id, caller)

        leaderboard = self.builder.cache.get(squad_id, Timeframe.ALL)
        if leaderboard is None:
            member_ids = await self.builder.memberships.list_members(squad_id)
            if not member_ids:
                raise NoMembersError("No members in squad")
            leaderboard = await self.builder.build(
                squad_id, Timeframe.ALL, member_ids=member_ids
            )

        if not leaderboard.entries:
            raise NoLeaderboardDataError("No leaderboard data available")

        top = leaderboard.entries[0]
        week = week_number(today or date.today())

        # Raises PersistenceError; nothing is announced in that case
        await self.winners.upsert(
            WinnerRecord(
                squad_id=squad_id,
                winner_address=top.evm_address,
                week=week,
                pnl=top.total_live_pnl,
            )
        )

        await self._announce(squad_id, top.username, week, top.total_live_pnl)

        return WinnerSummary(
            evm_address=top.evm_address,
            username=top.username,
            pnl=top.total_live_pnl,
            week=week,
        )

    async def _announce(self, squad_id: int, username: str, week: int, pnl: float) -> None:
        """Publish once. Delivery failures are logged, never retried or raised."""
        message = winner_message(username, week, pnl)
        try:
            await self.announcer.publish(
                WINNER_ANNOUNCED_EVENT,
                {"squad_id": squad_id, "message": message},
            )
        except Exception as e:
            logger.warning(f"Winner announcement for squad {squad_id} not delivered: {e}")
