"""Squad leaderboard construction."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable

from pydantic import ValidationError

from squadboard.exceptions import AccessDeniedError, SquadNotFoundError
from squadboard.leaderboard.cache import LeaderboardCache
from squadboard.leaderboard.models import Leaderboard, LeaderboardEntry, MemberProfile
from squadboard.leaderboard.pnl import Timeframe, aggregate_pnl, window_start
from squadboard.leaderboard.stores import MembershipStore, ProfileStore
from squadboard.services.polymarket import PolymarketAPIError, PolymarketClient

logger = logging.getLogger(__name__)

ANONYMOUS_NAME = "Anonymous"
MAX_SQUAD_MEMBERS = 10
AVATAR_URL_TEMPLATE = "https://api.dicebear.com/9.x/pixel-art/svg?seed={address}"


class LeaderboardBuilder:
    """
    Builds per-squad PnL leaderboards.

    Each member's PnL is fetched concurrently from the market data API. A
    member whose data cannot be fetched is ranked with a PnL of 0 instead of
    failing the whole leaderboard.
    """

    def __init__(
        self,
        memberships: MembershipStore,
        profiles: ProfileStore,
        market_data: PolymarketClient,
        cache: LeaderboardCache | None = None,
        anonymous_name: str = ANONYMOUS_NAME,
        avatar_url_template: str = AVATAR_URL_TEMPLATE,
        max_members: int = MAX_SQUAD_MEMBERS,
        clock: Callable[[], float] = time.time,
    ):
        self.memberships = memberships
        self.profiles = profiles
        self.market_data = market_data
        self.cache = cache if cache is not None else LeaderboardCache()
        self.anonymous_name = anonymous_name
        self.avatar_url_template = avatar_url_template
        self.max_members = max_members
        self._clock = clock

    async def authorize(self, squad_id: int, caller: str) -> None:
        """Raise unless the squad exists and the caller belongs to it."""
        if not await self.memberships.squad_exists(squad_id):
            raise SquadNotFoundError("Squad not found")
        if not await self.memberships.is_member(squad_id, caller):
            raise AccessDeniedError("You are not a member of this squad")

    async def get_leaderboard(
        self,
        squad_id: int,
        caller: str,
        timeframe: Timeframe | str = Timeframe.ALL,
    ) -> Leaderboard:
        """Leaderboard for a squad, as seen by one of its members."""
        timeframe = Timeframe.parse(timeframe)
        await self.authorize(squad_id, caller)
        return await self.build(squad_id, timeframe)

    async def build(
        self,
        squad_id: int,
        timeframe: Timeframe,
        member_ids: list[str] | None = None,
    ) -> Leaderboard:
        """
        Serve from cache, or compute and cache. Does not check membership.

        Callers that already listed the squad members pass them in as
        member_ids to skip a second lookup.
        """
        cached = self.cache.get(squad_id, timeframe)
        if cached is not None:
            logger.debug(f"Leaderboard cache hit for squad {squad_id} ({timeframe.value})")
            return cached

        if member_ids is None:
            member_ids = await self.memberships.list_members(squad_id)
        if not member_ids:
            return Leaderboard(squad_id=squad_id, timeframe=timeframe.value)
        if len(member_ids) > self.max_members:
            # Fan-out is unbounded; the member cap is what keeps it small
            logger.warning(
                f"Squad {squad_id} has {len(member_ids)} members "
                f"(cap {self.max_members}); fetching all of them"
            )

        members = await self.profiles.get_profiles(member_ids)
        start = window_start(timeframe, now=self._clock())

        entries = await asyncio.gather(
            *(self._member_entry(member, timeframe, start) for member in members)
        )
        # sorted() is stable, so tied members keep their member-list order
        ranked = sorted(entries, key=lambda e: e.total_live_pnl, reverse=True)

        leaderboard = Leaderboard(
            squad_id=squad_id,
            timeframe=timeframe.value,
            entries=tuple(ranked),
        )
        self.cache.set(squad_id, timeframe, leaderboard)
        logger.info(
            f"Built {timeframe.value} leaderboard for squad {squad_id} "
            f"with {len(ranked)} members"
        )
        return leaderboard

    async def _member_entry(
        self,
        member: MemberProfile,
        timeframe: Timeframe,
        start: int | None,
    ) -> LeaderboardEntry:
        return LeaderboardEntry(
            evm_address=member.evm_address,
            username=member.username or self.anonymous_name,
            avatar_url=member.avatar_url
            or self.avatar_url_template.format(address=member.evm_address),
            total_live_pnl=await self.member_pnl(member, timeframe, start),
        )

    async def member_pnl(
        self,
        member: MemberProfile,
        timeframe: Timeframe,
        start: int | None,
    ) -> float:
        """Total PnL for one member; 0 when it cannot be determined."""
        trading_address = member.polymarket_user_address
        if not trading_address:
            return 0.0

        name = member.username or member.evm_address
        try:
            closed, value = await self.market_data.fetch_user_data(
                trading_address, start=start
            )
        except PolymarketAPIError as e:
            logger.error(
                f"Failed to fetch data for {name}: {e} (status={e.status_code})"
            )
            return 0.0
        except ValidationError as e:
            logger.error(f"Malformed market data for {name}: {e}")
            return 0.0

        total = aggregate_pnl(closed, value, timeframe, start)
        if timeframe is not Timeframe.ALL:
            logger.debug(f"User {name}: {timeframe.value} total={total}")
        return total
