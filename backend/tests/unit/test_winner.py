"""
Unit Tests: Weekly winner selection

Test cases:
- Week numbering and announcement formatting
- Replacing an existing winner for the same week
- Cache reuse of the all-time leaderboard
- Error paths: no members, persistence failure, announcement failure
"""

import asyncio
from datetime import date

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from fakes import ALICE, BOB, FakeAnnouncer, FakeMarketData, FakeMemberships, FakeProfiles, FakeWinners
from squadboard.exceptions import (
    AccessDeniedError,
    NoLeaderboardDataError,
    NoMembersError,
    PersistenceError,
)
from squadboard.leaderboard import (
    LeaderboardBuilder,
    Timeframe,
    WinnerRecord,
    WinnerSelector,
    week_number,
    winner_message,
)
from squadboard.leaderboard.winner import WINNER_ANNOUNCED_EVENT, format_pnl
from squadboard.storage import Base, SquadWinner, WinnerRepository

TODAY = date(2026, 3, 18)  # day 77 of the year


class TestWeekNumber:
    @pytest.mark.parametrize(
        "day, week",
        [
            (date(2026, 1, 1), 1),
            (date(2026, 1, 7), 1),
            (date(2026, 1, 8), 2),
            (date(2026, 3, 18), 11),
            (date(2026, 12, 31), 53),
        ],
    )
    def test_seven_day_blocks_from_new_year(self, day, week):
        assert week_number(day) == week

    def test_same_day_same_week(self):
        assert week_number(TODAY) == week_number(TODAY)


class TestAnnouncementFormat:
    def test_positive(self):
        assert format_pnl(150.5) == "+$150.50"

    def test_negative(self):
        assert format_pnl(-3.456) == "-$3.46"

    def test_zero_is_positive(self):
        assert format_pnl(0.0) == "+$0.00"

    def test_message(self):
        assert winner_message("bob", 11, 150.5) == (
            "🏆 Week 11 MVP: bob with +$150.50 PnL! Congratulations! 🎉"
        )


def make_selector(builder_parts, winners=None, announcer=None):
    builder = builder_parts[0]
    return WinnerSelector(
        builder=builder,
        winners=winners or FakeWinners(),
        announcer=announcer or FakeAnnouncer(),
    )


def test_picks_top_entry_and_announces_once(builder_parts):
    winners, announcer = FakeWinners(), FakeAnnouncer()
    selector = make_selector(builder_parts, winners, announcer)

    summary = asyncio.run(selector.calculate_winner(1, ALICE, today=TODAY))

    assert summary.evm_address == BOB
    assert summary.username == "bob"
    assert summary.pnl == 150.50
    assert summary.week == 11
    assert winners.records[(1, 11)] == WinnerRecord(
        squad_id=1, winner_address=BOB, week=11, pnl=150.50
    )
    assert announcer.published == [
        (
            WINNER_ANNOUNCED_EVENT,
            {"squad_id": 1, "message": "🏆 Week 11 MVP: bob with +$150.50 PnL! Congratulations! 🎉"},
        )
    ]
    assert summary.to_response() == {
        "message": "Winner calculated successfully",
        "winner": {"evmAddress": BOB, "username": "bob", "pnl": 150.5, "week": 11},
    }


def test_reuses_cached_all_time_leaderboard(builder_parts):
    builder, memberships, market_data, _ = builder_parts
    asyncio.run(builder.get_leaderboard(1, ALICE, Timeframe.ALL))
    calls = len(market_data.calls)

    asyncio.run(make_selector(builder_parts).calculate_winner(1, ALICE, today=TODAY))

    assert len(market_data.calls) == calls
    assert memberships.list_calls == 1


def test_cache_miss_lists_members_once(builder_parts):
    _, memberships, market_data, _ = builder_parts

    summary = asyncio.run(make_selector(builder_parts).calculate_winner(1, ALICE, today=TODAY))

    assert summary.evm_address == BOB
    assert memberships.list_calls == 1
    assert len(market_data.calls) == 2


def test_ignores_cached_weekly_leaderboard(builder_parts):
    builder, _, market_data, _ = builder_parts
    asyncio.run(builder.get_leaderboard(1, ALICE, Timeframe.WEEKLY))

    summary = asyncio.run(make_selector(builder_parts).calculate_winner(1, ALICE, today=TODAY))

    # All-time includes Bob's open value, weekly would not
    assert summary.pnl == 150.50
    assert builder.cache.get(1, Timeframe.ALL) is not None


def test_non_member_denied(builder_parts):
    announcer = FakeAnnouncer()
    with pytest.raises(AccessDeniedError):
        asyncio.run(make_selector(builder_parts, announcer=announcer).calculate_winner(1, "0xNOPE"))
    assert announcer.published == []


def test_no_members_is_client_error():
    builder = LeaderboardBuilder(
        memberships=FakeMemberships({5: []}),
        profiles=FakeProfiles([]),
        market_data=FakeMarketData(),
    )
    # Membership check passes for a squad that exists but has no rows
    builder.memberships.is_member = _always_member
    announcer = FakeAnnouncer()
    selector = WinnerSelector(builder, FakeWinners(), announcer)

    with pytest.raises(NoMembersError) as exc:
        asyncio.run(selector.calculate_winner(5, ALICE, today=TODAY))

    assert exc.value.status_code == 400
    assert announcer.published == []


def test_members_without_profiles_is_client_error():
    builder = LeaderboardBuilder(
        memberships=FakeMemberships({5: [ALICE]}),
        profiles=FakeProfiles([]),
        market_data=FakeMarketData(),
    )
    selector = WinnerSelector(builder, FakeWinners(), FakeAnnouncer())

    with pytest.raises(NoLeaderboardDataError):
        asyncio.run(selector.calculate_winner(5, ALICE, today=TODAY))


def test_persistence_failure_skips_announcement(builder_parts):
    announcer = FakeAnnouncer()
    selector = make_selector(builder_parts, FakeWinners(fail=True), announcer)

    with pytest.raises(PersistenceError) as exc:
        asyncio.run(selector.calculate_winner(1, ALICE, today=TODAY))

    assert exc.value.status_code == 500
    assert announcer.published == []


def test_announcement_failure_not_surfaced(builder_parts):
    winners = FakeWinners()
    selector = make_selector(builder_parts, winners, FakeAnnouncer(fail=True))

    summary = asyncio.run(selector.calculate_winner(1, ALICE, today=TODAY))

    assert summary.evm_address == BOB
    assert (1, 11) in winners.records


def test_recalculation_replaces_stored_winner(builder_parts, tmp_path):
    builder, _, market_data, cache_clock = builder_parts
    announcer = FakeAnnouncer()

    async def run():
        engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'winners.db'}")
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        factory = async_sessionmaker(bind=engine, expire_on_commit=False)
        repo = WinnerRepository(factory)
        try:
            await repo.upsert(WinnerRecord(squad_id=1, winner_address=ALICE, week=11, pnl=5.0))

            selector = WinnerSelector(builder, repo, announcer)
            await selector.calculate_winner(1, ALICE, today=TODAY)

            async with factory() as db:
                rows = (
                    await db.execute(
                        select(SquadWinner).where(SquadWinner.squad_id == 1, SquadWinner.week == 11)
                    )
                ).scalars().all()
            return rows
        finally:
            await engine.dispose()

    rows = asyncio.run(run())

    assert len(rows) == 1
    assert rows[0].winner_address == BOB
    assert float(rows[0].pnl) == 150.50
    assert len(announcer.published) == 1


def test_concurrent_calculations_store_one_winner(builder_parts, tmp_path):
    builder, _, _, _ = builder_parts
    announcer = FakeAnnouncer()

    async def run():
        engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'winners.db'}")
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        factory = async_sessionmaker(bind=engine, expire_on_commit=False)
        try:
            selector = WinnerSelector(builder, WinnerRepository(factory), announcer)
            await asyncio.gather(
                *(selector.calculate_winner(1, ALICE, today=TODAY) for _ in range(5))
            )
            async with factory() as db:
                return await db.scalar(
                    select(func.count())
                    .select_from(SquadWinner)
                    .where(SquadWinner.squad_id == 1, SquadWinner.week == 11)
                )
        finally:
            await engine.dispose()

    assert asyncio.run(run()) == 1
    assert len(announcer.published) == 5


async def _always_member(squad_id, identity):
    return True
