"""Shared fixtures for the unit tests."""

import pytest

from fakes import (
    ALICE,
    BOB,
    CAROL,
    DAY,
    FakeClock,
    FakeMarketData,
    FakeMemberships,
    FakeProfiles,
)
from squadboard.leaderboard import LeaderboardBuilder, LeaderboardCache, MemberProfile
from squadboard.services.polymarket import PolymarketAPIError


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def squad_profiles():
    """Three members: Alice has no trading address, Bob trades, Carol's fetch fails."""
    return [
        MemberProfile(evm_address=ALICE, username="alice"),
        MemberProfile(
            evm_address=BOB,
            username="bob",
            avatar_url="https://example.com/bob.png",
            polymarket_user_address="0xpm-bob",
        ),
        MemberProfile(evm_address=CAROL, username=None, polymarket_user_address="0xpm-carol"),
    ]


@pytest.fixture
def market_data(clock):
    return FakeMarketData(
        data={
            "0xpm-bob": (
                [
                    {"realizedPnl": 100.25, "timestamp": int(clock.now - 2 * 3600)},
                    {"realizedPnl": 20.25, "timestamp": int(clock.now - 3 * DAY)},
                ],
                30.0,
            ),
        },
        errors={"0xpm-carol": PolymarketAPIError("server error", status_code=500)},
    )


@pytest.fixture
def builder_parts(squad_profiles, market_data, clock):
    cache_clock = FakeClock(0.0)
    memberships = FakeMemberships({1: [ALICE, BOB, CAROL], 2: []})
    builder = LeaderboardBuilder(
        memberships=memberships,
        profiles=FakeProfiles(squad_profiles),
        market_data=market_data,
        cache=LeaderboardCache(ttl_seconds=30, timer=cache_clock),
        clock=clock,
    )
    return builder, memberships, market_data, cache_clock
