"""Database-backed implementations of the leaderboard collaborator stores."""

from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from squadboard.exceptions import PersistenceError
from squadboard.leaderboard.models import MemberProfile, WinnerRecord
from squadboard.storage.session import get_session
from squadboard.storage.tables import Squad, SquadMember, SquadWinner, User

logger = logging.getLogger(__name__)


class MembershipRepository:
    """Squad membership lookups."""

    def __init__(self, session_factory: async_sessionmaker):
        self._factory = session_factory

    async def squad_exists(self, squad_id: int) -> bool:
        async with get_session(self._factory) as db:
            result = await db.execute(select(Squad.id).where(Squad.id == squad_id))
            return result.scalar_one_or_none() is not None

    async def list_members(self, squad_id: int) -> list[str]:
        async with get_session(self._factory) as db:
            result = await db.execute(
                select(SquadMember.user_id)
                .where(SquadMember.squad_id == squad_id)
                .order_by(SquadMember.joined_at, SquadMember.id)
            )
            return list(result.scalars().all())

    async def is_member(self, squad_id: int, identity: str) -> bool:
        async with get_session(self._factory) as db:
            result = await db.execute(
                select(SquadMember.id)
                .where(SquadMember.squad_id == squad_id)
                .where(SquadMember.user_id == identity)
            )
            return result.scalar_one_or_none() is not None


class ProfileRepository:
    """User profile lookups."""

    def __init__(self, session_factory: async_sessionmaker):
        self._factory = session_factory

    async def get_profiles(self, identities: Sequence[str]) -> list[MemberProfile]:
        """Profiles for the given addresses, in the order the addresses were given."""
        if not identities:
            return []

        async with get_session(self._factory) as db:
            result = await db.execute(
                select(User).where(User.evm_address.in_(list(identities)))
            )
            users = {u.evm_address: u for u in result.scalars().all()}

        profiles = []
        for identity in identities:
            user = users.get(identity)
            if user is None:
                logger.warning(f"No user profile for squad member {identity}")
                continue
            profiles.append(
                MemberProfile(
                    evm_address=user.evm_address,
                    username=user.username,
                    avatar_url=user.avatar_url,
                    polymarket_user_address=user.polymarket_user_address,
                )
            )
        return profiles


class WinnerRepository:
    """Weekly winner persistence."""

    def __init__(self, session_factory: async_sessionmaker):
        self._factory = session_factory

    async def find(self, squad_id: int, week: int) -> WinnerRecord | None:
        async with get_session(self._factory) as db:
            result = await db.execute(
                select(SquadWinner)
                .where(SquadWinner.squad_id == squad_id)
                .where(SquadWinner.week == week)
            )
            row = result.scalar_one_or_none()
            return _to_record(row) if row is not None else None

    async def list_for_squad(self, squad_id: int) -> list[WinnerRecord]:
        async with get_session(self._factory) as db:
            result = await db.execute(
                select(SquadWinner)
                .where(SquadWinner.squad_id == squad_id)
                .order_by(SquadWinner.week)
            )
            return [_to_record(row) for row in result.scalars().all()]

    async def upsert(self, record: WinnerRecord) -> WinnerRecord:
        """Insert or replace the winner for (squad, week) in one statement."""
        try:
            async with get_session(self._factory) as db:
                insert = _dialect_insert(db.bind.dialect.name)
                stmt = insert(SquadWinner).values(
                    squad_id=record.squad_id,
                    winner_address=record.winner_address,
                    week=record.week,
                    pnl=record.pnl,
                )
                stmt = stmt.on_conflict_do_update(
                    index_elements=[SquadWinner.squad_id, SquadWinner.week],
                    set_={
                        "winner_address": stmt.excluded.winner_address,
                        "pnl": stmt.excluded.pnl,
                        "created_at": func.now(),
                    },
                )
                await db.execute(stmt)
                await db.commit()
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to save winner for squad {record.squad_id} week {record.week}: {e}"
            )
            raise PersistenceError("Failed to save winner") from e

        logger.info(
            f"Saved week {record.week} winner for squad {record.squad_id}: "
            f"{record.winner_address} ({record.pnl:.2f})"
        )
        return record


def _dialect_insert(dialect_name: str):
    if dialect_name == "postgresql":
        return postgresql.insert
    if dialect_name == "sqlite":
        return sqlite.insert
    raise PersistenceError(f"Upsert not supported for dialect {dialect_name}")


def _to_record(row: SquadWinner) -> WinnerRecord:
    return WinnerRecord(
        squad_id=row.squad_id,
        winner_address=row.winner_address,
        week=row.week,
        pnl=float(row.pnl),
    )
