"""Squadboard database tables."""

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.sql import func

from squadboard.storage.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    """Wallet-identified user profile."""

    __tablename__ = "users"

    evm_address = Column(String(64), primary_key=True)
    username = Column(String(100), nullable=True)
    avatar_url = Column(String(500), nullable=True)
    polymarket_user_address = Column(String(64), nullable=True)

    def __repr__(self) -> str:
        return f"<User {self.evm_address} ({self.username})>"


class Squad(Base, TimestampMixin):
    """A group of users sharing a chat and leaderboard."""

    __tablename__ = "squads"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    invite_code = Column(String(6), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<Squad #{self.id} {self.name}>"


class SquadMember(Base):
    """Membership of a user in a squad."""

    __tablename__ = "squad_members"

    id = Column(Integer, primary_key=True, autoincrement=True)
    squad_id = Column(
        Integer,
        ForeignKey("squads.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(
        String(64),
        ForeignKey("users.evm_address", ondelete="CASCADE"),
        nullable=False,
    )
    joined_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        UniqueConstraint("squad_id", "user_id", name="unique_squad_member"),
    )


class SquadWinner(Base, TimestampMixin):
    """Weekly MVP for a squad. One row per (squad, week)."""

    __tablename__ = "squad_winners"

    id = Column(Integer, primary_key=True, autoincrement=True)
    squad_id = Column(
        Integer,
        ForeignKey("squads.id", ondelete="CASCADE"),
        nullable=False,
    )
    winner_address = Column(String(64), nullable=False)
    week = Column(Integer, nullable=False)
    pnl = Column(Numeric(15, 2), nullable=False)

    __table_args__ = (
        UniqueConstraint("squad_id", "week", name="unique_squad_week_winner"),
        Index("idx_squad_winners_squad", "squad_id"),
    )

    def __repr__(self) -> str:
        return f"<SquadWinner squad={self.squad_id} week={self.week}>"
