"""Leaderboard data models."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class MemberProfile(BaseModel):
    """Profile data needed to rank a squad member."""

    evm_address: str
    username: str | None = None
    avatar_url: str | None = None
    polymarket_user_address: str | None = None


class LeaderboardEntry(BaseModel):
    """One ranked member. Serialized with the camelCase names the frontend reads."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    evm_address: str = Field(alias="evmAddress")
    username: str = Field(alias="username")
    avatar_url: str = Field(alias="avatarUrl")
    total_live_pnl: float = Field(default=0.0, alias="totalLivePnl")


class Leaderboard(BaseModel):
    """Entries ordered by total PnL, highest first."""

    model_config = ConfigDict(frozen=True)

    squad_id: int
    timeframe: str
    entries: tuple[LeaderboardEntry, ...] = ()
    computed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_response(self) -> dict:
        return {"leaderboard": [e.model_dump(by_alias=True) for e in self.entries]}


class WinnerRecord(BaseModel):
    """Persisted weekly MVP."""

    squad_id: int
    winner_address: str
    week: int
    pnl: float


class WinnerSummary(BaseModel):
    """Winner details returned to the caller of calculate_winner."""

    model_config = ConfigDict(populate_by_name=True)

    evm_address: str = Field(alias="evmAddress")
    username: str
    pnl: float
    week: int

    def to_response(self) -> dict:
        return {
            "message": "Winner calculated successfully",
            "winner": self.model_dump(by_alias=True),
        }
