from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ClosedPosition(BaseModel):
    """A settled position as reported by the closed-positions endpoint."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    realized_pnl: float = Field(default=0.0, alias="realizedPnl")
    timestamp: int | None = None
    asset: str = ""
    title: str = ""
    outcome: str = ""
    avg_price: float = Field(default=0.0, alias="avgPrice")
    total_bought: float = Field(default=0.0, alias="totalBought")

    @field_validator("realized_pnl", "avg_price", "total_bought", mode="before")
    @classmethod
    def coerce_number(cls, v: Any) -> float:
        if v is None or v == "":
            return 0.0
        return v

    @field_validator("timestamp", mode="before")
    @classmethod
    def parse_timestamp(cls, v: Any) -> int | None:
        if v is None or v == "":
            return None
        try:
            return int(float(v))
        except (TypeError, ValueError):
            return None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> ClosedPosition:
        return cls.model_validate(data)


class PositionValue(BaseModel):
    """Current mark-to-market value of a user's open positions."""

    user: str = ""
    value: float = 0.0

    @classmethod
    def from_api(cls, data: Any, user: str = "") -> PositionValue:
        # The endpoint answers with either a single object or a one-element list
        if isinstance(data, list):
            if not data:
                return cls(user=user, value=0.0)
            data = data[0]
        if not isinstance(data, dict):
            return cls(user=user, value=0.0)
        return cls(user=data.get("user") or user, value=data.get("value") or 0.0)
