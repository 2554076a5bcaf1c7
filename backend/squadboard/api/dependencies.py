"""
FastAPI dependencies.

Services are built once per process in the app lifespan and stored on
app.state; routes reach them through these dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Header, HTTPException, Request

from squadboard.leaderboard import LeaderboardBuilder, WinnerSelector


@dataclass
class Services:
    """Process-wide service objects."""

    builder: LeaderboardBuilder
    winners: WinnerSelector


def get_services(request: Request) -> Services:
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise HTTPException(status_code=503, detail="Service not ready")
    return services


def get_caller(x_user_address: str | None = Header(default=None)) -> str:
    """Wallet address of the authenticated caller."""
    if not x_user_address:
        raise HTTPException(status_code=401, detail="Missing user address")
    return x_user_address
