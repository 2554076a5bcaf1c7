"""Squad leaderboard and weekly winner routes."""

import logging

from fastapi import APIRouter, Depends, Query

from squadboard.api.dependencies import Services, get_caller, get_services

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/squads", tags=["Squads"])


@router.get("/{squad_id}/leaderboard")
async def get_leaderboard(
    squad_id: int,
    timeframe: str = Query("all", description="all, weekly or daily"),
    caller: str = Depends(get_caller),
    services: Services = Depends(get_services),
):
    """Live PnL leaderboard for a squad."""
    leaderboard = await services.builder.get_leaderboard(squad_id, caller, timeframe)
    return leaderboard.to_response()


@router.post("/{squad_id}/calculate-winner")
async def calculate_winner(
    squad_id: int,
    caller: str = Depends(get_caller),
    services: Services = Depends(get_services),
):
    """Calculate, save and announce this week's MVP."""
    winner = await services.winners.calculate_winner(squad_id, caller)
    return winner.to_response()
