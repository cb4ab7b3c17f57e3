# app/endpoints/common/leaderboard.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.deps import get_db
from schemas.enums import LeaderboardPeriod
from schemas.leaderboard import LeaderboardResponse
from service import leaderboard as leaderboard_service

router = APIRouter()


@router.get(
    "",
    response_model=LeaderboardResponse,
    summary="Seller rankings (public)",
)
def read_leaderboard(
    period: LeaderboardPeriod = Query(LeaderboardPeriod.month),
    db: Session = Depends(get_db),
):
    """
    month: approved since the 1st of the current month (server time).
    all: every approved submission.
    """
    since, rows = leaderboard_service.compute_rankings(db, period=period)
    return LeaderboardResponse(period=period, since=since, rows=rows)
