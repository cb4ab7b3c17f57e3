# schemas/leaderboard.py
from __future__ import annotations

from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, Field

from schemas.enums import LeaderboardPeriod


class RankingRow(BaseModel):
    """
    One participant's aggregate over approved submissions in the window.
    avg_* are None when no submission carried the metric (None != 0).
    """
    rank: int
    user_id: str
    name: str
    discord: str
    avatar_url: Optional[str] = None

    total_profit: float
    total_revenue: float
    total_ppc_spend: float
    total_units_sold: int
    submission_count: int

    categories: List[str] = Field(default_factory=list)
    marketplaces: List[str] = Field(default_factory=list)
    last_submission_at: Optional[datetime] = None

    avg_acos: Optional[float] = None
    avg_tacos: Optional[float] = None
    avg_profit_margin: Optional[float] = None


class LeaderboardResponse(BaseModel):
    period: LeaderboardPeriod
    since: Optional[datetime] = None
    rows: List[RankingRow]
