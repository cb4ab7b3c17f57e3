# service/leaderboard.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo
from typing import Iterable, Mapping, Optional, Tuple
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from core import config
from crud import submission as sub_crud
from crud import profile as profile_crud
from models.profile import Profile
from models.submission import Submission
from schemas.enums import LeaderboardPeriod
from schemas.leaderboard import RankingRow

logger = logging.getLogger(__name__)


# ==============================
# time window
# ==============================
def server_timezone() -> tzinfo:
    if config.TIMEZONE:
        if config.TIMEZONE.upper() == "UTC":
            return timezone.utc
        return ZoneInfo(config.TIMEZONE)
    return datetime.now().astimezone().tzinfo or timezone.utc


def _aware(dt: datetime) -> datetime:
    # sqlite hands back naive values; everything is stored in UTC
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)


def month_start(now: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> datetime:
    """first instant of the current calendar month in server time"""
    tz = tz or server_timezone()
    local = _aware(now).astimezone(tz) if now is not None else datetime.now(tz)
    return local.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def window_start(period: LeaderboardPeriod, now: Optional[datetime] = None) -> Optional[datetime]:
    if period == LeaderboardPeriod.all:
        return None
    return month_start(now)


def effective_at(sub: Submission) -> datetime:
    """approved_at, falling back to date only when approved_at is missing"""
    return _aware(sub.approved_at if sub.approved_at is not None else sub.date)


# ==============================
# aggregation (pure, in-process)
# ==============================
@dataclass
class _Totals:
    profit: float = 0.0
    revenue: float = 0.0
    ppc_spend: float = 0.0
    units_sold: int = 0
    count: int = 0
    categories: set[str] = field(default_factory=set)
    marketplaces: set[str] = field(default_factory=set)
    last_at: Optional[datetime] = None
    acos: list[float] = field(default_factory=list)
    tacos: list[float] = field(default_factory=list)
    margins: list[float] = field(default_factory=list)

    def add(self, sub: Submission) -> None:
        self.profit += float(sub.profit or 0)
        self.revenue += float(sub.revenue or 0)
        self.ppc_spend += float(sub.ppc_spend or 0)
        self.units_sold += int(sub.units_sold or 0)
        self.count += 1
        if sub.product_category:
            self.categories.add(sub.product_category)
        if sub.marketplace:
            self.marketplaces.add(sub.marketplace)
        when = effective_at(sub)
        if self.last_at is None or when > self.last_at:
            self.last_at = when
        if sub.acos is not None:
            self.acos.append(float(sub.acos))
        if sub.tacos is not None:
            self.tacos.append(float(sub.tacos))
        if sub.profit_margin is not None:
            self.margins.append(float(sub.profit_margin))


def _mean(values: list[float]) -> Optional[float]:
    # no data -> None, never 0
    if not values:
        return None
    return round(sum(values) / len(values), config.PERCENT_PRECISION)


def aggregate_rankings(
    submissions: Iterable[Submission],
    profiles: Mapping[str, Profile],
    *,
    since: Optional[datetime] = None,
) -> list[RankingRow]:
    """
    approved submissions -> ranking rows.

    - rows outside [since, ...) by effective timestamp are skipped
    - only users with >= 1 qualifying submission appear
    - total_profit desc, ties by user_id asc
    """
    groups: dict[str, _Totals] = {}
    for sub in submissions:
        if sub.status != "approved":
            continue
        if since is not None and effective_at(sub) < since:
            continue
        groups.setdefault(sub.user_id, _Totals()).add(sub)

    rows: list[RankingRow] = []
    for user_id, t in groups.items():
        profile = profiles.get(user_id)
        if profile is None:
            logger.warning("approved submissions without profile: user_id=%s", user_id)
            continue
        rows.append(
            RankingRow(
                rank=0,
                user_id=user_id,
                name=profile.name,
                discord=profile.discord,
                avatar_url=profile.avatar_url,
                total_profit=round(t.profit, 2),
                total_revenue=round(t.revenue, 2),
                total_ppc_spend=round(t.ppc_spend, 2),
                total_units_sold=t.units_sold,
                submission_count=t.count,
                categories=sorted(t.categories),
                marketplaces=sorted(t.marketplaces),
                last_submission_at=t.last_at,
                avg_acos=_mean(t.acos),
                avg_tacos=_mean(t.tacos),
                avg_profit_margin=_mean(t.margins),
            )
        )

    rows.sort(key=lambda r: (-r.total_profit, r.user_id))
    for i, row in enumerate(rows, start=1):
        row.rank = i
    return rows


# ==============================
# entry point
# ==============================
def compute_rankings(
    db: Session,
    *,
    period: LeaderboardPeriod = LeaderboardPeriod.month,
    now: Optional[datetime] = None,
) -> Tuple[Optional[datetime], list[RankingRow]]:
    """
    Reads approved submissions + their profiles (not isolated from
    concurrent writes) and aggregates in process. Store errors propagate.
    Returns the window start actually used along with the rows.
    """
    since = window_start(period, now)
    approved = sub_crud.list_approved(db)
    profiles = profile_crud.list_by_ids(db, {s.user_id for s in approved})
    return since, aggregate_rankings(approved, profiles, since=since)
