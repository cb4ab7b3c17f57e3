"""Leaderboard aggregation (pure) and GET /leaderboard."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from crud import submission as sub_crud
from models.profile import Profile
from models.submission import Submission
from schemas.enums import LeaderboardPeriod
from service import leaderboard as leaderboard_service
from service.leaderboard import aggregate_rankings, compute_rankings, month_start, window_start

NOW = datetime(2026, 6, 15, 12, 0, tzinfo=timezone.utc)
UTC = timezone.utc


def _profile(pid: str, name: str = "") -> Profile:
    return Profile(id=pid, name=name or pid.title(), discord=f"{pid}#1", role="user")


def _sub(user_id: str, profit: float, *, status: str = "approved", approved_at=NOW, date=NOW, **kw) -> Submission:
    return Submission(
        user_id=user_id,
        revenue=kw.pop("revenue", profit),
        cost=kw.pop("cost", 0),
        profit=profit,
        status=status,
        approved_at=approved_at,
        date=date,
        **kw,
    )


class TestMonthStart:
    def test_first_instant_of_month(self):
        assert month_start(NOW, UTC) == datetime(2026, 6, 1, tzinfo=UTC)

    def test_naive_input_is_utc(self):
        assert month_start(datetime(2026, 1, 31, 23, 59), UTC) == datetime(2026, 1, 1, tzinfo=UTC)

    def test_all_has_no_window(self):
        assert window_start(LeaderboardPeriod.all, NOW) is None


class TestAggregateRankings:
    def test_sorted_by_profit_desc(self):
        profiles = {p.id: p for p in (_profile("a"), _profile("b"), _profile("c"))}
        subs = [_sub("a", 100), _sub("b", 300), _sub("c", 200), _sub("a", 250)]

        rows = aggregate_rankings(subs, profiles)

        assert [(r.user_id, r.total_profit, r.rank) for r in rows] == [
            ("a", 350, 1),
            ("b", 300, 2),
            ("c", 200, 3),
        ]
        assert rows[0].submission_count == 2

    def test_ties_broken_by_user_id(self):
        profiles = {p.id: p for p in (_profile("zed"), _profile("amy"), _profile("kim"))}
        subs = [_sub("zed", 50), _sub("amy", 50), _sub("kim", 50)]

        first = aggregate_rankings(subs, profiles)
        second = aggregate_rankings(list(reversed(subs)), profiles)

        assert [r.user_id for r in first] == ["amy", "kim", "zed"]
        assert [r.user_id for r in second] == [r.user_id for r in first]

    def test_only_approved_count(self):
        profiles = {"a": _profile("a"), "b": _profile("b")}
        subs = [
            _sub("a", 100),
            _sub("a", 900, status="pending", approved_at=None),
            _sub("b", 500, status="rejected", approved_at=None),
        ]

        rows = aggregate_rankings(subs, profiles)

        assert [r.user_id for r in rows] == ["a"]
        assert rows[0].total_profit == 100

    def test_zero_qualifying_users_absent(self):
        rows = aggregate_rankings([], {"a": _profile("a")})
        assert rows == []

    def test_window_uses_approved_at_then_date(self):
        since = month_start(NOW, UTC)
        last_month = since - timedelta(days=3)
        profiles = {p: _profile(p) for p in ("a", "b", "c")}
        subs = [
            # approved this month for an older sale: counts
            _sub("a", 10, approved_at=since + timedelta(hours=1), date=last_month),
            # approved last month: excluded
            _sub("b", 20, approved_at=last_month, date=NOW),
            # legacy row without approved_at falls back to date
            _sub("c", 30, approved_at=None, date=NOW),
        ]

        rows = aggregate_rankings(subs, profiles, since=since)

        assert sorted(r.user_id for r in rows) == ["a", "c"]

    def test_missing_profile_skipped(self):
        rows = aggregate_rankings([_sub("orphan", 10)], {})
        assert rows == []

    def test_averages_none_without_data(self):
        rows = aggregate_rankings([_sub("a", 10), _sub("a", 20)], {"a": _profile("a")})
        row = rows[0]

        assert row.avg_acos is None
        assert row.avg_tacos is None
        assert row.avg_profit_margin is None

    def test_averages_skip_missing_values(self):
        subs = [_sub("a", 10, acos=20.0, profit_margin=50.0), _sub("a", 20, acos=None, profit_margin=30.0)]
        row = aggregate_rankings(subs, {"a": _profile("a")})[0]

        assert row.avg_acos == pytest.approx(20.0)
        assert row.avg_profit_margin == pytest.approx(40.0)

    def test_rollups(self):
        subs = [
            _sub("a", 10, revenue=100, ppc_spend=5, units_sold=3, product_category="Pet", marketplace="amazon_us"),
            _sub("a", 20, revenue=50, ppc_spend=None, units_sold=None, product_category="Home", marketplace="amazon_ca",
                 approved_at=NOW + timedelta(days=1)),
            _sub("a", 5, revenue=10, product_category="Pet", marketplace="amazon_us"),
        ]
        row = aggregate_rankings(subs, {"a": _profile("a", "Alice")})[0]

        assert row.name == "Alice"
        assert row.total_revenue == 160
        assert row.total_ppc_spend == 5
        assert row.total_units_sold == 3
        assert row.categories == ["Home", "Pet"]
        assert row.marketplaces == ["amazon_ca", "amazon_us"]
        assert row.last_submission_at == NOW + timedelta(days=1)


class TestLeaderboardApi:
    def _approve(self, client, admin_headers, sub_id: str) -> None:
        resp = client.patch(f"/submissions/{sub_id}", json={"status": "approved"}, headers=admin_headers)
        assert resp.status_code == 200

    def test_public_and_defaults_to_month(self, client):
        resp = client.get("/leaderboard")
        assert resp.status_code == 200
        body = resp.json()
        assert body["period"] == "month"
        assert body["since"] is not None
        assert body["rows"] == []

    def test_invalid_period(self, client):
        assert client.get("/leaderboard", params={"period": "week"}).status_code == 400

    def test_month_vs_all(self, client, db, submit, make_user, admin_headers):
        alice = make_user("alice")
        ben = make_user("ben")
        a = submit(alice, revenue=500, cost=100)
        b = submit(ben, revenue=900, cost=100)
        self._approve(client, admin_headers, a["id"])
        self._approve(client, admin_headers, b["id"])

        # ben's approval moved to last month
        old = month_start() - timedelta(days=5)
        sub_crud.set_status(db, submission_id=b["id"], status="approved", approved_at=old)

        month = client.get("/leaderboard", params={"period": "month"}).json()["rows"]
        everything = client.get("/leaderboard", params={"period": "all"}).json()["rows"]

        assert [r["user_id"] for r in month] == ["alice"]
        assert [(r["user_id"], r["rank"]) for r in everything] == [("ben", 1), ("alice", 2)]
        assert everything[0]["total_profit"] == 800

    def test_pending_not_ranked(self, client, submit, make_user):
        submit(make_user("alice"))
        assert client.get("/leaderboard", params={"period": "all"}).json()["rows"] == []

    def test_since_is_the_window_used_for_rows(self, client, monkeypatch):
        # a month boundary passing mid-request must not split since / rows
        starts = iter([datetime(2026, 6, 1, tzinfo=UTC), datetime(2026, 7, 1, tzinfo=UTC)])
        monkeypatch.setattr(leaderboard_service, "window_start", lambda period, now=None: next(starts))

        body = client.get("/leaderboard").json()

        assert body["since"].startswith("2026-06-01T00:00:00")


class TestComputeRankings:
    def test_returns_window_start(self, db):
        since, rows = compute_rankings(db, period=LeaderboardPeriod.month, now=NOW)
        assert since == datetime(2026, 6, 1, tzinfo=UTC)
        assert rows == []

    def test_all_has_no_since(self, db):
        since, _ = compute_rankings(db, period=LeaderboardPeriod.all, now=NOW)
        assert since is None
