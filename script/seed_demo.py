"""
Seed demo profiles and approved submissions for local development.

  alice  : two approved submissions this month
  ben    : one approved this month, one approved last month
  chloe  : one approved last month, one pending

Idempotent: profiles are upserted and submissions use fixed ids, so
re-running only fills in what is missing.

Usage:
    python -m script.seed_demo
"""
from __future__ import annotations

import logging
import sys
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from crud import profile as profile_crud
from crud import submission as sub_crud
from database.base import create_all
from database.session import build_engine, build_sessionmaker
from schemas.submission import SubmissionCreate
from service.leaderboard import month_start
from service.submission import build_submission_row

log = logging.getLogger(__name__)

DEMO_PROFILES: List[Dict[str, Any]] = [
    {"id": "demo-alice", "name": "Alice", "discord": "alice#0001"},
    {"id": "demo-ben", "name": "Ben", "discord": "ben#0002"},
    {"id": "demo-chloe", "name": "Chloe", "discord": "chloe#0003"},
]


def _demo_submissions(now: datetime) -> List[Dict[str, Any]]:
    this_month = month_start(now) + timedelta(hours=12)
    last_month = month_start(now) - timedelta(days=10)
    return [
        {"id": "00000000-0000-4000-8000-000000000001", "user_id": "demo-alice", "approved_at": this_month,
         "payload": {"revenue": 12000, "cost": 7400, "productCategory": "Kitchen", "ppcSpend": 900, "ppcSales": 4200, "unitsSold": 410}},
        {"id": "00000000-0000-4000-8000-000000000002", "user_id": "demo-alice", "approved_at": this_month,
         "payload": {"revenue": 5300, "cost": 3900, "productCategory": "Home", "marketplace": "amazon_ca", "unitsSold": 150}},
        {"id": "00000000-0000-4000-8000-000000000003", "user_id": "demo-ben", "approved_at": this_month,
         "payload": {"revenue": 8800, "cost": 6100, "productCategory": "Pet", "ppcSpend": 640, "ppcSales": 2500, "unitsSold": 275}},
        {"id": "00000000-0000-4000-8000-000000000004", "user_id": "demo-ben", "approved_at": last_month,
         "payload": {"revenue": 21000, "cost": 15000, "productCategory": "Pet", "unitsSold": 700}},
        {"id": "00000000-0000-4000-8000-000000000005", "user_id": "demo-chloe", "approved_at": last_month,
         "payload": {"revenue": 4000, "cost": 2500, "productCategory": "Beauty", "marketplace": "amazon_uk", "currency": "GBP"}},
        {"id": "00000000-0000-4000-8000-000000000006", "user_id": "demo-chloe", "approved_at": None,
         "payload": {"revenue": 6100, "cost": 4300, "productCategory": "Beauty"}},
    ]


def seed(db: Session, *, now: datetime | None = None) -> int:
    """Returns the number of submissions inserted (existing ids are skipped)."""
    now = now or datetime.now(timezone.utc)

    for p in DEMO_PROFILES:
        profile_crud.upsert_profile(db, profile_id=p["id"], name=p["name"], discord=p["discord"], avatar_url=None)
    log.info("Upserted %d demo profiles", len(DEMO_PROFILES))

    inserted = 0
    for item in _demo_submissions(now):
        if sub_crud.get_submission(db, item["id"]) is not None:
            continue

        payload = SubmissionCreate.model_validate({**item["payload"], "date": item["approved_at"] or now})
        data = build_submission_row(payload, now=now)
        data["id"] = item["id"]
        if item["approved_at"] is not None:
            data["status"] = "approved"
            data["approved_at"] = item["approved_at"]

        sub_crud.create_submission(db, user_id=item["user_id"], data=data)
        inserted += 1

    log.info("Seed complete. %d submissions inserted.", inserted)
    return inserted


def main() -> int:
    engine = build_engine()
    create_all(engine)
    db = build_sessionmaker(engine)()
    try:
        return seed(db)
    except Exception:
        db.rollback()
        log.exception("Seed failed")
        raise
    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    count = main()
    print(f"\nDone - {count} demo submissions inserted.")
    sys.exit(0)
