# crud/submission.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional, Sequence, Tuple

from sqlalchemy import select, update, delete, func
from sqlalchemy.orm import Session

from crud.base import CRUDBase
from models.base import utcnow
from models.profile import Profile
from models.submission import Submission

submission_crud = CRUDBase(Submission)


# ==============================
# Create
# ==============================
def create_submission(
    db: Session,
    *,
    user_id: str,
    data: Mapping[str, Any],
) -> Submission:
    """
    Insert a fully prepared row (derived fields already computed by the service).
    """
    return submission_crud.create(db, obj_in={**data, "user_id": user_id})


# ==============================
# Read
# ==============================
def get_submission(db: Session, submission_id: str) -> Optional[Submission]:
    return submission_crud.get(db, submission_id)


def list_by_status_with_profile(
    db: Session,
    *,
    status: str,
) -> Sequence[Tuple[Submission, str, str]]:
    """
    Submissions of one status, inner joined with the owner's name / discord,
    newest first.
    """
    stmt = (
        select(Submission, Profile.name, Profile.discord)
        .join(Profile, Profile.id == Submission.user_id)
        .where(Submission.status == status)
        .order_by(Submission.created_at.desc(), Submission.id.desc())
    )
    return [tuple(row) for row in db.execute(stmt).all()]


def list_approved(db: Session) -> list[Submission]:
    return submission_crud.get_multi(db, filters={"status": "approved"})


def approved_counts_by_user(db: Session) -> dict[str, int]:
    stmt = (
        select(Submission.user_id, func.count(Submission.id))
        .where(Submission.status == "approved")
        .group_by(Submission.user_id)
    )
    return {user_id: int(n) for user_id, n in db.execute(stmt).all()}


# ==============================
# Update: status transition (single-row, single statement)
# ==============================
def set_status(
    db: Session,
    *,
    submission_id: str,
    status: str,
    approved_at: Optional[datetime],
) -> Optional[Submission]:
    """
    Write status + approved_at in one UPDATE.
    Returns the refreshed row, or None when the id does not exist.
    Concurrent writers: last write wins.
    """
    result = db.execute(
        update(Submission)
        .where(Submission.id == submission_id)
        .values(status=status, approved_at=approved_at, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.rollback()
        return None
    db.commit()

    stmt = (
        select(Submission)
        .where(Submission.id == submission_id)
        .execution_options(populate_existing=True)
    )
    return db.execute(stmt).scalars().first()


# ==============================
# Delete (hard)
# ==============================
def delete_submission(db: Session, *, submission_id: str) -> bool:
    result = db.execute(
        delete(Submission)
        .where(Submission.id == submission_id)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.rollback()
        return False
    db.commit()
    return True
