# service/submission.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Optional, Sequence, Tuple

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from core import config
from crud import submission as sub_crud
from crud import profile as profile_crud
from models.submission import Submission
from schemas.enums import ApprovalStatus, ReviewDecision
from schemas.submission import SubmissionCreate
from service.identity import Identity
from service.notify import notify_submission_created
from service.storage import (
    InvalidUpload,
    StorageClient,
    StorageUploadError,
    proof_path,
    validate_image,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ==============================
# state machine
# ==============================
# target -> allowed current states
# re-approving refreshes approved_at; nothing moves back to pending
TRANSITIONS: dict[str, frozenset[str]] = {
    ApprovalStatus.approved.value: frozenset({"pending", "rejected", "approved"}),
    ApprovalStatus.rejected.value: frozenset({"pending", "approved", "rejected"}),
}


def can_transition(current: str, target: str) -> bool:
    return current in TRANSITIONS.get(target, frozenset())


def ensure_transition(current: str, target: str) -> None:
    if not can_transition(current, target):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="invalid_status",
        )


# ==============================
# derived fields
# ==============================
MONEY_FIELDS = (
    "revenue",
    "cost",
    "cogs",
    "amazon_fees",
    "average_selling_price",
    "ppc_spend",
    "ppc_sales",
    "inventory_value",
)


def to_cents(value: Optional[float]) -> Optional[float]:
    """round half up to 2 places, as the numeric(14, 2) columns store it"""
    if value is None:
        return None
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def compute_profit(revenue: float, cost: float) -> float:
    """profit = max(0, revenue - cost) in cents; losses are shown as 0"""
    return max(0.0, to_cents(float(revenue) - float(cost)))


def _pct(numerator: Optional[float], denominator: Optional[float]) -> Optional[float]:
    if numerator is None or not denominator:
        return None
    return round(numerator / denominator * 100, config.PERCENT_PRECISION)


def derive_metrics(payload: SubmissionCreate, profit: float) -> dict[str, Optional[float]]:
    """
    acos / tacos / profit_margin in percent.
    - explicit acos / tacos in the payload win over the derived ones
    - a metric without inputs stays None
    """
    acos = payload.acos if payload.acos is not None else _pct(payload.ppc_spend, payload.ppc_sales)
    tacos = payload.tacos if payload.tacos is not None else _pct(payload.ppc_spend, payload.revenue)
    return {
        "acos": acos,
        "tacos": tacos,
        "profit_margin": _pct(profit, payload.revenue),
    }


def build_submission_row(payload: SubmissionCreate, *, now: Optional[datetime] = None) -> dict[str, Any]:
    """validated payload -> column dict for a new pending submission"""
    now = now or _utcnow()
    data = payload.model_dump()
    for key, value in data.items():
        if isinstance(value, Enum):
            data[key] = value.value
    for key in MONEY_FIELDS:
        data[key] = to_cents(data[key])

    data["profit"] = compute_profit(data["revenue"], data["cost"])
    data.update(derive_metrics(payload, data["profit"]))
    data["date"] = payload.date or now
    data["status"] = ApprovalStatus.pending.value
    data["approved_at"] = None
    return data


# ==============================
# create (owner)
# ==============================
def _ensure_profile(db: Session, identity: Identity) -> None:
    if profile_crud.get_profile(db, identity.id) is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="profile_required",
        )


def create_submission(
    db: Session,
    *,
    identity: Optional[Identity],
    payload: SubmissionCreate,
    proof_url: Optional[str] = None,
) -> Submission:
    """
    - identity required (401)
    - the submitter must have saved a profile first (400)
    - status is always 'pending' regardless of input
    """
    if identity is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="unauthorized")

    _ensure_profile(db, identity)

    data = build_submission_row(payload)
    if proof_url:
        data["proof_url"] = proof_url

    sub = sub_crud.create_submission(db, user_id=identity.id, data=data)
    logger.info("submission created: id=%s user_id=%s profit=%s", sub.id, sub.user_id, sub.profit)

    notify_submission_created(sub)
    return sub


# ==============================
# create with proof image (multipart)
# ==============================
def upload_proof_or_none(
    storage: StorageClient,
    *,
    user_id: str,
    filename: Optional[str],
    content: bytes,
    content_type: Optional[str],
) -> Optional[str]:
    """
    Proof upload never blocks the submission: any failure is logged and
    the submission goes ahead without a proof URL.
    """
    try:
        ext = validate_image(filename, len(content))
        return storage.upload(
            config.PROOF_BUCKET,
            proof_path(user_id, ext),
            content,
            content_type=content_type or "application/octet-stream",
        )
    except (InvalidUpload, StorageUploadError) as e:
        logger.warning("proof upload failed, continuing without proof: user_id=%s error=%s", user_id, e)
        return None


def create_submission_with_proof(
    db: Session,
    *,
    identity: Optional[Identity],
    payload: SubmissionCreate,
    storage: StorageClient,
    filename: Optional[str] = None,
    content: Optional[bytes] = None,
    content_type: Optional[str] = None,
) -> Submission:
    if identity is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="unauthorized")
    _ensure_profile(db, identity)

    proof_url = None
    if content:
        proof_url = upload_proof_or_none(
            storage,
            user_id=identity.id,
            filename=filename,
            content=content,
            content_type=content_type,
        )
    return create_submission(db, identity=identity, payload=payload, proof_url=proof_url)


# ==============================
# read (admin)
# ==============================
def list_submissions(
    db: Session,
    *,
    status_: ApprovalStatus,
) -> Sequence[Tuple[Submission, str, str]]:
    return sub_crud.list_by_status_with_profile(db, status=status_.value)


def get_submission_or_404(db: Session, submission_id: str) -> Submission:
    sub = sub_crud.get_submission(db, submission_id)
    if sub is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="submission_not_found",
        )
    return sub


# ==============================
# review (admin)
# ==============================
def review_submission(
    db: Session,
    *,
    submission_id: str,
    decision: ReviewDecision,
    actor_id: Optional[str] = None,
) -> Submission:
    """
    approved -> approved_at = now
    rejected -> approved_at cleared (approved_at is set iff status == approved)
    Both written in one UPDATE. Admins may review their own submissions.
    """
    current = get_submission_or_404(db, submission_id)
    target = decision.value
    ensure_transition(current.status, target)

    approved_at = _utcnow() if target == ApprovalStatus.approved.value else None
    sub = sub_crud.set_status(
        db,
        submission_id=submission_id,
        status=target,
        approved_at=approved_at,
    )
    if sub is None:
        # deleted between read and write
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="submission_not_found",
        )

    logger.info(
        "submission %s: id=%s previous=%s actor=%s",
        target,
        submission_id,
        current.status,
        actor_id,
    )
    return sub


def approve_submission(db: Session, *, submission_id: str, actor_id: Optional[str] = None) -> Submission:
    return review_submission(db, submission_id=submission_id, decision=ReviewDecision.approved, actor_id=actor_id)


def reject_submission(db: Session, *, submission_id: str, actor_id: Optional[str] = None) -> Submission:
    return review_submission(db, submission_id=submission_id, decision=ReviewDecision.rejected, actor_id=actor_id)


# ==============================
# delete (admin, permanent)
# ==============================
def delete_submission(db: Session, *, submission_id: str, actor_id: Optional[str] = None) -> None:
    if not sub_crud.delete_submission(db, submission_id=submission_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="submission_not_found",
        )
    logger.info("submission deleted: id=%s actor=%s", submission_id, actor_id)
