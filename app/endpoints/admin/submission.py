# app/endpoints/admin/submission.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.deps import get_db, require_admin
from schemas.enums import ApprovalStatus
from schemas.submission import (
    MessageResponse,
    ProfileBrief,
    SubmissionEnvelope,
    SubmissionListResponse,
    SubmissionResponse,
    SubmissionStatusUpdate,
    SubmissionWithProfile,
)
from service import submission as submission_service
from service.authz import AdminContext

router = APIRouter()


# ==============================
# review queue
# ==============================
@router.get(
    "",
    response_model=SubmissionListResponse,
    summary="List submissions by status",
)
def list_submissions(
    status_: ApprovalStatus = Query(ApprovalStatus.pending, alias="status"),
    db: Session = Depends(get_db),
    _: AdminContext = Depends(require_admin),
):
    """
    Submissions of one status with the owner's name / discord, newest first.
    """
    rows = submission_service.list_submissions(db, status_=status_)
    items = [
        SubmissionWithProfile(
            **SubmissionResponse.model_validate(sub).model_dump(),
            profile=ProfileBrief(name=name, discord=discord),
        )
        for sub, name, discord in rows
    ]
    return SubmissionListResponse(submissions=items)


# ==============================
# approve / reject
# ==============================
@router.patch(
    "/{submission_id}",
    response_model=SubmissionEnvelope,
    summary="Approve or reject a submission",
)
def review_submission(
    submission_id: str,
    body: SubmissionStatusUpdate,
    db: Session = Depends(get_db),
    admin: AdminContext = Depends(require_admin),
):
    sub = submission_service.review_submission(
        db,
        submission_id=submission_id,
        decision=body.status,
        actor_id=admin.actor_id,
    )
    return SubmissionEnvelope(submission=SubmissionResponse.model_validate(sub))


# ==============================
# delete (permanent)
# ==============================
@router.delete(
    "/{submission_id}",
    response_model=MessageResponse,
    summary="Delete a submission",
)
def delete_submission(
    submission_id: str,
    db: Session = Depends(get_db),
    admin: AdminContext = Depends(require_admin),
):
    submission_service.delete_submission(db, submission_id=submission_id, actor_id=admin.actor_id)
    return MessageResponse(message="Submission deleted successfully")
