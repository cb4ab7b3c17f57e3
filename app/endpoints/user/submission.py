# app/endpoints/user/submission.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from core.deps import get_db, get_storage_client, require_identity
from schemas.submission import SubmissionCreate, SubmissionEnvelope, SubmissionResponse
from service import submission as submission_service
from service.identity import Identity
from service.storage import StorageClient

router = APIRouter()


# ==============================
# create (JSON)
# ==============================
@router.post(
    "",
    response_model=SubmissionEnvelope,
    summary="Submit a result for review",
)
def create_submission(
    body: SubmissionCreate,
    db: Session = Depends(get_db),
    me: Identity = Depends(require_identity),
):
    """
    Always stored as 'pending'; profit is computed server-side.
    """
    sub = submission_service.create_submission(db, identity=me, payload=body)
    return SubmissionEnvelope(submission=SubmissionResponse.model_validate(sub))


# ==============================
# create (multipart, optional proof image)
# ==============================
@router.post(
    "/with-proof",
    response_model=SubmissionEnvelope,
    summary="Submit a result with a proof screenshot",
)
def create_submission_with_proof(
    payload: str = Form(..., description="SubmissionCreate as a JSON string"),
    proof: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    me: Identity = Depends(require_identity),
    storage: StorageClient = Depends(get_storage_client),
):
    """
    A failed proof upload does not block the submission; it is stored
    without proof_url.
    """
    body = SubmissionCreate.model_validate_json(payload)

    content: Optional[bytes] = None
    filename: Optional[str] = None
    content_type: Optional[str] = None
    if proof is not None:
        content = proof.file.read()
        filename = proof.filename
        content_type = proof.content_type

    sub = submission_service.create_submission_with_proof(
        db,
        identity=me,
        payload=body,
        storage=storage,
        filename=filename,
        content=content,
        content_type=content_type,
    )
    return SubmissionEnvelope(submission=SubmissionResponse.model_validate(sub))
