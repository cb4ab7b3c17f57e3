# app/endpoints/user/me.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from core.deps import get_current_identity, get_db, get_storage_client, require_identity
from schemas.profile import MeResponse, ProfileEnvelope, ProfileResponse, ProfileUpsert
from service import profile as profile_service
from service.identity import Identity
from service.storage import StorageClient

router = APIRouter()


@router.get(
    "",
    response_model=MeResponse,
    summary="Current identity and profile",
)
def read_me(
    db: Session = Depends(get_db),
    me: Optional[Identity] = Depends(get_current_identity),
):
    return profile_service.get_me(db, identity=me)


@router.put(
    "/profile",
    response_model=ProfileEnvelope,
    summary="Create or update my profile",
)
def save_my_profile(
    body: ProfileUpsert,
    db: Session = Depends(get_db),
    me: Identity = Depends(require_identity),
):
    profile = profile_service.save_profile(db, identity=me, payload=body)
    return ProfileEnvelope(profile=ProfileResponse.model_validate(profile))


@router.post(
    "/avatar",
    response_model=ProfileEnvelope,
    summary="Upload my avatar image",
)
def upload_my_avatar(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    me: Identity = Depends(require_identity),
    storage: StorageClient = Depends(get_storage_client),
):
    content = file.file.read()
    profile = profile_service.upload_avatar(
        db,
        identity=me,
        storage=storage,
        filename=file.filename,
        content=content,
        content_type=file.content_type,
    )
    return ProfileEnvelope(profile=ProfileResponse.model_validate(profile))
