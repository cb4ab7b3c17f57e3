# service/profile.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from core import config
from crud import profile as profile_crud
from crud import submission as sub_crud
from models.profile import Profile
from schemas.enums import ProfileRole
from schemas.profile import (
    IdentityResponse,
    MeResponse,
    ProfileResponse,
    ProfileUpsert,
    UserWithStats,
)
from service.authz import AdminContext
from service.identity import Identity
from service.storage import (
    InvalidUpload,
    StorageClient,
    StorageUploadError,
    avatar_path,
    validate_image,
)

logger = logging.getLogger(__name__)


# ==============================
# me
# ==============================
def get_me(db: Session, *, identity: Optional[Identity]) -> MeResponse:
    """anonymous callers get {user: None, profile: None}, not an error"""
    if identity is None:
        return MeResponse(user=None, profile=None)

    profile = profile_crud.get_profile(db, identity.id)
    return MeResponse(
        user=IdentityResponse(id=identity.id, email=identity.email, metadata=identity.metadata),
        profile=ProfileResponse.model_validate(profile) if profile else None,
    )


def save_profile(db: Session, *, identity: Identity, payload: ProfileUpsert) -> Profile:
    profile = profile_crud.upsert_profile(
        db,
        profile_id=identity.id,
        name=payload.name,
        discord=payload.discord,
        avatar_url=payload.avatar_url,
    )
    logger.info("profile saved: id=%s", profile.id)
    return profile


def upload_avatar(
    db: Session,
    *,
    identity: Identity,
    storage: StorageClient,
    filename: Optional[str],
    content: bytes,
    content_type: Optional[str],
) -> Profile:
    """
    - profile must exist (404)
    - bad extension / size -> 400
    - object store failure -> 502
    """
    if profile_crud.get_profile(db, identity.id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="profile_not_found",
        )

    try:
        ext = validate_image(filename, len(content))
    except InvalidUpload as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"invalid_upload: {e}")

    try:
        url = storage.upload(
            config.AVATAR_BUCKET,
            avatar_path(identity.id, ext),
            content,
            content_type=content_type or "application/octet-stream",
            upsert=True,
        )
    except StorageUploadError as e:
        logger.error("avatar upload failed: id=%s error=%s", identity.id, e)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="avatar_upload_failed")

    profile = profile_crud.set_avatar_url(db, profile_id=identity.id, avatar_url=url)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="profile_not_found",
        )
    logger.info("avatar updated: id=%s", identity.id)
    return profile


# ==============================
# admin: users
# ==============================
def list_users_with_stats(db: Session) -> list[UserWithStats]:
    """all profiles newest first, submission_count = approved submissions"""
    counts = sub_crud.approved_counts_by_user(db)
    return [
        UserWithStats.model_validate(p).model_copy(update={"submission_count": counts.get(p.id, 0)})
        for p in profile_crud.list_profiles(db)
    ]


def change_role(
    db: Session,
    *,
    admin: AdminContext,
    target_id: str,
    role: ProfileRole,
) -> Profile:
    """
    - an admin cannot demote themself
    - the last remaining admin cannot be demoted
    - unknown profile -> 404
    """
    if admin.actor_id == target_id and role == ProfileRole.user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="cannot_demote_self",
        )

    target = profile_crud.get_profile(db, target_id)
    if target is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="profile_not_found",
        )

    if role == ProfileRole.user and target.role == ProfileRole.admin.value:
        if profile_crud.count_admins(db) <= 1:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="last_admin",
            )

    updated = profile_crud.set_role(db, profile_id=target_id, role=role.value)
    if updated is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="profile_not_found",
        )

    logger.info(
        "role changed: target=%s role=%s actor=%s via_override=%s",
        target_id,
        role.value,
        admin.actor_id,
        admin.via_override,
    )
    return updated
