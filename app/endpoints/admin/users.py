# app/endpoints/admin/users.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.deps import get_db, require_admin
from schemas.profile import (
    RoleChangeResponse,
    RoleChangedUser,
    RoleUpdate,
    UserListResponse,
)
from service import profile as profile_service
from service.authz import AdminContext

router = APIRouter()


@router.get(
    "",
    response_model=UserListResponse,
    summary="Users with role and approved submission counts",
)
def list_users(
    db: Session = Depends(get_db),
    _: AdminContext = Depends(require_admin),
):
    return UserListResponse(users=profile_service.list_users_with_stats(db))


@router.patch(
    "/{user_id}/role",
    response_model=RoleChangeResponse,
    summary="Change a user's role",
)
def change_role(
    user_id: str,
    body: RoleUpdate,
    db: Session = Depends(get_db),
    admin: AdminContext = Depends(require_admin),
):
    """
    - role: user | admin
    - an admin cannot remove their own admin role
    - the last admin cannot be demoted
    """
    updated = profile_service.change_role(db, admin=admin, target_id=user_id, role=body.role)
    return RoleChangeResponse(
        message=f"User role updated to {body.role.value}",
        user=RoleChangedUser.model_validate(updated),
    )
