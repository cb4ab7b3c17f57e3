# crud/profile.py
from __future__ import annotations

from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from crud.base import CRUDBase
from models.base import utcnow
from models.profile import Profile

profile_crud = CRUDBase(Profile)


# ==============================
# Read
# ==============================
def get_profile(db: Session, profile_id: str) -> Optional[Profile]:
    return profile_crud.get(db, profile_id)


def get_role(db: Session, profile_id: str) -> Optional[str]:
    """role only (authorization path), None when the profile does not exist"""
    return db.execute(select(Profile.role).where(Profile.id == profile_id)).scalar_one_or_none()


def list_profiles(db: Session) -> list[Profile]:
    return profile_crud.get_multi(db, order_by=["-created_at", "id"])


def list_by_ids(db: Session, profile_ids: set[str]) -> dict[str, Profile]:
    rows = profile_crud.get_multi(db, filters={"id": profile_ids})
    return {p.id: p for p in rows}


def count_admins(db: Session) -> int:
    return profile_crud.count(db, filters={"role": "admin"})


# ==============================
# Upsert (owner)
# ==============================
def upsert_profile(
    db: Session,
    *,
    profile_id: str,
    name: str,
    discord: str,
    avatar_url: Optional[str],
) -> Profile:
    """
    Create on first save, otherwise update name / discord / avatar_url.
    role is left as is (new rows get the column default 'user').
    avatar_url=None keeps the stored avatar.
    """
    obj = profile_crud.get(db, profile_id)
    data = {"name": name, "discord": discord}
    if avatar_url is not None:
        data["avatar_url"] = avatar_url
    if obj is None:
        return profile_crud.create(db, obj_in={"id": profile_id, **data})
    return profile_crud.update(db, db_obj=obj, obj_in=data)


def set_avatar_url(db: Session, *, profile_id: str, avatar_url: str) -> Optional[Profile]:
    obj = profile_crud.get(db, profile_id)
    if obj is None:
        return None
    return profile_crud.update(db, db_obj=obj, obj_in={"avatar_url": avatar_url})


# ==============================
# Role (admin)
# ==============================
def set_role(db: Session, *, profile_id: str, role: str) -> Optional[Profile]:
    result = db.execute(
        update(Profile)
        .where(Profile.id == profile_id)
        .values(role=role, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.rollback()
        return None
    db.commit()
    return db.execute(
        select(Profile).where(Profile.id == profile_id).execution_options(populate_existing=True)
    ).scalars().first()
