# schemas/profile.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, List

from pydantic import BaseModel, Field

from schemas.base import ORMBase, CamelInput
from schemas.enums import ProfileRole


# =========================
# identity (external, read only)
# =========================
class IdentityResponse(BaseModel):
    id: str
    email: Optional[str] = None
    metadata: dict[str, Any] = Field(default_factory=dict)


# =========================
# profiles
# =========================
class ProfileUpsert(CamelInput):
    """
    PUT /me/profile body.
    - role is never accepted here (admin role endpoint only)
    """
    name: str = Field(min_length=1, max_length=100)
    discord: str = Field(default="", max_length=100)
    avatar_url: Optional[str] = None


class ProfileResponse(ORMBase):
    id: str
    name: str
    discord: str
    avatar_url: Optional[str] = None
    role: ProfileRole
    created_at: datetime


class ProfileEnvelope(BaseModel):
    profile: ProfileResponse


class MeResponse(BaseModel):
    user: Optional[IdentityResponse] = None
    profile: Optional[ProfileResponse] = None


# =========================
# admin: users / roles
# =========================
class UserWithStats(ProfileResponse):
    submission_count: int = 0


class UserListResponse(BaseModel):
    users: List[UserWithStats]


class RoleUpdate(BaseModel):
    role: ProfileRole


class RoleChangedUser(ORMBase):
    id: str
    name: str
    role: ProfileRole


class RoleChangeResponse(BaseModel):
    message: str
    user: RoleChangedUser
