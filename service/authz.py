# service/authz.py
from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from core import config
from crud import profile as profile_crud
from service.identity import Identity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminContext:
    """Who passed the admin gate and how."""
    identity: Optional[Identity]
    via_override: bool

    @property
    def actor_id(self) -> Optional[str]:
        return self.identity.id if self.identity else None


def passcode_matches(provided: Optional[str]) -> bool:
    """
    Constant-time compare against ADMIN_OVERRIDE_PASSCODE.
    Unset secret -> override disabled, never matches.
    """
    secret = config.ADMIN_OVERRIDE_PASSCODE
    if not secret or not provided:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), secret.encode("utf-8"))


def is_admin(identity: Optional[Identity], provided_passcode: Optional[str], role: Optional[str]) -> bool:
    if passcode_matches(provided_passcode):
        return True
    return identity is not None and role == "admin"


# ==============================
# gate (evaluated on every admin request, never cached)
# ==============================
def authorize_admin(
    db: Session,
    *,
    identity: Optional[Identity],
    provided_passcode: Optional[str],
) -> AdminContext:
    """
    1) no identity, passcode mismatch   -> 401
    2) identity, role admin or passcode -> ok
    3) identity, not admin, mismatch    -> 403
    4) no identity, passcode match      -> ok (audited)
    """
    if identity is None and not passcode_matches(provided_passcode):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="unauthorized")

    role = profile_crud.get_role(db, identity.id) if identity is not None else None
    if not is_admin(identity, provided_passcode, role):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="forbidden")

    if identity is not None and role == "admin":
        return AdminContext(identity=identity, via_override=False)

    logger.warning(
        "admin override used: user_id=%s",
        identity.id if identity is not None else None,
    )
    return AdminContext(identity=identity, via_override=True)
