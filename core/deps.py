# core/deps.py
from __future__ import annotations
from typing import Optional, Generator

from sqlalchemy.orm import Session

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer

from core import config
from service.authz import AdminContext, authorize_admin
from service.identity import Identity, IdentityClient
from service.storage import StorageClient

_bearer = HTTPBearer(auto_error=False)
_passcode = APIKeyHeader(name=config.ADMIN_PASSCODE_HEADER, auto_error=False)


# ==============================
# process-wide clients (created in main.lifespan, kept on app.state)
# ==============================
def get_identity_client(request: Request) -> IdentityClient:
    return request.app.state.identity_client


def get_storage_client(request: Request) -> StorageClient:
    return request.app.state.storage_client


# ==============================
# DB session (one per request)
# ==============================
def get_db(request: Request) -> Generator[Session, None, None]:
    db: Session = request.app.state.sessionmaker()
    try:
        yield db
    finally:
        db.close()


# ==============================
# identity
# Authorization: Bearer <identity-provider access token>
# ==============================
def get_current_identity(
    creds: Optional[HTTPAuthorizationCredentials] = Security(_bearer),
    client: IdentityClient = Depends(get_identity_client),
) -> Optional[Identity]:
    """None when the caller is anonymous or the token is not accepted"""
    token = creds.credentials if creds else None
    return client.resolve(token)


def require_identity(
    identity: Optional[Identity] = Depends(get_current_identity),
) -> Identity:
    if identity is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="unauthorized")
    return identity


# ==============================
# admin gate
# - role=admin profile, or
# - x-admin-passcode matching ADMIN_OVERRIDE_PASSCODE (when configured)
# ==============================
def require_admin(
    passcode: Optional[str] = Security(_passcode),
    identity: Optional[Identity] = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> AdminContext:
    return authorize_admin(db, identity=identity, provided_passcode=passcode)
