"""
Shared fixtures.

- in-memory sqlite (StaticPool) with tables created from the models
- the FastAPI app built by create_app(), lifespan not entered
- identity provider / object store replaced by in-process fakes
"""
from __future__ import annotations

import time
from typing import Dict, Generator, List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from core import config
from core.deps import get_db, get_identity_client, get_storage_client
from crud import profile as profile_crud
from database.base import create_all
from database.session import build_engine, build_sessionmaker
from main import create_app
from service.identity import Identity, extract_bearer
from service.storage import StorageUploadError

OVERRIDE_PASSCODE = "test-override-passcode"


class FakeIdentityClient:
    """token -> Identity, anything else is anonymous"""

    def __init__(self):
        self.tokens: Dict[str, Identity] = {}

    def add(self, user_id: str, email: Optional[str] = None) -> str:
        token = f"token-{user_id}"
        self.tokens[token] = Identity(id=user_id, email=email or f"{user_id}@example.com")
        return token

    def resolve(self, token: Optional[str]) -> Optional[Identity]:
        token = extract_bearer(token)
        return self.tokens.get(token) if token else None

    def close(self) -> None:
        pass


class FakeStorageClient:
    def __init__(self):
        self.uploads: List[dict] = []
        self.fail = False
        self.delay = 0.0

    def upload(self, bucket, path, content, *, content_type="application/octet-stream", upsert=False):
        if self.delay:
            time.sleep(self.delay)
        if self.fail:
            raise StorageUploadError("storage unavailable")
        self.uploads.append({"bucket": bucket, "path": path, "size": len(content), "upsert": upsert})
        return f"https://storage.test/{bucket}/{path}"

    def close(self) -> None:
        pass


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch):
    monkeypatch.setattr(config, "ADMIN_OVERRIDE_PASSCODE", OVERRIDE_PASSCODE)
    monkeypatch.setattr(config, "NOTIFY_WEBHOOK_URL", None)
    monkeypatch.setattr(config, "TIMEZONE", "UTC")


@pytest.fixture
def engine():
    eng = build_engine("sqlite://", echo=False)
    create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return build_sessionmaker(engine)


@pytest.fixture
def db(session_factory) -> Generator[Session, None, None]:
    s = session_factory()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def identity_client() -> FakeIdentityClient:
    return FakeIdentityClient()


@pytest.fixture
def storage_client() -> FakeStorageClient:
    return FakeStorageClient()


@pytest.fixture
def client(session_factory, identity_client, storage_client) -> Generator[TestClient, None, None]:
    app = create_app()

    def _get_db():
        s = session_factory()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_identity_client] = lambda: identity_client
    app.dependency_overrides[get_storage_client] = lambda: storage_client

    yield TestClient(app)
    app.dependency_overrides.clear()


# ==============================
# people
# ==============================
def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_user(db, identity_client):
    """
    make_user("alice") -> bearer headers for a user with a saved profile.
    profile=False creates the identity only.
    """

    def _make(user_id: str, *, name: Optional[str] = None, role: str = "user", profile: bool = True) -> dict:
        token = identity_client.add(user_id)
        if profile:
            profile_crud.upsert_profile(
                db,
                profile_id=user_id,
                name=name or user_id.title(),
                discord=f"{user_id}#0001",
                avatar_url=None,
            )
            if role != "user":
                profile_crud.set_role(db, profile_id=user_id, role=role)
        return auth(token)

    return _make


@pytest.fixture
def admin_headers(make_user) -> dict:
    return make_user("admin", name="Admin", role="admin")


@pytest.fixture
def submit(client):
    """POST /submissions and return the created submission dict"""

    def _submit(headers: dict, **body) -> dict:
        body.setdefault("revenue", 1000)
        body.setdefault("cost", 400)
        resp = client.post("/submissions", json=body, headers=headers)
        assert resp.status_code == 200, resp.text
        return resp.json()["submission"]

    return _submit
