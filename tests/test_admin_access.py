"""Admin gate and user / role management."""
from __future__ import annotations

import pytest

from core import config
from tests.conftest import OVERRIDE_PASSCODE

ADMIN_CALLS = [
    ("get", "/submissions", None),
    ("patch", "/submissions/some-id", {"status": "approved"}),
    ("delete", "/submissions/some-id", None),
    ("get", "/users", None),
    ("patch", "/users/someone/role", {"role": "admin"}),
]


def _call(client, method: str, path: str, body, headers=None):
    kwargs = {"headers": headers or {}}
    if body is not None:
        kwargs["json"] = body
    return getattr(client, method)(path, **kwargs)


class TestAdminGate:
    @pytest.mark.parametrize("method, path, body", ADMIN_CALLS)
    def test_anonymous_gets_401(self, client, method, path, body):
        resp = _call(client, method, path, body)
        assert resp.status_code == 401
        assert resp.json() == {"error": "unauthorized"}

    @pytest.mark.parametrize("method, path, body", ADMIN_CALLS)
    def test_regular_user_gets_403(self, client, make_user, method, path, body):
        resp = _call(client, method, path, body, make_user("alice"))
        assert resp.status_code == 403
        assert resp.json() == {"error": "forbidden"}

    @pytest.mark.parametrize("method, path, body", ADMIN_CALLS)
    def test_identity_without_profile_gets_403(self, client, make_user, method, path, body):
        resp = _call(client, method, path, body, make_user("ghost", profile=False))
        assert resp.status_code == 403

    def test_wrong_passcode(self, client, make_user):
        headers = {**make_user("alice"), config.ADMIN_PASSCODE_HEADER: "guess"}
        assert client.get("/users", headers=headers).status_code == 403

    def test_override_passcode_with_identity(self, client, make_user):
        headers = {**make_user("alice"), config.ADMIN_PASSCODE_HEADER: OVERRIDE_PASSCODE}
        assert client.get("/users", headers=headers).status_code == 200

    def test_override_passcode_alone(self, client):
        resp = client.get("/users", headers={config.ADMIN_PASSCODE_HEADER: OVERRIDE_PASSCODE})
        assert resp.status_code == 200

    def test_override_disabled_when_unset(self, client, make_user, monkeypatch):
        monkeypatch.setattr(config, "ADMIN_OVERRIDE_PASSCODE", None)
        headers = {**make_user("alice"), config.ADMIN_PASSCODE_HEADER: OVERRIDE_PASSCODE}
        assert client.get("/users", headers=headers).status_code == 403

    def test_rejected_before_body_validation(self, client, make_user):
        resp = client.patch("/submissions/x", json={"status": "bogus"}, headers=make_user("alice"))
        assert resp.status_code == 403

    def test_role_checked_on_every_request(self, client, make_user, admin_headers):
        bob = make_user("bob")
        assert client.get("/users", headers=bob).status_code == 403

        client.patch("/users/bob/role", json={"role": "admin"}, headers=admin_headers)
        assert client.get("/users", headers=bob).status_code == 200

        client.patch("/users/bob/role", json={"role": "user"}, headers=admin_headers)
        assert client.get("/users", headers=bob).status_code == 403


class TestUsers:
    def test_list_with_approved_counts(self, client, submit, make_user, admin_headers):
        alice = make_user("alice")
        make_user("ben")
        first = submit(alice)
        submit(alice)
        client.patch(f"/submissions/{first['id']}", json={"status": "approved"}, headers=admin_headers)

        users = {u["id"]: u for u in client.get("/users", headers=admin_headers).json()["users"]}

        assert set(users) == {"admin", "alice", "ben"}
        assert users["alice"]["submission_count"] == 1
        assert users["ben"]["submission_count"] == 0
        assert users["admin"]["role"] == "admin"


class TestRoleChange:
    def test_promote(self, client, make_user, admin_headers):
        make_user("alice")
        resp = client.patch("/users/alice/role", json={"role": "admin"}, headers=admin_headers)

        assert resp.status_code == 200
        body = resp.json()
        assert body["message"] == "User role updated to admin"
        assert body["user"] == {"id": "alice", "name": "Alice", "role": "admin"}

    def test_demote_other_admin(self, client, make_user, admin_headers):
        make_user("alice", role="admin")
        resp = client.patch("/users/alice/role", json={"role": "user"}, headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json()["user"]["role"] == "user"

    def test_cannot_demote_self(self, client, make_user, admin_headers):
        make_user("alice", role="admin")
        resp = client.patch("/users/admin/role", json={"role": "user"}, headers=admin_headers)
        assert resp.status_code == 400
        assert resp.json() == {"error": "cannot_demote_self"}

    def test_self_promote_is_a_noop_success(self, client, admin_headers):
        resp = client.patch("/users/admin/role", json={"role": "admin"}, headers=admin_headers)
        assert resp.status_code == 200

    def test_last_admin_cannot_be_demoted_via_override(self, client, admin_headers):
        resp = client.patch(
            "/users/admin/role",
            json={"role": "user"},
            headers={config.ADMIN_PASSCODE_HEADER: OVERRIDE_PASSCODE},
        )
        assert resp.status_code == 400
        assert resp.json() == {"error": "last_admin"}

    def test_unknown_user(self, client, admin_headers):
        resp = client.patch("/users/nobody/role", json={"role": "admin"}, headers=admin_headers)
        assert resp.status_code == 404

    @pytest.mark.parametrize("role", ["owner", "", None])
    def test_invalid_role(self, client, make_user, admin_headers, role):
        make_user("alice")
        resp = client.patch("/users/alice/role", json={"role": role}, headers=admin_headers)
        assert resp.status_code == 400
