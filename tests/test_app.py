"""App wiring: health, error bodies, store failures, notifications."""
from __future__ import annotations

import pytest

from core import config
from core.errors import format_validation_errors
from models.submission import Submission
from service import notify


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}
    assert "X-Process-Time" in resp.headers


def test_unknown_route_uses_error_body(client):
    resp = client.get("/does-not-exist")
    assert resp.status_code == 404
    assert "error" in resp.json()


class TestValidationErrors:
    def test_fields_listed_once(self):
        body = format_validation_errors(
            [
                {"loc": ("body", "revenue"), "msg": "Input should be a valid number"},
                {"loc": ("body", "revenue"), "msg": "Input should be greater than or equal to 0"},
                {"loc": ("query", "status"), "msg": "bad"},
            ]
        )
        assert body["error"] == "invalid_request: revenue, status"
        assert [f["field"] for f in body["fields"]] == ["revenue", "revenue", "status"]


class TestStoreFailure:
    def test_leaderboard_store_error_is_500(self, client, engine):
        Submission.__table__.drop(engine)

        resp = client.get("/leaderboard")

        assert resp.status_code == 500
        assert resp.json()["error"]

    def test_create_store_error_is_500(self, client, engine, make_user):
        headers = make_user("alice")
        Submission.__table__.drop(engine)

        resp = client.post("/submissions", json={"revenue": 1, "cost": 1}, headers=headers)
        assert resp.status_code == 500


class TestNotify:
    def test_webhook_failure_does_not_fail_create(self, client, make_user, monkeypatch):
        monkeypatch.setattr(config, "NOTIFY_WEBHOOK_URL", "https://hooks.test/x")

        def _boom(url, payload):
            raise notify.NotifyError("down")

        monkeypatch.setattr(notify, "post_webhook", _boom)

        resp = client.post("/submissions", json={"revenue": 10, "cost": 1}, headers=make_user("alice"))
        assert resp.status_code == 200

    def test_webhook_payload(self, client, make_user, monkeypatch):
        sent = []
        monkeypatch.setattr(config, "NOTIFY_WEBHOOK_URL", "https://hooks.test/x")
        monkeypatch.setattr(notify, "post_webhook", lambda url, payload: sent.append((url, payload)))

        client.post(
            "/submissions",
            json={"revenue": 10, "cost": 4, "ppcSpend": 1, "productName": "Mug"},
            headers=make_user("alice"),
        )

        url, payload = sent[0]
        assert url == "https://hooks.test/x"
        assert payload["type"] == "submission_created"
        assert payload["profit"] == pytest.approx(6)
        assert payload["has_ppc_data"] is True
        assert payload["has_product_info"] is True
