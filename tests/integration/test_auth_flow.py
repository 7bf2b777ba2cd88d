"""
End-to-end flows through the HTTP API:
users -> login -> refresh -> revoke, plus the uniform 401 contract.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from utils.security import AccessTokenCodec

EMAIL = "walt@breakingbad.com"
PASSWORD = "chirpy"


def _bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def _create_user(client, email=EMAIL, password=PASSWORD):
    resp = client.post("/api/users", json={"email": email, "password": password})
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


def _login(client, email=EMAIL, password=PASSWORD):
    return client.post("/api/login", json={"email": email, "password": password})


@pytest.fixture
def user(client):
    return _create_user(client)


@pytest.fixture
def session_tokens(client, user):
    resp = _login(client)
    assert resp.status_code == 200
    return resp.get_json()


def test_create_user_hides_password(client):
    body = _create_user(client)
    assert body["email"] == EMAIL
    uuid.UUID(body["id"])
    assert "password" not in body
    assert "password_hash" not in body


def test_create_user_normalizes_email(client):
    body = _create_user(client, email="  Walt@BreakingBad.com ")
    assert body["email"] == EMAIL


def test_duplicate_email_is_conflict(client, user):
    resp = client.post("/api/users", json={"email": EMAIL, "password": "other"})
    assert resp.status_code == 409


@pytest.mark.parametrize("payload", [{}, {"email": "not-an-email", "password": "x"}, {"email": EMAIL}])
def test_invalid_user_payload(client, payload):
    resp = client.post("/api/users", json=payload)
    assert resp.status_code == 422
    assert resp.get_json()["error"] == "VALIDATION_ERROR"


def test_login_returns_tokens_bound_to_user(client, services, user):
    resp = _login(client)
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["id"] == user["id"]
    assert body["email"] == EMAIL
    assert services.access_tokens.verify(body["token"]) == uuid.UUID(user["id"])
    assert services.refresh_tokens.validate(body["refresh_token"]) == uuid.UUID(user["id"])


def test_login_tokens_differ_per_call(client, user):
    first = _login(client).get_json()
    second = _login(client).get_json()
    assert first["token"] != second["token"]
    assert first["refresh_token"] != second["refresh_token"]
    assert first["token"] != first["refresh_token"]


def test_wrong_password_and_unknown_email_look_identical(client, user):
    wrong_password = _login(client, password="wrong")
    unknown_email = _login(client, email="nobody@example.com")
    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.get_json() == unknown_email.get_json()
    assert wrong_password.get_json() == {"error": "UNAUTHORIZED", "message": "Unauthorized", "status": 401}


def test_refresh_issues_new_access_token(client, services, user, session_tokens):
    resp = client.post("/api/refresh", headers=_bearer(session_tokens["refresh_token"]))
    assert resp.status_code == 200
    token = resp.get_json()["token"]
    assert token != session_tokens["token"]
    assert services.access_tokens.verify(token) == uuid.UUID(user["id"])


def test_refresh_token_survives_repeated_use(client, session_tokens):
    for _ in range(2):
        resp = client.post("/api/refresh", headers=_bearer(session_tokens["refresh_token"]))
        assert resp.status_code == 200


def test_access_token_cannot_be_used_to_refresh(client, session_tokens):
    resp = client.post("/api/refresh", headers=_bearer(session_tokens["token"]))
    assert resp.status_code == 401


def test_revoke_then_refresh_fails(client, session_tokens):
    refresh_token = session_tokens["refresh_token"]
    assert client.post("/api/revoke", headers=_bearer(refresh_token)).status_code == 204
    assert client.post("/api/refresh", headers=_bearer(refresh_token)).status_code == 401
    # already revoked: idempotent
    assert client.post("/api/revoke", headers=_bearer(refresh_token)).status_code == 204


def test_revoke_unknown_token_is_unauthorized(client):
    resp = client.post("/api/revoke", headers=_bearer("0" * 64))
    assert resp.status_code == 401


def test_revoking_one_session_leaves_others(client, user):
    first = _login(client).get_json()
    second = _login(client).get_json()
    client.post("/api/revoke", headers=_bearer(first["refresh_token"]))
    assert client.post("/api/refresh", headers=_bearer(second["refresh_token"])).status_code == 200


@pytest.mark.parametrize(
    "headers",
    [{}, {"Authorization": ""}, {"Authorization": "Basic abc123"}, {"Authorization": "bearer abc123"}],
)
def test_bad_authorization_headers_are_uniform_401(client, headers):
    resp = client.post("/api/refresh", headers=headers)
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Unauthorized"


def test_update_user_requires_access_token(client, user):
    resp = client.put("/api/users", json={"email": EMAIL, "password": "new"})
    assert resp.status_code == 401


def test_update_user_changes_credentials_and_issues_tokens(client, services, user, session_tokens):
    resp = client.put(
        "/api/users",
        json={"email": "heisenberg@example.com", "password": "new-secret"},
        headers=_bearer(session_tokens["token"]),
    )
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["id"] == user["id"]
    assert body["email"] == "heisenberg@example.com"
    assert services.access_tokens.verify(body["token"]) == uuid.UUID(user["id"])
    assert services.refresh_tokens.validate(body["refresh_token"]) == uuid.UUID(user["id"])

    assert _login(client, email="heisenberg@example.com", password="new-secret").status_code == 200
    assert _login(client, email="heisenberg@example.com", password=PASSWORD).status_code == 401
    assert _login(client).status_code == 401


def test_update_user_rejects_refresh_token_as_access_token(client, session_tokens):
    resp = client.put(
        "/api/users",
        json={"email": EMAIL, "password": "new"},
        headers=_bearer(session_tokens["refresh_token"]),
    )
    assert resp.status_code == 401


def test_update_user_rejects_expired_access_token(app, client, user):
    issued_long_ago = datetime.now(timezone.utc) - timedelta(days=1)
    stale = AccessTokenCodec(app.config["JWT_SECRET"], clock=lambda: issued_long_ago).issue(
        uuid.UUID(user["id"]), timedelta(hours=1)
    )
    resp = client.put("/api/users", json={"email": EMAIL, "password": "new"}, headers=_bearer(stale))
    assert resp.status_code == 401


def test_access_token_signed_with_other_secret_is_rejected(client, user):
    forged = AccessTokenCodec("some-other-secret-0123456789abcdef0123").issue(
        uuid.UUID(user["id"]), timedelta(hours=1)
    )
    resp = client.put("/api/users", json={"email": EMAIL, "password": "new"}, headers=_bearer(forged))
    assert resp.status_code == 401


def test_update_user_to_taken_email_is_conflict(client, user, session_tokens):
    _create_user(client, email="jesse@example.com")
    resp = client.put(
        "/api/users",
        json={"email": "jesse@example.com", "password": "x"},
        headers=_bearer(session_tokens["token"]),
    )
    assert resp.status_code == 409


def test_login_upgrades_hash_after_work_factor_change(client, services, user):
    weak = services.passwords.__class__(time_cost=2, memory_cost=1024, parallelism=1)
    services.users.update(uuid.UUID(user["id"]), EMAIL, weak.hash(PASSWORD))

    assert _login(client).status_code == 200

    stored = services.users.get_by_email(EMAIL).password_hash
    assert services.passwords.needs_rehash(stored) is False
    services.passwords.verify(PASSWORD, stored)


def test_unknown_email_still_runs_password_check(client, services, monkeypatch, user):
    calls = []
    real_verify = services.passwords.verify

    def recording_verify(password, password_hash):
        calls.append(password_hash)
        return real_verify(password, password_hash)

    monkeypatch.setattr(services.passwords, "verify", recording_verify)

    resp = _login(client, email="nobody@example.com", password="guess")

    assert resp.status_code == 401
    assert calls == [services.passwords.dummy_hash]
