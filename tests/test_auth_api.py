from __future__ import annotations

import pytest
from argon2 import PasswordHasher
from argon2.exceptions import HashingError

from api import create_app
from auth.tokens import validate_access_token


def _bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def _register(client, email: str = "a@b.com", password: str = "pw1"):
    return client.post("/api/v1/auth/register", json={"email": email, "password": password})


def test_healthz(client) -> None:
    r = client.get("/api/v1/healthz")
    assert r.status_code == 200
    assert r.get_json() == {"status": "ok", "database": "ok"}


def test_end_to_end_session_lifecycle(app, client) -> None:
    secret = app.config["JWT_SECRET"]

    reg = _register(client)
    assert reg.status_code == 201, reg.get_data(as_text=True)
    user = reg.get_json()["data"]
    assert user["email"] == "a@b.com"
    assert "password" not in user and "password_hash" not in user

    login = client.post("/api/v1/auth/login", json={"email": "a@b.com", "password": "pw1"})
    assert login.status_code == 200
    body = login.get_json()
    assert body["token_type"] == "bearer"
    assert body["expires_in"] == 3600
    assert validate_access_token(body["access_token"], secret) == user["id"]
    refresh_token = body["refresh_token"]

    bad = client.post("/api/v1/auth/login", json={"email": "a@b.com", "password": "nope"})
    assert bad.status_code == 401
    assert bad.get_json()["message"] == "Incorrect email or password"

    renewed = client.post("/api/v1/auth/refresh", headers=_bearer(refresh_token))
    assert renewed.status_code == 200
    assert validate_access_token(renewed.get_json()["access_token"], secret) == user["id"]
    assert "refresh_token" not in renewed.get_json()

    revoked = client.post("/api/v1/auth/revoke", headers=_bearer(refresh_token))
    assert revoked.status_code == 204

    again = client.post("/api/v1/auth/refresh", headers=_bearer(refresh_token))
    assert again.status_code == 401
    assert again.get_json() == {"error": "UNAUTHORIZED", "message": "Unauthorized", "status": 401}

    # Revocation does not reach access tokens already issued
    me = client.get("/api/v1/users/me", headers=_bearer(body["access_token"]))
    assert me.status_code == 200


def test_unknown_email_looks_like_wrong_password(client) -> None:
    _register(client)
    unknown = client.post("/api/v1/auth/login", json={"email": "x@b.com", "password": "pw1"})
    wrong = client.post("/api/v1/auth/login", json={"email": "a@b.com", "password": "pw2"})
    assert unknown.status_code == wrong.status_code == 401
    assert unknown.get_json() == wrong.get_json()


def test_register_duplicate_email(client) -> None:
    assert _register(client).status_code == 201
    dup = _register(client, email="A@B.com ")
    assert dup.status_code == 409


def test_register_validation(client) -> None:
    r = client.post("/api/v1/auth/register", json={"email": "not-an-email", "password": "pw1"})
    assert r.status_code == 422
    assert "email" in r.get_json()["details"]


def test_login_expires_in_seconds(client) -> None:
    _register(client)
    short = client.post(
        "/api/v1/auth/login", json={"email": "a@b.com", "password": "pw1", "expires_in_seconds": 60}
    )
    assert short.get_json()["expires_in"] == 60
    capped = client.post(
        "/api/v1/auth/login", json={"email": "a@b.com", "password": "pw1", "expires_in_seconds": 86400}
    )
    assert capped.get_json()["expires_in"] == 3600
    default = client.post(
        "/api/v1/auth/login", json={"email": "a@b.com", "password": "pw1", "expires_in_seconds": 0}
    )
    assert default.get_json()["expires_in"] == 3600
    negative = client.post(
        "/api/v1/auth/login", json={"email": "a@b.com", "password": "pw1", "expires_in_seconds": -1}
    )
    assert negative.status_code == 422


def test_login_huge_expires_in_seconds_is_capped(client) -> None:
    _register(client)
    r = client.post(
        "/api/v1/auth/login", json={"email": "a@b.com", "password": "pw1", "expires_in_seconds": 10**15}
    )
    assert r.status_code == 200
    assert r.get_json()["expires_in"] == 3600


@pytest.mark.parametrize(
    "headers",
    [{}, {"Authorization": "abc123"}, {"Authorization": "Basic abc123"}, {"Authorization": "Bearer nope"}],
)
def test_protected_endpoint_rejects_uniformly(client, headers: dict) -> None:
    r = client.get("/api/v1/users/me", headers=headers)
    assert r.status_code == 401
    assert r.get_json()["message"] == "Unauthorized"


def test_access_token_from_another_app_is_rejected(client) -> None:
    other = create_app("testing", DATABASE_URL="sqlite://", JWT_SECRET="some-other-secret-for-signing-tokens")
    with other.test_client() as c:
        token = _register(c).get_json()["access_token"]
    r = client.get("/api/v1/users/me", headers=_bearer(token))
    assert r.status_code == 401


def test_refresh_token_is_not_an_access_token(client) -> None:
    refresh_token = _register(client).get_json()["refresh_token"]
    r = client.get("/api/v1/users/me", headers=_bearer(refresh_token))
    assert r.status_code == 401


def test_refresh_and_revoke_need_a_bearer_header(client) -> None:
    assert client.post("/api/v1/auth/refresh").status_code == 401
    assert client.post("/api/v1/auth/revoke").status_code == 401
    assert client.post("/api/v1/auth/revoke", headers=_bearer("never-issued")).status_code == 204


def test_update_credentials(client) -> None:
    access = _register(client).get_json()["access_token"]
    r = client.put("/api/v1/users", json={"email": "new@b.com", "password": "pw2"}, headers=_bearer(access))
    assert r.status_code == 200
    assert r.get_json()["data"]["email"] == "new@b.com"

    old = client.post("/api/v1/auth/login", json={"email": "a@b.com", "password": "pw1"})
    assert old.status_code == 401
    new = client.post("/api/v1/auth/login", json={"email": "new@b.com", "password": "pw2"})
    assert new.status_code == 200


def test_update_credentials_email_taken(client) -> None:
    _register(client, email="taken@b.com")
    access = _register(client).get_json()["access_token"]
    r = client.put("/api/v1/users", json={"email": "taken@b.com", "password": "pw2"}, headers=_bearer(access))
    assert r.status_code == 409


def test_update_credentials_requires_token(client) -> None:
    r = client.put("/api/v1/users", json={"email": "new@b.com", "password": "pw2"})
    assert r.status_code == 401


INTERNAL_ERROR_BODY = {"error": "INTERNAL_ERROR", "message": "An unexpected error occurred", "status": 500}


def test_entropy_failure_is_a_generic_500(client, monkeypatch: pytest.MonkeyPatch) -> None:
    def no_entropy(nbytes=None):
        raise OSError("no random source")

    monkeypatch.setattr("auth.tokens.secrets.token_hex", no_entropy)
    r = _register(client)
    assert r.status_code == 500
    assert r.get_json() == INTERNAL_ERROR_BODY


def test_hashing_failure_is_a_generic_500(client, monkeypatch: pytest.MonkeyPatch) -> None:
    def cannot_hash(self, password, *, salt=None):
        raise HashingError("out of memory")

    monkeypatch.setattr(PasswordHasher, "hash", cannot_hash)
    r = _register(client)
    assert r.status_code == 500
    assert r.get_json() == INTERNAL_ERROR_BODY
