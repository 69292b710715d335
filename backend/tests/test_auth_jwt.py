# backend/tests/test_auth_jwt.py
from __future__ import annotations

import time

import jwt
import pytest

from rentiful.config import settings

SECRET = "rentiful-test-secret-0123456789abcdef"


@pytest.fixture
def jwt_mode(monkeypatch):
    monkeypatch.setattr(settings, "auth_mode", "jwt")
    monkeypatch.setattr(settings, "jwt_secret", SECRET)
    monkeypatch.setattr(settings, "jwt_verify_signature", True)
    monkeypatch.setattr(settings, "jwt_audience", None)


def _token(secret: str = SECRET, **claims) -> str:
    payload = {"sub": "ten-jwt", "custom:role": "tenant", "email": "jwt@example.com", "exp": int(time.time()) + 600}
    payload.update(claims)
    return jwt.encode({k: v for k, v in payload.items() if v is not None}, secret, algorithm="HS256")


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def test_valid_token_provisions_from_claims(client, jwt_mode):
    r = client.get("/auth/me", headers=_bearer(_token(**{"cognito:username": "jwt-user"})))
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["userRole"] == "tenant"
    assert body["userInfo"]["cognitoId"] == "ten-jwt"
    assert body["userInfo"]["name"] == "jwt-user"


def test_bad_signature_and_expired_tokens_are_401(client, jwt_mode):
    assert client.get("/auth/me", headers=_bearer(_token(secret="another-secret-0123456789abcdef0123"))).status_code == 401
    assert client.get("/auth/me", headers=_bearer(_token(exp=int(time.time()) - 60))).status_code == 401
    assert client.get("/auth/me", headers=_bearer("not.a.jwt")).status_code == 401


def test_token_without_usable_role_is_403(client, jwt_mode):
    r = client.get("/auth/me", headers=_bearer(_token(**{"custom:role": "admin"})))
    assert r.status_code == 403


def test_dev_headers_are_ignored_in_jwt_mode(client, jwt_mode, as_user):
    assert client.get("/auth/me", headers=as_user("ten-1")).status_code == 401


def test_manager_token_passes_role_gate(client, factory, jwt_mode):
    factory.manager("mgr-jwt")
    tok = _token(sub="mgr-jwt", **{"custom:role": "manager"})

    r = client.post(
        "/properties",
        data={
            "name": "Jwt Flat",
            "pricePerMonth": "900",
            "beds": "1",
            "baths": "1",
            "squareFeet": "400",
            "propertyType": "Rooms",
            "address": "1 Token Way",
            "city": "Austin",
            "country": "United States",
            "coordinates": "[-97.74, 30.27]",
        },
        headers=_bearer(tok),
    )
    assert r.status_code == 201, r.text
    assert r.json()["managerCognitoId"] == "mgr-jwt"


def test_prod_guard_rejects_dev_auth():
    from rentiful.config import Settings

    with pytest.raises(ValueError):
        Settings(app_env="prod", auth_mode="dev", cors_allow_origins=["https://rentiful.example"])
    with pytest.raises(ValueError):
        Settings(app_env="prod", auth_mode="jwt", cors_allow_origins=["*"])
    assert Settings(app_env="prod", auth_mode="jwt", cors_allow_origins=["https://rentiful.example"]).is_prod
