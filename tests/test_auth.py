from __future__ import annotations

from datetime import datetime, timedelta, timezone

from hrportal.core.jwt import TokenClaims, TokenService
from hrportal.core.roles import RoleName


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_seeded_admin_can_login(app, client, settings):
    resp = client.post("/auth/login", json={"email": settings.admin_email.upper(), "password": settings.admin_initial_password})
    assert resp.status_code == 200
    body = resp.json()
    assert body["tokenType"] == "bearer"
    assert body["expiresIn"] == 86400
    assert "passwordHash" not in body["user"]
    assert body["user"]["role"]["name"] == RoleName.ADMINISTRATOR.value

    claims = app.state.token_service.verify(body["token"])
    assert str(claims.user_id) == body["user"]["id"]
    assert str(claims.role_id) == body["user"]["roleId"]
    assert claims.email == settings.admin_email


def test_login_wrong_password(client, make_user):
    user = make_user()
    resp = client.post("/auth/login", json={"email": user.email, "password": "wrong-password"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid credentials."


def test_login_unknown_email(client, user_password):
    resp = client.post("/auth/login", json={"email": "nobody@inovera.com", "password": user_password})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid credentials."


def test_login_inactive_account(client, make_user, user_password):
    user = make_user(is_active=False)
    resp = client.post("/auth/login", json={"email": user.email, "password": user_password})
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Account is inactive. Please contact HR."


def test_login_missing_fields(client, settings):
    resp = client.post("/auth/login", json={"email": settings.admin_email})
    assert resp.status_code == 400
    assert "password" in resp.json()["errors"]


def test_me_returns_profile(client, make_user, auth_headers):
    user = make_user(RoleName.PROJECT_MANAGER, full_name="Pat Manager")
    resp = client.get("/auth/me", headers=auth_headers(user))
    assert resp.status_code == 200
    assert resp.json()["fullName"] == "Pat Manager"


def test_missing_token_is_401(client):
    resp = client.get("/auth/me")
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Authentication failed. No token provided."
    assert resp.headers["www-authenticate"] == "Bearer"


def test_garbage_token_is_401(client):
    resp = client.get("/auth/me", headers={"Authorization": "Bearer garbage"})
    assert resp.status_code == 401


def test_expired_token_is_401(client, make_user, settings):
    user = make_user()
    stale = TokenService(settings.jwt_secret_key, clock=lambda: datetime.now(tz=timezone.utc) - timedelta(hours=25))
    token = stale.issue(TokenClaims(user_id=user.id, email=user.email, role_id=user.role_id))
    resp = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
