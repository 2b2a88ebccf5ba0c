from __future__ import annotations

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from jose import jwt

from hrportal.core.jwt import TOKEN_TTL, TokenClaims, TokenExpired, TokenInvalid, TokenService

ISSUED_AT = datetime(2024, 3, 1, 9, 0, 0, tzinfo=timezone.utc)


def _claims() -> TokenClaims:
    return TokenClaims(user_id=uuid4(), email="jane@inovera.com", role_id=uuid4())


def _service(secret: str = "s3cret") -> TokenService:
    return TokenService(secret, clock=lambda: ISSUED_AT)


def test_issue_then_verify_returns_same_identity():
    svc = _service()
    claims = _claims()
    assert svc.verify(svc.issue(claims)) == claims


def test_payload_carries_camel_case_claims_and_24h_expiry():
    svc = _service()
    claims = _claims()
    payload = jwt.get_unverified_claims(svc.issue(claims))
    assert payload["userId"] == str(claims.user_id)
    assert payload["roleId"] == str(claims.role_id)
    assert payload["email"] == claims.email
    assert payload["exp"] - payload["iat"] == 86400


def test_token_valid_one_second_before_expiry():
    svc = _service()
    token = svc.issue(_claims())
    assert svc.verify(token, now=ISSUED_AT + TOKEN_TTL - timedelta(seconds=1))


def test_token_expired_at_exactly_24_hours():
    svc = _service()
    token = svc.issue(_claims())
    with pytest.raises(TokenExpired):
        svc.verify(token, now=ISSUED_AT + TOKEN_TTL)


def test_token_signed_with_other_secret_is_invalid():
    token = _service("other-secret").issue(_claims())
    with pytest.raises(TokenInvalid):
        _service().verify(token)


def test_garbage_token_is_invalid():
    with pytest.raises(TokenInvalid):
        _service().verify("not-a-jwt")


def test_token_missing_identity_claims_is_invalid():
    exp = int(ISSUED_AT.timestamp()) + 60
    token = jwt.encode({"email": "x@inovera.com", "exp": exp}, "s3cret", algorithm="HS256")
    with pytest.raises(TokenInvalid):
        _service().verify(token)


def test_empty_secret_is_rejected():
    with pytest.raises(RuntimeError):
        TokenService("")
