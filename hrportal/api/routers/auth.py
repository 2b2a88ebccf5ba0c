from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from hrportal.core.db import get_db, get_or_404
from hrportal.core.errors import Forbidden, Unauthenticated
from hrportal.core.jwt import TokenClaims, TokenService
from hrportal.core.security import verify_password
from hrportal.deps.auth import Principal, get_current_principal, get_token_service
from hrportal.models.hrms import User
from hrportal.schemas.auth import LoginRequest, LoginResponse
from hrportal.schemas.hrms import UserOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Login and receive an access token",
    description="Verifies email/password and returns a 24 hour JWT together with the user profile.",
    operation_id="auth_login",
)
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> LoginResponse:
    """Authenticate a user and issue a JWT."""
    user = db.scalar(select(User).where(func.lower(User.email) == payload.email.strip().lower()))

    if user is None:
        verify_password(payload.password, None)
        logger.info("Login failed for unknown email %s", payload.email)
        raise Unauthenticated("Invalid credentials.")

    if not user.is_active:
        raise Forbidden("Account is inactive. Please contact HR.")

    if not verify_password(payload.password, user.password_hash):
        logger.info("Login failed for %s: bad password", user.email)
        raise Unauthenticated("Invalid credentials.")

    token = tokens.issue(TokenClaims(user_id=user.id, email=user.email, role_id=user.role_id))
    logger.info("User %s logged in", user.email)
    return LoginResponse(token=token, user=UserOut.model_validate(user))


@router.get(
    "/me",
    response_model=UserOut,
    summary="Get current user profile",
    description="Returns the profile of the user identified by the bearer token.",
    operation_id="auth_me",
)
def me(principal: Principal = Depends(get_current_principal), db: Session = Depends(get_db)) -> UserOut:
    """Return authenticated user's profile."""
    user = get_or_404(db, User, principal.user_id, "User not found.")
    return UserOut.model_validate(user)
