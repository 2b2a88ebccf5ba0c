from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from hrportal.core.errors import Forbidden, Unauthenticated
from hrportal.core.jwt import AuthError, TokenService
from hrportal.core.roles import ALL_AUTHENTICATED, MANAGERS, RoleName, RoleRegistry

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


@dataclass(frozen=True)
class Principal:
    """Authenticated principal extracted from a verified JWT."""

    user_id: UUID
    email: str
    role_id: UUID
    role: RoleName

    @property
    def is_manager(self) -> bool:
        return self.role in MANAGERS


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_role_registry(request: Request) -> RoleRegistry:
    return request.app.state.role_registry


# PUBLIC_INTERFACE
def get_current_principal(
    token: str | None = Depends(oauth2_scheme),
    tokens: TokenService = Depends(get_token_service),
    registry: RoleRegistry = Depends(get_role_registry),
) -> Principal:
    """Resolve current authenticated principal from the Bearer token."""
    if not token:
        raise Unauthenticated("Authentication failed. No token provided.")

    try:
        claims = tokens.verify(token)
    except AuthError as exc:
        # Expired and invalid tokens are reported identically to the client.
        logger.debug("Rejected token: %s", exc)
        raise Unauthenticated() from exc

    role = registry.name_of(claims.role_id)
    if role is None:
        raise Forbidden()

    return Principal(user_id=claims.user_id, email=claims.email, role_id=claims.role_id, role=role)


# PUBLIC_INTERFACE
def require_roles(allowed: frozenset[RoleName] = ALL_AUTHENTICATED) -> Callable[..., Principal]:
    """Dependency factory that enforces a role allow-list."""
    def _checker(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role not in allowed:
            logger.debug("Role %s denied; requires one of %s", principal.role.value, sorted(r.value for r in allowed))
            raise Forbidden()
        return principal

    return _checker
