from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

from jose import JWTError, jwt

TOKEN_TTL = timedelta(hours=24)


class AuthError(Exception):
    """Token could not be accepted."""


class TokenExpired(AuthError):
    pass


class TokenInvalid(AuthError):
    pass


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried inside an access token."""

    user_id: UUID
    email: str
    role_id: UUID


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class TokenService:
    """Issues and verifies signed identity tokens with a fixed 24 hour lifetime."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret_key:
            raise RuntimeError("TokenService requires a non-empty signing secret")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._clock = clock

    # PUBLIC_INTERFACE
    def issue(self, claims: TokenClaims) -> str:
        """Create a signed JWT for the given identity.

        Payload: {userId, email, roleId, iat, exp} where exp = iat + 86400.
        """
        issued_at = int(self._clock().timestamp())
        to_encode: dict[str, Any] = {
            "userId": str(claims.user_id),
            "email": claims.email,
            "roleId": str(claims.role_id),
            "iat": issued_at,
            "exp": issued_at + int(TOKEN_TTL.total_seconds()),
        }
        return jwt.encode(to_encode, self._secret_key, algorithm=self._algorithm)

    # PUBLIC_INTERFACE
    def verify(self, token: str, now: datetime | None = None) -> TokenClaims:
        """Decode and validate a JWT token.

        Raises:
            TokenExpired: the token is at or past its expiry.
            TokenInvalid: malformed token, bad signature or missing claims.
        """
        try:
            # Expiry is checked below against the injected clock.
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_exp": False},
            )
        except JWTError as exc:
            raise TokenInvalid(str(exc)) from exc

        exp = payload.get("exp")
        if not isinstance(exp, int):
            raise TokenInvalid("Token has no expiry")
        current = int((now or self._clock()).timestamp())
        if current >= exp:
            raise TokenExpired("Token has expired")

        try:
            return TokenClaims(
                user_id=UUID(str(payload["userId"])),
                email=str(payload["email"]),
                role_id=UUID(str(payload["roleId"])),
            )
        except (KeyError, ValueError) as exc:
            raise TokenInvalid("Malformed token claims") from exc
