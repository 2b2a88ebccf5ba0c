from __future__ import annotations

from pydantic import Field

from hrportal.core.jwt import TOKEN_TTL
from hrportal.schemas.common import CamelModel
from hrportal.schemas.hrms import UserOut


class LoginRequest(CamelModel):
    email: str = Field(..., min_length=1, description="User email.")
    password: str = Field(..., min_length=1, description="User password.")


class LoginResponse(CamelModel):
    token: str = Field(..., description="JWT access token.")
    token_type: str = Field("bearer", description="Token type for Authorization header.")
    expires_in: int = Field(int(TOKEN_TTL.total_seconds()), description="Token lifetime in seconds.")
    user: UserOut = Field(..., description="Authenticated user (never includes the password hash).")
