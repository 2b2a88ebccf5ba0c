from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_ADMIN_EMAIL = "hr.admin@inovera.com"
DEFAULT_ADMIN_PASSWORD = "password123"


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    database_url: str

    jwt_secret_key: str
    jwt_algorithm: str = "HS256"

    cors_allow_origins: list[str] = field(default_factory=lambda: ["*"])

    admin_email: str = DEFAULT_ADMIN_EMAIL
    admin_initial_password: str = DEFAULT_ADMIN_PASSWORD

    log_level: str = "INFO"


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Load and return application Settings from environment variables.

    Required env vars:
      - DATABASE_URL
      - JWT_SECRET_KEY

    Optional env vars:
      - JWT_ALGORITHM (default: HS256)
      - CORS_ALLOW_ORIGINS (default: "*")
      - ADMIN_EMAIL (default: hr.admin@inovera.com)
      - ADMIN_INITIAL_PASSWORD (default: password123, rotate after first login)
      - LOG_LEVEL (default: INFO)

    Token lifetime is fixed at 24 hours and is not read from the environment.
    """
    database_url = os.getenv("DATABASE_URL", "").strip()
    if not database_url:
        raise RuntimeError("Missing required env var DATABASE_URL")

    jwt_secret_key = os.getenv("JWT_SECRET_KEY", "").strip()
    if not jwt_secret_key:
        raise RuntimeError("Missing required env var JWT_SECRET_KEY")

    jwt_algorithm = os.getenv("JWT_ALGORITHM", "HS256").strip() or "HS256"

    origins_raw = os.getenv("CORS_ALLOW_ORIGINS", "*").strip()
    if origins_raw == "*":
        origins = ["*"]
    else:
        origins = [o.strip() for o in origins_raw.split(",") if o.strip()]

    admin_email = os.getenv("ADMIN_EMAIL", "").strip() or DEFAULT_ADMIN_EMAIL
    admin_password = os.getenv("ADMIN_INITIAL_PASSWORD", "") or DEFAULT_ADMIN_PASSWORD

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"

    return Settings(
        database_url=database_url,
        jwt_secret_key=jwt_secret_key,
        jwt_algorithm=jwt_algorithm,
        cors_allow_origins=origins,
        admin_email=admin_email,
        admin_initial_password=admin_password,
        log_level=log_level,
    )
