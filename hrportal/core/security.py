from __future__ import annotations

from passlib.context import CryptContext
from passlib.exc import UnknownHashError

_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# PUBLIC_INTERFACE
def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return _pwd_context.hash(password)


# PUBLIC_INTERFACE
def verify_password(password: str, password_hash: str | None) -> bool:
    """Verify a plaintext password against a stored bcrypt hash.

    A missing or unrecognised hash never verifies. The dummy verification keeps
    the response time of unknown accounts close to that of real ones.
    """
    if not password_hash:
        _pwd_context.dummy_verify()
        return False
    try:
        return _pwd_context.verify(password, password_hash)
    except (UnknownHashError, ValueError):
        return False
