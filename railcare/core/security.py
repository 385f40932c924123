"""Account passwords (bcrypt) and the session JWT shared by the Bearer header and cookie."""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from railcare.core.config import settings

BCRYPT_ROUNDS = 12
# bcrypt ignores input past this many bytes
BCRYPT_MAX_BYTES = 72

# Length limits shared by signup, /users and the create_user script.
NAME_MIN_LEN = 2
NAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128

# Claims every session token must carry.
REQUIRED_CLAIMS = ["sub", "role", "exp"]


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(plain_password: str) -> str:
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(_password_bytes(plain_password), salt).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """False for a wrong password and for a stored value that is not a bcrypt hash."""
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_access_token(sub: str | int, role: str, station_id: int | None = None) -> str:
    """
    Session token for one user. role and station_id are informational; requests
    re-read the user row, so role or station changes apply before the token expires.
    """
    issued_at = datetime.now(UTC)
    claims: dict[str, Any] = {
        "sub": str(sub),
        "role": role,
        "station_id": station_id,
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
    }
    return jwt.encode(claims, settings.JWT_SECRET.get_secret_value(), algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    """Verified claims of a session token. Raises jwt.PyJWTError if invalid, expired or incomplete."""
    return jwt.decode(
        token,
        settings.JWT_SECRET.get_secret_value(),
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": REQUIRED_CLAIMS},
    )
