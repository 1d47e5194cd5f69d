# =============================================================================
# app/auth/security.py - Password Hashing and JWT Helpers
# =============================================================================
# bcrypt for passwords, python-jose for signed tokens.
#
# Signing keys come from the Settings passed in by the caller.
#
# Token payload:
#   sub:   username
#   scope: space-separated scope names
#   type:  "access" or "refresh"
#   exp / iat: expiry and issue time
# =============================================================================

from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import JWTError, ExpiredSignatureError, jwt

from app.config import Settings
from app.exceptions import InvalidCredentialsError

ACCESS = "access"
REFRESH = "refresh"


def get_password_hash(password: str) -> str:
    """Generate a bcrypt hash for the password."""
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=12))
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plain password against its bcrypt hash."""
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def _create_token(
    subject: str,
    scopes: list[str],
    token_type: str,
    minutes: int,
    settings: Settings,
) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": subject,
        "scope": " ".join(scopes),
        "type": token_type,
        "iat": now,
        "exp": now + timedelta(minutes=minutes),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_access_token(subject: str, scopes: list[str], settings: Settings) -> str:
    """Short-lived token presented on every API call."""
    return _create_token(subject, scopes, ACCESS, settings.ACCESS_TOKEN_EXPIRE_MINUTES, settings)


def create_refresh_token(subject: str, scopes: list[str], settings: Settings) -> str:
    """Long-lived token exchanged for new access tokens."""
    return _create_token(subject, scopes, REFRESH, settings.REFRESH_TOKEN_EXPIRE_MINUTES, settings)


def decode_token(token: str, settings: Settings, expected_type: str = ACCESS) -> dict[str, Any]:
    """
    Decode and verify a token.

    Raises:
        InvalidCredentialsError: If the token is expired, malformed, signed
            with another key, or of the wrong type
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise InvalidCredentialsError("Token has expired")
    except JWTError as e:
        raise InvalidCredentialsError(f"Invalid token: {e}")

    if payload.get("type") != expected_type:
        raise InvalidCredentialsError(f"Invalid token: expected a {expected_type} token")
    if not payload.get("sub"):
        raise InvalidCredentialsError("Invalid token: missing subject")

    return payload
