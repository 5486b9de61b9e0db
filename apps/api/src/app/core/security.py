"""
Security Utilities

Password hashing (bcrypt) and JWT handling (python-jose).

Token types:
- access: issued on login, carries the account's role and school
- temp_password_change: issued only when a login succeeds with a temporary
  password; authorizes exactly one password change while that temporary
  credential is still on the account
"""

import hashlib
import logging
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
from jose import JWTError, jwt

from app.core.config import settings

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"
TEMP_CHANGE_TOKEN_TYPE = "temp_password_change"

# bcrypt only reads the first 72 bytes and bcrypt>=5 rejects anything longer
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    """Hash a password with a per-call random salt."""
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, password_hash: str | None) -> bool:
    """
    Check a password against a bcrypt hash.

    bcrypt's checkpw compares in constant time. A missing or malformed hash
    never matches, and neither does a password bcrypt cannot hash.
    """
    if not password_hash:
        return False
    if len(plain_password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


def fingerprint_hash(password_hash: str) -> str:
    """Short, non-reversible fingerprint of a stored hash for token binding."""
    return hashlib.sha256(password_hash.encode("utf-8")).hexdigest()[:16]


def _encode(payload: dict[str, Any], expires_delta: timedelta) -> str:
    now = datetime.now(UTC)
    to_encode = {
        **payload,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_delta).timestamp()),
    }
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.jwt_algorithm)


def create_access_token(
    subject: str,
    additional_claims: dict[str, Any] | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a signed access token.

    Args:
        subject: The account id (stored in the ``sub`` claim)
        additional_claims: Extra claims (role, school, ...)
        expires_delta: Lifetime override

    Returns:
        Encoded JWT string
    """
    payload = {"sub": subject, "type": ACCESS_TOKEN_TYPE, **(additional_claims or {})}
    return _encode(
        payload,
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes),
    )


def create_temp_change_token(subject: str, temp_password_hash: str) -> str:
    """
    Create a token authorizing a password change after a temp-password login.

    The token is bound to the temporary credential it was minted from, so it
    stops working as soon as that credential is cleared or replaced.
    """
    payload = {
        "sub": subject,
        "type": TEMP_CHANGE_TOKEN_TYPE,
        "tph": fingerprint_hash(temp_password_hash),
    }
    return _encode(payload, timedelta(minutes=settings.temp_change_token_expire_minutes))


def decode_token(token: str) -> dict[str, Any] | None:
    """
    Decode and validate a JWT.

    Returns:
        The payload, or None if the signature, algorithm or expiry is invalid
    """
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        logger.debug(f"Token rejected: {e}")
        return None
