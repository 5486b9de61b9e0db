"""
Authentication Service Layer

Credential resolution for school accounts. An account always has a permanent
password and may additionally hold one temporary password issued by the
forgot-password flow.

This module implements:
1. Login:
   - Permanent password checked first
   - Temporary password accepted while unexpired, and NOT consumed on use;
     it keeps working for repeated logins until it expires
   - An expired temporary credential is cleared the first time a login or
     password change touches it (no background sweep)

2. Forgot Password:
   - 8-character password from a cryptographically secure source
   - Stored as a bcrypt hash with an expiry, overwriting any previous one
   - Emailed best-effort; a delivery failure does not fail the request and
     the password is never returned to the caller

3. Change Password:
   - Proven with either the permanent or a still-valid temporary password
   - After a temporary-password login, a signed single-use change token
     replaces the "current password" proof
   - Every successful change clears the temporary credential in the same
     UPDATE as the new password
"""

import hmac
import logging
import secrets
from datetime import UTC, datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.email import send_temp_password
from app.core.security import (
    MAX_PASSWORD_BYTES,
    TEMP_CHANGE_TOKEN_TYPE,
    create_access_token,
    create_temp_change_token,
    decode_token,
    fingerprint_hash,
    hash_password,
    verify_password,
)
from app.modules.auth.schemas import ForgotPasswordResponse, LoginResponse
from app.modules.users.models import UserAccount
from app.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)

# Constants
TEMP_PASSWORD_LENGTH = 8
TEMP_PASSWORD_CHARSET = (
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789!@#$%^&*()-_+=?"
)
MIN_PASSWORD_LENGTH = 6


class AuthServiceError(Exception):
    """Base exception for authentication service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class InvalidCredentialsError(AuthServiceError):
    """Raised when a login fails. Never says which field was wrong."""

    def __init__(self):
        super().__init__(
            message="Invalid username or password",
            error_code="INVALID_CREDENTIALS",
            status_code=401,
        )


class AccountNotFoundError(AuthServiceError):
    """Raised when no account matches the given identity."""

    def __init__(self, message: str = "User not found"):
        super().__init__(
            message=message,
            error_code="ACCOUNT_NOT_FOUND",
            status_code=404,
        )


class IncorrectPasswordError(AuthServiceError):
    """Raised when the supplied current password matches neither credential."""

    def __init__(self):
        super().__init__(
            message="Current password is incorrect",
            error_code="INCORRECT_PASSWORD",
            status_code=400,
        )


class WeakPasswordError(AuthServiceError):
    """Raised when a new password does not meet the length policy."""

    def __init__(self):
        super().__init__(
            message=f"New password must be at least {MIN_PASSWORD_LENGTH} characters",
            error_code="WEAK_PASSWORD",
            status_code=400,
        )


class PasswordTooLongError(AuthServiceError):
    """Raised when a new password is longer than bcrypt can hash."""

    def __init__(self):
        super().__init__(
            message=f"New password must be at most {MAX_PASSWORD_BYTES} bytes",
            error_code="PASSWORD_TOO_LONG",
            status_code=400,
        )


class InvalidChangeTokenError(AuthServiceError):
    """Raised when a temp-login change token is invalid, expired or already used."""

    def __init__(self):
        super().__init__(
            message="Password change session is invalid or has expired. Please log in again.",
            error_code="INVALID_CHANGE_TOKEN",
            status_code=401,
        )


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _as_utc(value: datetime) -> datetime:
    """Treat naive timestamps from the store as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def generate_temp_password(length: int = TEMP_PASSWORD_LENGTH) -> str:
    """
    Generate a temporary password.

    Each character is drawn uniformly from TEMP_PASSWORD_CHARSET using the
    ``secrets`` CSPRNG.
    """
    return "".join(secrets.choice(TEMP_PASSWORD_CHARSET) for _ in range(length))


def is_temp_password_active(user: UserAccount, now: datetime | None = None) -> bool:
    """True if the account holds a temporary credential that has not expired (inclusive)."""
    if not user.has_temp_password:
        return False
    return (now or _utcnow()) <= _as_utc(user.temp_password_expires_at)


def validate_new_password(new_password: str) -> None:
    """
    Enforce the password policy.

    Raises:
        WeakPasswordError: If the password is shorter than MIN_PASSWORD_LENGTH
        PasswordTooLongError: If its UTF-8 encoding exceeds MAX_PASSWORD_BYTES
    """
    if not isinstance(new_password, str) or len(new_password) < MIN_PASSWORD_LENGTH:
        raise WeakPasswordError()
    if len(new_password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise PasswordTooLongError()


async def _check_temp_password(
    db: AsyncSession,
    user: UserAccount,
    supplied_password: str,
) -> bool:
    """
    Check a password against the account's temporary credential.

    An expired credential is cleared here and never matches.
    """
    if not user.has_temp_password:
        return False

    if not is_temp_password_active(user, _utcnow()):
        logger.info(f"Clearing expired temporary password for account {user.id}")
        await UserRepository.clear_temp_password(db, user.id)
        return False

    return verify_password(supplied_password, user.temp_password_hash)


def _build_login_response(user: UserAccount, temp_login: bool) -> LoginResponse:
    claims = {
        "username": user.username,
        "role": user.role.value,
        "school_id": user.school_id,
        "school_name": user.school_name,
        "temp_login": temp_login,
    }
    access_token = create_access_token(subject=str(user.id), additional_claims=claims)

    if not temp_login:
        return LoginResponse(
            message="Login successful!",
            role=user.role,
            school_id=user.school_id,
            school_name=user.school_name,
            temp_login=False,
            access_token=access_token,
        )

    return LoginResponse(
        message="Login successful (temp password)!",
        role=user.role,
        school_id=user.school_id,
        school_name=user.school_name,
        temp_login=True,
        temp_password_expires_at=_as_utc(user.temp_password_expires_at),
        access_token=access_token,
        password_change_token=create_temp_change_token(str(user.id), user.temp_password_hash),
    )


async def resolve_login(
    db: AsyncSession,
    username: str,
    password: str,
) -> LoginResponse:
    """
    Authenticate an account with either of its credentials.

    Args:
        db: Database session
        username: Login name
        password: Permanent or temporary password

    Returns:
        LoginResponse with role, school, temp_login flag and tokens

    Raises:
        InvalidCredentialsError: Unknown username or no credential matched
    """
    user = await UserRepository.get_by_username(db, username)

    if not user:
        logger.warning("Login attempt for non-existent username")
        raise InvalidCredentialsError()

    if verify_password(password, user.password_hash):
        logger.info(f"Account {user.id} logged in ({user.role.value})")
        return _build_login_response(user, temp_login=False)

    if await _check_temp_password(db, user, password):
        logger.info(f"Account {user.id} logged in with temporary password")
        return _build_login_response(user, temp_login=True)

    logger.warning(f"Invalid password for account {user.id}")
    raise InvalidCredentialsError()


async def issue_temp_password(
    db: AsyncSession,
    email: str,
) -> ForgotPasswordResponse:
    """
    Issue a temporary password for the account registered with ``email``.

    Args:
        db: Database session
        email: The account's school email

    Returns:
        ForgotPasswordResponse; ``delivered`` is False if the email could not
        be sent (the credential is stored and usable either way)

    Raises:
        AccountNotFoundError: If no account has this email
    """
    user = await UserRepository.get_by_email(db, email)

    if not user:
        logger.warning("Forgot-password request for unknown email")
        raise AccountNotFoundError("Email not found")

    expiry_minutes = settings.temp_password_expiry_minutes
    temp_password = generate_temp_password()
    expires_at = _utcnow() + timedelta(minutes=expiry_minutes)

    await UserRepository.set_temp_password(db, user.id, hash_password(temp_password), expires_at)
    logger.info(f"Issued temporary password for account {user.id}, expires at {expires_at}")

    try:
        delivered = await send_temp_password(
            to_email=email,
            temp_password=temp_password,
            expiry_minutes=expiry_minutes,
        )
    except Exception as e:
        logger.error(f"Exception sending temporary password email for account {user.id}: {e}")
        delivered = False

    if delivered:
        message = f"Temporary password sent to {email}. It is valid for {expiry_minutes} minutes."
    else:
        logger.error(f"Temporary password email could not be delivered for account {user.id}")
        message = (
            "A temporary password was created but the email could not be delivered. "
            "Please try again later or contact support."
        )

    return ForgotPasswordResponse(
        message=message,
        delivered=delivered,
        expiry_minutes=expiry_minutes,
        expires_at=expires_at,
    )


async def change_password(
    db: AsyncSession,
    user_id: int,
    current_password: str,
    new_password: str,
) -> None:
    """
    Change the permanent password, proven by either credential.

    Args:
        db: Database session
        user_id: Account id from the authenticated session
        current_password: Permanent password, or an unexpired temporary one
        new_password: Replacement password

    Raises:
        AccountNotFoundError: If the account no longer exists
        IncorrectPasswordError: If current_password matches neither credential
        WeakPasswordError: If new_password is too short
    """
    user = await UserRepository.get_by_id(db, user_id)

    if not user:
        raise AccountNotFoundError()

    matched = verify_password(current_password, user.password_hash)
    if not matched:
        matched = await _check_temp_password(db, user, current_password)

    if not matched:
        logger.warning(f"Incorrect current password for account {user.id}")
        raise IncorrectPasswordError()

    validate_new_password(new_password)

    await UserRepository.update_password(db, user.id, hash_password(new_password))
    logger.info(f"Password changed for account {user.id}")


async def change_password_from_temp_login(
    db: AsyncSession,
    change_token: str,
    new_password: str,
) -> None:
    """
    Set a new password right after a temporary-password login.

    The ``password_change_token`` from the temp-login response stands in for
    the current password. It is bound to the temporary credential it was
    minted from, so it stops working once that credential is cleared (by this
    change) or replaced (by a new forgot-password request).

    Raises:
        InvalidChangeTokenError: Token invalid, expired, or no longer bound to
            an active temporary credential
        AccountNotFoundError: If the account no longer exists
        WeakPasswordError: If new_password is too short
    """
    payload = decode_token(change_token)

    if payload is None or payload.get("type") != TEMP_CHANGE_TOKEN_TYPE:
        raise InvalidChangeTokenError()

    try:
        user_id = int(payload["sub"])
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidChangeTokenError() from e

    user = await UserRepository.get_by_id(db, user_id)

    if not user:
        raise AccountNotFoundError()

    if not is_temp_password_active(user, _utcnow()):
        if user.has_temp_password:
            await UserRepository.clear_temp_password(db, user.id)
        logger.warning(f"Temp-login password change for account {user.id} without active temp")
        raise InvalidChangeTokenError()

    token_fingerprint = str(payload.get("tph", ""))
    if not hmac.compare_digest(fingerprint_hash(user.temp_password_hash), token_fingerprint):
        logger.warning(f"Stale password change token for account {user.id}")
        raise InvalidChangeTokenError()

    validate_new_password(new_password)

    await UserRepository.update_password(db, user.id, hash_password(new_password))
    logger.info(f"Password changed for account {user.id} (temp-login flow)")
