"""
Authentication Router

Endpoints:
- POST /auth/login - Log in with the permanent or a temporary password
- POST /auth/forgot-password - Email a temporary password (rate limited)
- POST /auth/change-password - Change password (requires access token)
- POST /auth/change-password-temp - Change password after a temp-password login
- GET /auth/me - Current session

Security:
- Login failures return one generic message for unknown username and wrong
  password alike
- Forgot-password is limited per client IP and never echoes the password
- Store errors are logged server-side and returned as an opaque 500
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_user
from app.core.config import settings
from app.core.database import get_db
from app.core.rate_limit import enforce_rate_limit
from app.modules.auth import service
from app.modules.auth.schemas import (
    ChangePasswordRequest,
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    SessionResponse,
    TempChangePasswordRequest,
)
from app.modules.auth.service import AuthServiceError

logger = logging.getLogger(__name__)

router = APIRouter()


def _service_error(e: AuthServiceError) -> HTTPException:
    """Convert a service error to an HTTPException."""
    return HTTPException(
        status_code=e.status_code,
        detail={
            "error": e.error_code,
            "message": e.message,
        },
    )


def _internal_error() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={
            "error": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Log In",
    responses={
        401: {"description": "Invalid username or password"},
        429: {"description": "Too many login attempts"},
    },
)
async def login(
    request: Request,
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    """
    Authenticate with the permanent password, or with an unexpired temporary
    password. A temporary-password login also returns a
    ``password_change_token`` for POST /auth/change-password-temp.
    """
    await enforce_rate_limit(
        request,
        "login",
        settings.login_rate_limit,
        settings.login_rate_window_seconds,
    )

    try:
        return await service.resolve_login(db, credentials.username, credentials.password)
    except AuthServiceError as e:
        raise _service_error(e) from e
    except Exception as e:
        logger.exception(f"Error during login: {e}")
        raise _internal_error() from e


@router.post(
    "/forgot-password",
    response_model=ForgotPasswordResponse,
    summary="Request Temporary Password",
    responses={
        404: {"description": "Email not found"},
        429: {"description": "Too many reset attempts"},
    },
)
async def forgot_password(
    request: Request,
    data: ForgotPasswordRequest,
    db: AsyncSession = Depends(get_db),
) -> ForgotPasswordResponse:
    """
    Create a temporary password and email it to the school address.

    Any previous temporary password is replaced. The response reports
    whether the email was delivered but never contains the password.
    """
    await enforce_rate_limit(
        request,
        "forgot_password",
        settings.forgot_password_rate_limit,
        settings.forgot_password_rate_window_seconds,
        message="Too many reset attempts from this IP, try again later.",
    )

    try:
        return await service.issue_temp_password(db, data.email)
    except AuthServiceError as e:
        raise _service_error(e) from e
    except Exception as e:
        logger.exception(f"Error issuing temporary password: {e}")
        raise _internal_error() from e


@router.post(
    "/change-password",
    response_model=MessageResponse,
    summary="Change Password",
    responses={
        400: {"description": "Current password incorrect or new password too weak"},
        401: {"description": "Missing or invalid access token"},
    },
)
async def change_password(
    data: ChangePasswordRequest,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> MessageResponse:
    """Change the password using the current permanent or temporary password."""
    try:
        await service.change_password(db, user.id, data.current_password, data.new_password)
    except AuthServiceError as e:
        raise _service_error(e) from e
    except Exception as e:
        logger.exception(f"Error changing password: {e}")
        raise _internal_error() from e

    return MessageResponse(message="Password changed successfully")


@router.post(
    "/change-password-temp",
    response_model=MessageResponse,
    summary="Change Password After Temporary Login",
    responses={
        400: {"description": "New password too weak"},
        401: {"description": "Change token invalid, expired or already used"},
        404: {"description": "Account not found"},
    },
)
async def change_password_temp(
    data: TempChangePasswordRequest,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Set a new password using the change token from a temporary-password login."""
    try:
        await service.change_password_from_temp_login(
            db, data.password_change_token, data.new_password
        )
    except AuthServiceError as e:
        raise _service_error(e) from e
    except Exception as e:
        logger.exception(f"Error changing password (temp flow): {e}")
        raise _internal_error() from e

    return MessageResponse(message="Password changed successfully (temp flow)")


@router.get("/me", response_model=SessionResponse, summary="Current Session")
async def me(user: CurrentUser = Depends(get_current_user)) -> SessionResponse:
    """Return the claims of the current access token."""
    return SessionResponse(
        id=user.id,
        username=user.username,
        role=user.role,
        school_id=user.school_id,
        school_name=user.school_name,
        temp_login=user.temp_login,
    )
