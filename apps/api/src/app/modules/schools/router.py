"""
Schools Router

Endpoints:
- POST /schools/register - Register a school and its first account (public)
- GET /schools/me - Profile of the authenticated account's school
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_user
from app.core.database import get_db
from app.modules.auth.service import AuthServiceError
from app.modules.schools import service
from app.modules.schools.schemas import (
    SchoolInfoResponse,
    SchoolRegistrationRequest,
    SchoolRegistrationResponse,
)
from app.modules.schools.service import SchoolServiceError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/register",
    response_model=SchoolRegistrationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register School",
    responses={
        400: {"description": "Password too weak"},
        409: {"description": "Username or email already registered"},
    },
)
async def register_school(
    data: SchoolRegistrationRequest,
    db: AsyncSession = Depends(get_db),
) -> SchoolRegistrationResponse:
    """Register a school. The first account is created with role CLERK."""
    try:
        return await service.register_school(db, data)
    except (SchoolServiceError, AuthServiceError) as e:
        raise HTTPException(
            status_code=e.status_code,
            detail={"error": e.error_code, "message": e.message},
        ) from e
    except Exception as e:
        logger.exception(f"Error registering school: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "INTERNAL_ERROR", "message": "An unexpected error occurred."},
        ) from e


@router.get(
    "/me",
    response_model=SchoolInfoResponse,
    summary="Current School Info",
    responses={404: {"description": "School not found"}},
)
async def get_my_school(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> SchoolInfoResponse:
    """Return the profile of the caller's school."""
    try:
        return await service.get_school_info(db, user.school_id)
    except SchoolServiceError as e:
        raise HTTPException(
            status_code=e.status_code,
            detail={"error": e.error_code, "message": e.message},
        ) from e
