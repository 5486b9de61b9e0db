"""
Students Router

Endpoints (all require a bearer token; data is scoped to the caller's school):
- POST /students - Register a student
- GET /students - List students
- GET /students/search - Search by name and/or standard
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_user
from app.core.database import get_db
from app.modules.students import service
from app.modules.students.schemas import (
    StudentCreate,
    StudentCreatedResponse,
    StudentListResponse,
    StudentSearchResponse,
)
from app.modules.students.service import StudentServiceError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=StudentCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register Student",
)
async def register_student(
    data: StudentCreate,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> StudentCreatedResponse:
    try:
        return await service.register_student(db, user.school_id, user.school_name, data)
    except Exception as e:
        logger.exception(f"Error registering student: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "INTERNAL_ERROR", "message": "An unexpected error occurred."},
        ) from e


@router.get(
    "",
    response_model=StudentListResponse,
    summary="List Students",
)
async def list_students(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> StudentListResponse:
    return await service.list_students(db, user.school_id)


@router.get(
    "/search",
    response_model=StudentSearchResponse,
    summary="Search Students",
    responses={
        400: {"description": "Neither name nor standard given"},
        404: {"description": "No matching student"},
    },
)
async def search_students(
    name: str | None = Query(None, description="Part of the student name"),
    standard: str | None = Query(None, description="Part of the standard"),
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> StudentSearchResponse:
    try:
        return await service.search_students(db, user.school_id, name=name, standard=standard)
    except StudentServiceError as e:
        raise HTTPException(
            status_code=e.status_code,
            detail={"error": e.error_code, "message": e.message},
        ) from e
