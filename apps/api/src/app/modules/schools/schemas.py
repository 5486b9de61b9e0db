"""
School Schemas

Pydantic schemas for school registration and school info.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class SchoolRegistrationRequest(BaseModel):
    """Request body for POST /schools/register."""

    school_name: str = Field(..., min_length=1, max_length=200)
    principal_name: str = Field(..., min_length=1, max_length=200)
    school_email: EmailStr
    principal_email: EmailStr
    village: str = Field(..., min_length=1, max_length=100)
    tehsil: str = Field(..., min_length=1, max_length=100)
    district: str = Field(..., min_length=1, max_length=100)
    pin_code: str = Field(..., min_length=1, max_length=10)
    board_name: str = Field(..., min_length=1, max_length=200)
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1)


class SchoolRegistrationResponse(BaseModel):
    """Response after registering a school."""

    message: str
    school_id: int
    username: str


class SchoolInfoResponse(BaseModel):
    """School profile. Never includes credential fields."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    principal_name: str
    principal_email: str
    village: str
    tehsil: str
    district: str
    pin_code: str
    board_name: str
    created_at: datetime
    username: str | None = None
    school_email: str | None = None
