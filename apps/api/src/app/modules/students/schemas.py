"""
Student Schemas
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class StudentCreate(BaseModel):
    """Request body for POST /students."""

    name: str = Field(..., min_length=1, max_length=200)
    mother_name: str | None = Field(None, max_length=200)
    mother_tongue: str | None = Field(None, max_length=100)
    race_caste: str | None = Field(None, max_length=100)
    nationality: str = Field("Indian", max_length=100)
    birth_place: str | None = Field(None, max_length=200)
    dob: str | None = Field(None, max_length=50)
    last_school: str | None = Field(None, max_length=200)
    date_admission: str | None = Field(None, max_length=50)
    standard: str | None = Field(None, max_length=50)
    progress: str | None = Field(None, max_length=100)
    conduct: str | None = Field(None, max_length=100)
    date_leaving: str | None = Field(None, max_length=50)
    reason_leaving: str | None = None
    remark: str | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Student name is required")
        return v.strip()


class StudentResponse(BaseModel):
    """A student record."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    school_id: int
    school_name: str
    name: str
    mother_name: str | None = None
    mother_tongue: str | None = None
    race_caste: str | None = None
    nationality: str
    birth_place: str | None = None
    dob: str | None = None
    last_school: str | None = None
    date_admission: str | None = None
    standard: str | None = None
    progress: str | None = None
    conduct: str | None = None
    date_leaving: str | None = None
    reason_leaving: str | None = None
    remark: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class StudentCreatedResponse(BaseModel):
    message: str
    student_id: int


class StudentListResponse(BaseModel):
    students: list[StudentResponse]
    count: int


class StudentSearchResponse(BaseModel):
    """First match plus the full list of matches."""

    student: StudentResponse
    students: list[StudentResponse]
