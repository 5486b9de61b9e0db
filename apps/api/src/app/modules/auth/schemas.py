"""Authentication schemas."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from app.modules.users.models import UserRole


class LoginRequest(BaseModel):
    """Login request schema."""

    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    """
    Login response schema.

    ``temp_password_expires_at`` and ``password_change_token`` are only set
    when the login used a temporary password.
    """

    message: str
    role: UserRole
    school_id: int
    school_name: str
    temp_login: bool = False
    temp_password_expires_at: datetime | None = None
    access_token: str
    token_type: str = "bearer"
    password_change_token: str | None = None


class ForgotPasswordRequest(BaseModel):
    """Forgot-password request schema."""

    email: EmailStr


class ForgotPasswordResponse(BaseModel):
    """Forgot-password response. Never contains the temporary password."""

    message: str
    delivered: bool
    expiry_minutes: int
    expires_at: datetime


class ChangePasswordRequest(BaseModel):
    """Change password with proof of a current credential."""

    current_password: str = Field(..., min_length=1)
    new_password: str


class TempChangePasswordRequest(BaseModel):
    """Change password after a temporary-password login."""

    password_change_token: str = Field(..., min_length=1)
    new_password: str


class MessageResponse(BaseModel):
    """Generic confirmation."""

    message: str


class SessionResponse(BaseModel):
    """The authenticated session's claims."""

    id: int
    username: str
    role: UserRole
    school_id: int
    school_name: str
    temp_login: bool
