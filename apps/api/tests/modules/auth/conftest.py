"""
Fixtures for auth tests.
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, patch

import pytest

from app.core.security import hash_password
from app.modules.users.models import UserAccount, UserRole

PRIMARY_PASSWORD = "primary-pass"
TEMP_PASSWORD = "Tmp!9xQa"


@pytest.fixture
def now():
    return datetime(2026, 3, 1, 9, 0, tzinfo=UTC)


@pytest.fixture
def make_user():
    """Build a UserAccount, optionally holding a temporary credential."""

    def _make(
        *,
        temp_password: str | None = None,
        temp_expires_at: datetime | None = None,
        role: UserRole = UserRole.CLERK,
    ) -> UserAccount:
        return UserAccount(
            id=7,
            school_id=3,
            school_name="Zilla Parishad School Wadgaon",
            username="zp_wadgaon",
            school_email="user@example.com",
            password_hash=hash_password(PRIMARY_PASSWORD),
            temp_password_hash=hash_password(temp_password) if temp_password else None,
            temp_password_expires_at=temp_expires_at if temp_password else None,
            role=role,
        )

    return _make


@pytest.fixture
def user_with_temp(make_user, now):
    """Account holding a temp password valid for another 10 minutes."""
    return make_user(temp_password=TEMP_PASSWORD, temp_expires_at=now + timedelta(minutes=10))


@pytest.fixture
def mock_user_repo():
    """Patch the user repository used by the auth service."""
    with patch("app.modules.auth.service.UserRepository") as repo:
        repo.get_by_id = AsyncMock(return_value=None)
        repo.get_by_username = AsyncMock(return_value=None)
        repo.get_by_email = AsyncMock(return_value=None)
        repo.set_temp_password = AsyncMock()
        repo.clear_temp_password = AsyncMock()
        repo.update_password = AsyncMock()
        yield repo


@pytest.fixture
def frozen_clock(now):
    """Patch the service clock; set ``.return_value`` to move time."""
    with patch("app.modules.auth.service._utcnow", return_value=now) as clock:
        yield clock
