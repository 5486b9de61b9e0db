"""
Shared test configuration.

Environment is set before any ``app`` module is imported, since settings are
read once at import time.
"""

import os

os.environ.setdefault("PYTHON_ENV", "test")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("TEMP_PASSWORD_EXPIRY_MINUTES", "10")
os.environ.pop("RESEND_API_KEY", None)

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    db.flush = AsyncMock()
    db.get = AsyncMock()
    db.execute = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def api_client(mock_db):
    """TestClient over the API routers with the database dependency overridden."""
    from fastapi import FastAPI
    from fastapi.testclient import TestClient

    from app.api import api_router
    from app.core import rate_limit
    from app.core.database import get_db

    app = FastAPI()
    app.include_router(api_router, prefix="/api/v1")

    async def override_get_db():
        yield mock_db

    app.dependency_overrides[get_db] = override_get_db
    rate_limit._memory_store.clear()
    rate_limit._memory_expires_at.clear()

    with TestClient(app) as client:
        yield client

    rate_limit._memory_store.clear()
    rate_limit._memory_expires_at.clear()


@pytest.fixture
def auth_headers():
    """Build an Authorization header for an account of school 3."""
    from app.core.security import create_access_token

    def _headers(role: str = "CLERK", user_id: int = 7, school_id: int = 3) -> dict[str, str]:
        token = create_access_token(
            subject=str(user_id),
            additional_claims={
                "username": "principal" if role == "PRINCIPAL" else "clerk",
                "role": role,
                "school_id": school_id,
                "school_name": "Zilla Parishad School Wadgaon",
                "temp_login": False,
            },
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers
