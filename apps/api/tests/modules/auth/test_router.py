"""
Router tests for the auth endpoints: HTTP mapping of service results and errors.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, patch

from sqlalchemy.exc import SQLAlchemyError

from app.modules.auth.schemas import ForgotPasswordResponse, LoginResponse
from app.modules.auth.service import AccountNotFoundError, InvalidCredentialsError
from app.modules.users.models import UserRole


class TestLogin:
    def test_success(self, api_client):
        response_model = LoginResponse(
            message="Login successful!",
            role=UserRole.CLERK,
            school_id=3,
            school_name="Zilla Parishad School Wadgaon",
            access_token="token",
        )
        with patch(
            "app.modules.auth.service.resolve_login",
            new=AsyncMock(return_value=response_model),
        ):
            response = api_client.post(
                "/api/v1/auth/login", json={"username": "clerk", "password": "secret1"}
            )

        assert response.status_code == 200
        body = response.json()
        assert body["role"] == "CLERK"
        assert body["temp_login"] is False

    def test_invalid_credentials(self, api_client):
        with patch(
            "app.modules.auth.service.resolve_login",
            new=AsyncMock(side_effect=InvalidCredentialsError()),
        ):
            response = api_client.post(
                "/api/v1/auth/login", json={"username": "clerk", "password": "wrong"}
            )

        assert response.status_code == 401
        assert response.json()["detail"] == {
            "error": "INVALID_CREDENTIALS",
            "message": "Invalid username or password",
        }

    def test_store_error_is_opaque(self, api_client):
        with patch(
            "app.modules.auth.service.resolve_login",
            new=AsyncMock(side_effect=SQLAlchemyError('column "password_hash" is broken')),
        ):
            response = api_client.post(
                "/api/v1/auth/login", json={"username": "clerk", "password": "secret1"}
            )

        assert response.status_code == 500
        assert response.json()["detail"]["error"] == "INTERNAL_ERROR"
        assert "password_hash" not in response.text

    def test_missing_fields(self, api_client):
        response = api_client.post("/api/v1/auth/login", json={"username": "clerk"})
        assert response.status_code == 422


class TestForgotPassword:
    def _issued(self, delivered: bool = True) -> ForgotPasswordResponse:
        return ForgotPasswordResponse(
            message="Temporary password sent",
            delivered=delivered,
            expiry_minutes=10,
            expires_at=datetime(2026, 3, 1, 9, 10, tzinfo=UTC),
        )

    def test_success(self, api_client):
        with patch(
            "app.modules.auth.service.issue_temp_password",
            new=AsyncMock(return_value=self._issued()),
        ):
            response = api_client.post(
                "/api/v1/auth/forgot-password", json={"email": "user@example.com"}
            )

        assert response.status_code == 200
        body = response.json()
        assert body["delivered"] is True
        assert body["expiry_minutes"] == 10
        assert "temp_password" not in body

    def test_unknown_email(self, api_client):
        with patch(
            "app.modules.auth.service.issue_temp_password",
            new=AsyncMock(side_effect=AccountNotFoundError("Email not found")),
        ):
            response = api_client.post(
                "/api/v1/auth/forgot-password", json={"email": "nobody@example.com"}
            )

        assert response.status_code == 404
        assert response.json()["detail"]["message"] == "Email not found"

    def test_invalid_email(self, api_client):
        response = api_client.post("/api/v1/auth/forgot-password", json={"email": "not-an-email"})
        assert response.status_code == 422

    def test_rate_limited_per_ip(self, api_client):
        with (
            patch("app.core.rate_limit.get_redis", return_value=None),
            patch(
                "app.modules.auth.service.issue_temp_password",
                new=AsyncMock(return_value=self._issued()),
            ),
        ):
            statuses = [
                api_client.post(
                    "/api/v1/auth/forgot-password", json={"email": "user@example.com"}
                ).status_code
                for _ in range(7)
            ]

        assert statuses[:6] == [200] * 6
        assert statuses[6] == 429


class TestChangePassword:
    def test_requires_token(self, api_client):
        response = api_client.post(
            "/api/v1/auth/change-password",
            json={"current_password": "old-pass", "new_password": "new-pass"},
        )
        assert response.status_code in (401, 403)

    def test_uses_session_account(self, api_client, auth_headers):
        with patch("app.modules.auth.service.change_password", new=AsyncMock()) as mock_change:
            response = api_client.post(
                "/api/v1/auth/change-password",
                json={"current_password": "old-pass", "new_password": "new-pass"},
                headers=auth_headers(user_id=11),
            )

        assert response.status_code == 200
        assert mock_change.call_args.args[1:] == (11, "old-pass", "new-pass")

    def test_temp_flow(self, api_client):
        with patch(
            "app.modules.auth.service.change_password_from_temp_login", new=AsyncMock()
        ) as mock_change:
            response = api_client.post(
                "/api/v1/auth/change-password-temp",
                json={"password_change_token": "tok", "new_password": "new-pass"},
            )

        assert response.status_code == 200
        assert mock_change.call_args.args[1:] == ("tok", "new-pass")


class TestMe:
    def test_returns_claims(self, api_client, auth_headers):
        response = api_client.get("/api/v1/auth/me", headers=auth_headers(role="PRINCIPAL"))

        assert response.status_code == 200
        body = response.json()
        assert body["role"] == "PRINCIPAL"
        assert body["school_id"] == 3

    def test_rejects_garbage_token(self, api_client):
        response = api_client.get("/api/v1/auth/me", headers={"Authorization": "Bearer nope"})

        assert response.status_code == 401
        assert response.json()["detail"]["error"] == "INVALID_TOKEN"
