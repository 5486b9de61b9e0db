"""
Authentication and Authorization Module

Provides authentication dependencies for FastAPI endpoints.
Access tokens are minted by the login endpoint and validated here using the
helpers in security.py. Authorization is a single role flag: CLERK or
PRINCIPAL.
"""

import logging
from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.security import ACCESS_TOKEN_TYPE, decode_token

logger = logging.getLogger(__name__)

# Security scheme for OpenAPI documentation
security = HTTPBearer(
    auto_error=True,
    description="JWT Bearer token for authentication",
)

PRINCIPAL_ROLE = "PRINCIPAL"


@dataclass
class CurrentUser:
    """
    Represents an authenticated school account.

    Populated from JWT claims after token validation.

    Attributes:
        id: Account id
        username: Login name
        role: CLERK or PRINCIPAL
        school_id: Owning school's id (partition key for all school data)
        school_name: Display name of the school
        temp_login: True if the session came from a temporary password
    """

    id: int
    username: str
    role: str
    school_id: int
    school_name: str
    temp_login: bool = False

    @property
    def is_principal(self) -> bool:
        return self.role == PRINCIPAL_ROLE

    def __str__(self) -> str:
        return f"CurrentUser(id={self.id}, username={self.username}, role={self.role})"


def _unauthorized(error: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


def validate_access_token(token: str) -> CurrentUser:
    """
    Validate an access token and extract the account claims.

    Args:
        token: JWT token string from the Authorization header

    Returns:
        CurrentUser built from the token claims

    Raises:
        HTTPException 401: If the token is invalid, expired, of the wrong
            type, or missing required claims
    """
    payload = decode_token(token)

    if payload is None:
        logger.warning("Invalid or expired JWT token")
        raise _unauthorized("INVALID_TOKEN", "Invalid or expired authentication token.")

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        logger.warning(f"Invalid token type: {payload.get('type')}")
        raise _unauthorized("INVALID_TOKEN_TYPE", "This endpoint requires an access token.")

    try:
        return CurrentUser(
            id=int(payload["sub"]),
            username=payload["username"],
            role=payload["role"],
            school_id=int(payload["school_id"]),
            school_name=payload.get("school_name", ""),
            temp_login=bool(payload.get("temp_login", False)),
        )
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"Invalid token claims: {e}")
        raise _unauthorized(
            "INVALID_TOKEN_CLAIMS", "Token contains invalid or missing claims."
        ) from e


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> CurrentUser:
    """
    FastAPI dependency that validates the bearer token and returns the account.

    Usage:
        @router.get("/students")
        async def list_students(user: CurrentUser = Depends(get_current_user)):
            ...
    """
    user = validate_access_token(credentials.credentials)
    logger.debug(f"Authenticated {user}")
    return user


async def require_principal(
    user: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    """
    FastAPI dependency restricting an endpoint to PRINCIPAL accounts.

    Raises:
        HTTPException 403: If the account is not a principal
    """
    if not user.is_principal:
        logger.warning(
            f"Access denied: account {user.id} ({user.username}) has role '{user.role}', "
            f"but '{PRINCIPAL_ROLE}' is required"
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error": "PRINCIPAL_ACCESS_REQUIRED",
                "message": "Only the principal can perform this action.",
            },
        )
    return user


__all__ = [
    "CurrentUser",
    "PRINCIPAL_ROLE",
    "get_current_user",
    "require_principal",
    "validate_access_token",
]
