"""FastAPI dependencies: bearer/refresh token authentication and role gating."""

from typing import Optional

import structlog
from fastapi import Depends, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.application.services.token_service import (
    create_access_token_from_claims,
    decode_access_token,
    decode_refresh_token,
)
from app.core.exceptions import ErrorResponse
from app.core.middleware import NEW_ACCESS_TOKEN_HEADER
from app.domain.models.user import ROLE_ADMIN
from app.domain.repositories.user_repository import UserRepository
from app.domain.schemas.auth import AuthenticatedUser
from app.interfaces.deps import get_user_repository

logger = structlog.get_logger(__name__)

REFRESH_TOKEN_HEADER = "X-Refresh-Token"
REFRESH_TOKEN_COOKIE = "refreshToken"

# auto_error=False: a missing bearer falls through to the refresh-token path
security = HTTPBearer(auto_error=False)


def extract_refresh_token(request: Request) -> Optional[str]:
    """Refresh token from the X-Refresh-Token header, else from the cookie."""
    return request.headers.get(REFRESH_TOKEN_HEADER) or request.cookies.get(REFRESH_TOKEN_COOKIE)


def authenticate_token(
    request: Request,
    response: Response,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    users: UserRepository = Depends(get_user_repository),
) -> AuthenticatedUser:
    """Resolve the caller from a bearer access token, or silently from a refresh token."""
    access_token = credentials.credentials if credentials else None
    refresh_token = extract_refresh_token(request)

    if not access_token and refresh_token:
        claims = decode_refresh_token(refresh_token)
        if claims is None:
            raise ErrorResponse("Invalid refresh token", status.HTTP_401_UNAUTHORIZED)

        # Claims are trusted as signed; role and verification are not re-read from the database
        response.headers[NEW_ACCESS_TOKEN_HEADER] = create_access_token_from_claims(claims)
        logger.debug("Access token reissued from refresh token", user_id=claims["id"])
        user = AuthenticatedUser(id=claims["id"], email=claims.get("email", ""), role=claims.get("role"))
        request.state.user = user
        return user

    if not access_token:
        raise ErrorResponse("No access token provided", status.HTTP_401_UNAUTHORIZED)

    claims = decode_access_token(access_token)
    if claims is None:
        raise ErrorResponse("Invalid or expired token", status.HTTP_401_UNAUTHORIZED)

    db_user = users.get_by_id(claims["id"])
    if db_user is None:
        raise ErrorResponse("User not found", status.HTTP_401_UNAUTHORIZED)

    user = AuthenticatedUser(id=db_user.id, email=db_user.email, role=db_user.role)
    request.state.user = user
    return user


def optional_auth(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    users: UserRepository = Depends(get_user_repository),
) -> Optional[AuthenticatedUser]:
    """Attach the caller's identity when a valid access token is present; never fails."""
    if not credentials:
        return None

    claims = decode_access_token(credentials.credentials)
    if claims is None:
        return None

    db_user = users.get_by_id(claims["id"])
    if db_user is None:
        return None

    user = AuthenticatedUser(id=db_user.id, email=db_user.email, role=db_user.role)
    request.state.user = user
    return user


def authorize_roles(*roles: str):
    """Dependency factory: allow only callers whose role is in the list."""

    def checker(user: AuthenticatedUser = Depends(authenticate_token)) -> AuthenticatedUser:
        if user.role not in roles:
            raise ErrorResponse(
                f"Access denied. Required role: {' or '.join(roles)}",
                status.HTTP_403_FORBIDDEN,
            )
        return user

    return checker


require_admin = authorize_roles(ROLE_ADMIN)
