"""FastAPI dependencies: services from app state, bearer auth (get_current_user, require_admin)."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import Settings
from app.core.errors import ForbiddenError, UnauthorizedError
from app.schemas.auth import CurrentUser
from app.services.access_guard import authenticate_token, require_role
from app.services.auth import AuthService
from app.services.sweets import SweetService

security = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_sweet_service(request: Request) -> SweetService:
    return request.app.state.sweet_service


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> CurrentUser:
    """Dependency: require valid Bearer JWT and return the caller's identity. Raises 401 if missing or invalid."""
    token = credentials.credentials if credentials is not None else None
    try:
        return authenticate_token(token, settings)
    except UnauthorizedError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require authenticated user with role 'admin'. Raises 403 for non-admin."""
    try:
        return require_role(current_user, "admin")
    except ForbiddenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message) from e
