"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    RegisterRequest,
    UserPublic,
)
from app.schemas.health import HealthResponse
from app.schemas.sweets import (
    MessageResponse,
    StockChangeRequest,
    SweetCreate,
    SweetResponse,
    SweetUpdate,
)

__all__ = [
    "AuthResponse",
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "RegisterRequest",
    "StockChangeRequest",
    "SweetCreate",
    "SweetResponse",
    "SweetUpdate",
    "UserPublic",
]
