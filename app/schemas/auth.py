"""Request/response schemas for auth endpoints."""

from datetime import datetime
from typing import Literal

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, Field, field_validator

from app.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
)

Role = Literal["user", "admin"]


def check_email_address(value: str) -> str:
    """
    Reject strings that are not email-shaped; return the address unchanged.

    Accounts are keyed by the exact string given, so the normalized form
    email-validator produces (lowercased domain) is not stored.
    """
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        raise ValueError("Please provide a valid email") from None
    return value


class RegisterRequest(BaseModel):
    """New account details."""

    username: str = Field(..., max_length=USERNAME_MAX_LEN, description="Username")
    email: str = Field(..., description="Email address")
    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LEN,
        max_length=PASSWORD_MAX_LEN,
        description="Password",
    )

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Username is required")
        return v

    @field_validator("email")
    @classmethod
    def validate_email_shape(cls, v: str) -> str:
        return check_email_address(v)


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: str = Field(..., description="Email address")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")

    @field_validator("email")
    @classmethod
    def validate_email_shape(cls, v: str) -> str:
        return check_email_address(v)


class UserPublic(BaseModel):
    """User record as returned to clients (no password hash)."""

    model_config = {"from_attributes": True}

    id: int
    username: str
    email: str
    role: Role
    created_at: datetime


class AuthResponse(BaseModel):
    """User plus JWT returned after register or login."""

    user: UserPublic
    token: str = Field(..., description="JWT session token; send as Authorization: Bearer <token>")


class CurrentUser(BaseModel):
    """Identity decoded from a session token, for dependency injection."""

    id: int
    email: str
    role: Role
