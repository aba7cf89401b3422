"""Access guard: turn a bearer token into an identity and enforce roles."""

import jwt

from app.core.config import Settings
from app.core.errors import ForbiddenError, UnauthorizedError
from app.core.security import decode_access_token
from app.schemas.auth import CurrentUser


def authenticate_token(token: str | None, settings: Settings) -> CurrentUser:
    """
    Decode a session token into the caller's identity.

    Only the signature and exp claim are checked; no database lookup happens,
    so the same token always yields the same identity until it expires.
    Raises UnauthorizedError when the token is missing, invalid, or expired.
    """
    if not token:
        raise UnauthorizedError("Access token required")
    try:
        payload = decode_access_token(token, settings)
    except jwt.ExpiredSignatureError as e:
        raise UnauthorizedError("Token expired") from e
    except jwt.PyJWTError as e:
        raise UnauthorizedError("Invalid or expired token") from e

    user_id = payload.get("userId")
    role = payload.get("role")
    email = payload.get("email")
    if isinstance(user_id, bool) or not isinstance(user_id, int):
        raise UnauthorizedError("Invalid token payload")
    if role not in ("user", "admin") or not isinstance(email, str):
        raise UnauthorizedError("Invalid token payload")
    return CurrentUser(id=user_id, email=email, role=role)


def require_role(identity: CurrentUser, role: str) -> CurrentUser:
    """Raise ForbiddenError unless identity has exactly the given role."""
    if identity.role != role:
        raise ForbiddenError("Admin access required" if role == "admin" else "Access denied")
    return identity
