"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.sweet import Sweet
from app.models.user import User

__all__ = ["Base", "Sweet", "User"]
