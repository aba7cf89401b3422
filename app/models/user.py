"""ORM model for application users (auth and RBAC)."""

from sqlalchemy import CheckConstraint, Column, Integer, String

from app.models.base import Base, UTCDateTime, utcnow

USER_ROLES = ("user", "admin")


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    role: 'admin' or 'user'. username and email are each unique (exact match).
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('user', 'admin')", name="ck_users_role"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    email = Column(String(320), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default="user")
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
