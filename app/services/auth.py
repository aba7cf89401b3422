"""Identity service: registration, login, session tokens, and admin account maintenance."""

import logging
from dataclasses import dataclass

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import Settings
from app.core.errors import (
    DuplicateEmailError,
    DuplicateUsernameError,
    InternalFaultError,
    InvalidCredentialsError,
    NotFoundError,
)
from app.core.security import create_access_token, hash_password, verify_password
from app.models import User
from app.schemas.auth import UserPublic

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthResult:
    """Password-free user record plus a signed session token."""

    user: UserPublic
    token: str


class AuthService:
    """
    Registers and authenticates users and mints JWT session tokens.

    Tokens are stateless: there is no revocation list, so a leaked token stays
    valid until its exp claim passes.
    """

    def __init__(self, session_factory: sessionmaker[Session], settings: Settings) -> None:
        self._session_factory = session_factory
        self._settings = settings

    def register(self, username: str, email: str, password: str) -> AuthResult:
        """Create a 'user' account. Raises DuplicateEmailError / DuplicateUsernameError."""
        with self._session_factory() as db:
            self._ensure_available(db, username, email)
            db.add(
                User(
                    username=username,
                    email=email,
                    password_hash=self._hash(password),
                    role="user",
                )
            )
            self._commit_new_user(db, username, email)

            user = db.query(User).filter(User.email == email).first()
            if user is None:
                raise InternalFaultError("Failed to create user")

            logger.info("User registered", extra={"user_id": user.id, "role": user.role})
            return self._result(user)

    def login(self, email: str, password: str) -> AuthResult:
        """
        Check email and password; returns user and token.

        Unknown email and wrong password raise the same InvalidCredentialsError
        so callers cannot probe which accounts exist.
        """
        with self._session_factory() as db:
            user = db.query(User).filter(User.email == email).first()
        if user is None:
            raise InvalidCredentialsError()
        if not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()
        return self._result(user)

    def create_admin(self, username: str, email: str, password: str) -> UserPublic:
        """Create an account with role 'admin' (CLI only; there is no HTTP route for this)."""
        with self._session_factory() as db:
            self._ensure_available(db, username, email)
            user = User(
                username=username,
                email=email,
                password_hash=self._hash(password),
                role="admin",
            )
            db.add(user)
            self._commit_new_user(db, username, email)
            db.refresh(user)
            logger.info("Admin user created", extra={"user_id": user.id})
            return UserPublic.model_validate(user)

    def promote_to_admin(self, username: str, email: str, password: str) -> UserPublic:
        """Reset the password of the user matching email or username and make it an admin."""
        with self._session_factory() as db:
            user = (
                db.query(User)
                .filter(or_(User.email == email, User.username == username))
                .order_by(User.id)
                .first()
            )
            if user is None:
                raise NotFoundError("User not found")
            user.password_hash = self._hash(password)
            user.role = "admin"
            db.commit()
            db.refresh(user)
            logger.info("User promoted to admin", extra={"user_id": user.id})
            return UserPublic.model_validate(user)

    def issue_token(self, user: User | UserPublic) -> str:
        return create_access_token(user.id, user.email, user.role, self._settings)

    def _hash(self, password: str) -> str:
        return hash_password(password, rounds=self._settings.BCRYPT_ROUNDS)

    def _result(self, user: User) -> AuthResult:
        return AuthResult(user=UserPublic.model_validate(user), token=self.issue_token(user))

    @staticmethod
    def _ensure_available(db: Session, username: str, email: str) -> None:
        """
        Raise if email or username is taken. All rows matching either value are
        fetched so an email conflict is always reported first, whichever row the
        database would return first.
        """
        existing = (
            db.query(User)
            .filter(or_(User.email == email, User.username == username))
            .all()
        )
        if any(u.email == email for u in existing):
            raise DuplicateEmailError()
        if any(u.username == username for u in existing):
            raise DuplicateUsernameError()

    def _commit_new_user(self, db: Session, username: str, email: str) -> None:
        """Commit a pending insert; a unique violation from a concurrent insert becomes a duplicate error."""
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            self._ensure_available(db, username, email)
            raise InternalFaultError("Failed to create user") from e
