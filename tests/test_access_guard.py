"""Unit tests for app.core.security tokens/passwords and app.services.access_guard."""

import unittest
from datetime import UTC, datetime, timedelta

import jwt

from app.core.config import Settings
from app.core.errors import ForbiddenError, UnauthorizedError
from app.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from app.schemas.auth import CurrentUser
from app.services.access_guard import authenticate_token, require_role

SETTINGS = Settings(
    _env_file=None,
    DATABASE_URL="sqlite:///:memory:",
    JWT_SECRET="guard-test-secret-0123456789abcdef",
    JWT_EXPIRE_MINUTES=30,
)


def _raw_token(payload: dict, secret: str = "guard-test-secret-0123456789abcdef") -> str:
    return jwt.encode(payload, secret, algorithm="HS256")


class TestPasswords(unittest.TestCase):
    def test_hash_and_verify(self) -> None:
        hashed = hash_password("password123", rounds=4)
        self.assertNotEqual(hashed, "password123")
        self.assertTrue(verify_password("password123", hashed))
        self.assertFalse(verify_password("password124", hashed))

    def test_verify_against_garbage_hash_is_false(self) -> None:
        self.assertFalse(verify_password("password123", "not-a-bcrypt-hash"))


class TestTokens(unittest.TestCase):
    def test_payload_shape_and_expiry_window(self) -> None:
        token = create_access_token(7, "a@b.com", "admin", SETTINGS)
        payload = decode_access_token(token, SETTINGS)
        self.assertEqual(payload["userId"], 7)
        self.assertEqual(payload["email"], "a@b.com")
        self.assertEqual(payload["role"], "admin")
        self.assertEqual(payload["exp"] - payload["iat"], 30 * 60)

    def test_default_expiry_is_24_hours(self) -> None:
        settings = Settings(_env_file=None, JWT_SECRET="expiry-default-secret-0123456789ab")
        self.assertEqual(settings.JWT_EXPIRE_MINUTES, 24 * 60)

    def test_wrong_secret_rejected(self) -> None:
        token = create_access_token(7, "a@b.com", "user", SETTINGS)
        other = Settings(_env_file=None, JWT_SECRET="other-secret-0123456789abcdefghijkl")
        with self.assertRaises(jwt.PyJWTError):
            decode_access_token(token, other)


class TestAuthenticateToken(unittest.TestCase):
    def test_valid_token_yields_identity(self) -> None:
        token = create_access_token(3, "u@example.com", "user", SETTINGS)
        identity = authenticate_token(token, SETTINGS)
        self.assertEqual(identity, CurrentUser(id=3, email="u@example.com", role="user"))

    def test_same_token_same_identity(self) -> None:
        token = create_access_token(3, "u@example.com", "admin", SETTINGS)
        self.assertEqual(authenticate_token(token, SETTINGS), authenticate_token(token, SETTINGS))

    def test_missing_token(self) -> None:
        for token in (None, ""):
            with self.assertRaises(UnauthorizedError) as ctx:
                authenticate_token(token, SETTINGS)
            self.assertEqual(ctx.exception.status_code, 401)

    def test_malformed_token(self) -> None:
        with self.assertRaises(UnauthorizedError):
            authenticate_token("not.a.jwt", SETTINGS)

    def test_tampered_signature(self) -> None:
        token = _raw_token(
            {"userId": 1, "email": "a@b.com", "role": "admin", "exp": datetime.now(UTC) + timedelta(hours=1)},
            secret="attacker-secret-0123456789abcdefgh",
        )
        with self.assertRaises(UnauthorizedError):
            authenticate_token(token, SETTINGS)

    def test_expired_token(self) -> None:
        token = _raw_token(
            {"userId": 1, "email": "a@b.com", "role": "user", "exp": datetime.now(UTC) - timedelta(seconds=5)}
        )
        with self.assertRaises(UnauthorizedError) as ctx:
            authenticate_token(token, SETTINGS)
        self.assertEqual(ctx.exception.message, "Token expired")

    def test_token_without_expiry_rejected(self) -> None:
        token = _raw_token({"userId": 1, "email": "a@b.com", "role": "user"})
        with self.assertRaises(UnauthorizedError):
            authenticate_token(token, SETTINGS)

    def test_unknown_role_rejected(self) -> None:
        token = _raw_token(
            {"userId": 1, "email": "a@b.com", "role": "root", "exp": datetime.now(UTC) + timedelta(hours=1)}
        )
        with self.assertRaises(UnauthorizedError):
            authenticate_token(token, SETTINGS)

    def test_non_integer_user_id_rejected(self) -> None:
        token = _raw_token(
            {"userId": "1", "email": "a@b.com", "role": "user", "exp": datetime.now(UTC) + timedelta(hours=1)}
        )
        with self.assertRaises(UnauthorizedError):
            authenticate_token(token, SETTINGS)


class TestRequireRole(unittest.TestCase):
    def test_matching_role_passes(self) -> None:
        admin = CurrentUser(id=1, email="a@b.com", role="admin")
        self.assertIs(require_role(admin, "admin"), admin)

    def test_other_role_forbidden(self) -> None:
        user = CurrentUser(id=2, email="u@b.com", role="user")
        with self.assertRaises(ForbiddenError) as ctx:
            require_role(user, "admin")
        self.assertEqual(ctx.exception.status_code, 403)


if __name__ == "__main__":
    unittest.main()
