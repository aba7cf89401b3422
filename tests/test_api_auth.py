"""HTTP tests for /api/auth: status codes and error body shapes."""

import tempfile
import unittest
from pathlib import Path

from fastapi.testclient import TestClient

from app.core.config import Settings
from app.main import create_app


def _settings(db_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite:///{db_path}",
        JWT_SECRET="api-auth-test-secret-0123456789abcdef",
        BCRYPT_ROUNDS=4,
        SEED_SAMPLE_DATA=False,
    )


class ApiTestCase(unittest.TestCase):
    """Isolated app (own SQLite file and services) per test."""

    def setUp(self) -> None:
        tmp = self.enterContext(tempfile.TemporaryDirectory())
        self.app = create_app(_settings(Path(tmp) / "api.db"))
        self.client = self.enterContext(TestClient(self.app))

    def _register(self, username: str = "alice", email: str = "alice@example.com", password: str = "password123"):
        return self.client.post(
            "/api/auth/register",
            json={"username": username, "email": email, "password": password},
        )


class TestRegisterEndpoint(ApiTestCase):
    def test_register_returns_201_with_user_and_token(self) -> None:
        resp = self._register()
        self.assertEqual(resp.status_code, 201)
        data = resp.json()
        self.assertIn("token", data)
        self.assertEqual(data["user"]["username"], "alice")
        self.assertEqual(data["user"]["email"], "alice@example.com")
        self.assertEqual(data["user"]["role"], "user")
        self.assertNotIn("password", data["user"])
        self.assertNotIn("password_hash", data["user"])

    def test_validation_errors_are_listed_per_field(self) -> None:
        resp = self.client.post(
            "/api/auth/register",
            json={"username": "  ", "email": "not-an-email", "password": "123"},
        )
        self.assertEqual(resp.status_code, 400)
        errors = resp.json()["errors"]
        params = {e["param"] for e in errors}
        self.assertEqual(params, {"username", "email", "password"})
        for e in errors:
            self.assertTrue(e["msg"])

    def test_duplicate_email_returns_400(self) -> None:
        self._register(username="first", email="a@b.com")
        resp = self._register(username="second", email="a@b.com")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "User with this email already exists"})

    def test_duplicate_username_returns_400(self) -> None:
        self._register(username="alice", email="a@b.com")
        resp = self._register(username="alice", email="c@d.com")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "User with this username already exists"})

    def test_email_is_stored_exactly_as_given(self) -> None:
        first = self._register(username="bob", email="Bob@Example.COM")
        self.assertEqual(first.status_code, 201)
        self.assertEqual(first.json()["user"]["email"], "Bob@Example.COM")

        second = self._register(username="bobby", email="Bob@example.com")
        self.assertEqual(second.status_code, 201, second.text)
        self.assertEqual(second.json()["user"]["email"], "Bob@example.com")

        resp = self.client.post(
            "/api/auth/login",
            json={"email": "Bob@Example.COM", "password": "password123"},
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["user"]["username"], "bob")


class TestLoginEndpoint(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self._register()

    def test_login_success(self) -> None:
        resp = self.client.post(
            "/api/auth/login",
            json={"email": "alice@example.com", "password": "password123"},
        )
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertTrue(data["token"])
        self.assertEqual(data["user"]["email"], "alice@example.com")

    def test_wrong_password_and_unknown_email_look_the_same(self) -> None:
        wrong = self.client.post(
            "/api/auth/login",
            json={"email": "alice@example.com", "password": "nope-nope"},
        )
        unknown = self.client.post(
            "/api/auth/login",
            json={"email": "ghost@example.com", "password": "password123"},
        )
        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(unknown.status_code, 401)
        self.assertEqual(wrong.json(), unknown.json())
        self.assertTrue(wrong.json()["error"])

    def test_login_validation_errors(self) -> None:
        resp = self.client.post("/api/auth/login", json={"email": "bad", "password": ""})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual({e["param"] for e in resp.json()["errors"]}, {"email", "password"})

    def test_login_token_authenticates_sweet_requests(self) -> None:
        token = self.client.post(
            "/api/auth/login",
            json={"email": "alice@example.com", "password": "password123"},
        ).json()["token"]
        resp = self.client.get("/api/sweets", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(resp.status_code, 200)


class TestHealthEndpoint(ApiTestCase):
    def test_health_reports_database(self) -> None:
        resp = self.client.get("/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            resp.json(),
            {"status": "ok", "environment": "dev", "database": "connected"},
        )


if __name__ == "__main__":
    unittest.main()
