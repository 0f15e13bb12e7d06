"""HTTP tests for register, login, /users/me and the admin-only /users/all."""

import unittest
from collections.abc import Generator
from typing import Annotated

from fastapi import Depends
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from accessgate import __version__
from accessgate.api.v1.auth import get_auth_service
from accessgate.core.config import Settings, settings
from accessgate.core.database import get_db
from accessgate.core.security import hash_password
from accessgate.main import app
from accessgate.models import Base, RoleName, User
from accessgate.services.auth import AuthService
from accessgate.services.roles import seed_roles_if_empty
from accessgate.services.store import CredentialStore

PREFIX = settings.API_PREFIX
TEST_SETTINGS = Settings(
    JWT_SECRET="api-test-secret-with-enough-bytes-1234",
    JWT_EXPIRE_MINUTES=15,
    BCRYPT_ROUNDS=4,
)


class ApiTestCase(unittest.TestCase):
    seed_roles = True

    def setUp(self) -> None:
        engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(engine)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

        if self.seed_roles:
            db = self.SessionLocal()
            try:
                seed_roles_if_empty(CredentialStore(db))
            finally:
                db.close()

        def override_get_db() -> Generator[Session, None, None]:
            db = self.SessionLocal()
            try:
                yield db
            finally:
                db.close()

        def override_auth_service(db: Annotated[Session, Depends(get_db)]) -> AuthService:
            return AuthService(CredentialStore(db), TEST_SETTINGS)

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_auth_service] = override_auth_service
        # Not used as a context manager: the startup bootstrap against the real DB is skipped.
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()

    def _register(self, username: str, email: str, password: str):
        return self.client.post(
            f"{PREFIX}/auth/register",
            json={"username": username, "email": email, "password": password},
        )

    def _login(self, username: str, password: str):
        return self.client.post(
            f"{PREFIX}/auth/login",
            json={"username": username, "password": password},
        )

    def _bearer(self, token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    def _create_admin(self) -> None:
        db = self.SessionLocal()
        try:
            store = CredentialStore(db)
            store.insert(
                User(
                    username="root",
                    email="root@x.com",
                    password_hash=hash_password("rootpw", rounds=4),
                    roles=[store.find_role_by_name(RoleName.ADMIN)],
                )
            )
        finally:
            db.close()


class TestRegisterEndpoint(ApiTestCase):
    def test_register_ok(self) -> None:
        resp = self._register("alice", "alice@x.com", "pw123")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"message": "User registered successfully!"})

    def test_duplicate_username_is_400(self) -> None:
        self._register("bob", "bob@x.com", "pw1")
        resp = self._register("bob", "bob2@x.com", "pw2")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["detail"], "Error: Username is already taken!")

    def test_duplicate_email_is_400(self) -> None:
        self._register("bob", "bob@x.com", "pw1")
        resp = self._register("robert", "bob@x.com", "pw2")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["detail"], "Error: Email is already in use!")

    def test_invalid_email_is_422(self) -> None:
        resp = self._register("carol", "not-an-email", "pw123")
        self.assertEqual(resp.status_code, 422)

    def test_empty_username_is_422(self) -> None:
        resp = self._register("", "carol@x.com", "pw123")
        self.assertEqual(resp.status_code, 422)


class TestRegisterBeforeBootstrap(ApiTestCase):
    seed_roles = False

    def test_missing_roles_is_opaque_500(self) -> None:
        resp = self._register("alice", "alice@x.com", "pw123")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json()["detail"], "Internal server error")


class TestLoginEndpoint(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self._register("alice", "alice@x.com", "pw123")

    def test_login_returns_token_and_account(self) -> None:
        resp = self._login("alice", "pw123")
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertTrue(body["access_token"])
        self.assertEqual(body["token_type"], "Bearer")
        self.assertEqual(body["username"], "alice")
        self.assertEqual(body["email"], "alice@x.com")
        self.assertEqual(body["roles"], ["USER"])
        self.assertIn("expires_at", body)

    def test_wrong_password_and_unknown_user_look_the_same(self) -> None:
        wrong = self._login("alice", "nope")
        unknown = self._login("mallory", "pw123")
        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(unknown.status_code, 401)
        self.assertEqual(wrong.json(), unknown.json())


class TestProtectedEndpoints(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self._register("alice", "alice@x.com", "pw123")
        self.user_token = self._login("alice", "pw123").json()["access_token"]

    def test_me_returns_principal(self) -> None:
        resp = self.client.get(f"{PREFIX}/users/me", headers=self._bearer(self.user_token))
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["username"], "alice")
        self.assertEqual(body["email"], "alice@x.com")
        self.assertEqual(body["roles"], ["USER"])

    def test_me_without_token_is_401(self) -> None:
        resp = self.client.get(f"{PREFIX}/users/me")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.headers.get("www-authenticate"), "Bearer")

    def test_me_with_garbage_token_is_401(self) -> None:
        resp = self.client.get(f"{PREFIX}/users/me", headers=self._bearer("garbage"))
        self.assertEqual(resp.status_code, 401)

    def test_me_with_token_from_other_key_is_401(self) -> None:
        db = self.SessionLocal()
        self.addCleanup(db.close)
        other = AuthService(
            CredentialStore(db),
            Settings(JWT_SECRET="some-other-secret-that-is-long-enough", BCRYPT_ROUNDS=4),
        )
        token = other.login("alice", "pw123").access_token
        resp = self.client.get(f"{PREFIX}/users/me", headers=self._bearer(token))
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["detail"], "Invalid token signature")

    def test_all_users_forbidden_for_user_role(self) -> None:
        resp = self.client.get(f"{PREFIX}/users/all", headers=self._bearer(self.user_token))
        self.assertEqual(resp.status_code, 403)

    def test_all_users_for_admin(self) -> None:
        self._create_admin()
        admin_token = self._login("root", "rootpw").json()["access_token"]
        resp = self.client.get(f"{PREFIX}/users/all", headers=self._bearer(admin_token))
        self.assertEqual(resp.status_code, 200)
        users = resp.json()["users"]
        self.assertEqual([u["username"] for u in users], ["alice", "root"])
        self.assertEqual(users[1]["roles"], ["ADMIN"])
        for u in users:
            self.assertNotIn("password_hash", u)
            self.assertNotIn("password", u)


class TestHealthEndpoint(ApiTestCase):
    def test_health_reports_database(self) -> None:
        resp = self.client.get(f"{PREFIX}/health/")
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["status"], "ok")
        self.assertEqual(body["database"], "connected")
        self.assertEqual(body["version"], __version__)
        self.assertTrue(body["roles_seeded"])


class TestHealthBeforeBootstrap(ApiTestCase):
    seed_roles = False

    def test_health_reports_roles_not_seeded(self) -> None:
        resp = self.client.get(f"{PREFIX}/health/")
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(resp.json()["roles_seeded"])


if __name__ == "__main__":
    unittest.main()
