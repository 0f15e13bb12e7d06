"""Tests for accessgate.services.bootstrap: role seed and optional demo accounts."""

import unittest
from unittest.mock import MagicMock

from pydantic import SecretStr
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from accessgate.core.exceptions import RoleNotSeededError
from accessgate.core.security import verify_password
from accessgate.models import Base, RoleName, User
from accessgate.services.bootstrap import DEFAULT_USERS, run_bootstrap, seed_default_users
from accessgate.services.store import CredentialStore


def _settings(seed_users: bool) -> MagicMock:
    settings = MagicMock()
    settings.SEED_DEFAULT_USERS = seed_users
    settings.SEED_DEFAULT_PASSWORD = SecretStr("password")
    settings.BCRYPT_ROUNDS = 4
    return settings


def _store() -> CredentialStore:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return CredentialStore(sessionmaker(autocommit=False, autoflush=False, bind=engine)())


class TestBootstrapRolesOnly(unittest.TestCase):
    """With SEED_DEFAULT_USERS off, only roles are created."""

    def test_seeds_roles_and_no_users(self) -> None:
        store = _store()
        roles_created, users_created = run_bootstrap(store, _settings(seed_users=False))
        self.assertEqual(roles_created, len(RoleName))
        self.assertEqual(users_created, 0)
        self.assertEqual(store.list_users(), [])

    def test_second_run_is_noop(self) -> None:
        store = _store()
        run_bootstrap(store, _settings(seed_users=False))
        self.assertEqual(run_bootstrap(store, _settings(seed_users=False)), (0, 0))
        self.assertEqual(store.count_roles(), len(RoleName))


class TestBootstrapDemoUsers(unittest.TestCase):
    """With SEED_DEFAULT_USERS on, demo accounts are created once with their roles."""

    def test_creates_admin_and_user(self) -> None:
        store = _store()
        roles_created, users_created = run_bootstrap(store, _settings(seed_users=True))
        self.assertEqual(roles_created, 2)
        self.assertEqual(users_created, len(DEFAULT_USERS))

        admin = store.find_by_username("admin")
        self.assertEqual(admin.email, "admin@example.com")
        self.assertEqual(admin.role_names, frozenset({RoleName.ADMIN}))
        self.assertTrue(verify_password("password", admin.password_hash))

        user = store.find_by_username("user")
        self.assertEqual(user.role_names, frozenset({RoleName.USER}))

    def test_idempotent(self) -> None:
        store = _store()
        run_bootstrap(store, _settings(seed_users=True))
        self.assertEqual(run_bootstrap(store, _settings(seed_users=True)), (0, 0))
        self.assertEqual(len(store.list_users()), len(DEFAULT_USERS))

    def test_skips_demo_account_when_username_taken(self) -> None:
        store = _store()
        run_bootstrap(store, _settings(seed_users=False))
        role = store.find_role_by_name(RoleName.USER)
        store.insert(
            User(username="admin", email="someone@else.com", password_hash="$2b$04$x", roles=[role])
        )
        created = seed_default_users(store, _settings(seed_users=True))
        self.assertEqual(created, 1)
        self.assertEqual(store.find_by_username("admin").email, "someone@else.com")

    def test_requires_seeded_roles(self) -> None:
        store = _store()
        with self.assertRaises(RoleNotSeededError):
            seed_default_users(store, _settings(seed_users=True))


if __name__ == "__main__":
    unittest.main()
