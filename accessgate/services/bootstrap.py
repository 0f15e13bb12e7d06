"""Startup bootstrap: seed roles, then optionally the demo accounts."""

import logging
from typing import TYPE_CHECKING

from accessgate.core.exceptions import DuplicateKeyError, RoleNotSeededError
from accessgate.core.security import hash_password
from accessgate.models import RoleName, User
from accessgate.services.roles import find_role_by_name, seed_roles_if_empty
from accessgate.services.store import CredentialStore

if TYPE_CHECKING:
    from accessgate.core.config import Settings

logger = logging.getLogger(__name__)

# (username, email, role) for the demo accounts created when SEED_DEFAULT_USERS is on.
DEFAULT_USERS: tuple[tuple[str, str, RoleName], ...] = (
    ("admin", "admin@example.com", RoleName.ADMIN),
    ("user", "user@example.com", RoleName.USER),
)


def seed_default_users(store: CredentialStore, settings: "Settings") -> int:
    """
    Create each demo account whose email is not registered yet. Idempotent.

    Requires roles to be seeded first (RoleNotSeededError otherwise). Returns the
    number of accounts created.
    """
    created = 0
    password = settings.SEED_DEFAULT_PASSWORD.get_secret_value()
    for username, email, role_name in DEFAULT_USERS:
        if store.exists_by_email(email):
            continue
        role = find_role_by_name(store, role_name)
        if role is None:
            raise RoleNotSeededError(f"Role {role_name.value} is not seeded")
        user = User(
            username=username,
            email=email,
            password_hash=hash_password(password, rounds=settings.BCRYPT_ROUNDS),
            roles=[role],
        )
        try:
            store.insert(user)
        except DuplicateKeyError:
            logger.warning(
                "Skipping demo account: username already taken",
                extra={"username": username},
            )
            continue
        created += 1
        logger.info("Created demo account", extra={"username": username, "role": role_name.value})
    return created


def run_bootstrap(store: CredentialStore, settings: "Settings") -> tuple[int, int]:
    """
    Seed roles and, when SEED_DEFAULT_USERS is set, the demo accounts.

    Must complete before registrations or logins are accepted. Safe to run on
    every start. Returns (roles_created, users_created).
    """
    roles_created = seed_roles_if_empty(store)
    users_created = 0
    if settings.SEED_DEFAULT_USERS:
        users_created = seed_default_users(store, settings)
    return (roles_created, users_created)
