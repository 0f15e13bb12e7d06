"""Role registry: bootstrap seed and lookup for the fixed set of roles."""

import logging

from accessgate.core.exceptions import DuplicateKeyError
from accessgate.models import Role, RoleName
from accessgate.services.store import CredentialStore

logger = logging.getLogger(__name__)


def seed_roles_if_empty(store: CredentialStore) -> int:
    """
    Create one Role per RoleName member when no roles exist yet.

    Idempotent: if any role record is present this is a no-op. All roles are
    inserted in a single transaction, so a process that loses a concurrent
    seed sees nothing of its own committed and returns 0. Returns the number
    of roles inserted.
    """
    if store.count_roles() > 0:
        return 0
    try:
        store.insert_roles([Role(name=name.value) for name in RoleName])
    except DuplicateKeyError:
        logger.info("Roles already seeded by another process")
        return 0
    logger.info("Seeded roles: %s", ", ".join(name.value for name in RoleName))
    return len(RoleName)


def find_role_by_name(store: CredentialStore, name: RoleName | str) -> Role | None:
    """Return the persisted role for `name`, or None if unknown or not seeded."""
    try:
        role_name = RoleName(name)
    except ValueError:
        return None
    return store.find_role_by_name(role_name)
