"""Authorization gate: role membership decisions for protected operations."""

from collections.abc import Iterable

from accessgate.models.role import RoleName


def authorize(token_roles: Iterable[RoleName | str], required_role: RoleName | str) -> bool:
    """
    Permit iff required_role is one of token_roles.

    Flat check: ADMIN does not imply USER. Unknown role names never match.
    """
    try:
        required = RoleName(required_role)
    except ValueError:
        return False
    for role in token_roles:
        try:
            if RoleName(role) is required:
                return True
        except ValueError:
            continue
    return False
