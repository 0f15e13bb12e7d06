"""Authentication service: registration and login orchestration over the credential store."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from accessgate.core import security
from accessgate.core.config import get_settings
from accessgate.core.exceptions import (
    DuplicateEmailError,
    DuplicateKeyError,
    DuplicateUsernameError,
    InvalidCredentialsError,
    RoleNotSeededError,
)
from accessgate.models import DEFAULT_ROLE, RoleName, User
from accessgate.services.roles import find_role_by_name
from accessgate.services.store import CredentialStore

if TYPE_CHECKING:
    from accessgate.core.config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginResult:
    """Session token issued on login, plus the account it was issued for."""

    access_token: str
    token_type: str
    expires_at: datetime
    user_id: int
    username: str
    email: str
    roles: list[RoleName]


class AuthService:
    """
    Registers accounts and exchanges credentials for session tokens.

    Holds no state of its own beyond the store it orchestrates.
    """

    def __init__(self, store: CredentialStore, settings: Settings | None = None) -> None:
        self.store = store
        self.settings = settings or get_settings()

    def register(self, username: str, email: str, password: str) -> User:
        """
        Create an account with the default USER role. No token is issued.

        Raises DuplicateUsernameError, DuplicateEmailError, or RoleNotSeededError
        if the role bootstrap has not run.
        """
        if self.store.exists_by_username(username):
            raise DuplicateUsernameError()
        if self.store.exists_by_email(email):
            raise DuplicateEmailError()

        password_hash = security.hash_password(password, rounds=self.settings.BCRYPT_ROUNDS)

        default_role = find_role_by_name(self.store, DEFAULT_ROLE)
        if default_role is None:
            logger.error("Default role %s missing; role bootstrap has not run", DEFAULT_ROLE.value)
            raise RoleNotSeededError("Error: Role is not found.")

        user = User(username=username, email=email, password_hash=password_hash, roles=[default_role])
        try:
            created = self.store.insert(user)
        except DuplicateKeyError:
            # Lost a race with a concurrent registration; report the key that is now taken.
            if self.store.exists_by_username(username):
                raise DuplicateUsernameError() from None
            raise DuplicateEmailError() from None

        logger.info("Registered account", extra={"user_id": created.id, "username": created.username})
        return created

    def login(self, username: str, password: str, now: datetime | None = None) -> LoginResult:
        """
        Verify credentials and issue a session token.

        Unknown username and wrong password both raise InvalidCredentialsError.
        Raises TokenIssuanceError if signing fails.
        """
        user = self.store.find_by_username(username)
        if user is None:
            security.burn_password_check(password)
            raise InvalidCredentialsError()
        if not security.verify_password(password, user.password_hash):
            raise InvalidCredentialsError()

        now = security.resolve_now(now)
        roles = sorted(user.role_names, key=lambda r: r.value)
        token = security.issue_token(user.username, roles, now=now, settings=self.settings)
        logger.info("Login succeeded", extra={"user_id": user.id, "username": user.username})
        return LoginResult(
            access_token=token,
            token_type=security.TOKEN_TYPE,
            expires_at=now + security.token_ttl(self.settings),
            user_id=user.id,
            username=user.username,
            email=user.email,
            roles=roles,
        )

    def validate_token(self, token: str, now: datetime | None = None) -> security.Principal:
        """Decode a session token; see accessgate.core.security.validate_token."""
        return security.validate_token(token, now=now, settings=self.settings)
