"""Credential store: persistence of accounts and roles over a SQLAlchemy session."""

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from accessgate.core.exceptions import DuplicateKeyError
from accessgate.models import Role, RoleName, User

logger = logging.getLogger(__name__)


class CredentialStore:
    """
    Account and Role records for one unit of work.

    Uniqueness of username and email is enforced by the database indexes on
    insert. exists_* lookups are early exits only and do not guard against a
    concurrent insert of the same key.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def exists_by_username(self, username: str) -> bool:
        stmt = select(User.id).where(User.username == username).limit(1)
        return self.session.execute(stmt).first() is not None

    def exists_by_email(self, email: str) -> bool:
        stmt = select(User.id).where(User.email == email).limit(1)
        return self.session.execute(stmt).first() is not None

    def find_by_username(self, username: str) -> User | None:
        return self.session.execute(
            select(User).where(User.username == username)
        ).scalar_one_or_none()

    def list_users(self) -> list[User]:
        return list(self.session.execute(select(User).order_by(User.id)).scalars())

    def insert(self, user: User) -> User:
        """
        Persist a new account and commit. Raises DuplicateKeyError if the
        username or email is already taken; nothing is committed in that case.
        """
        if not user.roles:
            raise ValueError("an account must have at least one role")
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.info("Account insert rejected by unique constraint")
            raise DuplicateKeyError("Account with this username or email already exists", cause=e) from e
        self.session.refresh(user)
        return user

    def count_roles(self) -> int:
        return self.session.execute(select(func.count(Role.id))).scalar_one()

    def insert_role(self, role: Role) -> Role:
        self.session.add(role)
        self.session.commit()
        self.session.refresh(role)
        return role

    def insert_roles(self, roles: list[Role]) -> list[Role]:
        """
        Persist several roles in one transaction. Raises DuplicateKeyError if
        any name already exists; none of them are committed in that case.
        """
        self.session.add_all(roles)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.info("Role insert rejected by unique constraint")
            raise DuplicateKeyError("Role with this name already exists", cause=e) from e
        for role in roles:
            self.session.refresh(role)
        return roles

    def find_role_by_name(self, name: RoleName) -> Role | None:
        return self.session.execute(
            select(Role).where(Role.name == RoleName(name).value)
        ).scalar_one_or_none()
