"""Role names and the ORM model for seeded role records."""

from enum import Enum

from sqlalchemy import Column, Integer, String

from accessgate.models.base import Base


class RoleName(str, Enum):
    """Closed set of roles. Values are the stable identifiers stored and put in tokens."""

    USER = "USER"
    ADMIN = "ADMIN"


DEFAULT_ROLE = RoleName.USER


class Role(Base):
    """One row per RoleName member, created by the bootstrap seed."""

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(32), nullable=False, unique=True)

    @property
    def role_name(self) -> RoleName:
        return RoleName(self.name)
