"""SQLAlchemy ORM models."""

from accessgate.models.base import Base
from accessgate.models.role import DEFAULT_ROLE, Role, RoleName
from accessgate.models.user import User, user_roles

__all__ = ["Base", "DEFAULT_ROLE", "Role", "RoleName", "User", "user_roles"]
