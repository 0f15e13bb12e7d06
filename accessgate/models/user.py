"""ORM model for registered accounts and their role assignments."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table, func
from sqlalchemy.orm import relationship

from accessgate.models.base import Base
from accessgate.models.role import RoleName

user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    """
    Account for password login and role-based access control.

    username and email are unique at the database level; the store relies on
    those indexes to reject concurrent duplicate registrations.
    password_hash holds a bcrypt digest, never the plaintext.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    roles = relationship("Role", secondary=user_roles, lazy="selectin")

    @property
    def role_names(self) -> frozenset[RoleName]:
        return frozenset(role.role_name for role in self.roles)
