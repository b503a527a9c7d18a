"""ORM model for portal users (authentication and RBAC)."""

import enum
import uuid
from datetime import UTC, datetime

from sqlalchemy import CheckConstraint, Column, DateTime, Enum, String

from portal.models.base import Base


class Role(str, enum.Enum):
    """Account role. Privilege order: USER < ADMIN < SUPER_ADMIN."""

    USER = "USER"
    ADMIN = "ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"

    @property
    def is_privileged(self) -> bool:
        """True for roles that may enter the admin area."""
        return self in PRIVILEGED_ROLES


PRIVILEGED_ROLES = frozenset({Role.ADMIN, Role.SUPER_ADMIN})


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(UTC)


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    email is stored lowercased; password_hash is a bcrypt hash and never leaves
    the server.
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("password_hash <> ''", name="ck_users_password_hash_nonempty"),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    email = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(
        Enum(
            Role,
            name="user_role",
            native_enum=False,
            validate_strings=True,
            length=32,
            create_constraint=True,
        ),
        nullable=False,
        default=Role.USER,
    )
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )
