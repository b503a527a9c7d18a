"""SQLAlchemy ORM models."""

from portal.models.base import Base
from portal.models.user import PRIVILEGED_ROLES, Role, User

__all__ = ["Base", "PRIVILEGED_ROLES", "Role", "User"]
