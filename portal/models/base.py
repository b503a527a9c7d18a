"""SQLAlchemy declarative Base shared by the portal models and Alembic."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base; Base.metadata is the migration target."""

    pass
