"""Credential store: persistence for user rows behind a small lookup/mutation surface."""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any, TypeVar

from sqlalchemy.exc import DBAPIError, IntegrityError, InterfaceError, OperationalError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from portal.core.errors import DuplicateEmail, StoreUnavailable
from portal.models.user import Role, User

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Columns update() may touch; id and created_at are immutable.
UPDATABLE_FIELDS = frozenset({"email", "name", "password_hash", "role"})


def normalize_email(email: str) -> str:
    """Trim and lowercase; every lookup and write goes through this."""
    return email.strip().lower()


class UserStore:
    """
    Thin repository over the users table.

    Connection-level failures become StoreUnavailable and a unique-email
    violation becomes DuplicateEmail; everything else propagates.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        try:
            yield
        except IntegrityError as e:
            self.session.rollback()
            logger.info("User store integrity conflict", extra={"operation": operation})
            raise DuplicateEmail() from e
        except (OperationalError, InterfaceError) as e:
            self.session.rollback()
            logger.error(
                "User store unavailable",
                extra={"operation": operation, "reason": str(e.orig)[:200]},
            )
            raise StoreUnavailable() from e
        except DBAPIError as e:
            self.session.rollback()
            if e.connection_invalidated:
                logger.error("User store connection lost", extra={"operation": operation})
                raise StoreUnavailable() from e
            raise

    def _run(self, operation: str, fn: Callable[[], T]) -> T:
        with self._guard(operation):
            return fn()

    def find_by_email(self, email: str) -> User | None:
        normalized = normalize_email(email)
        return self._run(
            "find_by_email",
            lambda: self.session.query(User).filter(User.email == normalized).first(),
        )

    def find_by_id(self, user_id: str) -> User | None:
        return self._run(
            "find_by_id",
            lambda: self.session.get(User, user_id, populate_existing=True),
        )

    def insert(self, email: str, name: str, password_hash: str, role: Role) -> User:
        with self._guard("insert"):
            user = User(
                email=normalize_email(email),
                name=name,
                password_hash=password_hash,
                role=role,
            )
            self.session.add(user)
            self.session.commit()
            self.session.refresh(user)
            return user

    def update(self, user_id: str, fields: dict[str, Any]) -> User | None:
        """Apply a partial update; returns None if the row no longer exists."""
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {sorted(unknown)}")
        with self._guard("update"):
            user = self.session.get(User, user_id, populate_existing=True)
            if user is None:
                return None
            for key, value in fields.items():
                if key == "email":
                    value = normalize_email(value)
                setattr(user, key, value)
            # Refreshed even when no column changed.
            user.updated_at = datetime.now(UTC)
            try:
                self.session.commit()
            except StaleDataError:
                # Row deleted between the read and the UPDATE.
                self.session.rollback()
                return None
            self.session.refresh(user)
            return user

    def delete(self, user_id: str) -> bool:
        """Remove the row permanently; True if a row was removed."""
        with self._guard("delete"):
            deleted = (
                self.session.query(User)
                .filter(User.id == user_id)
                .delete(synchronize_session=False)
            )
            self.session.commit()
            return deleted > 0

    def list_all(self) -> list[User]:
        """All users, newest-created first."""
        return self._run(
            "list_all",
            lambda: self.session.query(User)
            .order_by(User.created_at.desc(), User.id.desc())
            .all(),
        )

    def count(self) -> int:
        return self._run("count", lambda: self.session.query(User).count())
