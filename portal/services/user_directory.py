"""RBAC-enforced user management over the credential store."""

import logging
from typing import Any

from portal.core.errors import DuplicateEmail, Forbidden, NotFound, SelfDeletion
from portal.core.security import hash_password
from portal.models.user import Role, User
from portal.schemas.auth import CurrentUser
from portal.schemas.users import UserCreate, UserUpdate
from portal.services.user_store import UserStore, normalize_email

logger = logging.getLogger(__name__)


def _require_admin(caller: CurrentUser) -> None:
    if not caller.role.is_privileged:
        raise Forbidden("Admin access required")


def _is_super_admin(caller: CurrentUser) -> bool:
    return caller.role == Role.SUPER_ADMIN


class UserDirectory:
    """
    List/get/create/update/delete users on behalf of an admin caller.

    Privilege rules:
      - Only a SUPER_ADMIN may create an ADMIN or SUPER_ADMIN account.
      - Only a SUPER_ADMIN may assign a privileged role, or modify an account
        that currently holds one (this includes demotion).
      - Only a SUPER_ADMIN may delete an ADMIN or SUPER_ADMIN account.
      - Nobody may delete their own account.

    The caller's role comes from the verified session token; targets are
    re-read from the store on every call.
    """

    def __init__(self, store: UserStore) -> None:
        self.store = store

    def list_users(self, caller: CurrentUser) -> list[User]:
        _require_admin(caller)
        return self.store.list_all()

    def get_user(self, caller: CurrentUser, user_id: str) -> User:
        _require_admin(caller)
        user = self.store.find_by_id(user_id)
        if user is None:
            raise NotFound()
        return user

    def create_user(self, caller: CurrentUser, data: UserCreate) -> User:
        _require_admin(caller)
        if data.role.is_privileged and not _is_super_admin(caller):
            logger.info(
                "Privileged account creation denied",
                extra={"caller_id": caller.id, "requested_role": data.role.value},
            )
            raise Forbidden("Only Super Administrators can create Admin users")

        email = normalize_email(data.email)
        if self.store.find_by_email(email) is not None:
            raise DuplicateEmail()

        user = self.store.insert(
            email=email,
            name=data.name,
            password_hash=hash_password(data.password),
            role=data.role,
        )
        logger.info(
            "User created",
            extra={"caller_id": caller.id, "user_id": user.id, "role": user.role.value},
        )
        return user

    def update_user(self, caller: CurrentUser, user_id: str, data: UserUpdate) -> User:
        _require_admin(caller)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        target = self.store.find_by_id(user_id)
        if target is None:
            raise NotFound()

        if not _is_super_admin(caller):
            new_role = changes.get("role")
            if target.role.is_privileged or (new_role is not None and new_role.is_privileged):
                logger.info(
                    "Privileged account update denied",
                    extra={"caller_id": caller.id, "user_id": target.id},
                )
                raise Forbidden("Only Super Administrators can modify Admin roles")

        fields: dict[str, Any] = {}
        if "email" in changes:
            email = normalize_email(changes["email"])
            if email != target.email:
                existing = self.store.find_by_email(email)
                if existing is not None and existing.id != target.id:
                    raise DuplicateEmail()
            fields["email"] = email
        if "name" in changes:
            fields["name"] = changes["name"]
        if "role" in changes:
            fields["role"] = changes["role"]
        if "password" in changes:
            fields["password_hash"] = hash_password(changes["password"])

        updated = self.store.update(target.id, fields)
        if updated is None:
            # Deleted concurrently.
            raise NotFound()
        logger.info(
            "User updated",
            extra={
                "caller_id": caller.id,
                "user_id": updated.id,
                "fields": ",".join(sorted(fields)),
            },
        )
        return updated

    def delete_user(self, caller: CurrentUser, user_id: str) -> None:
        _require_admin(caller)
        target = self.store.find_by_id(user_id)
        if target is None:
            raise NotFound()
        # The commit in delete() expires target; its attributes cannot be reloaded after.
        target_id = target.id
        if target_id == caller.id:
            raise SelfDeletion()
        if target.role.is_privileged and not _is_super_admin(caller):
            logger.info(
                "Privileged account deletion denied",
                extra={"caller_id": caller.id, "user_id": target_id},
            )
            raise Forbidden("Only Super Administrators can delete Admin users")

        if not self.store.delete(target_id):
            raise NotFound()
        logger.info("User deleted", extra={"caller_id": caller.id, "user_id": target_id})
