"""User directory endpoints (admin only): list, get, create, update, delete."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from portal.api.v1.auth import get_user_store, require_admin
from portal.schemas.auth import CurrentUser, MessageResponse
from portal.schemas.users import (
    UserCreate,
    UserListItem,
    UserResponse,
    UsersListResponse,
    UserUpdate,
)
from portal.services.user_directory import UserDirectory
from portal.services.user_store import UserStore

router = APIRouter()


def get_user_directory(
    store: Annotated[UserStore, Depends(get_user_store)],
) -> UserDirectory:
    return UserDirectory(store)


@router.get("", response_model=UsersListResponse)
def list_users(
    caller: Annotated[CurrentUser, Depends(require_admin)],
    directory: Annotated[UserDirectory, Depends(get_user_directory)],
) -> UsersListResponse:
    """List all users, newest first."""
    users = directory.list_users(caller)
    return UsersListResponse(users=[UserListItem.model_validate(u) for u in users])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreate,
    caller: Annotated[CurrentUser, Depends(require_admin)],
    directory: Annotated[UserDirectory, Depends(get_user_directory)],
) -> UserResponse:
    """Create a user. Only a SUPER_ADMIN may create ADMIN or SUPER_ADMIN accounts."""
    user = directory.create_user(caller, body)
    return UserResponse(user=UserListItem.model_validate(user))


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: str,
    caller: Annotated[CurrentUser, Depends(require_admin)],
    directory: Annotated[UserDirectory, Depends(get_user_directory)],
) -> UserResponse:
    user = directory.get_user(caller, user_id)
    return UserResponse(user=UserListItem.model_validate(user))


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: str,
    body: UserUpdate,
    caller: Annotated[CurrentUser, Depends(require_admin)],
    directory: Annotated[UserDirectory, Depends(get_user_directory)],
) -> UserResponse:
    """Partial update; omitted fields are left unchanged."""
    user = directory.update_user(caller, user_id, body)
    return UserResponse(user=UserListItem.model_validate(user))


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: str,
    caller: Annotated[CurrentUser, Depends(require_admin)],
    directory: Annotated[UserDirectory, Depends(get_user_directory)],
) -> MessageResponse:
    """Permanently delete a user. Self-deletion is never allowed."""
    directory.delete_user(caller, user_id)
    return MessageResponse(message="User deleted successfully")
