"""Request/response schemas for the user directory (admin only)."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from portal.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN
from portal.models.user import Role


class UserListItem(BaseModel):
    """User entry for directory responses (never the password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str
    role: Role
    created_at: datetime = Field(..., serialization_alias="createdAt")
    updated_at: datetime = Field(..., serialization_alias="updatedAt")


class UsersListResponse(BaseModel):
    """Response for GET /users, newest account first."""

    users: list[UserListItem]


class UserResponse(BaseModel):
    user: UserListItem


def _clean_name(v: str | None) -> str | None:
    if v is None:
        return None
    stripped = v.strip()
    if not stripped:
        raise ValueError("name must be non-empty")
    return stripped


class UserCreate(BaseModel):
    """Body for POST /users."""

    email: EmailStr
    name: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    role: Role

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _clean_name(v)


class UserUpdate(BaseModel):
    """Body for PUT /users/{id}; omitted fields are left unchanged."""

    email: EmailStr | None = None
    name: str | None = Field(default=None, min_length=1, max_length=255)
    password: str | None = Field(
        default=None, min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN
    )
    role: Role | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return _clean_name(v)
