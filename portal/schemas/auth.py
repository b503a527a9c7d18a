"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, ConfigDict, Field

from portal.models.user import Role


class LoginRequest(BaseModel):
    """Credentials for login. Presence is checked by the endpoint (400 when missing)."""

    email: str | None = Field(default=None, description="Login email (case-insensitive)")
    password: str | None = Field(default=None, description="Password")


class PublicUser(BaseModel):
    """User profile safe to return to clients (no password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str
    role: Role


class LoginResponse(BaseModel):
    """Successful login: signed session token plus the public profile."""

    is_valid: bool = Field(default=True, serialization_alias="isValid")
    token: str = Field(..., description="Signed session token, valid for 24 hours")
    user: PublicUser


class CurrentUser(BaseModel):
    """Identity carried by a verified session token (userId, email, role)."""

    id: str
    email: str
    role: Role


class MeResponse(BaseModel):
    """Response for GET /auth/me and the admin area entry."""

    user: CurrentUser


class MessageResponse(BaseModel):
    message: str
