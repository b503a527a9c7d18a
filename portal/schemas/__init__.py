"""Pydantic request/response schemas."""

from portal.schemas.auth import (
    CurrentUser,
    LoginRequest,
    LoginResponse,
    MeResponse,
    MessageResponse,
    PublicUser,
)
from portal.schemas.health import ConfigStatusResponse, HealthResponse

__all__ = [
    "ConfigStatusResponse",
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "MeResponse",
    "MessageResponse",
    "PublicUser",
]
