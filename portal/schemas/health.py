"""Pydantic schemas for health check and diagnostics responses."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response body for the health check endpoint."""

    status: Literal["ok"] = Field(default="ok", description="Service status")
    environment: str = Field(description="Current app environment (e.g. dev, prod)")
    database: Literal["connected", "disconnected"] | None = Field(
        default=None,
        description="Database connectivity status when check is performed",
    )
    users_table_exists: bool | None = Field(
        default=None, description="Whether migrations have created the users table"
    )
    user_count: int | None = Field(default=None, description="Number of stored accounts")


class ConfigStatusResponse(BaseModel):
    """Which required settings are present; values are never included."""

    environment: str
    database_url_set: bool
    jwt_secret_set: bool
    database_backend: str
    protected_prefix: str
