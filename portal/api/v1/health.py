"""Health check and configuration diagnostics endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from portal.core.config import Settings, get_settings
from portal.core.database import check_db_connected, get_db, users_table_exists
from portal.core.errors import StoreUnavailable
from portal.schemas.health import ConfigStatusResponse, HealthResponse
from portal.services.user_store import UserStore

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(db: Session = Depends(get_db)) -> HealthResponse:
    """
    Return service health status, database connectivity and users table state.
    Used by load balancers and monitoring.
    """
    settings = get_settings()
    if not check_db_connected(db):
        return HealthResponse(
            status="ok",
            environment=settings.APP_ENV,
            database="disconnected",
        )

    table_exists = users_table_exists(db)
    user_count = None
    if table_exists:
        try:
            user_count = UserStore(db).count()
        except StoreUnavailable:
            user_count = None
    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        database="connected",
        users_table_exists=table_exists,
        user_count=user_count,
    )


@router.get("/config", response_model=ConfigStatusResponse)
def get_config_status(
    settings: Annotated[Settings, Depends(get_settings)],
) -> ConfigStatusResponse:
    """Report which required settings are present (never their values). Not served in prod."""
    if settings.APP_ENV == "prod":
        raise HTTPException(status_code=404, detail="Not Found")
    return ConfigStatusResponse(
        environment=settings.APP_ENV,
        database_url_set=bool(settings.DATABASE_URL),
        jwt_secret_set=bool(settings.JWT_SECRET.get_secret_value()),
        database_backend=settings.DATABASE_URL.split(":", 1)[0],
        protected_prefix=settings.PROTECTED_PREFIX,
    )
