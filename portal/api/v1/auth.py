"""Login/logout endpoints and auth dependencies (get_current_user, require_admin)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from portal.core.config import get_settings
from portal.core.database import get_db
from portal.core.security import TOKEN_LIFETIME, TokenIssuer, get_token_issuer
from portal.schemas.auth import (
    CurrentUser,
    LoginRequest,
    LoginResponse,
    MeResponse,
    MessageResponse,
)
from portal.services.access_guard import AccessGuard, extract_token
from portal.services.authenticator import Authenticator
from portal.services.user_store import UserStore

router = APIRouter()


def get_user_store(db: Annotated[Session, Depends(get_db)]) -> UserStore:
    return UserStore(db)


def get_access_guard(
    token_issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> AccessGuard:
    return AccessGuard(token_issuer)


def get_request_token(request: Request) -> str | None:
    """Session token from the auth cookie or, failing that, the Bearer header."""
    return extract_token(request.cookies, request.headers, get_settings().AUTH_COOKIE_NAME)


def get_current_user(
    token: Annotated[str | None, Depends(get_request_token)],
    guard: Annotated[AccessGuard, Depends(get_access_guard)],
) -> CurrentUser:
    """Dependency: require a valid session token. Token errors become 401."""
    return guard.authenticate(token)


def require_admin(
    token: Annotated[str | None, Depends(get_request_token)],
    guard: Annotated[AccessGuard, Depends(get_access_guard)],
) -> CurrentUser:
    """Dependency: require a valid token with role ADMIN or SUPER_ADMIN (401 / 403)."""
    return guard.authorize_admin(token)


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    response: Response,
    store: Annotated[UserStore, Depends(get_user_store)],
    token_issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> LoginResponse:
    """
    Authenticate with email and password; returns a 24-hour session token.

    The token is also set as an httpOnly cookie for the admin area. API clients
    send it as: Authorization: Bearer <token>
    """
    result = Authenticator(store, token_issuer).login(body.email, body.password)

    settings = get_settings()
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=result.token,
        max_age=int(TOKEN_LIFETIME.total_seconds()),
        httponly=True,
        samesite="lax",
        secure=settings.AUTH_COOKIE_SECURE,
    )
    response.headers["Cache-Control"] = "no-store"
    return LoginResponse(is_valid=True, token=result.token, user=result.user)


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response) -> MessageResponse:
    """Clear the session cookie. Tokens stay valid until expiry; nothing is revoked server-side."""
    response.delete_cookie(get_settings().AUTH_COOKIE_NAME)
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=MeResponse)
def me(current_user: Annotated[CurrentUser, Depends(get_current_user)]) -> MeResponse:
    """Claims of the presented session token."""
    return MeResponse(user=current_user)
