"""Password hashing and session token issuance/verification."""

from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any

import bcrypt
import jwt

from portal.core.config import get_settings
from portal.core.errors import (
    HashingUnavailable,
    InvalidHashFormat,
    TokenExpired,
    TokenInvalid,
    TokenMissing,
)
from portal.models.user import Role
from portal.schemas.auth import CurrentUser

# Bcrypt cost (rounds); fixed work factor for every stored hash.
BCRYPT_ROUNDS = 12
# bcrypt only looks at the first 72 bytes of input.
BCRYPT_MAX_BYTES = 72

PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128

# Session tokens are never valid for longer than this from issuance.
TOKEN_LIFETIME = timedelta(hours=24)


def _password_bytes(plain_password: str) -> bytes:
    return plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage; a fresh salt is drawn on every call."""
    try:
        salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
        return bcrypt.hashpw(_password_bytes(plain_password), salt).decode("utf-8")
    except (ValueError, OSError) as e:
        raise HashingUnavailable() from e


def verify_password(plain_password: str, hashed: str) -> bool:
    """
    Verify a plain password against a stored bcrypt hash.

    Returns False on mismatch. Raises InvalidHashFormat if the stored value is
    not a bcrypt hash.
    """
    if not hashed:
        raise InvalidHashFormat()
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), hashed.encode("utf-8"))
    except (ValueError, TypeError) as e:
        raise InvalidHashFormat() from e


@lru_cache
def dummy_password_hash() -> str:
    """Hash verified when an email is unknown so login timing does not leak existence."""
    return hash_password("portal-timing-equalization")


class TokenIssuer:
    """Signs and verifies stateless session tokens (HS256 JWT by default)."""

    def __init__(self, secret: str, algorithm: str = "HS256") -> None:
        if not secret or not secret.strip():
            raise ValueError("JWT secret must be set and non-empty")
        self._secret = secret
        self._algorithm = algorithm

    def issue(
        self,
        user_id: str,
        email: str,
        role: Role | str,
        now: datetime | None = None,
    ) -> str:
        """Create a signed token carrying userId, email, role, iat and exp (iat + 24h)."""
        issued_at = now or datetime.now(UTC)
        payload: dict[str, Any] = {
            "userId": str(user_id),
            "email": email,
            "role": Role(role).value,
            "iat": issued_at,
            "exp": issued_at + TOKEN_LIFETIME,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str | None) -> CurrentUser:
        """
        Validate signature, structure and expiry; return the identity claims.

        Raises TokenMissing, TokenExpired or TokenInvalid. Never touches the store.
        """
        if not token or not token.strip():
            raise TokenMissing()
        try:
            payload = jwt.decode(
                token.strip(),
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpired() from e
        except jwt.PyJWTError as e:
            raise TokenInvalid() from e

        if payload["exp"] - payload["iat"] > TOKEN_LIFETIME.total_seconds():
            raise TokenInvalid()

        user_id = payload.get("userId")
        email = payload.get("email")
        if not isinstance(user_id, str) or not user_id or not isinstance(email, str):
            raise TokenInvalid("Invalid token payload")
        try:
            role = Role(payload.get("role"))
        except ValueError as e:
            raise TokenInvalid("Invalid token payload") from e
        return CurrentUser(id=user_id, email=email, role=role)


@lru_cache
def get_token_issuer() -> TokenIssuer:
    """Process-wide issuer built once from settings (safe to call from dependencies)."""
    settings = get_settings()
    return TokenIssuer(settings.JWT_SECRET.get_secret_value(), settings.JWT_ALGORITHM)
