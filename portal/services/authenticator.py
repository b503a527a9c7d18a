"""Login: credential lookup, password verification and session token issuance."""

import logging
from dataclasses import dataclass

from portal.core.errors import InvalidCredentials, InvalidHashFormat, ValidationError
from portal.core.security import TokenIssuer, dummy_password_hash, verify_password
from portal.schemas.auth import PublicUser
from portal.services.user_store import UserStore, normalize_email

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginResult:
    token: str
    user: PublicUser


class Authenticator:
    """
    Verifies email/password against the credential store and issues a token.

    Unknown email and wrong password fail with the same InvalidCredentials
    error, and an unknown email still costs one bcrypt verification. There is
    no lockout or backoff at this layer.
    """

    def __init__(self, store: UserStore, token_issuer: TokenIssuer) -> None:
        self.store = store
        self.token_issuer = token_issuer

    def login(self, email: str | None, password: str | None) -> LoginResult:
        if not email or not email.strip() or not password:
            raise ValidationError("Email and password are required")

        normalized = normalize_email(email)
        # StoreUnavailable propagates; it is not a credentials failure.
        user = self.store.find_by_email(normalized)

        if user is None:
            verify_password(password, dummy_password_hash())
            logger.info("Login failed", extra={"reason": "unknown_email"})
            raise InvalidCredentials()

        try:
            password_ok = verify_password(password, user.password_hash)
        except InvalidHashFormat:
            logger.error(
                "Stored password hash is malformed",
                extra={"user_id": user.id},
            )
            raise InvalidCredentials()
        if not password_ok:
            logger.info(
                "Login failed",
                extra={"reason": "bad_password", "user_id": user.id},
            )
            raise InvalidCredentials()

        token = self.token_issuer.issue(user.id, user.email, user.role)
        logger.info("Login succeeded", extra={"user_id": user.id, "role": user.role.value})
        return LoginResult(token=token, user=PublicUser.model_validate(user))
