"""Request-time gate for the admin area: token extraction, verification and role check."""

import logging
from collections.abc import Mapping

from portal.core.errors import Forbidden, TokenMissing
from portal.core.security import TokenIssuer
from portal.schemas.auth import CurrentUser

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


def extract_token(
    cookies: Mapping[str, str],
    headers: Mapping[str, str],
    cookie_name: str,
) -> str | None:
    """
    Return the session token presented with a request, or None.

    The cookie takes precedence over an ``Authorization: Bearer`` header when
    both are present.
    """
    token = cookies.get(cookie_name)
    if token and token.strip():
        return token.strip()
    auth_header = headers.get("authorization", "")
    if auth_header[: len(BEARER_PREFIX)].lower() == BEARER_PREFIX:
        bearer = auth_header[len(BEARER_PREFIX) :].strip()
        if bearer:
            return bearer
    return None


class AccessGuard:
    """
    Decides whether a presented token may enter the admin area.

    Cryptographic verification only; no database access.
    """

    def __init__(self, token_issuer: TokenIssuer) -> None:
        self.token_issuer = token_issuer

    def authenticate(self, token: str | None) -> CurrentUser:
        """Verify the token and return its identity; raises a TokenError subclass."""
        if token is None:
            raise TokenMissing()
        return self.token_issuer.verify(token)

    def authorize_admin(self, token: str | None) -> CurrentUser:
        """Like authenticate, but also require role ADMIN or SUPER_ADMIN (else Forbidden)."""
        identity = self.authenticate(token)
        if not identity.role.is_privileged:
            logger.info(
                "Admin access denied",
                extra={"user_id": identity.id, "role": identity.role.value},
            )
            raise Forbidden("Admin access required")
        return identity
