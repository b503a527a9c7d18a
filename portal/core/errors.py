"""Error taxonomy for authentication, access control and the user directory.

Every error carries a stable HTTP status and a client-safe message; the
application maps them to ``{"error": message}`` responses in one place.
"""


class PortalError(Exception):
    """Base class for errors surfaced to clients."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(PortalError):
    """Request body is missing required fields or has the wrong shape."""

    status_code = 400
    default_message = "Invalid input data"


class InvalidCredentials(PortalError):
    """Unknown email or wrong password; both use the same message."""

    status_code = 401
    default_message = "Invalid credentials"


class TokenError(PortalError):
    """Base for session token failures (always 401, never retried)."""

    status_code = 401
    default_message = "Invalid token"


class TokenMissing(TokenError):
    default_message = "No token provided"


class TokenInvalid(TokenError):
    default_message = "Invalid token"


class TokenExpired(TokenError):
    default_message = "Token has expired"


class Forbidden(PortalError):
    status_code = 403
    default_message = "Insufficient permissions"


class NotFound(PortalError):
    status_code = 404
    default_message = "User not found"


class DuplicateEmail(PortalError):
    status_code = 400
    default_message = "User with this email already exists"


class SelfDeletion(PortalError):
    status_code = 400
    default_message = "Cannot delete your own account"


class StoreUnavailable(PortalError):
    """The credential store could not be reached; the caller may retry later."""

    status_code = 503
    default_message = "Database connection failed"


class HashingUnavailable(PortalError):
    status_code = 500
    default_message = "Password hashing unavailable"


class InvalidHashFormat(PortalError):
    """A stored password hash is not a valid bcrypt hash."""

    status_code = 500
    default_message = "Stored credential is malformed"
