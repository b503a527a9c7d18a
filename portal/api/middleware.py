"""Access guard middleware: gates the admin route prefix before any handler runs."""

import logging

from fastapi import Request
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from portal.core.errors import Forbidden, TokenError
from portal.services.access_guard import AccessGuard, extract_token

logger = logging.getLogger(__name__)


class AccessGuardMiddleware(BaseHTTPMiddleware):
    """
    Requests under ``prefix`` need a valid session token with an admin role.

    Denied requests (no token, bad/expired token, insufficient role) are
    redirected to ``redirect_path``. Allowed requests continue with the
    verified identity on ``request.state.identity``.
    """

    def __init__(
        self,
        app: ASGIApp,
        guard: AccessGuard,
        prefix: str,
        cookie_name: str,
        redirect_path: str = "/",
    ) -> None:
        super().__init__(app)
        self.guard = guard
        self.prefix = prefix.rstrip("/")
        self.cookie_name = cookie_name
        self.redirect_path = redirect_path

    def is_protected(self, path: str) -> bool:
        return path == self.prefix or path.startswith(self.prefix + "/")

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not self.is_protected(request.url.path):
            return await call_next(request)

        token = extract_token(request.cookies, request.headers, self.cookie_name)
        try:
            identity = self.guard.authorize_admin(token)
        except (TokenError, Forbidden) as e:
            logger.info(
                "Admin area request denied",
                extra={"path": request.url.path, "reason": type(e).__name__},
            )
            return RedirectResponse(self.redirect_path, status_code=302)

        request.state.identity = identity
        return await call_next(request)
