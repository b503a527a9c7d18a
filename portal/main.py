"""FastAPI application entrypoint. No business logic; only wiring, middleware and error mapping."""

from dotenv import load_dotenv

load_dotenv()

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from portal.api import admin
from portal.api.middleware import AccessGuardMiddleware
from portal.api.v1 import router as v1_router
from portal.core.config import settings
from portal.core.errors import PortalError, TokenError
from portal.core.security import get_token_issuer
from portal.services.access_guard import AccessGuard

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Portal API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Signing secret is loaded once here; a missing JWT_SECRET already failed Settings().
app.add_middleware(
    AccessGuardMiddleware,
    guard=AccessGuard(get_token_issuer()),
    prefix=settings.PROTECTED_PREFIX,
    cookie_name=settings.AUTH_COOKIE_NAME,
    redirect_path=settings.GUARD_REDIRECT_PATH,
)

app.include_router(v1_router, prefix=settings.API_V1_PREFIX)
app.include_router(admin.router, prefix=settings.PROTECTED_PREFIX, tags=["admin"])


@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    """Map the error taxonomy to {"error": message} with its stable status code."""
    if exc.status_code >= 500:
        logger.error(
            "Request failed",
            exc_info=exc,
            extra={"path": request.url.path, "error_type": type(exc).__name__},
        )
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, TokenError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed request shape -> 400. Submitted values are not echoed back."""
    details = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid input data", "details": details},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Unexpected failures: log the traceback server-side, return a generic 500."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/")
def root() -> dict[str, str]:
    """Root route; denied admin requests are redirected here."""
    return {"message": "Portal API"}
