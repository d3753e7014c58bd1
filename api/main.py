"""
api/main.py -- FastAPI application entry point for tokengate.

tokengate sits behind a reverse proxy's forward-auth hook. It answers
GET /auth for every proxied request and exposes an admin-only token
lifecycle under /tokens.

Run with:  python main.py
           uvicorn api.main:app --host 127.0.0.1 --port 3000

Middleware: log_requests -- one log line per request with latency.
The admin rate limit is applied per route by api.limiter.admin_limit.

Lifespan loads the token store once at startup. There is no teardown: the
store file on disk is the durable record and every mutation is already
persisted before it is acknowledged.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.limiter import limiter
from api.models import ErrorDetail, ErrorResponse, HealthResponse
from api.routes.auth import router as auth_router
from api.routes.tokens import router as tokens_router
from auth.admin import AdminGate
from auth.store import TokenStore
from auth.verifier import Verifier
from core.config import get_settings
from core.errors import AuthenticationError, GatewayError

VERSION = "1.0.0"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("tokengate.api")

# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Load the token store and build the admin gate before serving requests.

    Configuration is enumerated once here. The admin token itself is never
    logged, only whether it is set.
    """
    settings = get_settings()
    logger.info("tokengate starting up")
    logger.info("Using tokens file: %s", settings.tokens_file)

    store = TokenStore(settings.tokens_file)
    store.load()
    app.state.token_store = store
    app.state.verifier = Verifier(store)
    app.state.admin_gate = AdminGate(settings.admin_token)

    if app.state.admin_gate.configured:
        logger.info("Admin token is set. Management endpoints are active.")
    else:
        logger.warning("ADMIN_TOKEN environment variable is not set. Token management endpoints will not work.")

    yield

    logger.info("tokengate shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="tokengate",
    description="Forward-auth bearer token verification with an admin-gated token lifecycle.",
    version=VERSION,
    lifespan=lifespan,
    # Internal service: no interactive docs.
    docs_url=None,
    redoc_url=None,
)

# SlowAPI looks for app.state.limiter by convention.
app.state.limiter = limiter

# ---------------------------------------------------------------------------
# Request logging middleware
# ---------------------------------------------------------------------------


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(auth_router, tags=["Identity"])
app.include_router(tokens_router, tags=["Tokens"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers return the same ErrorResponse envelope so clients can parse
# errors uniformly without inspecting status codes to choose a schema.
# ---------------------------------------------------------------------------


def _error(status_code: int, code: str, message: str, detail: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=ErrorDetail(code=code, message=message, detail=detail)).model_dump(),
    )


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    """Render domain errors raised by auth/ with their own status and code."""
    response = _error(exc.status_code, exc.code, exc.message, exc.detail)
    if isinstance(exc, AuthenticationError):
        response.headers["WWW-Authenticate"] = "Bearer"
    return response


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return 429 with a structured error when a rate limit is exceeded."""
    retry_after = int(getattr(exc, "retry_after", 60))
    response = _error(429, "rate_limited", "Too many requests.", str(exc))
    response.headers["Retry-After"] = str(retry_after)
    return response


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 when FastAPI rejects request parameters before a handler runs."""
    return _error(
        400,
        "validation_error",
        "Request validation failed.",
        str(exc.errors()),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Structured errors for framework-raised HTTP errors (404 route, 405 method)."""
    return _error(exc.status_code, f"http_{exc.status_code}", str(exc.detail))


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The raw exception goes to the log only, never to the response body.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error(500, "internal_error", "An unexpected error occurred.")


# ---------------------------------------------------------------------------
# Health endpoint
#
# No rate limit applied -- health checks from supervisors must not be throttled.
# ---------------------------------------------------------------------------


@app.get("/health", tags=["Health"])
async def health(request: Request) -> HealthResponse:
    """Return liveness, version, and whether management is enabled."""
    store: TokenStore = request.app.state.token_store
    gate: AdminGate = request.app.state.admin_gate
    return HealthResponse(
        version=VERSION,
        components={
            "app": "ok",
            "store": "ok" if store.path.is_file() else "missing",
            "admin": "configured" if gate.configured else "disabled",
        },
    )
