"""
api/routes/auth.py -- Forward-auth identity check.

Routes:
  GET /auth  -- 200 + X-Authenticated-User when the bearer token is valid, else 401

The reverse proxy (e.g. nginx auth_request) sends a sub-request here for every
incoming request and forwards the original only on 200. The identity header
lets the proxy log or pass on who the caller is.

Auth policy: public -- the bearer token IS the thing being checked. Never
rate-limited, never admin-gated.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from auth.dependencies import get_verifier
from auth.verifier import Verifier, parse_bearer
from core.errors import AuthenticationError

IDENTITY_HEADER = "X-Authenticated-User"

logger = logging.getLogger("tokengate.api")

router = APIRouter()


@router.get("/auth", response_class=PlainTextResponse)
async def check_identity(request: Request, verifier: Verifier = Depends(get_verifier)) -> PlainTextResponse:
    """Resolve the bearer token to a name, or answer 401.

    A missing or malformed Authorization header is rejected before any bcrypt
    work is done. The token itself is never logged.
    """
    header = request.headers.get("Authorization")
    token = parse_bearer(header)
    if token is None:
        logger.info("Auth failed: %s Bearer token", "malformed" if header else "missing")
        raise AuthenticationError("Unauthorized: Missing Bearer token.")

    try:
        name = await verifier.identify(token)
    except AuthenticationError:
        logger.info("Auth failed: invalid token")
        raise

    logger.info("Auth success for %s", name)
    return PlainTextResponse("OK", headers={IDENTITY_HEADER: name})
