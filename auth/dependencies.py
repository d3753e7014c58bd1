"""
auth/dependencies.py -- FastAPI Depends() helpers for the token routes.

get_token_store() and get_verifier() hand route handlers the objects the
lifespan placed on app.state. require_admin() guards every /tokens route; the
handlers call it directly so the admin rate limit sees every attempt.

Layer rule: no imports from api/.
  auth/dependencies.py may import from fastapi (for Request) because this
  module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

import logging

from fastapi import Request

from auth.admin import AdminDecision, AdminGate
from auth.store import TokenStore
from auth.verifier import Verifier, parse_bearer
from core.errors import AuthenticationError, ConfigurationError

logger = logging.getLogger("tokengate.auth")


def get_token_store(request: Request) -> TokenStore:
    return request.app.state.token_store


def get_verifier(request: Request) -> Verifier:
    return request.app.state.verifier


def require_admin(request: Request) -> None:
    """Allow the request only with the configured admin token.

    Raises ConfigurationError (500) when ADMIN_TOKEN is unset -- regardless of
    any header sent -- and AuthenticationError (401) on a missing or wrong
    admin token.

    Call it first thing in a handler, after the rate limit and before the
    request body is read:
        require_admin(request)
    """
    gate: AdminGate = request.app.state.admin_gate
    decision = gate.authorize(parse_bearer(request.headers.get("Authorization")))
    if decision is AdminDecision.misconfigured:
        logger.error(
            "ADMIN_TOKEN is not set. Blocked %s %s -- management endpoints are disabled.",
            request.method,
            request.url.path,
        )
        raise ConfigurationError("Server configuration error: Admin token not set.")
    if decision is AdminDecision.denied:
        raise AuthenticationError("Unauthorized: Invalid or missing admin token.")
