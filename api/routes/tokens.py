"""
api/routes/tokens.py -- Token lifecycle REST endpoints (admin only).

Routes:
  POST   /tokens          -- issue a token for a name; plaintext returned once
  GET    /tokens          -- list token names (never tokens or digests)
  DELETE /tokens/{name}   -- revoke the token for a name

Auth policy: every route requires the admin token via require_admin.
  No ADMIN_TOKEN configured -> 500 server_misconfigured on every route.
  Wrong or missing admin token -> 401.

Order inside each request:
  1. @admin_limit     -- rate limit (ADMIN_RATE_LIMIT), so rejected guesses count
  2. require_admin()  -- called first thing in the handler
  3. body parsing     -- POST reads its JSON only after the gate, so a caller
                         without the admin token never sees validation detail

Cache-Control: no-store on the creation response -- it carries a secret.
"""

# No "from __future__ import annotations" here: FastAPI resolves string
# annotations against the wrapper's module globals once @admin_limit wraps
# the handler.
from fastapi import APIRouter, Depends, Request, Response
from pydantic import ValidationError as PydanticValidationError

from api.limiter import admin_limit
from api.models import TokenCreate, TokenCreatedResponse, TokenRevokedResponse
from auth.dependencies import get_token_store, require_admin
from auth.store import TokenStore
from core.errors import ValidationError

router = APIRouter()


async def _read_token_create(request: Request) -> TokenCreate:
    """Parse the POST /tokens body, mapping any failure to ValidationError (400)."""
    try:
        return TokenCreate.model_validate_json(await request.body())
    except PydanticValidationError as exc:
        raise ValidationError(
            '"name" field (non-empty string) is required for the token.',
            detail=str(exc.errors(include_url=False, include_input=False)),
        ) from exc


@router.post(
    "/tokens",
    response_model=TokenCreatedResponse,
    status_code=201,
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": TokenCreate.model_json_schema()}},
        }
    },
)
@admin_limit
async def create_token(
    request: Request,
    response: Response,
    store: TokenStore = Depends(get_token_store),
) -> TokenCreatedResponse:
    """Issue a new token. The raw token is shown ONCE and never stored."""
    require_admin(request)
    body = await _read_token_create(request)
    token = await store.create(body.name)
    response.headers["Cache-Control"] = "no-store"
    return TokenCreatedResponse(name=body.name.strip(), token=token)


@router.get("/tokens", response_model=list[str])
@admin_limit
async def list_tokens(request: Request, store: TokenStore = Depends(get_token_store)) -> list[str]:
    """List the names of all issued tokens."""
    require_admin(request)
    return store.list_names()


@router.delete("/tokens/{name}", response_model=TokenRevokedResponse)
@admin_limit
async def revoke_token(
    request: Request,
    name: str,
    store: TokenStore = Depends(get_token_store),
) -> TokenRevokedResponse:
    """Revoke a token by name. The old token stops working immediately."""
    require_admin(request)
    await store.revoke(name)
    return TokenRevokedResponse(name=name)
