"""
API request and response models for tokengate REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py, which
own the internal representation. Route handlers map between the two.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class TokenCreate(BaseModel):
    """Request body for POST /tokens.

    StrictStr rejects numbers and other JSON types instead of coercing them.
    Blank names are rejected by TokenStore.create(), which trims first.
    """

    name: StrictStr = Field(max_length=255, description="Name of the service or user the token identifies.")


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class TokenCreatedResponse(BaseModel):
    """Response for POST /tokens. token is shown once and never again."""

    model_config = ConfigDict(frozen=True)

    message: str = "Token created successfully."
    name: str
    token: str


class TokenRevokedResponse(BaseModel):
    """Response for DELETE /tokens/{name}."""

    model_config = ConfigDict(frozen=True)

    message: str = "Token deleted successfully."
    name: str


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str] = Field(default_factory=dict)
