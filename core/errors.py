"""
core/errors.py -- Domain exception taxonomy for tokengate.

Every error the gateway reports to a caller is one of these. Each class
carries the HTTP status and the machine-readable error code that the API
layer puts in the ErrorResponse envelope, so auth/ can raise them without
knowing anything about FastAPI.

Messages are shown to clients. They must never contain a digest, a
plaintext credential, or the admin token.
"""

from __future__ import annotations


class GatewayError(Exception):
    """Base exception for all tokengate errors."""

    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: str, *, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class ValidationError(GatewayError):
    """Raised when input has the wrong shape (e.g. empty token name)."""

    status_code = 400
    code = "validation_error"


class AuthenticationError(GatewayError):
    """Raised when a bearer credential is missing, malformed, or unknown."""

    status_code = 401
    code = "unauthorized"


class NotFoundError(GatewayError):
    """Raised when a named credential does not exist."""

    status_code = 404
    code = "not_found"


class ConflictError(GatewayError):
    """Raised when a credential name is already taken."""

    status_code = 409
    code = "conflict"


class ConfigurationError(GatewayError):
    """Raised when an admin operation is attempted with no ADMIN_TOKEN set."""

    status_code = 500
    code = "server_misconfigured"


class PersistenceError(GatewayError):
    """Raised when the token file cannot be written.

    On the load path this is handled inside the store (reset to empty). After
    a mutation it reaches the caller as a 500: the change was not saved.
    """

    status_code = 500
    code = "persistence_error"
