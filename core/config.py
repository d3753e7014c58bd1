"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for tokengate happen here. No module should
call os.getenv() or os.environ.get() directly -- import get_settings() instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. admin_token -> ADMIN_TOKEN).

  @field_validator / @model_validator: bind address and bcrypt cost are
      checked at startup so a bad deployment fails before the first request.

Security notes:
  The service answers forward-auth sub-requests from a co-located reverse
  proxy. It must never listen on a public or wildcard address, so the bind
  host is restricted to loopback and private ranges.

  An empty ADMIN_TOKEN is NOT a startup failure. The identity check keeps
  working; the management endpoints report a configuration error instead.

Layer rule: core/ is the kernel. This module may not import from api/ or auth/.
"""

import ipaddress
import logging
from functools import lru_cache
from pathlib import Path

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("tokengate.config")

# bcrypt accepts log2 rounds in this range; gensalt() raises outside it.
_MIN_ROUNDS = 4
_MAX_ROUNDS = 31

_SHORT_ADMIN_TOKEN = 16


def validate_bind_host(host: str) -> str:
    """Return host unchanged if it is a loopback or private address.

    "localhost" is accepted by name. Anything else must parse as an IP
    address; the wildcard addresses (0.0.0.0, ::) and public addresses are
    rejected.
    """
    if host == "localhost":
        return host
    try:
        addr = ipaddress.ip_address(host)
    except ValueError as exc:
        raise ValueError(f"Bind host must be 'localhost' or an IP address, got {host!r}.") from exc
    if addr.is_unspecified:
        raise ValueError(f"Refusing to bind to wildcard address {host}. Use 127.0.0.1.")
    if not (addr.is_loopback or addr.is_private):
        raise ValueError(f"Refusing to bind to public address {host}. Use a loopback or internal address.")
    return host


class Settings(BaseSettings):
    """Gateway settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in test
    environments without a real .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Listener
    # ------------------------------------------------------------------

    internal_auth_host: str = "127.0.0.1"
    internal_auth_port: int = 3000

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    # Empty string is the sentinel for "not configured".
    admin_token: str = ""
    admin_rate_limit: str = "30/minute"

    # ------------------------------------------------------------------
    # Storage and hashing
    # ------------------------------------------------------------------

    tokens_file: Path = Path("/data/tokens.json")
    bcrypt_rounds: int = 10

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------

    log_level: str = "INFO"

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @field_validator("internal_auth_host")
    @classmethod
    def check_bind_host(cls, value: str) -> str:
        return validate_bind_host(value)

    @field_validator("bcrypt_rounds")
    @classmethod
    def check_rounds(cls, value: int) -> int:
        if not _MIN_ROUNDS <= value <= _MAX_ROUNDS:
            raise ValueError(f"BCRYPT_ROUNDS must be between {_MIN_ROUNDS} and {_MAX_ROUNDS}.")
        return value

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown LOG_LEVEL {value!r}.")
        return level

    @model_validator(mode="after")
    def warn_on_weak_admin_token(self) -> "Settings":
        """Warn (do not fail) when the admin token is set but short."""
        if self.admin_token and len(self.admin_token) < _SHORT_ADMIN_TOKEN:
            logger.warning(
                "ADMIN_TOKEN is shorter than %d characters. Use a long random value.",
                _SHORT_ADMIN_TOKEN,
            )
        return self

    @property
    def admin_configured(self) -> bool:
        return bool(self.admin_token)


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
