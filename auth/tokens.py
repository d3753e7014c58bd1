"""
auth/tokens.py -- Bearer token generation and bcrypt hashing.

Security design decisions:
  Generation: secrets.token_bytes(33) gives 264 bits of entropy, encoded as
       URL-safe base64 (44 chars, no padding) behind a fixed "sk-proj-" prefix
       so a leaked value is recognizable in logs and secret scanners. New tokens
       are not checked against existing digests for collision -- at this
       entropy a collision is not a practical event.

  Hashing: bcrypt via the bcrypt package directly (no passlib wrapper). The
       cost factor comes from Settings.bcrypt_rounds and is never taken from a
       request. Digests are salted, so the same token never hashes to the same
       string twice and a digest cannot be used as a lookup key.

  Async wrappers: one bcrypt call is ~100ms at the default cost. hash_token()
       and verify_token() run the work in a worker thread via
       asyncio.to_thread so concurrent requests are not serialized behind it.

Layer rule: no imports from api/. Import from core/ is allowed.
"""

from __future__ import annotations

import asyncio
import base64
import secrets

import bcrypt

from core.config import get_settings

# ---------------------------------------------------------------------------
# Config -- read once at module load via the lru_cache singleton
# ---------------------------------------------------------------------------

_settings = get_settings()

TOKEN_PREFIX = "sk-proj-"
TOKEN_LENGTH = 44
_TOKEN_BYTES = 33  # 33 bytes -> exactly 44 base64url chars

# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


def generate_token() -> str:
    """Generate a new bearer token in the format: sk-proj-<44 URL-safe chars>."""
    raw = base64.urlsafe_b64encode(secrets.token_bytes(_TOKEN_BYTES)).decode("ascii")
    return TOKEN_PREFIX + raw.rstrip("=")[:TOKEN_LENGTH]


# ---------------------------------------------------------------------------
# Hashing (bcrypt -- direct usage)
# ---------------------------------------------------------------------------


def hash_token_sync(raw: str, rounds: int | None = None) -> str:
    """Return a bcrypt digest of the given plaintext token.

    Blocks for the full bcrypt cost. Request handlers must use hash_token().
    """
    salt = bcrypt.gensalt(rounds=rounds or _settings.bcrypt_rounds)
    return bcrypt.hashpw(raw.encode("utf-8"), salt).decode("utf-8")


def verify_token_sync(raw: str, digest: str) -> bool:
    """Return True if the plaintext token matches the bcrypt digest.

    Never raises. Empty input, a malformed digest, or a secret bcrypt refuses
    (over 72 bytes) all count as a mismatch.
    """
    if not raw or not digest:
        return False
    try:
        return bcrypt.checkpw(raw.encode("utf-8"), digest.encode("utf-8"))
    except (ValueError, TypeError):
        return False


async def hash_token(raw: str) -> str:
    """Hash off the event loop."""
    return await asyncio.to_thread(hash_token_sync, raw)


async def verify_token(raw: str, digest: str) -> bool:
    """Verify off the event loop."""
    if not raw or not digest:
        return False
    return await asyncio.to_thread(verify_token_sync, raw, digest)
