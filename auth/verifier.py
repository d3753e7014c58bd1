"""
auth/verifier.py -- Resolve a presented bearer token to a token name.

Digests are salted bcrypt hashes, so a presented token cannot be used as a
lookup key. identify() walks every stored digest and returns the first match.
Cost is linear in store size (one bcrypt compare per entry); that is fine for
the tens to low hundreds of service tokens this gateway is meant to hold.
A store much larger than that would need a non-secret lookup id stored
alongside each digest.

Layer rule: no imports from api/.
"""

from __future__ import annotations

from auth.store import TokenStore
from auth.tokens import verify_token
from core.errors import AuthenticationError

_BEARER = "Bearer "


def parse_bearer(header: str | None) -> str | None:
    """Return the token from an "Authorization: Bearer <token>" value, else None."""
    if not header or not header.startswith(_BEARER):
        return None
    token = header[len(_BEARER):].strip()
    if not token or " " in token:
        return None
    return token


class Verifier:
    def __init__(self, store: TokenStore) -> None:
        self.store = store

    async def identify(self, token: str | None) -> str:
        """Return the name whose digest matches token.

        Raises AuthenticationError without doing any bcrypt work when token is
        empty, and after a full scan when nothing matches.
        """
        if not token:
            raise AuthenticationError("Missing Bearer token.")
        for record in self.store.records():
            if await verify_token(token, record.digest):
                return record.name
        raise AuthenticationError("Invalid token.")
