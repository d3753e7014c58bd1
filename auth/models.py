"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). The store owns the
mapping; the verifier walks a list of these records.

Layer rule: no imports from api/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TokenRecord:
    """A named bearer credential as it exists at rest.

    digest is the bcrypt hash of the issued token. The raw token is returned
    ONCE at creation and then unrecoverable. Callers must re-issue if lost.
    """

    name: str
    digest: str
