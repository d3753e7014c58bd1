"""
auth/admin.py -- Admin token gate for the token management endpoints.

One process-wide admin token, supplied at startup via ADMIN_TOKEN, authorizes
every lifecycle operation. There are three outcomes, not two: when no admin
token is configured the gate reports MISCONFIGURED so operators can tell
"management disabled" apart from "wrong admin token".

The comparison uses hmac.compare_digest so response time does not reveal how
many leading bytes of a guess were correct.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import hmac
from enum import Enum


class AdminDecision(str, Enum):
    allowed = "allowed"
    denied = "denied"
    misconfigured = "misconfigured"


class AdminGate:
    def __init__(self, admin_token: str | None) -> None:
        self._admin_token = admin_token or ""

    @property
    def configured(self) -> bool:
        return bool(self._admin_token)

    def authorize(self, presented: str | None) -> AdminDecision:
        """Check presented against the admin token.

        MISCONFIGURED takes precedence over everything, including a missing
        header, so a server without ADMIN_TOKEN answers every management call
        the same way.
        """
        if not self._admin_token:
            return AdminDecision.misconfigured
        if not presented:
            return AdminDecision.denied
        if hmac.compare_digest(presented.encode("utf-8"), self._admin_token.encode("utf-8")):
            return AdminDecision.allowed
        return AdminDecision.denied
