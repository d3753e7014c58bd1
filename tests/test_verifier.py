"""Unit tests for auth/verifier.py -- bearer parsing and identification."""

import asyncio

import pytest

from auth.verifier import Verifier, parse_bearer
from core.errors import AuthenticationError


class TestParseBearer:
    def test_valid_header(self):
        assert parse_bearer("Bearer sk-proj-abc") == "sk-proj-abc"

    @pytest.mark.parametrize(
        "header",
        [None, "", "Bearer", "Bearer ", "bearer sk-proj-abc", "Basic dXNlcjpwYXNz", "sk-proj-abc", "Bearer a b"],
    )
    def test_missing_or_malformed(self, header):
        assert parse_bearer(header) is None


class TestIdentify:
    def test_issued_token_resolves_to_name(self, store):
        asyncio.run(store.create("svc-a"))
        token_b = asyncio.run(store.create("svc-b"))
        assert asyncio.run(Verifier(store).identify(token_b)) == "svc-b"

    def test_unknown_token_rejected(self, store):
        asyncio.run(store.create("svc-a"))
        with pytest.raises(AuthenticationError):
            asyncio.run(Verifier(store).identify("sk-proj-not-a-real-token"))

    def test_revoked_token_rejected(self, store):
        token = asyncio.run(store.create("svc-a"))
        asyncio.run(store.revoke("svc-a"))
        with pytest.raises(AuthenticationError):
            asyncio.run(Verifier(store).identify(token))

    @pytest.mark.parametrize("token", [None, ""])
    def test_empty_token_rejected_without_comparison(self, store, monkeypatch, token):
        asyncio.run(store.create("svc-a"))

        def fail(*args, **kwargs):
            raise AssertionError("no digest comparison expected")

        monkeypatch.setattr("auth.verifier.verify_token", fail)
        with pytest.raises(AuthenticationError):
            asyncio.run(Verifier(store).identify(token))

    def test_empty_store_rejects(self, store):
        with pytest.raises(AuthenticationError):
            asyncio.run(Verifier(store).identify("sk-proj-anything"))
