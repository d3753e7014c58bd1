"""
tests/conftest.py -- Shared test fixtures for tokengate.

This module provides:
  - make_store(): a TokenStore backed by a file in a temp directory
  - _patch_lifespan(): wires test objects into app.state, bypassing real startup
  - api_client: TestClient with an admin token configured
  - unconfigured_client: TestClient with no admin token (management disabled)

BCRYPT_ROUNDS and ADMIN_RATE_LIMIT must be set before any auth/core import:
auth/tokens.py reads the cost factor once at module load, and the default
30/minute admin limit would trip across a module's worth of requests.
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import Generator
from contextlib import asynccontextmanager
from pathlib import Path

# CRITICAL: set before any auth/core import so get_settings() sees them.
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("ADMIN_RATE_LIMIT", "1000/minute")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.admin import AdminGate
from auth.store import TokenStore
from auth.verifier import Verifier

ADMIN_TOKEN = "test-admin-token-0123456789abcdef"


def make_store(directory: Path) -> TokenStore:
    """Create and load a TokenStore at <directory>/data/tokens.json."""
    store = TokenStore(directory / "data" / "tokens.json")
    store.load()
    return store


def _patch_lifespan(store: TokenStore, gate: AdminGate):
    """Return an async context manager that replaces the real lifespan.

    Wires the test store and gate into app.state so routes never touch the
    default /data/tokens.json or the process environment.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.token_store = store
        app.state.verifier = Verifier(store)
        app.state.admin_gate = gate
        yield

    return test_lifespan


@pytest.fixture
def store(tmp_path: Path) -> TokenStore:
    return make_store(tmp_path)


@pytest.fixture
def store_factory(tmp_path: Path):
    """Build a fresh TokenStore over the same file -- simulates a restart."""
    return lambda: make_store(tmp_path)


# ---------------------------------------------------------------------------
# Module-scoped fixtures -- one TestClient per test module for speed
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def api_client(tmp_path_factory) -> Generator[tuple[TestClient, dict[str, str], TokenStore], None, None]:
    """Yield (client, admin_headers, store) with ADMIN_TOKEN configured."""
    token_store = make_store(tmp_path_factory.mktemp("api"))
    app.router.lifespan_context = _patch_lifespan(token_store, AdminGate(ADMIN_TOKEN))

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, {"Authorization": f"Bearer {ADMIN_TOKEN}"}, token_store


@pytest.fixture(scope="module")
def unconfigured_client(tmp_path_factory) -> Generator[tuple[TestClient, str], None, None]:
    """Yield (client, token) with no ADMIN_TOKEN; token was issued for "svc-pre"."""
    token_store = make_store(tmp_path_factory.mktemp("unconfigured"))
    token = asyncio.run(token_store.create("svc-pre"))
    app.router.lifespan_context = _patch_lifespan(token_store, AdminGate(""))

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, token
