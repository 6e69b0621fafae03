"""Pytest fixtures for backend tests."""

from __future__ import annotations

import os
from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient


def _set_default_env() -> None:
    os.environ.setdefault("SUPABASE_URL", "https://example.supabase.co")
    os.environ.setdefault("SUPABASE_ANON_KEY", "anon-key")
    os.environ.setdefault("SUPABASE_SERVICE_KEY", "service-key")
    os.environ.setdefault("ENVIRONMENT", "test")
    os.environ.setdefault("ENABLE_EVENT_PUBLISHING", "false")


# Settings are read at import time, so the environment must be ready before
# test modules import anything from ``app``.
_set_default_env()

from fakes import FakeAuthService, FakeSupabaseClient  # noqa: E402


@pytest.fixture
def db() -> FakeSupabaseClient:
    """Empty in-memory Supabase stand-in."""
    return FakeSupabaseClient()


@pytest.fixture
def auth_service() -> FakeAuthService:
    """Token verifier with no known tokens."""
    return FakeAuthService()


@pytest.fixture
def client(db: FakeSupabaseClient, auth_service: FakeAuthService) -> Iterator[TestClient]:
    """Create a FastAPI test client wired to the fakes."""
    from app import dependencies
    from app.main import app

    app.dependency_overrides[dependencies.get_db_client] = lambda: db
    app.dependency_overrides[dependencies.get_auth_service] = lambda: auth_service
    dependencies._token_cache.clear()
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        dependencies._token_cache.clear()
