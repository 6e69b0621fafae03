"""Settings validation tests."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from app.config import Settings

REQUIRED = {
    "supabase_url": "https://example.supabase.co/",
    "supabase_anon_key": "anon",
    "supabase_service_key": "service",
}


def test_settings_normalize_url() -> None:
    """Trailing slashes should be stripped from the Supabase URL."""
    config = Settings(_env_file=None, **REQUIRED)
    assert config.supabase_url == "https://example.supabase.co"


def test_settings_reject_non_http_url() -> None:
    """A non-http Supabase URL should fail at startup."""
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **{**REQUIRED, "supabase_url": "ftp://example"})


def test_settings_reject_blank_keys() -> None:
    """Blank keys should fail at startup."""
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **{**REQUIRED, "supabase_service_key": "  "})


def test_settings_reject_unknown_environment() -> None:
    """Only development, test and production are valid environments."""
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **{**REQUIRED, "environment": "staging"})


def test_origins_list_splits_and_trims() -> None:
    """ALLOWED_ORIGINS should be parsed as a comma-separated list."""
    config = Settings(
        _env_file=None,
        **REQUIRED,
        allowed_origins="http://a.test, http://b.test ,",
    )
    assert config.origins_list == ["http://a.test", "http://b.test"]
