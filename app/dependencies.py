"""FastAPI dependency injection helpers."""

from __future__ import annotations

import threading
import time
from typing import Any

from fastapi import Depends, Request

from app.config import settings
from app.schemas.auth import AuthUser
from app.services.auth_service import AuthService
from app.utils.errors import ForbiddenError, UnauthorizedError
from app.utils.supabase_client import get_service_client, get_supabase_client
from supabase import Client

_token_cache: dict[str, tuple[float, AuthUser]] = {}
_cache_lock = threading.Lock()


def _cache_get(cache: dict[Any, tuple[float, Any]], key: Any) -> Any | None:
    """Return a cache value when present and not expired."""
    now = time.monotonic()
    with _cache_lock:
        entry = cache.get(key)
        if not entry:
            return None
        expires_at, value = entry
        if expires_at <= now:
            cache.pop(key, None)
            return None
        return value


def _cache_set(
    cache: dict[Any, tuple[float, Any]],
    key: Any,
    value: Any,
    ttl_seconds: int,
    max_entries: int,
) -> None:
    """Store a bounded cache value with TTL."""
    if ttl_seconds <= 0:
        return

    with _cache_lock:
        bounded_max_entries = max(1, max_entries)
        if len(cache) >= bounded_max_entries:
            oldest_key = next(iter(cache))
            cache.pop(oldest_key, None)
        cache[key] = (time.monotonic() + ttl_seconds, value)


def forget_token(token: str) -> None:
    """Drop a token from the verification cache (used on sign-out)."""
    with _cache_lock:
        _token_cache.pop(token, None)


def get_auth_service() -> AuthService:
    """Return the auth service used for token verification and sign-out."""
    return AuthService(get_supabase_client())


def get_db_client() -> Client:
    """Return the privileged Supabase client used by backend services."""
    return get_service_client()


def extract_token(request: Request) -> str | None:
    """Read the access token from the auth cookie, then the bearer header."""
    cookie_token = request.cookies.get(settings.auth_cookie_name)
    if cookie_token:
        return cookie_token

    authorization = request.headers.get("Authorization")
    if authorization and authorization.startswith("Bearer "):
        return authorization.split(" ", 1)[1].strip() or None
    return None


def verify_id_token(token: str, service: AuthService) -> AuthUser:
    """Verify ``token`` with the auth provider, using a short-lived cache.

    Raises:
        UnauthorizedError: 401 if the token cannot be validated.
    """
    cached_user = _cache_get(_token_cache, token)
    if cached_user is not None:
        return cached_user

    user = service.verify_id_token(token)
    _cache_set(
        _token_cache,
        token,
        user,
        settings.auth_token_cache_ttl_seconds,
        settings.auth_token_cache_max_entries,
    )
    return user


def get_current_user(
    request: Request,
    service: AuthService = Depends(get_auth_service),
) -> AuthUser | None:
    """Return the caller's claims, or None when no valid token is present."""
    token = extract_token(request)
    if not token:
        return None
    try:
        return verify_id_token(token, service)
    except UnauthorizedError:
        return None


def require_auth(user: AuthUser | None = Depends(get_current_user)) -> AuthUser:
    """Return the authenticated user or fail with 401."""
    if user is None:
        raise UnauthorizedError("Authentication required")
    return user


def require_admin(user: AuthUser = Depends(require_auth)) -> AuthUser:
    """Return the authenticated user when their claims mark them as admin."""
    if user.claims.get("role") != "admin":
        raise ForbiddenError("Admin access required")
    return user
