"""Authentication endpoints."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from app.config import settings
from app.dependencies import (
    extract_token,
    forget_token,
    get_auth_service,
    get_db_client,
    require_auth,
)
from app.jobs.client import emit
from app.schemas.auth import (
    AuthUser,
    OAuthCallbackRequest,
    OAuthProvider,
    PasswordResetRequest,
    SessionTokens,
    SignInRequest,
    SignUpRequest,
)
from app.schemas.user import UserProfile
from app.services.auth_service import AuthService
from app.services.user_service import UserService
from app.utils.errors import AppError
from app.utils.supabase_client import new_auth_client
from supabase import Client

router = APIRouter()
logger = logging.getLogger(__name__)


def get_session_auth_service() -> AuthService:
    """Return an auth service backed by a fresh, request-scoped client."""
    return AuthService(new_auth_client())


def _set_auth_cookie(response: Response, session: Any) -> None:
    response.set_cookie(
        settings.auth_cookie_name,
        session.access_token,
        max_age=getattr(session, "expires_in", None),
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


def _session_payload(session: Any) -> dict[str, Any] | None:
    if session is None:
        return None
    return SessionTokens(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_in=getattr(session, "expires_in", None),
    ).model_dump()


def sync_profile(client: Client, identity: AuthUser) -> UserProfile | None:
    """Create or touch the caller's profile.

    Failures are logged and swallowed so a successful sign-in is not undone
    by a profile write error.
    """
    try:
        profile, created = UserService(client).create_user_profile(identity)
    except AppError as exc:
        logger.error("user profile creation failed uid=%s error=%s", identity.uid, exc.message)
        return None

    if created and profile.email:
        emit(
            "user/created",
            {
                "uid": profile.uid,
                "email": profile.email,
                "display_name": profile.display_name or None,
                "sign_up_method": profile.metadata.sign_up_method,
            },
        )
    return profile


@router.post("/sign-up", status_code=201)
def sign_up(
    payload: SignUpRequest,
    response: Response,
    service: AuthService = Depends(get_session_auth_service),
    client: Client = Depends(get_db_client),
) -> dict:
    """Create an email/password account and its profile."""
    result = service.sign_up(payload.email, payload.password, payload.display_name)
    identity = AuthUser.from_supabase_user(result.user)
    if payload.display_name and not identity.display_name:
        identity = identity.model_copy(update={"display_name": payload.display_name})

    profile = sync_profile(client, identity)
    if result.session is not None:
        _set_auth_cookie(response, result.session)
    return {
        "user": identity,
        "profile": profile,
        "session": _session_payload(result.session),
    }


@router.post("/sign-in")
def sign_in(
    payload: SignInRequest,
    response: Response,
    service: AuthService = Depends(get_session_auth_service),
    client: Client = Depends(get_db_client),
) -> dict:
    """Sign in with email/password and touch the profile."""
    result = service.sign_in(payload.email, payload.password)
    identity = AuthUser.from_supabase_user(result.user)
    profile = sync_profile(client, identity)
    _set_auth_cookie(response, result.session)
    return {
        "user": identity,
        "profile": profile,
        "session": _session_payload(result.session),
    }


@router.get("/oauth/{provider}")
def oauth_start(
    provider: OAuthProvider,
    service: AuthService = Depends(get_session_auth_service),
) -> dict:
    """Return the provider URL to redirect the browser to."""
    return {"provider": provider, "url": service.oauth_url(provider)}


@router.post("/callback")
def oauth_callback(
    payload: OAuthCallbackRequest,
    response: Response,
    service: AuthService = Depends(get_session_auth_service),
    client: Client = Depends(get_db_client),
) -> dict:
    """Validate tokens from the front-end OAuth callback and sync the profile."""
    result = service.complete_oauth(payload.access_token, payload.refresh_token)
    identity = AuthUser.from_supabase_user(result.user)
    profile = sync_profile(client, identity)
    if result.session is not None:
        _set_auth_cookie(response, result.session)
    return {
        "user": identity,
        "profile": profile,
        "session": _session_payload(result.session),
    }


@router.post("/password-reset")
def password_reset(
    payload: PasswordResetRequest,
    service: AuthService = Depends(get_session_auth_service),
) -> dict:
    """Send a password reset email."""
    service.send_password_reset(payload.email)
    return {"sent": True}


@router.post("/sign-out", response_model=None)
def sign_out(
    request: Request,
    response: Response,
    service: AuthService = Depends(get_auth_service),
) -> dict | JSONResponse:
    """Revoke the current session, if any, and clear the auth cookie.

    The cookie is cleared even when the provider refuses the revoke, so an
    expired or already revoked token never gets stuck in the browser.
    """
    token = extract_token(request)
    if token:
        forget_token(token)
        try:
            service.sign_out(token)
        except AppError as exc:
            failed = JSONResponse(status_code=exc.status_code, content=exc.to_dict())
            failed.delete_cookie(settings.auth_cookie_name)
            return failed
    response.delete_cookie(settings.auth_cookie_name)
    return {"success": True}


@router.get("/session")
def auth_session(user: AuthUser = Depends(require_auth)) -> dict:
    """Return the currently authenticated user's claims."""
    return {"user": user}
