"""Sign-up, sign-in, OAuth and admin calls against Supabase Auth."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from app.config import settings
from app.schemas.auth import AuthUser, OAuthProvider
from app.utils.errors import AuthOperationError, InvalidInputError, NotFoundError, UnauthorizedError
from supabase import AuthError, Client

logger = logging.getLogger(__name__)

DEFAULT_AUTH_ERROR_MESSAGE = "An unexpected error occurred. Please try again."
SIGN_OUT_ERROR_MESSAGE = "Failed to sign out. Please try again."
NETWORK_ERROR_CODE = "network_error"

AUTH_ERROR_MESSAGES: dict[str, str] = {
    "email_exists": "This email is already registered. Please sign in instead.",
    "user_already_exists": "This email is already registered. Please sign in instead.",
    "email_address_invalid": "Please enter a valid email address.",
    "validation_failed": "Please enter a valid email address.",
    "user_banned": "This account has been disabled. Please contact support.",
    "user_not_found": "No account found with this email. Please sign up first.",
    "invalid_credentials": "Incorrect email or password. Please try again.",
    "email_not_confirmed": "Please confirm your email address before signing in.",
    "weak_password": "Password should be at least 6 characters long.",
    NETWORK_ERROR_CODE: "Network error. Please check your connection and try again.",
    "request_timeout": "Network error. Please check your connection and try again.",
    "over_request_rate_limit": "Too many failed attempts. Please try again later.",
    "over_email_send_rate_limit": "Too many failed attempts. Please try again later.",
    "bad_oauth_callback": "Sign-in was cancelled. Please try again.",
    "bad_oauth_state": "Sign-in was cancelled. Please try again.",
    "provider_disabled": "This sign-in provider is not enabled.",
    "oauth_provider_not_supported": "This sign-in provider is not enabled.",
    "session_not_found": "Your session has expired. Please sign in again.",
    "bad_jwt": "Your session has expired. Please sign in again.",
}

OAUTH_QUERY_PARAMS: dict[str, dict[str, str]] = {
    "google": {"prompt": "select_account"},
    "github": {},
}


def get_auth_error_code(exc: BaseException) -> str:
    """Return the provider error code for ``exc`` (empty when unknown)."""
    if isinstance(exc, httpx.HTTPError):
        return NETWORK_ERROR_CODE
    code = getattr(exc, "code", None)
    return str(code) if code else ""


def get_auth_error_message(code: str) -> str:
    """Map a provider error code to a user-facing message."""
    return AUTH_ERROR_MESSAGES.get(code, DEFAULT_AUTH_ERROR_MESSAGE)


def _auth_failure(action: str, exc: BaseException, **context: Any) -> AuthOperationError:
    code = get_auth_error_code(exc)
    logger.error("%s failed code=%s context=%s error=%s", action, code or "-", context, exc)
    return AuthOperationError(get_auth_error_message(code), vendor_code=code or None)


class AuthService:
    """User-facing auth flows.

    Use a client from ``new_auth_client()`` for flows that create a session.
    """

    def __init__(self, client: Client) -> None:
        self.client = client

    def sign_up(self, email: str, password: str, display_name: str | None = None) -> Any:
        """Create an email/password account and return the provider response."""
        options: dict[str, Any] = {}
        if display_name:
            options["data"] = {"display_name": display_name}
        try:
            response = self.client.auth.sign_up(
                {"email": email, "password": password, "options": options}
            )
        except (AuthError, httpx.HTTPError) as exc:
            raise _auth_failure("sign up", exc, email=email) from exc

        if response.user is None:
            raise AuthOperationError(DEFAULT_AUTH_ERROR_MESSAGE)
        logger.info("sign up successful uid=%s", response.user.id)
        return response

    def sign_in(self, email: str, password: str) -> Any:
        """Sign in with email/password and return the provider response."""
        try:
            response = self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except (AuthError, httpx.HTTPError) as exc:
            raise _auth_failure("sign in", exc, email=email) from exc

        if response.user is None or response.session is None:
            raise AuthOperationError(get_auth_error_message("invalid_credentials"))
        logger.info("sign in successful uid=%s", response.user.id)
        return response

    def oauth_url(self, provider: OAuthProvider) -> str:
        """Return the provider consent URL the browser should be sent to."""
        if provider not in OAUTH_QUERY_PARAMS:
            raise InvalidInputError(f"unsupported provider: {provider}")
        options: dict[str, Any] = {"redirect_to": settings.oauth_redirect_url}
        if OAUTH_QUERY_PARAMS[provider]:
            options["query_params"] = OAUTH_QUERY_PARAMS[provider]
        try:
            response = self.client.auth.sign_in_with_oauth(
                {"provider": provider, "options": options}
            )
        except (AuthError, httpx.HTTPError) as exc:
            raise _auth_failure("provider sign in", exc, provider=provider) from exc
        return response.url

    def complete_oauth(self, access_token: str, refresh_token: str) -> Any:
        """Adopt the tokens returned by the OAuth redirect."""
        try:
            response = self.client.auth.set_session(access_token, refresh_token)
        except (AuthError, httpx.HTTPError) as exc:
            raise _auth_failure("provider sign in", exc) from exc

        if response.user is None:
            raise AuthOperationError(DEFAULT_AUTH_ERROR_MESSAGE)
        logger.info("provider sign in successful uid=%s", response.user.id)
        return response

    def send_password_reset(self, email: str) -> None:
        """Ask the provider to email a password reset link."""
        options: dict[str, Any] = {}
        if settings.password_reset_redirect_url:
            options["redirect_to"] = settings.password_reset_redirect_url
        try:
            self.client.auth.reset_password_for_email(email, options)
        except (AuthError, httpx.HTTPError) as exc:
            raise _auth_failure("password reset", exc, email=email) from exc
        logger.info("password reset email sent")

    def sign_out(self, access_token: str) -> None:
        """Revoke the session behind ``access_token``."""
        try:
            self.client.auth.admin.sign_out(access_token)
        except (AuthError, httpx.HTTPError) as exc:
            logger.error("sign out failed error=%s", exc)
            raise AuthOperationError(
                SIGN_OUT_ERROR_MESSAGE,
                vendor_code=get_auth_error_code(exc) or None,
            ) from exc
        logger.info("sign out successful")

    def verify_id_token(self, token: str) -> AuthUser:
        """Validate an access token with the provider and return its claims."""
        try:
            response = self.client.auth.get_user(token)
        except (AuthError, httpx.HTTPError) as exc:
            logger.warning("id token verification failed error=%s", exc)
            raise UnauthorizedError("Invalid or expired token") from exc

        if not response or not response.user:
            raise UnauthorizedError("Invalid token")
        return AuthUser.from_supabase_user(response.user)


class AuthAdminService:
    """Privileged user management. Requires the service-role client."""

    USERS_PAGE_SIZE = 200

    def __init__(self, client: Client) -> None:
        self.client = client

    def set_custom_user_claims(self, uid: str, claims: dict[str, Any]) -> AuthUser:
        """Merge ``claims`` into the user's app metadata.

        Supabase merges top-level keys, so a claim is removed by setting it
        to ``None`` rather than by leaving it out.
        """
        try:
            response = self.client.auth.admin.update_user_by_id(uid, {"app_metadata": claims})
        except (AuthError, httpx.HTTPError) as exc:
            raise self._admin_failure("set custom claims", exc, uid=uid) from exc

        if response.user is None:
            raise NotFoundError("User")
        logger.info("custom claims set uid=%s keys=%s", uid, sorted(claims))
        return AuthUser.from_supabase_user(response.user)

    def get_user_by_email(self, email: str) -> AuthUser:
        """Find an auth user by email address (case-insensitive)."""
        target = email.strip().lower()
        page = 1
        while True:
            try:
                users = self.client.auth.admin.list_users(
                    page=page,
                    per_page=self.USERS_PAGE_SIZE,
                )
            except (AuthError, httpx.HTTPError) as exc:
                raise self._admin_failure("get user by email", exc, email=email) from exc

            for user in users:
                if (getattr(user, "email", None) or "").lower() == target:
                    return AuthUser.from_supabase_user(user)
            if len(users) < self.USERS_PAGE_SIZE:
                raise NotFoundError("User")
            page += 1

    def delete_user(self, uid: str) -> None:
        """Delete an auth user. The profile row is left in place."""
        try:
            self.client.auth.admin.delete_user(uid)
        except (AuthError, httpx.HTTPError) as exc:
            raise self._admin_failure("delete user", exc, uid=uid) from exc
        logger.info("user deleted uid=%s", uid)

    @staticmethod
    def _admin_failure(action: str, exc: BaseException, **context: Any) -> Exception:
        if get_auth_error_code(exc) == "user_not_found":
            return NotFoundError("User")
        return _auth_failure(action, exc, **context)
