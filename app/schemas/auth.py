"""Authentication request/response schemas."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, EmailStr, Field

OAuthProvider = Literal["google", "github"]


class AuthUser(BaseModel):
    """Identity and claims of a user as reported by the auth provider."""

    uid: str
    email: str = ""
    display_name: str = ""
    photo_url: str = ""
    email_verified: bool = False
    provider: str = "email"
    claims: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_supabase_user(cls, user: Any) -> AuthUser:
        """Normalize a Supabase ``User`` object."""
        user_metadata = getattr(user, "user_metadata", None) or {}
        app_metadata = getattr(user, "app_metadata", None) or {}
        display_name = (
            user_metadata.get("display_name")
            or user_metadata.get("full_name")
            or user_metadata.get("name")
            or ""
        )
        photo_url = user_metadata.get("avatar_url") or user_metadata.get("picture") or ""
        return cls(
            uid=str(user.id),
            email=getattr(user, "email", None) or "",
            display_name=display_name,
            photo_url=photo_url,
            email_verified=getattr(user, "email_confirmed_at", None) is not None,
            provider=app_metadata.get("provider") or "email",
            claims=dict(app_metadata),
        )


class SignUpRequest(BaseModel):
    """Request body for email/password sign-up."""

    email: EmailStr
    password: str = Field(..., min_length=1)
    display_name: str | None = Field(None, max_length=100)


class SignInRequest(BaseModel):
    """Request body for email/password sign-in."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class OAuthCallbackRequest(BaseModel):
    """Tokens handed back by the front-end after an OAuth redirect."""

    access_token: str
    refresh_token: str


class PasswordResetRequest(BaseModel):
    """Request body for password reset emails."""

    email: EmailStr


class SessionTokens(BaseModel):
    """Session tokens returned to API clients."""

    access_token: str
    refresh_token: str
    expires_in: int | None = None


class CustomClaimsRequest(BaseModel):
    """Request body for setting custom claims on a user."""

    claims: dict[str, Any]
