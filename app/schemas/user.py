"""User profile schemas and row conversion."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from app.utils.errors import DataCorruptionError
from app.utils.time import now_utc, parse_timestamp


class ProfileMetadata(BaseModel):
    """Login bookkeeping stored alongside a profile."""

    last_login_at: datetime
    sign_up_method: str = "unknown"


class UserProfile(BaseModel):
    """Public profile stored in the ``users`` table."""

    uid: str
    email: str = ""
    display_name: str = ""
    photo_url: str = ""
    email_verified: bool = False
    bio: str = ""
    created_at: datetime
    updated_at: datetime
    metadata: ProfileMetadata

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> UserProfile:
        """Build a profile from a stored row, filling defaults for missing fields."""
        if not isinstance(row.get("uid"), str):
            raise DataCorruptionError("user")

        now = now_utc()
        created_at = parse_timestamp(row.get("created_at"), default=now)
        raw_metadata = row.get("metadata") or {}
        return cls(
            uid=row["uid"],
            email=row.get("email") or "",
            display_name=row.get("display_name") or "",
            photo_url=row.get("photo_url") or "",
            email_verified=bool(row.get("email_verified") or False),
            bio=row.get("bio") or "",
            created_at=created_at,
            updated_at=parse_timestamp(row.get("updated_at"), default=now),
            metadata=ProfileMetadata(
                last_login_at=parse_timestamp(
                    raw_metadata.get("last_login_at"),
                    default=created_at,
                ),
                sign_up_method=raw_metadata.get("sign_up_method") or "unknown",
            ),
        )


class UserProfileUpdate(BaseModel):
    """Editable profile fields. ``uid`` and timestamps are never client-writable."""

    display_name: str | None = Field(None, max_length=100)
    bio: str | None = Field(None, max_length=500)
    photo_url: str | None = Field(None, max_length=2048)
