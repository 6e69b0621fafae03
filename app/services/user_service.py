"""User profile data access."""

from __future__ import annotations

import logging

from app.schemas.auth import AuthUser
from app.schemas.user import ProfileMetadata, UserProfile, UserProfileUpdate
from app.services.common import SupabaseService
from app.utils.errors import NotFoundError
from app.utils.time import next_after, now_utc
from supabase import Client

logger = logging.getLogger(__name__)


class UserService:
    """Create, read and edit rows in the ``users`` table."""

    def __init__(self, client: Client) -> None:
        self.db = SupabaseService(client)

    def create_user_profile(self, identity: AuthUser) -> tuple[UserProfile, bool]:
        """Create the profile on first sign-in, otherwise touch login timestamps.

        Returns the profile and whether it was newly created. Display name
        and photo are only overwritten when the provider supplies them, so
        edits made through the profile endpoint survive later sign-ins.
        """
        existing = self.db.select_first(
            "users",
            {"uid": identity.uid},
            context="get user profile",
        )
        now = now_utc()

        if existing is not None:
            current = UserProfile.from_row(existing)
            touched_at = next_after(current.updated_at, now)
            metadata = dict(existing.get("metadata") or {})
            metadata["last_login_at"] = touched_at.isoformat()
            payload = {
                "email": identity.email or current.email,
                "email_verified": identity.email_verified,
                "updated_at": touched_at.isoformat(),
                "metadata": metadata,
            }
            if identity.display_name:
                payload["display_name"] = identity.display_name
            if identity.photo_url:
                payload["photo_url"] = identity.photo_url

            self.db.update("users", {"uid": identity.uid}, payload, context="update user profile")
            logger.info("user profile touched uid=%s", identity.uid)
            return (
                current.model_copy(
                    update={
                        "email": payload["email"],
                        "display_name": payload.get("display_name", current.display_name),
                        "photo_url": payload.get("photo_url", current.photo_url),
                        "email_verified": identity.email_verified,
                        "updated_at": touched_at,
                        "metadata": ProfileMetadata(
                            last_login_at=touched_at,
                            sign_up_method=current.metadata.sign_up_method,
                        ),
                    }
                ),
                False,
            )

        sign_up_method = identity.provider or "email"
        timestamp = now.isoformat()
        row = self.db.insert_one(
            "users",
            {
                "uid": identity.uid,
                "email": identity.email,
                "display_name": identity.display_name,
                "photo_url": identity.photo_url,
                "email_verified": identity.email_verified,
                "bio": "",
                "created_at": timestamp,
                "updated_at": timestamp,
                "metadata": {
                    "last_login_at": timestamp,
                    "sign_up_method": sign_up_method,
                },
            },
            context="create user profile",
        )
        logger.info("user profile created uid=%s method=%s", identity.uid, sign_up_method)
        return UserProfile.from_row(row), True

    def get_user_profile(self, uid: str) -> UserProfile:
        """Return a profile by uid."""
        row = self.db.select_one(
            "users",
            {"uid": uid},
            not_found_label="User",
            context="get user profile",
        )
        return UserProfile.from_row(row)

    def update_user_profile(self, uid: str, updates: UserProfileUpdate) -> UserProfile:
        """Apply a partial edit and return the stored profile."""
        current = self.get_user_profile(uid)
        changes = updates.model_dump(exclude_unset=True, exclude_none=True)
        payload = {**changes, "updated_at": next_after(current.updated_at).isoformat()}

        rows = self.db.update("users", {"uid": uid}, payload, context="update user profile")
        if not rows:
            raise NotFoundError("User")

        logger.info("user profile updated uid=%s fields=%s", uid, sorted(changes))
        return UserProfile.from_row(rows[0])
