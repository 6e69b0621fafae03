"""User profile endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.dependencies import get_db_client, require_auth
from app.jobs.client import emit
from app.schemas.auth import AuthUser
from app.schemas.user import UserProfileUpdate
from app.services.user_service import UserService
from supabase import Client

router = APIRouter()


@router.get("/me")
def get_my_profile(
    user: AuthUser = Depends(require_auth),
    client: Client = Depends(get_db_client),
) -> dict:
    """Return the caller's profile."""
    return {"profile": UserService(client).get_user_profile(user.uid)}


@router.patch("/me")
def update_my_profile(
    payload: UserProfileUpdate,
    user: AuthUser = Depends(require_auth),
    client: Client = Depends(get_db_client),
) -> dict:
    """Edit display name, bio or photo of the caller's profile."""
    profile = UserService(client).update_user_profile(user.uid, payload)
    emit(
        "user/updated",
        {"uid": user.uid, "updates": payload.model_dump(exclude_unset=True, exclude_none=True)},
    )
    return {"profile": profile}


@router.get("/{uid}")
def get_profile(
    uid: str,
    _: AuthUser = Depends(require_auth),
    client: Client = Depends(get_db_client),
) -> dict:
    """Return another user's profile."""
    return {"profile": UserService(client).get_user_profile(uid)}
