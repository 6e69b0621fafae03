"""Admin user-management endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.dependencies import get_db_client, require_admin
from app.schemas.auth import AuthUser, CustomClaimsRequest
from app.services.auth_service import AuthAdminService
from supabase import Client

router = APIRouter()


@router.get("/users")
def find_user(
    email: str = Query(..., min_length=3),
    _: AuthUser = Depends(require_admin),
    client: Client = Depends(get_db_client),
) -> dict:
    """Look up an auth user by email."""
    return {"user": AuthAdminService(client).get_user_by_email(email)}


@router.put("/users/{uid}/claims")
def set_claims(
    uid: str,
    payload: CustomClaimsRequest,
    _: AuthUser = Depends(require_admin),
    client: Client = Depends(get_db_client),
) -> dict:
    """Replace a user's custom claims."""
    return {"user": AuthAdminService(client).set_custom_user_claims(uid, payload.claims)}


@router.delete("/users/{uid}")
def delete_user(
    uid: str,
    _: AuthUser = Depends(require_admin),
    client: Client = Depends(get_db_client),
) -> dict:
    """Delete an auth user."""
    AuthAdminService(client).delete_user(uid)
    return {"deleted": True, "uid": uid}
