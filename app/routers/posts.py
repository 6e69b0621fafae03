"""Blog post endpoints."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, Query

from app.dependencies import get_db_client, require_auth
from app.jobs.client import emit
from app.schemas.auth import AuthUser
from app.schemas.post import PostAuthor, PostCreate, PostQuery, PostUpdate
from app.services.post_service import PostService
from app.services.user_service import UserService
from app.utils.errors import NotFoundError
from supabase import Client

router = APIRouter()


def _author_snapshot(client: Client, user: AuthUser) -> PostAuthor:
    """Prefer the stored profile; fall back to the token claims."""
    try:
        profile = UserService(client).get_user_profile(user.uid)
    except NotFoundError:
        return PostAuthor(uid=user.uid, display_name=user.display_name, photo_url=user.photo_url)
    return PostAuthor(
        uid=profile.uid,
        display_name=profile.display_name,
        photo_url=profile.photo_url,
    )


@router.get("")
def list_posts(
    author_id: str | None = Query(default=None),
    limit: int | None = Query(default=None, ge=1, le=200),
    order_by: Literal["created_at", "updated_at"] = Query(default="created_at"),
    direction: Literal["asc", "desc"] = Query(default="desc"),
    client: Client = Depends(get_db_client),
) -> dict:
    """List posts, optionally for one author."""
    options = PostQuery(
        author_id=author_id,
        limit=limit,
        order_by=order_by,
        direction=direction,
    )
    return {"posts": PostService(client).get_posts(options)}


@router.get("/{post_id}")
def get_post(post_id: str, client: Client = Depends(get_db_client)) -> dict:
    """Return one post."""
    return {"post": PostService(client).get_post(post_id)}


@router.post("", status_code=201)
def create_post(
    payload: PostCreate,
    user: AuthUser = Depends(require_auth),
    client: Client = Depends(get_db_client),
) -> dict:
    """Publish a post as the caller."""
    author = _author_snapshot(client, user)
    post = PostService(client).create_post(author, payload.title, payload.content)
    emit(
        "post/created",
        {"post_id": post.id, "author_id": post.author_id, "title": post.title},
    )
    return {"post": post}


@router.patch("/{post_id}")
def update_post(
    post_id: str,
    payload: PostUpdate,
    user: AuthUser = Depends(require_auth),
    client: Client = Depends(get_db_client),
) -> dict:
    """Edit the title and/or content of one of the caller's posts."""
    post = PostService(client).update_post(post_id, payload, actor_id=user.uid)
    emit(
        "post/updated",
        {
            "post_id": post.id,
            "author_id": post.author_id,
            "updates": payload.model_dump(exclude_unset=True, exclude_none=True),
        },
    )
    return {"post": post}


@router.delete("/{post_id}")
def delete_post(
    post_id: str,
    user: AuthUser = Depends(require_auth),
    client: Client = Depends(get_db_client),
) -> dict:
    """Delete one of the caller's posts."""
    removed = PostService(client).delete_post(post_id, actor_id=user.uid)
    emit("post/deleted", {"post_id": removed.id, "author_id": removed.author_id})
    return {"deleted": True, "id": removed.id}
