"""Blog post schemas."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from app.utils.time import now_utc, parse_timestamp


class PostAuthor(BaseModel):
    """Author snapshot copied into each post at creation time."""

    uid: str = ""
    display_name: str = ""
    photo_url: str = ""


class Post(BaseModel):
    """Post representation."""

    id: str
    title: str = ""
    content: str = ""
    author_id: str = ""
    author: PostAuthor = Field(default_factory=PostAuthor)
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Post":
        """Build a post from a stored row, filling defaults for missing fields."""
        now = now_utc()
        author = row.get("author") or {}
        return cls(
            id=str(row["id"]),
            title=row.get("title") or "",
            content=row.get("content") or "",
            author_id=row.get("author_id") or "",
            author=PostAuthor(
                uid=author.get("uid") or "",
                display_name=author.get("display_name") or "",
                photo_url=author.get("photo_url") or "",
            ),
            created_at=parse_timestamp(row.get("created_at"), default=now),
            updated_at=parse_timestamp(row.get("updated_at"), default=now),
        )


class PostCreate(BaseModel):
    """Request body for creating a post."""

    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1, max_length=20000)


class PostUpdate(BaseModel):
    """Partial post update. Unset fields are left untouched."""

    title: str | None = Field(None, min_length=1, max_length=200)
    content: str | None = Field(None, min_length=1, max_length=20000)


class PostQuery(BaseModel):
    """Listing options for posts."""

    author_id: str | None = None
    limit: int | None = Field(None, ge=1, le=200)
    order_by: Literal["created_at", "updated_at"] = "created_at"
    direction: Literal["asc", "desc"] = "desc"
