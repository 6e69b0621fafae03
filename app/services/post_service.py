"""Blog post data access."""

from __future__ import annotations

import logging

from app.schemas.post import Post, PostAuthor, PostQuery, PostUpdate
from app.services.common import SupabaseService
from app.utils.errors import ForbiddenError, NotFoundError
from app.utils.time import next_after, now_utc
from supabase import Client

logger = logging.getLogger(__name__)


class PostService:
    """Create, list, edit and delete rows in the ``posts`` table.

    Existence checks before update/delete are a separate read, not a
    transaction; a concurrent delete between the two calls surfaces as
    ``NotFoundError`` from the write.
    """

    def __init__(self, client: Client) -> None:
        self.db = SupabaseService(client)

    def create_post(self, author: PostAuthor, title: str, content: str) -> Post:
        """Insert a post with a snapshot of its author."""
        timestamp = now_utc().isoformat()
        row = self.db.insert_one(
            "posts",
            {
                "title": title,
                "content": content,
                "author_id": author.uid,
                "author": author.model_dump(),
                "created_at": timestamp,
                "updated_at": timestamp,
            },
            context="create post",
        )
        post = Post.from_row(row)
        logger.info("post created id=%s author=%s", post.id, author.uid)
        return post

    def get_post(self, post_id: str, context: str = "get post") -> Post:
        """Return a post by id."""
        row = self.db.select_one(
            "posts",
            {"id": post_id},
            not_found_label="Post",
            context=context,
        )
        return Post.from_row(row)

    def get_posts(self, options: PostQuery | None = None) -> list[Post]:
        """List posts, newest first unless told otherwise."""
        options = options or PostQuery()
        filters = {"author_id": options.author_id} if options.author_id else None
        rows = self.db.select_many(
            "posts",
            filters=filters,
            order_by=options.order_by,
            descending=options.direction == "desc",
            limit=options.limit,
            context="get posts",
        )
        posts = [Post.from_row(row) for row in rows if row.get("id") is not None]
        logger.info("posts retrieved count=%s author=%s", len(posts), options.author_id)
        return posts

    def update_post(self, post_id: str, updates: PostUpdate, actor_id: str | None = None) -> Post:
        """Apply a partial edit. Only fields present in ``updates`` change."""
        existing = self.get_post(post_id, context="get post for update")
        if actor_id is not None:
            self.ensure_author(existing, actor_id)

        changes = updates.model_dump(exclude_unset=True, exclude_none=True)
        payload = {**changes, "updated_at": next_after(existing.updated_at).isoformat()}
        rows = self.db.update("posts", {"id": post_id}, payload, context="update post")
        if not rows:
            raise NotFoundError("Post")

        logger.info("post updated id=%s fields=%s", post_id, sorted(changes))
        return Post.from_row(rows[0])

    def delete_post(self, post_id: str, actor_id: str | None = None) -> Post:
        """Delete a post and return what was removed."""
        existing = self.get_post(post_id, context="get post for deletion")
        if actor_id is not None:
            self.ensure_author(existing, actor_id)

        rows = self.db.delete("posts", {"id": post_id}, context="delete post")
        if not rows:
            raise NotFoundError("Post")

        logger.info("post deleted id=%s", post_id)
        return existing

    @staticmethod
    def ensure_author(post: Post, user_id: str) -> None:
        """Raise ForbiddenError unless ``user_id`` wrote the post."""
        if post.author_id != user_id:
            raise ForbiddenError("Only the author can modify this post")
