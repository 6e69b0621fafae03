"""API router package."""

from app.routers import admin, auth, posts, users

__all__ = [
    "admin",
    "auth",
    "posts",
    "users",
]
