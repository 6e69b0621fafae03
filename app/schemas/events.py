"""Typed payloads for workflow events."""

from typing import Any

from pydantic import BaseModel, EmailStr


class HelloWorldData(BaseModel):
    email: EmailStr


class UserCreatedData(BaseModel):
    uid: str
    email: EmailStr
    display_name: str | None = None
    sign_up_method: str


class UserUpdatedData(BaseModel):
    uid: str
    updates: dict[str, Any]


class PostCreatedData(BaseModel):
    post_id: str
    author_id: str
    title: str


class PostUpdatedData(BaseModel):
    post_id: str
    author_id: str
    updates: dict[str, Any]


class PostDeletedData(BaseModel):
    post_id: str
    author_id: str


EVENT_SCHEMAS: dict[str, type[BaseModel]] = {
    "test/hello.world": HelloWorldData,
    "user/created": UserCreatedData,
    "user/updated": UserUpdatedData,
    "post/created": PostCreatedData,
    "post/updated": PostUpdatedData,
    "post/deleted": PostDeletedData,
}
