# src/forum_desk/schemas/post.py
"""Post-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PostCreate(BaseModel):
    """Schema for creating a new post.

    Length rules are enforced by the collection so that callers receive the
    same messages as every other client.
    """

    title: str | None = Field(None, description="Post title")
    body: str | None = Field(None, description="Post body")
    thread: str | None = Field(None, description="Thread name; blank means the default thread")


class PostUpdate(BaseModel):
    """Schema for editing a post's title and body."""

    title: str | None = None
    body: str | None = None


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    post_id: str
    title: str
    body: str
    display_body: str
    author_username: str
    thread: str
    created_at: datetime
    last_edited_at: datetime | None
    is_deleted: bool

    model_config = ConfigDict(from_attributes=True)
