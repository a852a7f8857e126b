# src/forum_desk/schemas/reply.py
"""Reply and feedback Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ReplyCreate(BaseModel):
    """Schema for replying to a post, publicly or as private feedback."""

    body: str | None = Field(None, description="Reply body")
    parent_post_id: str | None = Field(None, description="Post being replied to")
    is_feedback: bool = Field(False, description="Visible only to the author and the post author")


class ReplyUpdate(BaseModel):
    """Schema for editing a reply."""

    body: str | None = None


class ReplyResponse(BaseModel):
    """Schema for reply information returned by the API."""

    reply_id: str
    body: str
    display_body: str
    author_username: str
    parent_post_id: str
    is_feedback: bool
    is_read: bool
    is_deleted: bool
    created_at: datetime
    last_edited_at: datetime | None

    model_config = ConfigDict(from_attributes=True)
