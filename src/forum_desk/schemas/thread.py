# src/forum_desk/schemas/thread.py
"""Thread-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from forum_desk.domain.entities import ThreadStatus


class ThreadCreate(BaseModel):
    """Schema for creating a discussion thread."""

    title: str | None = None
    description: str | None = None
    status: ThreadStatus = ThreadStatus.OPEN


class ThreadUpdate(BaseModel):
    """Schema for updating a thread; an omitted status leaves it unchanged."""

    title: str | None = None
    description: str | None = None
    status: ThreadStatus | None = None


class ThreadResponse(BaseModel):
    """Schema for thread information returned by the API."""

    thread_id: str
    title: str
    description: str
    created_by_username: str
    status: ThreadStatus
    created_at: datetime
    post_count: int = 0

    model_config = ConfigDict(from_attributes=True)
