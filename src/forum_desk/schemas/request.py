# src/forum_desk/schemas/request.py
"""Support request Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from forum_desk.domain.entities import RequestCategory, RequestStatus


class RequestCreate(BaseModel):
    """Schema for raising a support request."""

    title: str | None = None
    description: str | None = None
    category: RequestCategory | None = Field(None, description="Display name, e.g. 'System Issue'")


class RequestClose(BaseModel):
    """Schema for closing a request with resolution notes."""

    resolution_notes: str | None = None


class RequestReopen(BaseModel):
    """Schema for reopening a closed request."""

    reopen_reason: str | None = None


class RequestResponse(BaseModel):
    """Schema for support request information returned by the API."""

    request_id: str
    title: str
    description: str
    category: RequestCategory | None
    status: RequestStatus
    created_by_username: str
    closed_by_username: str | None
    resolution_notes: str | None
    reopen_reason: str | None
    original_request_id: str | None
    is_reopened: bool
    created_at: datetime
    closed_at: datetime | None
    reopened_at: datetime | None

    model_config = ConfigDict(from_attributes=True)
