"""In-memory forum entities.

These are the records held by the repository collections. They are plain
dataclasses; persistence lives in :mod:`forum_desk.models` and the mapping
between the two in :mod:`forum_desk.db.store`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Final

from forum_desk.db.time import format_timestamp, utcnow

DEFAULT_THREAD: Final[str] = "General"

DELETED_POST_BODY: Final[str] = "This post has been deleted"
DELETED_REPLY_BODY: Final[str] = "This reply has been deleted"


class ThreadStatus(Enum):
    """Thread lifecycle; declaration order puts Open before Closed."""

    OPEN = "OPEN"
    CLOSED = "CLOSED"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class RequestStatus(Enum):
    """Request lifecycle; a closed request is never reopened in place."""

    OPEN = "OPEN"
    CLOSED = "CLOSED"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class RequestCategory(Enum):
    """Kinds of support request staff can raise with admins."""

    SYSTEM_ISSUE = "System Issue"
    ACCOUNT_ISSUE = "Account Issue"
    PARAMETER_ISSUE = "Parameter Issue"
    GRADING_QUESTION = "Grading Question"
    OTHER = "Other"

    @property
    def display_name(self) -> str:
        return self.value


# Ranks used for "Open first" ordering.
STATUS_RANK: Final[dict[Enum, int]] = {
    ThreadStatus.OPEN: 0,
    ThreadStatus.CLOSED: 1,
    RequestStatus.OPEN: 0,
    RequestStatus.CLOSED: 1,
}


def normalize_thread(thread: str | None, default: str = DEFAULT_THREAD) -> str:
    """Return ``thread`` or the default grouping key when it is blank."""
    if thread is None or not thread.strip():
        return default
    return thread


@dataclass
class Post:
    """A forum post grouped under a free-form thread name."""

    post_id: str
    title: str
    body: str
    author_username: str
    thread: str = DEFAULT_THREAD
    created_at: datetime = field(default_factory=utcnow)
    last_edited_at: datetime | None = None
    is_deleted: bool = False

    def __post_init__(self) -> None:
        self.thread = normalize_thread(self.thread)

    @property
    def entity_id(self) -> str:
        return self.post_id

    def can_edit(self, username: str | None) -> bool:
        return not self.is_deleted and self.author_username == username

    def can_delete(self, username: str | None) -> bool:
        return not self.is_deleted and self.author_username == username

    def mark_deleted(self) -> None:
        self.is_deleted = True

    def update_content(self, title: str, body: str) -> None:
        self.title = title
        self.body = body
        self.last_edited_at = utcnow()

    def matches(self, keyword: str) -> bool:
        """Case-insensitive substring match over title and body."""
        needle = keyword.lower()
        return needle in (self.title or "").lower() or needle in (self.body or "").lower()

    @property
    def display_body(self) -> str:
        return DELETED_POST_BODY if self.is_deleted else self.body

    @property
    def formatted_created_at(self) -> str:
        return format_timestamp(self.created_at)

    @property
    def formatted_last_edited_at(self) -> str:
        return format_timestamp(self.last_edited_at)


@dataclass
class Reply:
    """A reply to a post; feedback replies form a private channel."""

    reply_id: str
    body: str
    author_username: str
    parent_post_id: str
    is_feedback: bool = False
    created_at: datetime = field(default_factory=utcnow)
    last_edited_at: datetime | None = None
    is_deleted: bool = False
    is_read: bool = False

    @property
    def entity_id(self) -> str:
        return self.reply_id

    @property
    def is_unread(self) -> bool:
        return not self.is_read

    def can_edit(self, username: str | None) -> bool:
        return not self.is_deleted and self.author_username == username

    def can_delete(self, username: str | None) -> bool:
        return not self.is_deleted and self.author_username == username

    def can_view(self, viewer: str | None, post_author: str | None) -> bool:
        """Return True if ``viewer`` may see this reply on a post by ``post_author``."""
        if not self.is_feedback:
            return True
        return viewer is not None and viewer in (self.author_username, post_author)

    def mark_deleted(self) -> None:
        self.is_deleted = True

    def mark_read(self) -> None:
        self.is_read = True

    def mark_unread(self) -> None:
        self.is_read = False

    def update_content(self, body: str) -> None:
        self.body = body
        self.last_edited_at = utcnow()

    @property
    def display_body(self) -> str:
        return DELETED_REPLY_BODY if self.is_deleted else self.body

    @property
    def formatted_created_at(self) -> str:
        return format_timestamp(self.created_at)

    @property
    def formatted_last_edited_at(self) -> str:
        return format_timestamp(self.last_edited_at)


@dataclass
class Thread:
    """A staff-defined discussion thread; posts join it by title."""

    thread_id: str
    title: str
    description: str
    created_by_username: str
    status: ThreadStatus = ThreadStatus.OPEN
    created_at: datetime = field(default_factory=utcnow)

    @property
    def entity_id(self) -> str:
        return self.thread_id

    @property
    def is_open(self) -> bool:
        return self.status is ThreadStatus.OPEN

    @property
    def is_closed(self) -> bool:
        return self.status is ThreadStatus.CLOSED

    @property
    def status_display(self) -> str:
        return self.status.display_name

    @property
    def formatted_created_at(self) -> str:
        return format_timestamp(self.created_at)


@dataclass
class Request:
    """A support request between staff and admins.

    Reopening never mutates a closed request; it produces a new record whose
    ``original_request_id`` points back at the closed one.
    """

    request_id: str
    title: str
    description: str
    category: RequestCategory | None
    created_by_username: str
    status: RequestStatus = RequestStatus.OPEN
    closed_by_username: str | None = None
    resolution_notes: str | None = None
    reopen_reason: str | None = None
    original_request_id: str | None = None
    created_at: datetime = field(default_factory=utcnow)
    closed_at: datetime | None = None
    reopened_at: datetime | None = None

    @property
    def entity_id(self) -> str:
        return self.request_id

    @property
    def is_open(self) -> bool:
        return self.status is RequestStatus.OPEN

    @property
    def is_closed(self) -> bool:
        return self.status is RequestStatus.CLOSED

    @property
    def is_reopened(self) -> bool:
        return self.original_request_id is not None

    @property
    def status_display(self) -> str:
        return self.status.display_name

    @property
    def category_display(self) -> str:
        return self.category.display_name if self.category is not None else ""

    @property
    def formatted_created_at(self) -> str:
        return format_timestamp(self.created_at)

    @property
    def formatted_closed_at(self) -> str:
        return format_timestamp(self.closed_at, missing="Not closed")

    @property
    def formatted_reopened_at(self) -> str:
        return format_timestamp(self.reopened_at, missing="Not reopened")


@dataclass
class ParameterCategory:
    """A weighted grading category owned by exactly one parameter."""

    category_name: str
    weight: float


@dataclass
class Parameter:
    """A grading parameter tied to a thread with ordered weighted categories."""

    parameter_id: str
    name: str
    description: str
    is_active: bool
    created_by_username: str
    required_posts: int = 0
    required_replies: int = 0
    topics: list[str] = field(default_factory=list)
    thread_id: str | None = None
    categories: list[ParameterCategory] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        self.topics = list(self.topics or [])
        self.categories = list(self.categories or [])

    @property
    def entity_id(self) -> str:
        return self.parameter_id

    @property
    def formatted_created_at(self) -> str:
        return format_timestamp(self.created_at)
