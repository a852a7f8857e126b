# src/forum_desk/models/post.py
"""SQLAlchemy models for posts and replies."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from forum_desk.db.session import Base


class PostRecord(Base):
    """Persistent row for a forum post."""

    __tablename__ = "post"

    post_id: Mapped[str] = mapped_column(String(50), primary_key=True)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    author_username: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    # Free-form grouping key matched against thread titles.
    thread: Mapped[str] = mapped_column(String(100), nullable=False, default="General")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    last_edited_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # Tombstone; the row stays so replies keep rendering.
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class ReplyRecord(Base):
    """Persistent row for a reply or private feedback."""

    __tablename__ = "reply"

    reply_id: Mapped[str] = mapped_column(String(50), primary_key=True)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    author_username: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    # No foreign key: replies outlive hard-deleted posts in older stores.
    parent_post_id: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    last_edited_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_feedback: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
