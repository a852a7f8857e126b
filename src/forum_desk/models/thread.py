"""SQLAlchemy model for discussion threads."""

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from forum_desk.db.session import Base


class ThreadRecord(Base):
    """Persistent row for a staff-defined thread."""

    __tablename__ = "thread"

    thread_id: Mapped[str] = mapped_column(String(50), primary_key=True)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    # "OPEN" or "CLOSED".
    status: Mapped[str] = mapped_column(String(10), nullable=False, default="OPEN")
    created_by_username: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
