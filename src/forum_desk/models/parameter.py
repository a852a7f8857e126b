"""SQLAlchemy models for grading parameters and their weighted categories."""

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from forum_desk.db.session import Base


class ParameterRecord(Base):
    """Persistent row for a grading parameter."""

    __tablename__ = "grading_parameter"

    parameter_id: Mapped[str] = mapped_column(String(50), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_by_username: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    required_posts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    required_replies: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    topics: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    thread_id: Mapped[str] = mapped_column(String(50), nullable=False)

    categories: Mapped[list["ParameterCategoryRecord"]] = relationship(
        back_populates="parameter",
        cascade="all, delete-orphan",
        order_by="ParameterCategoryRecord.position",
    )


class ParameterCategoryRecord(Base):
    """One weighted category; ``position`` preserves the parameter's ordering."""

    __tablename__ = "grading_parameter_category"

    parameter_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("grading_parameter.parameter_id", ondelete="CASCADE"),
        primary_key=True,
    )
    position: Mapped[int] = mapped_column(Integer, primary_key=True)
    category_name: Mapped[str] = mapped_column(String(100), nullable=False)
    weight: Mapped[float] = mapped_column(Float, nullable=False)

    parameter: Mapped[ParameterRecord] = relationship(back_populates="categories")
