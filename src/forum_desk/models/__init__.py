# src/forum_desk/models/__init__.py
"""SQLAlchemy models for the Forum Desk application."""

from .parameter import ParameterCategoryRecord, ParameterRecord
from .post import PostRecord, ReplyRecord
from .request import RequestRecord
from .thread import ThreadRecord

__all__ = [
    "ParameterCategoryRecord", "ParameterRecord",
    "PostRecord", "ReplyRecord",
    "RequestRecord",
    "ThreadRecord",
]
