# src/forum_desk/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .parameters import router as parameters_router
from .posts import router as posts_router
from .replies import router as replies_router
from .requests import router as requests_router
from .threads import router as threads_router

__all__ = [
    "posts_router",
    "replies_router",
    "threads_router",
    "requests_router",
    "parameters_router",
]
