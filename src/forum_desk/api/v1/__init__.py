# src/forum_desk/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    parameters_router,
    posts_router,
    replies_router,
    requests_router,
    threads_router,
)

__all__ = [
    "posts_router",
    "replies_router",
    "threads_router",
    "requests_router",
    "parameters_router",
]
