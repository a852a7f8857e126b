"""Service layer: cache synchronisation, write-through operations, credentials."""

from .cache_sync import CachedCollection, ForumCache
from .credentials import check_username, evaluate_password
from .forum import ForumService, get_forum_service

__all__ = [
    "CachedCollection",
    "ForumCache",
    "ForumService",
    "check_username",
    "evaluate_password",
    "get_forum_service",
]
