"""Keyed in-memory collections, one per forum entity kind."""

from .parameter_repo import ParameterCollection
from .post_repo import ALL_THREADS, PostCollection
from .reply_repo import ReplyCollection
from .request_repo import RequestCollection
from .thread_repo import ThreadCollection

__all__ = [
    "ALL_THREADS",
    "ParameterCollection",
    "PostCollection",
    "ReplyCollection",
    "RequestCollection",
    "ThreadCollection",
]
