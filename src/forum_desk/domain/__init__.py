"""Forum entities and their validators."""

from .entities import (
    DEFAULT_THREAD,
    Parameter,
    ParameterCategory,
    Post,
    Reply,
    Request,
    RequestCategory,
    RequestStatus,
    Thread,
    ThreadStatus,
)

__all__ = [
    "DEFAULT_THREAD",
    "Parameter",
    "ParameterCategory",
    "Post",
    "Reply",
    "Request",
    "RequestCategory",
    "RequestStatus",
    "Thread",
    "ThreadStatus",
]
