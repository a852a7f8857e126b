# src/forum_desk/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .common import OperationResult
from .parameter import ParameterCategorySchema, ParameterCreate, ParameterResponse, ParameterSelection
from .post import PostCreate, PostResponse, PostUpdate
from .reply import ReplyCreate, ReplyResponse, ReplyUpdate
from .request import RequestClose, RequestCreate, RequestReopen, RequestResponse
from .thread import ThreadCreate, ThreadResponse, ThreadUpdate

__all__ = [
    "OperationResult",
    "ParameterCategorySchema", "ParameterCreate", "ParameterResponse", "ParameterSelection",
    "PostCreate", "PostResponse", "PostUpdate",
    "ReplyCreate", "ReplyResponse", "ReplyUpdate",
    "RequestClose", "RequestCreate", "RequestReopen", "RequestResponse",
    "ThreadCreate", "ThreadResponse", "ThreadUpdate",
]
