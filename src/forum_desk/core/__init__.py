"""Core configuration, identifiers and result types."""

from .ids import IdAllocator
from .results import ErrorKind, Failure, Result, Success, is_success_token
from .settings import Settings, settings

__all__ = [
    "ErrorKind",
    "Failure",
    "IdAllocator",
    "Result",
    "Settings",
    "Success",
    "is_success_token",
    "settings",
]
