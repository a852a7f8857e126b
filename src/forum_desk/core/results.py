"""Tagged results returned by repository and service operations.

Every mutating operation yields either a :class:`Success` carrying the
affected entity's prefixed identifier or a :class:`Failure` carrying a
human-readable reason. :meth:`as_legacy` renders the older string contract in
which callers tell the two apart by the identifier prefix alone.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from forum_desk.core.ids import ENTITY_PREFIXES


class ErrorKind(Enum):
    """Categories of failure surfaced to callers."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    AUTHORIZATION = "authorization"
    CONFLICT = "conflict"
    PERSISTENCE = "persistence"


@dataclass(frozen=True)
class Success:
    """Operation completed; ``entity_id`` names the affected record."""

    entity_id: str

    @property
    def ok(self) -> bool:
        return True

    def as_legacy(self) -> str:
        return self.entity_id


@dataclass(frozen=True)
class Failure:
    """Operation rejected with a user-facing ``reason``."""

    reason: str
    kind: ErrorKind = ErrorKind.VALIDATION

    @property
    def ok(self) -> bool:
        return False

    def as_legacy(self) -> str:
        return self.reason


Result = Success | Failure


def validation_error(reason: str) -> Failure:
    return Failure(reason, ErrorKind.VALIDATION)


def not_found(reason: str) -> Failure:
    return Failure(reason, ErrorKind.NOT_FOUND)


def forbidden(reason: str) -> Failure:
    return Failure(reason, ErrorKind.AUTHORIZATION)


def conflict(reason: str) -> Failure:
    return Failure(reason, ErrorKind.CONFLICT)


def is_success_token(value: str | None) -> bool:
    """Return True when a legacy result string is a success identifier."""
    if not value:
        return False
    return any(value.startswith(prefix) for prefix in ENTITY_PREFIXES)
