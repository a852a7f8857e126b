"""Monotonic, type-prefixed identifier allocation."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Final

POST_PREFIX: Final[str] = "POST_"
REPLY_PREFIX: Final[str] = "REPLY_"
THREAD_PREFIX: Final[str] = "THREAD_"
REQUEST_PREFIX: Final[str] = "REQUEST_"
PARAMETER_PREFIX: Final[str] = "PARAM_"

ENTITY_PREFIXES: Final[tuple[str, ...]] = (
    POST_PREFIX,
    REPLY_PREFIX,
    THREAD_PREFIX,
    REQUEST_PREFIX,
    PARAMETER_PREFIX,
)


def parse_suffix(entity_id: str | None, prefix: str) -> int | None:
    """Return the numeric suffix of ``entity_id`` or None when it is malformed."""
    if not entity_id or not entity_id.startswith(prefix):
        return None
    digits = entity_id[len(prefix):]
    if not digits.isdigit():
        return None
    return int(digits)


class IdAllocator:
    """Issue ``PREFIX_n`` identifiers from a counter that only moves forward.

    The counter starts at 1. Records registered from the store are fed to
    :meth:`observe` so that identifiers issued after a reload never collide
    with persisted ones.
    """

    def __init__(self, prefix: str, start: int = 1) -> None:
        self.prefix = prefix
        self._next = start

    @property
    def peek(self) -> int:
        """Return the number the next identifier will carry."""
        return self._next

    def next_id(self) -> str:
        """Return a fresh identifier and advance the counter."""
        value = self._next
        self._next += 1
        return f"{self.prefix}{value}"

    def observe(self, entity_id: str | None) -> None:
        """Advance past ``entity_id`` if it carries a larger suffix."""
        number = parse_suffix(entity_id, self.prefix)
        if number is not None and number >= self._next:
            self._next = number + 1

    def reseed(self, entity_ids: Iterable[str | None]) -> None:
        """Advance past the maximum suffix found among ``entity_ids``."""
        numbers = [n for n in (parse_suffix(i, self.prefix) for i in entity_ids) if n is not None]
        if numbers:
            self._next = max(self._next, max(numbers) + 1)
