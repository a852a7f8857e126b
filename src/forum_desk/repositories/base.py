"""Shared plumbing for the keyed in-memory entity collections."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime
from enum import Enum
from typing import Generic, Protocol, TypeVar

from forum_desk.core.ids import IdAllocator, parse_suffix
from forum_desk.domain.entities import STATUS_RANK


class Identified(Protocol):
    @property
    def entity_id(self) -> str: ...

    created_at: datetime


E = TypeVar("E", bound=Identified)


class EntityCollection(Generic[E]):
    """Keyed store of one entity kind with its own identifier allocator.

    Subclasses add the entity-specific create/update/query rules; this class
    owns registration of externally loaded records and the orderings shared by
    every listing.
    """

    prefix: str = ""

    def __init__(self) -> None:
        self._items: dict[str, E] = {}
        self._ids = IdAllocator(self.prefix)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._items

    def _next_id(self) -> str:
        return self._ids.next_id()

    def _insert(self, entity: E) -> None:
        self._items[entity.entity_id] = entity

    def add_existing(self, entity: E) -> None:
        """Register a record loaded from the store, advancing the id counter."""
        self._items[entity.entity_id] = entity
        self._ids.observe(entity.entity_id)

    def get_by_id(self, entity_id: str | None) -> E | None:
        if entity_id is None:
            return None
        return self._items.get(entity_id)

    def exists_by_id(self, entity_id: str | None) -> bool:
        return entity_id is not None and entity_id in self._items

    def all(self) -> list[E]:
        return list(self._items.values())

    def count(self) -> int:
        return len(self._items)

    def discard(self, entity_id: str) -> E | None:
        """Remove and return a record without any ownership check."""
        return self._items.pop(entity_id, None)

    def restore(self, entity: E) -> None:
        """Put back a previously captured record state under its own id."""
        self._items[entity.entity_id] = entity

    def _order_key(self, entity: E) -> tuple[datetime, int]:
        # Creation sequence breaks ties between identical timestamps.
        return entity.created_at, parse_suffix(entity.entity_id, self.prefix) or 0

    def _newest_first(self, entities: Iterable[E]) -> list[E]:
        return sorted(entities, key=self._order_key, reverse=True)

    def _oldest_first(self, entities: Iterable[E]) -> list[E]:
        return sorted(entities, key=self._order_key)

    def _open_first(self, entities: Iterable[E], status_of: Callable[[E], Enum]) -> list[E]:
        """Open records before closed ones, newest first within each group."""
        newest = self._newest_first(entities)
        return sorted(newest, key=lambda entity: STATUS_RANK[status_of(entity)])

    def _filter(self, predicate: Callable[[E], bool]) -> list[E]:
        return [entity for entity in self._items.values() if predicate(entity)]
