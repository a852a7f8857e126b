"""Lazy, refreshable in-memory caches over the persistent store.

Each :class:`CachedCollection` loads its entity kind from the store on first
access and serves from memory afterwards. :meth:`CachedCollection.refresh`
rebuilds a fresh collection off to the side and swaps it in as one snapshot,
so readers never observe a half-filled collection and the "available" flag
never disagrees with the data it describes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from threading import RLock
from typing import Any, Generic, TypeVar

from forum_desk.db.store import SqlForumStore, StoreError
from forum_desk.repositories import (
    ParameterCollection,
    PostCollection,
    ReplyCollection,
    RequestCollection,
    ThreadCollection,
)

__all__ = ["CachedCollection", "ForumCache"]

logger = logging.getLogger(__name__)

C = TypeVar("C")


@dataclass(frozen=True)
class _Snapshot(Generic[C]):
    collection: C
    available: bool


class CachedCollection(Generic[C]):
    """One entity collection backed by a store loader.

    Args:
        name: Label used in log messages.
        factory: Builds an empty collection.
        loader: Returns every stored record of the entity kind.
    """

    def __init__(
        self,
        name: str,
        factory: Callable[[], C],
        loader: Callable[[], Iterable[Any]],
    ) -> None:
        self.name = name
        self._factory = factory
        self._loader = loader
        self._snapshot: _Snapshot[C] = _Snapshot(factory(), False)
        # Guards loading and every mutation of the current collection.
        self.lock = RLock()

    @property
    def is_available(self) -> bool:
        return self._snapshot.available

    def get(self) -> C:
        """Return the collection, loading it from the store the first time."""
        snapshot = self._snapshot
        if snapshot.available:
            return snapshot.collection
        with self.lock:
            if not self._snapshot.available:
                self._snapshot = self._build()
            return self._snapshot.collection

    def refresh(self) -> C:
        """Discard cached state and reload everything from the store."""
        with self.lock:
            self._snapshot = self._build()
            return self._snapshot.collection

    def _build(self) -> _Snapshot[C]:
        fresh = self._factory()
        try:
            records = list(self._loader())
        except StoreError:
            logger.error("Error loading %s from the store", self.name, exc_info=True)
            return _Snapshot(fresh, False)

        loaded = 0
        for record in records:
            try:
                fresh.add_existing(record)
            except (AttributeError, TypeError, ValueError) as exc:
                logger.warning("Skipping malformed %s record %r: %s", self.name, record, exc)
                continue
            loaded += 1
        logger.info("%s loaded from the store: %d records", self.name.capitalize(), loaded)
        return _Snapshot(fresh, True)


class ForumCache:
    """The five cached collections shared by every caller in a process."""

    def __init__(
        self,
        store: SqlForumStore,
        default_thread: str | None = None,
        search_max_length: int | None = None,
    ) -> None:
        post_options: dict[str, Any] = {}
        if default_thread is not None:
            post_options["default_thread"] = default_thread
        if search_max_length is not None:
            post_options["search_max_length"] = search_max_length

        self.posts: CachedCollection[PostCollection] = CachedCollection(
            "posts", lambda: PostCollection(**post_options), store.load_all_posts
        )
        self.replies: CachedCollection[ReplyCollection] = CachedCollection(
            "replies", ReplyCollection, store.load_all_replies
        )
        self.threads: CachedCollection[ThreadCollection] = CachedCollection(
            "threads", ThreadCollection, store.load_all_threads
        )
        self.requests: CachedCollection[RequestCollection] = CachedCollection(
            "requests", RequestCollection, store.load_all_requests
        )
        self.parameters: CachedCollection[ParameterCollection] = CachedCollection(
            "parameters", ParameterCollection, store.load_all_parameters
        )

    def refresh_forum(self) -> None:
        """Reload posts and replies together."""
        with self.posts.lock, self.replies.lock:
            self.posts.refresh()
            self.replies.refresh()

    def refresh_all(self) -> None:
        self.refresh_forum()
        self.threads.refresh()
        self.requests.refresh()
        self.parameters.refresh()
