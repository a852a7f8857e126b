"""In-memory collection of staff-defined discussion threads."""

from __future__ import annotations

from forum_desk.core.ids import THREAD_PREFIX
from forum_desk.core.results import Result, Success, forbidden, not_found, validation_error
from forum_desk.domain.entities import Thread, ThreadStatus
from forum_desk.domain.validation import validate_thread
from forum_desk.repositories.base import EntityCollection

__all__ = ["ThreadCollection"]


class ThreadCollection(EntityCollection[Thread]):
    """Threads keyed by ``THREAD_n`` identifiers.

    The creator may set either status directly; there is no other transition
    guard. Deletion removes the thread outright.
    """

    prefix = THREAD_PREFIX

    def create(
        self,
        title: str | None,
        description: str | None,
        created_by_username: str,
        status: ThreadStatus = ThreadStatus.OPEN,
    ) -> Result:
        candidate = Thread(
            thread_id="",
            title=title,
            description=description,
            created_by_username=created_by_username,
            status=status,
        )
        error = validate_thread(candidate)
        if error:
            return validation_error(error)
        candidate.thread_id = self._next_id()
        self._insert(candidate)
        return Success(candidate.thread_id)

    def update(
        self,
        thread_id: str,
        title: str | None,
        description: str | None,
        actor_username: str | None,
        status: ThreadStatus | None = None,
    ) -> Result:
        """Update a thread's text and optionally its status."""
        thread = self.get_by_id(thread_id)
        if thread is None:
            return not_found("Thread not found.")
        if thread.created_by_username != actor_username:
            return forbidden("You can only update threads you created.")
        candidate = Thread(
            thread_id=thread_id,
            title=title,
            description=description,
            created_by_username=thread.created_by_username,
            status=status or thread.status,
            created_at=thread.created_at,
        )
        error = validate_thread(candidate)
        if error:
            return validation_error(error)
        thread.title = title
        thread.description = description
        if status is not None:
            thread.status = status
        return Success(thread_id)

    def delete(self, thread_id: str, actor_username: str | None) -> Result:
        thread = self.get_by_id(thread_id)
        if thread is None:
            return not_found("Thread not found.")
        if thread.created_by_username != actor_username:
            return forbidden("You can only delete threads you created.")
        del self._items[thread_id]
        return Success(thread_id)

    def get_by_title(self, title: str | None) -> Thread | None:
        """Return the oldest thread carrying exactly ``title``."""
        matches = self._oldest_first(self._filter(lambda t: t.title == title))
        return matches[0] if matches else None

    def all_sorted(self) -> list[Thread]:
        return self._open_first(self._items.values(), lambda t: t.status)

    def by_status(self, status: ThreadStatus) -> list[Thread]:
        return self._newest_first(self._filter(lambda t: t.status is status))

    def by_creator(self, created_by_username: str) -> list[Thread]:
        return self._open_first(
            self._filter(lambda t: t.created_by_username == created_by_username),
            lambda t: t.status,
        )

    def open_threads(self) -> list[Thread]:
        return self.by_status(ThreadStatus.OPEN)
