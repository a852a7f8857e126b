"""In-memory collection of staff/admin support requests."""

from __future__ import annotations

import logging

from forum_desk.core.ids import REQUEST_PREFIX
from forum_desk.core.results import (
    Result,
    Success,
    conflict,
    forbidden,
    not_found,
    validation_error,
)
from forum_desk.db.time import utcnow
from forum_desk.domain.entities import Request, RequestCategory, RequestStatus
from forum_desk.domain.validation import (
    validate_reopen_reason,
    validate_request,
    validate_resolution_notes,
)
from forum_desk.repositories.base import EntityCollection

__all__ = ["RequestCollection"]

logger = logging.getLogger(__name__)


class RequestCollection(EntityCollection[Request]):
    """Requests keyed by ``REQUEST_n`` identifiers.

    Lifecycle: Open -> Closed through :meth:`close_request`. A closed request
    stays closed; :meth:`reopen_request` allocates a new Open request linked
    back to it, so every open/close cycle keeps its own resolution history.
    """

    prefix = REQUEST_PREFIX

    def create(
        self,
        title: str | None,
        description: str | None,
        category: RequestCategory | None,
        created_by_username: str,
    ) -> Result:
        candidate = Request(
            request_id="",
            title=title,
            description=description,
            category=category,
            created_by_username=created_by_username,
        )
        error = validate_request(candidate)
        if error:
            return validation_error(error)
        candidate.request_id = self._next_id()
        self._insert(candidate)
        return Success(candidate.request_id)

    def close_request(
        self,
        request_id: str,
        closed_by_username: str,
        resolution_notes: str | None,
    ) -> Result:
        request = self.get_by_id(request_id)
        if request is None:
            return not_found("Request not found.")
        if request.is_closed:
            return conflict("Request is already closed.")
        error = validate_resolution_notes(resolution_notes)
        if error:
            return validation_error(error)
        request.status = RequestStatus.CLOSED
        request.closed_by_username = closed_by_username
        request.resolution_notes = resolution_notes.strip()
        request.closed_at = utcnow()
        return Success(request_id)

    def reopen_request(
        self,
        request_id: str,
        reopened_by_username: str | None,
        reopen_reason: str | None,
    ) -> Result:
        """Create a new Open request continuing a closed one.

        Returns the new request's identifier. The closed request is left
        untouched; callers persist both records.
        """
        original = self.get_by_id(request_id)
        if original is None:
            return not_found("Request not found.")
        if not original.is_closed:
            return conflict("Request is not closed.")
        if original.created_by_username != reopened_by_username:
            return forbidden("You can only reopen requests you created.")
        error = validate_reopen_reason(reopen_reason)
        if error:
            return validation_error(error)

        reopened = Request(
            request_id=self._next_id(),
            title=original.title,
            description=original.description,
            category=original.category,
            created_by_username=original.created_by_username,
            original_request_id=original.request_id,
            reopen_reason=reopen_reason.strip(),
            reopened_at=utcnow(),
        )
        self._insert(reopened)
        logger.debug("Request %s reopened as %s", original.request_id, reopened.request_id)
        return Success(reopened.request_id)

    def delete(self, request_id: str) -> bool:
        return self._items.pop(request_id, None) is not None

    def chain_of(self, request_id: str) -> list[Request]:
        """Return the reopen chain ending at ``request_id``, root first."""
        chain: list[Request] = []
        seen: set[str] = set()
        current = self.get_by_id(request_id)
        while current is not None and current.request_id not in seen:
            seen.add(current.request_id)
            chain.append(current)
            current = self.get_by_id(current.original_request_id)
        chain.reverse()
        return chain

    def all_sorted(self) -> list[Request]:
        return self._open_first(self._items.values(), lambda r: r.status)

    def by_creator(self, created_by_username: str) -> list[Request]:
        return self._open_first(
            self._filter(lambda r: r.created_by_username == created_by_username),
            lambda r: r.status,
        )

    def by_status(self, status: RequestStatus) -> list[Request]:
        return self._newest_first(self._filter(lambda r: r.status is status))

    def open_requests(self) -> list[Request]:
        return self.by_status(RequestStatus.OPEN)

    def closed_requests(self) -> list[Request]:
        return self.by_status(RequestStatus.CLOSED)
