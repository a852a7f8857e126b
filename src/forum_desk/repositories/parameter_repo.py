"""In-memory collection of grading parameters."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from forum_desk.core.ids import PARAMETER_PREFIX
from forum_desk.core.results import Result, Success, not_found, validation_error
from forum_desk.domain.entities import Parameter, ParameterCategory
from forum_desk.domain.validation import validate_parameter
from forum_desk.repositories.base import EntityCollection

__all__ = ["ParameterCollection"]


def _copy_categories(categories: Iterable[ParameterCategory] | None) -> list[ParameterCategory]:
    return [ParameterCategory(c.category_name, c.weight) for c in categories or []]


class ParameterCollection(EntityCollection[Parameter]):
    """Grading parameters keyed by ``PARAM_n`` identifiers.

    Topic and category lists are copied on the way in so that callers cannot
    change a stored parameter behind the collection's back.
    """

    prefix = PARAMETER_PREFIX

    def create(
        self,
        name: str | None,
        description: str | None,
        is_active: bool,
        created_by_username: str,
        required_posts: int = 0,
        required_replies: int = 0,
        topics: Sequence[str] | None = None,
        thread_id: str | None = None,
        categories: Sequence[ParameterCategory] | None = None,
    ) -> Result:
        candidate = Parameter(
            parameter_id="",
            name=name,
            description=description,
            is_active=is_active,
            created_by_username=created_by_username,
            required_posts=required_posts,
            required_replies=required_replies,
            topics=list(topics or []),
            thread_id=thread_id,
            categories=_copy_categories(categories),
        )
        error = validate_parameter(candidate)
        if error:
            return validation_error(error)
        candidate.parameter_id = self._next_id()
        self._insert(candidate)
        return Success(candidate.parameter_id)

    def update(
        self,
        parameter_id: str,
        name: str | None,
        description: str | None,
        is_active: bool,
        required_posts: int = 0,
        required_replies: int = 0,
        topics: Sequence[str] | None = None,
        thread_id: str | None = None,
        categories: Sequence[ParameterCategory] | None = None,
    ) -> Result:
        """Validate a full replacement candidate, then commit it field by field.

        The candidate keeps the stored creator and creation time, so an
        update is held to the same rules as creation and never half-applies.
        """
        existing = self.get_by_id(parameter_id)
        if existing is None:
            return not_found("Parameter not found.")
        candidate = Parameter(
            parameter_id=parameter_id,
            name=name,
            description=description,
            is_active=is_active,
            created_by_username=existing.created_by_username,
            required_posts=required_posts,
            required_replies=required_replies,
            topics=list(topics or []),
            thread_id=thread_id,
            categories=_copy_categories(categories),
            created_at=existing.created_at,
        )
        error = validate_parameter(candidate)
        if error:
            return validation_error(error)

        existing.name = candidate.name
        existing.description = candidate.description
        existing.is_active = candidate.is_active
        existing.required_posts = candidate.required_posts
        existing.required_replies = candidate.required_replies
        existing.topics = candidate.topics
        existing.thread_id = candidate.thread_id
        existing.categories = candidate.categories
        return Success(parameter_id)

    def delete(self, parameter_id: str) -> bool:
        return self._items.pop(parameter_id, None) is not None

    def delete_all_by_creator(self, created_by_username: str) -> bool:
        """Remove every parameter created by ``created_by_username``."""
        doomed = [p.parameter_id for p in self._filter(lambda p: p.created_by_username == created_by_username)]
        return self.delete_selected(doomed)

    def delete_selected(self, parameter_ids: Iterable[str]) -> bool:
        """Remove the given parameters; True if at least one existed."""
        deleted = False
        for parameter_id in parameter_ids:
            if self._items.pop(parameter_id, None) is not None:
                deleted = True
        return deleted

    def all(self) -> list[Parameter]:
        return self._newest_first(self._items.values())

    def all_active(self) -> list[Parameter]:
        return self._newest_first(self._filter(lambda p: p.is_active))

    def by_creator(self, created_by_username: str) -> list[Parameter]:
        return self._newest_first(self._filter(lambda p: p.created_by_username == created_by_username))

    def active_by_creator(self, created_by_username: str) -> list[Parameter]:
        return [p for p in self.by_creator(created_by_username) if p.is_active]

    def by_thread(self, thread_id: str | None) -> list[Parameter]:
        if thread_id is None:
            return []
        return self._newest_first(self._filter(lambda p: p.thread_id == thread_id))

    def active_count(self) -> int:
        return sum(1 for p in self._items.values() if p.is_active)
