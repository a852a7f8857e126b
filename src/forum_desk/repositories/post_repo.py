"""In-memory collection of forum posts."""

from __future__ import annotations

from forum_desk.core.ids import POST_PREFIX
from forum_desk.core.results import Result, Success, forbidden, not_found, validation_error
from forum_desk.domain.entities import DEFAULT_THREAD, Post, normalize_thread
from forum_desk.domain.validation import SEARCH_MAX_LENGTH, validate_post, validate_search_keyword
from forum_desk.repositories.base import EntityCollection

__all__ = ["PostCollection", "ALL_THREADS"]

# Thread filter value that matches every thread.
ALL_THREADS = "All"


class PostCollection(EntityCollection[Post]):
    """Posts keyed by ``POST_n`` identifiers.

    Deleting a post only sets its tombstone flag so replies to it keep
    rendering. Listings are newest first.
    """

    prefix = POST_PREFIX

    def __init__(
        self,
        default_thread: str = DEFAULT_THREAD,
        search_max_length: int = SEARCH_MAX_LENGTH,
    ) -> None:
        super().__init__()
        self.default_thread = default_thread
        self.search_max_length = search_max_length

    def create(
        self,
        title: str | None,
        body: str | None,
        author_username: str,
        thread: str | None = None,
    ) -> Result:
        """Validate and insert a new post, returning its identifier."""
        candidate = Post(
            post_id="",
            title=title,
            body=body,
            author_username=author_username,
            thread=normalize_thread(thread, self.default_thread),
        )
        error = validate_post(candidate)
        if error:
            return validation_error(error)
        candidate.post_id = self._next_id()
        self._insert(candidate)
        return Success(candidate.post_id)

    def update(
        self,
        post_id: str,
        title: str | None,
        body: str | None,
        actor_username: str | None,
    ) -> Result:
        """Replace title and body of a post owned by ``actor_username``."""
        post = self.get_by_id(post_id)
        if post is None:
            return not_found("Post not found.")
        if not post.can_edit(actor_username):
            return forbidden("You can only edit your own posts.")
        candidate = Post(
            post_id=post_id,
            title=title,
            body=body,
            author_username=post.author_username,
            thread=post.thread,
        )
        error = validate_post(candidate)
        if error:
            return validation_error(error)
        post.update_content(title, body)
        return Success(post_id)

    def delete(self, post_id: str, actor_username: str | None) -> Result:
        """Tombstone a post owned by ``actor_username``."""
        post = self.get_by_id(post_id)
        if post is None:
            return not_found("Post not found.")
        if not post.can_delete(actor_username):
            return forbidden("You can only delete your own posts.")
        post.mark_deleted()
        return Success(post_id)

    def all_of_author(self, author_username: str) -> list[Post]:
        return self._newest_first(self._filter(lambda p: p.author_username == author_username))

    def all_of_thread(self, thread: str) -> list[Post]:
        return self._newest_first(self._filter(lambda p: p.thread == thread))

    def search(self, keyword: str | None, thread_filter: str | None = ALL_THREADS) -> list[Post]:
        """Return posts containing ``keyword`` in the selected thread.

        A blank or over-length keyword yields no results rather than the
        whole collection.
        """
        if validate_search_keyword(keyword, self.search_max_length):
            return []

        def _in_thread(post: Post) -> bool:
            return thread_filter is None or thread_filter == ALL_THREADS or post.thread == thread_filter

        return self._newest_first(self._filter(lambda p: p.matches(keyword) and _in_thread(p)))

    def thread_names(self) -> set[str]:
        return {post.thread for post in self._items.values()}

    def active_count(self) -> int:
        return sum(1 for post in self._items.values() if not post.is_deleted)

    def active_count_for_thread(self, thread: str) -> int:
        return sum(1 for post in self._items.values() if post.thread == thread and not post.is_deleted)

    def recent(self, count: int) -> list[Post]:
        """Return up to ``count`` newest non-deleted posts."""
        return self._newest_first(self._filter(lambda p: not p.is_deleted))[: max(count, 0)]
