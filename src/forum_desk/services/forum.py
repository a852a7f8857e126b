"""Write-through forum service.

:class:`ForumService` is the repository object handed to every caller. Each
mutating operation runs under its collection's lock, applies the validated
change in memory, then writes the affected records to the store. If the
store write fails and ``write_through_rollback`` is enabled the in-memory
change is undone and a persistence failure is returned; with rollback
disabled the failure is only logged, reproducing the older behaviour in
which memory and store diverge until the next refresh.

Mutations are refused while a collection could not be loaded from the store.
An unloaded collection is empty and restarts its id counter, so writing
through it would overwrite stored rows.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Iterable, Sequence
from typing import TypeVar

from forum_desk.core.results import ErrorKind, Failure, Result, Success, forbidden, not_found
from forum_desk.core.settings import Settings, settings as default_settings
from forum_desk.db.store import SqlForumStore, StoreError
from forum_desk.domain.entities import (
    Parameter,
    ParameterCategory,
    Post,
    Reply,
    RequestCategory,
    ThreadStatus,
)
from forum_desk.repositories import (
    ParameterCollection,
    PostCollection,
    ReplyCollection,
    RequestCollection,
    ThreadCollection,
)
from forum_desk.services.cache_sync import CachedCollection, ForumCache

__all__ = ["ForumService", "get_forum_service"]

logger = logging.getLogger(__name__)

C = TypeVar("C")
Write = Callable[[], object]
Undo = Callable[[], None]


class ForumService:
    """Validated, persisted operations over the five forum collections."""

    def __init__(
        self,
        store: SqlForumStore,
        config: Settings | None = None,
        cache: ForumCache | None = None,
    ) -> None:
        self.store = store
        self.config = config or default_settings
        self.cache = cache or ForumCache(
            store,
            default_thread=self.config.default_thread_name,
            search_max_length=self.config.search_max_length,
        )

    # Collection access ---------------------------------------------------

    def posts(self) -> PostCollection:
        return self.cache.posts.get()

    def replies(self) -> ReplyCollection:
        return self.cache.replies.get()

    def threads(self) -> ThreadCollection:
        return self.cache.threads.get()

    def requests(self) -> RequestCollection:
        return self.cache.requests.get()

    def parameters(self) -> ParameterCollection:
        return self.cache.parameters.get()

    def refresh_forum(self) -> None:
        self.cache.refresh_forum()

    def refresh_all(self) -> None:
        self.cache.refresh_all()

    # Write-through -------------------------------------------------------

    @staticmethod
    def _writable(cached: CachedCollection[C]) -> C | None:
        """The loaded collection, or None when the last store load failed.

        Call with ``cached.lock`` held so a refresh cannot swap the snapshot
        between the load and the availability check.
        """
        collection = cached.get()
        if not cached.is_available:
            logger.warning("Refusing to modify %s: not loaded from the store", cached.name)
            return None
        return collection

    @staticmethod
    def _unavailable(cached: CachedCollection) -> Failure:
        return Failure(
            f"Could not load {cached.name} from the store. Please try again.",
            ErrorKind.PERSISTENCE,
        )

    def _commit(self, result: Result, what: str, writes: Sequence[Write], undo: Undo) -> Result:
        """Persist a successful in-memory change, rolling it back on failure."""
        if not result.ok:
            return result
        try:
            for write in writes:
                write()
        except StoreError as exc:
            if self.config.write_through_rollback:
                undo()
                logger.warning("Rolled back %s after store failure: %s", what, exc)
                return Failure(
                    f"Could not save {what}. Please try again.",
                    ErrorKind.PERSISTENCE,
                )
            logger.warning("%s changed in memory but not persisted: %s", what, exc)
        return result

    @staticmethod
    def _restorer(collection, snapshot) -> Undo:
        return lambda: collection.restore(snapshot)

    # Posts ---------------------------------------------------------------

    def create_post(
        self,
        title: str | None,
        body: str | None,
        author_username: str,
        thread: str | None = None,
    ) -> Result:
        with self.cache.posts.lock:
            posts = self._writable(self.cache.posts)
            if posts is None:
                return self._unavailable(self.cache.posts)
            result = posts.create(title, body, author_username, thread)
            if not result.ok:
                return result
            post = posts.get_by_id(result.entity_id)
            return self._commit(
                result,
                f"post {post.post_id}",
                [lambda: self.store.save_post(post)],
                lambda: posts.discard(post.post_id),
            )

    def _change_post(self, post_id: str, change: Callable[[PostCollection], Result]) -> Result:
        with self.cache.posts.lock:
            posts = self._writable(self.cache.posts)
            if posts is None:
                return self._unavailable(self.cache.posts)
            before = copy.deepcopy(posts.get_by_id(post_id))
            result = change(posts)
            if not result.ok:
                return result
            post = posts.get_by_id(post_id)
            return self._commit(
                result,
                f"post {post_id}",
                [lambda: self.store.save_post(post)],
                self._restorer(posts, before),
            )

    def update_post(
        self, post_id: str, title: str | None, body: str | None, actor_username: str | None
    ) -> Result:
        return self._change_post(post_id, lambda posts: posts.update(post_id, title, body, actor_username))

    def delete_post(self, post_id: str, actor_username: str | None) -> Result:
        """Tombstone a post; its row stays in the store with the flag set."""
        return self._change_post(post_id, lambda posts: posts.delete(post_id, actor_username))

    def search_posts(self, keyword: str | None, thread_filter: str | None = None) -> list[Post]:
        return self.posts().search(keyword, thread_filter)

    def post_count_for_thread(self, thread: str) -> int:
        return self.posts().active_count_for_thread(thread)

    # Replies -------------------------------------------------------------

    def create_reply(
        self,
        body: str | None,
        author_username: str,
        parent_post_id: str | None,
        is_feedback: bool = False,
    ) -> Result:
        if parent_post_id:
            with self.cache.posts.lock:
                posts = self._writable(self.cache.posts)
                if posts is None:
                    return self._unavailable(self.cache.posts)
                if not posts.exists_by_id(parent_post_id):
                    return not_found("Reply must reference an existing post.")
        with self.cache.replies.lock:
            replies = self._writable(self.cache.replies)
            if replies is None:
                return self._unavailable(self.cache.replies)
            result = replies.create(body, author_username, parent_post_id, is_feedback)
            if not result.ok:
                return result
            reply = replies.get_by_id(result.entity_id)
            return self._commit(
                result,
                f"reply {reply.reply_id}",
                [lambda: self.store.save_reply(reply)],
                lambda: replies.discard(reply.reply_id),
            )

    def create_feedback(self, body: str | None, author_username: str, parent_post_id: str | None) -> Result:
        return self.create_reply(body, author_username, parent_post_id, is_feedback=True)

    def _change_reply(self, reply_id: str, change: Callable[[ReplyCollection], Result]) -> Result:
        with self.cache.replies.lock:
            replies = self._writable(self.cache.replies)
            if replies is None:
                return self._unavailable(self.cache.replies)
            before = copy.deepcopy(replies.get_by_id(reply_id))
            result = change(replies)
            if not result.ok:
                return result
            reply = replies.get_by_id(reply_id)
            return self._commit(
                result,
                f"reply {reply_id}",
                [lambda: self.store.save_reply(reply)],
                self._restorer(replies, before),
            )

    def update_reply(self, reply_id: str, body: str | None, actor_username: str | None) -> Result:
        return self._change_reply(reply_id, lambda replies: replies.update(reply_id, body, actor_username))

    def delete_reply(self, reply_id: str, actor_username: str | None) -> Result:
        return self._change_reply(reply_id, lambda replies: replies.delete(reply_id, actor_username))

    def mark_replies_read(self, post_id: str, viewer_username: str | None) -> Result:
        """Mark other users' replies on a post as read for ``viewer_username``.

        Every changed reply is saved in one store transaction.
        """
        with self.cache.replies.lock:
            replies = self._writable(self.cache.replies)
            if replies is None:
                return self._unavailable(self.cache.replies)
            changed = replies.mark_post_replies_read(post_id, viewer_username)
            if not changed:
                return Success(post_id)

            def _undo() -> None:
                for reply in changed:
                    reply.mark_unread()

            return self._commit(
                Success(post_id),
                f"read markers for {post_id}",
                [lambda: self.store.save_replies(changed)],
                _undo,
            )

    def replies_for_post(self, post_id: str) -> list[Reply]:
        return self.replies().replies_for_post(post_id)

    def feedback_for_post(self, post_id: str, viewer_username: str | None) -> list[Reply]:
        """Feedback visible to ``viewer_username``, resolving the post author."""
        post = self.posts().get_by_id(post_id)
        post_author = post.author_username if post is not None else None
        return self.replies().feedback_for_post(post_id, viewer_username, post_author)

    # Threads -------------------------------------------------------------

    def create_thread(
        self,
        title: str | None,
        description: str | None,
        created_by_username: str,
        status: ThreadStatus = ThreadStatus.OPEN,
    ) -> Result:
        with self.cache.threads.lock:
            threads = self._writable(self.cache.threads)
            if threads is None:
                return self._unavailable(self.cache.threads)
            result = threads.create(title, description, created_by_username, status)
            if not result.ok:
                return result
            thread = threads.get_by_id(result.entity_id)
            return self._commit(
                result,
                f"thread {thread.thread_id}",
                [lambda: self.store.save_thread(thread)],
                lambda: threads.discard(thread.thread_id),
            )

    def update_thread(
        self,
        thread_id: str,
        title: str | None,
        description: str | None,
        actor_username: str | None,
        status: ThreadStatus | None = None,
    ) -> Result:
        with self.cache.threads.lock:
            threads = self._writable(self.cache.threads)
            if threads is None:
                return self._unavailable(self.cache.threads)
            before = copy.deepcopy(threads.get_by_id(thread_id))
            result = threads.update(thread_id, title, description, actor_username, status)
            if not result.ok:
                return result
            thread = threads.get_by_id(thread_id)
            return self._commit(
                result,
                f"thread {thread_id}",
                [lambda: self.store.save_thread(thread)],
                self._restorer(threads, before),
            )

    def delete_thread(self, thread_id: str, actor_username: str | None) -> Result:
        with self.cache.threads.lock:
            threads = self._writable(self.cache.threads)
            if threads is None:
                return self._unavailable(self.cache.threads)
            before = threads.get_by_id(thread_id)
            result = threads.delete(thread_id, actor_username)
            return self._commit(
                result,
                f"thread {thread_id}",
                [lambda: self._delete_row(self.store.delete_thread, thread_id)],
                self._restorer(threads, before),
            )

    # Requests ------------------------------------------------------------

    def create_request(
        self,
        title: str | None,
        description: str | None,
        category: RequestCategory | None,
        created_by_username: str,
    ) -> Result:
        with self.cache.requests.lock:
            requests = self._writable(self.cache.requests)
            if requests is None:
                return self._unavailable(self.cache.requests)
            result = requests.create(title, description, category, created_by_username)
            if not result.ok:
                return result
            request = requests.get_by_id(result.entity_id)
            return self._commit(
                result,
                f"request {request.request_id}",
                [lambda: self.store.save_request(request)],
                lambda: requests.discard(request.request_id),
            )

    def close_request(self, request_id: str, closed_by_username: str, resolution_notes: str | None) -> Result:
        with self.cache.requests.lock:
            requests = self._writable(self.cache.requests)
            if requests is None:
                return self._unavailable(self.cache.requests)
            before = copy.deepcopy(requests.get_by_id(request_id))
            result = requests.close_request(request_id, closed_by_username, resolution_notes)
            if not result.ok:
                return result
            request = requests.get_by_id(request_id)
            return self._commit(
                result,
                f"request {request_id}",
                [lambda: self.store.save_request(request)],
                self._restorer(requests, before),
            )

    def reopen_request(self, request_id: str, reopened_by_username: str | None, reopen_reason: str | None) -> Result:
        """Reopen a closed request; persists the original and the new record."""
        with self.cache.requests.lock:
            requests = self._writable(self.cache.requests)
            if requests is None:
                return self._unavailable(self.cache.requests)
            result = requests.reopen_request(request_id, reopened_by_username, reopen_reason)
            if not result.ok:
                return result
            original = requests.get_by_id(request_id)
            reopened = requests.get_by_id(result.entity_id)
            return self._commit(
                result,
                f"request {reopened.request_id}",
                [
                    lambda: self.store.save_request(original),
                    lambda: self.store.save_request(reopened),
                ],
                lambda: requests.discard(reopened.request_id),
            )

    def delete_request(self, request_id: str) -> Result:
        with self.cache.requests.lock:
            requests = self._writable(self.cache.requests)
            if requests is None:
                return self._unavailable(self.cache.requests)
            before = requests.get_by_id(request_id)
            if not requests.delete(request_id):
                return not_found("Request not found.")
            return self._commit(
                Success(request_id),
                f"request {request_id}",
                [lambda: self._delete_row(self.store.delete_request, request_id)],
                self._restorer(requests, before),
            )

    # Parameters ----------------------------------------------------------

    def create_parameter(
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
        with self.cache.parameters.lock:
            parameters = self._writable(self.cache.parameters)
            if parameters is None:
                return self._unavailable(self.cache.parameters)
            result = parameters.create(
                name,
                description,
                is_active,
                created_by_username,
                required_posts,
                required_replies,
                topics,
                thread_id,
                categories,
            )
            if not result.ok:
                return result
            parameter = parameters.get_by_id(result.entity_id)
            return self._commit(
                result,
                f"parameter {parameter.parameter_id}",
                [lambda: self.store.save_parameter(parameter)],
                lambda: parameters.discard(parameter.parameter_id),
            )

    def update_parameter(
        self,
        parameter_id: str,
        actor_username: str | None,
        name: str | None,
        description: str | None,
        is_active: bool,
        required_posts: int = 0,
        required_replies: int = 0,
        topics: Sequence[str] | None = None,
        thread_id: str | None = None,
        categories: Sequence[ParameterCategory] | None = None,
    ) -> Result:
        """Replace a parameter's editable fields; only its creator may do so."""
        with self.cache.parameters.lock:
            parameters = self._writable(self.cache.parameters)
            if parameters is None:
                return self._unavailable(self.cache.parameters)
            existing = parameters.get_by_id(parameter_id)
            if existing is None:
                return not_found("Parameter not found.")
            if existing.created_by_username != actor_username:
                return forbidden("You can only update parameters you created.")
            before = copy.deepcopy(existing)
            result = parameters.update(
                parameter_id,
                name,
                description,
                is_active,
                required_posts,
                required_replies,
                topics,
                thread_id,
                categories,
            )
            if not result.ok:
                return result
            parameter = parameters.get_by_id(parameter_id)
            return self._commit(
                result,
                f"parameter {parameter_id}",
                [lambda: self.store.save_parameter(parameter)],
                self._restorer(parameters, before),
            )

    def delete_parameter(self, parameter_id: str, actor_username: str | None) -> Result:
        return self._delete_parameters([parameter_id], f"parameter {parameter_id}", actor_username)

    def delete_parameters_by_creator(self, created_by_username: str) -> Result:
        with self.cache.parameters.lock:
            parameters = self._writable(self.cache.parameters)
            if parameters is None:
                return self._unavailable(self.cache.parameters)
            ids = [p.parameter_id for p in parameters.by_creator(created_by_username)]
            return self._delete_parameters(ids, f"parameters of {created_by_username}", created_by_username)

    def delete_selected_parameters(self, parameter_ids: Iterable[str], actor_username: str | None) -> Result:
        """Delete the selected parameters; unknown ids are skipped.

        The whole selection is refused if any existing parameter in it was
        created by someone other than ``actor_username``.
        """
        ids = list(parameter_ids)
        return self._delete_parameters(ids, f"{len(ids)} selected parameters", actor_username)

    def _delete_parameters(self, parameter_ids: list[str], what: str, actor_username: str | None) -> Result:
        with self.cache.parameters.lock:
            parameters = self._writable(self.cache.parameters)
            if parameters is None:
                return self._unavailable(self.cache.parameters)
            removed: list[Parameter] = [
                p for p in (parameters.get_by_id(i) for i in parameter_ids) if p is not None
            ]
            if not removed:
                return not_found("Parameter not found.")
            if any(p.created_by_username != actor_username for p in removed):
                return forbidden("You can only delete parameters you created.")
            parameters.delete_selected(parameter_ids)

            def _undo() -> None:
                for parameter in removed:
                    parameters.restore(parameter)

            return self._commit(
                Success(removed[0].parameter_id),
                what,
                [lambda: self.store.delete_parameters([p.parameter_id for p in removed])],
                _undo,
            )

    @staticmethod
    def _delete_row(delete: Callable[[str], bool], entity_id: str) -> bool:
        deleted = delete(entity_id)
        if not deleted:
            logger.debug("No stored row for %s; nothing to delete", entity_id)
        return deleted


class _ForumServiceSingleton:
    """Process-wide ForumService built on first use."""

    _instance: ForumService | None = None

    @classmethod
    def get_instance(cls) -> ForumService:
        if cls._instance is None:
            from forum_desk.db.session import SessionLocal

            cls._instance = ForumService(SqlForumStore(SessionLocal))
        return cls._instance


def get_forum_service() -> ForumService:
    """Return the shared forum service used by the API layer."""
    return _ForumServiceSingleton.get_instance()
