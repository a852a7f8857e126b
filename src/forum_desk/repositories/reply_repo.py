"""In-memory collection of replies and private feedback."""

from __future__ import annotations

from collections import Counter

from forum_desk.core.ids import REPLY_PREFIX
from forum_desk.core.results import Result, Success, forbidden, not_found, validation_error
from forum_desk.domain.entities import Reply
from forum_desk.domain.validation import validate_reply
from forum_desk.repositories.base import EntityCollection

__all__ = ["ReplyCollection"]


class ReplyCollection(EntityCollection[Reply]):
    """Replies keyed by ``REPLY_n`` identifiers.

    Reply threads read oldest first, in conversational order. Feedback
    replies are excluded from the public reply listing and only shown to
    their author and the parent post's author.
    """

    prefix = REPLY_PREFIX

    def create(
        self,
        body: str | None,
        author_username: str,
        parent_post_id: str | None,
        is_feedback: bool = False,
    ) -> Result:
        candidate = Reply(
            reply_id="",
            body=body,
            author_username=author_username,
            parent_post_id=parent_post_id,
            is_feedback=is_feedback,
        )
        error = validate_reply(candidate)
        if error:
            return validation_error(error)
        candidate.reply_id = self._next_id()
        self._insert(candidate)
        return Success(candidate.reply_id)

    def create_feedback(
        self,
        body: str | None,
        author_username: str,
        parent_post_id: str | None,
    ) -> Result:
        return self.create(body, author_username, parent_post_id, is_feedback=True)

    def update(self, reply_id: str, body: str | None, actor_username: str | None) -> Result:
        reply = self.get_by_id(reply_id)
        if reply is None:
            return not_found("Reply not found.")
        if not reply.can_edit(actor_username):
            return forbidden("You can only edit your own replies.")
        candidate = Reply(
            reply_id=reply_id,
            body=body,
            author_username=reply.author_username,
            parent_post_id=reply.parent_post_id,
            is_feedback=reply.is_feedback,
        )
        error = validate_reply(candidate)
        if error:
            return validation_error(error)
        reply.update_content(body)
        return Success(reply_id)

    def delete(self, reply_id: str, actor_username: str | None) -> Result:
        reply = self.get_by_id(reply_id)
        if reply is None:
            return not_found("Reply not found.")
        if not reply.can_delete(actor_username):
            return forbidden("You can only delete your own replies.")
        reply.mark_deleted()
        return Success(reply_id)

    def _of_post(self, post_id: str) -> list[Reply]:
        return self._filter(lambda r: r.parent_post_id == post_id)

    def replies_for_post(self, post_id: str, unread_only: bool = False) -> list[Reply]:
        """Public (non-feedback) replies to a post, oldest first."""
        return self._oldest_first(
            r for r in self._of_post(post_id)
            if not r.is_feedback and (not unread_only or r.is_unread)
        )

    def feedback_for_post(
        self,
        post_id: str,
        viewer_username: str | None,
        post_author_username: str | None,
    ) -> list[Reply]:
        """Feedback on a post visible to ``viewer_username``, oldest first."""
        return self._oldest_first(
            r for r in self._of_post(post_id)
            if r.is_feedback and r.can_view(viewer_username, post_author_username)
        )

    def all_of_author(self, author_username: str) -> list[Reply]:
        return self._newest_first(self._filter(lambda r: r.author_username == author_username))

    def unread_for_post(self, post_id: str, viewer_username: str | None) -> list[Reply]:
        """Unread public replies on a post, ignoring the viewer's own."""
        return self._oldest_first(
            r for r in self._of_post(post_id)
            if not r.is_feedback and r.is_unread and r.author_username != viewer_username
        )

    def reply_count_for_post(self, post_id: str) -> int:
        return sum(1 for r in self._of_post(post_id) if not r.is_feedback)

    def unread_count_for_post(self, post_id: str, viewer_username: str | None) -> int:
        return len(self.unread_for_post(post_id, viewer_username))

    def mark_post_replies_read(self, post_id: str, viewer_username: str | None) -> list[Reply]:
        """Mark other users' replies on a post as read; return those that changed."""
        changed = []
        for reply in self._of_post(post_id):
            if reply.author_username != viewer_username and reply.is_unread:
                reply.mark_read()
                changed.append(reply)
        return changed

    def mark_read(self, reply_id: str) -> bool:
        reply = self.get_by_id(reply_id)
        if reply is None:
            return False
        reply.mark_read()
        return True

    def mark_unread(self, reply_id: str) -> bool:
        reply = self.get_by_id(reply_id)
        if reply is None:
            return False
        reply.mark_unread()
        return True

    def active_count(self) -> int:
        return sum(1 for r in self._items.values() if not r.is_deleted)

    def recent(self, count: int) -> list[Reply]:
        return self._newest_first(self._filter(lambda r: not r.is_deleted))[: max(count, 0)]

    def counts_by_post(self) -> dict[str, int]:
        """Number of non-deleted replies per parent post."""
        return dict(Counter(r.parent_post_id for r in self._items.values() if not r.is_deleted))
