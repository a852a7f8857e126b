# tests/repositories/test_reply_collection.py
"""Tests for replies, feedback visibility and read tracking."""

import pytest

from forum_desk.core.results import ErrorKind
from forum_desk.domain.entities import DELETED_REPLY_BODY
from forum_desk.repositories import ReplyCollection


@pytest.fixture()
def replies() -> ReplyCollection:
    return ReplyCollection()


def test_create_requires_body_and_parent(replies) -> None:
    assert replies.create("", "bob", "POST_1").reason == "Reply body cannot be empty."
    assert replies.create("x" * 3001, "bob", "POST_1").reason == "Reply body cannot exceed 3000 characters."
    assert replies.create("Hi", "bob", None).reason == "Reply must reference an existing post."
    assert replies.create("Hi", "bob", "POST_1").entity_id == "REPLY_1"


def test_replies_start_unread(replies) -> None:
    reply_id = replies.create("Hi", "bob", "POST_1").entity_id
    assert replies.get_by_id(reply_id).is_unread


def test_public_listing_excludes_feedback_and_is_oldest_first(replies) -> None:
    first = replies.create("First", "bob", "POST_1").entity_id
    replies.create_feedback("Private", "carol", "POST_1")
    second = replies.create("Second", "dave", "POST_1").entity_id
    replies.create("Elsewhere", "bob", "POST_2")

    assert [r.reply_id for r in replies.replies_for_post("POST_1")] == [first, second]
    assert replies.reply_count_for_post("POST_1") == 2


def test_feedback_visible_only_to_author_and_post_author(replies) -> None:
    feedback_id = replies.create_feedback("Private", "carol", "POST_1").entity_id

    def visible(viewer):
        return [r.reply_id for r in replies.feedback_for_post("POST_1", viewer, "alice")]

    assert visible("carol") == [feedback_id]
    assert visible("alice") == [feedback_id]
    assert visible("bob") == []
    assert visible(None) == []


def test_unread_ignores_viewer_own_replies(replies) -> None:
    own = replies.create("Mine", "alice", "POST_1").entity_id
    other = replies.create("Theirs", "bob", "POST_1").entity_id

    assert [r.reply_id for r in replies.unread_for_post("POST_1", "alice")] == [other]
    assert replies.unread_count_for_post("POST_1", "alice") == 1

    changed = replies.mark_post_replies_read("POST_1", "alice")
    assert [r.reply_id for r in changed] == [other]
    assert replies.get_by_id(own).is_unread
    assert replies.unread_count_for_post("POST_1", "alice") == 0
    assert replies.mark_post_replies_read("POST_1", "alice") == []


def test_mark_read_is_idempotent(replies) -> None:
    reply_id = replies.create("Hi", "bob", "POST_1").entity_id
    assert replies.mark_read(reply_id)
    assert replies.mark_read(reply_id)
    assert replies.get_by_id(reply_id).is_read
    assert replies.mark_unread(reply_id)
    assert replies.get_by_id(reply_id).is_unread
    assert not replies.mark_read("REPLY_404")


def test_update_and_delete_are_author_only(replies) -> None:
    reply_id = replies.create("Hi", "bob", "POST_1").entity_id
    result = replies.update(reply_id, "Edited", "alice")
    assert result.reason == "You can only edit your own replies."
    assert result.kind is ErrorKind.AUTHORIZATION
    assert replies.delete(reply_id, "alice").reason == "You can only delete your own replies."
    assert replies.update("REPLY_9", "Edited", "bob").reason == "Reply not found."

    assert replies.update(reply_id, "Edited", "bob").ok
    assert replies.get_by_id(reply_id).last_edited_at is not None
    assert replies.delete(reply_id, "bob").ok
    reply = replies.get_by_id(reply_id)
    assert reply.is_deleted
    assert reply.display_body == DELETED_REPLY_BODY


def test_counts_by_post_skip_deleted(replies) -> None:
    replies.create("One", "bob", "POST_1")
    gone = replies.create("Two", "bob", "POST_1").entity_id
    replies.create("Three", "bob", "POST_2")
    replies.delete(gone, "bob")
    assert replies.counts_by_post() == {"POST_1": 1, "POST_2": 1}
    assert replies.active_count() == 2
