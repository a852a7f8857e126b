# tests/services/test_forum_service.py
"""Tests for the write-through forum service."""

from forum_desk.core.results import ErrorKind
from forum_desk.db.store import SqlForumStore, StoreError
from forum_desk.domain.entities import Post, RequestCategory
from forum_desk.services.forum import ForumService


def _reload(store, settings) -> ForumService:
    return ForumService(store, settings)


def test_mutations_are_persisted(forum_service, store, test_settings, categories) -> None:
    post_id = forum_service.create_post("Title", "Body", "alice", "General").entity_id
    reply_id = forum_service.create_reply("Hi", "bob", post_id).entity_id
    thread_id = forum_service.create_thread("Help", "Ask here", "staff").entity_id
    request_id = forum_service.create_request("Broken", "Desc", RequestCategory.OTHER, "staff").entity_id
    parameter_id = forum_service.create_parameter(
        "Name", "Desc", True, "staff", 1, 1, ["t"], thread_id, categories
    ).entity_id
    forum_service.update_post(post_id, "Edited", "Body", "alice")

    fresh = _reload(store, test_settings)
    assert fresh.posts().get_by_id(post_id).title == "Edited"
    assert fresh.replies().exists_by_id(reply_id)
    assert fresh.threads().exists_by_id(thread_id)
    assert fresh.requests().exists_by_id(request_id)
    assert [c.category_name for c in fresh.parameters().get_by_id(parameter_id).categories] == [
        "Clarity",
        "Accuracy",
    ]


def test_identifiers_continue_after_reload(forum_service, store, test_settings) -> None:
    forum_service.create_post("One", "Body", "alice")
    forum_service.create_post("Two", "Body", "alice")
    fresh = _reload(store, test_settings)
    assert fresh.create_post("Three", "Body", "alice").entity_id == "POST_3"


def test_soft_deleted_post_keeps_replies(forum_service, store, test_settings) -> None:
    post_id = forum_service.create_post("Title", "Body", "alice").entity_id
    forum_service.create_reply("Hi", "bob", post_id)
    assert forum_service.delete_post(post_id, "alice").ok

    fresh = _reload(store, test_settings)
    assert fresh.posts().get_by_id(post_id).is_deleted
    assert len(fresh.replies_for_post(post_id)) == 1


def test_reply_requires_existing_post(forum_service) -> None:
    result = forum_service.create_reply("Hi", "bob", "POST_404")
    assert result.reason == "Reply must reference an existing post."
    assert result.kind is ErrorKind.NOT_FOUND


def test_feedback_scenario(forum_service, store, test_settings) -> None:
    post_id = forum_service.create_post("Essay", "Draft", "alice").entity_id
    feedback_id = forum_service.create_feedback("Good start", "grader", post_id).entity_id
    forum_service.create_reply("Nice", "bob", post_id)

    assert [r.reply_id for r in forum_service.feedback_for_post(post_id, "alice")] == [feedback_id]
    assert [r.reply_id for r in forum_service.feedback_for_post(post_id, "grader")] == [feedback_id]
    assert forum_service.feedback_for_post(post_id, "bob") == []
    assert all(not r.is_feedback for r in forum_service.replies_for_post(post_id))

    assert forum_service.mark_replies_read(post_id, "alice").ok
    fresh = _reload(store, test_settings)
    assert fresh.replies().unread_count_for_post(post_id, "alice") == 0


def test_reopen_persists_both_records(forum_service, store, test_settings) -> None:
    request_id = forum_service.create_request("Broken", "Desc", RequestCategory.SYSTEM_ISSUE, "staff").entity_id
    assert forum_service.close_request(request_id, "admin", "Fixed").ok
    new_id = forum_service.reopen_request(request_id, "staff", "Not fixed").entity_id

    fresh = _reload(store, test_settings)
    assert fresh.requests().get_by_id(request_id).is_closed
    reopened = fresh.requests().get_by_id(new_id)
    assert reopened.is_open
    assert reopened.original_request_id == request_id
    assert [r.request_id for r in fresh.requests().chain_of(new_id)] == [request_id, new_id]


def test_hard_deletes_reach_the_store(forum_service, store, test_settings, categories) -> None:
    thread_id = forum_service.create_thread("Help", "Ask", "staff").entity_id
    request_id = forum_service.create_request("R", "D", RequestCategory.OTHER, "staff").entity_id
    a = forum_service.create_parameter("A", "D", True, "staff", 0, 0, [], thread_id, categories).entity_id
    b = forum_service.create_parameter("B", "D", True, "staff", 0, 0, [], thread_id, categories).entity_id
    c = forum_service.create_parameter("C", "D", True, "other", 0, 0, [], thread_id, categories).entity_id

    assert forum_service.delete_thread(thread_id, "staff").ok
    assert forum_service.delete_request(request_id).ok
    assert forum_service.delete_request(request_id).kind is ErrorKind.NOT_FOUND
    assert forum_service.delete_parameter(a, "staff").ok
    assert forum_service.delete_parameters_by_creator("staff").ok
    assert not forum_service.delete_parameters_by_creator("staff").ok
    assert forum_service.delete_selected_parameters([c, "PARAM_404"], "other").ok

    fresh = _reload(store, test_settings)
    assert fresh.threads().count() == 0
    assert fresh.requests().count() == 0
    assert fresh.parameters().count() == 0
    assert not fresh.parameters().exists_by_id(b)


def test_failed_create_is_rolled_back(forum_service, store, mocker) -> None:
    mocker.patch.object(store, "save_post", side_effect=StoreError("disk full"))
    result = forum_service.create_post("Title", "Body", "alice")

    assert not result.ok
    assert result.kind is ErrorKind.PERSISTENCE
    assert forum_service.posts().count() == 0


def test_failed_update_restores_previous_state(forum_service, store, mocker) -> None:
    post_id = forum_service.create_post("Title", "Body", "alice").entity_id
    mocker.patch.object(store, "save_post", side_effect=StoreError("disk full"))

    assert forum_service.update_post(post_id, "New", "New body", "alice").kind is ErrorKind.PERSISTENCE
    post = forum_service.posts().get_by_id(post_id)
    assert (post.title, post.body, post.last_edited_at) == ("Title", "Body", None)


def test_failed_delete_restores_thread(forum_service, store, mocker) -> None:
    thread_id = forum_service.create_thread("Help", "Ask", "staff").entity_id
    mocker.patch.object(store, "delete_thread", side_effect=StoreError("locked"))

    assert forum_service.delete_thread(thread_id, "staff").kind is ErrorKind.PERSISTENCE
    assert forum_service.threads().exists_by_id(thread_id)


def test_failed_reopen_discards_new_request(forum_service, store, mocker) -> None:
    request_id = forum_service.create_request("R", "D", RequestCategory.OTHER, "staff").entity_id
    forum_service.close_request(request_id, "admin", "Done")
    mocker.patch.object(store, "save_request", side_effect=StoreError("locked"))

    assert forum_service.reopen_request(request_id, "staff", "Again").kind is ErrorKind.PERSISTENCE
    assert forum_service.requests().count() == 1


def test_without_rollback_failures_are_only_logged(store, test_settings, mocker, caplog) -> None:
    test_settings.write_through_rollback = False
    service = ForumService(store, test_settings)
    mocker.patch.object(store, "save_post", side_effect=StoreError("disk full"))

    result = service.create_post("Title", "Body", "alice")
    assert result.ok
    assert service.posts().exists_by_id(result.entity_id)
    assert "not persisted" in caplog.text


def test_validation_failures_do_not_touch_the_store(forum_service, store, mocker) -> None:
    save = mocker.patch.object(store, "save_post")
    assert forum_service.create_post("", "Body", "alice").kind is ErrorKind.VALIDATION
    save.assert_not_called()


def test_post_count_for_thread(forum_service) -> None:
    forum_service.create_post("A", "Body", "alice", "Help")
    gone = forum_service.create_post("B", "Body", "alice", "Help").entity_id
    forum_service.delete_post(gone, "alice")
    assert forum_service.post_count_for_thread("Help") == 1


def test_failed_load_does_not_overwrite_stored_rows(store, session_factory, test_settings, mocker) -> None:
    store.save_post(Post("POST_1", "Stored", "Body", "carol", "General"))
    reader = SqlForumStore(session_factory)
    mocker.patch.object(
        store, "load_all_posts", side_effect=[StoreError("db down"), reader.load_all_posts()]
    )
    service = ForumService(store, test_settings)
    save = mocker.spy(store, "save_post")

    result = service.create_post("New", "Body", "alice")
    assert result.kind is ErrorKind.PERSISTENCE
    save.assert_not_called()
    assert [(p.post_id, p.title, p.author_username) for p in reader.load_all_posts()] == [
        ("POST_1", "Stored", "carol")
    ]

    # The next call reloads and numbering continues after the stored row.
    assert service.create_post("New", "Body", "alice").entity_id == "POST_2"
    assert reader.load_all_posts()[0].title == "Stored"


def test_mutations_fail_while_the_store_cannot_be_read(store, test_settings, mocker) -> None:
    for loader in ("load_all_posts", "load_all_replies", "load_all_parameters"):
        mocker.patch.object(store, loader, side_effect=StoreError("db down"))
    save_post = mocker.spy(store, "save_post")
    service = ForumService(store, test_settings)

    assert service.create_post("New", "Body", "alice").kind is ErrorKind.PERSISTENCE
    assert service.update_post("POST_1", "T", "B", "alice").kind is ErrorKind.PERSISTENCE
    assert service.create_reply("Hi", "bob", "POST_1").kind is ErrorKind.PERSISTENCE
    assert service.mark_replies_read("POST_1", "alice").kind is ErrorKind.PERSISTENCE
    assert service.delete_parameters_by_creator("staff").kind is ErrorKind.PERSISTENCE
    save_post.assert_not_called()
    assert not service.cache.posts.is_available


def test_failed_read_markers_stay_unread(forum_service, store, mocker) -> None:
    post_id = forum_service.create_post("Essay", "Draft", "alice").entity_id
    first = forum_service.create_reply("One", "bob", post_id).entity_id
    second = forum_service.create_reply("Two", "carol", post_id).entity_id
    mocker.patch.object(store, "save_replies", side_effect=StoreError("locked"))
    save_reply = mocker.spy(store, "save_reply")

    assert forum_service.mark_replies_read(post_id, "alice").kind is ErrorKind.PERSISTENCE
    save_reply.assert_not_called()
    replies = forum_service.replies()
    assert replies.get_by_id(first).is_unread and replies.get_by_id(second).is_unread
    assert all(not r.is_read for r in store.load_all_replies())


def test_read_markers_with_nothing_unread_skip_the_store(forum_service, store, mocker) -> None:
    post_id = forum_service.create_post("Essay", "Draft", "alice").entity_id
    save_replies = mocker.spy(store, "save_replies")
    assert forum_service.mark_replies_read(post_id, "alice").ok
    save_replies.assert_not_called()


def test_failed_bulk_delete_keeps_every_parameter(forum_service, store, categories, mocker) -> None:
    a = forum_service.create_parameter("A", "D", True, "staff", 0, 0, [], "THREAD_1", categories).entity_id
    b = forum_service.create_parameter("B", "D", True, "staff", 0, 0, [], "THREAD_1", categories).entity_id
    mocker.patch.object(store, "delete_parameters", side_effect=StoreError("locked"))

    assert forum_service.delete_selected_parameters([a, b], "staff").kind is ErrorKind.PERSISTENCE
    assert forum_service.parameters().exists_by_id(a)
    assert forum_service.parameters().exists_by_id(b)
    assert sorted(p.parameter_id for p in store.load_all_parameters()) == [a, b]


def test_only_the_creator_may_change_a_parameter(forum_service, store, test_settings, categories) -> None:
    parameter_id = forum_service.create_parameter(
        "Name", "Desc", True, "staff1", 0, 0, [], "THREAD_1", categories
    ).entity_id

    updated = forum_service.update_parameter(parameter_id, "mallory", "Hijacked", "Desc", False)
    assert updated.kind is ErrorKind.AUTHORIZATION
    assert updated.reason == "You can only update parameters you created."
    deleted = forum_service.delete_parameter(parameter_id, "mallory")
    assert deleted.kind is ErrorKind.AUTHORIZATION
    assert deleted.reason == "You can only delete parameters you created."

    fresh = _reload(store, test_settings)
    parameter = fresh.parameters().get_by_id(parameter_id)
    assert (parameter.name, parameter.is_active) == ("Name", True)

    assert forum_service.update_parameter(
        parameter_id, "staff1", "Renamed", "Desc", False, thread_id="THREAD_1", categories=categories
    ).ok
    assert forum_service.update_parameter("PARAM_404", "staff1", "X", "D", True).kind is ErrorKind.NOT_FOUND
    assert forum_service.delete_parameter("PARAM_404", "staff1").kind is ErrorKind.NOT_FOUND


def test_selection_with_foreign_parameter_is_refused(forum_service, categories) -> None:
    mine = forum_service.create_parameter("A", "D", True, "staff1", 0, 0, [], "THREAD_1", categories).entity_id
    theirs = forum_service.create_parameter("B", "D", True, "staff2", 0, 0, [], "THREAD_1", categories).entity_id

    result = forum_service.delete_selected_parameters([mine, theirs], "staff1")
    assert result.kind is ErrorKind.AUTHORIZATION
    assert forum_service.parameters().count() == 2
