"""SQLAlchemy-backed persistent store for forum entities.

The store is the durable, authoritative record behind the in-memory
collections. It offers three calls per entity kind: load everything, upsert
one record, delete one record by id. Replies and parameters also have batch
calls that write every row in a single transaction. Any database failure is
re-raised as :class:`StoreError`; callers decide whether to absorb it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from typing import TypeVar

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from forum_desk.db.time import as_utc
from forum_desk.domain.entities import (
    Parameter,
    ParameterCategory,
    Post,
    Reply,
    Request,
    RequestCategory,
    RequestStatus,
    Thread,
    ThreadStatus,
)
from forum_desk.models import (
    ParameterCategoryRecord,
    ParameterRecord,
    PostRecord,
    ReplyRecord,
    RequestRecord,
    ThreadRecord,
)

__all__ = ["SqlForumStore", "StoreError"]

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StoreError(RuntimeError):
    """Raised when the backing database rejects a load, save or delete."""


def _post_from_record(row: PostRecord) -> Post:
    return Post(
        post_id=row.post_id,
        title=row.title,
        body=row.body,
        author_username=row.author_username,
        thread=row.thread,
        created_at=as_utc(row.created_at),
        last_edited_at=as_utc(row.last_edited_at),
        is_deleted=bool(row.is_deleted),
    )


def _reply_from_record(row: ReplyRecord) -> Reply:
    return Reply(
        reply_id=row.reply_id,
        body=row.body,
        author_username=row.author_username,
        parent_post_id=row.parent_post_id,
        is_feedback=bool(row.is_feedback),
        created_at=as_utc(row.created_at),
        last_edited_at=as_utc(row.last_edited_at),
        is_deleted=bool(row.is_deleted),
        is_read=bool(row.is_read),
    )


def _thread_from_record(row: ThreadRecord) -> Thread:
    status = ThreadStatus.CLOSED if row.status == ThreadStatus.CLOSED.value else ThreadStatus.OPEN
    return Thread(
        thread_id=row.thread_id,
        title=row.title,
        description=row.description,
        created_by_username=row.created_by_username,
        status=status,
        created_at=as_utc(row.created_at),
    )


def _parse_category(name: str | None) -> RequestCategory | None:
    if name is None:
        return None
    try:
        return RequestCategory[name]
    except KeyError:
        logger.warning("Unknown request category %r; loading without category", name)
        return None


def _request_from_record(row: RequestRecord) -> Request:
    status = RequestStatus.CLOSED if row.status == RequestStatus.CLOSED.value else RequestStatus.OPEN
    return Request(
        request_id=row.request_id,
        title=row.title,
        description=row.description,
        category=_parse_category(row.category),
        created_by_username=row.created_by_username,
        status=status,
        closed_by_username=row.closed_by_username,
        resolution_notes=row.resolution_notes,
        reopen_reason=row.reopen_reason,
        original_request_id=row.original_request_id,
        created_at=as_utc(row.created_at),
        closed_at=as_utc(row.closed_at),
        reopened_at=as_utc(row.reopened_at),
    )


def _parameter_from_record(row: ParameterRecord) -> Parameter:
    return Parameter(
        parameter_id=row.parameter_id,
        name=row.name,
        description=row.description,
        is_active=bool(row.is_active),
        created_by_username=row.created_by_username,
        required_posts=row.required_posts or 0,
        required_replies=row.required_replies or 0,
        topics=[t for t in (row.topics or []) if t and t.strip()],
        thread_id=row.thread_id,
        categories=[ParameterCategory(c.category_name, c.weight) for c in row.categories],
        created_at=as_utc(row.created_at),
    )


def _reply_record(reply: Reply) -> ReplyRecord:
    return ReplyRecord(
        reply_id=reply.reply_id,
        body=reply.body,
        author_username=reply.author_username,
        parent_post_id=reply.parent_post_id,
        created_at=reply.created_at,
        last_edited_at=reply.last_edited_at,
        is_deleted=reply.is_deleted,
        is_read=reply.is_read,
        is_feedback=reply.is_feedback,
    )


class SqlForumStore:
    """Load-all/upsert/delete access to every forum table."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        """Initialize the store with a factory producing SQLAlchemy sessions."""
        self._session_factory = session_factory

    @contextmanager
    def _session(self, action: str) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreError(f"Could not {action}: {exc}") from exc
        finally:
            session.close()

    def _load(self, action: str, stmt, convert: Callable[[object], T]) -> list[T]:
        with self._session(action) as session:
            return [convert(row) for row in session.scalars(stmt)]

    def _delete(self, action: str, model: type, column, entity_id: str) -> bool:
        with self._session(action) as session:
            result = session.execute(delete(model).where(column == entity_id))
            return (result.rowcount or 0) > 0

    # Posts ---------------------------------------------------------------

    def load_all_posts(self) -> list[Post]:
        return self._load("load posts", select(PostRecord), _post_from_record)

    def save_post(self, post: Post) -> None:
        with self._session(f"save post {post.post_id}") as session:
            session.merge(
                PostRecord(
                    post_id=post.post_id,
                    title=post.title,
                    body=post.body,
                    author_username=post.author_username,
                    thread=post.thread,
                    created_at=post.created_at,
                    last_edited_at=post.last_edited_at,
                    is_deleted=post.is_deleted,
                )
            )

    def delete_post(self, post_id: str) -> bool:
        return self._delete(f"delete post {post_id}", PostRecord, PostRecord.post_id, post_id)

    def post_count_for_thread(self, thread: str) -> int:
        """Count non-deleted posts stored under ``thread``."""
        with self._session("count posts") as session:
            rows = session.scalars(
                select(PostRecord.post_id).where(
                    PostRecord.thread == thread,
                    PostRecord.is_deleted.is_(False),
                )
            )
            return len(list(rows))

    # Replies -------------------------------------------------------------

    def load_all_replies(self) -> list[Reply]:
        return self._load("load replies", select(ReplyRecord), _reply_from_record)

    def save_reply(self, reply: Reply) -> None:
        with self._session(f"save reply {reply.reply_id}") as session:
            session.merge(_reply_record(reply))

    def save_replies(self, replies: Iterable[Reply]) -> None:
        """Upsert several replies in one transaction; none are kept if any fails."""
        with self._session("save replies") as session:
            for reply in replies:
                session.merge(_reply_record(reply))

    def delete_reply(self, reply_id: str) -> bool:
        return self._delete(f"delete reply {reply_id}", ReplyRecord, ReplyRecord.reply_id, reply_id)

    # Threads -------------------------------------------------------------

    def load_all_threads(self) -> list[Thread]:
        return self._load("load threads", select(ThreadRecord), _thread_from_record)

    def save_thread(self, thread: Thread) -> None:
        with self._session(f"save thread {thread.thread_id}") as session:
            session.merge(
                ThreadRecord(
                    thread_id=thread.thread_id,
                    title=thread.title,
                    description=thread.description,
                    status=thread.status.value,
                    created_by_username=thread.created_by_username,
                    created_at=thread.created_at,
                )
            )

    def delete_thread(self, thread_id: str) -> bool:
        return self._delete(f"delete thread {thread_id}", ThreadRecord, ThreadRecord.thread_id, thread_id)

    # Requests ------------------------------------------------------------

    def load_all_requests(self) -> list[Request]:
        return self._load("load requests", select(RequestRecord), _request_from_record)

    def save_request(self, request: Request) -> None:
        with self._session(f"save request {request.request_id}") as session:
            session.merge(
                RequestRecord(
                    request_id=request.request_id,
                    title=request.title,
                    description=request.description,
                    category=request.category.name if request.category is not None else None,
                    status=request.status.value,
                    created_by_username=request.created_by_username,
                    closed_by_username=request.closed_by_username,
                    resolution_notes=request.resolution_notes,
                    reopen_reason=request.reopen_reason,
                    original_request_id=request.original_request_id,
                    created_at=request.created_at,
                    closed_at=request.closed_at,
                    reopened_at=request.reopened_at,
                )
            )

    def delete_request(self, request_id: str) -> bool:
        return self._delete(
            f"delete request {request_id}", RequestRecord, RequestRecord.request_id, request_id
        )

    # Parameters ----------------------------------------------------------

    def load_all_parameters(self) -> list[Parameter]:
        stmt = select(ParameterRecord).options(selectinload(ParameterRecord.categories))
        return self._load("load parameters", stmt, _parameter_from_record)

    def save_parameter(self, parameter: Parameter) -> None:
        """Upsert a parameter and replace its categories in order."""
        with self._session(f"save parameter {parameter.parameter_id}") as session:
            session.merge(
                ParameterRecord(
                    parameter_id=parameter.parameter_id,
                    name=parameter.name,
                    description=parameter.description,
                    is_active=parameter.is_active,
                    created_by_username=parameter.created_by_username,
                    created_at=parameter.created_at,
                    required_posts=parameter.required_posts,
                    required_replies=parameter.required_replies,
                    topics=list(parameter.topics),
                    thread_id=parameter.thread_id,
                    categories=[
                        ParameterCategoryRecord(
                            parameter_id=parameter.parameter_id,
                            position=position,
                            category_name=category.category_name,
                            weight=category.weight,
                        )
                        for position, category in enumerate(parameter.categories)
                    ],
                )
            )

    def delete_parameter(self, parameter_id: str) -> bool:
        return self._delete_parameters(f"delete parameter {parameter_id}", [parameter_id]) > 0

    def delete_parameters(self, parameter_ids: Iterable[str]) -> int:
        """Delete several parameters in one transaction and return how many existed."""
        return self._delete_parameters("delete parameters", parameter_ids)

    def _delete_parameters(self, action: str, parameter_ids: Iterable[str]) -> int:
        deleted = 0
        with self._session(action) as session:
            for parameter_id in parameter_ids:
                record = session.get(ParameterRecord, parameter_id)
                if record is None:
                    continue
                # ORM delete so the category cascade also runs on SQLite.
                session.delete(record)
                deleted += 1
        return deleted
