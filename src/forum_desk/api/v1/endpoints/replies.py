# src/forum_desk/api/v1/endpoints/replies.py
"""Reply and feedback endpoints for the Forum Desk API."""

from fastapi import APIRouter, HTTPException, Query, status

from forum_desk.api.v1.dependencies import CurrentUserDep, ForumServiceDep, ensure_success
from forum_desk.domain.entities import Reply
from forum_desk.schemas.common import OperationResult
from forum_desk.schemas.reply import ReplyCreate, ReplyResponse, ReplyUpdate

router = APIRouter(prefix="/replies", tags=["replies"])


def _get_visible_reply(service: ForumServiceDep, reply_id: str, viewer: str) -> Reply:
    reply = service.replies().get_by_id(reply_id)
    if reply is not None and reply.is_feedback:
        post = service.posts().get_by_id(reply.parent_post_id)
        post_author = post.author_username if post is not None else None
        if not reply.can_view(viewer, post_author):
            reply = None
    if reply is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reply not found.")
    return reply


@router.get("/", response_model=list[ReplyResponse])
async def list_replies(
    current_user: CurrentUserDep,
    service: ForumServiceDep,
    author: str | None = Query(None, description="Only replies by this user"),
    limit: int = Query(50, ge=1, le=500),
) -> list[Reply]:
    """Recent replies, or every reply by ``author``; feedback is filtered per viewer."""
    replies = service.replies()
    listing = replies.all_of_author(author) if author is not None else replies.recent(limit)
    posts = service.posts()

    def _visible(reply: Reply) -> bool:
        if not reply.is_feedback:
            return True
        post = posts.get_by_id(reply.parent_post_id)
        return reply.can_view(current_user, post.author_username if post is not None else None)

    return [reply for reply in listing if _visible(reply)]


@router.get("/{reply_id}", response_model=ReplyResponse)
async def get_reply(reply_id: str, current_user: CurrentUserDep, service: ForumServiceDep) -> Reply:
    """Get one reply; feedback is hidden from everyone but its two parties."""
    return _get_visible_reply(service, reply_id, current_user)


@router.post("/", response_model=ReplyResponse, status_code=status.HTTP_201_CREATED)
async def create_reply(
    reply_data: ReplyCreate,
    current_user: CurrentUserDep,
    service: ForumServiceDep,
) -> Reply:
    """Reply to a post as the acting user."""
    reply_id = ensure_success(
        service.create_reply(
            reply_data.body,
            current_user,
            reply_data.parent_post_id,
            is_feedback=reply_data.is_feedback,
        )
    )
    return service.replies().get_by_id(reply_id)


@router.put("/{reply_id}", response_model=ReplyResponse)
async def update_reply(
    reply_id: str,
    reply_data: ReplyUpdate,
    current_user: CurrentUserDep,
    service: ForumServiceDep,
) -> Reply:
    """Edit a reply; only its author may do so."""
    ensure_success(service.update_reply(reply_id, reply_data.body, current_user))
    return service.replies().get_by_id(reply_id)


@router.delete("/{reply_id}", response_model=OperationResult)
async def delete_reply(
    reply_id: str,
    current_user: CurrentUserDep,
    service: ForumServiceDep,
) -> OperationResult:
    """Soft-delete a reply."""
    return OperationResult(entity_id=ensure_success(service.delete_reply(reply_id, current_user)))
