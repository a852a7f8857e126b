# src/forum_desk/api/v1/endpoints/posts.py
"""Post-related endpoints for the Forum Desk API."""

from fastapi import APIRouter, HTTPException, Query, status

from forum_desk.api.v1.dependencies import (
    CurrentUserDep,
    ForumServiceDep,
    OptionalUserDep,
    ensure_success,
)
from forum_desk.domain.entities import Post, Reply
from forum_desk.schemas.common import OperationResult
from forum_desk.schemas.post import PostCreate, PostResponse, PostUpdate
from forum_desk.schemas.reply import ReplyResponse

router = APIRouter(prefix="/posts", tags=["posts"])


def _get_post_or_404(service: ForumServiceDep, post_id: str) -> Post:
    post = service.posts().get_by_id(post_id)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found.")
    return post


@router.get("/", response_model=list[PostResponse])
async def list_posts(
    service: ForumServiceDep,
    q: str | None = Query(None, description="Keyword matched against title and body"),
    thread: str | None = Query(None, description="Thread name, or 'All'"),
    author: str | None = Query(None, description="Only posts by this user"),
    limit: int = Query(50, ge=1, le=500, description="Maximum number of recent posts"),
) -> list[Post]:
    """List posts, newest first.

    With ``q`` the posts are searched (a blank or over-long keyword returns
    nothing); otherwise ``author`` and ``thread`` filter the full listing,
    and without either the most recent non-deleted posts are returned.
    """
    if q is not None:
        return service.search_posts(q, thread)
    posts = service.posts()
    if author is not None:
        return posts.all_of_author(author)
    if thread is not None:
        return posts.all_of_thread(thread)
    return posts.recent(limit)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: str, service: ForumServiceDep) -> Post:
    """Get a specific post by ID, including tombstoned posts."""
    return _get_post_or_404(service, post_id)


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    current_user: CurrentUserDep,
    service: ForumServiceDep,
) -> Post:
    """Create a new post authored by the acting user."""
    post_id = ensure_success(
        service.create_post(post_data.title, post_data.body, current_user, post_data.thread)
    )
    return _get_post_or_404(service, post_id)


@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: str,
    post_data: PostUpdate,
    current_user: CurrentUserDep,
    service: ForumServiceDep,
) -> Post:
    """Replace a post's title and body; only the author may edit."""
    ensure_success(service.update_post(post_id, post_data.title, post_data.body, current_user))
    return _get_post_or_404(service, post_id)


@router.delete("/{post_id}", response_model=OperationResult)
async def delete_post(
    post_id: str,
    current_user: CurrentUserDep,
    service: ForumServiceDep,
) -> OperationResult:
    """Soft-delete a post; replies stay attached to the tombstone."""
    return OperationResult(entity_id=ensure_success(service.delete_post(post_id, current_user)))


@router.get("/{post_id}/replies", response_model=list[ReplyResponse])
async def list_post_replies(
    post_id: str,
    service: ForumServiceDep,
    viewer: OptionalUserDep,
    unread_only: bool = Query(False, description="Only replies the viewer has not read"),
) -> list[Reply]:
    """Public replies to a post, oldest first."""
    _get_post_or_404(service, post_id)
    if unread_only:
        return service.replies().unread_for_post(post_id, viewer)
    return service.replies_for_post(post_id)


@router.get("/{post_id}/feedback", response_model=list[ReplyResponse])
async def list_post_feedback(
    post_id: str,
    current_user: CurrentUserDep,
    service: ForumServiceDep,
) -> list[Reply]:
    """Private feedback on a post visible to the acting user."""
    _get_post_or_404(service, post_id)
    return service.feedback_for_post(post_id, current_user)


@router.post("/{post_id}/read", response_model=OperationResult)
async def mark_post_read(
    post_id: str,
    current_user: CurrentUserDep,
    service: ForumServiceDep,
) -> OperationResult:
    """Mark other users' replies on a post as read."""
    _get_post_or_404(service, post_id)
    return OperationResult(entity_id=ensure_success(service.mark_replies_read(post_id, current_user)))
