# src/forum_desk/api/v1/endpoints/threads.py
"""Thread endpoints for the Forum Desk API."""

from fastapi import APIRouter, HTTPException, Query, status

from forum_desk.api.v1.dependencies import CurrentUserDep, ForumServiceDep, ensure_success
from forum_desk.domain.entities import Thread, ThreadStatus
from forum_desk.schemas.common import OperationResult
from forum_desk.schemas.thread import ThreadCreate, ThreadResponse, ThreadUpdate

router = APIRouter(prefix="/threads", tags=["threads"])


def _to_response(service: ForumServiceDep, thread: Thread) -> ThreadResponse:
    response = ThreadResponse.model_validate(thread)
    response.post_count = service.post_count_for_thread(thread.title)
    return response


def _get_thread_or_404(service: ForumServiceDep, thread_id: str) -> Thread:
    thread = service.threads().get_by_id(thread_id)
    if thread is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Thread not found.")
    return thread


@router.get("/", response_model=list[ThreadResponse])
async def list_threads(
    service: ForumServiceDep,
    status_filter: ThreadStatus | None = Query(None, alias="status"),
    creator: str | None = Query(None, description="Only threads created by this user"),
) -> list[ThreadResponse]:
    """List threads; open threads come first unless a status is requested."""
    threads = service.threads()
    if status_filter is not None:
        listing = threads.by_status(status_filter)
    elif creator is not None:
        listing = threads.by_creator(creator)
    else:
        listing = threads.all_sorted()
    return [_to_response(service, thread) for thread in listing]


@router.get("/{thread_id}", response_model=ThreadResponse)
async def get_thread(thread_id: str, service: ForumServiceDep) -> ThreadResponse:
    return _to_response(service, _get_thread_or_404(service, thread_id))


@router.post("/", response_model=ThreadResponse, status_code=status.HTTP_201_CREATED)
async def create_thread(
    thread_data: ThreadCreate,
    current_user: CurrentUserDep,
    service: ForumServiceDep,
) -> ThreadResponse:
    """Create a thread owned by the acting user."""
    thread_id = ensure_success(
        service.create_thread(
            thread_data.title, thread_data.description, current_user, thread_data.status
        )
    )
    return _to_response(service, _get_thread_or_404(service, thread_id))


@router.put("/{thread_id}", response_model=ThreadResponse)
async def update_thread(
    thread_id: str,
    thread_data: ThreadUpdate,
    current_user: CurrentUserDep,
    service: ForumServiceDep,
) -> ThreadResponse:
    ensure_success(
        service.update_thread(
            thread_id,
            thread_data.title,
            thread_data.description,
            current_user,
            thread_data.status,
        )
    )
    return _to_response(service, _get_thread_or_404(service, thread_id))


@router.delete("/{thread_id}", response_model=OperationResult)
async def delete_thread(
    thread_id: str,
    current_user: CurrentUserDep,
    service: ForumServiceDep,
) -> OperationResult:
    """Remove a thread; posts filed under its name are left alone."""
    return OperationResult(entity_id=ensure_success(service.delete_thread(thread_id, current_user)))
