# src/forum_desk/api/v1/endpoints/requests.py
"""Support request endpoints for the Forum Desk API."""

from fastapi import APIRouter, HTTPException, Query, status

from forum_desk.api.v1.dependencies import CurrentUserDep, ForumServiceDep, ensure_success
from forum_desk.domain.entities import Request, RequestStatus
from forum_desk.schemas.common import OperationResult
from forum_desk.schemas.request import RequestClose, RequestCreate, RequestReopen, RequestResponse

router = APIRouter(prefix="/requests", tags=["requests"])


def _get_request_or_404(service: ForumServiceDep, request_id: str) -> Request:
    request = service.requests().get_by_id(request_id)
    if request is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Request not found.")
    return request


@router.get("/", response_model=list[RequestResponse])
async def list_requests(
    service: ForumServiceDep,
    status_filter: RequestStatus | None = Query(None, alias="status"),
    creator: str | None = Query(None, description="Only requests raised by this user"),
) -> list[Request]:
    """List requests; open requests come first unless a status is requested."""
    requests = service.requests()
    if status_filter is not None:
        return requests.by_status(status_filter)
    if creator is not None:
        return requests.by_creator(creator)
    return requests.all_sorted()


@router.get("/{request_id}", response_model=RequestResponse)
async def get_request(request_id: str, service: ForumServiceDep) -> Request:
    return _get_request_or_404(service, request_id)


@router.get("/{request_id}/chain", response_model=list[RequestResponse])
async def get_request_chain(request_id: str, service: ForumServiceDep) -> list[Request]:
    """The reopen history ending at ``request_id``, oldest request first."""
    _get_request_or_404(service, request_id)
    return service.requests().chain_of(request_id)


@router.post("/", response_model=RequestResponse, status_code=status.HTTP_201_CREATED)
async def create_request(
    request_data: RequestCreate,
    current_user: CurrentUserDep,
    service: ForumServiceDep,
) -> Request:
    request_id = ensure_success(
        service.create_request(
            request_data.title, request_data.description, request_data.category, current_user
        )
    )
    return _get_request_or_404(service, request_id)


@router.post("/{request_id}/close", response_model=RequestResponse)
async def close_request(
    request_id: str,
    close_data: RequestClose,
    current_user: CurrentUserDep,
    service: ForumServiceDep,
) -> Request:
    """Close an open request with resolution notes."""
    ensure_success(service.close_request(request_id, current_user, close_data.resolution_notes))
    return _get_request_or_404(service, request_id)


@router.post(
    "/{request_id}/reopen",
    response_model=RequestResponse,
    status_code=status.HTTP_201_CREATED,
)
async def reopen_request(
    request_id: str,
    reopen_data: RequestReopen,
    current_user: CurrentUserDep,
    service: ForumServiceDep,
) -> Request:
    """Reopen a closed request as a new linked request.

    Returns:
        The newly created open request
    """
    new_id = ensure_success(
        service.reopen_request(request_id, current_user, reopen_data.reopen_reason)
    )
    return _get_request_or_404(service, new_id)


@router.delete("/{request_id}", response_model=OperationResult)
async def delete_request(
    request_id: str,
    current_user: CurrentUserDep,
    service: ForumServiceDep,
) -> OperationResult:
    return OperationResult(entity_id=ensure_success(service.delete_request(request_id)))
