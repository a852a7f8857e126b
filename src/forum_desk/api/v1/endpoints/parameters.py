# src/forum_desk/api/v1/endpoints/parameters.py
"""Grading parameter endpoints for the Forum Desk API."""

from fastapi import APIRouter, HTTPException, Query, status

from forum_desk.api.v1.dependencies import CurrentUserDep, ForumServiceDep, ensure_success
from forum_desk.domain.entities import Parameter
from forum_desk.schemas.common import OperationResult
from forum_desk.schemas.parameter import ParameterCreate, ParameterResponse, ParameterSelection

router = APIRouter(prefix="/parameters", tags=["parameters"])


def _get_parameter_or_404(service: ForumServiceDep, parameter_id: str) -> Parameter:
    parameter = service.parameters().get_by_id(parameter_id)
    if parameter is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Parameter not found.")
    return parameter


@router.get("/", response_model=list[ParameterResponse])
async def list_parameters(
    service: ForumServiceDep,
    creator: str | None = Query(None, description="Only parameters created by this user"),
    thread_id: str | None = Query(None, description="Only parameters for this thread"),
    active_only: bool = Query(False),
) -> list[Parameter]:
    """List parameters, newest first."""
    parameters = service.parameters()
    if creator is not None:
        return parameters.active_by_creator(creator) if active_only else parameters.by_creator(creator)
    if thread_id is not None:
        listing = parameters.by_thread(thread_id)
        return [p for p in listing if p.is_active] if active_only else listing
    return parameters.all_active() if active_only else parameters.all()


@router.get("/{parameter_id}", response_model=ParameterResponse)
async def get_parameter(parameter_id: str, service: ForumServiceDep) -> Parameter:
    return _get_parameter_or_404(service, parameter_id)


@router.post("/", response_model=ParameterResponse, status_code=status.HTTP_201_CREATED)
async def create_parameter(
    parameter_data: ParameterCreate,
    current_user: CurrentUserDep,
    service: ForumServiceDep,
) -> Parameter:
    parameter_id = ensure_success(
        service.create_parameter(
            parameter_data.name,
            parameter_data.description,
            parameter_data.is_active,
            current_user,
            parameter_data.required_posts,
            parameter_data.required_replies,
            parameter_data.topics,
            parameter_data.thread_id,
            parameter_data.domain_categories(),
        )
    )
    return _get_parameter_or_404(service, parameter_id)


@router.put("/{parameter_id}", response_model=ParameterResponse)
async def update_parameter(
    parameter_id: str,
    parameter_data: ParameterCreate,
    current_user: CurrentUserDep,
    service: ForumServiceDep,
) -> Parameter:
    """Replace every editable field; only the creator may edit a parameter."""
    ensure_success(
        service.update_parameter(
            parameter_id,
            current_user,
            parameter_data.name,
            parameter_data.description,
            parameter_data.is_active,
            parameter_data.required_posts,
            parameter_data.required_replies,
            parameter_data.topics,
            parameter_data.thread_id,
            parameter_data.domain_categories(),
        )
    )
    return _get_parameter_or_404(service, parameter_id)


@router.delete("/{parameter_id}", response_model=OperationResult)
async def delete_parameter(
    parameter_id: str,
    current_user: CurrentUserDep,
    service: ForumServiceDep,
) -> OperationResult:
    return OperationResult(entity_id=ensure_success(service.delete_parameter(parameter_id, current_user)))


@router.post("/delete-selected", response_model=OperationResult)
async def delete_selected_parameters(
    selection: ParameterSelection,
    current_user: CurrentUserDep,
    service: ForumServiceDep,
) -> OperationResult:
    """Delete several of the acting user's parameters; succeeds when at least one existed."""
    return OperationResult(
        entity_id=ensure_success(service.delete_selected_parameters(selection.parameter_ids, current_user))
    )


@router.delete("/", response_model=OperationResult)
async def delete_my_parameters(
    current_user: CurrentUserDep,
    service: ForumServiceDep,
) -> OperationResult:
    """Delete every parameter created by the acting user."""
    return OperationResult(
        entity_id=ensure_success(service.delete_parameters_by_creator(current_user))
    )
