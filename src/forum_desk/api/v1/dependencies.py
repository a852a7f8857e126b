"""Shared API dependencies for the acting user and the forum service."""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from forum_desk.core.results import ErrorKind, Result
from forum_desk.services.forum import ForumService, get_forum_service

# Authentication happens upstream; the gateway forwards the signed-in username.
ACTOR_HEADER = "X-Forum-User"

FAILURE_STATUS: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.AUTHORIZATION: status.HTTP_403_FORBIDDEN,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.PERSISTENCE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def get_forum_service_dep() -> ForumService:
    """Return the shared forum service."""
    return get_forum_service()


def get_optional_username(
    x_forum_user: Annotated[str | None, Header(alias=ACTOR_HEADER)] = None,
) -> str | None:
    """Return the acting username when the header is present."""
    if x_forum_user is None or not x_forum_user.strip():
        return None
    return x_forum_user.strip()


def get_current_username(
    username: Annotated[str | None, Depends(get_optional_username)],
) -> str:
    """Return the acting username.

    Raises:
        HTTPException: If the request does not name an acting user
    """
    if username is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Missing {ACTOR_HEADER} header",
        )
    return username


def ensure_success(result: Result) -> str:
    """Return the affected identifier or raise the matching HTTP error."""
    if result.ok:
        return result.entity_id
    raise HTTPException(status_code=FAILURE_STATUS[result.kind], detail=result.reason)


ForumServiceDep = Annotated[ForumService, Depends(get_forum_service_dep)]
CurrentUserDep = Annotated[str, Depends(get_current_username)]
OptionalUserDep = Annotated[str | None, Depends(get_optional_username)]
