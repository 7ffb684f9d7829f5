"""Request helpers shared by the API routers."""

from uuid import UUID

from fastapi import Header, HTTPException, Request, UploadFile, status

from home_inventory.containers import AppContainer
from home_inventory.domain.models import HomeRecord, PendingPhoto, RoomRecord

UNPROCESSABLE = 422

_GENERIC_CONTENT_TYPE = "application/octet-stream"


def get_container(request: Request) -> AppContainer:
    """Return the dependency container stored on the app."""
    return request.app.state.container


async def require_user(x_user_id: str | None = Header(default=None)) -> str:
    """Return the caller's user id as asserted by the identity provider."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return x_user_id.strip()


def require_owned_home(
    container: AppContainer, home_id: UUID, user_id: str
) -> HomeRecord:
    """Return the home when it exists and belongs to the user."""
    home = container.home_service.get_home(home_id)
    if home is None or home.owner_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Home not found or you do not have access.",
        )
    return home


def require_room(container: AppContainer, home_id: UUID, room_id: UUID) -> RoomRecord:
    """Return the room of a home or raise 404."""
    room = container.room_service.get_room(home_id, room_id)
    if room is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Room not found or you do not have access.",
        )
    return room


async def read_upload(upload: UploadFile) -> PendingPhoto:
    """Read an uploaded file into a pending photo."""
    content = await upload.read()
    content_type = upload.content_type
    if content_type == _GENERIC_CONTENT_TYPE:
        content_type = None
    return PendingPhoto(
        filename=upload.filename or "photo",
        content=content,
        content_type=content_type,
    )


def format_error(container: AppContainer, exc: Exception, fallback: str) -> str:
    """Return a user-facing error message with local debug info."""
    if container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback
