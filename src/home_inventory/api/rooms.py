"""Room, analysis and report endpoints."""

from uuid import UUID

from fastapi import (
    APIRouter,
    Depends,
    File,
    HTTPException,
    Request,
    Response,
    UploadFile,
    status,
)
from fastapi.responses import JSONResponse

from home_inventory.api.dependencies import (
    UNPROCESSABLE,
    format_error,
    get_container,
    read_upload,
    require_owned_home,
    require_room,
    require_user,
)
from home_inventory.api.schemas import (
    AnalysisResponse,
    AnalysisStatusResponse,
    RoomForm,
    RoomResponse,
)
from home_inventory.domain.errors import (
    AnalysisError,
    NotFoundError,
    PersistError,
    StaleAnalysisError,
    ValidationError,
)
from home_inventory.services.pending import select_pending_photos
from home_inventory.services.reports import render_room_report, report_filename
from home_inventory.services.storage import sanitize_filename

router = APIRouter(prefix="/homes/{home_id}/rooms", tags=["rooms"])


@router.get("", response_model=list[RoomResponse])
async def list_rooms(
    home_id: UUID, request: Request, user_id: str = Depends(require_user)
) -> list[RoomResponse]:
    """Return the rooms of a home, newest first."""
    container = get_container(request)
    require_owned_home(container, home_id, user_id)
    rooms = container.room_service.list_rooms(home_id)
    return [RoomResponse.from_record(room) for room in rooms]


@router.post("", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
async def create_room(
    home_id: UUID,
    payload: RoomForm,
    request: Request,
    user_id: str = Depends(require_user),
) -> RoomResponse:
    """Create a room in a home."""
    container = get_container(request)
    require_owned_home(container, home_id, user_id)
    room = container.room_service.create_room(home_id, payload.name)
    return RoomResponse.from_record(room)


@router.get("/{room_id}", response_model=RoomResponse)
async def get_room(
    home_id: UUID,
    room_id: UUID,
    request: Request,
    user_id: str = Depends(require_user),
) -> RoomResponse:
    """Return a room with its latest analysis."""
    container = get_container(request)
    require_owned_home(container, home_id, user_id)
    return RoomResponse.from_record(require_room(container, home_id, room_id))


@router.patch("/{room_id}", response_model=RoomResponse)
async def rename_room(
    home_id: UUID,
    room_id: UUID,
    payload: RoomForm,
    request: Request,
    user_id: str = Depends(require_user),
) -> RoomResponse:
    """Rename a room."""
    container = get_container(request)
    require_owned_home(container, home_id, user_id)
    try:
        room = container.room_service.rename_room(home_id, room_id, payload.name)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND) from exc
    return RoomResponse.from_record(room)


@router.delete("/{room_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_room(
    home_id: UUID,
    room_id: UUID,
    request: Request,
    user_id: str = Depends(require_user),
) -> Response:
    """Delete a room and its analyzed photos."""
    container = get_container(request)
    require_owned_home(container, home_id, user_id)
    container.room_service.delete_room(home_id, room_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{room_id}/analysis", response_model=AnalysisResponse)
async def analyze_room(
    home_id: UUID,
    room_id: UUID,
    request: Request,
    photos: list[UploadFile] = File(...),
    user_id: str = Depends(require_user),
) -> AnalysisResponse | JSONResponse:
    """Upload the pending photos and identify the objects in the room."""
    container = get_container(request)
    require_owned_home(container, home_id, user_id)
    room = require_room(container, home_id, room_id)
    if room.is_analyzing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="An analysis is already in progress for this room.",
        )

    incoming = [await read_upload(upload) for upload in photos]
    selection = select_pending_photos(
        [], incoming, max_photos=container.settings.max_pending_photos
    )
    if selection.rejected_types:
        raise HTTPException(
            status_code=UNPROCESSABLE,
            detail="Some files were not valid image types: "
            + ", ".join(selection.rejected_names),
        )
    if selection.over_limit:
        raise HTTPException(
            status_code=UNPROCESSABLE,
            detail=(
                "You can upload a maximum of "
                f"{container.settings.max_pending_photos} photos."
            ),
        )

    try:
        outcome = await container.analysis_coordinator.run_analysis(
            home_id, room_id, user_id, selection.photos
        )
    except ValidationError as exc:
        raise HTTPException(status_code=UNPROCESSABLE, detail=str(exc)) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND) from exc

    if outcome.success:
        return AnalysisResponse.from_outcome(outcome)
    message = outcome.message
    if outcome.error is not None:
        message = format_error(container, outcome.error, outcome.message)
    body = AnalysisResponse.from_outcome(outcome, message=message)
    return JSONResponse(
        status_code=_failure_status(outcome.error),
        content=body.model_dump(mode="json", by_alias=True),
    )


@router.get("/{room_id}/analysis", response_model=AnalysisStatusResponse)
async def analysis_status(
    home_id: UUID,
    room_id: UUID,
    request: Request,
    user_id: str = Depends(require_user),
) -> AnalysisStatusResponse:
    """Return whether the room is being analyzed and how far the run got."""
    container = get_container(request)
    require_owned_home(container, home_id, user_id)
    room = require_room(container, home_id, room_id)
    progress = container.analysis_tracker.get(home_id, room_id)
    return AnalysisStatusResponse.from_state(room, progress)


@router.delete("/{room_id}/analysis", response_model=RoomResponse)
async def clear_analysis(
    home_id: UUID,
    room_id: UUID,
    request: Request,
    user_id: str = Depends(require_user),
) -> RoomResponse:
    """Clear the analysis results and delete the analyzed photos."""
    container = get_container(request)
    require_owned_home(container, home_id, user_id)
    try:
        container.room_service.clear_analysis_result(home_id, room_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND) from exc
    return RoomResponse.from_record(require_room(container, home_id, room_id))


@router.get("/{room_id}/report")
async def download_report(
    home_id: UUID,
    room_id: UUID,
    request: Request,
    user_id: str = Depends(require_user),
) -> Response:
    """Export the identified objects as a PDF."""
    container = get_container(request)
    home = require_owned_home(container, home_id, user_id)
    room = require_room(container, home_id, room_id)
    try:
        content = render_room_report(room, home_name=home.name)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail=str(exc)
        ) from exc
    filename = sanitize_filename(report_filename(room, home_name=home.name))
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def _failure_status(error: AnalysisError | None) -> int:
    if isinstance(error, StaleAnalysisError):
        return status.HTTP_409_CONFLICT
    if isinstance(error, PersistError):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    return status.HTTP_502_BAD_GATEWAY
