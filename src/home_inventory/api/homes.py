"""Home endpoints."""

import logging
from uuid import UUID

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    HTTPException,
    Request,
    Response,
    UploadFile,
    status,
)
from pydantic import ValidationError as PydanticValidationError

from home_inventory.api.dependencies import (
    UNPROCESSABLE,
    format_error,
    get_container,
    read_upload,
    require_owned_home,
    require_user,
)
from home_inventory.api.schemas import HomeForm, HomeResponse, HomeUpdateForm
from home_inventory.containers import AppContainer
from home_inventory.domain.errors import UploadError
from home_inventory.domain.models import PendingPhoto
from home_inventory.services.storage import sniff_image_type

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/homes", tags=["homes"])

COVER_IMAGE_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png", "image/webp"})


@router.get("", response_model=list[HomeResponse])
async def list_homes(
    request: Request, user_id: str = Depends(require_user)
) -> list[HomeResponse]:
    """Return the caller's homes, newest first."""
    container = get_container(request)
    homes = container.home_service.list_homes(user_id)
    return [HomeResponse.from_record(home) for home in homes]


@router.post("", response_model=HomeResponse, status_code=status.HTTP_201_CREATED)
async def create_home(
    request: Request,
    name: str = Form(...),
    description: str | None = Form(default=None),
    cover_image: UploadFile | None = File(default=None),
    user_id: str = Depends(require_user),
) -> HomeResponse:
    """Create a home with an optional cover image."""
    container = get_container(request)
    form = _validate(HomeForm, name=name, description=description)
    cover = await _read_cover(container, cover_image)
    try:
        home = container.home_service.create_home(
            owner_id=user_id,
            name=form.name,
            description=form.description,
            cover=cover,
        )
    except UploadError as exc:
        logger.exception("Failed to upload home cover", extra={"user_id": user_id})
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=format_error(container, exc, "Could not upload the cover image."),
        ) from exc
    return HomeResponse.from_record(home)


@router.get("/{home_id}", response_model=HomeResponse)
async def get_home(
    home_id: UUID, request: Request, user_id: str = Depends(require_user)
) -> HomeResponse:
    """Return a single home."""
    container = get_container(request)
    return HomeResponse.from_record(require_owned_home(container, home_id, user_id))


@router.patch("/{home_id}", response_model=HomeResponse)
async def update_home(  # noqa: PLR0913
    home_id: UUID,
    request: Request,
    name: str | None = Form(default=None),
    description: str | None = Form(default=None),
    clear_description: bool = Form(default=False),
    cover_image: UploadFile | None = File(default=None),
    user_id: str = Depends(require_user),
) -> HomeResponse:
    """Edit name, description or cover image of a home."""
    container = get_container(request)
    require_owned_home(container, home_id, user_id)
    form = _validate(HomeUpdateForm, name=name, description=description)
    cover = await _read_cover(container, cover_image)
    try:
        home = container.home_service.update_home(
            home_id,
            owner_id=user_id,
            name=form.name,
            description=form.description,
            clear_description=clear_description,
            cover=cover,
        )
    except UploadError as exc:
        logger.exception(
            "Failed to replace home cover", extra={"home_id": str(home_id)}
        )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=format_error(container, exc, "Could not upload the cover image."),
        ) from exc
    return HomeResponse.from_record(home)


@router.delete("/{home_id}/cover", status_code=status.HTTP_204_NO_CONTENT)
async def remove_cover_image(
    home_id: UUID, request: Request, user_id: str = Depends(require_user)
) -> Response:
    """Remove the cover image of a home."""
    container = get_container(request)
    require_owned_home(container, home_id, user_id)
    container.home_service.remove_cover_image(home_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{home_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_home(
    home_id: UUID, request: Request, user_id: str = Depends(require_user)
) -> Response:
    """Delete a home with all its rooms and stored images."""
    container = get_container(request)
    require_owned_home(container, home_id, user_id)
    container.home_service.delete_home(home_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def _validate(model, **fields):  # type: ignore[no-untyped-def]
    try:
        return model(**fields)
    except PydanticValidationError as exc:
        raise HTTPException(
            status_code=UNPROCESSABLE,
            detail=[error["msg"] for error in exc.errors()],
        ) from exc


async def _read_cover(
    container: AppContainer, upload: UploadFile | None
) -> PendingPhoto | None:
    if upload is None or not upload.filename:
        return None
    cover = await read_upload(upload)
    if not cover.content:
        return None
    if len(cover.content) > container.settings.max_cover_image_bytes:
        raise HTTPException(
            status_code=UNPROCESSABLE,
            detail=f"Max image size is {_megabytes(container)}MB.",
        )
    content_type = cover.content_type or sniff_image_type(cover.content)
    if content_type not in COVER_IMAGE_TYPES:
        raise HTTPException(
            status_code=UNPROCESSABLE,
            detail="Only .jpg, .jpeg, .png and .webp formats are supported.",
        )
    return cover


def _megabytes(container: AppContainer) -> int:
    return container.settings.max_cover_image_bytes // (1024 * 1024)
