"""Home lifecycle business logic."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID, uuid4

from home_inventory.domain.errors import NotFoundError, StorageError
from home_inventory.domain.models import HomeRecord, PendingPhoto
from home_inventory.services.rooms import RoomService
from home_inventory.services.storage import (
    StorageGateway,
    detect_mime_type,
    epoch_millis,
    home_cover_path,
)

logger = logging.getLogger(__name__)


class HomeRepository(Protocol):
    """Persistence interface for homes."""

    def create_home(  # noqa: PLR0913
        self,
        home_id: UUID,
        owner_id: str,
        name: str,
        description: str,
        cover_image_url: str | None,
    ) -> HomeRecord:
        """Create a home row and return it."""

    def get_home(self, home_id: UUID) -> HomeRecord | None:
        """Return a home by id, if present."""

    def list_homes(self, owner_id: str) -> list[HomeRecord]:
        """Return homes owned by a user, newest first."""

    def update_home(self, home_id: UUID, changes: dict[str, object]) -> None:
        """Apply column changes to a home row."""

    def delete_home(self, home_id: UUID) -> None:
        """Delete a home row."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class HomeService:
    """Application service for homes, their covers and cascading deletes."""

    repository: HomeRepository
    room_service: RoomService
    storage: StorageGateway
    clock: Callable[[], datetime] = _utcnow

    def create_home(
        self,
        owner_id: str,
        name: str,
        description: str | None = None,
        cover: PendingPhoto | None = None,
    ) -> HomeRecord:
        """Create a home, uploading its cover image first when given."""
        home_id = uuid4()
        cover_image_url = None
        if cover is not None:
            cover_image_url = self._upload_cover(owner_id, home_id, cover)
        return self.repository.create_home(
            home_id=home_id,
            owner_id=owner_id,
            name=name.strip(),
            description=(description or "").strip(),
            cover_image_url=cover_image_url,
        )

    def get_home(self, home_id: UUID) -> HomeRecord | None:
        """Return a home, or None when it does not exist."""
        return self.repository.get_home(home_id)

    def list_homes(self, owner_id: str) -> list[HomeRecord]:
        """Return the user's homes, newest first."""
        return self.repository.list_homes(owner_id)

    def update_home(  # noqa: PLR0913
        self,
        home_id: UUID,
        owner_id: str,
        name: str | None = None,
        description: str | None = None,
        clear_description: bool = False,
        cover: PendingPhoto | None = None,
    ) -> HomeRecord:
        """Edit a home. A new cover replaces and deletes the previous one."""
        current = self._require_home(home_id)
        changes: dict[str, object] = {}
        if name is not None:
            changes["name"] = name.strip()
        if clear_description:
            changes["description"] = ""
        elif description is not None:
            changes["description"] = description.strip()
        if cover is not None:
            if current.cover_image_url:
                self._delete_blob(current.cover_image_url, home_id)
            changes["cover_image_url"] = self._upload_cover(owner_id, home_id, cover)
        if changes:
            self.repository.update_home(home_id, changes)
        return self._require_home(home_id)

    def remove_cover_image(self, home_id: UUID) -> None:
        """Delete the cover image blob and unset it on the home."""
        home = self.repository.get_home(home_id)
        if home is None or not home.cover_image_url:
            return
        self._delete_blob(home.cover_image_url, home_id)
        self.repository.update_home(home_id, {"cover_image_url": None})

    def delete_home(self, home_id: UUID) -> None:
        """Delete a home with its cover, rooms and analyzed photos."""
        home = self.repository.get_home(home_id)
        if home is not None and home.cover_image_url:
            self._delete_blob(home.cover_image_url, home_id)
        self.room_service.delete_rooms(home_id)
        self.repository.delete_home(home_id)
        logger.info("Deleted home", extra={"home_id": str(home_id)})

    def _upload_cover(self, owner_id: str, home_id: UUID, cover: PendingPhoto) -> str:
        path = home_cover_path(
            owner_id, home_id, cover.filename, epoch_millis(self.clock())
        )
        content_type = cover.content_type or detect_mime_type(cover.content)
        return self.storage.upload(path, cover.content, content_type)

    def _delete_blob(self, url: str, home_id: UUID) -> None:
        try:
            self.storage.delete(url)
        except StorageError:
            logger.exception(
                "Failed to delete home cover image",
                extra={"home_id": str(home_id), "url": url},
            )

    def _require_home(self, home_id: UUID) -> HomeRecord:
        home = self.repository.get_home(home_id)
        if home is None:
            raise NotFoundError(f"Home {home_id} not found")
        return home
