"""Room records and their analysis state."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from home_inventory.domain.errors import NotFoundError, StorageError
from home_inventory.domain.models import RoomRecord
from home_inventory.services.storage import StorageGateway

logger = logging.getLogger(__name__)


class RoomRepository(Protocol):
    """Persistence interface for rooms."""

    def create_room(self, home_id: UUID, name: str) -> RoomRecord:
        """Create a room with empty analysis state and return it."""

    def get_room(self, home_id: UUID, room_id: UUID) -> RoomRecord | None:
        """Return a room by id, if present."""

    def list_rooms(self, home_id: UUID) -> list[RoomRecord]:
        """Return rooms of a home, newest first."""

    def rename_room(self, home_id: UUID, room_id: UUID, name: str) -> None:
        """Update the room name."""

    def delete_room(self, home_id: UUID, room_id: UUID) -> None:
        """Delete a room row."""

    def delete_rooms(self, home_id: UUID) -> None:
        """Delete every room row of a home."""

    def set_analyzing(
        self,
        home_id: UUID,
        room_id: UUID,
        is_analyzing: bool,
        run_id: str | None = None,
    ) -> bool:
        """Update the analyzing flag and return whether a row changed."""

    def save_analysis_result(  # noqa: PLR0913
        self,
        home_id: UUID,
        room_id: UUID,
        object_names: list[str],
        photo_urls: list[str],
        analyzed_at: datetime,
        run_id: str | None = None,
    ) -> bool:
        """Write analysis results and return whether a row changed."""

    def reset_analysis_result(self, home_id: UUID, room_id: UUID) -> None:
        """Null the analysis result fields."""


@dataclass
class RoomService:
    """Application service for room records and their stored photos."""

    repository: RoomRepository
    storage: StorageGateway

    def create_room(self, home_id: UUID, name: str) -> RoomRecord:
        """Create a room under a home."""
        return self.repository.create_room(home_id, name.strip())

    def get_room(self, home_id: UUID, room_id: UUID) -> RoomRecord | None:
        """Return a room, or None when it does not exist."""
        return self.repository.get_room(home_id, room_id)

    def list_rooms(self, home_id: UUID) -> list[RoomRecord]:
        """Return rooms of a home, newest first."""
        return self.repository.list_rooms(home_id)

    def rename_room(self, home_id: UUID, room_id: UUID, name: str) -> RoomRecord:
        """Rename a room and return the updated record."""
        self._require_room(home_id, room_id)
        self.repository.rename_room(home_id, room_id, name.strip())
        return self._require_room(home_id, room_id)

    def set_analyzing(
        self,
        home_id: UUID,
        room_id: UUID,
        is_analyzing: bool,
        run_id: str | None = None,
    ) -> bool:
        """Set the analyzing flag.

        With a run id, raising the flag records the run as the owner and
        lowering it only applies while that run still owns the room.
        """
        return self.repository.set_analyzing(
            home_id, room_id, is_analyzing, run_id=run_id
        )

    def commit_analysis_result(
        self,
        home_id: UUID,
        room_id: UUID,
        object_names: list[str],
        photo_urls: list[str],
        run_id: str | None = None,
    ) -> bool:
        """Persist names, photo URLs and timestamp together and lower the flag."""
        return self.repository.save_analysis_result(
            home_id,
            room_id,
            object_names=list(object_names),
            photo_urls=list(photo_urls),
            analyzed_at=datetime.now(tz=UTC),
            run_id=run_id,
        )

    def clear_analysis_result(self, home_id: UUID, room_id: UUID) -> None:
        """Delete the analyzed photos and reset the room to never analyzed."""
        room = self._require_room(home_id, room_id)
        self._delete_photos(room)
        self.repository.reset_analysis_result(home_id, room_id)

    def delete_room(self, home_id: UUID, room_id: UUID) -> None:
        """Delete a room along with its analyzed photos."""
        room = self.repository.get_room(home_id, room_id)
        if room is not None:
            self._delete_photos(room)
        self.repository.delete_room(home_id, room_id)

    def delete_rooms(self, home_id: UUID) -> None:
        """Delete analyzed photos of every room, then the room records."""
        for room in self.repository.list_rooms(home_id):
            self._delete_photos(room)
        self.repository.delete_rooms(home_id)

    def _delete_photos(self, room: RoomRecord) -> None:
        for url in room.analyzed_photo_urls:
            try:
                self.storage.delete(url)
            except StorageError:
                logger.exception(
                    "Failed to delete analyzed photo",
                    extra={"room_id": str(room.id), "url": url},
                )

    def _require_room(self, home_id: UUID, room_id: UUID) -> RoomRecord:
        room = self.repository.get_room(home_id, room_id)
        if room is None:
            raise NotFoundError(f"Room {room_id} not found")
        return room
