"""Domain models for homes and rooms."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class HomeRecord:
    """Represents a home stored in the database."""

    id: UUID
    name: str
    owner_id: str
    created_at: datetime
    description: str = ""
    cover_image_url: str | None = None


@dataclass(frozen=True)
class RoomRecord:
    """Represents a room and its latest analysis state."""

    id: UUID
    home_id: UUID
    name: str
    created_at: datetime
    object_names: list[str] | None = None
    is_analyzing: bool = False
    last_analyzed_at: datetime | None = None
    analyzed_photo_urls: list[str] = field(default_factory=list)
    analysis_run_id: str | None = None

    @property
    def has_results(self) -> bool:
        """Return true when the room holds a completed analysis."""
        return bool(self.object_names)


@dataclass(frozen=True)
class PendingPhoto:
    """A photo selected for analysis but not uploaded yet."""

    filename: str
    content: bytes
    content_type: str | None = None
