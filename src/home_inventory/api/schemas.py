"""Pydantic models for API requests and responses."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from home_inventory.domain.analysis import AnalysisOutcome, AnalysisProgress
from home_inventory.domain.models import HomeRecord, RoomRecord


class ApiModel(BaseModel):
    """Base model serialized with camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FormModel(ApiModel):
    """Submitted fields, trimmed before length checks."""

    model_config = ConfigDict(str_strip_whitespace=True)


class HomeForm(FormModel):
    """Validated home form fields."""

    name: str = Field(min_length=1, max_length=50)
    description: str | None = Field(default=None, max_length=250)


class HomeUpdateForm(FormModel):
    """Validated home edit fields."""

    name: str | None = Field(default=None, min_length=1, max_length=50)
    description: str | None = Field(default=None, max_length=250)


class RoomForm(FormModel):
    """Room create or rename payload."""

    name: str = Field(min_length=1, max_length=50)


class HomeResponse(ApiModel):
    """Home returned by the API."""

    id: UUID
    name: str
    owner_id: str
    created_at: datetime
    description: str
    cover_image_url: str | None

    @classmethod
    def from_record(cls, home: HomeRecord) -> "HomeResponse":
        """Build a response from a home record."""
        return cls(
            id=home.id,
            name=home.name,
            owner_id=home.owner_id,
            created_at=home.created_at,
            description=home.description,
            cover_image_url=home.cover_image_url,
        )


class RoomResponse(ApiModel):
    """Room returned by the API."""

    id: UUID
    home_id: UUID
    name: str
    created_at: datetime
    object_names: list[str] | None
    is_analyzing: bool
    last_analyzed_at: datetime | None
    analyzed_photo_urls: list[str]

    @classmethod
    def from_record(cls, room: RoomRecord) -> "RoomResponse":
        """Build a response from a room record."""
        return cls(
            id=room.id,
            home_id=room.home_id,
            name=room.name,
            created_at=room.created_at,
            object_names=room.object_names,
            is_analyzing=room.is_analyzing,
            last_analyzed_at=room.last_analyzed_at,
            analyzed_photo_urls=room.analyzed_photo_urls,
        )


class AnalysisResponse(ApiModel):
    """Outcome of an analysis request."""

    success: bool
    run_id: str
    message: str
    object_names: list[str] | None = None
    photo_urls: list[str] = Field(default_factory=list)
    keep_pending_photos: bool

    @classmethod
    def from_outcome(
        cls, outcome: AnalysisOutcome, message: str | None = None
    ) -> "AnalysisResponse":
        """Build a response from a workflow outcome."""
        return cls(
            success=outcome.success,
            run_id=outcome.run_id,
            message=message or outcome.message,
            object_names=outcome.object_names,
            photo_urls=outcome.photo_urls,
            keep_pending_photos=outcome.keep_pending_photos,
        )


class AnalysisStatusResponse(ApiModel):
    """Current analysis state of a room."""

    is_analyzing: bool
    run_id: str | None = None
    stage: str | None = None
    uploaded: int = 0
    total: int = 0
    started_at: datetime | None = None
    last_analyzed_at: datetime | None = None

    @classmethod
    def from_state(
        cls, room: RoomRecord, progress: AnalysisProgress | None
    ) -> "AnalysisStatusResponse":
        """Combine the stored flag with the live run tracked in this process."""
        if progress is None:
            return cls(
                is_analyzing=room.is_analyzing,
                run_id=room.analysis_run_id,
                last_analyzed_at=room.last_analyzed_at,
            )
        return cls(
            is_analyzing=True,
            run_id=progress.run_id,
            stage=progress.stage,
            uploaded=progress.uploaded,
            total=progress.total,
            started_at=progress.started_at,
            last_analyzed_at=room.last_analyzed_at,
        )
