"""Room photo analysis workflow.

A run marks the room as analyzing, uploads the pending photos one by one in
selection order, sends every uploaded URL to the recognition service in a
single request and saves the identified objects together with the photo URLs.

Each run carries its own run id. Raising the analyzing flag records the run id
on the room, and both the final save and the flag reset after a failure only
apply while the room still carries that id, so a late run cannot overwrite the
result of a newer one. Two runs started at the same time on the same room still
both upload their photos; the loser's uploads stay in storage unreferenced.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4

from home_inventory.domain.analysis import AnalysisOutcome, AnalysisProgress
from home_inventory.domain.errors import (
    AnalysisError,
    NotFoundError,
    PersistError,
    RecognitionError,
    StaleAnalysisError,
    StorageError,
    UploadError,
    ValidationError,
)
from home_inventory.domain.models import PendingPhoto
from home_inventory.services.recognition import RecognitionService
from home_inventory.services.rooms import RoomService
from home_inventory.services.storage import (
    StorageGateway,
    analysis_photo_path,
    detect_mime_type,
    epoch_millis,
)

logger = logging.getLogger(__name__)

STAGE_MARKING = "marking"
STAGE_UPLOADING = "uploading"
STAGE_RECOGNIZING = "recognizing"
STAGE_SAVING = "saving"


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class AnalysisTracker:
    """In-memory view of the analysis runs currently in flight."""

    def __init__(self) -> None:
        self._runs: dict[tuple[UUID, UUID], AnalysisProgress] = {}

    def start(
        self,
        home_id: UUID,
        room_id: UUID,
        run_id: str,
        total: int,
        started_at: datetime,
    ) -> None:
        """Record a new run for the room."""
        self._runs[(home_id, room_id)] = AnalysisProgress(
            run_id=run_id,
            stage=STAGE_MARKING,
            uploaded=0,
            total=total,
            started_at=started_at,
        )

    def update(
        self,
        home_id: UUID,
        room_id: UUID,
        run_id: str,
        stage: str,
        uploaded: int | None = None,
    ) -> None:
        """Move a run to a new stage, ignoring runs that were replaced."""
        current = self._runs.get((home_id, room_id))
        if current is None or current.run_id != run_id:
            return
        self._runs[(home_id, room_id)] = AnalysisProgress(
            run_id=run_id,
            stage=stage,
            uploaded=current.uploaded if uploaded is None else uploaded,
            total=current.total,
            started_at=current.started_at,
        )

    def finish(self, home_id: UUID, room_id: UUID, run_id: str) -> None:
        """Forget a run once it has returned."""
        current = self._runs.get((home_id, room_id))
        if current is not None and current.run_id == run_id:
            self._runs.pop((home_id, room_id), None)

    def get(self, home_id: UUID, room_id: UUID) -> AnalysisProgress | None:
        """Return the in-flight run for a room, if any."""
        return self._runs.get((home_id, room_id))


@dataclass
class AnalysisCoordinator:
    """Orchestrates upload, recognition and persistence for a room."""

    room_service: RoomService
    storage: StorageGateway
    recognition_service: RecognitionService
    tracker: AnalysisTracker = field(default_factory=AnalysisTracker)
    discard_orphaned_uploads: bool = False
    clock: Callable[[], datetime] = _utcnow

    async def run_analysis(
        self,
        home_id: UUID,
        room_id: UUID,
        user_id: str,
        pending_photos: list[PendingPhoto],
    ) -> AnalysisOutcome:
        """Analyze the pending photos of a room and persist the result.

        Upload, recognition and save failures are returned as a failed
        outcome; only validation and missing rooms raise.
        """
        if not pending_photos:
            raise ValidationError("Please add photos before analyzing.")
        if not user_id or not user_id.strip():
            raise ValidationError("User not identified. Cannot upload photos.")

        photos = list(pending_photos)
        run_id = uuid4().hex
        uploaded_urls: list[str] = []
        self.tracker.start(home_id, room_id, run_id, len(photos), self.clock())
        try:
            self._mark_analyzing(home_id, room_id, run_id)
            self._upload_photos(
                home_id, room_id, user_id, run_id, photos, uploaded_urls
            )
            object_names = await self._identify(home_id, room_id, run_id, uploaded_urls)
            self._save(home_id, room_id, run_id, object_names, uploaded_urls)
        except AnalysisError as exc:
            logger.exception(
                "Room analysis failed",
                extra={
                    "room_id": str(room_id),
                    "run_id": run_id,
                    "uploaded": len(uploaded_urls),
                },
            )
            return self._fail(home_id, room_id, run_id, exc, uploaded_urls)
        finally:
            self.tracker.finish(home_id, room_id, run_id)

        logger.info(
            "Room analysis completed",
            extra={
                "room_id": str(room_id),
                "run_id": run_id,
                "objects": len(object_names),
            },
        )
        return AnalysisOutcome(
            success=True,
            run_id=run_id,
            object_names=object_names,
            photo_urls=list(uploaded_urls),
            message="Room analysis results have been updated.",
        )

    def _mark_analyzing(self, home_id: UUID, room_id: UUID, run_id: str) -> None:
        try:
            marked = self.room_service.set_analyzing(
                home_id, room_id, True, run_id=run_id
            )
        except Exception as exc:
            raise PersistError(f"Failed to mark room as analyzing: {exc}") from exc
        if not marked:
            raise NotFoundError(f"Room {room_id} not found")

    def _upload_photos(  # noqa: PLR0913
        self,
        home_id: UUID,
        room_id: UUID,
        user_id: str,
        run_id: str,
        photos: list[PendingPhoto],
        uploaded_urls: list[str],
    ) -> None:
        self.tracker.update(home_id, room_id, run_id, STAGE_UPLOADING)
        last_millis = 0
        for index, photo in enumerate(photos, start=1):
            last_millis = max(epoch_millis(self.clock()), last_millis + 1)
            path = analysis_photo_path(user_id, room_id, photo.filename, last_millis)
            content_type = photo.content_type or detect_mime_type(photo.content)
            try:
                url = self.storage.upload(path, photo.content, content_type)
            except UploadError:
                raise
            except Exception as exc:
                raise UploadError(f"Failed to upload {photo.filename}: {exc}") from exc
            uploaded_urls.append(url)
            self.tracker.update(
                home_id, room_id, run_id, STAGE_UPLOADING, uploaded=index
            )
            logger.info(
                "Uploaded analysis photo %s/%s",
                index,
                len(photos),
                extra={"room_id": str(room_id), "run_id": run_id},
            )

    async def _identify(
        self, home_id: UUID, room_id: UUID, run_id: str, image_urls: list[str]
    ) -> list[str]:
        self.tracker.update(home_id, room_id, run_id, STAGE_RECOGNIZING)
        try:
            return await self.recognition_service.identify(list(image_urls))
        except RecognitionError:
            raise
        except Exception as exc:
            raise RecognitionError(f"Recognition failed: {exc}") from exc

    def _save(
        self,
        home_id: UUID,
        room_id: UUID,
        run_id: str,
        object_names: list[str],
        photo_urls: list[str],
    ) -> None:
        self.tracker.update(home_id, room_id, run_id, STAGE_SAVING)
        try:
            saved = self.room_service.commit_analysis_result(
                home_id, room_id, object_names, photo_urls, run_id=run_id
            )
        except Exception as exc:
            raise PersistError(f"Failed to save analysis results: {exc}") from exc
        if not saved:
            raise StaleAnalysisError(
                "Room was deleted or taken over by a newer analysis run"
            )

    def _fail(
        self,
        home_id: UUID,
        room_id: UUID,
        run_id: str,
        error: AnalysisError,
        uploaded_urls: list[str],
    ) -> AnalysisOutcome:
        self._reset_analyzing(home_id, room_id, run_id)
        if self.discard_orphaned_uploads:
            self._discard_uploads(room_id, run_id, uploaded_urls)
        return AnalysisOutcome(
            success=False,
            run_id=run_id,
            error=error,
            message=error.user_message,
        )

    def _reset_analyzing(self, home_id: UUID, room_id: UUID, run_id: str) -> None:
        try:
            self.room_service.set_analyzing(home_id, room_id, False, run_id=run_id)
        except Exception:
            logger.exception(
                "Error resetting analyzing status after failure",
                extra={"room_id": str(room_id), "run_id": run_id},
            )

    def _discard_uploads(
        self, room_id: UUID, run_id: str, uploaded_urls: list[str]
    ) -> None:
        for url in uploaded_urls:
            try:
                self.storage.delete(url)
            except StorageError:
                logger.exception(
                    "Failed to discard orphaned upload",
                    extra={"room_id": str(room_id), "run_id": run_id, "url": url},
                )
