"""Domain models for analysis runs."""

from dataclasses import dataclass, field
from datetime import datetime

from home_inventory.domain.errors import AnalysisError


@dataclass(frozen=True)
class AnalysisOutcome:
    """Result handed back to the caller once a run finishes."""

    success: bool
    run_id: str
    object_names: list[str] | None = None
    photo_urls: list[str] = field(default_factory=list)
    error: AnalysisError | None = None
    message: str = ""

    @property
    def keep_pending_photos(self) -> bool:
        """Pending photos are only discarded after a saved result."""
        return not self.success


@dataclass(frozen=True)
class AnalysisProgress:
    """Snapshot of an in-flight run."""

    run_id: str
    stage: str
    uploaded: int
    total: int
    started_at: datetime
