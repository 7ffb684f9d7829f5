"""Selection rules for photos queued for analysis."""

from dataclasses import dataclass, field

from home_inventory.domain.models import PendingPhoto
from home_inventory.services.storage import sniff_image_type

ANALYSIS_IMAGE_TYPES = frozenset({"image/jpeg", "image/png", "image/webp", "image/gif"})
DEFAULT_MAX_PHOTOS = 10


@dataclass(frozen=True)
class PhotoSelection:
    """Outcome of adding photos to a pending selection."""

    photos: list[PendingPhoto]
    rejected_types: int = 0
    over_limit: int = 0
    rejected_names: list[str] = field(default_factory=list)

    @property
    def has_rejections(self) -> bool:
        """Return true when any incoming photo was left out."""
        return bool(self.rejected_types or self.over_limit)


def select_pending_photos(
    existing: list[PendingPhoto],
    incoming: list[PendingPhoto],
    max_photos: int = DEFAULT_MAX_PHOTOS,
) -> PhotoSelection:
    """Append valid images to the selection without exceeding the limit."""
    accepted: list[PendingPhoto] = []
    rejected_names: list[str] = []
    for photo in incoming:
        content_type = photo.content_type or sniff_image_type(photo.content)
        if content_type not in ANALYSIS_IMAGE_TYPES or not photo.content:
            rejected_names.append(photo.filename)
            continue
        accepted.append(photo)

    remaining = max(max_photos - len(existing), 0)
    kept = accepted[:remaining]
    return PhotoSelection(
        photos=[*existing, *kept],
        rejected_types=len(rejected_names),
        over_limit=len(accepted) - len(kept),
        rejected_names=rejected_names,
    )
