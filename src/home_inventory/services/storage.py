"""Object store contract and storage path helpers."""

import re
from datetime import datetime
from typing import Protocol
from uuid import UUID

ANALYSIS_PHOTOS_PREFIX = "roomAnalysisPhotos"
HOME_COVERS_PREFIX = "homeCovers"

_WHITESPACE = re.compile(r"\s+")
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class StorageGateway(Protocol):
    """Interface for binary photo storage."""

    def upload(self, path: str, content: bytes, content_type: str) -> str:
        """Store bytes under a path and return a retrieval URL.

        Raises UploadError when the object store rejects the upload.
        """

    def delete(self, url_or_path: str) -> None:
        """Delete an object by retrieval URL or path.

        Deleting an object that is already gone succeeds silently.
        """


def sanitize_filename(filename: str) -> str:
    """Collapse whitespace to underscores and drop unsafe characters."""
    collapsed = _WHITESPACE.sub("_", filename)
    cleaned = _UNSAFE_CHARS.sub("", collapsed)
    return cleaned or "photo"


def epoch_millis(now: datetime) -> int:
    """Return a millisecond timestamp used to uniquify object paths."""
    return int(now.timestamp() * 1000)


def analysis_photo_path(
    user_id: str, room_id: UUID, filename: str, timestamp_ms: int
) -> str:
    """Build the object path for a room analysis photo."""
    unique_name = f"{timestamp_ms}-{sanitize_filename(filename)}"
    return f"{ANALYSIS_PHOTOS_PREFIX}/{user_id}/{room_id}/{unique_name}"


def home_cover_path(
    user_id: str, home_id: UUID, filename: str, timestamp_ms: int
) -> str:
    """Build the object path for a home cover image."""
    unique_name = f"{timestamp_ms}_{sanitize_filename(filename)}"
    return f"{HOME_COVERS_PREFIX}/{user_id}/{home_id}/{unique_name}"


def sniff_image_type(content: bytes) -> str | None:
    """Return the image MIME type from file signatures, if recognized."""
    if content.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if content.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if content[:4] == b"RIFF" and content[8:12] == b"WEBP":
        return "image/webp"
    if content[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    return None


def detect_mime_type(content: bytes) -> str:
    """Infer a basic image MIME type, defaulting to JPEG."""
    return sniff_image_type(content) or "image/jpeg"
