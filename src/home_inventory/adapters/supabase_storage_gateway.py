"""Supabase Storage implementation of the storage gateway."""

import logging
from dataclasses import dataclass
from urllib.parse import unquote

from supabase import Client

from home_inventory.domain.errors import StorageError, UploadError
from home_inventory.services.storage import StorageGateway

logger = logging.getLogger(__name__)


@dataclass
class SupabaseStorageGateway(StorageGateway):
    """Stores photos in a public Supabase Storage bucket."""

    client: Client
    bucket: str
    supabase_url: str

    def upload(self, path: str, content: bytes, content_type: str) -> str:
        """Upload bytes and return the public URL of the object."""
        try:
            self.client.storage.from_(self.bucket).upload(
                path,
                content,
                {"content-type": content_type, "upsert": "false"},
            )
        except Exception as exc:
            raise UploadError(f"Failed to upload {path}: {exc}") from exc
        public_url = self.client.storage.from_(self.bucket).get_public_url(path)
        return public_url.rstrip("?")

    def delete(self, url_or_path: str) -> None:
        """Delete an object; objects that are already gone are ignored."""
        if not url_or_path:
            return
        path = self.object_path(url_or_path)
        if path is None:
            logger.warning(
                "Ignoring delete for URL outside the storage bucket",
                extra={"url": url_or_path},
            )
            return
        try:
            self.client.storage.from_(self.bucket).remove([path])
        except Exception as exc:
            if _is_not_found(exc):
                logger.info("Object already deleted", extra={"path": path})
                return
            raise StorageError(f"Failed to delete {path}: {exc}") from exc

    def object_path(self, url_or_path: str) -> str | None:
        """Resolve a public URL of this bucket or a raw path to an object path."""
        prefix = (
            f"{self.supabase_url.rstrip('/')}/storage/v1/object/public/{self.bucket}/"
        )
        if url_or_path.startswith(prefix):
            return unquote(url_or_path[len(prefix) :].split("?", 1)[0])
        if "://" in url_or_path:
            return None
        return url_or_path.lstrip("/")


def _is_not_found(exc: Exception) -> bool:
    """Only a missing object counts; a missing bucket is a real failure."""
    if "bucket" in str(exc).lower():
        return False
    status = getattr(exc, "status", None) or getattr(exc, "status_code", None)
    return str(status) == "404"
