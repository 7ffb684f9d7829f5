"""Supabase repository for rooms."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from home_inventory.domain.models import RoomRecord
from home_inventory.services.rooms import RoomRepository

_ROOM_COLUMNS = (
    "id, home_id, name, created_at, object_names, is_analyzing, "
    "last_analyzed_at, analyzed_photo_urls, analysis_run_id"
)


@dataclass
class SupabaseRoomRepository(RoomRepository):
    """Supabase implementation for room persistence."""

    client: Client

    def create_room(self, home_id: UUID, name: str) -> RoomRecord:
        """Create a room row with empty analysis state."""
        response = (
            self.client.table("rooms")
            .insert(
                {
                    "home_id": str(home_id),
                    "name": name,
                    "object_names": None,
                    "is_analyzing": False,
                    "last_analyzed_at": None,
                    "analyzed_photo_urls": [],
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create room")
        return _parse_room(response.data[0])

    def get_room(self, home_id: UUID, room_id: UUID) -> RoomRecord | None:
        """Return a room by id within a home."""
        response = (
            self.client.table("rooms")
            .select(_ROOM_COLUMNS)
            .eq("id", str(room_id))
            .eq("home_id", str(home_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_room(response.data[0])

    def list_rooms(self, home_id: UUID) -> list[RoomRecord]:
        """Return rooms of a home, newest first."""
        response = (
            self.client.table("rooms")
            .select(_ROOM_COLUMNS)
            .eq("home_id", str(home_id))
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_room(row) for row in response.data or []]

    def rename_room(self, home_id: UUID, room_id: UUID, name: str) -> None:
        """Update the room name."""
        self.client.table("rooms").update({"name": name}).eq("id", str(room_id)).eq(
            "home_id", str(home_id)
        ).execute()

    def delete_room(self, home_id: UUID, room_id: UUID) -> None:
        """Delete a room row."""
        self.client.table("rooms").delete().eq("id", str(room_id)).eq(
            "home_id", str(home_id)
        ).execute()

    def delete_rooms(self, home_id: UUID) -> None:
        """Delete every room row of a home."""
        self.client.table("rooms").delete().eq("home_id", str(home_id)).execute()

    def set_analyzing(
        self,
        home_id: UUID,
        room_id: UUID,
        is_analyzing: bool,
        run_id: str | None = None,
    ) -> bool:
        """Update the analyzing flag, guarded by the run id when lowering it."""
        payload: dict[str, object] = {"is_analyzing": is_analyzing}
        if is_analyzing:
            payload["analysis_run_id"] = run_id
        else:
            payload["analysis_run_id"] = None
        query = (
            self.client.table("rooms")
            .update(payload)
            .eq("id", str(room_id))
            .eq("home_id", str(home_id))
        )
        if run_id is not None and not is_analyzing:
            query = query.eq("analysis_run_id", run_id)
        response = query.execute()
        return bool(response.data)

    def save_analysis_result(  # noqa: PLR0913
        self,
        home_id: UUID,
        room_id: UUID,
        object_names: list[str],
        photo_urls: list[str],
        analyzed_at: datetime,
        run_id: str | None = None,
    ) -> bool:
        """Write names, photo URLs and timestamp in one update."""
        query = (
            self.client.table("rooms")
            .update(
                {
                    "object_names": object_names,
                    "analyzed_photo_urls": photo_urls,
                    "last_analyzed_at": analyzed_at.isoformat(),
                    "is_analyzing": False,
                    "analysis_run_id": None,
                }
            )
            .eq("id", str(room_id))
            .eq("home_id", str(home_id))
        )
        if run_id is not None:
            query = query.eq("analysis_run_id", run_id)
        response = query.execute()
        return bool(response.data)

    def reset_analysis_result(self, home_id: UUID, room_id: UUID) -> None:
        """Return the room to the never analyzed state."""
        self.client.table("rooms").update(
            {
                "object_names": None,
                "is_analyzing": False,
                "last_analyzed_at": None,
                "analyzed_photo_urls": [],
                "analysis_run_id": None,
            }
        ).eq("id", str(room_id)).eq("home_id", str(home_id)).execute()


def _parse_room(row: dict[str, object]) -> RoomRecord:
    object_names = row.get("object_names")
    last_analyzed_at = row.get("last_analyzed_at")
    return RoomRecord(
        id=UUID(str(row["id"])),
        home_id=UUID(str(row["home_id"])),
        name=str(row.get("name", "")),
        created_at=datetime.fromisoformat(str(row["created_at"])),
        object_names=(
            [str(name) for name in object_names]
            if isinstance(object_names, list)
            else None
        ),
        is_analyzing=bool(row.get("is_analyzing", False)),
        last_analyzed_at=(
            datetime.fromisoformat(str(last_analyzed_at)) if last_analyzed_at else None
        ),
        analyzed_photo_urls=[str(url) for url in row.get("analyzed_photo_urls") or []],
        analysis_run_id=row.get("analysis_run_id"),
    )
