"""Supabase repository for homes."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from home_inventory.domain.models import HomeRecord
from home_inventory.services.homes import HomeRepository

_HOME_COLUMNS = "id, name, description, owner_id, created_at, cover_image_url"


@dataclass
class SupabaseHomeRepository(HomeRepository):
    """Supabase implementation for home persistence."""

    client: Client

    def create_home(  # noqa: PLR0913
        self,
        home_id: UUID,
        owner_id: str,
        name: str,
        description: str,
        cover_image_url: str | None,
    ) -> HomeRecord:
        """Create a home row with a pre-generated id."""
        response = (
            self.client.table("homes")
            .insert(
                {
                    "id": str(home_id),
                    "owner_id": owner_id,
                    "name": name,
                    "description": description,
                    "cover_image_url": cover_image_url,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create home")
        return _parse_home(response.data[0])

    def get_home(self, home_id: UUID) -> HomeRecord | None:
        """Return a home by id."""
        response = (
            self.client.table("homes")
            .select(_HOME_COLUMNS)
            .eq("id", str(home_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_home(response.data[0])

    def list_homes(self, owner_id: str) -> list[HomeRecord]:
        """Return homes owned by a user, newest first."""
        response = (
            self.client.table("homes")
            .select(_HOME_COLUMNS)
            .eq("owner_id", owner_id)
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_home(row) for row in response.data or []]

    def update_home(self, home_id: UUID, changes: dict[str, object]) -> None:
        """Apply column changes to a home row."""
        self.client.table("homes").update(changes).eq("id", str(home_id)).execute()

    def delete_home(self, home_id: UUID) -> None:
        """Delete a home row."""
        self.client.table("homes").delete().eq("id", str(home_id)).execute()


def _parse_home(row: dict[str, object]) -> HomeRecord:
    return HomeRecord(
        id=UUID(str(row["id"])),
        name=str(row.get("name", "")),
        owner_id=str(row["owner_id"]),
        created_at=datetime.fromisoformat(str(row["created_at"])),
        description=str(row.get("description") or ""),
        cover_image_url=row.get("cover_image_url"),
    )
