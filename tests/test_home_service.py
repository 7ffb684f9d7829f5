"""Tests for home lifecycle business logic."""

from datetime import UTC, datetime
from uuid import uuid4

import pytest

from home_inventory.domain.errors import NotFoundError
from home_inventory.domain.models import PendingPhoto
from home_inventory.services.homes import HomeService
from tests.conftest import (
    JPEG_BYTES,
    PNG_BYTES,
    STORAGE_BASE_URL,
    InMemoryHomeRepository,
    InMemoryRoomRepository,
    InMemoryStorageGateway,
)

OWNER = "owner-1"


def _cover(name: str = "front door.png") -> PendingPhoto:
    return PendingPhoto(filename=name, content=PNG_BYTES, content_type="image/png")


def test_create_home_uploads_cover_under_owner_and_home(
    home_service: HomeService, storage: InMemoryStorageGateway
) -> None:
    home_service.clock = lambda: datetime(2026, 2, 3, tzinfo=UTC)

    home = home_service.create_home(OWNER, " Lake house ", "  Summer  ", _cover())

    millis = int(datetime(2026, 2, 3, tzinfo=UTC).timestamp() * 1000)
    expected_path = f"homeCovers/{OWNER}/{home.id}/{millis}_front_door.png"
    assert storage.uploads == [expected_path]
    assert home.cover_image_url == f"{STORAGE_BASE_URL}{expected_path}"
    assert home.name == "Lake house"
    assert home.description == "Summer"
    assert home.owner_id == OWNER


def test_create_home_without_cover_skips_storage(
    home_service: HomeService, storage: InMemoryStorageGateway
) -> None:
    home = home_service.create_home(OWNER, "Flat")

    assert home.cover_image_url is None
    assert home.description == ""
    assert storage.uploads == []


def test_cover_without_content_type_is_sniffed(
    home_service: HomeService, storage: InMemoryStorageGateway
) -> None:
    cover = PendingPhoto(filename="cover", content=JPEG_BYTES)

    home_service.create_home(OWNER, "Flat", cover=cover)

    assert storage.objects[storage.uploads[0]] == JPEG_BYTES


def test_list_homes_only_returns_owned_homes_newest_first(
    home_service: HomeService,
) -> None:
    first = home_service.create_home(OWNER, "One")
    second = home_service.create_home(OWNER, "Two")
    home_service.create_home("someone-else", "Three")

    homes = home_service.list_homes(OWNER)

    assert [home.id for home in homes] == [second.id, first.id]


def test_replacing_cover_deletes_previous_blob(
    home_service: HomeService, storage: InMemoryStorageGateway
) -> None:
    home = home_service.create_home(OWNER, "Flat", cover=_cover("old.png"))
    old_url = home.cover_image_url

    updated = home_service.update_home(home.id, OWNER, cover=_cover("new.png"))

    assert storage.deletes == [old_url]
    assert updated.cover_image_url is not None
    assert updated.cover_image_url.endswith("_new.png")
    assert len(storage.objects) == 1


def test_update_home_edits_and_clears_description(
    home_service: HomeService,
) -> None:
    home = home_service.create_home(OWNER, "Flat", "Old")

    renamed = home_service.update_home(home.id, OWNER, name=" Loft ")
    cleared = home_service.update_home(home.id, OWNER, clear_description=True)

    assert renamed.name == "Loft"
    assert renamed.description == "Old"
    assert cleared.description == ""


def test_update_missing_home_raises(home_service: HomeService) -> None:
    with pytest.raises(NotFoundError):
        home_service.update_home(uuid4(), OWNER, name="Nope")


def test_remove_cover_image_unsets_url(
    home_service: HomeService,
    home_repository: InMemoryHomeRepository,
    storage: InMemoryStorageGateway,
) -> None:
    home = home_service.create_home(OWNER, "Flat", cover=_cover())

    home_service.remove_cover_image(home.id)

    assert home_repository.homes[home.id].cover_image_url is None
    assert storage.deletes == [home.cover_image_url]
    assert storage.objects == {}


def test_delete_home_removes_blobs_before_records(
    home_service: HomeService,
    room_repository: InMemoryRoomRepository,
    home_repository: InMemoryHomeRepository,
    events: list[str],
) -> None:
    home = home_service.create_home(OWNER, "Flat", cover=_cover())
    room = room_repository.add_room(
        home.id,
        object_names=["desk"],
        analyzed_photo_urls=[f"{STORAGE_BASE_URL}a.png", f"{STORAGE_BASE_URL}b.png"],
    )

    home_service.delete_home(home.id)

    assert events == [
        f"delete-blob:{home.cover_image_url}",
        f"delete-blob:{STORAGE_BASE_URL}a.png",
        f"delete-blob:{STORAGE_BASE_URL}b.png",
        f"delete-room:{room.id}",
        f"delete-home:{home.id}",
    ]
    assert home.id not in home_repository.homes
    assert room_repository.rooms == {}
