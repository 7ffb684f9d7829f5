"""Tests for the pending photo selection rules."""

from home_inventory.domain.models import PendingPhoto
from home_inventory.services.pending import select_pending_photos
from tests.conftest import JPEG_BYTES, make_photos


def test_selection_is_capped_at_the_limit() -> None:
    selection = select_pending_photos(make_photos(8), make_photos(4), max_photos=10)

    assert len(selection.photos) == 10
    assert selection.over_limit == 2
    assert selection.rejected_types == 0
    assert selection.has_rejections


def test_non_images_are_rejected_by_name() -> None:
    incoming = [
        PendingPhoto(filename="notes.pdf", content=b"%PDF", content_type=None),
        PendingPhoto(filename="empty.png", content=b"", content_type="image/png"),
        PendingPhoto(filename="ok.jpg", content=JPEG_BYTES),
    ]

    selection = select_pending_photos([], incoming)

    assert [photo.filename for photo in selection.photos] == ["ok.jpg"]
    assert selection.rejected_names == ["notes.pdf", "empty.png"]
    assert selection.rejected_types == 2


def test_selection_preserves_order_and_existing_photos() -> None:
    existing = make_photos(1)
    incoming = make_photos(3)[1:]

    selection = select_pending_photos(existing, incoming)

    assert [photo.filename for photo in selection.photos] == [
        "photo-1.png",
        "photo-2.png",
        "photo-3.png",
    ]
    assert not selection.has_rejections
