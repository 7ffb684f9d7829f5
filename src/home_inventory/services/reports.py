"""PDF export of room analysis results."""

from datetime import datetime

from fpdf import FPDF

from home_inventory.domain.errors import ValidationError
from home_inventory.domain.models import RoomRecord

_LEFT_MARGIN = 14
_PAGE_BOTTOM = 270
_LINE_HEIGHT = 10


def render_room_report(room: RoomRecord, home_name: str | None = None) -> bytes:
    """Render the identified objects of a room as a PDF document."""
    if not room.object_names or room.is_analyzing:
        raise ValidationError("Room has no completed analysis to export.")

    pdf = FPDF()
    pdf.add_page()
    pdf.set_font("Helvetica", size=18)
    title = f"Object Analysis for: {_title(room, home_name)}"
    pdf.text(_LEFT_MARGIN, 22, _latin1(title))

    if room.last_analyzed_at is not None:
        pdf.set_font("Helvetica", size=12)
        analyzed_on = format_analyzed_at(room.last_analyzed_at)
        pdf.text(_LEFT_MARGIN, 30, f"Analyzed on: {analyzed_on}")

    pdf.set_font("Helvetica", size=14)
    pdf.text(_LEFT_MARGIN, 45, "Identified Objects:")

    y_pos = 55
    for index, name in enumerate(room.object_names, start=1):
        if y_pos > _PAGE_BOTTOM:
            pdf.add_page()
            y_pos = 20
        pdf.text(_LEFT_MARGIN, y_pos, _latin1(f"{index}. {name}"))
        y_pos += _LINE_HEIGHT
    return bytes(pdf.output())


def report_filename(room: RoomRecord, home_name: str | None = None) -> str:
    """Return the download file name for a room report."""
    prefix = f"{home_name.replace(' ', '_')}_" if home_name else ""
    return f"{prefix}{room.name.replace(' ', '_')}_analysis.pdf"


def format_analyzed_at(value: datetime) -> str:
    """Format a timestamp like 'October 18th, 2026 at 3:04 PM'."""
    hour = value.hour % 12 or 12
    return (
        f"{value:%B} {_ordinal(value.day)}, {value.year} "
        f"at {hour}:{value:%M} {value:%p}"
    )


def _title(room: RoomRecord, home_name: str | None) -> str:
    return f"{home_name} - {room.name}" if home_name else room.name


def _ordinal(day: int) -> str:
    if 11 <= day % 100 <= 13:  # noqa: PLR2004
        return f"{day}th"
    suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def _latin1(text: str) -> str:
    """Core PDF fonts only cover latin-1."""
    return text.encode("latin-1", "replace").decode("latin-1")
