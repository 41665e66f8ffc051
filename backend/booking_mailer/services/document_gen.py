"""Booking receipt rendering: PDF via fpdf2, HTML email body via Jinja2.

Both documents carry the same booking details. The PDF is a single
US-Letter page laid out top to bottom with a running cursor; only the
closing thank-you line sits at a fixed position. The HTML template is
autoescaped, so user-supplied fields cannot inject markup.
"""

from __future__ import annotations

import io
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from fpdf import FPDF
from fpdf.enums import XPos, YPos
from jinja2 import Environment, FileSystemLoader
from loguru import logger

from booking_mailer import clinic
from booking_mailer.errors import RenderError
from booking_mailer.models.booking import BookingRecord
from booking_mailer.models.email import RenderedDocument

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

AssetReader = Callable[[str], "bytes | None"]

# Letter page in points, same geometry the website's old receipts used
MARGIN = 50
HEADER_TOP = 45
LOGO_HEIGHT = 50
LABEL_WIDTH = 100
LINE_HEIGHT = 15
FOOTER_Y = 750

GREETING_MAX_LINES = 3
VALUE_MAX_LINES = 2
NOTES_MAX_LINES = 8

# Pinned so that identical bookings produce identical bytes
CREATION_DATE = datetime(2025, 1, 1, tzinfo=timezone.utc)

NAVY = (1, 2, 69)
LINK_BLUE = (0, 0, 238)
MUTED = (100, 116, 139)

_env = Environment(loader=FileSystemLoader(str(TEMPLATES_DIR)), autoescape=True)


def read_file_if_exists(path: str) -> bytes | None:
    """Read a file in one step, returning None if it cannot be read."""
    try:
        return Path(path).read_bytes()
    except OSError as e:
        logger.debug("Asset {} not readable: {}", path, e)
        return None


def detail_rows(record: BookingRecord) -> list[tuple[str, str]]:
    """Label/value pairs for the receipt, skipping optional fields left blank."""
    rows = [
        ("Service", record.service),
        ("Date", record.date),
        ("Time", record.time),
        ("Booking ID", record.booking_id),
        ("Client ID", record.client_id),
    ]
    return [(label, value) for label, value in rows if value]


# ─── Layout ─────────────────────────────────────────────────────────────


class LayoutCursor:
    """Running vertical offset on the page.

    Each block is drawn at ``y`` and then advances the cursor by the height
    it actually used, so optional blocks never leave gaps or overlaps.
    """

    def __init__(self, pdf: FPDF, top: float) -> None:
        self.pdf = pdf
        self.y = top

    def move_to(self, x: float = MARGIN) -> None:
        self.pdf.set_xy(x, self.y)

    def advance(self, height: float) -> None:
        self.y += height

    def sync(self) -> None:
        """Take over the y position fpdf2 reached after a flowing block."""
        self.y = max(self.y, self.pdf.get_y())


def _pdf_text(text: str) -> str:
    # Core fonts only cover Latin-1
    return text.encode("latin-1", "replace").decode("latin-1")


def _fit_lines(pdf: FPDF, text: str, width: float, max_lines: int) -> str:
    """Wrap ``text`` to ``width`` and cut it to ``max_lines`` lines."""
    lines = pdf.multi_cell(width, LINE_HEIGHT, text, dry_run=True, output="LINES")
    if len(lines) <= max_lines:
        return text
    kept = lines[:max_lines]
    kept[-1] = kept[-1].rstrip()[:-3] + "..."
    return "\n".join(kept)


def _draw_logo(pdf: FPDF, logo: bytes | None) -> bool:
    if logo is None:
        return False
    try:
        pdf.image(io.BytesIO(logo), x=MARGIN, y=HEADER_TOP, h=LOGO_HEIGHT)
    except Exception as e:
        logger.warning("Logo could not be decoded, using text header: {}", e)
        return False
    return True


def _draw_header(pdf: FPDF, cursor: LayoutCursor, logo: bytes | None) -> None:
    if not _draw_logo(pdf, logo):
        pdf.set_font("Helvetica", "B", 20)
        pdf.set_text_color(*NAVY)
        pdf.set_xy(MARGIN, HEADER_TOP + 12)
        pdf.cell(0, 24, clinic.NAME)

    pdf.set_font("Helvetica", "", 10)
    pdf.set_text_color(*MUTED)
    pdf.set_xy(MARGIN, HEADER_TOP + 20)
    pdf.cell(0, 12, "Booking Confirmation", align="R")
    cursor.advance(LOGO_HEIGHT + 35)


def _draw_title(pdf: FPDF, cursor: LayoutCursor) -> None:
    pdf.set_font("Helvetica", "B", 24)
    pdf.set_text_color(*NAVY)
    cursor.move_to()
    pdf.cell(0, 30, "Your Booking is Confirmed!", align="C")
    cursor.advance(30 + 25)


def _draw_greeting(pdf: FPDF, cursor: LayoutCursor, client_name: str) -> None:
    pdf.set_font("Helvetica", "", 12)
    pdf.set_text_color(0, 0, 0)
    text = _pdf_text(
        f"Dear {client_name}, we are pleased to confirm your appointment with us. "
        "Please review the details below."
    )
    cursor.move_to()
    pdf.multi_cell(
        0,
        LINE_HEIGHT,
        _fit_lines(pdf, text, pdf.epw, GREETING_MAX_LINES),
        align="L",
        new_x=XPos.LMARGIN,
        new_y=YPos.NEXT,
    )
    cursor.sync()
    cursor.advance(20)


def _draw_labeled_block(pdf: FPDF, cursor: LayoutCursor, label: str, value: str, max_lines: int) -> None:
    value_width = pdf.epw - LABEL_WIDTH

    pdf.set_font("Helvetica", "B", 12)
    cursor.move_to()
    pdf.cell(LABEL_WIDTH, LINE_HEIGHT, f"{label}:")

    pdf.set_font("Helvetica", "", 12)
    value = _pdf_text(value)
    cursor.move_to(MARGIN + LABEL_WIDTH)
    pdf.multi_cell(
        value_width,
        LINE_HEIGHT,
        _fit_lines(pdf, value, value_width, max_lines),
        align="L",
        new_x=XPos.LMARGIN,
        new_y=YPos.NEXT,
    )
    cursor.sync()
    cursor.advance(6)


def _draw_details(pdf: FPDF, cursor: LayoutCursor, record: BookingRecord) -> None:
    pdf.set_text_color(0, 0, 0)
    for label, value in detail_rows(record):
        _draw_labeled_block(pdf, cursor, label, value, VALUE_MAX_LINES)
    cursor.advance(14)


def _draw_notes(pdf: FPDF, cursor: LayoutCursor, notes: str) -> None:
    pdf.set_font("Helvetica", "B", 12)
    pdf.set_text_color(*NAVY)
    cursor.move_to()
    pdf.cell(0, LINE_HEIGHT, "Additional Notes")
    cursor.advance(LINE_HEIGHT + 4)

    pdf.set_font("Helvetica", "", 11)
    pdf.set_text_color(0, 0, 0)
    notes = _pdf_text(notes.strip())
    cursor.move_to()
    pdf.multi_cell(
        0,
        LINE_HEIGHT,
        _fit_lines(pdf, notes, pdf.epw, NOTES_MAX_LINES),
        align="L",
        new_x=XPos.LMARGIN,
        new_y=YPos.NEXT,
    )
    cursor.sync()
    cursor.advance(20)


def _draw_link_line(pdf: FPDF, cursor: LayoutCursor, label: str, text: str, url: str) -> None:
    pdf.set_font("Helvetica", "", 11)
    pdf.set_text_color(0, 0, 0)
    cursor.move_to()
    label_width = pdf.get_string_width(label) + 2
    pdf.cell(label_width, LINE_HEIGHT, label)

    pdf.set_font("Helvetica", "U", 11)
    pdf.set_text_color(*LINK_BLUE)
    pdf.cell(pdf.get_string_width(text) + 2, LINE_HEIGHT, text, link=url)
    pdf.set_text_color(0, 0, 0)
    cursor.advance(LINE_HEIGHT)


def _draw_clinic_info(pdf: FPDF, cursor: LayoutCursor) -> None:
    pdf.set_font("Helvetica", "B", 12)
    pdf.set_text_color(*NAVY)
    cursor.move_to()
    pdf.cell(0, LINE_HEIGHT, "Clinic Information")
    cursor.advance(LINE_HEIGHT + 2)

    pdf.set_font("Helvetica", "", 11)
    pdf.set_text_color(0, 0, 0)
    cursor.move_to()
    pdf.multi_cell(0, LINE_HEIGHT, clinic.ADDRESS, align="L", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    cursor.sync()

    for line in (f"Phone: {clinic.PHONE}", f"Email: {clinic.EMAIL}"):
        cursor.move_to()
        pdf.cell(0, LINE_HEIGHT, line)
        cursor.advance(LINE_HEIGHT)

    _draw_link_line(pdf, cursor, "Website: ", clinic.WEBSITE, clinic.WEBSITE_URL)
    cursor.advance(10)
    _draw_link_line(pdf, cursor, "Location: ", "Click here for directions on Google Maps", clinic.MAP_URL)


def _draw_footer(pdf: FPDF, cursor: LayoutCursor) -> None:
    if cursor.y > FOOTER_Y:
        raise RenderError(f"Receipt body ran past the footer line (y={cursor.y:.0f})")
    pdf.set_font("Helvetica", "", 8)
    pdf.set_text_color(*MUTED)
    pdf.set_xy(MARGIN, FOOTER_Y)
    pdf.cell(0, 10, f"Thank you for choosing {clinic.NAME}. We look forward to seeing you!", align="C")


def _build_pdf(record: BookingRecord, logo: bytes | None) -> FPDF:
    pdf = FPDF(orientation="P", unit="pt", format="Letter")
    pdf.set_margins(MARGIN, MARGIN, MARGIN)
    pdf.set_auto_page_break(auto=False)
    pdf.set_compression(False)
    pdf.creation_date = CREATION_DATE
    pdf.set_title("Booking Confirmation")
    pdf.add_page()

    cursor = LayoutCursor(pdf, HEADER_TOP)
    _draw_header(pdf, cursor, logo)
    _draw_title(pdf, cursor)
    _draw_greeting(pdf, cursor, record.client_name or "")
    _draw_details(pdf, cursor, record)
    if record.has_notes:
        _draw_notes(pdf, cursor, record.additional_info or "")
    _draw_clinic_info(pdf, cursor)
    _draw_footer(pdf, cursor)
    return pdf


def render_pdf(record: BookingRecord, logo: bytes | None = None) -> bytes:
    """Render the booking receipt PDF.

    Raises:
        RenderError: If fpdf2 fails while building or finalizing the document.
    """
    try:
        pdf = _build_pdf(record, logo)
        pdf_bytes = bytes(pdf.output())
    except Exception as e:
        logger.error("PDF rendering failed for booking {}: {}", record.booking_id, e)
        raise RenderError(f"PDF rendering failed: {e}") from e

    logger.debug("Rendered receipt PDF: {} bytes", len(pdf_bytes))
    return pdf_bytes


def render_html(record: BookingRecord, year: int | None = None) -> str:
    """Render the HTML email body for a booking.

    Raises:
        RenderError: If the template cannot be loaded or rendered.
    """
    try:
        template = _env.get_template("booking_confirmation.html")
        return template.render(
            clinic=clinic,
            client_name=record.client_name,
            client_email=record.client_email,
            service=record.service,
            date=record.date,
            time=record.time,
            rows=detail_rows(record),
            notes=record.additional_info.strip() if record.has_notes else None,
            year=year or datetime.now().year,
        )
    except Exception as e:
        logger.error("HTML rendering failed for booking {}: {}", record.booking_id, e)
        raise RenderError(f"HTML rendering failed: {e}") from e


def render_confirmation(
    record: BookingRecord,
    *,
    logo_path: str,
    read_asset: AssetReader = read_file_if_exists,
    year: int | None = None,
) -> RenderedDocument:
    """Render the PDF receipt and the HTML email body for one booking.

    A missing logo never fails rendering; the header falls back to text.

    Raises:
        RenderError: If the PDF or the HTML cannot be produced, or the logo
            reader fails with anything other than a missing file.
    """
    try:
        logo = read_asset(logo_path)
    except Exception as e:
        raise RenderError(f"Logo could not be read from {logo_path}: {e}") from e
    if logo is None:
        logger.warning("Logo not found at {}", logo_path)

    return RenderedDocument(
        pdf_bytes=render_pdf(record, logo),
        html_body=render_html(record, year),
    )
