"""Render a sample receipt PDF and email HTML for visual review.

Run: python3 backend/scripts/render_sample.py [output_dir]
Output: sample_receipt.pdf and sample_email.html (default: current directory)
"""

import sys
from pathlib import Path

# Add backend/ to path so `booking_mailer` is importable from scripts/
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from booking_mailer.config import settings
from booking_mailer.models.booking import BookingRecord
from booking_mailer.services.document_gen import render_confirmation

SAMPLE = BookingRecord(
    client_name="Jane Doe",
    client_email="jane@example.com",
    service="Cleaning",
    date="2025-01-10",
    time="09:00 AM",
    additional_info="Prefers a morning slot. Mild anxiety with dental procedures.",
    booking_id="WDC-1",
    client_id="CID-1",
)


def main() -> None:
    out_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else Path.cwd()
    out_dir.mkdir(parents=True, exist_ok=True)

    document = render_confirmation(SAMPLE, logo_path=settings.logo_path)

    pdf_path = out_dir / "sample_receipt.pdf"
    html_path = out_dir / "sample_email.html"
    pdf_path.write_bytes(document.pdf_bytes)
    html_path.write_text(document.html_body, encoding="utf-8")
    print(f"Wrote {pdf_path} ({len(document.pdf_bytes):,} bytes)")
    print(f"Wrote {html_path}")


if __name__ == "__main__":
    main()
