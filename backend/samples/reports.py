"""
Printable PDF summary of the stored samples.

Text only: the charts live in the frontends, this is the version that gets
attached to emails and field reports.
"""
from __future__ import annotations

from io import BytesIO
from typing import Any

from django.utils.timezone import now
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

PAGE_TOP_MARGIN = 50
PAGE_BOTTOM_MARGIN = 60


def report_filename() -> str:
    return f"Sand_Sample_Summary_Report_{now():%Y%m%d_%H%M%S}.pdf"


def _format_mm(value: Any) -> str:
    return f"{value:.3f} mm" if value is not None else "n/a"


def build_summary_pdf(
    stats: dict[str, Any],
    sediment_counts: list[dict[str, Any]],
    d50_counts: list[dict[str, Any]],
) -> bytes:
    """Render the grain-size statistics and both distributions as a PDF."""
    buffer = BytesIO()
    pdf_canvas = canvas.Canvas(buffer, pagesize=A4)
    _, height = A4

    y = height - PAGE_TOP_MARGIN

    def line(text: str, indent: int = 60, step: int = 15) -> None:
        nonlocal y
        if y < PAGE_BOTTOM_MARGIN:
            pdf_canvas.showPage()
            y = height - PAGE_TOP_MARGIN
            pdf_canvas.setFont("Helvetica", 10)
        pdf_canvas.drawString(indent, y, text)
        y -= step

    def heading(text: str) -> None:
        nonlocal y
        y -= 10
        pdf_canvas.setFont("Helvetica-Bold", 12)
        line(text, indent=40, step=20)
        pdf_canvas.setFont("Helvetica", 10)

    pdf_canvas.setFont("Helvetica-Bold", 14)
    line("Sand Sample Summary Report", indent=40, step=30)

    pdf_canvas.setFont("Helvetica", 10)
    line(f"Generated at: {now():%Y-%m-%d %H:%M:%S %Z}", indent=40, step=20)

    heading("Grain Size Statistics")
    line(f"Total samples: {stats['totalSamples']}")
    line(f"Average D50: {_format_mm(stats['avgD50'])}")
    line(f"Min / Max D50: {_format_mm(stats['minD50'])} / {_format_mm(stats['maxD50'])}")
    line(f"Average mean size: {_format_mm(stats['avgDmean'])}")
    line(f"Average grain count: {round(stats['avgNumberOfGrains'])}")

    heading("Sediment Type Distribution")
    if not sediment_counts:
        line("No samples stored yet.")
    for entry in sediment_counts:
        line(f"{entry['_id']}: {entry['count']}")

    heading("D50 Distribution")
    for entry in d50_counts:
        line(f"{entry['_id']}: {entry['count']}")

    pdf_canvas.showPage()
    pdf_canvas.save()
    return buffer.getvalue()
