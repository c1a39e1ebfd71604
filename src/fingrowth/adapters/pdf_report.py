"""PDF report rendering with reportlab."""

import io
import logging
import unicodedata
from datetime import date
from pathlib import Path

from reportlab.pdfgen import canvas

from fingrowth.core.formatting import (
    format_currency,
    format_date_medium,
    format_date_short,
    format_hours,
)
from fingrowth.core.models import ActivityType
from fingrowth.core.pagination import ReportPage

logger = logging.getLogger(__name__)

PAGE_SIZE = (595, 842)  # A4 at 72dpi
MARGIN = 40
ROW_HEIGHT = 22
NOTES_HEIGHT = 11

# Table columns: title, width, alignment
COLUMNS = [
    ("Data", 70, "left"),
    ("Client", 110, "left"),
    ("Tip", 90, "left"),
    ("Ore", 40, "right"),
    ("Statut", 60, "center"),
]


def pdf_text(text: str) -> str:
    """Strip characters the built-in Helvetica encoding cannot draw."""
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return stripped.encode("cp1252", "ignore").decode("cp1252")


def _truncate(pdf: canvas.Canvas, text: str, width: float, font: str, size: float) -> str:
    text = pdf_text(text)
    if pdf.stringWidth(text, font, size) <= width:
        return text
    while text and pdf.stringWidth(text + "...", font, size) > width:
        text = text[:-1]
    return text + "..."


class PdfReportRenderer:
    """Draws report pages, one PDF page per ReportPage."""

    def __init__(self, generated_on: date | None = None):
        self.generated_on = generated_on or date.today()

    def render(self, pages: list[ReportPage]) -> bytes:
        buffer = io.BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=PAGE_SIZE)
        if pages:
            pdf.setTitle(pdf_text(f"Raport Activitate {pages[0].period_label}"))
        for page in pages:
            self._draw_page(pdf, page)
            pdf.showPage()
        pdf.save()
        return buffer.getvalue()

    def write(self, pages: list[ReportPage], path: Path | str) -> Path:
        path = Path(path).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.render(pages))
        logger.debug(f"Wrote {len(pages)} page(s) to {path}")
        return path

    def _draw_page(self, pdf: canvas.Canvas, page: ReportPage) -> None:
        width, height = PAGE_SIZE
        y = height - MARGIN

        if page.is_first_page:
            y = self._draw_summary_header(pdf, page, y)
        else:
            pdf.setFont("Helvetica", 9)
            pdf.drawString(MARGIN, y - 9, pdf_text(f"Raport Activitate - Continuare ({page.period_label})"))
            pdf.drawRightString(width - MARGIN, y - 9, f"Pagina {page.page_number} din {page.total_pages}")
            y -= 18
            pdf.line(MARGIN, y, width - MARGIN, y)
            y -= 16

        self._draw_table(pdf, page, y)
        self._draw_footer(pdf, page)

    def _draw_summary_header(self, pdf: canvas.Canvas, page: ReportPage, y: float) -> float:
        width = PAGE_SIZE[0]
        pdf.setFont("Helvetica-Bold", 22)
        pdf.drawString(MARGIN, y - 22, "Raport Activitate")
        pdf.setFont("Helvetica", 13)
        pdf.drawString(MARGIN, y - 42, pdf_text(page.period_label))
        y -= 58
        pdf.line(MARGIN, y, width - MARGIN, y)
        y -= 22

        summary = [
            ("TOTAL INCASAT", format_currency(page.total_amount)),
            ("TOTAL ORE", format_hours(page.total_hours)),
            ("SESIUNI", str(page.total_count)),
        ]
        x = MARGIN
        for title, value in summary:
            pdf.setFont("Helvetica", 8)
            pdf.drawString(x, y, title)
            pdf.setFont("Helvetica-Bold", 13)
            pdf.drawString(x, y - 16, pdf_text(value))
            x += 150
        y -= 30
        pdf.line(MARGIN, y, width - MARGIN, y)
        return y - 20

    def _draw_table(self, pdf: canvas.Canvas, page: ReportPage, y: float) -> float:
        width = PAGE_SIZE[0]
        pdf.setFont("Helvetica-Bold", 9)
        x = MARGIN + 4
        for title, col_width, _ in COLUMNS:
            pdf.drawString(x, y, title)
            x += col_width + 8
        pdf.drawRightString(width - MARGIN - 4, y, "Suma")
        y -= ROW_HEIGHT

        for activity in page.activities:
            cells = [
                format_date_short(activity.start_date),
                activity.client_name or "Fara client",
                ActivityType.parse(activity.activity_type).display_name,
                f"{activity.hours:.1f}",
                "Facturat" if activity.is_invoiced else "Pendent",
            ]
            x = MARGIN + 4
            for (_, col_width, align), cell in zip(COLUMNS, cells):
                size = 8 if align == "center" else 11
                pdf.setFont("Helvetica", size)
                text = _truncate(pdf, cell, col_width, "Helvetica", size)
                if align == "right":
                    pdf.drawRightString(x + col_width, y, text)
                elif align == "center":
                    pdf.drawCentredString(x + col_width / 2, y, text)
                else:
                    pdf.drawString(x, y, text)
                x += col_width + 8
            pdf.setFont("Helvetica-Bold", 11)
            pdf.drawRightString(width - MARGIN - 4, y, pdf_text(format_currency(activity.total_amount)))

            if activity.notes:
                y -= NOTES_HEIGHT
                pdf.setFont("Helvetica", 9)
                notes = " ".join(activity.notes.split())
                pdf.drawString(MARGIN + 78, y, _truncate(pdf, notes, width - 2 * MARGIN - 82, "Helvetica", 9))

            y -= 6
            pdf.line(MARGIN, y, width - MARGIN, y)
            y -= ROW_HEIGHT - 6
        return y

    def _draw_footer(self, pdf: canvas.Canvas, page: ReportPage) -> None:
        width = PAGE_SIZE[0]
        pdf.setFont("Helvetica", 8)
        pdf.drawString(MARGIN, MARGIN - 10, f"Pagina {page.page_number} / {page.total_pages}")
        pdf.drawRightString(
            width - MARGIN,
            MARGIN - 10,
            pdf_text(f"Generat la {format_date_medium(self.generated_on)}"),
        )
