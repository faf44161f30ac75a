"""PDF emitter - replays layout instructions on a reportlab canvas."""

import logging
from io import BytesIO

from reportlab.lib.colors import HexColor
from reportlab.pdfbase.pdfmetrics import getAscent, stringWidth
from reportlab.pdfgen import canvas

from .exceptions import GenerationFailedError
from .layout_engine import Circle, LayoutResult, Line, PageBreak, PageGeometry, TextRun

logger = logging.getLogger(__name__)


def render_pdf(
    result: LayoutResult,
    geometry: PageGeometry | None = None,
    author: str | None = None,
) -> bytes:
    """Turn drawing instructions into a PDF.

    Positions, fonts and colors are used exactly as laid out; only the y axis
    is flipped to PDF's bottom-up coordinates.

    Returns:
        PDF file contents.

    Raises:
        GenerationFailedError: If reportlab fails to draw or save the document.
    """
    geometry = geometry or PageGeometry()
    buffer = BytesIO()

    try:
        pdf = canvas.Canvas(buffer, pagesize=(geometry.width, geometry.height))
        pdf.setTitle(result.title)
        if author:
            pdf.setAuthor(author)

        for instruction in result.instructions:
            if isinstance(instruction, TextRun):
                _draw_text(pdf, instruction, geometry.height)
            elif isinstance(instruction, Line):
                pdf.setStrokeColor(HexColor(instruction.color))
                pdf.setLineWidth(instruction.width)
                pdf.line(
                    instruction.x1, geometry.height - instruction.y1,
                    instruction.x2, geometry.height - instruction.y2,
                )
            elif isinstance(instruction, Circle):
                pdf.setFillColor(HexColor(instruction.color))
                pdf.circle(
                    instruction.x, geometry.height - instruction.y,
                    instruction.radius, stroke=0, fill=1,
                )
            elif isinstance(instruction, PageBreak):
                pdf.showPage()

        pdf.save()
    except Exception as e:
        logger.error("PDF generation failed: %s", e)
        raise GenerationFailedError("PDF generation", str(e)) from e

    return buffer.getvalue()


def _draw_text(pdf: canvas.Canvas, run: TextRun, page_height: float) -> None:
    """Draw a run whose y is the top of its line box."""
    baseline = page_height - (run.y + getAscent(run.font, run.size))
    color = HexColor(run.color)

    pdf.setFont(run.font, run.size)
    pdf.setFillColor(color)
    pdf.drawString(run.x, baseline, run.text)

    if not (run.underline or run.link):
        return

    width = stringWidth(run.text, run.font, run.size)
    if run.underline:
        pdf.setStrokeColor(color)
        pdf.setLineWidth(0.5)
        pdf.line(run.x, baseline - 1.5, run.x + width, baseline - 1.5)
    if run.link:
        pdf.linkURL(
            run.link,
            (run.x, baseline - 2, run.x + width, baseline + run.size),
            relative=0,
        )
