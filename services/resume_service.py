"""Resume service - PDF, DOCX and HTML preview generation for a resume snapshot."""

import logging
import re
import unicodedata
from urllib.parse import quote

from .base_service import BaseService
from .document_converter import render_docx, render_preview_html
from .emphasis import EmphasisTable
from .exceptions import MissingInputError
from .layout_engine import LayoutEngine, LayoutResult
from .models import ResumeDocument
from .pdf_emitter import render_pdf

logger = logging.getLogger(__name__)

_FILENAME_UNSAFE = re.compile(r'[\\/:*?"<>|\r\n]+')


def download_basename(document: ResumeDocument) -> str:
    """Base name for downloads: "<name>_CV", or "Resume_CV" when unnamed."""
    name = _FILENAME_UNSAFE.sub("", document.personal.name).strip()
    return f"{name or 'Resume'}_CV"


def content_disposition(filename: str) -> str:
    """Attachment header value that survives names outside latin-1.

    ``filename`` carries an ASCII fallback for older clients; ``filename*``
    carries the full UTF-8 name (RFC 5987).
    """
    fallback = unicodedata.normalize("NFKD", filename).encode("ascii", "ignore").decode("ascii")
    fallback = _FILENAME_UNSAFE.sub("", fallback).lstrip()
    if fallback.startswith("_"):
        fallback = f"Resume{fallback}"
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


class ResumeService(BaseService):
    """Service for rendering a resume snapshot into downloadable documents.

    Generation never touches Claude or the user store; the layout engine and
    emphasis table are built once and shared across calls.
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.emphasis = EmphasisTable.from_config(self.config)
        self.engine = LayoutEngine(emphasis=self.emphasis)

    def _coerce(self, document: ResumeDocument | dict | None) -> ResumeDocument:
        if document is None:
            raise MissingInputError("Resume data")
        if isinstance(document, dict):
            return ResumeDocument.model_validate(document)
        return document

    def layout(self, document: ResumeDocument | dict | None) -> LayoutResult:
        """Lay out a resume without emitting it.

        Raises:
            MissingInputError: If no document is given.
        """
        return self.engine.layout(self._coerce(document))

    def generate_pdf(self, document: ResumeDocument | dict | None) -> tuple[bytes, str]:
        """Render a resume as a PDF.

        Returns:
            Tuple of (PDF bytes, download filename).

        Raises:
            MissingInputError: If no document is given.
            GenerationFailedError: If the PDF could not be drawn.
        """
        document = self._coerce(document)
        result = self.engine.layout(document)
        pdf_bytes = render_pdf(
            result,
            geometry=self.engine.geometry,
            author=document.personal.name or None,
        )
        filename = f"{download_basename(document)}.pdf"
        logger.info("Generated %s (%d page(s), %d bytes)", filename, result.page_count, len(pdf_bytes))
        return pdf_bytes, filename

    def generate_docx(self, document: ResumeDocument | dict | None) -> tuple[bytes, str]:
        """Render a resume as a DOCX document.

        Returns:
            Tuple of (DOCX bytes, download filename).
        """
        document = self._coerce(document)
        docx_bytes = render_docx(document, self.emphasis)
        filename = f"{download_basename(document)}.docx"
        logger.info("Generated %s (%d bytes)", filename, len(docx_bytes))
        return docx_bytes, filename

    def render_preview(self, document: ResumeDocument | dict | None) -> str:
        """Render a resume as a standalone HTML page."""
        return render_preview_html(self._coerce(document), self.emphasis)
