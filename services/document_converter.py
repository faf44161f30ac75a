"""Document converter - DOCX export and HTML preview of a resume.

Both outputs follow the PDF layout's section order and use the same
keyword emphasis table, so the preview matches the download.
"""

import html
import logging
import re
from io import BytesIO
from pathlib import Path

import markdown
from docx import Document
from docx.enum.text import WD_TAB_ALIGNMENT
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Inches, Pt, RGBColor

from .emphasis import EmphasisTable
from .exceptions import GenerationFailedError
from .layout_engine import SKILL_LABELS, score_label, split_bullets, split_date_suffix
from .models import ResumeDocument

logger = logging.getLogger(__name__)

TEMPLATE_PATH = Path(__file__).parent.parent / "templates" / "resume.html"

_MD_SPECIAL = re.compile(r"([\\`*_{}\[\]#|])")

HEADING_RGB = RGBColor(0x0C, 0x1E, 0x5E)
ACCENT_RGB = RGBColor(0x1A, 0x4D, 0x8F)


def _emphasis_spans(text: str, emphasis: EmphasisTable) -> list[tuple[str, bool]]:
    """Group consecutive words with the same emphasis into spans."""
    spans: list[tuple[str, bool]] = []
    for word, bold in emphasis.split(text):
        if spans and spans[-1][1] == bold:
            spans[-1] = (f"{spans[-1][0]} {word}", bold)
        else:
            spans.append((word, bold))
    return spans


# =============================================================================
# HTML preview
# =============================================================================


def _md(text: str) -> str:
    """Escape user text for markdown (and the HTML it becomes)."""
    return _MD_SPECIAL.sub(r"\\\1", html.escape(text or "", quote=False))


def _md_emphasized(text: str, emphasis: EmphasisTable) -> str:
    return " ".join(
        f"**{_md(span)}**" if bold else _md(span)
        for span, bold in _emphasis_spans(text, emphasis)
    )


def _md_dated(title: str, date: str | None) -> str:
    return f"{title} - *{_md(date)}*" if date else title


def build_markdown(document: ResumeDocument, emphasis: EmphasisTable) -> str:
    """Render the resume as markdown with keyword emphasis."""
    personal = document.personal
    parts = [f"# {_md(personal.name) or 'Resume'}", ""]

    contacts = [
        ("LinkedIn", personal.linkedin),
        ("Email", personal.email),
        ("Portfolio", personal.portfolio),
        ("Github", personal.github),
        ("Mobile", personal.phone),
    ]
    contact_line = " · ".join(
        f"**{label}:** {_md(value)}" for label, value in contacts if value
    )
    if contact_line:
        parts += [contact_line, ""]

    if document.summary.strip():
        parts += ["## PROFESSIONAL SUMMARY", "", _md(document.summary.strip()), ""]

    if not document.skills.is_empty():
        parts += ["## SKILLS", ""]
        for attr, label in SKILL_LABELS:
            values = [v for v in getattr(document.skills, attr) if v and v.strip()]
            if values:
                parts.append(f"- **{label}:** {_md(', '.join(values))}")
        parts.append("")

    if document.experience:
        parts += ["## INTERNSHIP", ""]
        for entry in document.experience:
            parts.append(f"### {_md_dated(_md(entry.company.upper()), entry.duration)}")
            if entry.title:
                parts += ["", _md(entry.title)]
            parts.append("")
            parts += [f"- {_md_emphasized(b, emphasis)}" for b in split_bullets(entry.description)]
            parts.append("")

    if document.projects:
        parts += ["## PROJECTS", ""]
        for project in document.projects:
            parts.append(f"### {_md_dated(_md(project.title), project.duration)}")
            parts.append("")
            if project.tech:
                parts += [f"*Tech: {_md(project.tech)}*", ""]
            if project.live_link:
                link = project.live_link
                if link.startswith(("http://", "https://")):
                    parts += [f"**Live:** [{_md(link)}]({link})", ""]
                else:
                    parts += [f"**Live:** {_md(link)}", ""]
            parts += [f"- {_md_emphasized(b, emphasis)}" for b in split_bullets(project.description)]
            parts.append("")

    achievements = [a for a in document.achievements if a and a.strip()]
    if achievements:
        parts += ["## ACHIEVEMENTS", ""]
        parts += [f"- {_md(a.strip())}" for a in achievements]
        parts.append("")

    certificates = [c for c in document.certificates if c and c.strip()]
    if certificates:
        parts += ["## CERTIFICATES", ""]
        for certificate in certificates:
            text, date = split_date_suffix(certificate)
            parts.append(f"- {_md_dated(_md(text), date)}")
        parts.append("")

    if document.education:
        parts += ["## EDUCATION", ""]
        for entry in document.education:
            heading = _md(entry.institution)
            if entry.location:
                heading += f", {_md(entry.location)}"
            parts.append(f"### {_md_dated(heading, entry.year)}")
            parts.append("")
            line = _md(entry.degree)
            if entry.score:
                line += f", {score_label(entry.degree)}: {_md(entry.score)}"
            parts += [line, ""]

    return "\n".join(parts).strip() + "\n"


def render_preview_html(document: ResumeDocument, emphasis: EmphasisTable) -> str:
    """Render the resume as a standalone HTML page."""
    try:
        content = markdown.markdown(build_markdown(document, emphasis), extensions=["tables"])
        template = TEMPLATE_PATH.read_text()
    except OSError as e:
        logger.error("Preview template unavailable: %s", e)
        raise GenerationFailedError("Preview generation", str(e)) from e

    title = html.escape(document.personal.name or "Resume")
    return template.replace("{{title}}", title).replace("{{content}}", content)


# =============================================================================
# DOCX export
# =============================================================================


def render_docx(document: ResumeDocument, emphasis: EmphasisTable) -> bytes:
    """Build a DOCX version of the resume.

    Returns:
        DOCX file contents.

    Raises:
        GenerationFailedError: If python-docx fails to build or save the document.
    """
    try:
        doc = Document()
        _configure_styles(doc)
        _build_docx(doc, document, emphasis)

        buffer = BytesIO()
        doc.save(buffer)
        return buffer.getvalue()
    except Exception as e:
        logger.error("DOCX generation failed: %s", e)
        raise GenerationFailedError("DOCX generation", str(e)) from e


def _configure_styles(doc) -> None:
    for section in doc.sections:
        section.top_margin = Inches(0.4)
        section.bottom_margin = Inches(0.4)
        section.left_margin = Inches(0.5)
        section.right_margin = Inches(0.5)

    style = doc.styles['Normal']
    font = style.font
    font.name = 'Arial'
    font.size = Pt(10)
    font.color.rgb = RGBColor(0x00, 0x00, 0x00)
    style.paragraph_format.space_before = Pt(1)
    style.paragraph_format.space_after = Pt(1)

    h1_style = doc.styles['Heading 1']
    h1_style.font.name = 'Arial'
    h1_style.font.size = Pt(18)
    h1_style.font.color.rgb = HEADING_RGB
    h1_style.font.bold = True
    h1_style.paragraph_format.space_before = Pt(0)
    h1_style.paragraph_format.space_after = Pt(2)

    h2_style = doc.styles['Heading 2']
    h2_style.font.name = 'Arial'
    h2_style.font.size = Pt(11)
    h2_style.font.color.rgb = HEADING_RGB
    h2_style.font.bold = True
    h2_style.paragraph_format.space_before = Pt(10)
    h2_style.paragraph_format.space_after = Pt(4)
    _add_bottom_border(h2_style.element.get_or_add_pPr())

    if 'List Bullet' in doc.styles:
        lb_style = doc.styles['List Bullet']
        lb_style.font.name = 'Arial'
        lb_style.font.size = Pt(10)
        lb_style.paragraph_format.space_before = Pt(1)
        lb_style.paragraph_format.space_after = Pt(1)


def _add_bottom_border(pPr) -> None:
    pBdr = OxmlElement('w:pBdr')
    bottom = OxmlElement('w:bottom')
    bottom.set(qn('w:val'), 'single')
    bottom.set(qn('w:sz'), '4')
    bottom.set(qn('w:space'), '1')
    bottom.set(qn('w:color'), '000000')
    pBdr.append(bottom)
    pPr.append(pBdr)


def _dated_row(doc, title: str, date: str | None, title_bold: bool = True, color=ACCENT_RGB):
    """Paragraph with title on the left and date flush right."""
    p = doc.add_paragraph()
    p.paragraph_format.tab_stops.add_tab_stop(Inches(7.5), WD_TAB_ALIGNMENT.RIGHT)
    run = p.add_run(title)
    run.bold = title_bold
    if color is not None:
        run.font.color.rgb = color
    if date:
        date_run = p.add_run(f"\t{date}")
        date_run.bold = True
        date_run.font.size = Pt(9)
        date_run.font.color.rgb = ACCENT_RGB
    return p


def _emphasized_bullet(doc, text: str, emphasis: EmphasisTable) -> None:
    p = doc.add_paragraph(style='List Bullet')
    spans = _emphasis_spans(text, emphasis)
    for i, (span, bold) in enumerate(spans):
        run = p.add_run(span + (" " if i < len(spans) - 1 else ""))
        run.bold = bold


def _build_docx(doc, document: ResumeDocument, emphasis: EmphasisTable) -> None:
    personal = document.personal
    doc.add_heading(personal.name or "Resume", level=1)

    contacts = [
        ("LinkedIn", personal.linkedin),
        ("Email", personal.email),
        ("Portfolio", personal.portfolio),
        ("Github", personal.github),
        ("Mobile", personal.phone),
    ]
    contacts = [(label, value) for label, value in contacts if value]
    if contacts:
        p = doc.add_paragraph()
        for i, (label, value) in enumerate(contacts):
            if i:
                p.add_run("  |  ")
            p.add_run(f"{label}: ").bold = True
            p.add_run(value).font.color.rgb = ACCENT_RGB

    if document.summary.strip():
        doc.add_heading("PROFESSIONAL SUMMARY", level=2)
        doc.add_paragraph(document.summary.strip())

    if not document.skills.is_empty():
        doc.add_heading("SKILLS", level=2)
        for attr, label in SKILL_LABELS:
            values = [v for v in getattr(document.skills, attr) if v and v.strip()]
            if not values:
                continue
            p = doc.add_paragraph()
            caption = p.add_run(f"{label}: ")
            caption.bold = True
            caption.font.color.rgb = ACCENT_RGB
            p.add_run(", ".join(values))

    if document.experience:
        doc.add_heading("INTERNSHIP", level=2)
        for entry in document.experience:
            _dated_row(doc, entry.company.upper(), entry.duration)
            if entry.title:
                doc.add_paragraph(entry.title)
            for bullet in split_bullets(entry.description):
                _emphasized_bullet(doc, bullet, emphasis)

    if document.projects:
        doc.add_heading("PROJECTS", level=2)
        for project in document.projects:
            _dated_row(doc, project.title, project.duration)
            if project.tech:
                doc.add_paragraph().add_run(f"Tech: {project.tech}").font.color.rgb = ACCENT_RGB
            if project.live_link:
                p = doc.add_paragraph()
                p.add_run("Live: ").bold = True
                link = p.add_run(project.live_link)
                link.underline = True
                link.font.color.rgb = RGBColor(0x00, 0x66, 0xCC)
            for bullet in split_bullets(project.description):
                _emphasized_bullet(doc, bullet, emphasis)

    achievements = [a.strip() for a in document.achievements if a and a.strip()]
    if achievements:
        doc.add_heading("ACHIEVEMENTS", level=2)
        for achievement in achievements:
            doc.add_paragraph(achievement, style='List Bullet')

    certificates = [c for c in document.certificates if c and c.strip()]
    if certificates:
        doc.add_heading("CERTIFICATES", level=2)
        for certificate in certificates:
            text, date = split_date_suffix(certificate)
            _dated_row(doc, text, date, title_bold=False, color=None)

    if document.education:
        doc.add_heading("EDUCATION", level=2)
        for entry in document.education:
            _dated_row(doc, entry.institution, entry.location)
            doc.add_paragraph(entry.degree)
            if entry.score or entry.year:
                score = f"{score_label(entry.degree)}: {entry.score}" if entry.score else ""
                _dated_row(doc, score, entry.year, title_bold=False, color=None)
