"""Resume layout engine.

Walks a ResumeDocument once, top to bottom, and produces absolutely
positioned drawing instructions for the PDF emitter. The y axis grows
downward from the top edge of the page and a text run's y is the top of
its line box. All section renderers share one LayoutContext, which owns the
running cursor and the current page.
"""

import logging
import re
from dataclasses import dataclass, field

from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth

from .emphasis import EmphasisTable
from .exceptions import MissingInputError
from .models import (
    EducationEntry,
    ExperienceEntry,
    PersonalInfo,
    ProjectEntry,
    ResumeDocument,
    Skills,
)

logger = logging.getLogger(__name__)

HEADING_COLOR = "#0c1e5e"
ACCENT_COLOR = "#1a4d8f"
TEXT_COLOR = "#000000"
LINK_COLOR = "#0066cc"

REGULAR = "Helvetica"
BOLD = "Helvetica-Bold"

BODY_SIZE = 10
LINE_HEIGHT = 12
CONTACT_ROW_HEIGHT = 11
BULLET_INDENT = 8
BULLET_RADIUS = 2

# Space that must remain below the cursor before each kind of block starts
HEADING_CLEARANCE = 100
ENTRY_CLEARANCE = 150
EDUCATION_CLEARANCE = 80
BULLET_CLEARANCE = 50

SKILL_LABELS = (
    ("languages", "Languages"),
    ("frameworks", "Frameworks"),
    ("tools", "Tools & Databases"),
    ("soft", "Soft Skills"),
)

_DATE_SUFFIX = re.compile(r"\s*\(([^)]+)\)\s*$")


# =============================================================================
# Geometry and instructions
# =============================================================================


@dataclass(frozen=True)
class PageGeometry:
    """Fixed page geometry in points (A4)."""

    width: float = 595.28
    height: float = 841.89
    margin_left: float = 50
    margin_right: float = 50
    first_page_top: float = 30
    page_top: float = 50

    @property
    def content_width(self) -> float:
        return self.width - self.margin_left - self.margin_right

    @property
    def right_edge(self) -> float:
        return self.width - self.margin_right


@dataclass
class TextRun:
    """A single run of text drawn at (x, y) in one font and color."""

    page: int
    x: float
    y: float
    text: str
    font: str = REGULAR
    size: float = BODY_SIZE
    color: str = TEXT_COLOR
    link: str | None = None
    underline: bool = False

    @property
    def bold(self) -> bool:
        return self.font == BOLD


@dataclass
class Line:
    """A straight stroke, used for section rules."""

    page: int
    x1: float
    y1: float
    x2: float
    y2: float
    width: float = 0.5
    color: str = TEXT_COLOR


@dataclass
class Circle:
    """A filled circle, used as the bullet glyph."""

    page: int
    x: float
    y: float
    radius: float
    color: str = TEXT_COLOR


@dataclass
class PageBreak:
    """Starts a new page; `page` is the index of the page that begins."""

    page: int


@dataclass
class LayoutResult:
    """Ordered drawing instructions for a whole document."""

    instructions: list = field(default_factory=list)
    page_count: int = 1
    title: str = "Resume"

    def of_type(self, kind: type) -> list:
        return [i for i in self.instructions if isinstance(i, kind)]

    @property
    def text_runs(self) -> list[TextRun]:
        return self.of_type(TextRun)


class LayoutContext:
    """Cursor and instruction buffer threaded through every section renderer."""

    def __init__(self, geometry: PageGeometry | None = None):
        self.geometry = geometry or PageGeometry()
        self.page = 0
        self.y = self.geometry.first_page_top
        self.instructions: list = []

    def advance(self, dy: float) -> float:
        """Move the cursor down by dy points and return the new position."""
        self.y += dy
        return self.y

    def needs_page_break(self, min_remaining: float) -> bool:
        """True when less than min_remaining points are left above the page bottom."""
        return self.y >= self.geometry.height - min_remaining

    def new_page(self) -> None:
        self.page += 1
        self.y = self.geometry.page_top
        self.instructions.append(PageBreak(self.page))

    def ensure_space(self, min_remaining: float) -> bool:
        """Start a new page if the block would begin too close to the bottom."""
        if self.needs_page_break(min_remaining):
            self.new_page()
            return True
        return False

    def text(
        self,
        x: float,
        y: float,
        text: str,
        font: str = REGULAR,
        size: float = BODY_SIZE,
        color: str = TEXT_COLOR,
        link: str | None = None,
        underline: bool = False,
    ) -> TextRun | None:
        if not text:
            return None
        run = TextRun(self.page, x, y, text, font, size, color, link, underline)
        self.instructions.append(run)
        return run

    def rule(self, y: float, width: float = 0.5, color: str = TEXT_COLOR) -> None:
        """Full content-width horizontal line."""
        g = self.geometry
        self.instructions.append(
            Line(self.page, g.margin_left, y, g.right_edge, y, width, color)
        )

    def circle(self, x: float, y: float, radius: float, color: str = TEXT_COLOR) -> None:
        self.instructions.append(Circle(self.page, x, y, radius, color))


# =============================================================================
# Helpers
# =============================================================================


def measure(text: str, font: str = REGULAR, size: float = BODY_SIZE) -> float:
    """Width of text in points using the standard font metrics."""
    return stringWidth(text, font, size)


def wrap_text(text: str, width: float, font: str = REGULAR, size: float = BODY_SIZE) -> list[str]:
    """Greedy line breaking of plain text into lines no wider than width."""
    if not text or not text.strip():
        return []
    return simpleSplit(text.strip(), font, size, width)


def split_date_suffix(text: str) -> tuple[str, str | None]:
    """Split 'AWS Cloud Practitioner (Mar 2024)' into text and date."""
    match = _DATE_SUFFIX.search(text)
    if not match:
        return text.strip(), None
    return text[:match.start()].strip(), match.group(1).strip()


def score_label(degree: str) -> str:
    lowered = degree.lower()
    if "bachelor" in lowered or "b.tech" in lowered:
        return "CGPA"
    return "Percentage"


def split_bullets(description: str) -> list[str]:
    """One bullet per non-blank line, without leading bullet characters."""
    bullets = []
    for line in (description or "").splitlines():
        line = line.strip().lstrip("•▪").strip()
        if line:
            bullets.append(line)
    return bullets


def _strip_scheme(url: str) -> str:
    for prefix in ("https://", "http://"):
        if url.startswith(prefix):
            return url[len(prefix):]
    return url


# =============================================================================
# Engine
# =============================================================================


class LayoutEngine:
    """Lays out a ResumeDocument as drawing instructions.

    Stateless between calls: every layout() call builds its own context, so a
    single engine can be shared across requests.
    """

    def __init__(
        self,
        emphasis: EmphasisTable | None = None,
        geometry: PageGeometry | None = None,
    ):
        self.emphasis = emphasis or EmphasisTable()
        self.geometry = geometry or PageGeometry()

    def layout(self, document: ResumeDocument | dict | None) -> LayoutResult:
        """Lay out a full document.

        Raises:
            MissingInputError: If no document is given.
        """
        if document is None:
            raise MissingInputError("Resume data")
        if isinstance(document, dict):
            document = ResumeDocument.model_validate(document)

        ctx = LayoutContext(self.geometry)

        self.render_header(ctx, document.personal)
        if document.summary.strip():
            self.render_summary(ctx, document.summary)
        if not document.skills.is_empty():
            self.render_skills(ctx, document.skills)
        if document.experience:
            self.render_experience(ctx, document.experience)
        if document.projects:
            self.render_projects(ctx, document.projects)
        if document.achievements:
            self.render_achievements(ctx, document.achievements)
        if document.certificates:
            self.render_certificates(ctx, document.certificates)
        if document.education:
            self.render_education(ctx, document.education)

        name = document.personal.name.strip()
        result = LayoutResult(
            instructions=ctx.instructions,
            page_count=ctx.page + 1,
            title=f"{name} Resume" if name else "Resume",
        )
        logger.debug(
            "Laid out %d instructions on %d page(s)",
            len(result.instructions), result.page_count,
        )
        return result

    # -------------------------------------------------------------------------
    # Shared building blocks
    # -------------------------------------------------------------------------

    def section_heading(self, ctx: LayoutContext, title: str) -> None:
        """Upper-cased heading with a rule below it; always moves the cursor 20pt."""
        ctx.ensure_space(HEADING_CLEARANCE)
        ctx.text(ctx.geometry.margin_left, ctx.y, title.upper(), BOLD, 11, HEADING_COLOR)
        ctx.rule(ctx.y + 14)
        ctx.advance(20)

    def bullet(self, ctx: LayoutContext, text: str) -> None:
        """Bullet glyph plus word-wrapped text with keyword emphasis."""
        ctx.ensure_space(BULLET_CLEARANCE)
        g = ctx.geometry
        ctx.circle(g.margin_left, ctx.y + 4, BULLET_RADIUS, TEXT_COLOR)

        start_x = g.margin_left + BULLET_INDENT
        max_x = g.margin_left + g.content_width - BULLET_INDENT
        x, y = start_x, ctx.y

        words = self.emphasis.split(text)
        for i, (word, emphasized) in enumerate(words):
            font = BOLD if emphasized else REGULAR
            spacing = " " if i < len(words) - 1 else ""
            width = measure(word + spacing, font, BODY_SIZE)
            if x + width > max_x and x > start_x:
                y += LINE_HEIGHT
                x = start_x
            ctx.text(x, y, word, font, BODY_SIZE, TEXT_COLOR)
            x += width

        ctx.advance(y - ctx.y + 15)

    def right_aligned(
        self,
        ctx: LayoutContext,
        y: float,
        text: str,
        color: str = ACCENT_COLOR,
        font: str = BOLD,
        size: float = 9,
    ) -> None:
        if not text:
            return
        x = ctx.geometry.right_edge - measure(text, font, size)
        ctx.text(x, y, text, font, size, color)

    def paragraph(
        self,
        ctx: LayoutContext,
        x: float,
        lines: list[str],
        font: str = REGULAR,
        size: float = BODY_SIZE,
        color: str = TEXT_COLOR,
    ) -> None:
        """Draw pre-wrapped lines from the cursor down; does not move the cursor."""
        for i, line in enumerate(lines):
            ctx.text(x, ctx.y + i * LINE_HEIGHT, line, font, size, color)

    # -------------------------------------------------------------------------
    # Sections
    # -------------------------------------------------------------------------

    def render_header(self, ctx: LayoutContext, personal: PersonalInfo) -> None:
        g = ctx.geometry
        ctx.text(g.margin_left, ctx.y, personal.name.strip(), BOLD, 18, HEADING_COLOR)
        ctx.advance(22)

        left = []
        if personal.linkedin:
            left.append(("LinkedIn", _strip_scheme(personal.linkedin)))
        if personal.email:
            left.append(("Email", personal.email))
        if personal.portfolio:
            left.append(("Portfolio", _strip_scheme(personal.portfolio)))

        right = []
        if personal.github:
            right.append(("Github", _strip_scheme(personal.github)))
        if personal.phone:
            right.append(("Mobile", personal.phone))

        self.render_contact_block(ctx, left, right)

    def render_contact_block(
        self,
        ctx: LayoutContext,
        left: list[tuple[str, str]],
        right: list[tuple[str, str]],
    ) -> None:
        """Two label/value columns starting at the same y.

        The block is as tall as the longer column.
        """
        g = ctx.geometry
        top = ctx.y
        columns = (
            (g.margin_left, left),
            (g.margin_left + g.content_width / 2 + 10, right),
        )
        for x, rows in columns:
            for i, (label, value) in enumerate(rows):
                y = top + i * CONTACT_ROW_HEIGHT
                caption = f"{label}: "
                ctx.text(x, y, caption, BOLD, 9, TEXT_COLOR)
                ctx.text(x + measure(caption, BOLD, 9), y, value, REGULAR, 9, ACCENT_COLOR)

        ctx.advance(max(len(left), len(right)) * CONTACT_ROW_HEIGHT + 12)

    def render_summary(self, ctx: LayoutContext, summary: str) -> None:
        self.section_heading(ctx, "Professional Summary")
        lines = wrap_text(summary, ctx.geometry.content_width)
        self.paragraph(ctx, ctx.geometry.margin_left, lines)
        ctx.advance(len(lines) * LINE_HEIGHT + 10)

    def render_skills(self, ctx: LayoutContext, skills: Skills) -> None:
        self.section_heading(ctx, "Skills")
        g = ctx.geometry

        for attr, label in SKILL_LABELS:
            values = [v.strip() for v in getattr(skills, attr) if v and v.strip()]
            if not values:
                continue
            caption = f"{label}: "
            offset = measure(caption, BOLD, BODY_SIZE)
            ctx.text(g.margin_left, ctx.y, caption, BOLD, BODY_SIZE, ACCENT_COLOR)
            lines = wrap_text(", ".join(values), g.content_width - offset)
            self.paragraph(ctx, g.margin_left + offset, lines)
            ctx.advance(max(len(lines), 1) * LINE_HEIGHT + 3)

        ctx.advance(8)

    def render_experience(self, ctx: LayoutContext, entries: list[ExperienceEntry]) -> None:
        self.section_heading(ctx, "Internship")
        for entry in entries:
            self.experience_entry(ctx, entry)

    def experience_entry(self, ctx: LayoutContext, entry: ExperienceEntry) -> None:
        """Company and duration line, title, then description bullets."""
        g = ctx.geometry
        ctx.ensure_space(ENTRY_CLEARANCE)
        ctx.text(g.margin_left, ctx.y, entry.company.upper(), BOLD, BODY_SIZE, ACCENT_COLOR)
        self.right_aligned(ctx, ctx.y, entry.duration)
        ctx.advance(13)

        ctx.text(g.margin_left, ctx.y, entry.title, REGULAR, BODY_SIZE, TEXT_COLOR)
        ctx.advance(14)

        for line in split_bullets(entry.description):
            self.bullet(ctx, line)
        ctx.advance(6)

    def render_projects(self, ctx: LayoutContext, projects: list[ProjectEntry]) -> None:
        self.section_heading(ctx, "Projects")
        for project in projects:
            self.project_entry(ctx, project)

    def project_entry(self, ctx: LayoutContext, project: ProjectEntry) -> None:
        g = ctx.geometry
        ctx.ensure_space(ENTRY_CLEARANCE)
        ctx.text(g.margin_left, ctx.y, project.title, BOLD, BODY_SIZE, ACCENT_COLOR)
        self.right_aligned(ctx, ctx.y, project.duration)
        ctx.advance(13)

        if project.tech:
            ctx.text(g.margin_left, ctx.y, f"Tech: {project.tech}", REGULAR, BODY_SIZE, ACCENT_COLOR)
            ctx.advance(13)

        if project.live_link:
            caption = "Live: "
            ctx.text(g.margin_left, ctx.y, caption, BOLD, 9, ACCENT_COLOR)
            ctx.text(
                g.margin_left + measure(caption, BOLD, 9),
                ctx.y,
                project.live_link,
                REGULAR,
                9,
                LINK_COLOR,
                link=project.live_link,
                underline=True,
            )
            ctx.advance(13)

        for line in split_bullets(project.description):
            self.bullet(ctx, line)
        ctx.advance(6)

    def render_achievements(self, ctx: LayoutContext, achievements: list[str]) -> None:
        self.section_heading(ctx, "Achievements")
        g = ctx.geometry

        for achievement in achievements:
            if not achievement or not achievement.strip():
                continue
            ctx.ensure_space(BULLET_CLEARANCE)
            ctx.circle(g.margin_left, ctx.y + 4, BULLET_RADIUS, TEXT_COLOR)
            lines = wrap_text(achievement, g.content_width - BULLET_INDENT)
            self.paragraph(ctx, g.margin_left + BULLET_INDENT, lines)
            ctx.advance(len(lines) * LINE_HEIGHT + 3)

        ctx.advance(6)

    def render_certificates(self, ctx: LayoutContext, certificates: list[str]) -> None:
        self.section_heading(ctx, "Certificates")
        g = ctx.geometry

        for certificate in certificates:
            if not certificate or not certificate.strip():
                continue
            ctx.ensure_space(BULLET_CLEARANCE)
            text, date = split_date_suffix(certificate)
            width = g.content_width - 120 if date else g.content_width
            lines = wrap_text(text, width)
            self.paragraph(ctx, g.margin_left, lines)
            self.right_aligned(ctx, ctx.y, date)
            ctx.advance(max(len(lines), 1) * LINE_HEIGHT + 3)

        ctx.advance(6)

    def render_education(self, ctx: LayoutContext, entries: list[EducationEntry]) -> None:
        self.section_heading(ctx, "Education")
        for entry in entries:
            self.education_entry(ctx, entry)

    def education_entry(self, ctx: LayoutContext, entry: EducationEntry) -> None:
        g = ctx.geometry
        ctx.ensure_space(EDUCATION_CLEARANCE)
        ctx.text(g.margin_left, ctx.y, entry.institution, BOLD, BODY_SIZE, ACCENT_COLOR)
        self.right_aligned(ctx, ctx.y, entry.location, color=TEXT_COLOR)
        ctx.advance(13)

        ctx.text(g.margin_left, ctx.y, entry.degree, REGULAR, BODY_SIZE, TEXT_COLOR)
        ctx.advance(13)

        if entry.score:
            ctx.text(
                g.margin_left, ctx.y,
                f"{score_label(entry.degree)}: {entry.score}",
                REGULAR, BODY_SIZE, TEXT_COLOR,
            )
            self.right_aligned(ctx, ctx.y, entry.year)
            ctx.advance(16)
        elif entry.year:
            self.right_aligned(ctx, ctx.y, entry.year)
            ctx.advance(16)
