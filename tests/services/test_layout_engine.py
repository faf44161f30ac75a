"""Tests for the resume layout engine."""

import pytest

from services.exceptions import MissingInputError
from services.models import EducationEntry, ExperienceEntry, ProjectEntry
from services.layout_engine import (
    BOLD,
    REGULAR,
    Circle,
    LayoutContext,
    LayoutEngine,
    Line,
    PageBreak,
    PageGeometry,
    TextRun,
    score_label,
    split_bullets,
    split_date_suffix,
)

GEOMETRY = PageGeometry()
H = GEOMETRY.height


@pytest.fixture
def engine():
    return LayoutEngine()


def _runs(ctx):
    return [i for i in ctx.instructions if isinstance(i, TextRun)]


class TestLayout:
    """Tests for LayoutEngine.layout()."""

    def test_missing_document_raises(self, engine):
        with pytest.raises(MissingInputError):
            engine.layout(None)

    def test_name_only_document(self, engine):
        result = engine.layout({"personal": {"name": "Asha Verma"}})

        assert result.page_count == 1
        assert len(result.instructions) == 1
        run = result.instructions[0]
        assert isinstance(run, TextRun)
        assert run.text == "Asha Verma"
        assert run.font == BOLD
        assert run.size == 18
        assert (run.x, run.y) == (GEOMETRY.margin_left, GEOMETRY.first_page_top)
        assert result.title == "Asha Verma Resume"

    def test_empty_name_emits_nothing(self, engine):
        result = engine.layout({})
        assert result.text_runs == []
        assert result.page_count == 1
        assert result.title == "Resume"

    def test_section_order(self, engine, sample_resume):
        result = engine.layout(sample_resume)
        headings = [
            r.text for r in result.text_runs
            if r.font == BOLD and r.size == 11
        ]
        assert headings == [
            "PROFESSIONAL SUMMARY",
            "SKILLS",
            "INTERNSHIP",
            "PROJECTS",
            "ACHIEVEMENTS",
            "CERTIFICATES",
            "EDUCATION",
        ]

    def test_empty_sections_skipped(self, engine):
        result = engine.layout({
            "personal": {"name": "A"},
            "summary": "   ",
            "skills": {"languages": [], "frameworks": []},
            "experience": [],
        })
        assert [r.text for r in result.text_runs] == ["A"]

    def test_legacy_skill_list(self, engine):
        result = engine.layout({"personal": {"name": "A"}, "skills": ["React", "Vue"]})
        texts = [r.text for r in result.text_runs]
        assert "Frameworks: " in texts
        assert "React, Vue" in texts

    def test_experience_bullets_emphasize_keywords(self, engine):
        result = engine.layout({
            "personal": {"name": "A"},
            "experience": [{
                "title": "Intern",
                "company": "Acme",
                "duration": "Jun 2024 - Jul 2024",
                "description": "Built a React dashboard\nUsed Node.js APIs",
            }],
        })
        by_text = {r.text: r for r in result.text_runs}

        assert len(result.of_type(Circle)) == 2
        assert by_text["React"].bold
        assert by_text["Node.js"].bold
        assert not by_text["Built"].bold
        assert not by_text["dashboard"].bold
        assert not by_text["APIs"].bold
        assert by_text["React"].y < by_text["Node.js"].y
        assert by_text["ACME"].bold
        assert by_text["Intern"].font == REGULAR
        assert "Jun 2024 - Jul 2024" in by_text
        assert "INTERNSHIP" in by_text

    def test_bold_and_regular_runs_share_baseline(self, engine):
        result = engine.layout({
            "personal": {"name": "A"},
            "experience": [{"company": "X", "description": "Using React daily"}],
        })
        by_text = {r.text: r for r in result.text_runs}
        assert by_text["Using"].y == by_text["React"].y == by_text["daily"].y
        assert by_text["Using"].x < by_text["React"].x < by_text["daily"].x

    def test_contact_block_two_columns(self, engine, sample_resume):
        result = engine.layout(sample_resume)
        by_text = {r.text: r for r in result.text_runs}

        linkedin = by_text["LinkedIn: "]
        email = by_text["Email: "]
        github = by_text["Github: "]
        mobile = by_text["Mobile: "]

        assert linkedin.x == email.x == GEOMETRY.margin_left
        assert email.y == linkedin.y + 11
        assert github.y == linkedin.y
        assert github.x == pytest.approx(GEOMETRY.margin_left + GEOMETRY.content_width / 2 + 10)
        assert mobile.y == github.y + 11
        assert "linkedin.com/in/asha" in by_text

    def test_education_score_label(self, engine, sample_resume):
        result = engine.layout(sample_resume)
        texts = [r.text for r in result.text_runs]
        assert "CGPA: 8.7" in texts

    def test_certificate_date_right_aligned(self, engine, sample_resume):
        result = engine.layout(sample_resume)
        by_text = {r.text: r for r in result.text_runs}
        date = by_text["Mar 2024"]
        assert date.x > GEOMETRY.width / 2
        assert by_text["AWS Cloud Practitioner"].y == date.y

    def test_live_link_is_linked(self, engine, sample_resume):
        result = engine.layout(sample_resume)
        link = next(r for r in result.text_runs if r.link)
        assert link.text == "https://shopeasy.example.com"
        assert link.underline

    def test_long_document_spans_pages(self, engine):
        entry = {
            "company": "Acme",
            "title": "Intern",
            "description": "\n".join(f"Shipped feature number {i}" for i in range(8)),
        }
        result = engine.layout({"personal": {"name": "A"}, "experience": [entry] * 12})

        assert result.page_count > 1
        assert len(result.of_type(PageBreak)) == result.page_count - 1
        for run in result.text_runs:
            assert 0 <= run.page < result.page_count
            assert run.y < H


class TestBullet:
    """Tests for bullet wrapping."""

    def test_one_word_overflow_wraps_onto_second_line(self, engine):
        # 17 words of "alpha" fit on a bullet line; the 18th spills over
        ctx = LayoutContext(GEOMETRY)
        ctx.y = 100
        engine.bullet(ctx, " ".join(["alpha"] * 18))

        ys = sorted({r.y for r in _runs(ctx)})
        assert ys == [100, 112]
        assert len([r for r in _runs(ctx) if r.y == 112]) == 1
        assert ctx.y == 127

        circle = ctx.instructions[0]
        assert isinstance(circle, Circle)
        assert (circle.x, circle.y) == (GEOMETRY.margin_left, 104)

    def test_wrapped_line_restarts_at_indent(self, engine):
        ctx = LayoutContext(GEOMETRY)
        engine.bullet(ctx, " ".join(["alpha"] * 20))
        second_line = [r for r in _runs(ctx) if r.y > GEOMETRY.first_page_top]
        assert second_line[0].x == GEOMETRY.margin_left + 8

    def test_words_stay_inside_right_edge(self, engine):
        ctx = LayoutContext(GEOMETRY)
        engine.bullet(ctx, " ".join(["alpha"] * 60))
        for run in _runs(ctx):
            assert run.x < GEOMETRY.margin_left + GEOMETRY.content_width - 8

    def test_single_line_advances_fifteen(self, engine):
        ctx = LayoutContext(GEOMETRY)
        ctx.y = 200
        engine.bullet(ctx, "Short bullet")
        assert ctx.y == 215
        assert all(r.font == REGULAR for r in _runs(ctx))


class TestPageBreaks:
    """Tests for page-break boundaries."""

    def test_heading_breaks_at_clearance(self, engine):
        ctx = LayoutContext(GEOMETRY)
        ctx.y = H - 100
        engine.section_heading(ctx, "Skills")

        assert ctx.page == 1
        assert isinstance(ctx.instructions[0], PageBreak)
        heading = _runs(ctx)[0]
        assert heading.page == 1
        assert heading.y == GEOMETRY.page_top

    def test_heading_fits_just_above_clearance(self, engine):
        ctx = LayoutContext(GEOMETRY)
        ctx.y = H - 101
        engine.section_heading(ctx, "Skills")

        assert ctx.page == 0
        assert not any(isinstance(i, PageBreak) for i in ctx.instructions)
        assert _runs(ctx)[0].y == H - 101

    def test_heading_draws_rule_and_advances(self, engine):
        ctx = LayoutContext(GEOMETRY)
        ctx.y = 300
        engine.section_heading(ctx, "Skills")

        rule = next(i for i in ctx.instructions if isinstance(i, Line))
        assert rule.y1 == rule.y2 == 314
        assert rule.x1 == GEOMETRY.margin_left
        assert rule.x2 == pytest.approx(GEOMETRY.right_edge)
        assert ctx.y == 320

    def test_bullet_breaks_at_clearance(self, engine):
        ctx = LayoutContext(GEOMETRY)
        ctx.y = H - 50
        engine.bullet(ctx, "Deployed services")

        assert ctx.page == 1
        assert _runs(ctx)[0].y == GEOMETRY.page_top

    def test_bullet_fits_just_above_clearance(self, engine):
        ctx = LayoutContext(GEOMETRY)
        ctx.y = H - 51
        engine.bullet(ctx, "Deployed services")

        assert ctx.page == 0
        assert _runs(ctx)[0].y == H - 51

    def test_experience_entry_breaks_at_clearance(self, engine):
        ctx = LayoutContext(GEOMETRY)
        ctx.y = H - 150
        engine.experience_entry(ctx, ExperienceEntry(company="Acme", title="Intern"))

        assert ctx.page == 1
        assert isinstance(ctx.instructions[0], PageBreak)
        company = _runs(ctx)[0]
        assert company.text == "ACME"
        assert company.page == 1
        assert company.y == GEOMETRY.page_top

    def test_experience_entry_fits_just_above_clearance(self, engine):
        ctx = LayoutContext(GEOMETRY)
        ctx.y = H - 151
        engine.experience_entry(ctx, ExperienceEntry(company="Acme", title="Intern"))

        assert ctx.page == 0
        assert not any(isinstance(i, PageBreak) for i in ctx.instructions)
        assert _runs(ctx)[0].y == H - 151

    def test_project_entry_breaks_at_clearance(self, engine):
        ctx = LayoutContext(GEOMETRY)
        ctx.y = H - 150
        engine.project_entry(ctx, ProjectEntry(title="ShopEasy"))

        assert ctx.page == 1
        assert _runs(ctx)[0].y == GEOMETRY.page_top

    def test_education_entry_breaks_at_clearance(self, engine):
        ctx = LayoutContext(GEOMETRY)
        ctx.y = H - 80
        engine.education_entry(ctx, EducationEntry(institution="State University", degree="B.Tech"))

        assert ctx.page == 1
        assert isinstance(ctx.instructions[0], PageBreak)
        institution = _runs(ctx)[0]
        assert institution.text == "State University"
        assert institution.page == 1
        assert institution.y == GEOMETRY.page_top

    def test_education_entry_fits_just_above_clearance(self, engine):
        ctx = LayoutContext(GEOMETRY)
        ctx.y = H - 81
        engine.education_entry(ctx, EducationEntry(institution="State University", degree="B.Tech"))

        assert ctx.page == 0
        assert not any(isinstance(i, PageBreak) for i in ctx.instructions)
        assert _runs(ctx)[0].y == H - 81


class TestHelpers:
    """Tests for layout helper functions."""

    def test_split_date_suffix(self):
        assert split_date_suffix("AWS Cloud Practitioner (Mar 2024)") == (
            "AWS Cloud Practitioner", "Mar 2024",
        )
        assert split_date_suffix("No date here") == ("No date here", None)

    def test_score_label(self):
        assert score_label("Bachelor of Science") == "CGPA"
        assert score_label("B.Tech CSE") == "CGPA"
        assert score_label("Class XII") == "Percentage"

    def test_split_bullets(self):
        assert split_bullets("• First\n\n  Second  \n") == ["First", "Second"]
        assert split_bullets("") == []
