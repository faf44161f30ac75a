"""Tests for DOCX export and HTML preview."""

from io import BytesIO

from docx import Document

from services.document_converter import build_markdown, render_docx, render_preview_html
from services.emphasis import EmphasisTable
from services.models import ResumeDocument


class TestBuildMarkdown:
    def test_sections_in_layout_order(self, sample_resume):
        md = build_markdown(ResumeDocument.model_validate(sample_resume), EmphasisTable())
        order = [md.index(h) for h in (
            "## PROFESSIONAL SUMMARY", "## SKILLS", "## INTERNSHIP",
            "## PROJECTS", "## ACHIEVEMENTS", "## CERTIFICATES", "## EDUCATION",
        )]
        assert order == sorted(order)

    def test_markdown_special_characters_escaped(self):
        doc = ResumeDocument.model_validate({"personal": {"name": "A_B *C*"}})
        md = build_markdown(doc, EmphasisTable())
        assert md.startswith("# A\\_B \\*C\\*")

    def test_dates_and_scores_use_plain_separators(self, sample_resume):
        md = build_markdown(ResumeDocument.model_validate(sample_resume), EmphasisTable())
        assert "- AWS Cloud Practitioner - *Mar 2024*" in md
        assert "Bachelor of Technology in CSE, CGPA: 8.7" in md
        assert "—" not in md


class TestPreview:
    def test_keywords_bold_in_preview(self, sample_resume):
        page = render_preview_html(ResumeDocument.model_validate(sample_resume), EmphasisTable())
        assert "<strong>React</strong>" in page
        assert "<title>Asha Verma</title>" in page

    def test_html_in_fields_is_escaped(self):
        doc = ResumeDocument.model_validate({
            "personal": {"name": "<script>alert(1)</script>"},
        })
        page = render_preview_html(doc, EmphasisTable())
        assert "<script>alert" not in page


class TestDocx:
    def test_docx_bytes(self, sample_resume):
        data = render_docx(ResumeDocument.model_validate(sample_resume), EmphasisTable())
        assert data.startswith(b"PK")

    def test_docx_bolds_keywords(self, sample_resume):
        data = render_docx(ResumeDocument.model_validate(sample_resume), EmphasisTable())
        doc = Document(BytesIO(data))
        bold_runs = [
            run.text for p in doc.paragraphs for run in p.runs if run.bold
        ]
        assert any("React" in text for text in bold_runs)
        assert any(p.text.startswith("Asha Verma") for p in doc.paragraphs)
