"""Tests for the resume CLI document commands."""

import json

import pytest
from click.testing import CliRunner

import resume_cli


@pytest.fixture
def runner(monkeypatch, test_config, user_store):
    monkeypatch.setattr(resume_cli, "load_config", lambda: test_config)
    monkeypatch.setattr(resume_cli, "UserStore", lambda config: user_store)
    return CliRunner()


@pytest.fixture
def resume_json(tmp_path, sample_resume):
    path = tmp_path / "resume.json"
    path.write_text(json.dumps({"resumeData": sample_resume}))
    return path


class TestDocumentCommands:
    def test_render(self, runner, resume_json, tmp_path):
        out = tmp_path / "out.pdf"
        result = runner.invoke(resume_cli.cli, ["render", str(resume_json), "-o", str(out)])

        assert result.exit_code == 0, result.output
        assert out.read_bytes().startswith(b"%PDF")

    def test_docx_default_output(self, runner, resume_json):
        result = runner.invoke(resume_cli.cli, ["docx", str(resume_json)])

        assert result.exit_code == 0, result.output
        assert resume_json.with_suffix(".docx").read_bytes().startswith(b"PK")

    def test_preview(self, runner, resume_json, tmp_path):
        out = tmp_path / "preview.html"
        result = runner.invoke(resume_cli.cli, ["preview", str(resume_json), "-o", str(out)])

        assert result.exit_code == 0, result.output
        assert "<strong>React</strong>" in out.read_text()
