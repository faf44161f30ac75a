#!/usr/bin/env python3
"""ResumeAI - resume builder with PDF export and AI-powered ATS scoring."""

import json
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from config_loader import load_config
from services import AtsService, ResumeAIError, ResumeService
from user_store import UserStore

console = Console()


HELP_TEXT = """
ResumeAI - resume builder with PDF export and AI-powered ATS scoring

DOCUMENTS (input is a resume JSON snapshot, as sent by the editor):
  render    Render the resume as a PDF
  docx      Export the resume as a Word document
  preview   Export the resume as a standalone HTML page

ATS:
  analyze   Score a resume PDF against a job description (needs ANTHROPIC_API_KEY)

SERVER:
  serve     Start the REST API server
"""


def _load_resume_json(path: str) -> dict:
    with open(path) as f:
        data = json.load(f)
    # Accept both a bare snapshot and the {"resumeData": ...} request body
    return data.get("resumeData", data) if isinstance(data, dict) else data


def _default_output(source: str, suffix: str) -> Path:
    return Path(source).with_suffix(suffix)


@click.group(help=HELP_TEXT)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx, verbose):
    """ResumeAI - resume builder with PDF export and AI-powered ATS scoring."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["config"] = load_config()
    ctx.obj["user_store"] = UserStore(ctx.obj["config"])


def _resume_service(ctx) -> ResumeService:
    return ResumeService(config=ctx.obj["config"], user_store=ctx.obj["user_store"])


# ============================================================================
# Document Commands
# ============================================================================


@cli.command()
@click.argument("resume_json", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output PDF path.")
@click.pass_context
def render(ctx, resume_json, output):
    """Render a resume JSON snapshot as a PDF."""
    svc = _resume_service(ctx)
    try:
        pdf_bytes, filename = svc.generate_pdf(_load_resume_json(resume_json))
    except ResumeAIError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)

    out_path = Path(output) if output else _default_output(resume_json, ".pdf")
    out_path.write_bytes(pdf_bytes)
    console.print(f"[green]Saved {out_path}[/green] [dim](download name {filename})[/dim]")


@cli.command()
@click.argument("resume_json", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output DOCX path.")
@click.pass_context
def docx(ctx, resume_json, output):
    """Export a resume JSON snapshot as a Word document."""
    svc = _resume_service(ctx)
    try:
        docx_bytes, _ = svc.generate_docx(_load_resume_json(resume_json))
    except ResumeAIError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)

    out_path = Path(output) if output else _default_output(resume_json, ".docx")
    out_path.write_bytes(docx_bytes)
    console.print(f"[green]Saved {out_path}[/green]")


@cli.command()
@click.argument("resume_json", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output HTML path.")
@click.pass_context
def preview(ctx, resume_json, output):
    """Export a resume JSON snapshot as an HTML page."""
    svc = _resume_service(ctx)
    try:
        page = svc.render_preview(_load_resume_json(resume_json))
    except ResumeAIError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)

    out_path = Path(output) if output else _default_output(resume_json, ".html")
    out_path.write_text(page)
    console.print(f"[green]Saved {out_path}[/green]")


# ============================================================================
# ATS Command
# ============================================================================


@cli.command()
@click.argument("resume_pdf", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--job", "job_file",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Text file holding the job description.",
)
@click.pass_context
def analyze(ctx, resume_pdf, job_file):
    """Score a resume PDF against a job description."""
    svc = AtsService(config=ctx.obj["config"], user_store=ctx.obj["user_store"])

    console.print("\n[bold blue]Analyzing resume...[/bold blue]\n")
    try:
        response = svc.analyze(
            Path(resume_pdf).read_bytes(),
            Path(job_file).read_text(),
            content_type="application/pdf",
        )
    except ResumeAIError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)

    result = response.analysis
    console.print(Panel(
        f"[bold]{result.score}[/bold] / 100  [cyan]{result.match_level.value}[/cyan]",
        title="ATS Score",
        subtitle=f"[dim]{response.model}[/dim]",
    ))

    table = Table(show_header=True)
    table.add_column("Missing Keywords", style="yellow")
    table.add_column("Strengths", style="green")
    table.add_column("Improvements", style="white")

    rows = max(len(result.missing_keywords), len(result.strengths), len(result.improvements))
    for i in range(rows):
        table.add_row(
            result.missing_keywords[i] if i < len(result.missing_keywords) else "",
            result.strengths[i] if i < len(result.strengths) else "",
            result.improvements[i] if i < len(result.improvements) else "",
        )
    if rows:
        console.print(table)


# ============================================================================
# API Server Command
# ============================================================================


@cli.command()
@click.option("--host", default="0.0.0.0", help="Host to bind to.")
@click.option("--port", default=8000, type=int, help="Port to bind to.")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development.")
def serve(host, port, reload):
    """Start the ResumeAI API server."""
    import uvicorn
    console.print("\n[bold blue]Starting ResumeAI API server...[/bold blue]")
    console.print(f"[dim]API docs at http://{host}:{port}/docs[/dim]\n")
    uvicorn.run("api.app:create_app", host=host, port=port, reload=reload, factory=True)


if __name__ == "__main__":
    cli()
