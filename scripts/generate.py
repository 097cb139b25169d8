#!/usr/bin/env python3
"""
Command-line interface for resume and cover letter generation.

Subcommands:
- resume: Generate a markdown resume from a job description (optionally print-ready HTML)
- cover-letter: Generate a cover letter tailored to a job description
"""

import os
from pathlib import Path
from typing import List

import typer
from dotenv import load_dotenv

from jobsync.contexts.intake import (
    CoverLetterRequest,
    GenerationError,
    MissingFieldError,
    RateLimitExceededError,
    generate_cover_letter,
    generate_resume_markdown,
)
from jobsync.contexts.intake.logger import setup_intake_logger
from jobsync.contexts.templating import ResumeEditingSession
from jobsync.utils.llm import get_provider
from jobsync.utils.timestamp import now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

app = typer.Typer(
    add_completion=False,
    help="Generate resumes and cover letters from a job description",
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _read_job_description(job_file: Path) -> str:
    text = job_file.read_text(encoding="utf-8")
    if not text.strip():
        typer.secho(f"Error: Job description is empty: {job_file}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return text


def _report_generation_error(error: GenerationError):
    if isinstance(error, MissingFieldError):
        typer.secho(f"Error: {error}", fg=typer.colors.RED, err=True)
    elif isinstance(error, RateLimitExceededError):
        typer.secho(f"\n✗ {error}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"\n✗ Generation failed: {error}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.command("resume")
def resume_command(
    job_file: Path = typer.Argument(
        ...,
        help="Text or markdown file holding the job description",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    output: Path = typer.Option(
        None,
        "--output",
        "-o",
        help="Output .md path (default: print to stdout)",
    ),
    html: bool = typer.Option(
        False,
        "--html",
        help="Also write a print-ready .html next to the markdown output",
    ),
    provider_name: str = typer.Option(
        None,
        "--provider",
        "-p",
        help="LLM provider: openai or anthropic (default: LLM_PROVIDER)",
    ),
    models: List[str] = typer.Option(
        None,
        "--model",
        "-m",
        help="Model to try (repeat for a fallback chain)",
    ),
):
    """
    Generate a one-page markdown resume for a job description.

    The generated markdown is cleaned (dates normalized, generator artifacts
    removed) when its structure is recognized; otherwise it is saved as-is.

    Examples:\n

        $ generate.py resume job.txt -o resume.md

        $ generate.py resume job.txt -o resume.md --html -p anthropic
    """
    job_description = _read_job_description(job_file)
    setup_intake_logger(LOGS_PATH / f"resume_{now()}", document_type="resume")

    try:
        provider = get_provider(provider_name)
        result = generate_resume_markdown(job_description, provider=provider, models=models)
    except GenerationError as e:
        _report_generation_error(e)
    except (ImportError, ValueError) as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    session = ResumeEditingSession.from_generated(result.content)
    markdown = session.display_markdown()

    if not session.edit_mode:
        typer.secho(
            "Warning: resume structure not recognized, keeping generated text as-is",
            fg=typer.colors.YELLOW,
            err=True,
        )

    if output is None:
        typer.echo(markdown)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(markdown, encoding="utf-8")
    typer.secho(f"\n✓ Resume saved to: {output}", fg=typer.colors.GREEN)

    if html:
        html_path = output.with_suffix(".html")
        html_path.write_text(session.export_print_document(), encoding="utf-8")
        typer.secho(f"✓ Print document saved to: {html_path}", fg=typer.colors.GREEN)

    typer.echo(f"  Model: {result.model}  Time: {result.time_s:.2f}s")


@app.command("cover-letter")
def cover_letter_command(
    job_file: Path = typer.Argument(
        ...,
        help="Text or markdown file holding the job description",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    job_title: str = typer.Option(..., "--job-title", "-t", help="Target job title"),
    skills: str = typer.Option(..., "--skills", "-s", help="Comma-separated skills"),
    name: str = typer.Option("", "--name", help="Applicant name"),
    experience: str = typer.Option("", "--experience", "-e", help="Short experience summary"),
    creativity: float = typer.Option(
        0.35, "--creativity", "-c", help="Creativity score between 0 and 1"
    ),
    from_first_name: str = typer.Option("", "--from-first-name"),
    from_last_name: str = typer.Option("", "--from-last-name"),
    email: str = typer.Option("", "--email"),
    phone: str = typer.Option("", "--phone"),
    to_first_name: str = typer.Option("", "--to-first-name"),
    to_last_name: str = typer.Option("", "--to-last-name"),
    company: str = typer.Option("", "--company"),
    department: str = typer.Option("", "--department"),
    output: Path = typer.Option(
        None,
        "--output",
        "-o",
        help="Output path (default: print to stdout)",
    ),
    provider_name: str = typer.Option(
        None,
        "--provider",
        "-p",
        help="LLM provider: openai or anthropic (default: LLM_PROVIDER)",
    ),
    models: List[str] = typer.Option(
        None,
        "--model",
        "-m",
        help="Model to try (repeat for a fallback chain)",
    ),
):
    """
    Generate a cover letter tailored to a job description.

    Runs a requirement-extraction pass first, then writes the letter.

    Examples:\n

        $ generate.py cover-letter job.txt -t "Data Engineer" -s "Python, SQL, Airflow"

        $ generate.py cover-letter job.txt -t "SRE" -s "Go, k8s" --company Acme -c 0.6 -o letter.md
    """
    request = CoverLetterRequest(
        job_description=_read_job_description(job_file),
        job_title=job_title,
        skills=skills,
        name=name,
        experience=experience,
        creativity=creativity,
        from_first_name=from_first_name,
        from_last_name=from_last_name,
        email=email,
        phone=phone,
        to_first_name=to_first_name,
        to_last_name=to_last_name,
        company=company,
        department=department,
    )
    setup_intake_logger(LOGS_PATH / f"cover_letter_{now()}", document_type="cover-letter")

    try:
        provider = get_provider(provider_name)
        result = generate_cover_letter(request, provider=provider, models=models)
    except GenerationError as e:
        _report_generation_error(e)
    except (ImportError, ValueError) as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if output is None:
        typer.echo(result.content)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(result.content + "\n", encoding="utf-8")
    typer.secho(f"\n✓ Cover letter saved to: {output}", fg=typer.colors.GREEN)
    typer.echo(f"  Model: {result.model}  Time: {result.time_s:.2f}s")


if __name__ == "__main__":
    app()
