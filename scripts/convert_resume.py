#!/usr/bin/env python3
"""
Command-line interface for resume markdown <-> YAML conversion and printing.

Subcommands:
- parse: Convert resume markdown to structured YAML with roundtrip validation
- compose: Convert structured YAML to canonical markdown with roundtrip validation
- render: Write a standalone print-ready HTML document from markdown
- roundtrip: Run roundtrip validation only and report the diff counts
- sanitize: Normalize dates and strip generator artifacts from markdown
"""

import os
from pathlib import Path

import typer
from dotenv import load_dotenv

from jobsync.contexts.rendering import write_print_document
from jobsync.contexts.rendering.logger import setup_rendering_logger
from jobsync.contexts.templating import convert_resume, validate_roundtrip_conversion
from jobsync.contexts.templating.converter import clean_markdown
from jobsync.utils.timestamp import now

load_dotenv()
PROJECT_ROOT = Path(os.getenv("PROJECT_ROOT", "."))
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))


def display_path(path: Path) -> str:
    """Return path relative to PROJECT_ROOT for cleaner display."""
    try:
        return str(path.resolve().relative_to(PROJECT_ROOT.resolve()))
    except ValueError:
        return str(path)


# Validation thresholds
DEFAULT_MAX_MARKDOWN_DIFFS = 6
DEFAULT_MAX_YAML_DIFFS = 0

app = typer.Typer(
    add_completion=False,
    help="Convert resume markdown to structured YAML and print-ready documents",
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def print_roundtrip_validation_results(markdown_diffs, yaml_diffs, max_markdown_diffs, max_yaml_diffs):
    """Helper to print roundtrip validation results."""

    md_status = (
        "?" if markdown_diffs is None else "✓" if markdown_diffs <= max_markdown_diffs else "✗"
    )
    md_info = "diff info unavailable" if markdown_diffs is None else f"{markdown_diffs} diffs"
    yaml_status = "?" if yaml_diffs is None else "✓" if yaml_diffs <= max_yaml_diffs else "✗"
    yaml_info = "diff info unavailable" if yaml_diffs is None else f"{yaml_diffs} diffs"

    typer.echo(f"  Markdown roundtrip: {md_status} ({md_info})")
    typer.echo(f"  YAML     roundtrip: {yaml_status} ({yaml_info})")


def _run_conversion(
    input_file: Path,
    expected_suffixes: tuple,
    label: str,
    output_dir: Path,
    max_markdown_diffs: int,
    max_yaml_diffs: int,
    no_overwrite: bool,
):
    if input_file.suffix.lower() not in expected_suffixes:
        typer.secho(
            f"Error: File must have {' or '.join(expected_suffixes)} extension: {input_file}",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1)

    typer.secho(f"\n{label}: {input_file.name}\n", fg=typer.colors.BLUE, bold=True)

    try:
        result = convert_resume(
            input_file,
            output_dir=output_dir,
            max_markdown_diffs=max_markdown_diffs,
            max_yaml_diffs=max_yaml_diffs,
            allow_overwrite=not no_overwrite,
        )
    except ValueError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if result.success:
        typer.secho(f"\n✓ {label} succeeded", fg=typer.colors.GREEN)
        typer.echo(f"  Time: {result.time_s:.2f}s")
        typer.echo(f"  Output: {display_path(result.output_path)}")
    else:
        typer.secho(f"\n✗ {label} failed", fg=typer.colors.RED, err=True)
        if result.error:
            typer.secho(f"  Error: {result.error}", err=True)
        if result.log_dir:
            typer.echo(f"  Artifacts saved to: {display_path(result.log_dir)}")

    print_roundtrip_validation_results(
        result.markdown_diffs, result.yaml_diffs, max_markdown_diffs, max_yaml_diffs
    )

    if result.log_dir:
        typer.echo(f"  Log: {display_path(result.log_dir / 'template.log')}")
    typer.echo("")

    raise typer.Exit(code=0 if result.success else 1)


@app.command("parse")
def parse_command(
    markdown_file: Path = typer.Argument(
        ...,
        help="Path to resume markdown file",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    output_dir: Path = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Directory for the YAML output (default: next to the input)",
    ),
    max_markdown_diffs: int = typer.Option(
        DEFAULT_MAX_MARKDOWN_DIFFS,
        "--max-markdown-diffs",
        "-m",
        help="Maximum markdown differences allowed for validation",
        min=0,
    ),
    max_yaml_diffs: int = typer.Option(
        DEFAULT_MAX_YAML_DIFFS,
        "--max-yaml-diffs",
        "-y",
        help="Maximum YAML differences allowed for validation",
        min=0,
    ),
    no_overwrite: bool = typer.Option(
        False,
        "--no-overwrite",
        help="Prevent overwriting existing output files",
    ),
):
    """
    Parse resume markdown to structured YAML with roundtrip validation.

    Validates via Markdown → YAML → Markdown roundtrip testing.
    On failure, artifacts are kept in outs/logs/parse_TIMESTAMP/.

    Examples:\n

        $ convert_resume.py parse generated.md

        $ convert_resume.py parse generated.md -m 0 -y 0   # Strict validation
    """
    _run_conversion(
        markdown_file,
        (".md", ".markdown"),
        "Parsing YAML from markdown",
        output_dir,
        max_markdown_diffs,
        max_yaml_diffs,
        no_overwrite,
    )


@app.command("compose")
def compose_command(
    yaml_file: Path = typer.Argument(
        ...,
        help="Path to structured resume .yaml file",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    output_dir: Path = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Directory for the markdown output (default: next to the input)",
    ),
    max_markdown_diffs: int = typer.Option(
        DEFAULT_MAX_MARKDOWN_DIFFS,
        "--max-markdown-diffs",
        "-m",
        help="Maximum markdown differences allowed for validation",
        min=0,
    ),
    max_yaml_diffs: int = typer.Option(
        DEFAULT_MAX_YAML_DIFFS,
        "--max-yaml-diffs",
        "-y",
        help="Maximum YAML differences allowed for validation",
        min=0,
    ),
    no_overwrite: bool = typer.Option(
        False,
        "--no-overwrite",
        help="Prevent overwriting existing output files",
    ),
):
    """
    Compose canonical markdown from a structured YAML resume.

    Validates via YAML → Markdown → YAML roundtrip testing.

    Examples:\n

        $ convert_resume.py compose resume.yaml

        $ convert_resume.py compose resume.yaml -o exports/
    """
    _run_conversion(
        yaml_file,
        (".yaml", ".yml"),
        "Composing markdown from YAML",
        output_dir,
        max_markdown_diffs,
        max_yaml_diffs,
        no_overwrite,
    )


@app.command("render")
def render_command(
    markdown_file: Path = typer.Argument(
        ...,
        help="Path to resume markdown file",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    output: Path = typer.Option(
        None,
        "--output",
        "-o",
        help="Output .html path (default: next to the input)",
    ),
    layout: Path = typer.Option(
        None,
        "--layout",
        "-l",
        help="Print layout YAML (default: PRINT_LAYOUT_PATH or the packaged layout)",
        exists=True,
        dir_okay=False,
    ),
    raw: bool = typer.Option(
        False,
        "--raw",
        help="Render the file as-is, without date normalization and sanitizing",
    ),
):
    """
    Write a standalone print-ready HTML document.

    Open the result in a browser and print to PDF.

    Examples:\n

        $ convert_resume.py render resume.md

        $ convert_resume.py render resume.md -o out/resume.html -l letter.yaml
    """
    output_path = output or markdown_file.with_suffix(".html")
    log_file = setup_rendering_logger(LOGS_PATH / f"render_{now()}")

    try:
        markdown = markdown_file.read_text(encoding="utf-8")
        if not raw:
            markdown = clean_markdown(markdown)
        write_print_document(markdown, output_path, layout=layout, document_name=markdown_file.stem)
    except Exception as e:
        typer.secho(f"\n✗ Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.secho(f"\n✓ Print document saved to: {display_path(output_path)}", fg=typer.colors.GREEN)
    typer.echo(f"  Log: {display_path(log_file)}")


@app.command("roundtrip")
def roundtrip_command(
    input_file: Path = typer.Argument(
        ...,
        help="Path to .md or .yaml resume file",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    max_markdown_diffs: int = typer.Option(
        DEFAULT_MAX_MARKDOWN_DIFFS,
        "--max-markdown-diffs",
        "-m",
        help="Maximum markdown differences allowed",
        min=0,
    ),
    max_yaml_diffs: int = typer.Option(
        DEFAULT_MAX_YAML_DIFFS,
        "--max-yaml-diffs",
        "-y",
        help="Maximum YAML differences allowed",
        min=0,
    ),
):
    """
    Run roundtrip validation without writing any output.

    Intermediate files and diffs are kept in outs/logs/roundtrip_TIMESTAMP/.

    Examples:\n

        $ convert_resume.py roundtrip generated.md

        $ convert_resume.py roundtrip resume.yaml -m 0
    """
    work_dir = LOGS_PATH / f"roundtrip_{now()}"
    typer.secho(f"\nRoundtrip: {input_file.name}\n", fg=typer.colors.BLUE, bold=True)

    result = validate_roundtrip_conversion(input_file, work_dir, max_markdown_diffs, max_yaml_diffs)

    if result["error"]:
        typer.secho(f"✗ Error: {result['error']}", fg=typer.colors.RED, err=True)
    elif result["validation_passed"]:
        typer.secho("✓ Roundtrip validation passed", fg=typer.colors.GREEN)
    else:
        typer.secho("✗ Roundtrip validation failed", fg=typer.colors.RED, err=True)

    print_roundtrip_validation_results(
        result["markdown_roundtrip"]["num_diffs"],
        result["yaml_roundtrip"]["num_diffs"],
        max_markdown_diffs,
        max_yaml_diffs,
    )
    typer.echo(f"  Time: {result['time_ms']:.0f}ms")
    typer.echo(f"  Artifacts: {display_path(work_dir)}\n")

    raise typer.Exit(code=0 if result["validation_passed"] else 1)


@app.command("sanitize")
def sanitize_command(
    markdown_file: Path = typer.Argument(
        ...,
        help="Path to resume markdown file",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    output: Path = typer.Option(
        None,
        "--output",
        "-o",
        help="Output path (if not specified, modifies in-place)",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Print the cleaned markdown without writing it",
    ),
):
    """
    Normalize date ranges and strip generator artifacts.

    Removes emphasis underscores, "(optional)"-style qualifiers and heading
    parentheticals, and rewrites dates as "Mon YYYY".

    Examples:\n

        $ convert_resume.py sanitize generated.md                   # Clean in-place

        $ convert_resume.py sanitize generated.md -o cleaned.md     # Save to new file

        $ convert_resume.py sanitize generated.md --dry-run         # Preview
    """
    original = markdown_file.read_text(encoding="utf-8")
    cleaned = clean_markdown(original)

    if dry_run:
        typer.echo(cleaned)
        return

    output_path = output or markdown_file
    output_path.write_text(cleaned, encoding="utf-8")

    changed = sum(1 for a, b in zip(original.splitlines(), cleaned.splitlines()) if a != b)
    typer.secho(
        f"\n✓ Sanitized markdown saved to: {display_path(output_path)} ({changed} lines changed)",
        fg=typer.colors.GREEN,
    )


if __name__ == "__main__":
    app()
