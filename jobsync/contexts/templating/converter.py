"""
Markdown <-> YAML Converter

File-level conversion between resume markdown and the structured YAML form
of ResumeDocument, with roundtrip validation.

This module exports:
- Convenience functions: markdown_to_yaml, yaml_to_markdown
- Validation: compare_yaml_structured, validate_roundtrip_conversion
- Orchestration: convert_resume (logging, validation, output placement)
"""

import os
import shutil
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

from jobsync.contexts.templating.exceptions import InvalidResumeStructureError
from jobsync.contexts.templating.logger import (
    _log_debug,
    log_conversion_result,
    log_conversion_start,
    setup_templating_logger,
)
from jobsync.contexts.templating.markdown_composer import (
    compose_resume_markdown,
    normalize_dates_in_markdown,
    sanitize_markdown,
)
from jobsync.contexts.templating.markdown_parser import parse_resume_markdown
from jobsync.contexts.templating.resume_data_structure import ResumeDocument
from jobsync.utils.text_processing import get_meaningful_diff
from jobsync.utils.timestamp import now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

MARKDOWN_SUFFIXES = (".md", ".markdown")
YAML_SUFFIXES = (".yaml", ".yml")


# Result dataclasses for orchestration functions


@dataclass
class ConversionResult:
    """Result from the convert_resume() orchestration function."""

    success: bool
    input_path: Optional[Path] = None
    output_path: Optional[Path] = None
    error: Optional[str] = None
    time_s: float = 0.0
    log_dir: Optional[Path] = None
    # Validation results
    yaml_diffs: Optional[int] = None
    markdown_diffs: Optional[int] = None


@dataclass
class ConversionConfig:
    """Direction-specific configuration for conversion orchestration."""

    phase_name: str
    output_extension: str
    intermediate_suffix: str


def clean_markdown(markdown: str) -> str:
    """Fold date ranges and strip generator artifacts (the stored form of generated text)."""
    return sanitize_markdown(normalize_dates_in_markdown(markdown))


def markdown_to_yaml(markdown_path: Path, output_path: Path = None) -> Dict[str, Any]:
    """
    Convert resume markdown to the structured YAML form.

    Args:
        markdown_path: Path to markdown file
        output_path: Optional path to write YAML output

    Returns:
        Structured resume as dict (top-level "resume" key)
    """
    markdown = markdown_path.read_text(encoding="utf-8")
    yaml_dict = parse_resume_markdown(clean_markdown(markdown)).to_dict()

    if output_path:
        conf = OmegaConf.create(yaml_dict)
        OmegaConf.save(conf, output_path)

        # Strip trailing blank lines for consistency
        content = output_path.read_text(encoding="utf-8")
        output_path.write_text(content.rstrip() + "\n", encoding="utf-8")

    return yaml_dict


def yaml_to_markdown(yaml_path: Path, output_path: Path = None) -> str:
    """
    Convert structured YAML to canonical resume markdown.

    Args:
        yaml_path: Path to YAML file
        output_path: Optional path to write markdown output

    Returns:
        Composed and sanitized markdown

    Raises:
        InvalidResumeStructureError: If the YAML does not hold a structured resume
    """
    yaml_data = OmegaConf.load(yaml_path)
    yaml_dict = OmegaConf.to_container(yaml_data, resolve=True)

    if not isinstance(yaml_dict, dict):
        raise InvalidResumeStructureError(
            f"{yaml_path.name} must be a mapping with a 'resume' key at root level"
        )

    resume = ResumeDocument.from_dict(yaml_dict)
    markdown = sanitize_markdown(compose_resume_markdown(resume))

    if output_path:
        output_path.write_text(markdown, encoding="utf-8")

    return markdown


def compare_yaml_structured(yaml1_path: Path, yaml2_path: Path) -> tuple[list[str], int]:
    """
    Compare two YAML files using structured comparison.

    Uses OmegaConf to load both YAMLs and compare as dictionaries,
    ignoring formatting and key order differences. Each differing
    top-level resume field counts as one difference.

    Args:
        yaml1_path: Path to first YAML file
        yaml2_path: Path to second YAML file

    Returns:
        Tuple of (diff_lines, num_differences)
    """
    dict1 = OmegaConf.to_container(OmegaConf.load(yaml1_path))
    dict2 = OmegaConf.to_container(OmegaConf.load(yaml2_path))

    if dict1 == dict2:
        return [], 0

    resume1 = (dict1 or {}).get("resume") or {}
    resume2 = (dict2 or {}).get("resume") or {}
    differing = sorted(
        key for key in set(resume1) | set(resume2) if resume1.get(key) != resume2.get(key)
    )

    diff_lines = [
        "YAML structures differ",
        f"File 1: {yaml1_path.name}",
        f"File 2: {yaml2_path.name}",
    ]
    diff_lines.extend(f"Field differs: {key}" for key in differing)

    return diff_lines, max(1, len(differing))


def validate_roundtrip_conversion(
    input_file: Path, work_dir: Path, max_markdown_diffs: int, max_yaml_diffs: int
) -> Dict:
    """
    Validate roundtrip conversion fidelity (routing function).

    Automatically detects input type and routes to appropriate validation:
    - .md files: Markdown → YAML → Markdown (for parsing validation)
    - .yaml files: YAML → Markdown → YAML (for composition validation)

    Args:
        input_file: Path to input file (.md or .yaml)
        work_dir: Directory for intermediate files
        max_markdown_diffs: Maximum allowed markdown differences
        max_yaml_diffs: Maximum allowed YAML differences

    Returns:
        Dict with validation results (same structure for both directions)
    """
    suffix = input_file.suffix.lower()

    if suffix in MARKDOWN_SUFFIXES:
        return _validate_roundtrip_from_markdown(
            input_file, work_dir, max_markdown_diffs, max_yaml_diffs
        )
    elif suffix in YAML_SUFFIXES:
        return _validate_roundtrip_from_yaml(
            input_file, work_dir, max_markdown_diffs, max_yaml_diffs
        )
    else:
        return {
            "file": input_file.name,
            "markdown_roundtrip": {"success": False, "num_diffs": None},
            "yaml_roundtrip": {"success": False, "num_diffs": None},
            "validation_passed": False,
            "error": f"Unsupported file type: {suffix}. Must be .md or .yaml",
            "time_ms": 0.0,
        }


def _validate_roundtrip_from_markdown(
    md_file: Path, work_dir: Path, max_markdown_diffs: int, max_yaml_diffs: int
) -> Dict:
    """
    Validate Markdown → YAML → Markdown roundtrip conversion.

    Steps:
    1. Clean input markdown (normalize dates, sanitize)
    2. Parse markdown → YAML
    3. Compose YAML → markdown
    4. Compare markdown (cleaned input vs composed)
    5. Re-parse composed markdown → YAML
    6. Compare YAML (parsed vs re-parsed)
    """
    start_time = datetime.now()
    result = {
        "file": md_file.name,
        "markdown_roundtrip": {"success": False, "num_diffs": None},
        "yaml_roundtrip": {"success": False, "num_diffs": None},
        "validation_passed": False,
        "error": None,
        "time_ms": 0.0,
    }

    try:
        file_stem = md_file.stem
        work_dir.mkdir(exist_ok=True, parents=True)

        # Step 1: Clean input
        cleaned_input = work_dir / f"{file_stem}_cleaned.md"
        cleaned_input.write_text(clean_markdown(md_file.read_text(encoding="utf-8")), encoding="utf-8")

        # Step 2: Parse markdown → YAML
        parsed_yaml = work_dir / f"{file_stem}_parsed.yaml"
        try:
            markdown_to_yaml(cleaned_input, parsed_yaml)
        except Exception as e:
            result["error"] = f"Parse error: {str(e)}"
            return result

        # Step 3: Compose YAML → markdown
        composed_md = work_dir / f"{file_stem}_composed.md"
        try:
            yaml_to_markdown(parsed_yaml, composed_md)
        except Exception as e:
            result["error"] = f"Composition error: {str(e)}"
            return result

        # Step 4: Markdown Roundtrip Comparison
        md_diff_lines, md_num_diffs = get_meaningful_diff(cleaned_input, composed_md)

        if md_num_diffs > 0:
            md_diff_file = work_dir / "markdown_roundtrip.diff"
            md_diff_file.write_text("\n".join(md_diff_lines), encoding="utf-8")

        result["markdown_roundtrip"] = {
            "success": (md_num_diffs <= max_markdown_diffs),
            "num_diffs": md_num_diffs,
        }

        # Step 5: Re-parse composed markdown for YAML roundtrip
        reparsed_yaml = work_dir / f"{file_stem}_reparsed.yaml"
        try:
            markdown_to_yaml(composed_md, reparsed_yaml)
        except Exception as e:
            result["error"] = f"Re-parse error: {str(e)}"
            return result

        # Step 6: YAML Roundtrip Comparison
        yaml_diff_lines, yaml_num_diffs = compare_yaml_structured(parsed_yaml, reparsed_yaml)

        if yaml_num_diffs > 0:
            yaml_diff_file = work_dir / "yaml_roundtrip.diff"
            yaml_diff_file.write_text("\n".join(yaml_diff_lines), encoding="utf-8")

        result["yaml_roundtrip"] = {
            "success": (yaml_num_diffs <= max_yaml_diffs),
            "num_diffs": yaml_num_diffs,
        }

        result["validation_passed"] = (
            result["markdown_roundtrip"]["success"] and result["yaml_roundtrip"]["success"]
        )

    except Exception as e:
        result["error"] = f"Unexpected error: {str(e)}"

    finally:
        end_time = datetime.now()
        result["time_ms"] = (end_time - start_time).total_seconds() * 1000

    return result


def _validate_roundtrip_from_yaml(
    yaml_file: Path, work_dir: Path, max_markdown_diffs: int, max_yaml_diffs: int
) -> Dict:
    """
    Validate YAML → Markdown → YAML roundtrip conversion.

    Steps:
    1. Compose YAML → markdown
    2. Parse markdown → YAML
    3. Compare YAML (original vs re-parsed)
    4. Re-compose re-parsed YAML → markdown
    5. Compare markdown (composed vs re-composed)
    """
    start_time = datetime.now()
    result = {
        "file": yaml_file.name,
        "yaml_roundtrip": {"success": False, "num_diffs": None},
        "markdown_roundtrip": {"success": False, "num_diffs": None},
        "validation_passed": False,
        "error": None,
        "time_ms": 0.0,
    }

    try:
        file_stem = yaml_file.stem
        work_dir.mkdir(exist_ok=True, parents=True)

        # Step 1: Compose YAML → markdown
        composed_md = work_dir / f"{file_stem}_composed.md"
        try:
            yaml_to_markdown(yaml_file, composed_md)
        except Exception as e:
            result["error"] = f"Composition error: {str(e)}"
            return result

        # Step 2: Parse markdown → YAML
        reparsed_yaml = work_dir / f"{file_stem}_reparsed.yaml"
        try:
            markdown_to_yaml(composed_md, reparsed_yaml)
        except Exception as e:
            result["error"] = f"Parse error: {str(e)}"
            return result

        # Step 3: YAML Roundtrip Comparison (original vs re-parsed)
        yaml_diff_lines, yaml_num_diffs = compare_yaml_structured(yaml_file, reparsed_yaml)

        if yaml_num_diffs > 0:
            yaml_diff_file = work_dir / "yaml_roundtrip.diff"
            yaml_diff_file.write_text("\n".join(yaml_diff_lines), encoding="utf-8")

        result["yaml_roundtrip"] = {
            "success": (yaml_num_diffs <= max_yaml_diffs),
            "num_diffs": yaml_num_diffs,
        }

        # Step 4: Re-compose re-parsed YAML → markdown
        recomposed_md = work_dir / f"{file_stem}_recomposed.md"
        try:
            yaml_to_markdown(reparsed_yaml, recomposed_md)
        except Exception as e:
            result["error"] = f"Re-composition error: {str(e)}"
            return result

        # Step 5: Markdown Roundtrip Comparison (composed vs re-composed)
        md_diff_lines, md_num_diffs = get_meaningful_diff(composed_md, recomposed_md)

        if md_num_diffs > 0:
            md_diff_file = work_dir / "markdown_roundtrip.diff"
            md_diff_file.write_text("\n".join(md_diff_lines), encoding="utf-8")

        result["markdown_roundtrip"] = {
            "success": (md_num_diffs <= max_markdown_diffs),
            "num_diffs": md_num_diffs,
        }

        result["validation_passed"] = (
            result["yaml_roundtrip"]["success"] and result["markdown_roundtrip"]["success"]
        )

    except Exception as e:
        result["error"] = f"Unexpected error: {str(e)}"

    finally:
        end_time = datetime.now()
        result["time_ms"] = (end_time - start_time).total_seconds() * 1000

    return result


PARSE_CONFIG = ConversionConfig(
    phase_name="parse",
    output_extension=".yaml",
    intermediate_suffix="_parsed",
)

COMPOSE_CONFIG = ConversionConfig(
    phase_name="compose",
    output_extension=".md",
    intermediate_suffix="_composed",
)


def _config_for(input_path: Path) -> ConversionConfig:
    suffix = input_path.suffix.lower()
    if suffix in MARKDOWN_SUFFIXES:
        return PARSE_CONFIG
    if suffix in YAML_SUFFIXES:
        return COMPOSE_CONFIG
    raise ValueError(f"Unsupported file type: {suffix}. Must be .md or .yaml")


def convert_resume(
    input_path: Path,
    output_dir: Optional[Path] = None,
    max_markdown_diffs: int = 6,
    max_yaml_diffs: int = 0,
    allow_overwrite: bool = True,
) -> ConversionResult:
    """
    Convert a resume file with roundtrip validation and logging.

    Direction follows the input extension: markdown is parsed to YAML, YAML
    is composed to markdown. Always runs roundtrip validation. Use
    markdown_to_yaml()/yaml_to_markdown() directly to skip validation.

    Handles:
    1. Setup logging
    2. Run roundtrip validation
    3. If validation passes: copy output to final location
    4. Clean up artifacts on success, keep on failure

    Args:
        input_path: Markdown or YAML resume file
        output_dir: Directory for output. If None, uses the input's directory.
        max_markdown_diffs: Maximum markdown diffs allowed for validation (default: 6)
        max_yaml_diffs: Maximum YAML diffs allowed for validation (default: 0)
        allow_overwrite: Allow overwriting existing output file (default: True)

    Returns:
        ConversionResult with success status, paths, validation info, and timing

    Raises:
        ValueError: Unsupported input type, or output exists and overwrite is off
    """
    config = _config_for(input_path)
    resume_name = input_path.stem

    output_dir = output_dir or input_path.parent
    final_output_path = output_dir / f"{resume_name}{config.output_extension}"
    if final_output_path.resolve() == input_path.resolve():
        raise ValueError(f"Output would overwrite input: {input_path}")
    if not allow_overwrite and final_output_path.exists():
        raise ValueError(f"Output file already exists: {final_output_path}")

    start_time = time.time()

    # Setup logging
    log_dir = LOGS_PATH / f"{config.phase_name}_{now()}"
    log_file = setup_templating_logger(log_dir, phase=config.phase_name)
    log_conversion_start(resume_name, input_path, log_file, config.phase_name)

    output_dir.mkdir(parents=True, exist_ok=True)
    output_filename = f"{resume_name}{config.intermediate_suffix}{config.output_extension}"

    try:
        validation = validate_roundtrip_conversion(
            input_path, log_dir, max_markdown_diffs, max_yaml_diffs
        )
        elapsed = time.time() - start_time
        result = ConversionResult(
            success=validation["validation_passed"],
            error=validation["error"],
            input_path=input_path,
            time_s=elapsed,
            log_dir=log_dir,
            yaml_diffs=validation["yaml_roundtrip"]["num_diffs"],
            markdown_diffs=validation["markdown_roundtrip"]["num_diffs"],
        )
    except Exception as e:
        elapsed = time.time() - start_time
        result = ConversionResult(
            success=False,
            error=str(e),
            input_path=input_path,
            time_s=elapsed,
            log_dir=log_dir,
        )

    if result.success:
        shutil.copy(log_dir / output_filename, final_output_path)

        # Clean up intermediate validation artifacts but keep log
        for file in log_dir.iterdir():
            if file != log_file:
                file.unlink()
        _log_debug("Cleaned up validation artifacts.")

        result.output_path = final_output_path
    else:
        _log_debug("Keeping artifacts for debugging.")
        result.error = result.error or "Roundtrip validation failed"

    log_conversion_result(resume_name, result, elapsed, config.phase_name)
    return result
