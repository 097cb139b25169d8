"""
Intake context logger.

Provides logging interface for intake context with automatic [intake] prefix.
All intake modules should import from this module, not from utils.logger directly.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from jobsync.utils.logger import setup_logger as _setup_logger

load_dotenv()

CONTEXT_PREFIX = "[intake]"


def setup_intake_logger(log_dir: Path, document_type: str) -> Path:
    """
    Setup logger for a generation run.

    Args:
        log_dir: Directory for this generation session
        document_type: "resume" or "cover-letter"

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="intake",
        log_dir=log_dir,
        extra_provenance={
            "Document": document_type,
            "LLM provider": os.getenv("LLM_PROVIDER", "openai"),
        },
    )


# Wrapper functions with automatic [intake] prefix


def _log_info(message: str) -> None:
    """Log info message with [intake] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [intake] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [intake] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [intake] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [intake] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level intake-specific logging helpers


def log_generation_result(document_type: str, result, elapsed_time: float) -> None:
    """
    Log a finished generation.

    Args:
        document_type: "resume" or "cover-letter"
        result: GenerationResult
        elapsed_time: Time taken
    """
    _log_success(f"Generated {document_type} with {result.model} ({elapsed_time:.2f}s)")
    _log_debug(f"  Tokens: {result.input_tokens} in / {result.output_tokens} out")
    _log_debug(f"  Length: {len(result.content)} chars")
