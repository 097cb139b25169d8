"""
Intake Context

Responsibilities:
- Takes a pasted job description (plus optional candidate and contact details)
- Builds the generation prompts
- Calls the LLM provider with model fallback and returns the generated text

Owns: Prompts, generation requests, generation errors
Never: Parses or edits the generated resume (see templating)
"""

from jobsync.contexts.intake.exceptions import (
    EmptyGenerationError,
    GenerationError,
    MissingFieldError,
    RateLimitExceededError,
)
from jobsync.contexts.intake.generation import (
    CoverLetterRequest,
    GenerationResult,
    RequirementExtraction,
    clamp_creativity,
    generate_cover_letter,
    generate_resume_markdown,
)

__all__ = [
    "generate_resume_markdown",
    "generate_cover_letter",
    "CoverLetterRequest",
    "GenerationResult",
    "RequirementExtraction",
    "clamp_creativity",
    # Errors
    "GenerationError",
    "MissingFieldError",
    "RateLimitExceededError",
    "EmptyGenerationError",
]
