"""
Resume and cover letter generation.

Both documents are produced from a pasted job description through an
LLMProvider. Candidate models are tried in order; a model that is rate
limited (or returns nothing) hands over to the next one, any other error
stops immediately.

Cover letters take two passes:
1. Requirement extraction (low temperature, JSON answer parsed leniently)
2. Letter generation at the requested creativity
"""

import math
import os
import time
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

from dotenv import load_dotenv

from jobsync.contexts.intake.exceptions import (
    EmptyGenerationError,
    GenerationError,
    MissingFieldError,
    RateLimitExceededError,
)
from jobsync.contexts.intake.logger import (
    _log_debug,
    _log_info,
    _log_warning,
    log_generation_result,
)
from jobsync.contexts.intake.prompts import (
    COVER_LETTER_SYSTEM_PROMPT,
    DEFAULT_TRIM,
    EXTRACTION_SYSTEM_PROMPT,
    RESUME_SYSTEM_PROMPT,
    SHORT_FIELD_TRIM,
    build_cover_letter_prompt,
    build_extraction_prompt,
    build_resume_prompt,
    format_candidate_info,
    format_contact_block,
    trim,
)
from jobsync.utils.llm import LLMProvider, get_provider, parse_object_response

load_dotenv()

RESUME_TEMPERATURE = 0.4
EXTRACTION_TEMPERATURE = 0.2
DEFAULT_CREATIVITY = 0.35
COVER_LETTER_MAX_TOKENS = 800

# Cheaper model first, stronger model as fallback
FALLBACK_MODELS = {
    "openai": ["gpt-4o-mini", "gpt-4o"],
    "anthropic": ["claude-3-5-haiku-latest", "claude-sonnet-4-20250514"],
}


@dataclass
class GenerationResult:
    """Result from generate_resume_markdown() or generate_cover_letter()."""

    content: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0
    time_s: float = 0.0


@dataclass
class RequirementExtraction:
    """
    First-pass analysis of a job description.

    Attributes:
        inferred_role: Role the JD is really hiring for
        key_requirements: Most important requirements
        mapping: (requirement, evidence) pairs linking the JD to the candidate
    """

    inferred_role: str
    key_requirements: List[str] = field(default_factory=list)
    mapping: List[Tuple[str, str]] = field(default_factory=list)


@dataclass
class CoverLetterRequest:
    """
    Inputs for a cover letter.

    job_description, job_title and skills are required; everything else is
    optional. skills may be a list or a comma-separated string. creativity
    (0-1) drives the letter temperature.
    """

    job_description: str
    job_title: str
    skills: Union[str, List[str]]
    name: str = ""
    experience: str = ""
    creativity: Union[float, str, None] = None
    # Sender
    from_first_name: str = ""
    from_last_name: str = ""
    email: str = ""
    phone: str = ""
    # Recipient
    to_first_name: str = ""
    to_last_name: str = ""
    company: str = ""
    department: str = ""

    def skills_text(self) -> str:
        if isinstance(self.skills, (list, tuple)):
            return ", ".join(str(skill) for skill in self.skills)
        return str(self.skills or "")

    def safe_name(self) -> str:
        """Applicant name, falling back to the sender name, then "Candidate"."""
        sender = " ".join(part for part in (self.from_first_name, self.from_last_name) if part)
        return (self.name or "").strip() or sender.strip() or "Candidate"

    def missing_fields(self) -> List[str]:
        missing = []
        if not (self.job_description or "").strip():
            missing.append("job_description")
        if not (self.job_title or "").strip():
            missing.append("job_title")
        if not self.skills_text().strip():
            missing.append("skills")
        return missing


def clamp_creativity(value: Union[float, str, None]) -> float:
    """
    Creativity score clamped to [0, 1].

    Unparseable values fall back to the default.

    Examples:
        >>> clamp_creativity(1.7)
        1.0
        >>> clamp_creativity("0.8")
        0.8
        >>> clamp_creativity("high")
        0.35
    """
    if value is None:
        return DEFAULT_CREATIVITY
    try:
        score = float(value)
    except (TypeError, ValueError):
        return DEFAULT_CREATIVITY
    if math.isnan(score):
        return DEFAULT_CREATIVITY
    return max(0.0, min(1.0, score))


def default_models(provider: LLMProvider) -> List[str]:
    """
    Models to try for a provider.

    LLM_MODELS (comma-separated) overrides the built-in fallback chain.
    """
    configured = os.getenv("LLM_MODELS")
    if configured:
        return [model.strip() for model in configured.split(",") if model.strip()]
    return list(FALLBACK_MODELS.get(provider._provider_prefix, [provider.model]))


def generate_with_fallback(
    provider: LLMProvider,
    system_prompt: str,
    user_prompt: str,
    temperature: float,
    models: Sequence[str],
    max_tokens: int = 2048,
) -> GenerationResult:
    """
    Run one prompt against each model in turn until one produces content.

    Args:
        provider: LLM provider (its model is switched per attempt)
        system_prompt: System prompt
        user_prompt: User prompt
        temperature: Sampling temperature
        models: Candidate models in order of preference
        max_tokens: Output token limit

    Returns:
        GenerationResult with trimmed content

    Raises:
        RateLimitExceededError: Every model was rate limited
        EmptyGenerationError: No model returned content
        GenerationError: A model failed for any other reason
    """
    rate_limit_error = None

    for model in models:
        provider.update_model(model)
        _log_debug(f"Calling {provider.name} (temperature={temperature})")
        try:
            response = provider.generate(
                system_prompt, user_prompt, temperature=temperature, max_tokens=max_tokens
            )
        except Exception as e:
            if provider.is_rate_limit_error(e):
                _log_warning(f"{provider.name} is rate limited, trying next model")
                rate_limit_error = e
                continue
            raise GenerationError(f"Generation failed: {e}", model=provider.name) from e

        content = (response.content or "").strip()
        if content:
            return GenerationResult(
                content=content,
                model=response.model,
                input_tokens=response.input_tokens,
                output_tokens=response.output_tokens,
            )
        _log_warning(f"{provider.name} returned no content, trying next model")

    if rate_limit_error is not None:
        raise RateLimitExceededError(models, original_error=rate_limit_error) from rate_limit_error
    raise EmptyGenerationError(models)


def generate_resume_markdown(
    job_description: str,
    provider: Optional[LLMProvider] = None,
    models: Optional[Sequence[str]] = None,
) -> GenerationResult:
    """
    Generate a one-page markdown resume for a job description.

    The content is the raw generated markdown; hand it to
    ResumeEditingSession.from_generated() for parsing and editing.

    Raises:
        MissingFieldError: Empty job description
        RateLimitExceededError, EmptyGenerationError, GenerationError
    """
    job_description = (job_description or "").strip()
    if not job_description:
        raise MissingFieldError(["job_description"])

    provider = provider or get_provider()
    models = list(models) if models else default_models(provider)

    start_time = time.time()
    _log_info(f"Generating resume ({len(job_description)} chars of job description)")
    result = generate_with_fallback(
        provider,
        RESUME_SYSTEM_PROMPT,
        build_resume_prompt(trim(job_description, DEFAULT_TRIM)),
        temperature=RESUME_TEMPERATURE,
        models=models,
    )
    result.time_s = time.time() - start_time

    log_generation_result("resume", result, result.time_s)
    return result


def parse_requirement_extraction(text: str, job_title: str) -> RequirementExtraction:
    """
    Read the extraction pass answer, tolerating prose around the JSON.

    Missing or malformed parts fall back to the user-provided job title and
    generic requirement guidance.
    """
    data = parse_object_response(text)

    inferred_role = data.get("inferredRole")
    if not isinstance(inferred_role, str) or not inferred_role.strip():
        inferred_role = trim(job_title, SHORT_FIELD_TRIM) or "Candidate"

    requirements = data.get("keyRequirements")
    if not isinstance(requirements, list):
        requirements = []

    mapping = []
    for entry in data.get("mapping") or []:
        if isinstance(entry, dict):
            mapping.append((str(entry.get("requirement", "")), str(entry.get("evidence", ""))))

    return RequirementExtraction(
        inferred_role=inferred_role.strip(),
        key_requirements=[str(item) for item in requirements if str(item).strip()],
        mapping=mapping,
    )


def generate_cover_letter(
    request: CoverLetterRequest,
    provider: Optional[LLMProvider] = None,
    models: Optional[Sequence[str]] = None,
) -> GenerationResult:
    """
    Generate a cover letter tailored to a job description.

    Raises:
        MissingFieldError: job_description, job_title or skills is empty
        RateLimitExceededError, EmptyGenerationError, GenerationError
    """
    missing = request.missing_fields()
    if missing:
        raise MissingFieldError(missing)

    provider = provider or get_provider()
    models = list(models) if models else default_models(provider)
    job_description = trim(request.job_description.strip(), DEFAULT_TRIM)
    name = request.safe_name()
    skills = request.skills_text()
    experience = request.experience or ""

    start_time = time.time()

    # Pass 1: requirement extraction
    _log_info("Extracting requirements from job description")
    extraction_result = generate_with_fallback(
        provider,
        EXTRACTION_SYSTEM_PROMPT,
        build_extraction_prompt(job_description, name, request.job_title, skills, experience),
        temperature=EXTRACTION_TEMPERATURE,
        models=models,
        max_tokens=COVER_LETTER_MAX_TOKENS,
    )
    extraction = parse_requirement_extraction(extraction_result.content, request.job_title)
    _log_debug(
        f"Inferred role: {extraction.inferred_role} "
        f"({len(extraction.key_requirements)} requirements, {len(extraction.mapping)} mappings)"
    )

    # Pass 2: the letter
    creativity = clamp_creativity(request.creativity)
    sender = format_contact_block(
        "Sender (From)",
        [
            ("First Name", request.from_first_name),
            ("Last Name", request.from_last_name),
            ("Email", request.email),
            ("Phone", request.phone),
        ],
    )
    recipient = format_contact_block(
        "Recipient (To)",
        [
            ("First Name", request.to_first_name),
            ("Last Name", request.to_last_name),
            ("Company", request.company),
            ("Department", request.department),
        ],
    )

    _log_info(f"Writing cover letter (creativity={creativity})")
    result = generate_with_fallback(
        provider,
        COVER_LETTER_SYSTEM_PROMPT,
        build_cover_letter_prompt(
            job_description=job_description,
            inferred_role=extraction.inferred_role,
            key_requirements=extraction.key_requirements,
            mapping=extraction.mapping,
            creativity=creativity,
            candidate_info=format_candidate_info(name, skills, experience),
            sender_block=sender,
            recipient_block=recipient,
        ),
        temperature=creativity,
        models=models,
        max_tokens=COVER_LETTER_MAX_TOKENS,
    )
    result.input_tokens += extraction_result.input_tokens
    result.output_tokens += extraction_result.output_tokens
    result.time_s = time.time() - start_time

    log_generation_result("cover-letter", result, result.time_s)
    return result
