"""
Templating Context

Responsibilities:
- Manages the structured resume model (profile, experience, education, free-text sections)
- Parses generated resume markdown into the structured model
- Composes canonical markdown back from the model
- Holds the editing session and its last-saved markdown
- Converts between markdown (.md) and structured YAML files

Owns: Resume structure representation, markdown ↔ structured data conversion
Never: Generates content or decides how the document is styled
"""

from jobsync.contexts.templating.converter import (
    ConversionResult,
    convert_resume,
    markdown_to_yaml,
    validate_roundtrip_conversion,
    yaml_to_markdown,
)
from jobsync.contexts.templating.markdown_composer import (
    compose_resume_markdown,
    normalize_dates_in_markdown,
    sanitize_markdown,
)
from jobsync.contexts.templating.markdown_parser import parse_resume_markdown
from jobsync.contexts.templating.resume_data_structure import (
    EducationItem,
    ExperienceItem,
    ProfileHeader,
    ResumeDocument,
)
from jobsync.contexts.templating.session import ResumeEditingSession

__all__ = [
    # Markdown round-trip
    "parse_resume_markdown",
    "compose_resume_markdown",
    "sanitize_markdown",
    "normalize_dates_in_markdown",
    # Structured model
    "ResumeDocument",
    "ProfileHeader",
    "ExperienceItem",
    "EducationItem",
    # Editing
    "ResumeEditingSession",
    # File conversion
    "markdown_to_yaml",
    "yaml_to_markdown",
    "validate_roundtrip_conversion",
    "convert_resume",
    "ConversionResult",
]
