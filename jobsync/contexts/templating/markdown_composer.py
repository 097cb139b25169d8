"""
ResumeDocument -> Markdown Composer

Builds canonical resume markdown from the structured model. The output is the
same narrow markdown subset the parser reads, so parse(compose(doc)) gives
back every field the composer writes.

Also hosts the two text passes applied to markdown before it is stored:
sanitize_markdown() (strip generator artifacts) and
normalize_dates_in_markdown() (fold date ranges to canonical form).
"""

import re
from typing import List, Optional

from jobsync.contexts.templating.markdown_patterns import (
    Placeholders,
    SanitizePatterns,
    SectionLabels,
)
from jobsync.contexts.templating.resume_data_structure import (
    EducationItem,
    ExperienceItem,
    ResumeDocument,
)
from jobsync.utils.dates import normalize_range
from jobsync.utils.text_processing import set_max_consecutive_blank_lines

CONTACT_SEPARATOR = " • "
FIELD_SEPARATOR = " — "


def _optional_section(title: str, body: str) -> str:
    """Section block, or "" when the body is blank."""
    if not body or not body.strip():
        return ""
    return f"\n**{title}**\n{body.strip()}\n"


def format_skills(skills: str) -> str:
    """
    Skills body as markdown.

    Multi-line values are assumed to be formatted already; a single line is
    split on commas into bullets.

    Example:
        >>> format_skills("Python, SQL")
        '- Python\\n- SQL'
    """
    if not skills:
        return ""
    if "\n" in skills:
        return skills
    return "\n".join(f"- {skill}" for skill in re.split(r",\s*", skills) if skill)


def _format_item(
    organization: str,
    role: str,
    from_date: str,
    to_date: str,
    location: Optional[str],
    description: str,
) -> str:
    date_range = f"{from_date or Placeholders.DATE} - {to_date or Placeholders.DATE}"
    header = f"- {organization}{FIELD_SEPARATOR}{role} ({date_range})"
    if location:
        header += f"{FIELD_SEPARATOR}{location}"

    bullets = [f"  - {line}" for line in re.split(r"\r?\n", description or "") if line]
    return "\n".join([header, *bullets])


def format_experience_item(item: ExperienceItem) -> str:
    """
    Experience entry as an item header plus indented bullets.

    Example:
        >>> format_experience_item(ExperienceItem("Acme", "Engineer", "Jan 2022", "Present"))
        '- Acme — Engineer (Jan 2022 - Present)'
    """
    return _format_item(
        item.company or Placeholders.COMPANY,
        item.position or Placeholders.POSITION,
        item.from_date,
        item.to_date,
        item.location,
        item.description,
    )


def format_education_item(item: EducationItem) -> str:
    """Education entry, same shape as experience entries."""
    return _format_item(
        item.institution or Placeholders.INSTITUTION,
        item.field_of_study or Placeholders.FIELD_OF_STUDY,
        item.from_date,
        item.to_date,
        item.location,
        item.description,
    )


def compose_resume_markdown(resume: ResumeDocument) -> str:
    """
    Compose canonical markdown from a ResumeDocument.

    The identity header is always written (with placeholders for missing
    values). Every other section is written only when its body is
    non-empty. Runs of blank lines are collapsed to one.

    Args:
        resume: Structured resume

    Returns:
        Markdown ending with a single newline
    """
    profile = resume.profile
    experience = "\n".join(format_experience_item(item) for item in resume.experience)
    education = "\n".join(format_education_item(item) for item in resume.education)

    blocks: List[str] = [
        f"# {profile.name or Placeholders.NAME}",
        f"_**{profile.title or Placeholders.TITLE}**_  ",
        CONTACT_SEPARATOR.join([
            profile.location or Placeholders.LOCATION,
            profile.email or Placeholders.EMAIL,
            profile.socials or Placeholders.SOCIALS,
        ]),
        _optional_section(SectionLabels.SUMMARY, resume.summary),
        _optional_section(SectionLabels.EXPERIENCE, experience),
        _optional_section(SectionLabels.EDUCATION, education),
        _optional_section(SectionLabels.SKILLS, format_skills(resume.skills)),
        _optional_section(SectionLabels.CERTIFICATIONS, resume.certifications),
        _optional_section(SectionLabels.PROJECTS, resume.projects),
        _optional_section(SectionLabels.LANGUAGES, resume.languages),
    ]

    markdown = "\n".join(block for block in blocks if block)
    return set_max_consecutive_blank_lines(markdown, max_consecutive=1).strip() + "\n"


def sanitize_markdown(markdown: str) -> str:
    """
    Strip generator artifacts from resume markdown.

    - Emphasis underscores are removed. Underscores inside a word
      (jane_doe@x.com) are kept.
    - "--" becomes " | "
    - Qualifiers such as "(optional)" or "(Native)" are removed
    - Any parenthetical inside a standalone bold heading is removed

    Example:
        >>> sanitize_markdown("**Languages (optional)**\\nEnglish (Native)")
        '**Languages**\\nEnglish'
    """
    text = re.sub(SanitizePatterns.EMPHASIS_UNDERSCORE, "", markdown or "")
    text = re.sub(SanitizePatterns.DOUBLE_HYPHEN, " | ", text)
    text = re.sub(SanitizePatterns.QUALIFIER, "", text, flags=re.IGNORECASE)
    text = re.sub(
        SanitizePatterns.HEADING_PARENTHETICAL,
        lambda m: f"{m.group(1)}**{m.group(2).strip()}**{m.group(3)}",
        text,
        flags=re.MULTILINE,
    )
    return text


def normalize_dates_in_markdown(markdown: str) -> str:
    """
    Rewrite parenthesized date ranges into canonical form.

    Groups whose contents yield nothing are left untouched. A group without
    an end date becomes "(from)".

    Example:
        >>> normalize_dates_in_markdown("Engineer (2022-06 – 2023-08)")
        'Engineer (Jun 2022 - Aug 2023)'
    """
    def _rewrite(match: re.Match) -> str:
        dates = normalize_range(match.group(1))
        if not dates.from_date and not dates.to_date:
            return match.group(0)
        if dates.to_date:
            return f"({dates.from_date} - {dates.to_date})"
        return f"({dates.from_date})"

    return re.sub(SanitizePatterns.PARENTHESIZED, _rewrite, markdown or "")
