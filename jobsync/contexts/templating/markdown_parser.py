"""
Markdown -> ResumeDocument Parser

Best-effort line scanner for the loosely structured markdown a text
generator produces when asked for a resume. The input shape is narrow but
unreliable, so every extractor returns an empty/default value on no-match
and parse_resume_markdown() as a whole never raises.

Expected shape (what the generator is instructed to produce):

    # Jane Doe
    _**Software Engineer**_
    San Francisco • jane@x.com • linkedin.com/in/jane

    **Summary**
    ...
    **Experience**
    - Acme — Engineer (2022-01 – Present) — Remote
      - Shipped X
"""

import re
from typing import List, Optional, Tuple

from jobsync.contexts.templating.logger import _log_debug
from jobsync.contexts.templating.markdown_patterns import (
    HeaderPatterns,
    ItemPatterns,
    Placeholders,
    SectionLabels,
)
from jobsync.contexts.templating.resume_data_structure import (
    EducationItem,
    ExperienceItem,
    ProfileHeader,
    ResumeDocument,
)
from jobsync.contexts.templating.section_extractor import (
    find_section,
    heading_title,
    section_text,
)
from jobsync.utils.dates import normalize_range
from jobsync.utils.text_processing import split_top_level


# ---------------------------------------------------------------------------
# Identity header
# ---------------------------------------------------------------------------


def _find_name(lines: List[str]) -> Tuple[str, int]:
    """First "# " line -> (name, line index); ("", -1) if absent."""
    for idx, line in enumerate(lines):
        stripped = line.strip()
        if stripped.startswith("# "):
            return re.sub(HeaderPatterns.NAME_LINE, "", stripped).strip(), idx
    return "", -1


def _find_contact_line(lines: List[str]) -> Tuple[str, int]:
    """First non-empty line carrying a contact separator -> (line, index)."""
    for idx, line in enumerate(lines):
        stripped = line.strip()
        if stripped and any(marker in stripped for marker in HeaderPatterns.CONTACT_MARKERS):
            return stripped, idx
    return "", -1


def _find_title(lines: List[str], name_idx: int, contact_idx: int) -> str:
    """
    Title from the underscore-wrapped line.

    Sanitized documents have lost their underscores, leaving "**Title**"
    between the name and contact lines; that line is used as a fallback.
    """
    for line in lines:
        stripped = line.strip()
        if re.match(HeaderPatterns.TITLE_LINE, stripped):
            title = re.sub(r"^_+", "", stripped)
            title = re.sub(r"_+$", "", title)
            title = re.sub(r"^\*\*|\*\*$", "", title)
            return title.strip()

    if contact_idx > name_idx:
        for line in lines[name_idx + 1:contact_idx]:
            title = heading_title(line)
            if title is not None:
                return title
    return ""


def parse_contact_line(contact: str) -> Tuple[str, str, str]:
    """
    Split a contact line into (location, email, socials).

    The first token containing "@" is the email; the first other token is
    the location; every remaining non-email token is joined into socials.
    Composer placeholders such as "[Email]" fill their slot with nothing.

    Example:
        >>> parse_contact_line("San Francisco • jane@x.com • linkedin.com/in/jane")
        ('San Francisco', 'jane@x.com', 'linkedin.com/in/jane')
    """
    location = ""
    email = ""
    socials = []
    location_seen = False

    for token in re.split(HeaderPatterns.CONTACT_SPLIT, contact):
        value = token.strip()
        if not value or value in (Placeholders.EMAIL, Placeholders.SOCIALS):
            continue
        if value == Placeholders.LOCATION:
            location_seen = True
        elif "@" in value:
            if not email:
                email = value
        elif not location_seen:
            location = value
            location_seen = True
        else:
            socials.append(value)

    return location, email, ", ".join(socials)


def parse_profile(lines: List[str]) -> ProfileHeader:
    """Extract the identity header from document lines."""
    name, name_idx = _find_name(lines)
    contact, contact_idx = _find_contact_line(lines)
    title = _find_title(lines, name_idx, contact_idx)
    location, email, socials = parse_contact_line(contact) if contact else ("", "", "")

    if not name:
        _log_debug("No '# ' name line found")
    if not contact:
        _log_debug("No contact line found")

    return ProfileHeader(name=name, title=title, location=location, email=email, socials=socials)


# ---------------------------------------------------------------------------
# Itemized sections
# ---------------------------------------------------------------------------


def parse_item_header(header: str) -> Tuple[str, str, str, str, Optional[str]]:
    """
    Split an item header into (organization, role, from, to, location).

    The first segment after the organization that ends in a parenthesized
    group is the role plus its date range; failing that, the first segment
    holding one. The first segment is the organization (company or
    institution) and the last segment after the role is the location.
    Without parentheses segments are read by position: organization, role,
    location.

    Example:
        >>> parse_item_header("Acme — Engineer (2022-01 – Present) — Remote")
        ('Acme', 'Engineer', 'Jan 2022', 'Present', 'Remote')
    """
    parts = split_top_level(header)
    organization = ""
    role = ""
    from_date = ""
    to_date = ""
    location = None

    # Organizations may carry their own parentheses, e.g. "Acme (UK)"
    role_idx = next(
        (
            idx
            for idx, part in enumerate(parts)
            if idx > 0 and re.search(ItemPatterns.ENDS_WITH_PARENTHETICAL, part)
        ),
        -1,
    )
    if role_idx < 0:
        role_idx = next(
            (idx for idx, part in enumerate(parts) if re.search(ItemPatterns.HAS_PARENTHETICAL, part)),
            -1,
        )

    if role_idx >= 0:
        match = re.match(ItemPatterns.ROLE_WITH_RANGE, parts[role_idx])
        if match:
            role = match.group(1).strip()
            dates = normalize_range(match.group(2))
            from_date, to_date = dates.from_date, dates.to_date
        else:
            role = parts[role_idx].strip()
        # Role segment first means no organization was given
        organization = parts[0] if role_idx > 0 else ""
        if len(parts) > role_idx + 1:
            location = parts[-1]
    else:
        organization = parts[0] if parts else ""
        role = parts[1] if len(parts) > 1 else ""
        if len(parts) > 2:
            location = parts[2]

    return organization, role, from_date, to_date, location


def _scan_items(body: List[str]) -> List[Tuple[str, List[str]]]:
    """
    Group section body lines into (header, bullets) pairs.

    An unindented "- " line opens an item; indented bullet lines attach to
    the open item. Anything else is ignored.
    """
    items = []
    for raw in body:
        line = raw.rstrip()
        if not line.strip():
            continue
        if re.match(ItemPatterns.ITEM_START, line):
            items.append((re.sub(ItemPatterns.ITEM_START, "", line), []))
        elif items and re.match(ItemPatterns.ITEM_BULLET, line):
            items[-1][1].append(re.sub(ItemPatterns.ITEM_BULLET, "", line).strip())
    return items


def parse_experience(lines: List[str]) -> List[ExperienceItem]:
    """Experience entries from the Experience section."""
    body = find_section(lines, SectionLabels.EXPERIENCE, SectionLabels.EXPERIENCE_ALIASES)
    items = []
    for header, bullets in _scan_items(body):
        company, position, from_date, to_date, location = parse_item_header(header)
        items.append(
            ExperienceItem(
                company=company,
                position=position,
                from_date=from_date,
                to_date=to_date,
                location=location,
                description="\n".join(bullets),
            )
        )
    return items


def parse_education(lines: List[str]) -> List[EducationItem]:
    """Education entries from the Education section."""
    body = find_section(lines, SectionLabels.EDUCATION, SectionLabels.EDUCATION_ALIASES)
    items = []
    for header, bullets in _scan_items(body):
        institution, field_of_study, from_date, to_date, location = parse_item_header(header)
        items.append(
            EducationItem(
                institution=institution,
                field_of_study=field_of_study,
                from_date=from_date,
                to_date=to_date,
                location=location,
                description="\n".join(bullets),
            )
        )
    return items


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------


def parse_resume_markdown(markdown: str) -> ResumeDocument:
    """
    Parse generated resume markdown into a ResumeDocument.

    Never raises: unrecognized or missing parts come back as empty fields.
    Use ResumeDocument.has_content() to decide whether the result is worth
    editing.

    Args:
        markdown: Generated (or composed) resume markdown

    Returns:
        ResumeDocument, possibly empty
    """
    lines = (markdown or "").splitlines()

    resume = ResumeDocument(
        profile=parse_profile(lines),
        summary=section_text(lines, SectionLabels.SUMMARY, SectionLabels.SUMMARY_ALIASES),
        experience=tuple(parse_experience(lines)),
        education=tuple(parse_education(lines)),
        skills=section_text(lines, SectionLabels.SKILLS, SectionLabels.SKILLS_ALIASES),
        certifications=section_text(
            lines, SectionLabels.CERTIFICATIONS, SectionLabels.CERTIFICATIONS_ALIASES
        ),
        projects=section_text(lines, SectionLabels.PROJECTS, SectionLabels.PROJECTS_ALIASES),
        languages=section_text(lines, SectionLabels.LANGUAGES, SectionLabels.LANGUAGES_ALIASES),
    )

    _log_debug(
        f"Parsed resume: {len(resume.experience)} experience, "
        f"{len(resume.education)} education, has_content={resume.has_content()}"
    )
    return resume
