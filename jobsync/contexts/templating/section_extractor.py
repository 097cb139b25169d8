"""
Section extraction for bold-heading resume markdown.

Generated resumes mark sections with a standalone bold line (**Experience**).
A section body runs from the line after its heading up to the next
standalone bold line.
"""

import re
from typing import Iterable, List, Optional

from jobsync.contexts.templating.markdown_patterns import SectionPatterns
from jobsync.utils.text_processing import strip_trailing_parenthetical


def _normalize_label(text: str) -> str:
    """Lowercase and drop all whitespace so "Projects or  Achievements" == "projectsorachievements"."""
    return re.sub(r"\s", "", text).lower()


def heading_title(line: str) -> Optional[str]:
    """
    Title of a standalone bold heading line, or None if the line isn't one.

    Example:
        >>> heading_title("  **Languages (optional)**  ")
        'Languages (optional)'
        >>> heading_title("- **Python**") is None
        True
    """
    match = re.match(SectionPatterns.BOLD_HEADING, line.strip())
    return match.group(1).strip() if match else None


def find_heading_index(lines: List[str], labels: Iterable[str]) -> int:
    """
    Index of the first line that is a bold heading for any of the labels.

    Labels are tried in order. Matching ignores case and whitespace, and a
    trailing parenthetical qualifier in the heading ("Certifications
    (optional)") is ignored.

    Returns:
        Line index, or -1 if no heading matches
    """
    titles = [heading_title(line) for line in lines]
    candidates = [
        {_normalize_label(title), _normalize_label(strip_trailing_parenthetical(title))}
        if title is not None
        else set()
        for title in titles
    ]

    for label in labels:
        key = _normalize_label(label)
        for idx, keys in enumerate(candidates):
            if key in keys:
                return idx
    return -1


def find_section(
    lines: List[str],
    primary_label: str,
    alias_labels: Iterable[str] = (),
) -> List[str]:
    """
    Extract the body lines of a section.

    Args:
        lines: Document lines
        primary_label: Canonical heading (e.g. "Experience")
        alias_labels: Alternative headings accepted for the same section

    Returns:
        Lines after the heading up to (excluding) the next standalone bold
        line. Empty list if no heading matches.
    """
    start = find_heading_index(lines, [primary_label, *alias_labels])
    if start == -1:
        return []

    body = []
    for line in lines[start + 1:]:
        if heading_title(line) is not None:
            break
        body.append(line)
    return body


def section_text(
    lines: List[str],
    primary_label: str,
    alias_labels: Iterable[str] = (),
) -> str:
    """Section body joined with newlines and trimmed ("" if absent)."""
    return "\n".join(find_section(lines, primary_label, alias_labels)).strip()
