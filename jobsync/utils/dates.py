"""
Date normalization for resume date tokens and ranges.

Generated resumes mix many date spellings ("2024-06", "06/2024", "June 2024",
"Present"). Everything is folded into a canonical "Mon YYYY" form so the
structured model and the composed markdown stay stable across round-trips.
"""

import re
from dataclasses import dataclass

MONTH_NAMES = [
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
]

PRESENT = "Present"


@dataclass(frozen=True)
class DatePatterns:
    """Regex patterns for the date token shapes recognized by to_canonical_date()."""

    PRESENT: str = r"^present$"

    # YYYY-MM, YYYY/MM, YYYY-MM-DD
    YEAR_MONTH: str = r"^(\d{4})[-/](\d{1,2})(?:[-/](\d{1,2}))?$"

    # MM-YYYY, MM/YYYY
    MONTH_YEAR: str = r"^(\d{1,2})[-/](\d{4})$"

    # Jun 2024, June 2024, Sept. 2024
    MONTH_NAME_YEAR: str = (
        r"^(jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?"
        r"|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\.?\s+(\d{4})$"
    )

    YEAR_ONLY: str = r"^\d{4}$"
    MONTH_ONLY: str = r"^(\d{1,2})$"

    # Range separator: dash-like or "to", only when surrounded by whitespace
    RANGE_SEPARATOR: str = r"\s+(?:–|—|-|to)\s+"


@dataclass(frozen=True)
class DateRange:
    """Canonical (from, to) pair produced by normalize_range()."""

    from_date: str = ""
    to_date: str = ""


def _month_name(month: int) -> str:
    """Month abbreviation for a 1-based month number, clamped to [1, 12]."""
    return MONTH_NAMES[min(12, max(1, month)) - 1]


def to_canonical_date(token: str) -> str:
    """
    Convert a single date token into canonical form.

    Rules are tried in order and the first match wins. Unrecognized tokens are
    returned unchanged (trimmed), never rejected.

    Args:
        token: Raw date token from generated text

    Returns:
        "Mon YYYY", "Present", a bare year, a bare month name, or the input

    Examples:
        >>> to_canonical_date("2024-06")
        'Jun 2024'
        >>> to_canonical_date("06/2024")
        'Jun 2024'
        >>> to_canonical_date("june 2024")
        'Jun 2024'
        >>> to_canonical_date("present")
        'Present'
        >>> to_canonical_date("Summer 2024")
        'Summer 2024'
    """
    text = (token or "").strip()
    if not text:
        return ""

    if re.match(DatePatterns.PRESENT, text, re.IGNORECASE):
        return PRESENT

    match = re.match(DatePatterns.YEAR_MONTH, text)
    if match:
        return f"{_month_name(int(match.group(2)))} {int(match.group(1))}"

    match = re.match(DatePatterns.MONTH_YEAR, text)
    if match:
        return f"{_month_name(int(match.group(1)))} {int(match.group(2))}"

    match = re.match(DatePatterns.MONTH_NAME_YEAR, text, re.IGNORECASE)
    if match:
        month = match.group(1)[:3]
        return f"{month[0].upper()}{month[1:].lower()} {match.group(2)}"

    if re.match(DatePatterns.YEAR_ONLY, text):
        return text

    match = re.match(DatePatterns.MONTH_ONLY, text)
    if match:
        return _month_name(int(match.group(1)))

    return text


def normalize_range(text: str) -> DateRange:
    """
    Split a date range into canonical (from, to) dates.

    Separators (en dash, em dash, hyphen, "to") only count when surrounded by
    whitespace, so a single token like "2024-06" is never split in two.

    Args:
        text: Range text, typically the inside of a parenthesized group

    Returns:
        DateRange with both ends passed through to_canonical_date()

    Examples:
        >>> normalize_range("2024-06 – 2025-01")
        DateRange(from_date='Jun 2024', to_date='Jan 2025')
        >>> normalize_range("2024-06")
        DateRange(from_date='Jun 2024', to_date='')
    """
    stripped = (text or "").strip()
    if not stripped:
        return DateRange()

    parts = [
        part.strip()
        for part in re.split(DatePatterns.RANGE_SEPARATOR, stripped, flags=re.IGNORECASE)
        if part.strip()
    ]
    from_raw = parts[0] if parts else stripped
    to_raw = parts[1] if len(parts) > 1 else ""

    return DateRange(from_date=to_canonical_date(from_raw), to_date=to_canonical_date(to_raw))
