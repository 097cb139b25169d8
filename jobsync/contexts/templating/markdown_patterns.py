"""
Markdown Pattern Constants

Centralized regex patterns and labels for the resume markdown subset the
generator is instructed to produce. Organized into frozen dataclasses by
category for immutability and clear grouping.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class HeaderPatterns:
    """
    Identity header patterns (name, title, contact line).
    """
    # "# Jane Doe"
    NAME_LINE: str = r"^#\s+"

    # "_**Software Engineer**_" (underline/emphasis wrapped)
    TITLE_LINE: str = r"^_.*_\s*$"

    # Contact tokens are separated by bullets, middle dots or pipes
    CONTACT_SPLIT: str = r"\s*[•|·]\s*"
    CONTACT_MARKERS: tuple = (" • ", "·", "|")


@dataclass(frozen=True)
class SectionPatterns:
    """
    Section heading patterns.

    Sections are introduced by a standalone bold line such as **Experience**.
    """
    # Any standalone bold line ends the previous section body
    BOLD_HEADING: str = r"^\*\*(.+)\*\*\s*$"

    # Bold-only line as seen by the renderer (no nested asterisks)
    BOLD_ONLY_LINE: str = r"^\*\*[^*]+\*\*$"

    # Inline bold span
    INLINE_BOLD: str = r"\*\*(.*?)\*\*"


@dataclass(frozen=True)
class ItemPatterns:
    """
    Experience/education item patterns.

    Items look like "- Company — Position (from – to) — Location" with
    indented bullet children.
    """
    # Unindented "- " starts a new item
    ITEM_START: str = r"^-\s+"

    # Indented bullet marker under an item
    ITEM_BULLET: str = r"^\s*[-*•]\s+"

    # Segment holding a parenthesized group
    HAS_PARENTHETICAL: str = r"\([^)]*\)"

    # Segment closing on a parenthesized group, e.g. "Engineer (2020 – 2021)"
    ENDS_WITH_PARENTHETICAL: str = r"\([^)]*\)\s*$"

    # "Engineer (Jun 2020 – Aug 2023)" -> ("Engineer", "Jun 2020 – Aug 2023")
    ROLE_WITH_RANGE: str = r"^(.*?)\s*\(([^)]*)\)\s*$"


@dataclass(frozen=True)
class SanitizePatterns:
    """
    Patterns removed or rewritten by sanitize_markdown().
    """
    # Underscore runs touching a word character on at most one side
    EMPHASIS_UNDERSCORE: str = r"(?<![A-Za-z0-9_])_+|_+(?![A-Za-z0-9_])"

    DOUBLE_HYPHEN: str = r"--"

    # Qualifiers the generator attaches to headings and list entries
    QUALIFIER: str = (
        r"\s*\((?:optional|inferred|native|fluent|proficient|basic|intermediate|advanced)[^)]*\)"
    )

    # Parenthetical anywhere inside a standalone bold heading line
    HEADING_PARENTHETICAL: str = r"^(\s*)\*\*([^*]+?)\s*\([^)]*\)\s*\*\*(\s*)$"

    # Parenthesized group considered by normalize_dates_in_markdown()
    PARENTHESIZED: str = r"\(([^)]+)\)"


@dataclass(frozen=True)
class SectionLabels:
    """
    Canonical section headings and the aliases accepted when parsing.
    """
    SUMMARY: str = "Summary"
    EXPERIENCE: str = "Experience"
    EDUCATION: str = "Education"
    SKILLS: str = "Skills"
    CERTIFICATIONS: str = "Certifications"
    PROJECTS: str = "Projects or Achievements"
    LANGUAGES: str = "Languages"

    SUMMARY_ALIASES: tuple = ("Professional Summary", "Profile")
    EXPERIENCE_ALIASES: tuple = ("Work Experience", "Professional Experience")
    EDUCATION_ALIASES: tuple = ()
    SKILLS_ALIASES: tuple = ("Technical Skills",)
    CERTIFICATIONS_ALIASES: tuple = ("Certification",)
    PROJECTS_ALIASES: tuple = ("Projects", "Achievements")
    LANGUAGES_ALIASES: tuple = ()


@dataclass(frozen=True)
class Placeholders:
    """
    Placeholder text emitted by the composer for empty fields.
    """
    NAME: str = "[FULL NAME]"
    TITLE: str = "[Role / Title]"
    LOCATION: str = "[City, Country]"
    EMAIL: str = "[Email]"
    SOCIALS: str = "[LinkedIn/Website]"
    COMPANY: str = "[Company]"
    POSITION: str = "[Position]"
    INSTITUTION: str = "[Institution]"
    FIELD_OF_STUDY: str = "[Field of Study]"
    DATE: str = "Mon YYYY"
