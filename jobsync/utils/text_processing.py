"""
Text processing utilities for splitting, escaping and comparing text.
"""

import difflib
import html
import re
from pathlib import Path
from typing import List, Tuple

# Dash-like characters that may separate top-level header fields
FIELD_SEPARATORS = ("—", "–", "-")


def split_top_level(
    line: str,
    open_char: str = "(",
    close_char: str = ")",
) -> List[str]:
    """
    Split a header line on dash separators that sit outside parentheses.

    Tracks delimiter depth while scanning left to right. A dash-like character
    (em dash, en dash or hyphen) counts as a separator only at depth 0 and only
    with a single space on each side, so date ranges such as
    "(Jun 2020 – Aug 2023)" and tokens like "2024-06" stay intact.

    Args:
        line: Header text, e.g. an experience item without its leading "- "
        open_char: Opening delimiter that protects its contents (default: '(')
        close_char: Closing delimiter (default: ')')

    Returns:
        Trimmed, non-empty segments in order

    Example:
        >>> split_top_level("Acme Corp — Engineer (Jun 2020 – Aug 2023) — Remote")
        ['Acme Corp', 'Engineer (Jun 2020 – Aug 2023)', 'Remote']
        >>> split_top_level("Acme-Labs — Engineer")
        ['Acme-Labs', 'Engineer']
    """
    segments = []
    buffer = ""
    depth = 0

    for pos, char in enumerate(line):
        if char == open_char:
            depth += 1
        elif char == close_char and depth > 0:
            depth -= 1

        is_separator = (
            depth == 0
            and char in FIELD_SEPARATORS
            and 0 < pos < len(line) - 1
            and line[pos - 1] == " "
            and line[pos + 1] == " "
        )
        if is_separator:
            if buffer.strip():
                segments.append(buffer.strip())
            buffer = ""
            continue

        buffer += char

    if buffer.strip():
        segments.append(buffer.strip())

    return segments


def escape_html(text: str) -> str:
    """
    Escape &, < and > for safe injection into markup.

    Quotes are left alone; text is only ever placed in element content.

    Example:
        >>> escape_html("R&D <team>")
        'R&amp;D &lt;team&gt;'
    """
    return html.escape(text, quote=False)


def strip_trailing_parenthetical(text: str) -> str:
    """
    Remove a trailing parenthetical qualifier.

    Example:
        >>> strip_trailing_parenthetical("Certifications (optional)")
        'Certifications'
    """
    return re.sub(r"\s*\([^)]*\)\s*$", "", text).strip()


def set_max_consecutive_blank_lines(content: str, max_consecutive: int = 1) -> str:
    """
    Normalize consecutive blank lines to a maximum number.

    Args:
        content: The text content to normalize
        max_consecutive: Maximum number of consecutive blank lines to allow.
                        Use 0 to remove all blank lines, 1 for standard
                        normalization (default: 1)

    Returns:
        Content with normalized blank lines

    Example:
        >>> set_max_consecutive_blank_lines("text\\n\\n\\n\\nmore", max_consecutive=1)
        'text\\n\\nmore'
        >>> set_max_consecutive_blank_lines("text\\n\\n\\n\\nmore", max_consecutive=0)
        'text\\nmore'
    """
    if max_consecutive == 0:
        # Match ANY blank lines (1 or more)
        pattern = r"\n[ \t]*\n([ \t]*\n)*"
    else:
        # Match 2+ consecutive blank lines only
        pattern = r"\n[ \t]*\n([ \t]*\n)+"

    replacement = "\n" * (max_consecutive + 1)

    return re.sub(pattern, replacement, content)


def get_meaningful_diff(
    file1: Path,
    file2: Path,
    context_lines: int = 3
) -> Tuple[List[str], int]:
    """
    Compare two files ignoring blank line differences.

    Removes all blank lines from both files before comparing. Composed
    markdown may place blank lines differently from generated markdown
    without any visible effect on the rendered document.

    Args:
        file1: First file to compare
        file2: Second file to compare
        context_lines: Number of context lines around differences (default: 3)

    Returns:
        Tuple of (diff_lines, num_differences):
        - diff_lines: List of unified diff output lines
        - num_differences: Count of actual content differences (excluding headers)
    """
    content1 = file1.read_text(encoding="utf-8")
    content2 = file2.read_text(encoding="utf-8")

    lines1 = set_max_consecutive_blank_lines(content1, max_consecutive=0).strip().split("\n")
    lines2 = set_max_consecutive_blank_lines(content2, max_consecutive=0).strip().split("\n")

    if lines1 == lines2:
        return [], 0

    diff = list(difflib.unified_diff(
        lines1,
        lines2,
        fromfile=str(file1.name),
        tofile=str(file2.name),
        lineterm="",
        n=context_lines
    ))

    # Count actual differences (lines starting with + or -, excluding headers)
    num_diffs = sum(1 for line in diff if line.startswith(("+", "-")))
    header_lines = sum(1 for line in diff if line.startswith(("---", "+++")))
    num_diffs -= header_lines

    return diff, num_diffs
