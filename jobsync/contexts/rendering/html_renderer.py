"""
Markdown -> Print Markup Renderer

Renders the resume markdown subset into HTML fragments styled for preview
and print. Rendering is a left fold of step() over the document lines: each
call takes a frozen RenderState and one line and returns the next state, so
each transition can be checked on its own.

Block rules (first match wins):
- blank line: close any open list or skills buffer, emit a spacer
- "# ", "## ", "### ": headings (## and ### do not change the section)
- standalone **Title**: bordered section title, sets the current section
- list line: skills are buffered into two columns, anything else is <li>
- before any section: centered header lines (name, title, contacts)
- inside Experience: "Company, Position ... Mon YYYY – Present" rows
- anything else: paragraph with **bold** spans
"""

import re
from dataclasses import dataclass, replace
from enum import Enum
from functools import reduce

from jobsync.contexts.templating.markdown_patterns import SectionPatterns
from jobsync.utils.text_processing import escape_html, strip_trailing_parenthetical

SKILLS_FIRST_COLUMN_SIZE = 4


@dataclass(frozen=True)
class RenderPatterns:
    """Line patterns recognized by the renderer."""

    LIST_ITEM: str = r"^[-•]\s+"

    # Month-name date range, optionally ending in Present. Year-only ranges are not matched.
    EXPERIENCE_DATE_RANGE: str = (
        r"(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)[a-z]*\s+\d{4}\s*"
        r"(?:[–-]\s*(?:Present|(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)[a-z]*\s+\d{4}))?"
    )
    TRAILING_DASH: str = r"\s*[—–-]\s*$"


@dataclass(frozen=True)
class RenderStyles:
    """Inline styles for emitted elements."""

    H2: str = "font-weight:700;border-bottom:1px solid #000;padding-bottom:4px;margin:12px 0 8px;"
    H3: str = "font-weight:700;border-bottom:1px solid #000;padding-bottom:3px;margin:10px 0 6px;"
    SECTION_TITLE: str = (
        "font-weight:700;border-bottom:1px solid #000;padding-bottom:4px;margin:12px 0 8px;"
    )
    SKILLS_GRID: str = "display:grid; grid-template-columns:1fr 1fr; gap:24px;"
    EXP_ROW: str = "display:flex;align-items:baseline;justify-content:space-between;"
    EXP_RIGHT: str = "white-space:nowrap;"

    # Header stages: 0 = name, 1 = title, 2+ = contact lines
    HEADER_STAGES: tuple = (
        "text-align:center;font-weight:700;font-size:22px;",
        "text-align:center;font-weight:700;font-size:16px;",
        "text-align:center;font-weight:400;font-size:14px;",
    )


SPACER = '<div class="spacer"></div>'


class SectionKind(Enum):
    """Section the renderer is currently inside."""

    NONE = "none"
    SKILLS = "skills"
    EXPERIENCE = "experience"
    OTHER = "other"

    @classmethod
    def from_title(cls, title: str) -> "SectionKind":
        key = title.strip().lower()
        if key == "skills":
            return cls.SKILLS
        if key == "experience":
            return cls.EXPERIENCE
        return cls.OTHER


@dataclass(frozen=True)
class RenderState:
    """
    Renderer state between two lines.

    Attributes:
        section: Kind of the current section (NONE before any bold heading)
        section_title: Title of the current section
        list_open: Whether a <ul> is open
        skills_buffer: Rendered skills items waiting to be laid out
        header_stage: Header lines emitted so far (0, 1 or 2)
        parts: Emitted HTML fragments
    """

    section: SectionKind = SectionKind.NONE
    section_title: str = ""
    list_open: bool = False
    skills_buffer: tuple = ()
    header_stage: int = 0
    parts: tuple = ()

    def emit(self, *fragments: str) -> "RenderState":
        return replace(self, parts=self.parts + fragments)

    def html(self) -> str:
        return "\n".join(self.parts)


def render_inline(text: str) -> str:
    """Escape text and turn **bold** spans into <strong>."""
    return re.sub(SectionPatterns.INLINE_BOLD, r"<strong>\1</strong>", escape_html(text))


def flush_skills(state: RenderState) -> RenderState:
    """Lay out buffered skills as two columns (first four items on the left)."""
    if not state.skills_buffer:
        return state

    left = state.skills_buffer[:SKILLS_FIRST_COLUMN_SIZE]
    right = state.skills_buffer[SKILLS_FIRST_COLUMN_SIZE:]
    fragments = [f'<div class="skills-columns" style="{RenderStyles.SKILLS_GRID}">', "<ul>"]
    fragments.extend(f"<li>{item}</li>" for item in left)
    fragments.extend(["</ul>", "<ul>"])
    fragments.extend(f"<li>{item}</li>" for item in right)
    fragments.extend(["</ul>", "</div>"])

    return replace(state.emit(*fragments), skills_buffer=())


def close_blocks(state: RenderState) -> RenderState:
    """Flush pending skills, otherwise close an open list."""
    if state.skills_buffer:
        return flush_skills(state)
    if state.list_open:
        return replace(state.emit("</ul>"), list_open=False)
    return state


def _render_experience_row(text: str) -> str:
    right = ""
    left = text
    match = re.search(RenderPatterns.EXPERIENCE_DATE_RANGE, text, re.IGNORECASE)
    if match:
        right = match.group(0)
        left = text.replace(right, "", 1)
        left = re.sub(RenderPatterns.TRAILING_DASH, "", left)
        left = strip_trailing_parenthetical(left)

    company, _, position = left.partition(",")
    left_html = f"<strong>{escape_html(company.strip())}</strong>"
    if position.strip():
        left_html += f", <em>{escape_html(position.strip())}</em>"

    return (
        f'<div class="exp-row" style="{RenderStyles.EXP_ROW}">'
        f'<div class="left">{left_html}</div>'
        f'<div class="right" style="{RenderStyles.EXP_RIGHT}">{escape_html(right)}</div>'
        f"</div>"
    )


def step(state: RenderState, raw_line: str) -> RenderState:
    """
    Advance the renderer by one line.

    Args:
        state: State after the previous line
        raw_line: Next markdown line

    Returns:
        New state with any emitted fragments appended
    """
    line = raw_line.rstrip()

    if not line.strip():
        return close_blocks(state).emit(SPACER)

    if line.startswith("# "):
        return close_blocks(state).emit(f"<h1>{escape_html(line[2:])}</h1>")
    if line.startswith("## "):
        return close_blocks(state).emit(
            f'<h2 class="section-title" style="{RenderStyles.H2}">{escape_html(line[3:])}</h2>'
        )
    if line.startswith("### "):
        return close_blocks(state).emit(
            f'<h3 class="section-title" style="{RenderStyles.H3}">{escape_html(line[4:])}</h3>'
        )

    if re.match(SectionPatterns.BOLD_ONLY_LINE, line):
        title = strip_trailing_parenthetical(line[2:-2])
        state = close_blocks(state).emit(
            f'<p class="section-title" style="{RenderStyles.SECTION_TITLE}">'
            f"<strong>{escape_html(title)}</strong></p>"
        )
        return replace(state, section=SectionKind.from_title(title), section_title=title)

    # Indented bullets are list items too
    item = line.lstrip()
    if re.match(RenderPatterns.LIST_ITEM, item):
        item_html = render_inline(re.sub(RenderPatterns.LIST_ITEM, "", item))
        if state.section is SectionKind.SKILLS:
            return replace(state, skills_buffer=state.skills_buffer + (item_html,))
        if not state.list_open:
            state = replace(state.emit("<ul>"), list_open=True)
        return state.emit(f"<li>{item_html}</li>")

    state = flush_skills(state)

    if state.section is SectionKind.NONE:
        stage = min(state.header_stage, len(RenderStyles.HEADER_STAGES) - 1)
        state = state.emit(f'<p style="{RenderStyles.HEADER_STAGES[stage]}">{escape_html(line)}</p>')
        return replace(state, header_stage=min(state.header_stage + 1, 2))

    if state.section is SectionKind.EXPERIENCE:
        return state.emit(_render_experience_row(line.strip()))

    return state.emit(f"<p>{render_inline(line)}</p>")


def render_markdown_to_html(markdown: str) -> str:
    """
    Render resume markdown into print markup.

    Total over any input; unrecognized lines become paragraphs. Literal text
    is escaped for &, < and >.

    Args:
        markdown: Canonical (or generated) resume markdown

    Returns:
        HTML fragment (no <html>/<body> wrapper)
    """
    lines = re.split(r"\r?\n", markdown or "")
    final = close_blocks(reduce(step, lines, RenderState()))
    return final.html()
