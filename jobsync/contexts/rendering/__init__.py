"""
Rendering Context

Responsibilities:
- Renders resume markdown into styled preview/print markup
- Wraps markup in standalone print documents (page size, fonts, auto-print)

Owns: Markdown → HTML rendering, print layout
Never: Modifies resume content
"""

from jobsync.contexts.rendering.html_renderer import (
    RenderState,
    SectionKind,
    render_markdown_to_html,
    step,
)
from jobsync.contexts.rendering.print_document import (
    load_print_layout,
    render_print_document,
    write_print_document,
)

__all__ = [
    "render_markdown_to_html",
    "RenderState",
    "SectionKind",
    "step",
    "load_print_layout",
    "render_print_document",
    "write_print_document",
]
