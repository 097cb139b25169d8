"""
Print Document

Wraps rendered resume markup in a standalone HTML page ready for the
browser's print-to-PDF. Page geometry, fonts and auto-print come from an
OmegaConf layout file; the page itself is a Jinja2 template.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from dotenv import load_dotenv
from jinja2 import Environment, FileSystemLoader, StrictUndefined
from omegaconf import DictConfig, OmegaConf

from jobsync.contexts.rendering.html_renderer import render_markdown_to_html
from jobsync.contexts.rendering.logger import _log_debug, log_render_result

load_dotenv()

RENDERING_CONTEXT_PATH = Path(__file__).parent
TEMPLATES_PATH = RENDERING_CONTEXT_PATH / "templates"
DEFAULT_PRINT_LAYOUT_PATH = RENDERING_CONTEXT_PATH / "print_layout.yaml"
PRINT_LAYOUT_PATH = Path(os.getenv("PRINT_LAYOUT_PATH", str(DEFAULT_PRINT_LAYOUT_PATH)))

PRINT_TEMPLATE_NAME = "print_document.html.jinja"

LayoutSource = Union[None, Path, str, Dict[str, Any], DictConfig]

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_PATH)),
    # Catches silent failures
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
)


def load_print_layout(layout: LayoutSource = None) -> Dict[str, Any]:
    """
    Resolve a print layout.

    The packaged defaults are always loaded first; the given layout (or
    PRINT_LAYOUT_PATH when none is given) is merged on top, so an override
    file only needs the keys it changes.

    Args:
        layout: Path to a layout YAML, a mapping of overrides, or None

    Returns:
        Fully resolved layout as a plain dict
    """
    base = OmegaConf.load(DEFAULT_PRINT_LAYOUT_PATH)

    if layout is None:
        layout = PRINT_LAYOUT_PATH if PRINT_LAYOUT_PATH != DEFAULT_PRINT_LAYOUT_PATH else None

    if isinstance(layout, (str, Path)):
        _log_debug(f"Loading print layout from {layout}")
        override = OmegaConf.load(Path(layout))
    elif isinstance(layout, DictConfig):
        override = layout
    elif layout is not None:
        override = OmegaConf.create(layout)
    else:
        override = OmegaConf.create({})

    merged = OmegaConf.merge(base, override)
    return OmegaConf.to_container(merged, resolve=True)


def render_print_document(markdown: str, layout: LayoutSource = None) -> str:
    """
    Render markdown into a standalone print-ready HTML document.

    Args:
        markdown: Resume markdown (canonical or generated)
        layout: Layout override (see load_print_layout)

    Returns:
        Complete HTML document
    """
    content = render_markdown_to_html(markdown)
    template = _env.get_template(PRINT_TEMPLATE_NAME)
    return template.render(content=content, layout=load_print_layout(layout))


def write_print_document(
    markdown: str,
    output_path: Path,
    layout: LayoutSource = None,
    document_name: Optional[str] = None,
) -> Path:
    """Render and write a print document, creating parent directories."""
    html = render_print_document(markdown, layout=layout)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(html, encoding="utf-8")
    log_render_result(document_name or output_path.stem, html, output_path)
    return output_path
