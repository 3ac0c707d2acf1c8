"""Pipeline stages for turning skating notation into diagrams.

Stages, in order:
1. stage_parse - text to statements, repeats expanded
2. stage_resolve - statements to fully parameterized moves
3. stage_layout - pose threading, bounds and element emission
4. stage_render - SVG serialization

canonical renders parsed statements back into normal-form text.
Each stage is a pure function of its input and can be run separately.
"""

from .canonical import canonicalize, canonicalize_vert, statement_text
from .stage_layout import LayoutEngine, auto_font_size, auto_stroke_width, pre_transition
from .stage_parse import expand_repeats, parse, parse_statements, split_statements
from .stage_render import build_document, render_svg
from .stage_resolve import resolve, resolve_all

__all__ = [
    # Parse
    "expand_repeats",
    "parse",
    "parse_statements",
    "split_statements",
    # Resolve
    "resolve",
    "resolve_all",
    # Layout
    "LayoutEngine",
    "auto_font_size",
    "auto_stroke_width",
    "pre_transition",
    # Render
    "build_document",
    "render_svg",
    # Canonical
    "canonicalize",
    "canonicalize_vert",
    "statement_text",
]
