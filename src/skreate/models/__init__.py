"""Data models for skreate.

Model Hierarchy:
- source text -> Statements (with Spans) -> resolved moves
- Pose threaded through the moves -> Diagram of SvgElements
"""

from .base import (
    START_CODE,
    Bounds,
    Code,
    Direction,
    Edge,
    ElementKey,
    Foot,
    Pose,
    Span,
    normalize_heading,
)
from .diagram import (
    Diagram,
    PlacedMove,
    RenderContext,
    RenderedElement,
    RenderOptions,
    SvgElement,
    TextLabel,
    fmt_num,
)
from .params import (
    ParamInfo,
    ParamRange,
    ParamValue,
    ShorthandKind,
    format_value,
    same_value,
)
from .statement import (
    JUMP_SUFFIXES,
    TWIZZLE_SUFFIX,
    ParamAssignment,
    Prefix,
    Statement,
    StatementKind,
)

__all__ = [
    # Base types
    "START_CODE",
    "Bounds",
    "Code",
    "Direction",
    "Edge",
    "ElementKey",
    "Foot",
    "Pose",
    "Span",
    "normalize_heading",
    # Parameters
    "ParamInfo",
    "ParamRange",
    "ParamValue",
    "ShorthandKind",
    "format_value",
    "same_value",
    # Statements
    "JUMP_SUFFIXES",
    "TWIZZLE_SUFFIX",
    "ParamAssignment",
    "Prefix",
    "Statement",
    "StatementKind",
    # Diagram
    "Diagram",
    "PlacedMove",
    "RenderContext",
    "RenderedElement",
    "RenderOptions",
    "SvgElement",
    "TextLabel",
    "fmt_num",
]
