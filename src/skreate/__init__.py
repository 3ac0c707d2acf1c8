"""skreate - figure skating notation to SVG diagrams."""

from .api import generate, generate_with_positions, layout, move_info, move_infos
from .errors import InternalError, ParseError
from .pipeline import canonicalize, canonicalize_vert

__version__ = "0.1.0"

__all__ = [
    # Generation
    "generate",
    "generate_with_positions",
    "layout",
    # Canonical text
    "canonicalize",
    "canonicalize_vert",
    # Reference
    "move_info",
    "move_infos",
    # Errors
    "InternalError",
    "ParseError",
]
