"""Entry points: notation text in, SVG or canonical text out.

Every call is independent and deterministic; nothing is cached or shared
between calls.
"""

import logging
from typing import Optional

from skreate.models import Diagram
from skreate.moves import MoveInfo, find
from skreate.moves import move_infos as catalog_infos
from skreate.pipeline import (
    LayoutEngine,
    canonicalize_vert,
    parse,
    render_svg,
    resolve_all,
)

logger = logging.getLogger(__name__)


def layout(text: str, title: Optional[str] = None) -> Diagram:
    """Parse, resolve and lay out notation text.

    Raises:
        ParseError: the text is not valid notation.
    """
    description = canonicalize_vert(text)
    instances = resolve_all(parse(text))
    diagram = LayoutEngine(title=title).layout(instances, description=description)
    logger.debug("laid out %d statements, %d elements", len(instances), len(diagram.elements))
    return diagram


def generate(text: str) -> str:
    """SVG diagram for notation text."""
    return render_svg(layout(text))


def generate_with_positions(text: str) -> tuple[str, list[str], list[int]]:
    """SVG diagram plus the element id and timing weight of each rendered statement.

    Hosts use the ids to highlight or animate the elements of one
    statement; the timings are relative durations in beats.
    """
    diagram = layout(text)
    return render_svg(diagram), diagram.element_ids, diagram.timings


def move_infos() -> list[MoveInfo]:
    """Reference information for every move and command, in catalog order."""
    return catalog_infos()


def move_info(name: str) -> Optional[MoveInfo]:
    """Reference information for one move or command by name, e.g. `Bracket`."""
    definition = find(name)
    return definition.info() if definition is not None else None
