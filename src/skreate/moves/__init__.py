"""Move catalog and per-move geometry.

Catalog groups:
- edges - curved edges, straight glides, hops
- turns - three turns, mohawks, choctaws, brackets, rockers, counters,
  changes of edge, loops
- twizzle - twizzles
- jumps - Salchow, toe loop, loop, flip, Lutz, Axel
- commands - Shift, Warp, Label, Rink, Info, Title, Text
"""

from .base import (
    AbsoluteExit,
    Figure,
    MoveDef,
    MoveInfo,
    MoveInstance,
    MoveKind,
    RelativeExit,
    Sequence,
    placement,
)
from .registry import CATALOG, INDEX, find, lookup, move_infos

__all__ = [
    # Definitions
    "MoveDef",
    "MoveInfo",
    "MoveInstance",
    "MoveKind",
    # Geometry
    "AbsoluteExit",
    "Figure",
    "RelativeExit",
    "Sequence",
    "placement",
    # Catalog
    "CATALOG",
    "INDEX",
    "find",
    "lookup",
    "move_infos",
]
