"""The move catalog.

Built once at import and never modified. Skating moves are keyed by
(start code, suffix); commands by their keyword.
"""

import logging
from types import MappingProxyType
from typing import Mapping, Optional

from skreate.errors import InternalError, ParseError
from skreate.models import Statement, StatementKind

from . import commands, edges, jumps, turns, twizzle
from .base import MoveDef, MoveInfo

logger = logging.getLogger(__name__)

CATALOG: tuple[MoveDef, ...] = edges.MOVES + turns.MOVES + twizzle.MOVES + jumps.MOVES + commands.COMMANDS


def _build_index() -> Mapping[tuple[str, str], MoveDef]:
    index: dict[tuple[str, str], MoveDef] = {}
    for definition in CATALOG:
        if definition.kind.is_skating:
            keys = [(code, definition.suffix) for code in definition.codes]
        else:
            keys = [(definition.name, "")]
        for key in keys:
            if key in index:
                raise InternalError(f"{definition.name} and {index[key].name} both claim {key}")
            index[key] = definition
    logger.debug("catalog holds %d entries under %d keys", len(CATALOG), len(index))
    return MappingProxyType(index)


INDEX = _build_index()


def lookup(stmt: Statement) -> MoveDef:
    """Find the catalog entry for a parsed statement.

    Raises:
        ParseError: no move exists for the statement's code and suffix.
        InternalError: the statement is a command or marker the catalog lacks.
    """
    if stmt.kind is StatementKind.COMMAND:
        definition = INDEX.get((stmt.command or "", ""))
        if definition is None:
            raise InternalError(f"parser produced unknown command {stmt.command}")
        return definition
    if stmt.kind is not StatementKind.MOVE or stmt.code is None:
        raise InternalError(f"{stmt.kind.value} statements have no catalog entry")
    definition = INDEX.get((str(stmt.code), stmt.suffix))
    if definition is None:
        raise ParseError.at(stmt.span, f"unknown move {stmt.code}{stmt.suffix_text}")
    return definition


def find(name: str) -> Optional[MoveDef]:
    """Catalog entry by name."""
    for definition in CATALOG:
        if definition.name == name:
            return definition
    return None


def move_infos() -> list[MoveInfo]:
    """Reference metadata for every catalog entry, in catalog order."""
    return [definition.info() for definition in CATALOG]
