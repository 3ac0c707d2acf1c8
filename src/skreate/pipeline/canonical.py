"""Canonical rendering of notation.

Every statement is written back in one normal form: defaults omitted,
shorthand markers wherever they can express a value, and the remaining
parameters in schema order. Canonical text parses to the same moves as
the input it came from.
"""

import logging

from skreate.models import (
    ParamValue,
    ShorthandKind,
    Statement,
    StatementKind,
    format_value,
    same_value,
)
from skreate.models.params import SHORTHAND_MARKERS
from skreate.moves import MoveDef

from .stage_parse import REPEAT_END, REPEAT_END_MIRRORED, REPEAT_START, expand_repeats, parse_statements
from .stage_resolve import resolve

logger = logging.getLogger(__name__)

HORIZONTAL_SEPARATOR = "; "
VERTICAL_SEPARATOR = "\n"


def _markers(kind: ShorthandKind, count: int) -> str:
    more, less = SHORTHAND_MARKERS[kind]
    return (more if count > 0 else less) * abs(count)


def _param_text(definition: MoveDef, params: dict[str, ParamValue]) -> tuple[str, str]:
    """Shorthand markers and the bracketed parameter list for resolved values."""
    shorthand = {ShorthandKind.LENGTH: "", ShorthandKind.TIGHTNESS: ""}
    explicit = []
    for slot in definition.params:
        value = params[slot.name]
        if same_value(value, slot.default):
            continue
        count = slot.shorthand_count(value)
        if count is not None and definition.slot_for(slot.shorthand) is slot:
            shorthand[slot.shorthand] = _markers(slot.shorthand, count)
            continue
        explicit.append(f"{slot.name}={format_value(value)}")
    markers = shorthand[ShorthandKind.LENGTH] + shorthand[ShorthandKind.TIGHTNESS]
    return markers, f"[{','.join(explicit)}]" if explicit else ""


def statement_text(stmt: Statement) -> str:
    """Canonical text of one statement."""
    if stmt.kind is StatementKind.REPEAT_START:
        return REPEAT_START
    if stmt.kind is StatementKind.REPEAT_END:
        marker = REPEAT_END_MIRRORED if stmt.mirrored else REPEAT_END
        return marker if stmt.repeat_count == 2 else f"{marker}x{stmt.repeat_count}"

    instance = resolve(stmt)
    markers, params = _param_text(instance.definition, instance.params)
    if stmt.kind is StatementKind.COMMAND:
        return f"{instance.name}{params}"

    parts = []
    if stmt.number is not None:
        parts.append(f"{stmt.number}) ")
    if stmt.beats is not None:
        parts.append(f"/{stmt.beats} ")
    parts.append(f"{stmt.prefix.value}{stmt.code}{stmt.suffix_text}{markers}{params}")
    return "".join(parts)


def _canonical(text: str, separator: str) -> str:
    statements = parse_statements(text)
    # Unbalanced repeats are rejected even though the markers are kept.
    expand_repeats(statements)
    result = separator.join(statement_text(stmt) for stmt in statements)
    logger.debug("canonicalized %d statements", len(statements))
    return result


def canonicalize(text: str) -> str:
    """Canonical form with statements on one line, separated by `; `."""
    return _canonical(text, HORIZONTAL_SEPARATOR)


def canonicalize_vert(text: str) -> str:
    """Canonical form with one statement per line."""
    return _canonical(text, VERTICAL_SEPARATOR)
