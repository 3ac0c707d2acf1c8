"""Resolve Stage - Turn statements into fully resolved move instances.

Each parameter slot is resolved by layering, in order:
1. the schema default
2. shorthand markers: default + count x increment on the slot whose
   shorthand kind matches the markers
3. an explicit `name=value` parameter, which replaces the slot outright
"""

import logging

from skreate.errors import InternalError, ParseError
from skreate.models import ParamValue, ShorthandKind, Statement, StatementKind
from skreate.moves import MoveDef, MoveInstance, lookup

logger = logging.getLogger(__name__)


def _shorthand_layer(definition: MoveDef, stmt: Statement) -> dict[str, ParamValue]:
    layer: dict[str, ParamValue] = {}
    for kind, count in ((ShorthandKind.LENGTH, stmt.length), (ShorthandKind.TIGHTNESS, stmt.tightness)):
        if not count:
            continue
        span = stmt.shorthand_span or stmt.span
        slot = definition.slot_for(kind)
        if slot is None:
            raise ParseError.at(span, f"{definition.name} does not accept {kind.value} markers")
        value = slot.shorthand_value(count)
        problem = slot.check(value)
        if problem:
            raise ParseError.at(span, f"{slot.name}: {problem}")
        layer[slot.name] = value
    return layer


def _explicit_layer(definition: MoveDef, stmt: Statement) -> dict[str, ParamValue]:
    layer: dict[str, ParamValue] = {}
    for assignment in stmt.params:
        slot = definition.param(assignment.name)
        if slot is None:
            raise ParseError.at(assignment.span, f"unknown parameter {assignment.name} for {definition.name}")
        problem = slot.check(assignment.value)
        if problem:
            raise ParseError.at(assignment.span, problem)
        layer[slot.name] = assignment.value
    return layer


def resolve(stmt: Statement) -> MoveInstance:
    """Resolve one move or command statement against the catalog."""
    definition = lookup(stmt)
    params = {
        **definition.defaults(),
        **_shorthand_layer(definition, stmt),
        **_explicit_layer(definition, stmt),
    }
    if definition.check is not None:
        problem = definition.check(params)
        if problem:
            raise ParseError.at(stmt.span, problem)
    return MoveInstance(definition=definition, params=params, statement=stmt)


def resolve_all(statements: list[Statement]) -> list[MoveInstance]:
    """Resolve every move and command; repeat markers must already be expanded."""
    instances = []
    for stmt in statements:
        if stmt.kind in (StatementKind.REPEAT_START, StatementKind.REPEAT_END):
            raise InternalError("repeat markers must be expanded before resolving")
        instance = resolve(stmt)
        logger.debug("%s resolved to %s %s", stmt.span, instance.name, instance.params)
        instances.append(instance)
    return instances
