"""Simple skating moves: curved edges, straight glides and hops."""

from typing import Optional

from skreate.models import Code, ParamRange, RenderContext, ShorthandKind, SvgElement, TextLabel
from skreate.models.params import number, text

from .base import STYLES, Figure, MoveDef, MoveInstance, MoveKind, RelativeExit, curve, straight

EDGE_CODES = ("LFO", "LFI", "RFO", "RFI", "LBO", "LBI", "RBO", "RBI")
FLAT_CODES = ("LF", "LB", "RF", "RB", "BF", "BB")


def transition_label(mv: MoveInstance) -> str:
    """Explicit transition label, or the one implied by the prefix."""
    explicit = mv.text("transition-label") if "transition-label" in mv.params else ""
    return explicit or mv.statement.prefix.label or ""


def _label(mv: MoveInstance) -> str:
    return mv.text("label") or str(mv.code)


def edge_geometry(mv: MoveInstance, ctx: RenderContext) -> Figure:
    return curve(
        mv.code,
        mv.number("len"),
        mv.number("angle"),
        ctx,
        style=mv.text("style"),
        label=_label(mv),
        label_offset=mv.number("label-offset"),
        number=ctx.number,
        beats=ctx.beats,
        transition=transition_label(mv),
    )


def straight_geometry(mv: MoveInstance, ctx: RenderContext) -> Figure:
    return straight(
        mv.code,
        mv.number("len"),
        ctx,
        style=mv.text("style"),
        label=_label(mv),
        label_offset=mv.number("label-offset"),
        number=ctx.number,
        beats=ctx.beats,
        transition=transition_label(mv),
    )


def hop(
    code: Code,
    ctx: RenderContext,
    label: str,
    size: int = 5,
    label_offset: int = -1,
    number: Optional[int] = None,
) -> Figure:
    """A filled circle marking a hop or a jump in the air."""
    figure = Figure(
        shapes=[SvgElement("circle", {"r": size, "style": "fill: black;"})],
        points=[(-size, -size), (size, size)],
        exit=RelativeExit(code=code),
    )
    offset = ctx.offset_for(label_offset)
    figure.labels.append(TextLabel(x=30 * offset, y=0, text=label, number=number))
    return figure


def hop_geometry(mv: MoveInstance, ctx: RenderContext) -> Figure:
    return hop(
        mv.code,
        ctx,
        mv.text("label"),
        size=mv.number("size"),
        label_offset=mv.number("label-offset"),
        number=ctx.number,
    )


EDGE = MoveDef(
    name="Edge",
    kind=MoveKind.EDGE,
    summary="Curved edge on one foot",
    example="LFO",
    params=(
        number(
            "angle",
            "Angle of rotation in degrees",
            40,
            ParamRange.STRICTLY_POSITIVE,
            ShorthandKind.TIGHTNESS,
            10,
        ),
        number(
            "len",
            "Length of the edge in centimetres",
            450,
            ParamRange.STRICTLY_POSITIVE,
            ShorthandKind.LENGTH,
            125,
        ),
        text("label", "Replacement label for the edge"),
        text("style", "Line style", choices=STYLES),
        text("transition-label", "Label for the change of foot before the edge"),
        number("label-offset", "Label distance as a percentage, -1 for the document setting", -1),
    ),
    codes=EDGE_CODES,
    geometry=edge_geometry,
)

STRAIGHT_EDGE = MoveDef(
    name="StraightEdge",
    kind=MoveKind.STRAIGHT,
    summary="Straight glide on one or both feet",
    example="BF",
    params=(
        number(
            "len",
            "Length of the glide in centimetres",
            450,
            ParamRange.STRICTLY_POSITIVE,
            ShorthandKind.LENGTH,
            125,
        ),
        text("label", "Replacement label for the glide"),
        text("style", "Line style", choices=STYLES),
        text("transition-label", "Label for the change of foot before the glide"),
        number("label-offset", "Label distance as a percentage, -1 for the document setting", -1),
    ),
    codes=FLAT_CODES,
    geometry=straight_geometry,
)

HOP = MoveDef(
    name="Hop",
    kind=MoveKind.HOP,
    summary="Hop, landing on the given foot",
    example="BF-Hop",
    params=(
        number("size", "Circle size in centimetres", 5, ParamRange.STRICTLY_POSITIVE),
        text("label", "Label for the hop", "Hop"),
        number("label-offset", "Label distance as a percentage, -1 for the document setting", -1),
    ),
    codes=FLAT_CODES,
    suffix="-Hop",
    geometry=hop_geometry,
)

MOVES = (EDGE, STRAIGHT_EDGE, HOP)
