"""Twizzles: travelling multi-rotation turns on one foot."""

from skreate.models import ParamRange, RenderContext, ShorthandKind, TWIZZLE_SUFFIX
from skreate.models.params import number, text

from .base import STYLES, Figure, MoveDef, MoveInstance, MoveKind, Sequence, curve
from .edges import EDGE_CODES, transition_label

_NEGATIVE = ("LFI", "RFO", "RBI", "LBO")


def twizzle_geometry(mv: MoveInstance, ctx: RenderContext) -> Figure:
    """Pre-curve, then per half rotation a pair of curves either side of a
    cusp that flips direction and edge, then a post-curve."""
    angle = mv.number("angle")
    length = mv.number("len")
    style = mv.text("style")
    sign = -1 if str(mv.code) in _NEGATIVE else 1
    half_turns = mv.statement.half_turns or 0

    len_a = length * 0.75
    len_b = length - len_a
    angle_b = angle * 0.6
    angle_a = angle - angle_b

    title = mv.text("label") or f"{mv.code}{mv.statement.suffix_text}"
    code = mv.code
    seq = Sequence(code)
    seq.add(
        curve(
            code,
            mv.number("pre-len"),
            mv.number("pre-angle"),
            ctx,
            style=style,
            label="",
            number=ctx.number,
            transition=transition_label(mv),
        )
    )
    for half in range(half_turns):
        out = code.opposite_direction().opposite_edge()
        seq.add(curve(code, len_a, angle_a, ctx, style=style, label=""))
        seq.add(curve(code, len_b, angle_b, ctx, style=style, label=""))
        if half_turns % 2 == 1 and half == half_turns // 2:
            seq.label(title, fwd=100, side=30)
        seq.shift(rotate=sign * 2 * angle, code=out)
        seq.add(curve(out, len_b, angle_b, ctx, style=style, label=""))
        seq.add(curve(out, len_a, angle_a, ctx, style=style, label=""))
        if half_turns % 2 == 0 and half == (half_turns - 1) // 2:
            seq.label(title, side=100)
        code = out
    seq.add(curve(code, mv.number("post-len"), mv.number("post-angle"), ctx, style=style, label=""))
    return seq.finish()


TWIZZLE = MoveDef(
    name="Twizzle",
    kind=MoveKind.TWIZZLE,
    summary="Twizzle, with the number of rotations (whole or half) after the suffix",
    example=f"LFO{TWIZZLE_SUFFIX}1",
    params=(
        number(
            "angle",
            "Angle of rotation for each curved part, in degrees",
            60,
            ParamRange.STRICTLY_POSITIVE,
            ShorthandKind.TIGHTNESS,
            10,
        ),
        number(
            "len",
            "Length of each curved part, in centimetres",
            200,
            ParamRange.STRICTLY_POSITIVE,
            ShorthandKind.LENGTH,
            40,
        ),
        number("pre-len", "Length of the curve before the twizzle", 100, ParamRange.STRICTLY_POSITIVE),
        number("pre-angle", "Angle of the curve before the twizzle", 45, ParamRange.STRICTLY_POSITIVE),
        number("post-len", "Length of the curve after the twizzle", 100, ParamRange.STRICTLY_POSITIVE),
        number("post-angle", "Angle of the curve after the twizzle", 45, ParamRange.STRICTLY_POSITIVE),
        text("style", "Line style", choices=STYLES),
        text("transition-label", "Label for the change of foot before the twizzle"),
        text("label", "Replacement label for the twizzle"),
    ),
    codes=EDGE_CODES,
    suffix=TWIZZLE_SUFFIX,
    geometry=twizzle_geometry,
)

MOVES = (TWIZZLE,)
