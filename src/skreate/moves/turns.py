"""Turns: three turns, mohawks, choctaws, brackets, rockers, counters,
changes of edge and loops.

Each turn is drawn as a short sequence of sub-figures laid end to end:
entry curve(s), a marker label at the turn itself, a `shift` that moves
and rotates the skater through the turn, then the exit curve(s). The
shift direction mirrors between left- and right-handed versions of each
turn via a per-code sign.
"""

from typing import Optional

from skreate.models import Code, ParamRange, ParamValue, RenderContext, ShorthandKind
from skreate.models.params import number, text

from .base import STYLES, Figure, MoveDef, MoveInstance, MoveKind, Sequence, curve, straight
from .edges import EDGE_CODES, transition_label

# Codes whose turn sign is negative, per turn family.
_THREE_NEGATIVE = ("LFI", "RFO", "RBI", "LBO")
_BRACKET_NEGATIVE = ("LFO", "RFI", "LBI", "RBO")


def turn_params(
    angle_increment: int = 10,
    extra: tuple = (),
) -> tuple:
    """Parameter schema shared by the turns."""
    return (
        number(
            "angle",
            "Angle of rotation of the entry and exit curves, in degrees",
            90,
            ParamRange.STRICTLY_POSITIVE,
            ShorthandKind.TIGHTNESS,
            angle_increment,
        ),
        number(
            "len",
            "Length of the entry and exit curves, in centimetres",
            450,
            ParamRange.STRICTLY_POSITIVE,
            ShorthandKind.LENGTH,
            100,
        ),
        number("delta-angle", "Additional angle of the exit curve, in degrees", 0),
        number("delta-len", "Additional length of the exit curve, in centimetres", 0),
        *extra,
        text("style", "Line style", choices=STYLES),
        text("transition-label", "Label for the change of foot before the turn"),
        text("label", "Replacement label for the entry curve"),
        text("exit-label", "Replacement label for the exit curve"),
        number("label-offset", "Label distance as a percentage, -1 for the document setting", -1),
    )


def check_exit(params: dict[str, ParamValue]) -> Optional[str]:
    """Exit curve must stay a proper curve."""
    if params["angle"] + params["delta-angle"] <= 0:
        return "exit angle (angle + delta-angle) must be > 0"
    if params["len"] + params["delta-len"] <= 0:
        return "exit length (len + delta-len) must be > 0"
    return None


class Turn:
    """Values shared by the sub-figures of one turn."""

    def __init__(self, mv: MoveInstance, ctx: RenderContext):
        self.mv = mv
        self.ctx = ctx
        self.code = mv.code
        self.angle = mv.number("angle")
        self.length = mv.number("len")
        self.exit_angle = self.angle + mv.number("delta-angle")
        self.exit_length = self.length + mv.number("delta-len")
        self.style = mv.text("style")
        self.label_offset = mv.number("label-offset")
        self.seq = Sequence(self.code)
        self._first = True

    @property
    def title(self) -> str:
        return self.mv.text("label") or f"{self.code}{self.mv.statement.suffix_text}"

    def edge(self, code: Code, length: float, angle: float, label: str = "") -> "Turn":
        """Add a curve; the first curve added carries number, beats and transition label."""
        if self._first:
            figure = curve(
                code,
                length,
                angle,
                self.ctx,
                style=self.style,
                label=label,
                label_offset=self.label_offset,
                number=self.ctx.number,
                beats=self.ctx.beats,
                transition=transition_label(self.mv),
            )
            self._first = False
        else:
            figure = curve(code, length, angle, self.ctx, style=self.style, label=label, label_offset=self.label_offset)
        self.seq.add(figure)
        return self

    def flat(self, length: float, label: str = "") -> "Turn":
        self.seq.add(straight(self.seq.pose.code, length, self.ctx, style=self.style, label=label))
        return self

    def exit_title(self, code: Code) -> str:
        return self.mv.text("exit-label") or str(code)

    def finish(self) -> Figure:
        return self.seq.finish()


def _sign(code: Code, negative: tuple[str, ...]) -> int:
    return -1 if str(code) in negative else 1


def three_geometry(mv: MoveInstance, ctx: RenderContext) -> Figure:
    turn = Turn(mv, ctx)
    sign = _sign(turn.code, _THREE_NEGATIVE)
    out = turn.code.opposite_direction().opposite_edge()
    turn.edge(turn.code, turn.length * 0.75, turn.angle * 0.4, turn.title)
    turn.edge(turn.code, turn.length * 0.25, turn.angle * 0.6)
    turn.seq.shift(rotate=sign * 135, code=out)
    turn.edge(out, turn.exit_length * 0.25, turn.exit_angle * 0.6)
    turn.edge(out, turn.exit_length * 0.75, turn.exit_angle * 0.4, turn.exit_title(out))
    return turn.finish()


def _foot_change(
    mv: MoveInstance,
    ctx: RenderContext,
    out: Code,
    marker: str,
    label_at: tuple[float, float],
    shift: tuple[float, float, float],
    sign: int,
) -> Figure:
    """Entry curve, marker label, shift onto the other foot, exit curve."""
    turn = Turn(mv, ctx)
    turn.edge(turn.code, turn.length, turn.angle, turn.title)
    fwd, side = label_at
    turn.seq.label(marker, fwd=fwd, side=sign * side)
    shift_side, shift_fwd, shift_rotate = shift
    turn.seq.shift(side=sign * shift_side, fwd=shift_fwd, rotate=sign * shift_rotate, code=out)
    turn.edge(out, turn.exit_length, turn.exit_angle, turn.exit_title(out))
    return turn.finish()


def open_mohawk_geometry(mv: MoveInstance, ctx: RenderContext) -> Figure:
    sign = _sign(mv.code, ("LFI",))
    out = mv.code.opposite_foot().opposite_direction()
    return _foot_change(mv, ctx, out, "OpMo", (30, 70), (80, -65, 90), sign)


def closed_mohawk_geometry(mv: MoveInstance, ctx: RenderContext) -> Figure:
    sign = _sign(mv.code, ("LBO", "RFO"))
    out = mv.code.opposite_foot().opposite_direction()
    return _foot_change(mv, ctx, out, "ClMo", (0, 60), (30, -30, 0), sign)


def open_choctaw_geometry(mv: MoveInstance, ctx: RenderContext) -> Figure:
    sign = _sign(mv.code, ("LFI",))
    out = mv.code.opposite_foot().opposite_direction().opposite_edge()
    return _foot_change(mv, ctx, out, "OpCho", (10, 80), (40, 0, 0), sign)


def closed_choctaw_geometry(mv: MoveInstance, ctx: RenderContext) -> Figure:
    sign = _sign(mv.code, ("LBO",))
    out = mv.code.opposite_foot().opposite_direction().opposite_edge()
    return _foot_change(mv, ctx, out, "ClCho", (0, 60), (30, -30, 0), sign)


def split_side(length: float, flat: float) -> tuple[float, float, float]:
    """Main curve, flat and closing curve lengths of one side of a turn.

    The main curve takes 75% and the flat never more than half of the
    rest, so the three always add up to `length`.
    """
    main = length * 0.75
    flat = min(flat, (length - main) / 2)
    return main, flat, length - main - flat


def bracket_geometry(mv: MoveInstance, ctx: RenderContext) -> Figure:
    turn = Turn(mv, ctx)
    sign = _sign(turn.code, _BRACKET_NEGATIVE)
    out = turn.code.opposite_direction().opposite_edge()
    out_rev = out.opposite_edge()
    main, flat, rest = split_side(turn.length, 40)
    turn.edge(turn.code, main, turn.angle, turn.title)
    turn.flat(flat)
    turn.edge(turn.code.opposite_edge(), rest, 80)
    turn.seq.label("Br", fwd=40)
    turn.seq.shift(rotate=sign * 135, code=out_rev)
    main, flat, rest = split_side(turn.exit_length, 40)
    turn.edge(out_rev, rest, 80)
    turn.flat(flat)
    turn.edge(out, main, turn.exit_angle, turn.exit_title(out))
    return turn.finish()


def rocker_geometry(mv: MoveInstance, ctx: RenderContext) -> Figure:
    turn = Turn(mv, ctx)
    sign = _sign(turn.code, _THREE_NEGATIVE)
    out = turn.code.opposite_direction()
    out_rev = out.opposite_edge()
    turn.edge(turn.code, turn.length * 0.85, turn.angle, turn.title)
    turn.edge(turn.code, turn.length * 0.15, 80)
    turn.seq.label("Rk", fwd=40)
    turn.seq.shift(rotate=sign * 135, code=out_rev)
    main, flat, rest = split_side(turn.exit_length, 20)
    turn.edge(out_rev, rest, 80)
    turn.flat(flat)
    turn.edge(out, main, turn.exit_angle, turn.exit_title(out))
    return turn.finish()


def counter_geometry(mv: MoveInstance, ctx: RenderContext) -> Figure:
    turn = Turn(mv, ctx)
    sign = _sign(turn.code, _BRACKET_NEGATIVE)
    out = turn.code.opposite_direction()
    main, flat, rest = split_side(turn.length, 20)
    turn.edge(turn.code, main, turn.angle, turn.title)
    turn.flat(flat)
    turn.edge(turn.code.opposite_edge(), rest, 80)
    turn.seq.label("Ctr", fwd=40)
    turn.seq.shift(rotate=sign * 135, code=out)
    turn.edge(out, turn.exit_length * 0.15, 80)
    turn.edge(out, turn.exit_length * 0.85, turn.exit_angle, turn.exit_title(out))
    return turn.finish()


def change_of_edge_geometry(mv: MoveInstance, ctx: RenderContext) -> Figure:
    turn = Turn(mv, ctx)
    out = turn.code.opposite_edge()
    turn.edge(turn.code, turn.length, turn.angle, turn.title)
    turn.flat(mv.number("flat-len"), "CoE")
    turn.edge(out, turn.exit_length, turn.exit_angle, turn.exit_title(out))
    return turn.finish()


def loop_geometry(mv: MoveInstance, ctx: RenderContext) -> Figure:
    turn = Turn(mv, ctx)
    turn.edge(turn.code, turn.length, turn.angle, turn.title)
    for angle in (100, 130, 100):
        turn.edge(turn.code, 80, angle)
    turn.edge(turn.code, turn.exit_length, turn.exit_angle, turn.mv.text("exit-label"))
    return turn.finish()


def _turn(
    name: str,
    summary: str,
    suffix: str,
    codes: tuple[str, ...],
    geometry,
    angle_increment: int = 10,
    extra: tuple = (),
) -> MoveDef:
    return MoveDef(
        name=name,
        kind=MoveKind.TURN,
        summary=summary,
        example=f"{codes[0]}{suffix}",
        params=turn_params(angle_increment, extra),
        codes=codes,
        suffix=suffix,
        geometry=geometry,
        check=check_exit,
    )


THREE_TURN = _turn("ThreeTurn", "Three turn", "3", EDGE_CODES, three_geometry)
OPEN_MOHAWK = _turn("OpenMohawk", "Open mohawk", "-OpMo", ("LFI", "RFI"), open_mohawk_geometry)
CLOSED_MOHAWK = _turn(
    "ClosedMohawk",
    "Closed mohawk",
    "-ClMo",
    ("LFO", "RFO", "LBO", "RBO"),
    closed_mohawk_geometry,
)
OPEN_CHOCTAW = _turn("OpenChoctaw", "Open choctaw", "-OpCho", ("LFI", "RFI"), open_choctaw_geometry)
CLOSED_CHOCTAW = _turn("ClosedChoctaw", "Closed choctaw", "-ClCho", ("LBO", "RBO"), closed_choctaw_geometry)
BRACKET = _turn("Bracket", "Bracket turn", "-Br", EDGE_CODES, bracket_geometry)
ROCKER = _turn("Rocker", "Rocker turn", "-Rk", EDGE_CODES, rocker_geometry)
COUNTER = _turn("Counter", "Counter turn", "-Ctr", EDGE_CODES, counter_geometry)
CHANGE_OF_EDGE = _turn(
    "ChangeOfEdge",
    "Change of edge",
    "-CoE",
    EDGE_CODES,
    change_of_edge_geometry,
    angle_increment=20,
    extra=(number("flat-len", "Length of the flat between the edges, in centimetres", 50, ParamRange.POSITIVE),),
)
LOOP = _turn("Loop", "Loop figure", "-Loop", EDGE_CODES, loop_geometry)

MOVES = (
    THREE_TURN,
    OPEN_MOHAWK,
    CLOSED_MOHAWK,
    OPEN_CHOCTAW,
    CLOSED_CHOCTAW,
    BRACKET,
    ROCKER,
    COUNTER,
    CHANGE_OF_EDGE,
    LOOP,
)
