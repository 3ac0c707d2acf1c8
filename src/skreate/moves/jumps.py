"""Jumps.

A jump is drawn as its take-off edge(s), a hop marking the jump itself,
a shift to where the skater lands and the landing edge. Whether a jump
rotates counter-clockwise (landing on the right foot) or clockwise
("goofy", landing on the left) follows from the take-off code: each jump
accepts one take-off code per rotation sense.
"""

from skreate.models import Code, Direction, Edge, Foot, ParamRange, RenderContext, ShorthandKind
from skreate.models.params import number, text

from .base import STYLES, Figure, MoveDef, MoveInstance, MoveKind, Sequence, curve
from .edges import hop, transition_label

REGULAR_LANDING = Code(foot=Foot.RIGHT, direction=Direction.BACKWARD, edge=Edge.OUTSIDE)
GOOFY_LANDING = Code(foot=Foot.LEFT, direction=Direction.BACKWARD, edge=Edge.OUTSIDE)

# Fractions of entry-len and multiples of entry-angle for the curling
# entry of edge jumps.
_CURL = ((1 / 2, 2 / 3), (1 / 3, 1.0), (1 / 6, 5 / 3), (1 / 12, 7 / 3))


class Jump:
    """Values shared by the parts of one jump."""

    def __init__(self, mv: MoveInstance, ctx: RenderContext):
        self.mv = mv
        self.ctx = ctx
        self.code = mv.code
        self.regular = str(self.code) == mv.definition.codes[0]
        self.sign = 1 if self.regular else -1
        self.style = mv.text("style")
        self.label_offset = mv.number("label-offset")
        self.landing = REGULAR_LANDING if self.regular else GOOFY_LANDING
        self.seq = Sequence(self.code)

    @property
    def jump_label(self) -> str:
        rotations = (self.mv.statement.half_turns or 0) // 2
        return self.mv.text("jump-label") or f"{rotations}{self.mv.definition.suffix[1:]}"

    def entry(self, parts: int = 1) -> "Jump":
        """Take-off edge, as one curve or as a tightening curl of `parts` curves."""
        length = self.mv.number("entry-len")
        angle = self.mv.number("entry-angle")
        shapes = ((1.0, 1.0),) if parts == 1 else _CURL[:parts]
        for idx, (len_frac, angle_mult) in enumerate(shapes):
            if idx == 0:
                figure = curve(
                    self.code,
                    length * len_frac,
                    angle * angle_mult,
                    self.ctx,
                    style=self.style,
                    label=str(self.code),
                    label_offset=self.label_offset,
                    number=self.ctx.number,
                    beats=self.ctx.beats,
                    transition=transition_label(self.mv),
                )
            else:
                figure = curve(
                    self.code,
                    length * len_frac,
                    angle * angle_mult,
                    self.ctx,
                    style=self.style,
                    label="",
                )
            self.seq.add(figure)
        return self

    def hop(self, foot: Foot) -> "Jump":
        air = Code(foot=foot, direction=Direction.BACKWARD)
        self.seq.add(hop(air, self.ctx, self.jump_label, label_offset=self.label_offset))
        return self

    def shift(self, side: float, fwd: float, rotate: float = 0) -> "Jump":
        self.seq.shift(side=self.sign * side, fwd=fwd, rotate=self.sign * rotate)
        return self

    def land(self) -> Figure:
        self.seq.shift(code=self.landing)
        self.seq.add(
            curve(
                self.landing,
                self.mv.number("exit-len"),
                self.mv.number("exit-angle"),
                self.ctx,
                style=self.style,
                label_offset=self.label_offset,
            )
        )
        return self.seq.finish()


def _edge_jump(parts: int, regular_air: Foot):
    def geometry(mv: MoveInstance, ctx: RenderContext) -> Figure:
        jump = Jump(mv, ctx)
        air = regular_air if jump.regular else regular_air.opposite()
        return jump.entry(parts).hop(air).shift(side=-200, fwd=-150, rotate=120).land()

    return geometry


def _toe_jump(first: tuple[float, float], second: tuple[float, float]):
    def geometry(mv: MoveInstance, ctx: RenderContext) -> Figure:
        jump = Jump(mv, ctx)
        air = Foot.RIGHT if jump.regular else Foot.LEFT
        jump.entry().shift(*first).hop(air)
        return jump.shift(*second).land()

    return geometry


def jump_params() -> tuple:
    return (
        number(
            "entry-angle",
            "Angle of the take-off edge, in degrees",
            30,
            ParamRange.STRICTLY_POSITIVE,
            ShorthandKind.TIGHTNESS,
            5,
        ),
        number(
            "entry-len",
            "Length of the take-off edge, in centimetres",
            600,
            ParamRange.STRICTLY_POSITIVE,
            ShorthandKind.LENGTH,
            100,
        ),
        number("exit-angle", "Angle of the landing edge, in degrees", 40, ParamRange.STRICTLY_POSITIVE),
        number("exit-len", "Length of the landing edge, in centimetres", 400, ParamRange.STRICTLY_POSITIVE),
        text("style", "Line style", choices=STYLES),
        text("transition-label", "Label for the change of foot before the take-off"),
        text("jump-label", "Replacement label for the jump"),
        number("label-offset", "Label distance as a percentage, -1 for the document setting", -1),
    )


def _jump(name: str, suffix: str, codes: tuple[str, str], geometry) -> MoveDef:
    return MoveDef(
        name=name,
        kind=MoveKind.JUMP,
        summary=f"{name} jump, with the number of rotations before the suffix",
        example=f"{codes[0]}-1{suffix[1:]}",
        params=jump_params(),
        codes=codes,
        suffix=suffix,
        geometry=geometry,
    )


SALCHOW = _jump("Salchow", "-S", ("LBI", "RBI"), _edge_jump(4, Foot.LEFT))
TOE_LOOP = _jump("ToeLoop", "-T", ("RBO", "LBO"), _toe_jump((100, 50), (-50, 150)))
LOOP_JUMP = _jump("LoopJump", "-Lo", ("RBO", "LBO"), _edge_jump(4, Foot.RIGHT))
FLIP = _jump("Flip", "-F", ("LBI", "RBI"), _toe_jump((100, 50), (-50, 150)))
LUTZ = _jump("Lutz", "-Lz", ("LBO", "RBO"), _toe_jump((50, 50), (-50, 100)))
AXEL = _jump("Axel", "-A", ("LFO", "RFO"), _edge_jump(3, Foot.RIGHT))

MOVES = (SALCHOW, TOE_LOOP, LOOP_JUMP, FLIP, LUTZ, AXEL)
