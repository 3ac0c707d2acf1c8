"""Move definitions, resolved instances and the figures they draw.

Every move and command is a `MoveDef` in a closed catalog: its kind,
reference metadata, parameter schema and a geometry function. Geometry
functions are pure: given a resolved `MoveInstance` and a `RenderContext`
they return a `Figure` drawn in the move's own frame (entry at the origin,
heading 0), which the layout stage places at the skater's pose.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Union

from pydantic import BaseModel, Field

from skreate.errors import InternalError
from skreate.models import (
    Code,
    ParamInfo,
    ParamValue,
    Pose,
    RenderContext,
    ShorthandKind,
    Statement,
    SvgElement,
    TextLabel,
    fmt_num,
)

STYLES = ("", "dashed", "dotted")

DASHES = {
    "dashed": "50 30",
    "dotted": "10 15",
}


class MoveKind(str, Enum):
    """Closed set of move and command kinds."""

    EDGE = "edge"
    STRAIGHT = "straight"
    HOP = "hop"
    TURN = "turn"
    TWIZZLE = "twizzle"
    JUMP = "jump"
    SHIFT = "shift"
    WARP = "warp"
    LABEL = "label"
    RINK = "rink"
    INFO = "info"
    TITLE = "title"
    TEXT = "text"

    @property
    def is_skating(self) -> bool:
        """Whether statements of this kind are numbered and take a start code."""
        return self in _SKATING_KINDS


_SKATING_KINDS = frozenset(
    {MoveKind.EDGE, MoveKind.STRAIGHT, MoveKind.HOP, MoveKind.TURN, MoveKind.TWIZZLE, MoveKind.JUMP}
)


@dataclass(frozen=True)
class RelativeExit:
    """Exit pose relative to the entry pose, in the entry frame."""

    side: float = 0.0
    fwd: float = 0.0
    rotate: float = 0.0
    code: Optional[Code] = None


@dataclass(frozen=True)
class AbsoluteExit:
    """Exit pose given in world coordinates."""

    x: float
    y: float
    heading: float
    code: Optional[Code] = None


Exit = Union[RelativeExit, AbsoluteExit]


@dataclass
class Figure:
    """What one move draws.

    Shapes, labels and points are in the move's own frame unless
    `absolute` is set, in which case they are world coordinates.
    """

    shapes: list[SvgElement] = field(default_factory=list)
    labels: list[TextLabel] = field(default_factory=list)
    points: list[tuple[float, float]] = field(default_factory=list)
    exit: Optional[Exit] = None
    absolute: bool = False
    title: Optional[str] = None

    @property
    def drawn(self) -> bool:
        return bool(self.shapes) or any(label.displayed for label in self.labels)


def placement(pose: Pose) -> str:
    """SVG transform placing a move-local frame at a pose."""
    return f"translate({fmt_num(pose.x)} {fmt_num(pose.y)}) rotate({fmt_num(pose.heading)})"


def apply_style(path: SvgElement, style: str) -> SvgElement:
    if style in DASHES:
        path.set("stroke-dasharray", DASHES[style])
    return path


class MoveInfo(BaseModel):
    """Reference metadata for one catalog entry."""

    name: str
    summary: str
    example: str
    visible: bool
    params: list[ParamInfo] = Field(default_factory=list)


class MoveDef(BaseModel):
    """One entry of the move catalog."""

    name: str
    kind: MoveKind
    summary: str
    example: str
    visible: bool = True
    params: tuple[ParamInfo, ...] = ()
    codes: tuple[str, ...] = Field(default=(), description="Start codes accepted by a skating move")
    suffix: str = ""
    geometry: Callable[..., Figure]
    check: Optional[Callable[[dict[str, ParamValue]], Optional[str]]] = Field(
        None, description="Cross-parameter validation, returns an error message"
    )

    class Config:
        frozen = True

    def param(self, name: str) -> Optional[ParamInfo]:
        for info in self.params:
            if info.name == name:
                return info
        return None

    def slot_for(self, kind: ShorthandKind) -> Optional[ParamInfo]:
        """The parameter adjusted by shorthand markers of `kind`."""
        for info in self.params:
            if info.shorthand is kind:
                return info
        return None

    def defaults(self) -> dict[str, ParamValue]:
        return {info.name: info.default for info in self.params}

    def info(self) -> MoveInfo:
        return MoveInfo(
            name=self.name,
            summary=self.summary,
            example=self.example,
            visible=self.visible,
            params=list(self.params),
        )


class MoveInstance(BaseModel):
    """A catalog entry with every parameter slot resolved."""

    definition: MoveDef
    params: dict[str, ParamValue]
    statement: Statement

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def kind(self) -> MoveKind:
        return self.definition.kind

    @property
    def code(self) -> Code:
        if self.statement.code is None:
            raise InternalError(f"{self.name} has no start code")
        return self.statement.code

    def value(self, name: str) -> ParamValue:
        if name not in self.params:
            raise InternalError(f"{self.name} has no parameter {name}")
        return self.params[name]

    def number(self, name: str) -> int:
        value = self.value(name)
        if isinstance(value, bool) or not isinstance(value, int):
            raise InternalError(f"{self.name} parameter {name} is not a number")
        return value

    def text(self, name: str) -> str:
        value = self.value(name)
        if not isinstance(value, str):
            raise InternalError(f"{self.name} parameter {name} is not text")
        return value

    def flag(self, name: str) -> bool:
        value = self.value(name)
        if not isinstance(value, bool):
            raise InternalError(f"{self.name} parameter {name} is not a boolean")
        return value


class Sequence:
    """Lays sub-figures end to end in a compound move's own frame.

    Sub-figure shapes are wrapped in a transformed group; their labels and
    bound points are mapped into the compound frame.
    """

    def __init__(self, code: Code):
        self.pose = Pose(code=code)
        self.figure = Figure()

    def add(self, sub: Figure) -> "Sequence":
        pose = self.pose
        if sub.shapes:
            if pose.is_origin:
                self.figure.shapes.extend(sub.shapes)
            else:
                self.figure.shapes.append(SvgElement("g", {"transform": placement(pose)}, list(sub.shapes)))
        for label in sub.labels:
            x, y = pose.apply(label.x, label.y)
            self.figure.labels.append(label.model_copy(update={"x": x, "y": y}))
        self.figure.points.extend(pose.apply(px, py) for px, py in sub.points)
        if isinstance(sub.exit, RelativeExit):
            self.pose = pose.moved(sub.exit.side, sub.exit.fwd, sub.exit.rotate, sub.exit.code)
        elif sub.exit is not None:
            raise InternalError("compound moves cannot contain absolute moves")
        return self

    def shift(
        self,
        side: float = 0.0,
        fwd: float = 0.0,
        rotate: float = 0.0,
        code: Optional[Code] = None,
    ) -> "Sequence":
        self.pose = self.pose.moved(side, fwd, rotate, code)
        return self

    def label(self, text: str, fwd: float = 0.0, side: float = 0.0) -> "Sequence":
        x, y = self.pose.apply(side, fwd)
        self.figure.labels.append(TextLabel(x=x, y=y, text=text))
        return self

    def finish(self) -> Figure:
        pose = self.pose
        self.figure.exit = RelativeExit(side=pose.x, fwd=pose.y, rotate=pose.heading, code=pose.code)
        return self.figure


def curve_sign(code: Code) -> int:
    """+1 when the curve bends to local -x, -1 when it bends to +x."""
    return -1 if str(code) in ("LFO", "RFI", "LBI", "RBO") else 1


def arc_point(length: float, angle: float, sign: int, fraction: float) -> tuple[float, float]:
    """Point `fraction` of the way along an arc starting at the origin facing down."""
    theta = math.radians(angle * fraction)
    radius = length * 180.0 / (angle * math.pi)
    return (-sign * radius * (1 - math.cos(theta)), radius * math.sin(theta))


def curve(
    code: Code,
    length: float,
    angle: float,
    ctx: RenderContext,
    *,
    style: str = "",
    label: Optional[str] = None,
    label_offset: int = -1,
    number: Optional[int] = None,
    beats: Optional[int] = None,
    transition: Optional[str] = None,
) -> Figure:
    """A circular arc on an edge.

    `label` defaults to the code; a blank label is not drawn unless a
    move number is attached to it.
    """
    if angle <= 0 or length <= 0:
        raise InternalError(f"degenerate curve {code} len={length} angle={angle}")
    sign = curve_sign(code)
    radius = length * 180.0 / (angle * math.pi)
    end_x, end_y = arc_point(length, angle, sign, 1.0)
    big = 1 if angle > 180 else 0
    sweep = 0 if sign == -1 else 1
    path = SvgElement(
        "path",
        {
            "d": (
                f"M 0,0 a {fmt_num(radius)},{fmt_num(radius)} 0 {big} {sweep} "
                f"{fmt_num(end_x)},{fmt_num(end_y)}"
            )
        },
    )
    figure = Figure(
        shapes=[apply_style(path, style)],
        points=[arc_point(length, angle, sign, pct / 100.0) for pct in range(101)],
        exit=RelativeExit(side=end_x, fwd=end_y, rotate=sign * angle, code=code),
    )

    font_size = ctx.font_size
    offset = ctx.offset_for(label_offset)
    mid_x, mid_y = arc_point(length, angle, sign, 0.5)
    half = math.radians(angle / 2)
    # Unit vector from the arc midpoint towards the centre of the circle.
    inward = (-sign * math.cos(half), -math.sin(half))
    distance = 3 * font_size * offset
    text = str(code) if label is None else label
    figure.labels.append(
        TextLabel(
            x=mid_x + distance * inward[0],
            y=mid_y + distance * inward[1],
            text=text,
            number=number,
        )
    )
    if beats is not None:
        figure.labels.append(
            TextLabel(
                x=mid_x - distance * inward[0],
                y=mid_y - distance * inward[1],
                text=str(beats),
                style="fill:purple; font-weight:bold;",
            )
        )
    if transition:
        early_x, early_y = arc_point(length, angle, sign, 0.05)
        figure.labels.append(TextLabel(x=early_x + sign * 2 * font_size, y=early_y, text=transition))
    return figure


def straight(
    code: Code,
    length: float,
    ctx: RenderContext,
    *,
    style: str = "",
    label: Optional[str] = None,
    label_offset: int = -1,
    number: Optional[int] = None,
    beats: Optional[int] = None,
    transition: Optional[str] = None,
) -> Figure:
    """A straight line; two parallel lines when on both feet."""
    if code.foot.value == "B":
        d = f"M -5,0 l 0,{fmt_num(length)} M 5,0 l 0,{fmt_num(length)}"
    else:
        d = f"M 0,0 l 0,{fmt_num(length)}"
    path = apply_style(SvgElement("path", {"d": d}), style)
    figure = Figure(
        shapes=[path],
        points=[(0.0, 0.0), (0.0, float(length))],
        exit=RelativeExit(fwd=length, code=code),
    )
    offset = ctx.offset_for(label_offset)
    distance = 3 * ctx.font_size * offset
    figure.labels.append(
        TextLabel(x=distance, y=length / 2, text=str(code) if label is None else label, number=number)
    )
    if beats is not None:
        figure.labels.append(
            TextLabel(x=-distance, y=length / 2, text=str(beats), style="fill:purple; font-weight:bold;")
        )
    if transition:
        figure.labels.append(TextLabel(x=2 * ctx.font_size, y=length * 0.05, text=transition))
    return figure
