"""Layout commands: repositioning, labels, the rink, rendering options and titles.

None of these draw skating edges. `Shift` and `Warp` move the skater;
the rest leave the pose alone.
"""

from typing import Optional

from skreate.models import Code, ParamRange, ParamValue, RenderContext, SvgElement, TextLabel
from skreate.models.params import flag, number, text

from .base import AbsoluteExit, Figure, MoveDef, MoveInstance, MoveKind, RelativeExit

RINK_CORNER_MAX = 850
GOAL_WIDTH = 183
GOAL_DEPTH = 112
FACEOFF_RADIUS = 450


def _code_param(mv: MoveInstance) -> Optional[Code]:
    return Code.parse(mv.text("code")) if mv.text("code") else None


def check_code(params: dict[str, ParamValue]) -> Optional[str]:
    value = params["code"]
    if value and Code.parse(str(value)) is None:
        return f"{value!r} is not a valid code"
    return None


def shift_geometry(mv: MoveInstance, ctx: RenderContext) -> Figure:
    return Figure(
        exit=RelativeExit(
            side=mv.number("side"),
            fwd=mv.number("fwd"),
            rotate=mv.number("rotate"),
            code=_code_param(mv),
        )
    )


def warp_geometry(mv: MoveInstance, ctx: RenderContext) -> Figure:
    return Figure(
        exit=AbsoluteExit(
            x=mv.number("x"),
            y=mv.number("y"),
            heading=mv.number("dir"),
            code=_code_param(mv),
        )
    )


def label_geometry(mv: MoveInstance, ctx: RenderContext) -> Figure:
    return Figure(
        labels=[
            TextLabel(
                x=mv.number("side"),
                y=mv.number("fwd"),
                text=mv.text("text"),
                font_size=mv.number("font-size") or None,
                rotate=mv.number("rotate"),
            )
        ]
    )


def _line(x1: float, y1: float, dx: float, dy: float, colour: str) -> SvgElement:
    return SvgElement("path", {"d": f"M {x1},{y1} l {dx},{dy}", "style": f"stroke:{colour}; stroke-width:2;"})


def rink_geometry(mv: MoveInstance, ctx: RenderContext) -> Figure:
    width = mv.number("width")
    length = mv.number("length")
    corner = min(min(width, length) / 4, RINK_CORNER_MAX)
    mid_x = width / 2
    mid_y = length / 2
    shapes = [
        SvgElement(
            "rect",
            {
                "x": 0,
                "y": 0,
                "width": width,
                "height": length,
                "rx": corner,
                "ry": corner,
                "style": "stroke:black; stroke-width:2;",
            },
        )
    ]
    if mv.flag("centre-line"):
        shapes.append(_line(0, mid_y, width, 0, "red"))
    centre_circle = mv.number("centre-circle")
    if centre_circle:
        shapes.append(
            SvgElement("circle", {"cx": mid_x, "cy": mid_y, "r": centre_circle, "style": "stroke:red; stroke-width:2;"})
        )
    if mv.flag("centre-faceoff"):
        shapes.append(SvgElement("circle", {"cx": mid_x, "cy": mid_y, "r": 2, "style": "fill:red;"}))
    mid_lines = mv.number("mid-lines")
    if mid_lines:
        shapes.append(_line(0, mid_y - mid_lines, width, 0, "blue"))
        shapes.append(_line(0, mid_y + mid_lines, width, 0, "blue"))
    goal_lines = mv.number("goal-lines")
    if goal_lines:
        shapes.append(_line(0, goal_lines, width, 0, "red"))
        shapes.append(_line(0, length - goal_lines, width, 0, "red"))
        if mv.flag("goals"):
            for y in (goal_lines - GOAL_DEPTH, length - goal_lines):
                shapes.append(
                    SvgElement(
                        "rect",
                        {
                            "x": mid_x - GOAL_WIDTH / 2,
                            "y": y,
                            "width": GOAL_WIDTH,
                            "height": GOAL_DEPTH,
                            "style": "stroke:red; stroke-width:2;",
                        },
                    )
                )
        if mv.flag("faceoffs"):
            for cy in (goal_lines + 600, length - goal_lines - 600):
                for cx in (mid_x - width / 4, mid_x + width / 4):
                    shapes.append(
                        SvgElement(
                            "circle",
                            {"cx": cx, "cy": cy, "r": FACEOFF_RADIUS, "style": "stroke:red; stroke-width:2;"},
                        )
                    )
                    shapes.append(SvgElement("circle", {"cx": cx, "cy": cy, "r": 15, "style": "fill:red;"}))
    return Figure(shapes=shapes, points=[(0, 0), (width, length)], absolute=True)


def info_geometry(mv: MoveInstance, ctx: RenderContext) -> Figure:
    return Figure()


def title_geometry(mv: MoveInstance, ctx: RenderContext) -> Figure:
    title = mv.text("text")
    x = mv.number("x")
    if x == -1:
        x = (ctx.bounds.min_x + ctx.bounds.max_x) / 2 if ctx.bounds is not None else 0
    font_size = mv.number("font-size") or 2 * ctx.font_size
    return Figure(
        labels=[TextLabel(x=x, y=mv.number("y"), text=title, font_size=font_size)],
        absolute=True,
        title=title,
    )


def text_geometry(mv: MoveInstance, ctx: RenderContext) -> Figure:
    return Figure(
        labels=[
            TextLabel(
                x=mv.number("x"),
                y=mv.number("y"),
                text=mv.text("text"),
                font_size=mv.number("font-size") or None,
                rotate=mv.number("rotate"),
            )
        ],
        points=[(mv.number("x"), mv.number("y"))],
        absolute=True,
    )


SHIFT = MoveDef(
    name="Shift",
    kind=MoveKind.SHIFT,
    summary="Move the skater relative to their current position and direction",
    example="Shift [fwd=100,side=50,rotate=90]",
    visible=False,
    params=(
        number("fwd", "Distance to move forward, in centimetres", 0),
        number("side", "Distance to move sideways, in centimetres", 0),
        number("rotate", "Angle to turn clockwise, in degrees", 0),
        text("code", "New skating code, e.g. RBO"),
    ),
    geometry=shift_geometry,
    check=check_code,
)

WARP = MoveDef(
    name="Warp",
    kind=MoveKind.WARP,
    summary="Move the skater to an absolute position and direction",
    example="Warp [x=200,y=400,dir=90]",
    visible=False,
    params=(
        number("x", "Horizontal position, in centimetres", 0),
        number("y", "Vertical position, in centimetres", 0),
        number("dir", "Direction in degrees, 0 is down the page", 0, ParamRange.POSITIVE),
        text("code", "New skating code, e.g. RBO"),
    ),
    geometry=warp_geometry,
    check=check_code,
)

LABEL = MoveDef(
    name="Label",
    kind=MoveKind.LABEL,
    summary="Text placed relative to the skater",
    example='Label [text="Turn here",side=100]',
    visible=False,
    params=(
        text("text", "Text to display"),
        number("fwd", "Distance ahead of the skater, in centimetres", 0),
        number("side", "Distance beside the skater, in centimetres", 0),
        number("font-size", "Font size, 0 for the document setting", 0, ParamRange.POSITIVE),
        number("rotate", "Rotation of the text, in degrees", 0),
    ),
    geometry=label_geometry,
)

RINK = MoveDef(
    name="Rink",
    kind=MoveKind.RINK,
    summary="Draw the outline and markings of a rink",
    example="Rink [width=3000,length=6000]",
    params=(
        number("width", "Width of the rink, in centimetres", 3000, ParamRange.STRICTLY_POSITIVE),
        number("length", "Length of the rink, in centimetres", 6100, ParamRange.STRICTLY_POSITIVE),
        flag("centre-line", "Draw the centre line", True),
        number("centre-circle", "Radius of the centre circle, 0 for none", 400, ParamRange.POSITIVE),
        flag("centre-faceoff", "Draw the centre face-off spot", True),
        number("mid-lines", "Distance of the blue lines from the centre line, 0 for none", 800, ParamRange.POSITIVE),
        number("goal-lines", "Distance of the goal lines from the ends, 0 for none", 0, ParamRange.POSITIVE),
        flag("goals", "Draw goals behind the goal lines"),
        flag("faceoffs", "Draw end-zone face-off circles"),
    ),
    geometry=rink_geometry,
)

INFO = MoveDef(
    name="Info",
    kind=MoveKind.INFO,
    summary="Set rendering options for the rest of the diagram",
    example="Info [markers=true,grid=100]",
    visible=False,
    params=(
        flag("markers", "Show markers at the start and end of each move"),
        flag("bounds", "Show the bounding box of the diagram"),
        number("grid", "Spacing of a background grid, 0 for none", 0, ParamRange.POSITIVE),
        number("margin-x", "Horizontal margin around the diagram", 50, ParamRange.POSITIVE),
        number("margin-y", "Vertical margin around the diagram", 50, ParamRange.POSITIVE),
        flag("move-bounds", "Show the bounding box of each move"),
        number("font-size", "Font size, 0 or less to scale with the diagram", -1),
        number("stroke-width", "Line width, 0 to scale with the diagram", 0, ParamRange.POSITIVE),
        number("label-offset", "Label distance as a percentage, negative for the other side, -1 for the configured default", -1),
        flag("auto-count", "Number the moves automatically"),
    ),
    geometry=info_geometry,
)

TITLE = MoveDef(
    name="Title",
    kind=MoveKind.TITLE,
    summary="Title of the diagram",
    example='Title [text="Waltz"]',
    visible=False,
    params=(
        text("text", "Title text"),
        number("x", "Horizontal position, -1 to centre", -1),
        number("y", "Vertical position", 100),
        number("font-size", "Font size, 0 for twice the document setting", 0, ParamRange.POSITIVE),
    ),
    geometry=title_geometry,
)

TEXT = MoveDef(
    name="Text",
    kind=MoveKind.TEXT,
    summary="Text at an absolute position",
    example='Text [text="Judges",x=1500,y=-100]',
    visible=False,
    params=(
        text("text", "Text to display"),
        number("x", "Horizontal position", 100),
        number("y", "Vertical position", 100),
        number("font-size", "Font size, 0 for the document setting", 0, ParamRange.POSITIVE),
        number("rotate", "Rotation of the text, in degrees", 0),
    ),
    geometry=text_geometry,
)

COMMANDS = (SHIFT, WARP, LABEL, RINK, INFO, TITLE, TEXT)
