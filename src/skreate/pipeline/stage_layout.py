"""Layout Stage - Thread the skater's pose through the moves.

Three passes over the resolved moves:
1. document options: grid, bounds display and margins from any `Info`
2. bounds: walk the moves to find where everything lands
3. render: walk again with the final font size and emit elements

Pose and render options are local to one `layout` call; `Info` replaces
the options for the moves that follow it.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

from skreate.config import settings
from skreate.models import (
    Bounds,
    Diagram,
    Foot,
    PlacedMove,
    Pose,
    Prefix,
    RenderContext,
    RenderedElement,
    RenderOptions,
    SvgElement,
    TextLabel,
    fmt_num,
    normalize_heading,
)
from skreate.moves import AbsoluteExit, Figure, MoveInstance, MoveKind, RelativeExit, placement

logger = logging.getLogger(__name__)

MARKER_PATH = "M 0,0 l 10,0 l -20,0 l 10,0 l 0,20 l 8,-8 l -8,8 l -8,-8 l 8,8 l 0,-30 l 0,10"
START_MARK = "start-mark"
END_MARK = "end-mark"

# (upper limit of bounds diagonal, value)
FONT_SIZES = ((500, 10), (800, 12), (933, 14), (1067, 16), (1200, 18), (1600, 20), (2400, 22))
LARGEST_FONT = 24
STROKE_WIDTHS = ((1000, 1), (1600, 2), (2400, 3))
WIDEST_STROKE = 4

# Grids needing more lines than this across both axes are not drawn.
MAX_GRID_LINES = 1000

# Lateral offset (side, fwd) when changing from the left to the right foot;
# the right-to-left offset mirrors the side component.
FOOT_CHANGE = {
    Prefix.NONE: (-36.0, 0.0),
    Prefix.WIDE: (-72.0, 0.0),
    Prefix.CROSS_FRONT: (18.0, 18.0),
    Prefix.CROSS_BEHIND: (18.0, -18.0),
}


def auto_font_size(bounds: Optional[Bounds]) -> int:
    """Font size that scales with the size of the diagram."""
    diagonal = bounds.diagonal if bounds is not None else 0.0
    for limit, size in FONT_SIZES:
        if diagonal < limit:
            return size
    return LARGEST_FONT


def auto_stroke_width(bounds: Optional[Bounds]) -> int:
    """Line width that scales with the size of the diagram."""
    diagonal = bounds.diagonal if bounds is not None else 0.0
    for limit, width in STROKE_WIDTHS:
        if diagonal < limit:
            return width
    return WIDEST_STROKE


def pre_transition(prefix: Prefix, current: Foot, target: Foot) -> tuple[float, float]:
    """Offset (side, fwd) applied before a move that changes foot."""
    if current is target or current is Foot.BOTH:
        return (0.0, 0.0)
    if target is Foot.BOTH:
        side = FOOT_CHANGE[Prefix.WIDE if prefix is Prefix.WIDE else Prefix.NONE][0] / 2
        return (side if current is Foot.LEFT else -side, 0.0)
    side, fwd = FOOT_CHANGE[prefix]
    if current is Foot.RIGHT:
        side = -side
    return (side, fwd)


@dataclass
class Step:
    """One move placed in the world."""

    mv: MoveInstance
    start: Pose
    end: Pose
    figure: Figure
    options: RenderOptions
    number: Optional[int]

    def world_points(self) -> list[tuple[float, float]]:
        if self.figure.absolute:
            return list(self.figure.points)
        return [self.start.apply(x, y) for x, y in self.figure.points]

    def world_label(self, label: TextLabel) -> TextLabel:
        if self.figure.absolute:
            return label
        x, y = self.start.apply(label.x, label.y)
        return label.model_copy(update={"x": x, "y": y})


class LayoutEngine:
    """Lays out resolved moves into a Diagram.

    Starts at (0, 0) facing down the page on both feet.
    """

    def __init__(self, title: Optional[str] = None, margin: Optional[int] = None):
        margin = settings.margin if margin is None else margin
        self.base_options = RenderOptions(
            title=title or settings.title,
            margin_x=margin,
            margin_y=margin,
            label_offset=settings.label_offset,
        )

    def document_options(self, instances: list[MoveInstance]) -> tuple[RenderOptions, bool]:
        """Options that apply to the whole document, and whether markers are ever shown."""
        options = self.base_options
        markers = False
        for mv in instances:
            if mv.kind is not MoveKind.INFO:
                continue
            options = options.model_copy(
                update={
                    "grid": mv.number("grid"),
                    "show_bounds": mv.flag("bounds"),
                    "show_move_bounds": mv.flag("move-bounds"),
                    "margin_x": mv.number("margin-x"),
                    "margin_y": mv.number("margin-y"),
                }
            )
            markers = markers or mv.flag("markers")
        return options, markers

    def apply_info(self, options: RenderOptions, mv: MoveInstance) -> RenderOptions:
        font_size = mv.number("font-size")
        stroke_width = mv.number("stroke-width")
        label_offset = mv.number("label-offset")
        return options.model_copy(
            update={
                "markers": mv.flag("markers"),
                "font_size": font_size if font_size > 0 else None,
                "stroke_width": stroke_width or None,
                "label_offset": self.base_options.label_offset if label_offset == -1 else label_offset,
                "auto_count": mv.flag("auto-count"),
            }
        )

    def walk(
        self,
        instances: list[MoveInstance],
        options: RenderOptions,
        content: Optional[Bounds] = None,
    ) -> list[Step]:
        """Thread the pose through every move."""
        pose = Pose()
        started = False
        next_number: Optional[int] = None
        steps = []
        for mv in instances:
            if mv.kind is MoveKind.INFO:
                options = self.apply_info(options, mv)
                next_number = 1 if options.auto_count else None

            number = None
            if mv.kind.is_skating:
                explicit = mv.statement.number
                if explicit is not None:
                    number = explicit or None
                    if next_number is not None:
                        next_number = explicit + 1
                elif next_number is not None:
                    number = next_number
                    next_number += 1

                if started:
                    side, fwd = pre_transition(mv.statement.prefix, pose.code.foot, mv.code.foot)
                    pose = pose.moved(side, fwd, code=mv.code)
                else:
                    pose = pose.model_copy(update={"code": mv.code})
                    started = True

            ctx = RenderContext(
                font_size=options.font_size or auto_font_size(content),
                label_offset=options.label_offset,
                number=number,
                beats=mv.statement.beats,
                bounds=content,
            )
            figure = mv.definition.geometry(mv, ctx)
            end = self.exit_pose(pose, figure)
            steps.append(Step(mv=mv, start=pose, end=end, figure=figure, options=options, number=number))
            pose = end
        return steps

    @staticmethod
    def exit_pose(pose: Pose, figure: Figure) -> Pose:
        exit = figure.exit
        if isinstance(exit, RelativeExit):
            return pose.moved(exit.side, exit.fwd, exit.rotate, exit.code)
        if isinstance(exit, AbsoluteExit):
            return Pose(
                x=exit.x,
                y=exit.y,
                heading=normalize_heading(exit.heading),
                code=exit.code if exit.code is not None else pose.code,
            )
        return pose

    def layout(self, instances: list[MoveInstance], description: str = "") -> Diagram:
        """Lay out resolved moves into a diagram."""
        options, markers = self.document_options(instances)

        content: Optional[Bounds] = None
        for step in self.walk(instances, options):
            bounds = Bounds.around(step.world_points())
            if bounds is not None:
                content = bounds.union(content)
        empty = Bounds(min_x=0, min_y=0, max_x=0, max_y=0)
        outer = (content or empty).grown(options.margin_x, options.margin_y)
        logger.debug("content bounds %s, outer bounds %s", content, outer)

        diagram = Diagram(
            title=options.title,
            description=description,
            bounds=outer,
            content_bounds=content,
        )
        if markers:
            diagram.defs.extend(self.marker_defs())
        diagram.background.extend(self.background(options, outer, content))

        def_ids: dict[str, str] = {}
        for step in self.walk(instances, options, content):
            if step.figure.title is not None:
                diagram.title = step.figure.title
            self.render_step(diagram, step, def_ids, content)
        return diagram

    @staticmethod
    def marker_defs() -> list[SvgElement]:
        return [
            SvgElement("path", {"id": START_MARK, "d": MARKER_PATH, "style": "stroke:green;"}),
            SvgElement("path", {"id": END_MARK, "d": MARKER_PATH, "style": "stroke:red;"}),
        ]

    @staticmethod
    def background(options: RenderOptions, outer: Bounds, content: Optional[Bounds]) -> list[SvgElement]:
        elements = []
        grid = options.grid
        if grid and (outer.width + outer.height) / grid > MAX_GRID_LINES:
            logger.warning("grid of %d would need more than %d lines, not drawing it", grid, MAX_GRID_LINES)
            grid = 0
        if grid:
            x = math.ceil(outer.min_x / grid) * grid
            while x <= outer.max_x:
                d = f"M {fmt_num(x)},{fmt_num(outer.min_y)} L {fmt_num(x)},{fmt_num(outer.max_y)}"
                elements.append(_grid_line(d, x == 0))
                x += grid
            y = math.ceil(outer.min_y / grid) * grid
            while y <= outer.max_y:
                d = f"M {fmt_num(outer.min_x)},{fmt_num(y)} L {fmt_num(outer.max_x)},{fmt_num(y)}"
                elements.append(_grid_line(d, y == 0))
                y += grid
        if options.show_bounds:
            elements.append(_rect(outer, "red"))
            if content is not None:
                elements.append(_rect(content, "green"))
        return elements

    def render_step(
        self,
        diagram: Diagram,
        step: Step,
        def_ids: dict[str, str],
        content: Optional[Bounds],
    ) -> None:
        mv = step.mv
        figure = step.figure
        key = mv.statement.key
        base_id = key.element_id
        font_size = step.options.font_size or auto_font_size(content)
        stroke_width = step.options.stroke_width or auto_stroke_width(content)
        emitted: list[SvgElement] = []

        if figure.shapes and figure.absolute:
            emitted.append(SvgElement("g", {}, list(figure.shapes)))
        elif figure.shapes:
            group = SvgElement("g", {}, list(figure.shapes))
            body = group.to_string()
            if body not in def_ids:
                def_ids[body] = f"def_{len(def_ids)}"
                diagram.defs.append(group.set("id", def_ids[body]))
            emitted.append(
                SvgElement(
                    "use",
                    {
                        "xlink:href": f"#{def_ids[body]}",
                        "transform": placement(step.start),
                        "style": f"stroke:black; stroke-width:{stroke_width};",
                    },
                )
            )

        for label in figure.labels:
            if label.displayed:
                emitted.append(_text(step.world_label(label), font_size))

        for idx, element in enumerate(emitted):
            element_id = base_id if idx == 0 else f"{base_id}_{idx}"
            element.attrs = {"id": element_id, **element.attrs}
            diagram.elements.append(RenderedElement(key=key, element_id=element_id, element=element))

        if mv.kind.is_skating and step.options.markers:
            for mark, pose in ((START_MARK, step.start), (END_MARK, step.end)):
                diagram.elements.append(
                    RenderedElement(
                        key=key,
                        element_id="",
                        element=SvgElement("use", {"xlink:href": f"#{mark}", "transform": placement(pose)}),
                    )
                )
        if step.options.show_move_bounds and not figure.absolute:
            bounds = Bounds.around(step.world_points())
            if bounds is not None:
                diagram.elements.append(RenderedElement(key=key, element_id="", element=_rect(bounds, "blue")))

        diagram.moves.append(
            PlacedMove(
                key=key,
                name=mv.name,
                start=step.start,
                end=step.end,
                number=step.number,
                beats=mv.statement.beats or 1,
                rendered=bool(emitted),
            )
        )
        logger.debug("%s %s at %s -> %s", key.element_id, mv.name, step.start, step.end)


def _grid_line(d: str, axis: bool) -> SvgElement:
    style = "stroke:gray; stroke-width:2;" if axis else "stroke:lightgray; stroke-width:1;"
    return SvgElement("path", {"d": d, "style": style})


def _rect(bounds: Bounds, colour: str) -> SvgElement:
    return SvgElement(
        "rect",
        {
            "x": bounds.min_x,
            "y": bounds.min_y,
            "width": bounds.width,
            "height": bounds.height,
            "style": f"stroke:{colour}; stroke-width:1;",
        },
    )


def _text(label: TextLabel, font_size: int) -> SvgElement:
    text = SvgElement(
        "text",
        {"x": label.x, "y": label.y, "font-size": label.font_size or font_size},
    )
    if label.style:
        text.set("style", label.style)
    if label.rotate:
        text.set("transform", f"rotate({fmt_num(label.rotate)} {fmt_num(label.x)} {fmt_num(label.y)})")
    if label.number is not None:
        text.add(SvgElement("tspan", {"style": "fill:purple; font-weight:bold;"}, [f"{label.number} "]))
    if label.text.strip():
        text.add(label.text)
    return text
