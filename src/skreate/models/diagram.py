"""Diagram model: SVG element tree, labels, render options and the laid-out diagram."""

from typing import Any, Callable, Optional, Union

from pydantic import BaseModel, Field

from .base import Bounds, ElementKey, Pose

AttrValue = Union[str, int, float]


def fmt_num(value: float) -> str:
    """Format a coordinate deterministically: integers bare, others to 3 places."""
    rounded = round(float(value), 3)
    if rounded == int(rounded):
        return str(int(rounded))
    return f"{rounded:.3f}".rstrip("0").rstrip(".")


def escape_attr(value: AttrValue) -> str:
    if isinstance(value, str):
        return value.replace("&", "&amp;").replace("<", "&lt;").replace('"', "&quot;")
    return fmt_num(value)


def escape_text(value: str) -> str:
    return value.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


class SvgElement:
    """A node of the SVG output tree.

    Attributes are written in insertion order; numeric attribute values
    go through `fmt_num`.
    """

    def __init__(
        self,
        name: str,
        attrs: Optional[dict[str, AttrValue]] = None,
        children: Optional[list[Union["SvgElement", str]]] = None,
    ):
        self.name = name
        self.attrs: dict[str, AttrValue] = dict(attrs or {})
        self.children: list[Union[SvgElement, str]] = list(children or [])

    def add(self, child: Union["SvgElement", str]) -> "SvgElement":
        self.children.append(child)
        return self

    def set(self, name: str, value: AttrValue) -> "SvgElement":
        self.attrs[name] = value
        return self

    def write_svg(self, write: Callable[[str], Any]) -> None:
        write(f"<{self.name}")
        for name, value in self.attrs.items():
            write(f' {name}="{escape_attr(value)}"')
        if not self.children:
            write("/>")
            return
        write(">")
        block = any(isinstance(child, SvgElement) for child in self.children) and self.name != "text"
        if block:
            write("\n")
        for child in self.children:
            if isinstance(child, SvgElement):
                child.write_svg(write)
                if block:
                    write("\n")
            else:
                write(escape_text(child))
        write(f"</{self.name}>")

    def to_string(self) -> str:
        parts: list[str] = []
        self.write_svg(parts.append)
        return "".join(parts)

    def __repr__(self) -> str:
        return f"SvgElement({self.name}, {self.attrs}, {self.children})"


class TextLabel(BaseModel):
    """A label anchored at a point, in move-local or world coordinates."""

    x: float
    y: float
    text: str
    number: Optional[int] = Field(None, description="Move number shown before the text")
    font_size: Optional[int] = Field(None, description="Explicit font size, overrides the scale")
    rotate: float = 0.0
    style: Optional[str] = None

    class Config:
        frozen = True

    @property
    def displayed(self) -> bool:
        return self.number is not None or bool(self.text.strip())


class RenderOptions(BaseModel):
    """Rendering options in force at one point of the sequence.

    Document-wide options come from any `Info` command; the rest are
    replaced by each `Info` as the layout reaches it.
    """

    title: str
    margin_x: int = 50
    margin_y: int = 50
    grid: int = 0
    show_bounds: bool = False
    show_move_bounds: bool = False
    markers: bool = False
    font_size: Optional[int] = Field(None, description="None scales with the diagram size")
    stroke_width: Optional[int] = Field(None, description="None scales with the diagram size")
    label_offset: int = 100
    auto_count: bool = False

    class Config:
        frozen = True


class RenderContext(BaseModel):
    """Per-move view of the options, as seen by geometry functions."""

    font_size: int = 10
    label_offset: int = 100
    number: Optional[int] = None
    beats: Optional[int] = None
    bounds: Optional[Bounds] = Field(None, description="Bounds of the skated figures")

    class Config:
        frozen = True

    def offset_for(self, label_offset: int) -> float:
        """Label offset fraction; -1 means use the document-wide value."""
        if label_offset == -1:
            return self.label_offset / 100.0
        return label_offset / 100.0


class RenderedElement(BaseModel):
    """An element emitted for one statement."""

    key: ElementKey
    element_id: str
    element: Any = Field(..., description="SvgElement")

    class Config:
        arbitrary_types_allowed = True


class PlacedMove(BaseModel):
    """Layout record for one statement."""

    key: ElementKey
    name: str
    start: Pose
    end: Pose
    number: Optional[int] = None
    beats: int = 1
    rendered: bool = False


class Diagram(BaseModel):
    """Everything the SVG emitter needs, in emission order."""

    title: str
    description: str = ""
    bounds: Bounds
    content_bounds: Optional[Bounds] = None
    defs: list[Any] = Field(default_factory=list)
    background: list[Any] = Field(default_factory=list)
    elements: list[RenderedElement] = Field(default_factory=list)
    moves: list[PlacedMove] = Field(default_factory=list)

    class Config:
        arbitrary_types_allowed = True

    @property
    def element_ids(self) -> list[str]:
        """One id per rendered statement, in emission order."""
        return [mv.key.element_id for mv in self.moves if mv.rendered]

    @property
    def timings(self) -> list[int]:
        return [mv.beats for mv in self.moves if mv.rendered]
