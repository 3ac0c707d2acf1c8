"""Base models and common types for skreate."""

import math
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Foot(str, Enum):
    """Which foot (or feet) the skater is on."""

    LEFT = "L"
    RIGHT = "R"
    BOTH = "B"

    def opposite(self) -> "Foot":
        if self is Foot.LEFT:
            return Foot.RIGHT
        if self is Foot.RIGHT:
            return Foot.LEFT
        return Foot.BOTH


class Direction(str, Enum):
    """Direction of travel."""

    FORWARD = "F"
    BACKWARD = "B"

    def opposite(self) -> "Direction":
        return Direction.BACKWARD if self is Direction.FORWARD else Direction.FORWARD


class Edge(str, Enum):
    """Blade edge in contact with the ice."""

    OUTSIDE = "O"
    INSIDE = "I"
    FLAT = ""

    def opposite(self) -> "Edge":
        if self is Edge.OUTSIDE:
            return Edge.INSIDE
        if self is Edge.INSIDE:
            return Edge.OUTSIDE
        return Edge.FLAT


class Span(BaseModel):
    """Location of a statement (or part of one) in the source text.

    Rows and columns are zero-based; `end` is exclusive.
    """

    row: int = Field(..., ge=0)
    start: int = Field(..., ge=0)
    end: int = Field(..., ge=0)

    class Config:
        frozen = True


class ElementKey(BaseModel):
    """Correlation key tying rendered elements back to the source text."""

    row: int
    start: int
    end: int
    repeat: int = Field(default=0, description="Index of the copy inside an expanded repeat")

    class Config:
        frozen = True

    @classmethod
    def for_span(cls, span: Span, repeat: int = 0) -> "ElementKey":
        return cls(row=span.row, start=span.start, end=span.end, repeat=repeat)

    @property
    def element_id(self) -> str:
        """Host-facing identifier, e.g. ``row_0_col_4_7_n1``."""
        base = f"row_{self.row}_col_{self.start}_{self.end}"
        if self.repeat:
            return f"{base}_n{self.repeat}"
        return base


class Code(BaseModel):
    """Skating code: foot, direction and edge, e.g. LFO or BF."""

    foot: Foot
    direction: Direction
    edge: Edge = Edge.FLAT

    class Config:
        frozen = True

    def __str__(self) -> str:
        return f"{self.foot.value}{self.direction.value}{self.edge.value}"

    @classmethod
    def parse(cls, text: str) -> Optional["Code"]:
        """Parse a complete code string, returning None if it is not one."""
        if len(text) not in (2, 3):
            return None
        try:
            foot = Foot(text[0])
            direction = Direction(text[1])
            edge = Edge(text[2:])
        except ValueError:
            return None
        if foot is Foot.BOTH and edge is not Edge.FLAT:
            return None
        return cls(foot=foot, direction=direction, edge=edge)

    @property
    def is_edged(self) -> bool:
        return self.edge is not Edge.FLAT

    def with_foot(self, foot: Foot) -> "Code":
        return Code(foot=foot, direction=self.direction, edge=self.edge)

    def opposite_foot(self) -> "Code":
        return Code(foot=self.foot.opposite(), direction=self.direction, edge=self.edge)

    def opposite_direction(self) -> "Code":
        return Code(foot=self.foot, direction=self.direction.opposite(), edge=self.edge)

    def opposite_edge(self) -> "Code":
        return Code(foot=self.foot, direction=self.direction, edge=self.edge.opposite())

    def mirrored(self) -> "Code":
        """Swap left and right feet, keeping direction and edge."""
        return self.opposite_foot()


START_CODE = Code(foot=Foot.BOTH, direction=Direction.FORWARD)


def normalize_heading(heading: float) -> float:
    """Bring a heading in degrees into [0, 360)."""
    result = heading % 360.0
    if result >= 360.0:
        result = 0.0
    return result + 0.0


class Pose(BaseModel):
    """Skater position, heading and current code.

    Coordinates are SVG coordinates: y grows down the page and heading 0
    faces down. Relative offsets are given as (side, fwd) in the skater's
    own frame.
    """

    x: float = 0.0
    y: float = 0.0
    heading: float = 0.0
    code: Code = START_CODE

    class Config:
        frozen = True

    def apply(self, side: float, fwd: float) -> tuple[float, float]:
        """Map a point in the skater's frame to world coordinates."""
        rad = math.radians(self.heading)
        cos, sin = math.cos(rad), math.sin(rad)
        return (self.x + side * cos - fwd * sin, self.y + side * sin + fwd * cos)

    def moved(
        self,
        side: float = 0.0,
        fwd: float = 0.0,
        rotate: float = 0.0,
        code: Optional[Code] = None,
    ) -> "Pose":
        """Return the pose after a relative movement."""
        x, y = self.apply(side, fwd)
        return Pose(
            x=x,
            y=y,
            heading=normalize_heading(self.heading + rotate),
            code=code if code is not None else self.code,
        )

    @property
    def is_origin(self) -> bool:
        return self.x == 0 and self.y == 0 and self.heading == 0


class Bounds(BaseModel):
    """Axis-aligned bounding box."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    class Config:
        frozen = True

    @classmethod
    def around(cls, points: list[tuple[float, float]]) -> Optional["Bounds"]:
        """Smallest box containing all points, or None for no points."""
        if not points:
            return None
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        return cls(min_x=min(xs), min_y=min(ys), max_x=max(xs), max_y=max(ys))

    def union(self, other: Optional["Bounds"]) -> "Bounds":
        if other is None:
            return self
        return Bounds(
            min_x=min(self.min_x, other.min_x),
            min_y=min(self.min_y, other.min_y),
            max_x=max(self.max_x, other.max_x),
            max_y=max(self.max_y, other.max_y),
        )

    def grown(self, dx: float, dy: float) -> "Bounds":
        return Bounds(
            min_x=self.min_x - dx,
            min_y=self.min_y - dy,
            max_x=self.max_x + dx,
            max_y=self.max_y + dy,
        )

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def diagonal(self) -> float:
        return math.hypot(self.width, self.height)
