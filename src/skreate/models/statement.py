"""Parsed statements of the skating notation."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .base import Code, ElementKey, Span
from .params import ParamValue


class Prefix(str, Enum):
    """How a change of foot is performed before a move."""

    NONE = ""
    WIDE = "wd-"
    CROSS_FRONT = "xf-"
    CROSS_BEHIND = "xb-"

    @property
    def label(self) -> Optional[str]:
        """Short label drawn beside the start of the move."""
        return _PREFIX_LABELS[self]


_PREFIX_LABELS = {
    Prefix.NONE: None,
    Prefix.WIDE: "Wd",
    Prefix.CROSS_FRONT: "XF",
    Prefix.CROSS_BEHIND: "XB",
}


class StatementKind(str, Enum):
    """Kinds of statement produced by the parser."""

    MOVE = "move"
    COMMAND = "command"
    REPEAT_START = "repeat_start"
    REPEAT_END = "repeat_end"


TWIZZLE_SUFFIX = "-Tw"
JUMP_SUFFIXES = ("-S", "-T", "-Lo", "-F", "-Lz", "-A")


class ParamAssignment(BaseModel):
    """An explicit `name=value` parameter."""

    name: str
    value: ParamValue
    span: Span

    class Config:
        frozen = True


class Statement(BaseModel):
    """One statement of notation: a move, a command or a repeat marker."""

    kind: StatementKind
    span: Span

    # Timing prefix
    number: Optional[int] = Field(None, description="Explicit move number, `N)`")
    beats: Optional[int] = Field(None, description="Beat count, `/N`")

    # Move
    prefix: Prefix = Prefix.NONE
    code: Optional[Code] = None
    suffix: str = Field(default="", description="Turn/jump suffix without rotation count")
    half_turns: Optional[int] = Field(None, description="Rotation count of twizzles and jumps, in half turns")
    length: int = Field(default=0, ge=-3, le=3, description="Net length markers")
    tightness: int = Field(default=0, ge=-3, le=3, description="Net tightness markers")
    shorthand_span: Optional[Span] = None

    # Command
    command: Optional[str] = None

    params: list[ParamAssignment] = Field(default_factory=list)

    # Repeat markers
    repeat_count: int = 2
    mirrored: bool = False

    # Copy index once repeats are expanded
    repeat: int = 0

    class Config:
        frozen = True

    @property
    def key(self) -> ElementKey:
        return ElementKey.for_span(self.span, self.repeat)

    @property
    def suffix_text(self) -> str:
        """Suffix as written, including any rotation count."""
        if self.suffix == TWIZZLE_SUFFIX and self.half_turns is not None:
            whole, half = divmod(self.half_turns, 2)
            return f"{TWIZZLE_SUFFIX}{whole}{'.5' if half else ''}"
        if self.suffix in JUMP_SUFFIXES and self.half_turns is not None:
            return f"-{self.half_turns // 2}{self.suffix[1:]}"
        return self.suffix

    @property
    def rotations(self) -> Optional[float]:
        if self.half_turns is None:
            return None
        return self.half_turns / 2

    def param(self, name: str) -> Optional[ParamAssignment]:
        for assignment in self.params:
            if assignment.name == name:
                return assignment
        return None
