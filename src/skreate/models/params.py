"""Parameter schema and values for moves and commands."""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field

# Tagged union of parameter values; bool is checked before int everywhere
# since bool is a subclass of int.
ParamValue = Union[bool, int, str]


class ParamRange(str, Enum):
    """Accepted range of a parameter value."""

    TEXT = "text"
    ANY = "any"
    POSITIVE = "positive"
    STRICTLY_POSITIVE = "strictly-positive"
    BOOLEAN = "boolean"


class ShorthandKind(str, Enum):
    """Which shorthand markers adjust a parameter."""

    NONE = "none"
    LENGTH = "length"  # + / -
    TIGHTNESS = "tightness"  # > / <


SHORTHAND_MARKERS = {
    ShorthandKind.LENGTH: ("+", "-"),
    ShorthandKind.TIGHTNESS: (">", "<"),
}

MAX_SHORTHAND = 3


def same_value(a: ParamValue, b: ParamValue) -> bool:
    """Compare values without treating True as 1."""
    return type(a) is type(b) and a == b


def format_value(value: ParamValue) -> str:
    """Render a value the way it is written in notation."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class ParamInfo(BaseModel):
    """One slot of a move's parameter schema."""

    name: str
    doc: str
    default: ParamValue
    range: ParamRange = ParamRange.ANY
    shorthand: ShorthandKind = ShorthandKind.NONE
    increment: int = Field(default=0, description="Change per shorthand marker")
    choices: Optional[tuple[str, ...]] = None

    class Config:
        frozen = True

    def shorthand_value(self, count: int) -> int:
        """Value reached by `count` shorthand markers (negative for - or <)."""
        return int(self.default) + count * self.increment

    def shorthand_count(self, value: ParamValue) -> Optional[int]:
        """Number of markers that reach `value`, if shorthand can express it."""
        if self.shorthand is ShorthandKind.NONE or self.increment == 0:
            return None
        if isinstance(value, bool) or not isinstance(value, int):
            return None
        delta = value - int(self.default)
        if delta == 0 or delta % self.increment:
            return None
        count = delta // self.increment
        if abs(count) > MAX_SHORTHAND:
            return None
        return count

    def check(self, value: ParamValue) -> Optional[str]:
        """Return an error message if `value` is not acceptable."""
        if self.range is ParamRange.TEXT:
            if not isinstance(value, str):
                return f"expected text value for {self.name}"
            if self.choices is not None and value not in self.choices:
                options = ", ".join(f'"{c}"' for c in self.choices)
                return f"{format_value(value)} is not valid for {self.name}, must be one of {options}"
            return None
        if self.range is ParamRange.BOOLEAN:
            if not isinstance(value, bool):
                return f"expected boolean value for {self.name}"
            return None
        if isinstance(value, bool) or not isinstance(value, int):
            return f"expected number value for {self.name}"
        if self.range is ParamRange.POSITIVE and value < 0:
            return f"{value} out of range, must be >= 0"
        if self.range is ParamRange.STRICTLY_POSITIVE and value <= 0:
            return f"{value} out of range, must be > 0"
        return None


def number(
    name: str,
    doc: str,
    default: int,
    range: ParamRange = ParamRange.ANY,
    shorthand: ShorthandKind = ShorthandKind.NONE,
    increment: int = 0,
) -> ParamInfo:
    return ParamInfo(
        name=name,
        doc=doc,
        default=default,
        range=range,
        shorthand=shorthand,
        increment=increment,
    )


def text(name: str, doc: str, default: str = "", choices: Optional[tuple[str, ...]] = None) -> ParamInfo:
    return ParamInfo(name=name, doc=doc, default=default, range=ParamRange.TEXT, choices=choices)


def flag(name: str, doc: str, default: bool = False) -> ParamInfo:
    return ParamInfo(name=name, doc=doc, default=default, range=ParamRange.BOOLEAN)
