"""Parse Stage - Turn notation text into statements.

Splits the source into statements (newline or `;` separated, `#` comments
removed), parses each one, and expands repeat blocks into a flat list.
Parsing is fail-fast: the first problem raises a located ParseError.

Statement grammar, in order:
- optional move number `N)` then optional beat count `/N`
- either a command keyword (Shift, Warp, Rink, Info, Title, Text, Label)
  or an optional prefix (wd-, xf-, xb-), an edge code and a suffix
- shorthand markers: up to 3 of `+`/`-` and up to 3 of `>`/`<`
- optional `[name=value, ...]` parameter list
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional, Union

from skreate.errors import ParseError
from skreate.models import (
    JUMP_SUFFIXES,
    TWIZZLE_SUFFIX,
    Code,
    ParamAssignment,
    ParamValue,
    Prefix,
    Span,
    Statement,
    StatementKind,
)

logger = logging.getLogger(__name__)

COMMANDS = ("Shift", "Warp", "Rink", "Info", "Title", "Text", "Label")

PREFIXES = {
    "wd-": Prefix.WIDE,
    "xf-": Prefix.CROSS_FRONT,
    "xb-": Prefix.CROSS_BEHIND,
}

# Named suffixes (after the dash) and their canonical spelling.
NAMED_SUFFIXES = {
    "OpMo": "-OpMo",
    "ClMo": "-ClMo",
    "OpCho": "-OpCho",
    "ClCho": "-ClCho",
    "Br": "-Br",
    "Rk": "-Rk",
    "Ctr": "-Ctr",
    "CoE": "-CoE",
    "COE": "-CoE",
    "Loop": "-Loop",
    "Hop": "-Hop",
}

JUMP_NAMES = tuple(suffix[1:] for suffix in JUMP_SUFFIXES)
MAX_JUMP_ROTATIONS = 4
MAX_TWIZZLE_ROTATIONS = 10

REPEAT_START = "|:"
REPEAT_END = ":|"
REPEAT_END_MIRRORED = "!|"

BOOL_WORDS = {
    "true": True,
    "y": True,
    "Y": True,
    "false": False,
    "n": False,
    "N": False,
}

MAX_MARKERS = 3

_NUMBER_RE = re.compile(r"(\d+)\)")
_BEATS_RE = re.compile(r"/(\d*)")
_WORD_RE = re.compile(r"[A-Za-z]+")
_NAMED_SUFFIX_RE = re.compile(r"-([A-Za-z]+)(\d+(?:\.\d+)?)?")
_JUMP_SUFFIX_RE = re.compile(r"-(\d+)([A-Za-z]+)")
_PARAM_NAME_RE = re.compile(r"[A-Za-z][A-Za-z0-9_-]*")
_INT_RE = re.compile(r"[+-]?\d+")
_REPEAT_COUNT_RE = re.compile(r"x\s*(\d+)")

# Numbers must fit a signed 32-bit integer.
INT_MIN = -(2**31)
INT_MAX = 2**31 - 1

# Upper limit on the statements a repeat may expand to.
MAX_EXPANDED = 10000


def split_statements(text: str) -> list[tuple[str, Span]]:
    """Split source text into (statement text, span) pairs.

    Comments run from `#` to end of line; separators inside double-quoted
    strings are left alone. Blank statements are dropped.
    """
    result = []
    for row, line in enumerate(text.split("\n")):
        pieces: list[tuple[int, int]] = []
        start = 0
        in_string = False
        escaped = False
        end_of_line = len(line)
        for idx, char in enumerate(line):
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char == "#":
                end_of_line = idx
                break
            elif char == ";":
                pieces.append((start, idx))
                start = idx + 1
        pieces.append((start, end_of_line))

        for begin, end in pieces:
            chunk = line[begin:end]
            stripped = chunk.strip()
            if not stripped:
                continue
            col = begin + (len(chunk) - len(chunk.lstrip()))
            result.append((stripped, Span(row=row, start=col, end=col + len(stripped))))
    return result


class StatementParser:
    """Parser for the text of a single statement.

    Positions are tracked relative to the statement text and converted to
    source columns when building spans.
    """

    def __init__(self, text: str, span: Span):
        self.text = text
        self.row = span.row
        self.col = span.start
        self.pos = 0

    # Scanning helpers

    def span(self, start: int, end: int) -> Span:
        """Source span of statement positions `start` to `end`."""
        return Span(row=self.row, start=self.col + start, end=self.col + end)

    def error(self, start: int, end: int, msg: str) -> ParseError:
        """Build a located error covering at least one character."""
        return ParseError.at(self.span(start, max(end, start + 1)), msg)

    def at_end(self) -> bool:
        """True once the whole statement is consumed."""
        return self.pos >= len(self.text)

    def peek(self, prefix: str) -> bool:
        """Check for `prefix` at the cursor without consuming it."""
        return self.text.startswith(prefix, self.pos)

    def current(self) -> str:
        """Character at the cursor, empty at the end."""
        return "" if self.at_end() else self.text[self.pos]

    def skip_ws(self) -> None:
        """Advance past whitespace."""
        while not self.at_end() and self.text[self.pos].isspace():
            self.pos += 1

    def match(self, pattern: re.Pattern) -> Optional[re.Match]:
        """Match `pattern` at the cursor, consuming it on success."""
        m = pattern.match(self.text, self.pos)
        if m:
            self.pos = m.end()
        return m

    def run_end(self, start: int) -> int:
        """End of the alphanumeric run beginning at `start`."""
        end = start
        while end < len(self.text) and self.text[end].isalnum():
            end += 1
        return end

    def to_int(self, digits: str, start: int, end: int) -> int:
        """Convert matched digits, rejecting values outside 32 bits."""
        if len(digits.lstrip("+-").lstrip("0")) > 10:
            raise self.error(start, end, "number out of range")
        value = int(digits)
        if not INT_MIN <= value <= INT_MAX:
            raise self.error(start, end, "number out of range")
        return value

    # Grammar

    def parse(self) -> Statement:
        whole = self.span(0, len(self.text))
        if self.text == REPEAT_START:
            return Statement(kind=StatementKind.REPEAT_START, span=whole)
        if self.peek(REPEAT_END) or self.peek(REPEAT_END_MIRRORED):
            return self.parse_repeat_end(whole)

        number, beats = self.parse_timing()

        word = _WORD_RE.match(self.text, self.pos)
        if word and word.group(0) in COMMANDS:
            if number is not None or beats is not None:
                raise self.error(0, word.start(), f"{word.group(0)} does not take a move number or beat count")
            self.pos = word.end()
            params = self.parse_params()
            self.expect_end()
            return Statement(
                kind=StatementKind.COMMAND,
                span=whole,
                command=word.group(0),
                params=params,
            )

        prefix = Prefix.NONE
        for text, value in PREFIXES.items():
            if self.peek(text):
                prefix = value
                self.pos += len(text)
                break

        code = self.parse_code()
        suffix, half_turns = self.parse_suffix()
        length, tightness, shorthand_span = self.parse_shorthand()
        params = self.parse_params()
        self.expect_end()
        return Statement(
            kind=StatementKind.MOVE,
            span=whole,
            number=number,
            beats=beats,
            prefix=prefix,
            code=code,
            suffix=suffix,
            half_turns=half_turns,
            length=length,
            tightness=tightness,
            shorthand_span=shorthand_span,
            params=params,
        )

    def parse_repeat_end(self, whole: Span) -> Statement:
        mirrored = self.peek(REPEAT_END_MIRRORED)
        self.pos += 2
        self.skip_ws()
        count = 2
        if not self.at_end():
            start = self.pos
            m = _REPEAT_COUNT_RE.fullmatch(self.text, self.pos)
            if not m:
                raise self.error(start, len(self.text), "malformed repeat count, expected e.g. 'x 3'")
            count = self.to_int(m.group(1), start, len(self.text))
            if count < 1:
                raise self.error(start, len(self.text), "repeat count must be positive")
        return Statement(
            kind=StatementKind.REPEAT_END,
            span=whole,
            repeat_count=count,
            mirrored=mirrored,
        )

    def parse_timing(self) -> tuple[Optional[int], Optional[int]]:
        number = None
        beats = None
        m = self.match(_NUMBER_RE)
        if m:
            number = self.to_int(m.group(1), m.start(), m.end())
            self.skip_ws()
        if self.peek("/"):
            start = self.pos
            m = self.match(_BEATS_RE)
            if not m.group(1):
                raise self.error(start, self.pos, "expected beat count after '/'")
            beats = self.to_int(m.group(1), start, self.pos)
            if beats <= 0:
                raise self.error(start, self.pos, "beat count must be positive")
            self.skip_ws()
            late = _NUMBER_RE.match(self.text, self.pos)
            if late:
                raise self.error(late.start(), late.end(), "move number must come before the beat count")
        return number, beats

    def parse_code(self) -> Code:
        start = self.pos
        end = self.run_end(start)
        foot = self.current()
        if foot not in ("L", "R", "B"):
            raise self.error(start, end, "expected an edge code, e.g. LFO")
        self.pos += 1
        if self.current() not in ("F", "B"):
            raise self.error(start, min(end, start + 3), f"invalid edge code {self.text[start:min(end, start + 3)]}")
        self.pos += 1
        edge = self.current()
        if edge in ("O", "I"):
            self.pos += 1
        elif edge.isalpha():
            raise self.error(start, start + 3, f"invalid edge code {self.text[start:start + 3]}")
        code = Code.parse(self.text[start:self.pos])
        if code is None:
            raise self.error(start, self.pos, f"invalid edge code {self.text[start:self.pos]}")
        return code

    def parse_suffix(self) -> tuple[str, Optional[int]]:
        start = self.pos
        if self.peek("3"):
            self.pos += 1
            self.check_boundary(start)
            return "3", None
        if not self.peek("-"):
            return "", None
        following = self.text[self.pos + 1:self.pos + 2]
        if following.isalpha():
            m = self.match(_NAMED_SUFFIX_RE)
            name, count = m.group(1), m.group(2)
            if name == TWIZZLE_SUFFIX[1:]:
                if count is None:
                    raise self.error(start, self.pos, "twizzle needs a rotation count, e.g. -Tw2")
                whole, _, fraction = count.partition(".")
                fraction = fraction.rstrip("0")
                if fraction not in ("", "5"):
                    raise self.error(start, self.pos, f"twizzle rotation count {count} must be a whole or half number")
                half_turns = self.to_int(whole, start, self.pos) * 2 + (1 if fraction else 0)
                if half_turns <= 0:
                    raise self.error(start, self.pos, "rotation count must be positive")
                if half_turns > 2 * MAX_TWIZZLE_ROTATIONS:
                    raise self.error(start, self.pos, f"at most {MAX_TWIZZLE_ROTATIONS} rotations allowed")
                self.check_boundary(start)
                return TWIZZLE_SUFFIX, half_turns
            if count is None and name in NAMED_SUFFIXES:
                self.check_boundary(start)
                return NAMED_SUFFIXES[name], None
            if count is None and name in JUMP_NAMES:
                raise self.error(start, self.pos, f"jump needs a rotation count, e.g. -2{name}")
            raise self.error(start, self.pos, f"unknown suffix {m.group(0)}")
        if following.isdigit():
            m = self.match(_JUMP_SUFFIX_RE)
            if not m:
                raise self.error(start, self.run_end(start + 1), f"unknown suffix {self.text[start:self.run_end(start + 1)]}")
            rotations, name = self.to_int(m.group(1), start, self.pos), m.group(2)
            if name not in JUMP_NAMES:
                raise self.error(start, self.pos, f"unknown jump {m.group(0)}")
            if rotations <= 0:
                raise self.error(start, self.pos, "rotation count must be positive")
            if rotations > MAX_JUMP_ROTATIONS:
                raise self.error(start, self.pos, f"at most {MAX_JUMP_ROTATIONS} rotations allowed")
            self.check_boundary(start)
            return f"-{name}", rotations * 2
        # A bare dash is a shorthand marker.
        return "", None

    def check_boundary(self, start: int) -> None:
        if not self.at_end() and self.text[self.pos].isalnum():
            end = self.run_end(self.pos)
            raise self.error(start, end, f"unknown suffix {self.text[start:end]}")

    def parse_shorthand(self) -> tuple[int, int, Optional[Span]]:
        start = self.pos
        counts = {"length": None, "tightness": None}
        while self.current() in ("+", "-", ">", "<"):
            marker = self.current()
            run_start = self.pos
            while self.current() == marker:
                self.pos += 1
            run = self.pos - run_start
            kind = "length" if marker in ("+", "-") else "tightness"
            if counts[kind] is not None:
                raise self.error(run_start, self.pos, f"mixed {kind} markers")
            if run > MAX_MARKERS:
                raise self.error(run_start, self.pos, f"at most {MAX_MARKERS} {kind} markers allowed")
            counts[kind] = run if marker in ("+", ">") else -run
        if self.pos == start:
            return 0, 0, None
        return counts["length"] or 0, counts["tightness"] or 0, self.span(start, self.pos)

    def parse_params(self) -> list[ParamAssignment]:
        self.skip_ws()
        if not self.peek("["):
            return []
        open_pos = self.pos
        self.pos += 1
        params: list[ParamAssignment] = []
        self.skip_ws()
        if self.peek("]"):
            self.pos += 1
            return params
        while True:
            self.skip_ws()
            name_start = self.pos
            m = self.match(_PARAM_NAME_RE)
            if not m:
                raise self.error(name_start, self.run_end(name_start), "expected parameter name")
            name = m.group(0)
            self.skip_ws()
            if not self.peek("="):
                raise self.error(self.pos, self.pos + 1, f"expected '=' after {name}")
            self.pos += 1
            self.skip_ws()
            value = self.parse_value()
            if any(p.name == name for p in params):
                raise self.error(name_start, self.pos, f"duplicate parameter {name}")
            params.append(ParamAssignment(name=name, value=value, span=self.span(name_start, self.pos)))
            self.skip_ws()
            if self.peek(","):
                self.pos += 1
                continue
            if self.peek("]"):
                self.pos += 1
                return params
            if self.at_end():
                raise self.error(open_pos, self.pos, "unterminated parameter list")
            raise self.error(self.pos, self.pos + 1, "expected ',' or ']' in parameter list")

    def parse_value(self) -> ParamValue:
        start = self.pos
        if self.peek('"'):
            self.pos += 1
            chars = []
            while not self.at_end():
                char = self.text[self.pos]
                if char == "\\" and self.pos + 1 < len(self.text):
                    chars.append(self.text[self.pos + 1])
                    self.pos += 2
                    continue
                if char == '"':
                    self.pos += 1
                    return "".join(chars)
                chars.append(char)
                self.pos += 1
            raise self.error(start, self.pos, "unterminated string")
        m = _INT_RE.match(self.text, self.pos)
        if m and not self.text[m.end():m.end() + 1].isalnum():
            self.pos = m.end()
            return self.to_int(m.group(0), start, m.end())
        m = _WORD_RE.match(self.text, self.pos)
        if m and m.group(0) in BOOL_WORDS:
            self.pos = m.end()
            return BOOL_WORDS[m.group(0)]
        end = start + 1
        while end < len(self.text) and self.text[end] not in ",]":
            end += 1
        raise self.error(start, end, "expected a number, a quoted string or a boolean")

    def expect_end(self) -> None:
        self.skip_ws()
        if not self.at_end():
            raise self.error(self.pos, len(self.text), f"unexpected text {self.text[self.pos:]!r}")


def parse_statements(text: str) -> list[Statement]:
    """Parse source text into statements, keeping repeat markers."""
    statements = [StatementParser(chunk, span).parse() for chunk, span in split_statements(text)]
    logger.debug("parsed %d statements", len(statements))
    return statements


@dataclass
class _Repeat:
    closer: Statement
    body: list[Union[Statement, "_Repeat"]] = field(default_factory=list)
    count: int = 2
    mirrored: bool = False


def mirror_statement(stmt: Statement) -> Statement:
    """Swap left and right for one statement of a mirrored repeat."""
    if stmt.kind is StatementKind.MOVE and stmt.code is not None:
        return stmt.model_copy(update={"code": stmt.code.mirrored()})
    if stmt.kind is not StatementKind.COMMAND:
        return stmt
    params = []
    for param in stmt.params:
        value = param.value
        if param.name in ("side", "rotate") and isinstance(value, int) and not isinstance(value, bool):
            value = -value
        elif param.name == "code" and isinstance(value, str):
            code = Code.parse(value)
            if code is not None:
                value = str(code.mirrored())
        params.append(param.model_copy(update={"value": value}))
    return stmt.model_copy(update={"params": params})


def _flatten(items: list[Union[Statement, _Repeat]]) -> list[Statement]:
    flat: list[Statement] = []
    for item in items:
        if isinstance(item, _Repeat):
            body = _flatten(item.body)
            if len(flat) + len(body) * item.count > MAX_EXPANDED:
                raise ParseError.at(item.closer.span, f"repeat expands to more than {MAX_EXPANDED} statements")
            for copy in range(item.count):
                if item.mirrored and copy % 2 == 1:
                    flat.extend(mirror_statement(stmt) for stmt in body)
                else:
                    flat.extend(body)
        else:
            flat.append(item)
    return flat


def expand_repeats(statements: list[Statement]) -> list[Statement]:
    """Expand repeat blocks into literal copies.

    Every copy after the first of a statement gets a repeat index, so
    rendered elements of later copies have distinct identifiers.
    """
    items: list[Union[Statement, _Repeat]] = []
    stack: list[tuple[Statement, list[Union[Statement, _Repeat]]]] = []
    for stmt in statements:
        if stmt.kind is StatementKind.REPEAT_START:
            stack.append((stmt, items))
            items = []
        elif stmt.kind is StatementKind.REPEAT_END:
            if not stack:
                raise ParseError.at(stmt.span, "found end of repeat when no repeat in progress")
            _, parent = stack.pop()
            parent.append(_Repeat(closer=stmt, body=items, count=stmt.repeat_count, mirrored=stmt.mirrored))
            items = parent
        else:
            items.append(stmt)
    if stack:
        raise ParseError.at(stack[-1][0].span, "repeat is never closed")

    seen: dict[Span, int] = {}
    expanded = []
    for stmt in _flatten(items):
        copy = seen.get(stmt.span, 0)
        seen[stmt.span] = copy + 1
        expanded.append(stmt.model_copy(update={"repeat": copy}) if copy else stmt)
    logger.debug("expanded %d statements into %d", len(statements), len(expanded))
    return expanded


def parse(text: str) -> list[Statement]:
    """Parse source text and expand repeats."""
    return expand_repeats(parse_statements(text))
