"""Error types raised by skreate."""

from typing import Optional

from skreate.models.base import Span


class ParseError(Exception):
    """A user-facing error located in the source text.

    Raised for every problem with the input notation: malformed
    statements, unknown moves, bad parameters and unbalanced repeats.
    The first error aborts the whole call.
    """

    def __init__(self, row: int, col: int, msg: str, end_col: Optional[int] = None):
        super().__init__(f"{row}:{col}: {msg}")
        self.row = row
        self.col = col
        self.end_col = end_col if end_col is not None else col
        self.msg = msg

    @classmethod
    def at(cls, span: Span, msg: str) -> "ParseError":
        """Build an error covering a source span."""
        return cls(span.row, span.start, msg, end_col=span.end)

    @property
    def span(self) -> Span:
        return Span(row=self.row, start=self.col, end=self.end_col)


class InternalError(Exception):
    """An invariant of the move catalog or geometry was violated.

    Indicates a programming error rather than bad input; never caught
    by the generation code.
    """
