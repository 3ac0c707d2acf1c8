"""Tests for the parse stage."""

import pytest

from skreate.errors import ParseError
from skreate.models import Code, Prefix, Span, StatementKind
from skreate.pipeline.stage_parse import (
    expand_repeats,
    mirror_statement,
    parse,
    parse_statements,
    split_statements,
)


class TestSplitStatements:
    """Tests for splitting source text into statements."""

    def test_semicolons_and_newlines(self):
        """Both `;` and newlines separate statements."""
        chunks = split_statements("LFO; RFI\nLBO")
        assert [text for text, _ in chunks] == ["LFO", "RFI", "LBO"]
        assert [span for _, span in chunks] == [
            Span(row=0, start=0, end=3),
            Span(row=0, start=5, end=8),
            Span(row=1, start=0, end=3),
        ]

    def test_comments_removed(self):
        """Text after `#` is ignored."""
        chunks = split_statements("LFO # the first edge; RFI")
        assert [text for text, _ in chunks] == ["LFO"]

    def test_blank_statements_dropped(self):
        """Empty pieces between separators produce nothing."""
        assert split_statements(" ;; \n\n") == []

    def test_separators_inside_strings(self):
        """A `;` or `#` in a quoted string does not split the statement."""
        chunks = split_statements('Title [text="a; b # c"]; LFO')
        assert [text for text, _ in chunks] == ['Title [text="a; b # c"]', "LFO"]


class TestStatementParser:
    """Tests for parsing individual statements."""

    def test_simple_edge(self):
        """A bare code is a move with no suffix or markers."""
        [stmt] = parse_statements("LFO")
        assert stmt.kind is StatementKind.MOVE
        assert stmt.code == Code.parse("LFO")
        assert stmt.suffix == ""
        assert stmt.length == 0 and stmt.tightness == 0

    def test_number_and_beats(self):
        """Move number comes before the beat count."""
        [stmt] = parse_statements("3) /2 RFI")
        assert stmt.number == 3
        assert stmt.beats == 2

    def test_beats_before_number_rejected(self):
        """A move number after the beat count is an error."""
        with pytest.raises(ParseError):
            parse_statements("/2 3) RFI")

    def test_prefix(self):
        """Transition prefixes are recognised."""
        [stmt] = parse_statements("xb-RBO")
        assert stmt.prefix is Prefix.CROSS_BEHIND
        assert str(stmt.code) == "RBO"

    def test_shorthand_markers(self):
        """Length and tightness markers are counted separately."""
        [stmt] = parse_statements("LFO++<")
        assert stmt.length == 2
        assert stmt.tightness == -1
        assert stmt.shorthand_span == Span(row=0, start=3, end=6)

    def test_too_many_markers(self):
        """At most three markers of one kind are allowed."""
        with pytest.raises(ParseError) as exc:
            parse_statements("LFO++++")
        assert "at most 3" in exc.value.msg

    def test_mixed_markers_rejected(self):
        """`+` and `-` cannot both appear on one move."""
        with pytest.raises(ParseError):
            parse_statements("LFO+-")

    def test_three_turn_suffix(self):
        """`3` is the three turn suffix."""
        [stmt] = parse_statements("RFO3+")
        assert stmt.suffix == "3"
        assert stmt.length == 1

    def test_named_suffix_alias(self):
        """`-COE` is accepted as a spelling of `-CoE`."""
        [stmt] = parse_statements("LFO-COE")
        assert stmt.suffix == "-CoE"

    def test_twizzle_rotations(self):
        """Twizzle rotations are kept in half turns."""
        [stmt] = parse_statements("LFO-Tw1.5")
        assert stmt.suffix == "-Tw"
        assert stmt.half_turns == 3
        assert stmt.suffix_text == "-Tw1.5"

    def test_jump_rotations(self):
        """Jump rotations come before the jump name."""
        [stmt] = parse_statements("LBI-2S")
        assert stmt.suffix == "-S"
        assert stmt.rotations == 2
        assert stmt.suffix_text == "-2S"

    def test_too_many_jump_rotations(self):
        """Jumps have at most four rotations."""
        with pytest.raises(ParseError):
            parse_statements("RBO-5T")

    def test_params(self):
        """Numbers, strings and booleans are all accepted."""
        [stmt] = parse_statements('Info [grid=100, markers=true, label-offset=-50]')
        assert stmt.kind is StatementKind.COMMAND
        assert stmt.command == "Info"
        assert [(p.name, p.value) for p in stmt.params] == [
            ("grid", 100),
            ("markers", True),
            ("label-offset", -50),
        ]

    def test_string_escapes(self):
        """Backslash escapes quotes inside strings."""
        [stmt] = parse_statements(r'Label [text="say \"hi\""]')
        assert stmt.param("text").value == 'say "hi"'

    def test_duplicate_param(self):
        """A parameter may only be given once."""
        with pytest.raises(ParseError) as exc:
            parse_statements("LFO [len=100,len=200]")
        assert "duplicate" in exc.value.msg

    def test_unterminated_params(self):
        with pytest.raises(ParseError):
            parse_statements("LFO [len=100")

    def test_command_rejects_number(self):
        """Commands are not numbered."""
        with pytest.raises(ParseError):
            parse_statements("2) Shift [fwd=10]")

    def test_invalid_code_span(self):
        """An unknown edge letter reports the whole code."""
        with pytest.raises(ParseError) as exc:
            parse_statements("LFZ")
        assert exc.value.row == 0
        assert exc.value.col == 0
        assert exc.value.end_col == 3

    def test_error_column_is_source_column(self):
        """Error positions are columns of the source line."""
        with pytest.raises(ParseError) as exc:
            parse_statements("LFO; RFI; XYZ")
        assert exc.value.col == 10
        assert str(exc.value).startswith("0:10:")

    def test_both_feet_cannot_have_edge(self):
        with pytest.raises(ParseError):
            parse_statements("BFO")

    @pytest.mark.parametrize(
        "text,end",
        [
            ("LFO-Tw0", 7),
            ("LFO-Tw0.0", 9),
            ("LBI-0S", 6),
        ],
    )
    def test_zero_rotations(self, text, end):
        """Twizzles and jumps need at least some rotation."""
        with pytest.raises(ParseError) as exc:
            parse_statements(text)
        assert "rotation count must be positive" in exc.value.msg
        assert (exc.value.col, exc.value.end_col) == (3, end)

    def test_quarter_twizzle_rejected(self):
        with pytest.raises(ParseError) as exc:
            parse_statements("LFO-Tw1.25")
        assert "whole or half" in exc.value.msg

    def test_half_twizzle(self):
        [stmt] = parse_statements("RBI-Tw0.5")
        assert stmt.half_turns == 1

    def test_twizzle_rotation_limit(self):
        """Twizzles have at most ten rotations."""
        [stmt] = parse_statements("LFO-Tw10")
        assert stmt.half_turns == 20
        with pytest.raises(ParseError) as exc:
            parse_statements("LFO-Tw10.5")
        assert "at most 10" in exc.value.msg


class TestNumberLimits:
    """Numbers must fit in a signed 32-bit integer."""

    def test_huge_parameter(self):
        """An oversized value is reported at the value."""
        text = "LFO [len=1" + "0" * 400 + "]"
        with pytest.raises(ParseError) as exc:
            parse_statements(text)
        assert exc.value.msg == "number out of range"
        assert (exc.value.col, exc.value.end_col) == (9, 410)

    def test_limits_accepted(self):
        [stmt] = parse_statements("Shift [fwd=2147483647, side=-2147483648]")
        assert [p.value for p in stmt.params] == [2147483647, -2147483648]

    @pytest.mark.parametrize(
        "text",
        [
            "Shift [fwd=2147483648]",
            "Shift [side=-2147483649]",
            "99999999999) LFO",
            "/99999999999 LFO",
            "LFO-Tw99999999999",
            "LBI-99999999999S",
            "|:; LFO; :| x99999999999",
            "LFO [len=1" + "0" * 5000 + "]",
        ],
    )
    def test_out_of_range(self, text):
        with pytest.raises(ParseError) as exc:
            parse_statements(text)
        assert exc.value.msg == "number out of range"


class TestRepeats:
    """Tests for repeat block expansion."""

    def test_repeat_twice(self):
        """A block repeats twice by default, later copies tagged."""
        statements = parse("|: ; RFO ; LFI; :|")
        assert [str(s.code) for s in statements] == ["RFO", "LFI", "RFO", "LFI"]
        assert [s.key.element_id for s in statements] == [
            "row_0_col_5_8",
            "row_0_col_11_14",
            "row_0_col_5_8_n1",
            "row_0_col_11_14_n1",
        ]

    def test_repeat_count(self):
        """`x N` sets the number of copies."""
        statements = parse("|:; LFO; :| x3")
        assert len(statements) == 3
        assert [s.repeat for s in statements] == [0, 1, 2]

    def test_mirrored_repeat(self):
        """Every second copy of a mirrored block swaps feet."""
        statements = parse("|:; LFO; RBI; !|")
        assert [str(s.code) for s in statements] == ["LFO", "RBI", "RFO", "LBI"]

    def test_nested_repeats(self):
        statements = parse("|:; |:; LFO; :|; RFO; :|")
        assert [str(s.code) for s in statements] == ["LFO", "LFO", "RFO"] * 2

    def test_unmatched_end(self):
        """An end marker with no open block is an error."""
        with pytest.raises(ParseError) as exc:
            expand_repeats(parse_statements("LFO; :|"))
        assert "no repeat in progress" in exc.value.msg

    def test_never_closed(self):
        """An open block at the end of input is an error."""
        with pytest.raises(ParseError) as exc:
            parse("|:; LFO")
        assert "never closed" in exc.value.msg

    def test_mirror_command(self):
        """Mirroring negates sideways movement and rotation."""
        [stmt] = parse_statements('Shift [side=50,rotate=90,fwd=10,code="LFO"]')
        mirrored = mirror_statement(stmt)
        assert [(p.name, p.value) for p in mirrored.params] == [
            ("side", -50),
            ("rotate", -90),
            ("fwd", 10),
            ("code", "RFO"),
        ]

    @pytest.mark.parametrize(
        "text,col,end,message",
        [
            (":| x0", 3, 5, "repeat count must be positive"),
            ("!| x 0", 3, 6, "repeat count must be positive"),
            (":|y", 2, 3, "malformed repeat count"),
            (":| x", 3, 4, "malformed repeat count"),
            (":| 3", 3, 4, "malformed repeat count"),
        ],
    )
    def test_bad_repeat_count(self, text, col, end, message):
        """A repeat count is `x` followed by a positive number."""
        with pytest.raises(ParseError) as exc:
            parse_statements(text)
        assert message in exc.value.msg
        assert (exc.value.col, exc.value.end_col) == (col, end)

    @pytest.mark.parametrize(
        "text,col",
        [
            ("|:; LFO; :| x20000", 9),
            ("|:; |:; LFO; :| x200; :| x200", 22),
        ],
    )
    def test_expansion_limit(self, text, col):
        """A repeat may not expand to an unbounded number of statements."""
        with pytest.raises(ParseError) as exc:
            parse(text)
        assert "more than 10000 statements" in exc.value.msg
        assert (exc.value.col, exc.value.end_col) == (col, len(text))
