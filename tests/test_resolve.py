"""Tests for parameter resolution."""

import pytest

from skreate.errors import InternalError, ParseError
from skreate.pipeline.stage_parse import parse, parse_statements
from skreate.pipeline.stage_resolve import resolve, resolve_all


def resolve_one(text: str):
    [stmt] = parse(text)
    return resolve(stmt)


class TestDefaults:
    """Tests for schema defaults."""

    def test_edge_defaults(self):
        """Every schema slot is filled."""
        mv = resolve_one("LFO")
        assert mv.name == "Edge"
        assert mv.params["len"] == 450
        assert mv.params["angle"] == 40
        assert mv.params["style"] == ""

    def test_command_defaults(self):
        mv = resolve_one("Info")
        assert mv.params["margin-x"] == 50
        assert mv.params["auto-count"] is False


class TestShorthand:
    """Tests for shorthand marker layering."""

    def test_length_markers(self):
        """Each `+` adds one increment to the length."""
        assert resolve_one("LFO++").params["len"] == 700

    def test_shorthand_matches_explicit(self):
        """`LFO++` and `LFO [len=700]` resolve to the same parameters."""
        assert resolve_one("LFO++").params == resolve_one("LFO [len=700]").params

    def test_tightness_markers(self):
        """`>` tightens the curve by adding angle."""
        assert resolve_one("LFO>>").params["angle"] == 60
        assert resolve_one("LFO<").params["angle"] == 30

    def test_turn_increments(self):
        """Turns use their own increments."""
        mv = resolve_one("RFO3-")
        assert mv.params["len"] == 350

    def test_explicit_overrides_shorthand(self):
        """An explicit parameter wins over markers for the same slot."""
        assert resolve_one("LFO+ [len=100]").params["len"] == 100

    @pytest.mark.parametrize(
        "text,kind,col",
        [
            ("LF-Hop+", "length", 6),
            ("LF-Hop<", "tightness", 6),
            ("RF>", "tightness", 2),
            ("LF-Hop++>", "length", 6),
        ],
    )
    def test_markers_on_unsupported_move(self, text, kind, col):
        """Markers on a move without the matching slot are reported at the markers."""
        with pytest.raises(ParseError) as exc:
            resolve_one(text)
        assert f"does not accept {kind} markers" in exc.value.msg
        assert exc.value.col == col
        assert exc.value.end_col == len(text)


class TestExplicitParams:
    """Tests for explicit parameter validation."""

    def test_unknown_parameter(self):
        """Unknown names are reported at the parameter."""
        with pytest.raises(ParseError) as exc:
            resolve_one("LFO [size=3]")
        assert exc.value.col == 5
        assert "unknown parameter size" in exc.value.msg

    def test_wrong_type(self):
        with pytest.raises(ParseError):
            resolve_one('LFO [len="long"]')

    def test_negative_length(self):
        """Lengths must be strictly positive."""
        with pytest.raises(ParseError) as exc:
            resolve_one("LFO [len=0]")
        assert "must be > 0" in exc.value.msg

    def test_style_choices(self):
        with pytest.raises(ParseError):
            resolve_one('LFO [style="wavy"]')
        assert resolve_one('LFO [style="dashed"]').params["style"] == "dashed"

    def test_invalid_shift_code(self):
        """Shift codes are validated."""
        with pytest.raises(ParseError):
            resolve_one('Shift [code="XYZ"]')


class TestLookup:
    """Tests for catalog lookup during resolution."""

    def test_unknown_move(self):
        """A code and suffix with no catalog entry is an error."""
        with pytest.raises(ParseError) as exc:
            resolve_one("LFO-OpMo")
        assert "unknown move LFO-OpMo" in exc.value.msg

    def test_repeat_markers_must_be_expanded(self):
        with pytest.raises(InternalError):
            resolve_all(parse_statements("|:; LFO; :|"))

    def test_resolve_all(self, resolved):
        """Every expanded statement becomes an instance."""
        instances = resolved("|:; LFO; RFO3; :|")
        assert [mv.name for mv in instances] == ["Edge", "ThreeTurn", "Edge", "ThreeTurn"]


class TestCrossChecks:
    """Tests for checks spanning several parameters."""

    def test_turn_exit_angle(self):
        """A turn's exit curve needs a positive angle."""
        with pytest.raises(ParseError) as exc:
            resolve_one("RFO3 [delta-angle=-90]")
        assert "exit angle" in exc.value.msg

    def test_info_font_size(self):
        """Any Info font size is accepted, zero or less meaning automatic."""
        assert resolve_one("Info [font-size=0]").params["font-size"] == 0
        assert resolve_one("Info [font-size=20]").params["font-size"] == 20
