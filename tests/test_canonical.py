"""Tests for canonical text rendering."""

import pytest

from skreate.errors import ParseError
from skreate.pipeline import canonicalize, canonicalize_vert


class TestCanonicalForm:
    """Tests for the normal form of each statement."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("LFO", "LFO"),
            ("LFO [len=450]", "LFO"),
            ("LFO [len=700]", "LFO++"),
            ("LFO [len=325]", "LFO-"),
            ("LFO [angle=50, len=575]", "LFO+>"),
            ("LFO [len=500]", "LFO[len=500]"),
            ("LFO [len=950]", "LFO[len=950]"),
            ("LFO+ [label=\"x\", angle=33]", 'LFO+[angle=33,label="x"]'),
            ("3)   /2   xf-RBI", "3) /2 xf-RBI"),
            ("RFO-Tw1.5", "RFO-Tw1.5"),
            ("LBI-2S", "LBI-2S"),
            ("LFO-COE", "LFO-CoE"),
            ("Info [auto-count=y]", "Info[auto-count=true]"),
            ("Rink [width=3000]", "Rink"),
            ("Shift", "Shift"),
        ],
    )
    def test_statement(self, text, expected):
        assert canonicalize(text) == expected

    def test_repeat_markers_kept(self):
        """Repeats are not expanded in canonical text."""
        assert canonicalize("|:\nLFO\nRFO\n:|") == "|:; LFO; RFO; :|"

    def test_repeat_count(self):
        assert canonicalize("|:; LFO; !| x 3") == "|:; LFO; !|x3"

    def test_comments_dropped(self):
        assert canonicalize("LFO # first\n\nRFI") == "LFO; RFI"

    def test_vertical(self):
        assert canonicalize_vert("LFO; RFI+") == "LFO\nRFI+"

    def test_empty(self):
        assert canonicalize("") == ""


class TestIdempotence:
    """Canonical text is a fixed point."""

    @pytest.mark.parametrize(
        "text",
        [
            "LFO++; RFI<<; wd-LBO [style=\"dashed\"]",
            "Info [auto-count=true]; 3) LFO; RFI>; LFO+",
            "|: ; RFO ; LFI; :|",
            'Title [text="Waltz \\"8\\""]; /2 RFO3+ [delta-len=50]; LFO-Tw2>',
            "Rink [goal-lines=400,goals=true]; Warp [x=1500,y=3000]; BF-Hop",
        ],
    )
    def test_idempotent(self, text):
        once = canonicalize(text)
        assert canonicalize(once) == once
        assert canonicalize_vert(canonicalize_vert(text)) == canonicalize_vert(text)


class TestErrors:
    """Errors surface from canonicalization too."""

    def test_unknown_parameter(self):
        with pytest.raises(ParseError):
            canonicalize("LFO [wobble=1]")

    def test_unclosed_repeat(self):
        with pytest.raises(ParseError):
            canonicalize("|:; LFO")
