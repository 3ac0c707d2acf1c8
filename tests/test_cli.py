"""Tests for the command line interface."""

import json

from typer.testing import CliRunner

from skreate.cli import app, example_filename

runner = CliRunner()


class TestGenerateCommand:
    """Tests for `skreate generate`."""

    def test_stdout(self, notation_file):
        path = notation_file("LFO; RFI")
        result = runner.invoke(app, ["generate", str(path)])
        assert result.exit_code == 0
        assert result.stdout.startswith("<svg ")

    def test_stdin(self):
        result = runner.invoke(app, ["generate", "-"], input="LFO")
        assert result.exit_code == 0
        assert "<desc>LFO</desc>" in result.stdout

    def test_output_file(self, notation_file, output_dir):
        path = notation_file("LFO")
        target = output_dir / "out.svg"
        result = runner.invoke(app, ["generate", str(path), "-o", str(target)])
        assert result.exit_code == 0
        assert target.read_text(encoding="utf-8").startswith("<svg ")

    def test_positions(self, notation_file):
        path = notation_file("/2 LFO")
        result = runner.invoke(app, ["generate", str(path), "--positions"])
        assert result.exit_code == 0
        assert "row_0_col_0_6" in result.output

    def test_parse_error(self, notation_file):
        """Notation errors exit with status 1."""
        path = notation_file("LFZ")
        result = runner.invoke(app, ["generate", str(path)])
        assert result.exit_code == 1
        assert "0:0:" in result.output

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["generate", str(tmp_path / "missing.skate")])
        assert result.exit_code == 1


class TestCanonicalizeCommand:
    """Tests for `skreate canonicalize`."""

    def test_horizontal(self, notation_file):
        path = notation_file("LFO [len=700]\nRFI")
        result = runner.invoke(app, ["canonicalize", str(path)])
        assert result.exit_code == 0
        assert result.stdout == "LFO++; RFI\n"

    def test_vertical(self, notation_file):
        path = notation_file("LFO [len=700]; RFI")
        result = runner.invoke(app, ["canonicalize", str(path), "--vertical"])
        assert result.stdout == "LFO++\nRFI\n"

    def test_error(self):
        result = runner.invoke(app, ["canonicalize", "-"], input="LFO++++")
        assert result.exit_code == 1


class TestMovesCommand:
    """Tests for `skreate moves`."""

    def test_json(self):
        result = runner.invoke(app, ["moves", "--json"])
        assert result.exit_code == 0
        names = [entry["name"] for entry in json.loads(result.stdout)]
        assert "Edge" in names
        assert "Shift" not in names

    def test_json_all(self):
        """`--all` includes hidden commands."""
        result = runner.invoke(app, ["moves", "--json", "--all"])
        names = [entry["name"] for entry in json.loads(result.stdout)]
        assert "Shift" in names

    def test_table(self):
        result = runner.invoke(app, ["moves"])
        assert result.exit_code == 0
        assert "Edge" in result.stdout

    def test_single_move_json(self):
        """A move name shows that move's parameters."""
        result = runner.invoke(app, ["moves", "Bracket", "--json"])
        assert result.exit_code == 0
        info = json.loads(result.stdout)
        assert info["name"] == "Bracket"
        assert [p["name"] for p in info["params"]][:4] == ["angle", "len", "delta-angle", "delta-len"]

    def test_single_move_table(self):
        result = runner.invoke(app, ["moves", "Bracket"])
        assert result.exit_code == 0
        assert "Example: LFO-Br" in result.stdout

    def test_unknown_move(self):
        result = runner.invoke(app, ["moves", "Quadruple"])
        assert result.exit_code == 1


class TestExamplesCommand:
    """Tests for `skreate examples`."""

    def test_writes_examples(self, output_dir):
        result = runner.invoke(app, ["examples", str(output_dir)])
        assert result.exit_code == 0
        assert (output_dir / "edge.svg").exists()
        assert (output_dir / "threeturn.svg").exists()
        assert not (output_dir / "shift.svg").exists()

    def test_filename(self):
        assert example_filename("Three turn") == "three_turn.svg"
