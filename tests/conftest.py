"""Pytest configuration and fixtures."""

import pytest

from skreate.pipeline import parse, resolve_all


@pytest.fixture
def notation_file(tmp_path):
    """Write notation text to a temporary file and return its path."""

    def write(text: str, name: str = "dance.skate"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return write


@pytest.fixture
def output_dir(tmp_path):
    """Create a temporary output directory."""
    out_dir = tmp_path / "output"
    out_dir.mkdir()
    return out_dir


@pytest.fixture
def resolved():
    """Parse and resolve notation text into move instances."""

    def run(text: str):
        return resolve_all(parse(text))

    return run
