"""skreate CLI."""

import json
import logging
import re
import sys
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from skreate.api import generate_with_positions, move_info, move_infos
from skreate.config import settings
from skreate.errors import ParseError
from skreate.models import ShorthandKind, format_value
from skreate.moves import MoveInfo
from skreate.pipeline import canonicalize as canonical_text
from skreate.pipeline import canonicalize_vert

app = typer.Typer(
    name="skreate",
    help="Figure skating notation to SVG diagrams",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    path = Path(source)
    if not path.is_file():
        err_console.print(f"[red]No such file:[/red] {escape(source)}")
        raise typer.Exit(code=1)
    return path.read_text(encoding="utf-8")


def _fail(err: ParseError) -> NoReturn:
    err_console.print(f"[red]Error:[/red] {escape(str(err))}")
    raise typer.Exit(code=1)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Figure skating notation to SVG diagrams."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.command()
def generate(
    source: str = typer.Argument(..., metavar="INPUT", help="Notation file, or - for stdin"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the SVG here instead of stdout"),
    positions: bool = typer.Option(False, "--positions", help="Show element ids and timings"),
) -> None:
    """Render notation as an SVG diagram."""
    text = _read_input(source)
    try:
        svg, ids, timings = generate_with_positions(text)
    except ParseError as err:
        _fail(err)

    if output is not None:
        output.write_text(svg, encoding="utf-8")
        console.print(f"[bold blue]Wrote:[/bold blue] {escape(str(output))}")
    else:
        typer.echo(svg, nl=False)

    if positions:
        table = Table(title="Elements")
        table.add_column("Element id")
        table.add_column("Beats", justify="right")
        for element_id, beats in zip(ids, timings):
            table.add_row(element_id, str(beats))
        err_console.print(table)


@app.command()
def canonicalize(
    source: str = typer.Argument(..., metavar="INPUT", help="Notation file, or - for stdin"),
    vertical: bool = typer.Option(False, "--vertical", help="One statement per line"),
) -> None:
    """Rewrite notation in canonical form."""
    text = _read_input(source)
    try:
        result = canonicalize_vert(text) if vertical else canonical_text(text)
    except ParseError as err:
        _fail(err)
    typer.echo(result)


@app.command()
def moves(
    name: Optional[str] = typer.Argument(None, help="Show the parameters of this move, e.g. Bracket"),
    show_all: bool = typer.Option(False, "--all", help="Include hidden commands"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
) -> None:
    """List the moves and commands the notation knows."""
    if name is not None:
        info = move_info(name)
        if info is None:
            err_console.print(f"[red]Unknown move:[/red] {escape(name)}")
            raise typer.Exit(code=1)
        if as_json:
            typer.echo(json.dumps(info.model_dump(mode="json"), indent=2))
        else:
            _print_params(info)
        return

    infos = [info for info in move_infos() if show_all or info.visible]
    if as_json:
        typer.echo(json.dumps([info.model_dump(mode="json") for info in infos], indent=2))
        return

    table = Table(title="Moves")
    table.add_column("Name", style="bold")
    table.add_column("Example")
    table.add_column("Summary")
    for info in infos:
        table.add_row(escape(info.name), escape(info.example), escape(info.summary))
    console.print(table)


def _print_params(info: MoveInfo) -> None:
    table = Table(title=f"{info.name}: {info.summary}")
    table.add_column("Parameter", style="bold")
    table.add_column("Default")
    table.add_column("Shorthand")
    table.add_column("Description")
    for param in info.params:
        shorthand = "" if param.shorthand is ShorthandKind.NONE else f"{param.shorthand.value} +/-{param.increment}"
        table.add_row(escape(param.name), escape(format_value(param.default)), shorthand, escape(param.doc))
    console.print(table)
    console.print(f"Example: {escape(info.example)}")


def example_filename(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", name.lower()).strip("_") + ".svg"


@app.command()
def examples(
    output_dir: Path = typer.Argument(..., help="Directory for the SVG files"),
) -> None:
    """Write an example diagram for every visible move."""
    output_dir.mkdir(parents=True, exist_ok=True)
    count = 0
    for info in move_infos():
        if not info.visible:
            continue
        svg, _, _ = generate_with_positions(info.example)
        (output_dir / example_filename(info.name)).write_text(svg, encoding="utf-8")
        count += 1
    console.print(f"[bold blue]Wrote {count} examples to[/bold blue] {escape(str(output_dir))}")


if __name__ == "__main__":
    app()
