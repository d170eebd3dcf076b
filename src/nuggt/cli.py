"""
Nuggt CLI.

Commands:
- parse: Parse a DSL file and summarise (or dump) the document
- format: Parse and re-serialize to canonical DSL text
- check: Report the silent fallbacks applied while parsing
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from nuggt import __version__
from nuggt.core.assembler import parse_with_warnings
from nuggt.core.config import CompilerConfig, find_config, load_config
from nuggt.core.errors import ConfigError
from nuggt.core.ir import CellKind, Document, Layout
from nuggt.core.kinds import is_markdown_layout, split_interactive, split_markdown
from nuggt.core.serializer import serialize_document

app = typer.Typer(
    help="Nuggt DSL compiler: parse, format and check layout markup",
    no_args_is_help=True,
)

console = Console()

FileArgument = Annotated[str, typer.Argument(help="DSL file to read, or '-' for stdin")]
ConfigOption = Annotated[
    str | None,
    typer.Option("--config", "-c", help="Path to nuggt.toml (default: ./nuggt.toml if present)"),
]


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"nuggt version {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", help="Log parser decisions to stderr")
    ] = False,
) -> None:
    """Nuggt CLI main callback for global options."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="[%(levelname)s] %(name)s: %(message)s",
        )


def _read_source(file: str) -> str:
    if file == "-":
        return sys.stdin.read()
    path = Path(file)
    if not path.is_file():
        typer.echo(f"File not found: {path}", err=True)
        raise typer.Exit(code=1)
    return path.read_text(encoding="utf-8")


def _resolve_config(config: str | None) -> CompilerConfig:
    try:
        if config is not None:
            return load_config(Path(config))
        return find_config()
    except ConfigError as e:
        typer.echo(f"Config error: {e}", err=True)
        raise typer.Exit(code=1) from e


def _describe(layout: Layout) -> str:
    if is_markdown_layout(layout):
        return "markdown"
    kinds = [
        cell.content.kind if cell.content is not None else "space"
        for cell in layout.cells
        if cell.kind != CellKind.CONTINUATION
    ]
    return ", ".join(kinds)


def _placements(document: Document, config: CompilerConfig) -> dict[str, str]:
    """Map each block id to where a client shows it."""
    ui, markdown = split_markdown(document)
    canvasable, interactive = split_interactive(ui, config.categories)
    placements = {block.id: "markdown" for block in markdown}
    placements.update({block.id: "canvas" for block in canvasable})
    placements.update({block.id: "interactive" for block in interactive})
    return placements


@app.command("parse")
def parse_command(
    file: FileArgument,
    json_output: Annotated[
        bool, typer.Option("--json", help="Print the document as JSON")
    ] = False,
    config: ConfigOption = None,
) -> None:
    """Parse a DSL file and show its layout blocks."""
    compiler_config = _resolve_config(config)
    result = parse_with_warnings(_read_source(file), compiler_config)
    document = result.document

    if json_output:
        typer.echo(document.model_dump_json(indent=2))
        return

    table = Table(title=f"{len(document.blocks)} block(s)")
    table.add_column("#", justify="right")
    table.add_column("Columns", justify="right")
    table.add_column("Cells", justify="right")
    table.add_column("Kinds")
    table.add_column("Placement")
    placements = _placements(document, compiler_config)
    for i, block in enumerate(document.blocks, start=1):
        table.add_row(
            str(i),
            str(block.column_count),
            str(len(block.cells)),
            _describe(block),
            placements[block.id],
        )
    console.print(table)

    if result.warnings:
        console.print(
            f"[yellow]{len(result.warnings)} warning(s); run 'nuggt check' for details[/yellow]"
        )


@app.command("format")
def format_command(
    file: FileArgument,
    config: ConfigOption = None,
    write: Annotated[
        bool, typer.Option("--write", "-w", help="Rewrite the file in place")
    ] = False,
) -> None:
    """Parse and re-serialize a DSL file in canonical form."""
    compiler_config = _resolve_config(config)
    text = serialize_document(
        parse_with_warnings(_read_source(file), compiler_config).document, compiler_config
    )

    if write:
        if file == "-":
            typer.echo("Cannot use --write with stdin", err=True)
            raise typer.Exit(code=1)
        Path(file).write_text(text + "\n", encoding="utf-8")
        typer.echo(f"✓ Formatted {file}")
        return

    typer.echo(text)


@app.command("check")
def check_command(
    file: FileArgument,
    config: ConfigOption = None,
) -> None:
    """Report unmatched continuations, truncated cells and unrecognised elements."""
    result = parse_with_warnings(_read_source(file), _resolve_config(config))

    if not result.warnings:
        typer.echo("OK: no warnings.")
        return

    for warning in result.warnings:
        typer.echo(f"WARNING: {warning}")
    raise typer.Exit(code=1)


def main(argv: list[str] | None = None) -> None:
    app(args=argv, standalone_mode=True)


if __name__ == "__main__":
    main(sys.argv[1:])
