"""CLI entry point for polar-lang.

Invoked as::

    polar-lang [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m polar_lang.cli.main

Commands
--------
check       Parse a Polar file and list its rules, queries and blocks
fmt         Format a Polar file to canonical style
parse       Dump the parsed AST to JSON or YAML
version     Show version information
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

if TYPE_CHECKING:
    from polar_lang.ast.nodes import Line, Span

console = Console()
err_console = Console(stderr=True)


def _read_source(path: str) -> str:
    """Read a Polar source file, exiting on error."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        err_console.print(f"[red]Error:[/red] File not found: {path}")
        sys.exit(1)
    except OSError as exc:
        err_console.print(f"[red]Error:[/red] Cannot read {path}: {exc}")
        sys.exit(1)


def _parse_or_exit(source: str, path: str) -> list["Line"]:
    """Parse Polar source, printing the error and exiting on failure."""
    from polar_lang import parse_lines
    from polar_lang.lexer import LexError
    from polar_lang.parser import ParseError

    try:
        return parse_lines(source, filename=path)
    except LexError as exc:
        err_console.print(f"[red]Lex error[/red] in {path}: {escape(str(exc))}")
        sys.exit(1)
    except ParseError as exc:
        err_console.print(f"[red]Parse error[/red] in {path}:")
        err_console.print(f"  {escape(str(exc))}")
        sys.exit(1)


def _describe_line(line: "Line") -> tuple[str, str, "Span | None"]:
    """Return ``(kind, summary, span)`` for one row of the ``check`` table."""
    from polar_lang.ast.nodes import Query, ResourceBlock, Rule, RuleType
    from polar_lang.formatter import to_polar

    if isinstance(line, Rule):
        kind = "fact" if line.is_fact else "rule"
        return kind, f"{line.name}/{len(line.params)}", line.span
    if isinstance(line, RuleType):
        return "rule type", f"{line.rule.name}/{len(line.rule.params)}", line.rule.span
    if isinstance(line, Query):
        return "query", to_polar(line.term), line.term.span
    if isinstance(line, ResourceBlock):
        summary = to_polar(line.resource)
        if line.keyword is not None:
            summary = f"{to_polar(line.keyword)} {summary}"
        return "resource block", summary, line.resource.span
    raise TypeError(f"Unknown line type: {type(line)}")


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="polar-lang")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Polar policy language toolkit: parser, formatter, AST export."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from polar_lang import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]polar-lang[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# check command
# ---------------------------------------------------------------------------


@cli.command(name="check")
@click.argument("file", type=click.Path(exists=False))
def check_command(file: str) -> None:
    """Parse a Polar file and list what it defines.

    FILE is the path to the .polar file to check.
    """
    source = _read_source(file)
    lines = _parse_or_exit(source, file)

    if not lines:
        console.print(f"[green]OK[/green] {file}: empty policy")
        return

    table = Table(title=f"Policy: {file}", show_lines=False)
    table.add_column("Location", min_width=10)
    table.add_column("Kind", style="bold", min_width=10)
    table.add_column("Definition")

    for line in lines:
        kind, summary, span = _describe_line(line)
        loc = f"{span.line}:{span.col}" if span is not None else "-"
        table.add_row(loc, kind, summary)

    console.print(table)
    console.print(f"\n[green]OK[/green] {file}: {len(lines)} line(s) parsed")


# ---------------------------------------------------------------------------
# fmt command
# ---------------------------------------------------------------------------


@cli.command(name="fmt")
@click.argument("file", type=click.Path(exists=False))
@click.option("--check", is_flag=True, default=False, help="Check if file is already formatted")
@click.option("--in-place", is_flag=True, default=False, help="Rewrite the file in place")
def fmt_command(file: str, check: bool, in_place: bool) -> None:
    """Format a Polar file to canonical style.

    FILE is the path to the .polar file to format.

    Without --check or --in-place, prints the formatted output to stdout.
    """
    from polar_lang.formatter import format_lines

    source = _read_source(file)
    lines = _parse_or_exit(source, file)
    formatted = format_lines(lines)

    if check:
        if formatted == source:
            console.print(f"[green]OK[/green] {file}: already formatted")
            sys.exit(0)
        else:
            console.print(f"[yellow]NEEDS FORMATTING[/yellow] {file}")
            sys.exit(1)
    elif in_place:
        Path(file).write_text(formatted, encoding="utf-8")
        console.print(f"[green]Formatted[/green] {file}")
    else:
        click.echo(formatted, nl=False)


# ---------------------------------------------------------------------------
# parse command
# ---------------------------------------------------------------------------


@cli.command(name="parse")
@click.argument("file", type=click.Path(exists=False))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "yaml"], case_sensitive=False),
    default="json",
    help="AST output format",
)
@click.option("--output", "-o", default=None, help="Output file path (defaults to stdout)")
def parse_command(file: str, output_format: str, output: str | None) -> None:
    """Parse a Polar file and dump the AST.

    FILE is the path to the .polar file to parse.
    """
    from polar_lang.ast import AstSerializer

    source = _read_source(file)
    lines = _parse_or_exit(source, file)

    serializer = AstSerializer()

    if output_format.lower() == "json":
        text = serializer.to_json(lines, indent=2)
        lang = "json"
    else:
        text = serializer.to_yaml(lines)
        lang = "yaml"

    if output:
        Path(output).write_text(text, encoding="utf-8")
        console.print(f"[green]AST written to[/green] {output}")
    elif sys.stdout.isatty():
        console.print(Syntax(text, lang, line_numbers=True))
    else:
        click.echo(text)


if __name__ == "__main__":
    cli()
