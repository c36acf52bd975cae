"""CLI entry point for ruletag.

Invoked as::

    ruletag [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m ruletag.cli.main

Commands
--------
args        Lex an argument list and show the typed arguments
rules       Split rule text into invocations and show their arguments
check       Compile rule text and run it against a value
validators  List registered validators
version     Show version information
"""
from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from ruletag.engine import ValidatorEngine

console = Console()
err_console = Console(stderr=True)

_FIELD_TYPES: dict[str, type] = {"int": int, "str": str}


def _engine_or_exit(constants: str | None) -> "ValidatorEngine":
    """Build an engine, loading constants from ``constants`` if given."""
    from ruletag.config import load_constants
    from ruletag.engine import ValidatorEngine
    from ruletag.errors import ConfigurationError

    engine = ValidatorEngine()
    if constants:
        try:
            count = load_constants(constants, engine)
        except ConfigurationError as exc:
            err_console.print(f"[red]Config error:[/red] {escape(str(exc))}")
            sys.exit(1)
        logging.getLogger(__name__).debug("Loaded %d constant(s) from %s", count, constants)
    return engine


def _convert_value(raw: str, field_type: str) -> Any:
    """Turn a command-line VALUE into the declared field type."""
    if field_type == "int":
        try:
            return int(raw)
        except ValueError:
            return raw
    return raw


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="ruletag")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Declarative field validation rules: lexer, compiler and checker."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from ruletag import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]ruletag[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# validators command
# ---------------------------------------------------------------------------


@cli.command(name="validators")
def validators_command() -> None:
    """List all registered validators."""
    from ruletag.engine import ValidatorEngine

    engine = ValidatorEngine()
    table = Table(title="Registered validators")
    table.add_column("Name", style="bold")
    table.add_column("Description")
    for name in engine.validators.names():
        factory = engine.validators.get(name)
        doc = (factory.__doc__ or "").strip().splitlines()
        table.add_row(name, doc[0] if doc else "")
    console.print(table)


# ---------------------------------------------------------------------------
# args command
# ---------------------------------------------------------------------------


@cli.command(name="args")
@click.argument("text")
def args_command(text: str) -> None:
    """Lex an argument list such as "1, 'a', LIMIT".

    TEXT is the argument text without the surrounding parentheses.
    """
    from ruletag.errors import ArgumentSyntaxError
    from ruletag.lexer import parse_arguments

    try:
        bundle = parse_arguments(text)
    except ArgumentSyntaxError as exc:
        err_console.print(f"[red]Syntax error:[/red] {escape(str(exc))}")
        sys.exit(1)

    table = Table(title="Arguments", show_lines=True)
    table.add_column("Kind", style="bold", min_width=8)
    table.add_column("Values")
    table.add_row("integers", ", ".join(str(i) for i in bundle.integers))
    table.add_row("strings", escape(", ".join(repr(s) for s in bundle.strings)))
    table.add_row("symbols", ", ".join(bundle.symbols))
    console.print(table)


# ---------------------------------------------------------------------------
# rules command
# ---------------------------------------------------------------------------


@cli.command(name="rules")
@click.argument("text")
@click.option("--constants", "-c", default=None, help="YAML or JSON file of constants")
@click.option(
    "--type",
    "field_type",
    type=click.Choice(sorted(_FIELD_TYPES), case_sensitive=False),
    default=None,
    help="Declared field type; when given, each validator is built",
)
def rules_command(text: str, constants: str | None, field_type: str | None) -> None:
    """Split rule text into invocations and show each one's arguments.

    TEXT is the rule text, e.g. "irange(1, 2, 3), max(LIMIT)".
    """
    from ruletag.errors import ConfigurationError
    from ruletag.parser import parse_rules

    engine = _engine_or_exit(constants)
    try:
        parsed = parse_rules(text)
    except ConfigurationError as exc:
        err_console.print(f"[red]Syntax error:[/red] {escape(str(exc))}")
        sys.exit(1)

    table = Table(title=f"Rules: {escape(text)}", show_lines=True)
    table.add_column("#", min_width=3)
    table.add_column("Rule", style="bold")
    table.add_column("Integers")
    table.add_column("Strings")
    table.add_column("Symbols")
    table.add_column("Status")

    failed = False
    for index, rule in enumerate(parsed, start=1):
        status = "[dim]parsed[/dim]"
        try:
            if field_type is not None:
                engine.compile_rules(str(rule.invocation), _FIELD_TYPES[field_type.lower()])
                status = "[green]built[/green]"
            elif rule.name not in engine.validators:
                status = "[yellow]unknown validator[/yellow]"
        except ConfigurationError as exc:
            status = f"[red]{escape(str(exc))}[/red]"
            failed = True
        args = rule.arguments
        table.add_row(
            str(index),
            rule.name,
            ", ".join(str(i) for i in args.integers),
            escape(", ".join(repr(s) for s in args.strings)),
            ", ".join(args.symbols),
            status,
        )

    console.print(table)
    if failed:
        sys.exit(1)


# ---------------------------------------------------------------------------
# check command
# ---------------------------------------------------------------------------


@cli.command(name="check")
@click.argument("text")
@click.argument("value")
@click.option("--constants", "-c", default=None, help="YAML or JSON file of constants")
@click.option(
    "--type",
    "field_type",
    type=click.Choice(sorted(_FIELD_TYPES), case_sensitive=False),
    default="str",
    help="Declared field type (default: str)",
)
@click.option("--name", default="value", help="Field name used in failure messages")
def check_command(text: str, value: str, constants: str | None, field_type: str, name: str) -> None:
    """Compile rule TEXT and run it against VALUE.

    Examples:

    \b
        ruletag check "not_empty(), len(3)" abc
        ruletag check "min(1), max(LIMIT)" 42 --type int -c limits.yaml
    """
    from ruletag.errors import ConfigurationError

    engine = _engine_or_exit(constants)
    field_type = field_type.lower()
    try:
        validator = engine.compile_rules(text, _FIELD_TYPES[field_type], name=name)
    except ConfigurationError as exc:
        err_console.print(f"[red]Configuration error:[/red] {escape(str(exc))}")
        sys.exit(1)

    failure = validator(_convert_value(value, field_type))
    if failure is None:
        console.print(f"[green]OK[/green] {escape(repr(value))} passes {escape(text)}")
        return
    console.print(f"[red]FAIL[/red] {escape(str(failure))}")
    sys.exit(1)


if __name__ == "__main__":
    cli()
