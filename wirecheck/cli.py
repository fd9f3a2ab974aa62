#!/usr/bin/env python3
"""
wirecheck CLI - Fluent assertion engine developer tools

Usage:
    wirecheck compile <expression>
    wirecheck check <expression> <value> [ARGS...]
    wirecheck compare <left> <right> [--strict] [--max-depth N]
    wirecheck config [--file wirecheck.yaml]
    wirecheck --version
"""

from dataclasses import asdict
from pathlib import Path
from typing import Any, List, Optional

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .compare import ValueComparator
from .config import ConfigStore, apply_config_file
from .errors import AssertionFailure, ExpressionError
from .expr import StepKind, create_expr_adapter
from .formatting import format_value

app = typer.Typer(
    name="wirecheck",
    help="🔌 wirecheck - Fluent assertion engine developer tools",
    add_completion=False,
)
console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"🔌 wirecheck v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True,
        help="Show version and exit"
    ),
):
    """
    🔌 wirecheck - Fluent assertion engine developer tools

    Compile assertion expressions and compare values from the command line.
    """
    pass


def parse_operand(text: str) -> Any:
    """Parse a command line operand as a YAML literal ("[1, 2]", "{a: 1}", "3")."""
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        console.print(f"[red]❌ Invalid operand {text!r}:[/red] {e}")
        raise typer.Exit(code=2)


@app.command("compile")
def compile_expr(
    expression: str = typer.Argument(..., help="Dot-path expression, e.g. not.deep.include"),
):
    """
    Validate an expression and show its steps.
    """
    try:
        compiled = create_expr_adapter(expression)
    except ExpressionError as e:
        console.print(f"\n[red]❌ {escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    table = Table(title=f"Steps: {compiled.expression}")
    table.add_column("#", style="dim")
    table.add_column("Step", style="cyan")
    table.add_column("Kind", style="magenta")
    table.add_column("Arguments")

    for index, step in enumerate(compiled.steps):
        args = ", ".join(str(arg) for arg in step.args) if step.args is not None else ""
        kind = step.kind.value
        if step.kind == StepKind.CUSTOM:
            kind += " (resolved when called)"
        table.add_row(str(index), step.name, kind, args)

    console.print()
    console.print(table)


@app.command()
def check(
    expression: str = typer.Argument(..., help="Dot-path expression, e.g. deep.equal"),
    value: str = typer.Argument(..., help="Subject value (YAML literal)"),
    args: Optional[List[str]] = typer.Argument(None, help="Call arguments (YAML literals)"),
    verbose: bool = typer.Option(
        False, "--verbose", "-V",
        help="Record every step in the failure's operation path"
    ),
):
    """
    Evaluate an expression against a value.

    Exits 0 when the assertion passes and 1 when it fails.
    """
    subject = parse_operand(value)
    call_args = [parse_operand(arg) for arg in args or []]

    try:
        compiled = create_expr_adapter(expression)
        compiled.evaluate(subject, *call_args, config={"is_verbose": verbose})
    except ExpressionError as e:
        console.print(f"\n[red]❌ {escape(str(e))}[/red]")
        raise typer.Exit(code=1)
    except AssertionFailure as e:
        label = "Fatal" if e.is_fatal else "Failed"
        console.print(f"\n[red]❌ {label}:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    console.print(f"\n[green]✅ Passed:[/green] {escape(expression)} {escape(format_value(subject))}")


@app.command()
def compare(
    left: str = typer.Argument(..., help="Left value (YAML literal)"),
    right: str = typer.Argument(..., help="Right value (YAML literal)"),
    strict: bool = typer.Option(
        False, "--strict", "-s",
        help="Require identical types at every level"
    ),
    max_depth: Optional[int] = typer.Option(
        None, "--max-depth", "-d", min=1,
        help="Maximum container nesting before comparison aborts"
    ),
):
    """
    Deeply compare two values.

    Exits 0 when the values are equal and 1 otherwise.
    """
    a = parse_operand(left)
    b = parse_operand(right)

    try:
        equal = ValueComparator(strict=strict, max_compare_depth=max_depth).compare(a, b)
    except AssertionFailure as e:
        console.print(f"\n[red]❌ {escape(e.message)}[/red]")
        raise typer.Exit(code=1)

    mode = "strict" if strict else "loose"
    if equal:
        console.print(f"\n[green]✅ Equal ({mode}):[/green] {escape(format_value(a))}")
        raise typer.Exit(code=0)

    console.print(f"\n[red]❌ Not equal ({mode}):[/red]")
    console.print(f"   Left:  {escape(format_value(a))}")
    console.print(f"   Right: {escape(format_value(b))}")
    raise typer.Exit(code=1)


@app.command()
def config(
    file: Optional[Path] = typer.Option(
        None, "--file", "-f",
        help="YAML configuration file to apply first",
    ),
):
    """
    Show the effective configuration.
    """
    store = ConfigStore()

    if file is not None:
        console.print(f"\n📄 Applying: {file}")
        result = apply_config_file(file, store)
        if not result.is_valid:
            console.print(f"\n[red]❌ Validation failed:[/red]")
            console.print(escape(str(result)))
            raise typer.Exit(code=1)

    settings = asdict(store.snapshot())
    fmt = settings.pop("format")
    fmt.pop("formatters", None)

    table = Table(title="Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    for name, value in settings.items():
        table.add_row(name, repr(value))
    for name, value in fmt.items():
        table.add_row(f"format.{name}", repr(value))

    console.print()
    console.print(table)


@app.command()
def info():
    """
    Show information about wirecheck.
    """
    console.print(f"""
🔌 [bold]wirecheck[/bold] v{__version__}

Fluent assertion engine

[bold]Features:[/bold]
  • Cycle-safe deep equality for any Python value
  • Dot-path assertion expressions (not.deep.own.include)
  • Custom steps registered at runtime
  • Structured failures with message templates

[bold]Quick Start:[/bold]
  wirecheck compile "not.deep.include"
  wirecheck check deep.equal "{{a: [1, 2]}}" "{{a: [1, 2]}}"
  wirecheck compare "[1, 2]" "[1, 2.0]" --strict
""")


if __name__ == "__main__":
    app()
