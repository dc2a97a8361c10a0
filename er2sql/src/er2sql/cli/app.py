"""Typer CLI application."""

import typer
from pathlib import Path
from typing import Optional

from er2sql.compiler import compile as compile_graph, validate as validate_graph
from er2sql.config.logging import setup_logging
from er2sql.config.settings import get_settings
from er2sql.errors import SynthesisError
from er2sql.utils.graph_io import load_graph_from_json

app = typer.Typer(help="er2sql: ER diagrams to relational SQL schemas")


def _load(graph_json: Path):
    try:
        return load_graph_from_json(Path(graph_json))
    except (FileNotFoundError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def _print_diagnostics(diagnostics) -> None:
    for d in diagnostics:
        typer.echo(f"{d.severity.upper():7} {d.element_id}: [{d.short_label}] {d.description}", err=True)


@app.command()
def validate(
    graph_json: Path,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level"),
):
    """
    Validate an ER graph and print its diagnostics.

    Args:
        graph_json: Path to the graph JSON file
        verbose: Log at DEBUG level
    """
    setup_logging("DEBUG" if verbose else None)
    graph = _load(graph_json)

    diagnostics = validate_graph(graph)
    _print_diagnostics(diagnostics)

    errors = sum(1 for d in diagnostics if d.is_error)
    if errors:
        typer.echo(f"✗ {errors} error(s) found", err=True)
        raise typer.Exit(1)
    typer.echo(f"✓ Graph is valid ({len(diagnostics)} warning(s))")


@app.command()
def compile(
    graph_json: Path,
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Write SQL to this file instead of stdout"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level"),
):
    """
    Compile an ER graph to SQL DDL.

    Args:
        graph_json: Path to the graph JSON file
        out: Optional output path for the SQL file
        verbose: Log at DEBUG level
    """
    setup_logging("DEBUG" if verbose else None)
    settings = get_settings()
    graph = _load(graph_json)

    try:
        result = compile_graph(graph, settings)
    except SynthesisError as e:
        typer.echo(f"Error: synthesis failed at element {e.element_id}: {e}", err=True)
        raise typer.Exit(2)

    _print_diagnostics(result.diagnostics)
    if not result.ok:
        typer.echo("✗ Compilation blocked by validation errors", err=True)
        raise typer.Exit(1)

    if out is None:
        typer.echo(result.sql, nl=False)
        return

    out = Path(out)
    if not out.is_absolute() and out.parent == Path("."):
        out = settings.output_dir / out
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(result.sql, encoding="utf-8")
    typer.echo(f"✓ Complete! SQL written to {out}")


def main():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
