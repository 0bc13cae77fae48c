"""Command line interface for BookTagger."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from booktagger.config import AppConfig
from booktagger.errors import BookTaggerError, ExportError
from booktagger.index.pipeline import KeywordPipeline
from booktagger.keywords.filters import load_exclusions


console = Console()
app = typer.Typer(help="BookTagger - TF-IDF keywords for a personal library")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


@app.command()
def extract(
    root: Path = typer.Argument(
        ..., help="Directory to scan recursively for PDF and EPUB files.", resolve_path=True
    ),
    exclusions: Optional[Path] = typer.Option(
        None, "--exclusions", "-x", help="CSV file of terms to exclude (header row, first column)"
    ),
    output: Path = typer.Option(AppConfig().output_path, "--output", "-o", help="JSON output path"),
    top_k: int = typer.Option(AppConfig().top_k, help="Ranked keywords per document"),
    min_year: int = typer.Option(AppConfig().min_year, help="Earliest plausible year"),
    max_year: int = typer.Option(AppConfig().max_year, help="Latest plausible year"),
    workers: int = typer.Option(AppConfig().workers, help="Extraction threads"),
    content_ids: bool = typer.Option(
        False, "--content-ids", help="Derive document ids from file content instead of at random"
    ),
    skip_empty: bool = typer.Option(
        False, "--skip-empty", help="Omit documents without usable words"
    ),
    strict: bool = typer.Option(False, "--strict", help="Abort on the first failed document"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Extract keywords for every document under ROOT and write them as JSON."""
    _setup_logging(verbose)
    if not root.is_dir():
        raise typer.BadParameter(f"Not a directory: {root}")

    try:
        config = AppConfig(
            output_path=output,
            exclusions_path=exclusions,
            top_k=top_k,
            min_year=min_year,
            max_year=max_year,
            workers=workers,
            id_strategy="content" if content_ids else "random",
            skip_empty=skip_empty,
            strict=strict,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    exclusion_set = load_exclusions(config.exclusions_path)
    for warning in exclusion_set.warnings:
        console.print(f"[yellow]Exclusions: {escape(str(warning))}[/yellow]")

    pipeline = KeywordPipeline(config, exclusion_set)
    console.print(f"Scanning [bold]{escape(str(root))}[/bold]...")
    try:
        result = pipeline.run([root])
    except BookTaggerError as exc:
        console.print(f"[red]Aborted: {escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc

    if not len(result.exporter):
        console.print("[yellow]No documents found.[/yellow]")

    resolved_output = config.resolve_output_path(Path.cwd())
    try:
        result.exporter.write(resolved_output)
    except ExportError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Document")
    table.add_column("Keywords")
    for record in result.exporter.records:
        table.add_row(escape(record.filename), escape(", ".join(record.keywords[:10])))
    if result.exporter.records:
        console.print(table)

    stats = result.stats
    console.print(
        f"Recorded: {stats.recorded}, empty: {stats.empty}, "
        f"omitted: {stats.omitted}, failed: {stats.failed}"
    )
    console.print(f"Wrote [bold]{escape(str(resolved_output))}[/bold]")
