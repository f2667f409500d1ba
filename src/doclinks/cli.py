"""Command line interface for doclinks."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from doclinks.config import (
    DEFAULT_EXCLUDE,
    DEFAULT_MAX_PATH_DEPTH,
    DEFAULT_PARALLEL_JOBS,
    OUTPUT_FORMATS,
    ConfigurationError,
    FixPattern,
    ValidatorConfig,
)
from doclinks.index.anchors import AnchorIndex
from doclinks.models import DocumentReport
from doclinks.report import print_header, render_json, render_text_summary
from doclinks.utils.files import iter_document_paths
from doclinks.validation.scanner import ScanOrchestrator

EXIT_OK = 0
EXIT_BROKEN = 1
EXIT_SETUP_ERROR = 2

app = typer.Typer(help="doclinks - validate links and anchors between Markdown documents")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _make_console(color: bool) -> Console:
    return Console(no_color=not color, highlight=False, emoji=False, soft_wrap=True)


def _parse_fix_pattern(value: Optional[str]) -> Optional[FixPattern]:
    if not value:
        return None
    try:
        return FixPattern.parse(value)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--fix-pattern") from exc


@app.command()
def validate(
    area: Path = typer.Argument(..., help="Directory whose documents are validated."),
    docs_root: Path = typer.Option(None, "--docs-root", help="Root for links starting with '/' (default: AREA)"),
    area_name: str = typer.Option(None, "--area-name", help="Name shown in reports (default: AREA's name)"),
    exclude: str = typer.Option(DEFAULT_EXCLUDE, help="Regex of directory names to skip", envvar="DOCLINKS_EXCLUDE"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show every link", envvar="DOCLINKS_VERBOSE"),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
    parallel_jobs: int = typer.Option(
        DEFAULT_PARALLEL_JOBS, "--parallel-jobs", "-j", help="Documents scanned concurrently", envvar="DOCLINKS_JOBS"
    ),
    output_format: str = typer.Option("text", "--output-format", help="text or json"),
    fix_pattern: str = typer.Option(None, "--fix-pattern", help="Rewrite links containing OLD to NEW (OLD:NEW)"),
    auto_todo: bool = typer.Option(False, "--auto-todo", help="Replace links to never-existing files by a TODO"),
    no_deep_path_warning: bool = typer.Option(False, "--no-deep-path-warning", help="Disable deep path warnings"),
    max_path_depth: int = typer.Option(DEFAULT_MAX_PATH_DEPTH, "--max-path-depth", help="Max '../' before warning"),
    warm_cache: bool = typer.Option(False, "--warm-cache", help="Pre-build the anchor index of every document"),
) -> None:
    """Validate all document links below AREA."""
    _setup_logging(verbose)
    if output_format not in OUTPUT_FORMATS:
        raise typer.BadParameter(f"must be one of {', '.join(OUTPUT_FORMATS)}", param_hint="--output-format")

    console = _make_console(not no_color)
    try:
        config = ValidatorConfig(
            area_dir=area,
            docs_root=docs_root,
            area_name=area_name,
            exclude_pattern=exclude or None,
            verbose=verbose,
            color=not no_color,
            parallel_jobs=parallel_jobs,
            output_format=output_format,
            fix_pattern=_parse_fix_pattern(fix_pattern),
            auto_todo=auto_todo,
            warn_deep_paths=not no_deep_path_warning,
            max_path_depth=max_path_depth,
            warm_cache=warm_cache,
        )
    except ConfigurationError as exc:
        typer.secho(f"ERROR: {exc}", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=EXIT_SETUP_ERROR)

    text_mode = config.output_format == "text"
    documents = list(
        iter_document_paths(config.area_dir, extensions=config.extensions, exclude=config.exclude_pattern)
    )

    if text_mode:
        print_header(console, config.area_name)
        if not documents:
            console.print(f"No markdown files found in {escape(str(config.area_dir))}")
            raise typer.Exit(code=EXIT_OK)
        console.print(f"Found {len(documents)} markdown files")
        console.print()

    def emit(report: DocumentReport) -> None:
        for line in report.lines:
            console.print(line)

    outcome = ScanOrchestrator(config).run(documents, on_report=emit if text_mode else None)

    if text_mode:
        render_text_summary(console, outcome.stats)
    else:
        typer.echo(render_json(outcome.stats, config.area_name))

    raise typer.Exit(code=EXIT_BROKEN if outcome.has_broken_links else EXIT_OK)


@app.command()
def anchors(
    document: Path = typer.Argument(..., help="Markdown document to inspect."),
) -> None:
    """List the canonical anchors of a document."""
    if not document.is_file():
        raise typer.BadParameter(f"Document not found: {document}")

    found = AnchorIndex().anchors(document)
    console = _make_console(True)
    if not found:
        console.print("[yellow]No anchors found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#")
    table.add_column("Anchor")
    for position, anchor in enumerate(found, start=1):
        table.add_row(str(position), escape(anchor))
    console.print(table)
