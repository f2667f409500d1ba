"""Rendering of verdicts and run summaries."""

from __future__ import annotations

import json
from typing import List

from rich.console import Console
from rich.markup import escape

from doclinks.models import LinkResult, RunStatistics, Verdict

RULE = "=" * 40


def _file_part(target: str) -> str:
    return target.split("#", 1)[0]


def render_result(result: LinkResult, *, verbose: bool = False) -> List[str]:
    """Console lines (rich markup) describing one link verdict."""
    link = result.link
    target = escape(link.target)
    prefix = f"Line {link.line}:"
    lines: List[str] = []

    if result.depth is not None:
        lines.append(f"  [magenta]📏[/magenta] {prefix} Deep path ({result.depth} levels): {target}")
        if verbose:
            lines.append("      Consider: a root-relative path or a shorter relative path")

    reason = result.reason
    if reason == "skipped":
        if verbose:
            lines.append(f"  [cyan]⏭[/cyan]  {prefix} External link skipped: {target}")
    elif reason == "anchor":
        if result.verdict is Verdict.BROKEN:
            lines.append(f"  [red]❌[/red] {prefix} Anchor not found: {target}")
        elif verbose:
            lines.append(f"  [green]✅[/green] {prefix} Anchor valid: {target}")
    elif reason == "batch_fix":
        lines.append(f"  [green]🔧[/green] {prefix} Fixing: {target} → {escape(result.fixed_to or '')}")
    elif reason == "fix_not_applied":
        lines.append(f"  [red]❌[/red] {prefix} Fix not applied: {target}")
    elif reason == "auto_todo":
        lines.append(f"  [cyan]📝[/cyan] {prefix} Marked as TODO: {target}")
    elif reason == "file_not_found":
        label = "File not found" if result.internal else "External link broken"
        lines.append(f"  [red]❌[/red] {prefix} {label}: {escape(_file_part(link.target))}")
        if verbose:
            lines.append(f"      Resolved to: {escape(str(result.resolved))}")
    elif reason == "anchor_not_found":
        anchor = link.target[len(_file_part(link.target)):]
        lines.append(
            f"  [yellow]⚠️[/yellow]  {prefix} Anchor not found: {escape(anchor)} in {escape(_file_part(link.target))}"
        )
    elif verbose:
        if result.resolved is not None and "/archive/" in result.resolved.as_posix():
            lines.append(
                f"  [yellow]⚠️[/yellow]  {prefix} Link to archive (deprecated): {escape(_file_part(link.target))}"
            )
        if result.verdict is Verdict.EXTERNAL_VALID:
            lines.append(f"  [green]✅[/green] {prefix} External link valid: {target}")
        else:
            lines.append(f"  [green]✅[/green] {prefix} {target}")
    return lines


def render_document_summary(stats: RunStatistics) -> str | None:
    if not stats.total_links:
        return None
    rate = stats.success_rate
    if stats.broken_links == 0:
        return f"  [green]✓[/green] {stats.total_links} links, all valid ({rate}%)"
    return f"  [red]✗[/red] {stats.total_links} links, {stats.broken_links} broken ({rate}% valid)"


def print_header(console: Console, area: str) -> None:
    console.print(RULE)
    console.print(f"Link Validation Report - {escape(area)}")
    console.print(RULE)
    console.print()


def render_text_summary(console: Console, stats: RunStatistics) -> None:
    console.print()
    console.print(RULE)
    console.print("Summary")
    console.print(RULE)
    console.print(f"Total files scanned: {stats.total_files}")
    console.print(f"Total links found: {stats.total_links}")
    if stats.internal_links or stats.external_links:
        console.print(f"  Internal links: {stats.internal_links}")
        console.print(f"  External links: {stats.external_links}")
    console.print(f"Valid links: {stats.valid_links}")
    if stats.valid_internal or stats.valid_external:
        console.print(f"  Internal valid: {stats.valid_internal}")
        console.print(f"  External valid: {stats.valid_external}")
    console.print(f"Broken links: {stats.broken_links}")
    if stats.warnings:
        console.print(f"Warnings: {stats.warnings}")
    if stats.deep_path_warnings:
        console.print(f"Deep path warnings: {stats.deep_path_warnings}")
    if stats.auto_todo_fixes:
        console.print(f"Auto-TODO fixes: {stats.auto_todo_fixes}")
    if stats.batch_fixes:
        console.print(f"Batch fixes: {stats.batch_fixes}")
    if stats.total_links:
        console.print(f"Success rate: {stats.success_rate}%")
    console.print(RULE)


def render_json(stats: RunStatistics, area: str) -> str:
    payload = {
        "summary": {
            "area": area,
            "total_files": stats.total_files,
            "total_links": stats.total_links,
            "internal_links": stats.internal_links,
            "external_links": stats.external_links,
            "valid_links": stats.valid_links,
            "broken_links": stats.broken_links,
            "warnings": stats.warnings,
            "deep_path_warnings": stats.deep_path_warnings,
            "auto_todo_fixes": stats.auto_todo_fixes,
            "batch_fixes": stats.batch_fixes,
            "success_rate": stats.success_rate,
        },
        "broken_links": stats.broken,
        "warnings": stats.warning_records,
        "deep_paths": stats.deep_paths,
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)
