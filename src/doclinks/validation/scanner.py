"""Document scanning and run orchestration."""

from __future__ import annotations

import logging
import re
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterator, List, Sequence

from rich.markup import escape

from doclinks.config import ValidatorConfig
from doclinks.index.anchors import AnchorIndex
from doclinks.index.resolver import AnchorResolver
from doclinks.models import DocumentReport, Link, RunStatistics
from doclinks.report import render_document_summary, render_result
from doclinks.utils.files import read_lines, relative_name
from doclinks.utils.vcs import GitHistory
from doclinks.validation.fixers import BatchFixer, History, TodoMarker
from doclinks.validation.paths import PathResolver
from doclinks.validation.validator import LinkValidator

LOGGER = logging.getLogger(__name__)

LINK_PATTERN = re.compile(r"\[[^\]]*\]\(([^)\s]+)\)")


def is_candidate(target: str) -> bool:
    return target.startswith("#") or ".md" in target


def extract_links(source: Path, lines: Sequence[str]) -> Iterator[Link]:
    """Yield every candidate link, line by line, in order of appearance."""
    for number, line in enumerate(lines, start=1):
        for match in LINK_PATTERN.finditer(line):
            target = match.group(1)
            if is_candidate(target):
                yield Link(source=source, line=number, target=target)


class DocumentScanner:
    """Validate every link of a document with one anchor index."""

    def __init__(
        self,
        config: ValidatorConfig,
        index: AnchorIndex,
        *,
        history: History | None = None,
    ) -> None:
        self.config = config
        self.index = index
        batch_fixer = BatchFixer(config.fix_pattern) if config.fix_pattern else None
        todo_marker = None
        if config.auto_todo:
            todo_marker = TodoMarker(history if history is not None else GitHistory(config.area_dir))
        self.validator = LinkValidator(
            AnchorResolver(index),
            PathResolver(config.docs_root, config.area_dir),
            warn_deep_paths=config.warn_deep_paths,
            max_path_depth=config.max_path_depth,
            batch_fixer=batch_fixer,
            todo_marker=todo_marker,
        )

    def scan(self, path: Path) -> DocumentReport:
        report = DocumentReport(path=path)
        report.stats.total_files = 1
        report.lines.append(f"[blue]Scanning:[/blue] {escape(relative_name(path, self.config.area_dir))}")

        for link in extract_links(path, read_lines(path)):
            result = self.validator.validate(link)
            report.results.append(result)
            report.stats.record(result)
            report.lines.extend(render_result(result, verbose=self.config.verbose))

        summary = render_document_summary(report.stats)
        if summary is not None:
            report.lines.append(summary)
        return report


@dataclass(slots=True)
class ScanOutcome:
    stats: RunStatistics
    reports: List[DocumentReport] = field(default_factory=list)

    @property
    def has_broken_links(self) -> bool:
        return self.stats.broken_links > 0


class ScanOrchestrator:
    """Drive document scans sequentially or on a bounded worker pool.

    In parallel mode every document is scanned end to end by one worker.
    Each worker thread keeps one anchor index (a fork of the warmed index)
    for its lifetime, and every document gets its own statistics. Nothing
    mutable is shared while workers run; reports are merged afterwards in
    submission order.
    """

    def __init__(self, config: ValidatorConfig, *, history: History | None = None) -> None:
        self.config = config
        self.history = history

    def run(
        self,
        documents: Sequence[Path],
        on_report: Callable[[DocumentReport], None] | None = None,
    ) -> ScanOutcome:
        warmed = AnchorIndex()
        if self.config.warm_cache:
            count = warmed.warm(documents)
            LOGGER.info("Cached anchors for %d documents", count)

        if self.config.parallel:
            reports = self._run_parallel(documents, warmed)
        else:
            reports = self._run_sequential(documents, warmed, on_report)

        outcome = ScanOutcome(stats=RunStatistics())
        for report in reports:
            outcome.stats.merge(report.stats)
            outcome.reports.append(report)
            if self.config.parallel and on_report is not None:
                on_report(report)
        return outcome

    def _run_sequential(
        self,
        documents: Sequence[Path],
        index: AnchorIndex,
        on_report: Callable[[DocumentReport], None] | None,
    ) -> List[DocumentReport]:
        scanner = DocumentScanner(self.config, index, history=self.history)
        reports = []
        for path in documents:
            report = self._scan_safely(scanner, path)
            if on_report is not None:
                on_report(report)
            reports.append(report)
        return reports

    def _run_parallel(self, documents: Sequence[Path], warmed: AnchorIndex) -> List[DocumentReport]:
        workers = threading.local()

        def scan(path: Path) -> DocumentReport:
            scanner = getattr(workers, "scanner", None)
            if scanner is None:
                scanner = workers.scanner = DocumentScanner(self.config, warmed.fork(), history=self.history)
            return self._scan_safely(scanner, path)

        with ThreadPoolExecutor(max_workers=self.config.parallel_jobs) as pool:
            futures = [pool.submit(scan, path) for path in documents]
            return [future.result() for future in futures]

    @staticmethod
    def _scan_safely(scanner: DocumentScanner, path: Path) -> DocumentReport:
        try:
            return scanner.scan(path)
        except Exception as exc:
            LOGGER.error("Failed to scan %s: %s", path, exc)
            report = DocumentReport(path=path)
            report.stats.total_files = 1
            return report
