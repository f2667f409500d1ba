"""Core doclinks data models."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List


class Verdict(str, Enum):
    """Outcome of validating one link occurrence."""

    INTERNAL_VALID = "internal_valid"
    EXTERNAL_VALID = "external_valid"
    ANCHOR_WARNING = "anchor_warning"
    BROKEN = "broken"

    @property
    def is_valid(self) -> bool:
        return self in (Verdict.INTERNAL_VALID, Verdict.EXTERNAL_VALID)


@dataclass(slots=True, frozen=True)
class Link:
    """A link reference found on one line of a source document."""

    source: Path
    line: int
    target: str


@dataclass(slots=True)
class LinkResult:
    """Verdict for a link plus the context needed to report it."""

    link: Link
    verdict: Verdict
    reason: str
    internal: bool = True
    resolved: Path | None = None
    depth: int | None = None
    fixed_to: str | None = None
    todo_marked: bool = False

    @property
    def deep_path(self) -> bool:
        return self.depth is not None

    def record(self) -> Dict[str, Any]:
        return {
            "file": str(self.link.source),
            "line": self.link.line,
            "link": self.link.target,
            "type": self.reason,
        }


@dataclass(slots=True)
class DeepPathRecord:
    file: str
    line: int
    link: str
    depth: int

    def record(self) -> Dict[str, Any]:
        return {"file": self.file, "line": self.line, "link": self.link, "depth": self.depth}


@dataclass(slots=True)
class RunStatistics:
    """Counters aggregated over one validation run.

    Each scan owns its own instance; the orchestrator combines them with
    :meth:`merge` after every document has been scanned.
    """

    total_files: int = 0
    total_links: int = 0
    valid_links: int = 0
    broken_links: int = 0
    warnings: int = 0
    internal_links: int = 0
    external_links: int = 0
    valid_internal: int = 0
    valid_external: int = 0
    deep_path_warnings: int = 0
    auto_todo_fixes: int = 0
    batch_fixes: int = 0
    broken: List[Dict[str, Any]] = field(default_factory=list)
    warning_records: List[Dict[str, Any]] = field(default_factory=list)
    deep_paths: List[Dict[str, Any]] = field(default_factory=list)

    def record(self, result: LinkResult) -> None:
        self.total_links += 1
        if result.internal:
            self.internal_links += 1
        else:
            self.external_links += 1

        if result.verdict.is_valid:
            self.valid_links += 1
            if result.internal:
                self.valid_internal += 1
            else:
                self.valid_external += 1
        elif result.verdict is Verdict.ANCHOR_WARNING:
            self.valid_links += 1
            self.warnings += 1
            self.warning_records.append(result.record())
        else:
            self.broken_links += 1
            self.broken.append(result.record())

        if result.depth is not None:
            self.deep_path_warnings += 1
            self.deep_paths.append(
                DeepPathRecord(
                    file=str(result.link.source),
                    line=result.link.line,
                    link=result.link.target,
                    depth=result.depth,
                ).record()
            )
        if result.fixed_to is not None:
            self.batch_fixes += 1
        if result.todo_marked:
            self.auto_todo_fixes += 1

    def merge(self, other: RunStatistics) -> None:
        for item in fields(self):
            setattr(self, item.name, getattr(self, item.name) + getattr(other, item.name))

    @property
    def success_rate(self) -> int:
        if not self.total_links:
            return 0
        return self.valid_links * 100 // self.total_links


@dataclass(slots=True)
class DocumentReport:
    """Everything one worker produced for one document.

    ``lines`` holds the rendered console output so it can be replayed in
    submission order once all workers have finished.
    """

    path: Path
    stats: RunStatistics = field(default_factory=RunStatistics)
    results: List[LinkResult] = field(default_factory=list)
    lines: List[str] = field(default_factory=list)
