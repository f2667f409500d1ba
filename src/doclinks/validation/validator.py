"""Per-link validation state machine."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from doclinks.index.resolver import AnchorResolver
from doclinks.models import Link, LinkResult, Verdict
from doclinks.utils.text import count_path_depth
from doclinks.validation.fixers import BatchFixer, TodoMarker
from doclinks.validation.paths import PathResolver

LOGGER = logging.getLogger(__name__)

EXTERNAL_SCHEME = re.compile(r"^(?:(?:https?|ftp)://|mailto:)")


def is_external_url(target: str) -> bool:
    return EXTERNAL_SCHEME.match(target) is not None


def _is_file(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError as exc:
        LOGGER.debug("Cannot stat %s: %s", path, exc)
        return False


class LinkValidator:
    """Classify one link occurrence and apply the configured fixers.

    Broken links and missing anchors are returned as verdicts, never raised.
    """

    def __init__(
        self,
        anchors: AnchorResolver,
        paths: PathResolver,
        *,
        warn_deep_paths: bool = True,
        max_path_depth: int = 5,
        batch_fixer: BatchFixer | None = None,
        todo_marker: TodoMarker | None = None,
    ) -> None:
        self.anchors = anchors
        self.paths = paths
        self.warn_deep_paths = warn_deep_paths
        self.max_path_depth = max_path_depth
        self.batch_fixer = batch_fixer
        self.todo_marker = todo_marker

    def validate(self, link: Link) -> LinkResult:
        target = link.target
        if is_external_url(target):
            return LinkResult(link, Verdict.EXTERNAL_VALID, "skipped", internal=False)

        depth = count_path_depth(target)
        deep = depth if self.warn_deep_paths and depth > self.max_path_depth else None

        if target.startswith("#"):
            if self.anchors.exists(link.source, target):
                return LinkResult(link, Verdict.INTERNAL_VALID, "anchor", depth=deep)
            return LinkResult(link, Verdict.BROKEN, "anchor", depth=deep)

        file_part, has_anchor, anchor = target.partition("#")

        if self.batch_fixer is not None and self.batch_fixer.matches(target):
            fixed = self.batch_fixer.apply(link)
            if fixed is None:
                return LinkResult(link, Verdict.BROKEN, "fix_not_applied", depth=deep)
            return LinkResult(link, Verdict.INTERNAL_VALID, "batch_fix", depth=deep, fixed_to=fixed)

        resolved = self.paths.resolve(link.source, file_part)
        internal = self.paths.is_internal(resolved)
        LOGGER.debug("%s:%s %s resolved to %s", link.source, link.line, target, resolved)

        if not _is_file(resolved):
            if self.todo_marker is not None and self.todo_marker.apply(link):
                return LinkResult(
                    link, Verdict.INTERNAL_VALID, "auto_todo", resolved=resolved, depth=deep, todo_marked=True
                )
            return LinkResult(
                link, Verdict.BROKEN, "file_not_found", internal=internal, resolved=resolved, depth=deep
            )

        if has_anchor and not self.anchors.exists(resolved, anchor):
            return LinkResult(
                link, Verdict.ANCHOR_WARNING, "anchor_not_found", internal=internal, resolved=resolved, depth=deep
            )

        verdict = Verdict.INTERNAL_VALID if internal else Verdict.EXTERNAL_VALID
        return LinkResult(link, verdict, "ok", internal=internal, resolved=resolved, depth=deep)
