"""In-place rewrites of link occurrences in source documents.

Both fixers edit a single line of the source document and treat the
matched link as a literal string: the batch fix uses plain string
replacement, the TODO marker escapes the link before building its pattern
and inserts the marker through a callable so nothing in it is read as a
back-reference.
"""

from __future__ import annotations

import logging
import posixpath
import re
from dataclasses import dataclass
from typing import Protocol

from doclinks.config import FixPattern
from doclinks.models import Link
from doclinks.utils.files import rewrite_line

LOGGER = logging.getLogger(__name__)

TODO_TEMPLATE = "`{name}.md` (TODO: to create)"


class History(Protocol):
    def has_history(self, file_name: str) -> bool | None: ...


@dataclass(slots=True)
class BatchFixer:
    """Replace the configured old substring in matching links."""

    pattern: FixPattern

    def matches(self, target: str) -> bool:
        return self.pattern.old in target

    def apply(self, link: Link) -> str | None:
        """Rewrite this occurrence and return the new link, or None."""
        if not self.matches(link.target):
            return None
        new_target = link.target.replace(self.pattern.old, self.pattern.new)
        old_markup = f"]({link.target})"
        new_markup = f"]({new_target})"

        def edit(line: str) -> str | None:
            if old_markup not in line:
                return None
            return line.replace(old_markup, new_markup, 1)

        if not rewrite_line(link.source, link.line, edit):
            LOGGER.warning("Batch fix not applied to %s:%s (%s)", link.source, link.line, link.target)
            return None
        return new_target


def todo_name(target: str) -> str:
    """Base name of the linked document without its anchor or ``.md`` suffix."""
    name = posixpath.basename(target.split("#", 1)[0])
    return name[:-3] if name.endswith(".md") else name


class TodoMarker:
    """Replace links to never-existing documents with a TODO placeholder.

    A document whose name appears anywhere in version history is presumed
    moved rather than missing and is left alone. So is every document when
    the history cannot be consulted.
    """

    def __init__(self, history: History) -> None:
        self.history = history

    def apply(self, link: Link) -> bool:
        name = todo_name(link.target)
        seen = self.history.has_history(f"{name}.md")
        if seen is None:
            LOGGER.info("No version history available; not marking %s as TODO", link.target)
            return False
        if seen:
            LOGGER.debug("History found for %s.md; presumed moved", name)
            return False

        markup = re.compile(r"\[[^\]]*\]\(" + re.escape(link.target) + r"\)")
        marker = TODO_TEMPLATE.format(name=name)

        def edit(line: str) -> str | None:
            new_line, count = markup.subn(lambda _: marker, line, count=1)
            return new_line if count else None

        if not rewrite_line(link.source, link.line, edit):
            LOGGER.warning("TODO marker not applied to %s:%s (%s)", link.source, link.line, link.target)
            return False
        return True
