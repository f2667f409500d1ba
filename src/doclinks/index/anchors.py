"""Per-document anchor cache."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, Iterable, List, Tuple

from doclinks.utils.files import read_document, split_lines
from doclinks.utils.text import normalize_anchor

LOGGER = logging.getLogger(__name__)

HEADER_PATTERN = re.compile(r"^#+\s(.+)$")
ID_ATTRIBUTE_PATTERN = re.compile(r'id="([^"]+)"')


def extract_anchors(text: str) -> List[str]:
    """Collect anchors from header lines and ``id="..."`` attributes.

    Header text is normalised; attribute values are kept verbatim.
    """
    anchors: List[str] = []
    for line in split_lines(text):
        match = HEADER_PATTERN.match(line)
        if match:
            anchors.append(normalize_anchor(match.group(1)))
    anchors.extend(ID_ATTRIBUTE_PATTERN.findall(text))
    return anchors


class AnchorIndex:
    """Lazily built mapping of absolute document path to its anchors.

    Entries are immutable once built. An index is owned by a single scan
    worker; use :meth:`fork` to hand a copy of already built entries to
    another worker.
    """

    def __init__(self, entries: Dict[Path, Tuple[str, ...]] | None = None) -> None:
        self._entries: Dict[Path, Tuple[str, ...]] = dict(entries or {})

    def __contains__(self, document: Path) -> bool:
        return self._key(document) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    @staticmethod
    def _key(document: Path) -> Path:
        return Path(document).absolute()

    def ensure_built(self, document: Path) -> None:
        key = self._key(document)
        if key in self._entries:
            return
        text = read_document(key)
        anchors = tuple(extract_anchors(text)) if text is not None else ()
        LOGGER.debug("Indexed %d anchors in %s", len(anchors), key)
        self._entries[key] = anchors

    def anchors(self, document: Path) -> Tuple[str, ...]:
        self.ensure_built(document)
        return self._entries[self._key(document)]

    def warm(self, documents: Iterable[Path]) -> int:
        """Build entries for every document up front; returns how many."""
        count = 0
        for document in documents:
            self.ensure_built(document)
            count += 1
        return count

    def fork(self) -> AnchorIndex:
        return AnchorIndex(self._entries)
