"""Matching of requested anchors against a document's anchor set."""

from __future__ import annotations

import re
from pathlib import Path

from doclinks.index.anchors import AnchorIndex
from doclinks.utils.text import normalize_anchor

_SPLIT_SECTION = re.compile(r"^([0-9])([0-9]+)-(.+)$")
_NUMBERED_PREFIX = re.compile(r"^[0-9]+-[0-9]+-")


class AnchorResolver:
    """Decide whether an anchor exists in a document.

    Three strategies are tried in order:

    1. exact match of the normalised anchor,
    2. a collapsed section number such as ``25-setup`` matched as ``2-5-setup``,
    3. an anchor without a section number matched against the tail of a
       numbered anchor, so ``setup`` finds ``2-5-setup``.
    """

    def __init__(self, index: AnchorIndex) -> None:
        self.index = index

    def exists(self, document: Path, requested: str) -> bool:
        anchors = self.index.anchors(document)
        wanted = normalize_anchor(requested)
        if not wanted:
            # A bare "#" points at the document itself.
            return True

        if wanted in anchors:
            return True

        split = _SPLIT_SECTION.match(wanted)
        if split:
            first, rest, suffix = split.groups()
            if f"{first}-{rest}-{suffix}" in anchors:
                return True

        if not _NUMBERED_PREFIX.match(wanted):
            tail = re.compile(r"^[0-9]+-[0-9]+-" + re.escape(wanted) + r"$")
            if any(tail.match(anchor) for anchor in anchors):
                return True

        return False
