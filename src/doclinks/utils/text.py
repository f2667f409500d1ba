"""Text helpers for anchor canonicalisation."""

from __future__ import annotations

import re

_UMLAUTS = (("ß", "ss"), ("ü", "u"), ("ö", "o"), ("ä", "a"))
_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_PARENT_SEGMENT = "../"


def normalize_anchor(text: str) -> str:
    """Map raw header or anchor text to its canonical identifier.

    The steps run in a fixed order: strip one leading ``#``, lowercase,
    transliterate umlauts, fold every other run of characters outside
    ``[a-z0-9]`` into a single hyphen and trim hyphens at both ends.
    Umlauts must be replaced before the folding step, otherwise ``ü`` would
    collapse into ``-``.
    """
    if text.startswith("#"):
        text = text[1:]
    text = text.lower()
    for umlaut, replacement in _UMLAUTS:
        text = text.replace(umlaut, replacement)
    return _NON_ALNUM.sub("-", text).strip("-")


def count_path_depth(link: str) -> int:
    """Count the ``../`` segments of a link."""
    return link.count(_PARENT_SEGMENT)
