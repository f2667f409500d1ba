"""Resolution of link paths to filesystem targets."""

from __future__ import annotations

import logging
import os
from pathlib import Path

LOGGER = logging.getLogger(__name__)


class PathResolver:
    """Map link references to target paths and classify them.

    ``docs_root`` anchors root-relative links (``/guide/setup.md``);
    ``area_root`` decides whether a target is internal. The internality test
    is a plain string prefix test, so ``/docs/api-old`` counts as inside
    ``/docs/api``.
    """

    def __init__(self, docs_root: Path, area_root: Path, *, canonicalize: bool = True) -> None:
        self.docs_root = Path(docs_root)
        self.area_root = Path(area_root)
        self.canonicalize = canonicalize

    def resolve(self, source: Path, link_path: str) -> Path:
        if link_path.startswith("/"):
            target = str(self.docs_root) + link_path
        else:
            target = os.path.join(os.path.dirname(str(source)), link_path)
        if not self.canonicalize:
            return Path(target)
        try:
            return Path(os.path.realpath(target))
        except (OSError, ValueError) as exc:
            LOGGER.debug("Cannot canonicalize %s: %s", target, exc)
            return Path(target)

    def is_internal(self, target: Path) -> bool:
        return str(target).startswith(str(self.area_root))
