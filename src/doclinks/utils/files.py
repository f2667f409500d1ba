"""Utility helpers for working with document files."""

from __future__ import annotations

import logging
import os
import re
import shutil
import tempfile
from pathlib import Path
from typing import Callable, Iterator, Sequence

LOGGER = logging.getLogger(__name__)


def iter_document_paths(
    root: Path,
    *,
    extensions: Sequence[str] = (".md",),
    exclude: str | None = None,
) -> Iterator[Path]:
    """Yield documents below ``root`` in sorted order.

    Paths with a directory component matching ``exclude`` are skipped.
    """
    suffixes = {ext.lower() for ext in extensions}
    excluded = re.compile(f"/(?:{exclude})/") if exclude else None
    for path in sorted(root.rglob("*")):
        if not path.is_file() or path.suffix.lower() not in suffixes:
            continue
        if excluded is not None and excluded.search(path.as_posix()):
            continue
        yield path


def read_document(path: Path) -> str | None:
    """Return the text of a document, or None when it cannot be read."""
    try:
        with path.open(encoding="utf-8", newline="") as handle:
            return handle.read()
    except (OSError, UnicodeDecodeError) as exc:
        LOGGER.warning("Cannot read %s: %s", path, exc)
        return None


def split_lines(text: str) -> list[str]:
    """Split ``text`` on ``\\n`` only and drop ``\\r`` terminators.

    Other Unicode line boundaries (form feed, ``\\u2028``...) stay inside
    their line so numbering matches editors and grep.
    """
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def read_lines(path: Path) -> list[str]:
    text = read_document(path)
    return split_lines(text) if text is not None else []


def write_document(path: Path, text: str) -> bool:
    """Replace ``path`` atomically; readers see the old or the new text, never a partial one."""
    temp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            newline="",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            temp_name = handle.name
            handle.write(text)
        shutil.copymode(path, temp_name)
        os.replace(temp_name, path)
    except OSError as exc:
        LOGGER.warning("Cannot write %s: %s", path, exc)
        if temp_name is not None and os.path.exists(temp_name):
            os.unlink(temp_name)
        return False
    return True


def rewrite_line(path: Path, line_number: int, edit: Callable[[str], str | None]) -> bool:
    """Apply ``edit`` to one 1-based line of ``path`` and save the document.

    ``edit`` receives the line without its terminator and returns the new
    line, or None when there is nothing to change. Returns True only when the
    document was rewritten.
    """
    text = read_document(path)
    if text is None:
        return False
    lines = text.split("\n")
    count = len(lines) - 1 if lines[-1] == "" else len(lines)
    if not 1 <= line_number <= count:
        LOGGER.warning("%s has no line %s", path, line_number)
        return False
    line = lines[line_number - 1]
    terminator = "\r" if line.endswith("\r") else ""
    body = line[: len(line) - len(terminator)]
    edited = edit(body)
    if edited is None or edited == body:
        return False
    lines[line_number - 1] = edited + terminator
    return write_document(path, "\n".join(lines))


def relative_name(path: Path, base: Path) -> str:
    """Render ``path`` relative to ``base``, or by its name when outside it."""
    try:
        return path.relative_to(base).as_posix()
    except ValueError:
        return path.name
