"""Validator configuration."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

OUTPUT_FORMATS = ("text", "json")
DEFAULT_EXCLUDE = "archive"
DEFAULT_MAX_PATH_DEPTH = 5
DEFAULT_PARALLEL_JOBS = 2


class ConfigurationError(ValueError):
    """Raised for setup problems that must stop a run before scanning."""


@dataclass(slots=True, frozen=True)
class FixPattern:
    """``OLD:NEW`` substring replacement applied to matching links."""

    old: str
    new: str

    @classmethod
    def parse(cls, value: str) -> FixPattern:
        old, sep, new = value.partition(":")
        if not sep or not old:
            raise ValueError(f"Fix pattern must look like OLD:NEW, got {value!r}")
        return cls(old=old, new=new)


@dataclass(slots=True)
class ValidatorConfig:
    area_dir: Path
    docs_root: Path | None = None
    area_name: str | None = None
    exclude_pattern: str | None = DEFAULT_EXCLUDE
    extensions: Tuple[str, ...] = (".md",)
    verbose: bool = False
    color: bool = True
    parallel_jobs: int = DEFAULT_PARALLEL_JOBS
    output_format: str = "text"
    fix_pattern: FixPattern | None = None
    auto_todo: bool = False
    warn_deep_paths: bool = True
    max_path_depth: int = DEFAULT_MAX_PATH_DEPTH
    warm_cache: bool = False

    def __post_init__(self) -> None:
        self.area_dir = Path(self.area_dir).resolve()
        if not self.area_dir.is_dir():
            raise ConfigurationError(f"Area directory not found: {self.area_dir}")
        self.docs_root = self.resolve_docs_root()
        if not self.docs_root.is_dir():
            raise ConfigurationError(f"Docs root not found: {self.docs_root}")
        if self.area_name is None:
            self.area_name = self.area_dir.name
        if self.parallel_jobs < 1:
            raise ConfigurationError("parallel_jobs must be at least 1")
        if self.max_path_depth < 0:
            raise ConfigurationError("max_path_depth must not be negative")
        if self.output_format not in OUTPUT_FORMATS:
            raise ConfigurationError(f"Unknown output format: {self.output_format}")
        if self.exclude_pattern:
            try:
                re.compile(self.exclude_pattern)
            except re.error as exc:
                raise ConfigurationError(f"Invalid exclude pattern {self.exclude_pattern!r}: {exc}") from exc

    def resolve_docs_root(self) -> Path:
        if self.docs_root is None:
            return self.area_dir
        if Path(self.docs_root).is_absolute():
            return Path(self.docs_root).resolve()
        return (self.area_dir / self.docs_root).resolve()

    @property
    def parallel(self) -> bool:
        return self.parallel_jobs > 1
