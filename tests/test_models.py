"""Tests for core data models."""

from __future__ import annotations

from pathlib import Path

import pytest

from doclinks.models import DocumentReport, Link, LinkResult, RunStatistics, Verdict


def _result(verdict: Verdict, reason: str = "ok", **kwargs) -> LinkResult:
    return LinkResult(Link(Path("/docs/a.md"), 4, "b.md#x"), verdict, reason, **kwargs)


class TestVerdict:
    """Test Verdict enum."""

    def test_valid_verdicts(self) -> None:
        """Should treat only the two valid verdicts as valid."""
        assert Verdict.INTERNAL_VALID.is_valid
        assert Verdict.EXTERNAL_VALID.is_valid
        assert not Verdict.ANCHOR_WARNING.is_valid
        assert not Verdict.BROKEN.is_valid

    def test_string_values(self) -> None:
        """Should serialise as plain strings."""
        assert Verdict.BROKEN.value == "broken"


class TestLinkResult:
    """Test LinkResult dataclass."""

    def test_record(self) -> None:
        """Should expose the structured record used in reports."""
        result = _result(Verdict.BROKEN, "file_not_found")

        assert result.record() == {"file": "/docs/a.md", "line": 4, "link": "b.md#x", "type": "file_not_found"}

    def test_deep_path_flag(self) -> None:
        """Should flag results carrying a depth."""
        assert _result(Verdict.INTERNAL_VALID, depth=6).deep_path
        assert not _result(Verdict.INTERNAL_VALID).deep_path


class TestRunStatistics:
    """Test RunStatistics accounting."""

    def test_defaults(self) -> None:
        """Should start with zeroed counters."""
        stats = RunStatistics()

        assert stats.total_links == 0
        assert stats.broken == []
        assert stats.success_rate == 0

    def test_record_internal_valid(self) -> None:
        """Should count valid internal links."""
        stats = RunStatistics()
        stats.record(_result(Verdict.INTERNAL_VALID))

        assert stats.total_links == 1
        assert stats.valid_links == 1
        assert stats.internal_links == 1
        assert stats.valid_internal == 1

    def test_record_external_valid(self) -> None:
        """Should count valid external links."""
        stats = RunStatistics()
        stats.record(_result(Verdict.EXTERNAL_VALID, internal=False))

        assert stats.external_links == 1
        assert stats.valid_external == 1

    def test_record_warning(self) -> None:
        """Should count warnings as valid but track them separately."""
        stats = RunStatistics()
        stats.record(_result(Verdict.ANCHOR_WARNING, "anchor_not_found"))

        assert stats.valid_links == 1
        assert stats.warnings == 1
        assert stats.valid_internal == 0
        assert stats.warning_records[0]["type"] == "anchor_not_found"

    def test_record_broken(self) -> None:
        """Should count broken links and keep their records."""
        stats = RunStatistics()
        stats.record(_result(Verdict.BROKEN, "file_not_found", internal=False))

        assert stats.broken_links == 1
        assert stats.external_links == 1
        assert stats.valid_links == 0
        assert len(stats.broken) == 1

    def test_record_side_effects(self) -> None:
        """Should count deep paths, batch fixes and TODO marks."""
        stats = RunStatistics()
        stats.record(_result(Verdict.INTERNAL_VALID, "batch_fix", depth=7, fixed_to="c.md"))
        stats.record(_result(Verdict.INTERNAL_VALID, "auto_todo", todo_marked=True))

        assert stats.deep_path_warnings == 1
        assert stats.deep_paths == [{"file": "/docs/a.md", "line": 4, "link": "b.md#x", "depth": 7}]
        assert stats.batch_fixes == 1
        assert stats.auto_todo_fixes == 1

    def test_merge(self) -> None:
        """Should add counters and concatenate records."""
        first = RunStatistics(total_files=1)
        first.record(_result(Verdict.BROKEN, "anchor"))
        second = RunStatistics(total_files=1)
        second.record(_result(Verdict.INTERNAL_VALID))
        second.record(_result(Verdict.BROKEN, "file_not_found"))

        first.merge(second)

        assert first.total_files == 2
        assert first.total_links == 3
        assert first.broken_links == 2
        assert [record["type"] for record in first.broken] == ["anchor", "file_not_found"]

    @pytest.mark.parametrize(("valid", "total", "rate"), [(2, 3, 66), (3, 3, 100), (0, 4, 0)])
    def test_success_rate_floors(self, valid: int, total: int, rate: int) -> None:
        """Should use integer percentage."""
        assert RunStatistics(valid_links=valid, total_links=total).success_rate == rate


class TestDocumentReport:
    """Test DocumentReport dataclass."""

    def test_defaults(self) -> None:
        """Should start with empty statistics and output."""
        report = DocumentReport(path=Path("/docs/a.md"))

        assert report.stats == RunStatistics()
        assert report.results == []
        assert report.lines == []
