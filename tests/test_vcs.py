"""Tests for git history lookups."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from doclinks.config import ValidatorConfig
from doclinks.index.anchors import AnchorIndex
from doclinks.utils.vcs import GitHistory
from doclinks.validation.scanner import DocumentScanner


def _completed(returncode: int = 0, stdout: str = "") -> MagicMock:
    process = MagicMock()
    process.returncode = returncode
    process.stdout = stdout
    process.stderr = ""
    return process


class TestGitHistory:
    """Test GitHistory.has_history."""

    @patch("doclinks.utils.vcs.subprocess.run")
    def test_history_found(self, mock_run: MagicMock, tmp_path: Path) -> None:
        """Should report history when git log prints a commit."""
        mock_run.return_value = _completed(stdout="abc123 Move setup guide\n")

        assert GitHistory(tmp_path).has_history("setup.md") is True

        args = mock_run.call_args[0][0]
        assert args[:2] == ["git", "log"]
        assert "--all" in args
        assert args[-1] == ":(top,glob)**/setup.md"
        assert mock_run.call_args[1]["cwd"] == tmp_path

    @patch("doclinks.utils.vcs.subprocess.run")
    def test_no_history(self, mock_run: MagicMock, tmp_path: Path) -> None:
        """Should report no history for empty output."""
        mock_run.return_value = _completed(stdout="")

        assert GitHistory(tmp_path).has_history("new.md") is False

    @patch("doclinks.utils.vcs.subprocess.run")
    def test_not_a_repository(self, mock_run: MagicMock, tmp_path: Path) -> None:
        """Should report unknown when git fails."""
        mock_run.return_value = _completed(returncode=128)

        assert GitHistory(tmp_path).has_history("new.md") is None

    @patch("doclinks.utils.vcs.subprocess.run", side_effect=FileNotFoundError("git"))
    def test_git_missing(self, mock_run: MagicMock, tmp_path: Path) -> None:
        """Should report unknown when git is not installed."""
        assert GitHistory(tmp_path).has_history("new.md") is None

    @patch(
        "doclinks.utils.vcs.subprocess.run",
        side_effect=subprocess.TimeoutExpired(cmd="git", timeout=1),
    )
    def test_git_timeout(self, mock_run: MagicMock, tmp_path: Path) -> None:
        """Should report unknown when git hangs."""
        assert GitHistory(tmp_path, timeout=1).has_history("new.md") is None


def _git(repo: Path, *args: str) -> None:
    subprocess.run(
        ["git", "-c", "user.name=Docs", "-c", "user.email=docs@example.com", "-c", "commit.gpgsign=false", *args],
        cwd=repo,
        check=True,
        capture_output=True,
    )


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    """Repository with ``docs/index.md``; ``docs/old.md`` and ``guides/moved.md`` were committed and removed."""
    (tmp_path / "docs").mkdir()
    (tmp_path / "guides").mkdir()
    (tmp_path / "docs" / "old.md").write_text("# Old\n", encoding="utf-8")
    (tmp_path / "guides" / "moved.md").write_text("# Moved\n", encoding="utf-8")
    (tmp_path / "docs" / "index.md").write_text("# Index\n\nSee [old](old.md).\n", encoding="utf-8")
    _git(tmp_path, "init", "-q")
    _git(tmp_path, "add", ".")
    _git(tmp_path, "commit", "-q", "-m", "Add documents")
    _git(tmp_path, "rm", "-q", "docs/old.md", "guides/moved.md")
    _git(tmp_path, "commit", "-q", "-m", "Remove documents")
    return tmp_path


@pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")
class TestGitHistoryRepository:
    """Test GitHistory against a real repository."""

    def test_document_in_area_root(self, repo: Path) -> None:
        """Should find history of a removed document directly inside the area."""
        assert GitHistory(repo / "docs").has_history("old.md") is True

    def test_document_elsewhere_in_repository(self, repo: Path) -> None:
        """Should find history outside the directory git is run from."""
        assert GitHistory(repo / "docs").has_history("moved.md") is True

    def test_same_answer_from_repository_root(self, repo: Path) -> None:
        """Should not depend on the working directory inside the repository."""
        assert GitHistory(repo).has_history("old.md") is True

    def test_never_committed(self, repo: Path) -> None:
        """Should report no history for unknown documents."""
        assert GitHistory(repo / "docs").has_history("never.md") is False

    def test_outside_repository(self, tmp_path_factory: pytest.TempPathFactory) -> None:
        """Should report unknown outside a repository."""
        plain = tmp_path_factory.mktemp("plain")

        assert GitHistory(plain).has_history("old.md") is None

    def test_auto_todo_keeps_moved_document_links(self, repo: Path) -> None:
        """Should leave links to documents with history broken and untouched."""
        docs = repo / "docs"
        before = (docs / "index.md").read_text(encoding="utf-8")
        config = ValidatorConfig(area_dir=docs, parallel_jobs=1, auto_todo=True)

        report = DocumentScanner(config, AnchorIndex()).scan(config.area_dir / "index.md")

        assert report.stats.broken_links == 1
        assert report.stats.auto_todo_fixes == 0
        assert (docs / "index.md").read_text(encoding="utf-8") == before
