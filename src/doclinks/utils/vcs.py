"""Version-control history lookups used by the auto-TODO heuristic."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

LOGGER = logging.getLogger(__name__)


class GitHistory:
    """Query git for the history of files in a local repository."""

    def __init__(self, directory: Path, *, timeout: float = 30.0) -> None:
        self.directory = Path(directory)
        self.timeout = timeout

    def has_history(self, file_name: str) -> bool | None:
        """Return whether any commit on any ref touched ``file_name`` anywhere in the repository.

        The pathspec is anchored at the top of the work tree, so the lookup
        does not depend on which directory inside the repository is used.

        None means the history could not be consulted (git missing, not a
        repository, or the command failed).
        """
        output = self._callgit("log", ["--all", "--oneline", "-1", "--", f":(top,glob)**/{file_name}"])
        if output is None:
            return None
        return bool(output.strip())

    def _callgit(self, command: str, args: list[str]) -> str | None:
        cmd = ["git", command] + args
        LOGGER.debug("Running %s in %s", " ".join(cmd), self.directory)
        try:
            process = subprocess.run(
                cmd,
                cwd=self.directory,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            LOGGER.warning("git %s unavailable: %s", command, exc)
            return None
        if process.returncode != 0:
            LOGGER.debug("git %s failed (%s): %s", command, process.returncode, process.stderr.strip())
            return None
        return process.stdout
