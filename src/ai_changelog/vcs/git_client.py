"""
Git client implementation for ai_changelog.

This module wraps the few read-only Git operations the changelog run
needs. All subprocess calls go through :meth:`GitClient._run` so that
unit tests can mock them easily.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Optional


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


LOG_FORMAT = "--pretty=format:%h %s"


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


class GitClient:
    """Client for reading from a Git repository."""

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = repo_root

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------
    @staticmethod
    def find_repo_root(start: Path) -> Optional[Path]:
        """Find the root of the Git repository starting from ``start``.

        Walk upwards until a ``.git`` entry is found or the filesystem
        root is reached.
        """
        current = start.resolve()
        while True:
            if (current / ".git").exists():
                return current
            if current.parent == current:
                return None
            current = current.parent

    # ------------------------------------------------------------------
    # Basic Git commands
    # ------------------------------------------------------------------
    def _run(self, args: List[str], check: bool = True) -> subprocess.CompletedProcess:
        """Run a Git command in the repository root.

        Raises
        ------
        GitError
            If git cannot be started, or if the command exits with a
            non-zero status when ``check`` is True.
        """
        full_cmd = ["git"] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            logger.error("Could not run git: %s", e)
            raise GitError(f"Could not run git: {e}") from e

        if check and result.returncode != 0:
            logger.debug(
                "Git command failed: %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(full_cmd),
                result.stdout,
                result.stderr,
            )
            raise GitError(result.stderr.strip() or result.stdout.strip())
        return result

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------
    def show_file(self, ref: str, path: str) -> str:
        """Return the contents of ``path`` at ``ref`` (``git show ref:path``).

        Parameters
        ----------
        ref : str
            Any revision, e.g. ``origin/main``.
        path : str
            Path relative to the repository root.

        Raises
        ------
        GitError
            If the reference or the file does not exist.
        """
        result = self._run(["show", f"{ref}:{Path(path).as_posix()}"], check=True)
        return result.stdout

    def log_with_stats(self, rev_range: Optional[str] = None, max_count: Optional[int] = None) -> str:
        """Return one-line commit summaries with ``--stat`` file statistics.

        Parameters
        ----------
        rev_range : str, optional
            A ``base..head`` range. Takes precedence over ``max_count``.
        max_count : int, optional
            Number of most recent commits to include when no range is given.

        Raises
        ------
        GitError
            If the log command fails.
        """
        args = ["log", LOG_FORMAT, "--stat"]
        if rev_range:
            args.append(rev_range)
        elif max_count is not None:
            args.extend(["-n", str(max_count)])
        return self._run(args, check=True).stdout
