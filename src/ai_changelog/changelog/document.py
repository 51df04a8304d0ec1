"""
Loading the changelog and extracting context from it.

The changelog is read once per run into a :class:`ChangelogDocument`
and passed explicitly to the stages that need it. The copy on the
remote default branch is preferred over the local file so that entries
generated on diverging branches do not conflict.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ai_changelog.vcs.git_client import GitClient, GitError


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


APPEND_MARKER = "<!-- AI_APPEND_HERE -->"
DEFAULT_MAX_LINES = 100
HEADER_LINES = 10
OMISSION_NOTICE = "... [earlier entries omitted for context] ..."

SOURCE_REMOTE = "remote"
SOURCE_LOCAL = "local"
SOURCE_NEW = "new"


@dataclass
class ChangelogDocument:
    """The full text of a changelog and where it was read from.

    Attributes
    ----------
    path : Path
        Location the document is written back to.
    text : str
        The complete persisted text. Empty for a new changelog.
    source : str
        ``"remote"``, ``"local"`` or ``"new"``.
    """

    path: Path
    text: str = ""
    source: str = SOURCE_NEW

    @property
    def has_marker(self) -> bool:
        return APPEND_MARKER in self.text

    def excerpt(self, max_lines: int = DEFAULT_MAX_LINES) -> str:
        """Return the recent part of the changelog for the generation context.

        With a marker, the ``max_lines`` lines before it and the marker
        line itself are returned; if that cuts into the document past its
        first ten lines, those ten lines and an omission notice are put in
        front. Without a marker, the last ``max_lines`` lines are returned.
        A ``max_lines`` of zero or less keeps nothing but the marker line.
        """
        max_lines = max(0, max_lines)
        if not self.text:
            return ""
        lines = self.text.split("\n")
        marker_index = next(
            (index for index, line in enumerate(lines) if APPEND_MARKER in line), None
        )
        if marker_index is None:
            return "\n".join(lines[len(lines) - max_lines:])

        start_index = max(0, marker_index - max_lines)
        excerpt = "\n".join(lines[start_index:marker_index + 1])
        if start_index > HEADER_LINES:
            header = "\n".join(lines[:HEADER_LINES])
            excerpt = f"{header}\n\n{OMISSION_NOTICE}\n\n{excerpt}"
        return excerpt


def _repo_relative(path: Path, repo_root: Path) -> str:
    try:
        return path.resolve().relative_to(repo_root.resolve()).as_posix()
    except ValueError:
        return path.as_posix()


def load_changelog(
    path: Path,
    git_client: Optional[GitClient] = None,
    remote_ref: str = "origin/main",
) -> ChangelogDocument:
    """Load the changelog, preferring the copy at ``remote_ref``.

    Parameters
    ----------
    path : Path
        Local path of the changelog.
    git_client : GitClient, optional
        Client used to read ``remote_ref:path``. Without a client the
        remote lookup is skipped.
    remote_ref : str
        Revision holding the authoritative changelog.

    Returns
    -------
    ChangelogDocument
        The remote copy if it can be read, else the local file, else an
        empty document. In the last case the parent directories are
        created so the document can be written later.
    """
    if git_client is not None:
        try:
            text = git_client.show_file(remote_ref, _repo_relative(path, git_client.repo_root))
            logger.info("Using latest changelog from %s to avoid conflicts", remote_ref)
            return ChangelogDocument(path=path, text=text, source=SOURCE_REMOTE)
        except GitError as exc:
            logger.info("Could not get changelog from %s (%s), using local version", remote_ref, exc)

    if path.exists():
        return ChangelogDocument(path=path, text=path.read_text(encoding="utf-8"), source=SOURCE_LOCAL)

    logger.info("Creating new changelog at %s", path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return ChangelogDocument(path=path, text="", source=SOURCE_NEW)
