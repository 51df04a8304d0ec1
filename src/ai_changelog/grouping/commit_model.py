"""
Data models for parsed commits.

A :class:`CommitRecord` holds the fields of one line of the commits
file, which the CI job produces with
``git log --pretty=format:'%h|%s|%an|%ad'``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional


FIELD_DELIMITER = "|"

BREAKING = "breaking"
FEAT = "feat"
FIX = "fix"
DOCS = "docs"
STYLE = "style"
REFACTOR = "refactor"
TEST = "test"
CHORE = "chore"
OTHER = "other"

# Display order of the buckets in tallies and category sets.
CATEGORIES = (FEAT, FIX, DOCS, STYLE, REFACTOR, TEST, CHORE, BREAKING, OTHER)

CategorySet = Dict[str, List["CommitRecord"]]


@dataclass(frozen=True)
class CommitRecord:
    """A single commit read from the commits file.

    Attributes
    ----------
    hash : str, optional
        Abbreviated commit hash.
    message : str, optional
        Commit subject line.
    author : str, optional
        Author name.
    date : str, optional
        Author date, as formatted by git.

    Lines with fewer than four fields leave the trailing attributes as
    ``None``.
    """

    hash: Optional[str]
    message: Optional[str] = None
    author: Optional[str] = None
    date: Optional[str] = None


def parse_commit_data(commits_data: str) -> List[CommitRecord]:
    """Parse the pipe-delimited commits text into records.

    Blank lines are skipped and input order is preserved. Field counts
    are not validated: missing fields become ``None`` and extra fields
    are ignored.
    """
    records: List[CommitRecord] = []
    for line in commits_data.splitlines():
        if not line.strip():
            continue
        fields = line.split(FIELD_DELIMITER)
        fields += [None] * (4 - len(fields))
        records.append(CommitRecord(*fields[:4]))
    return records
