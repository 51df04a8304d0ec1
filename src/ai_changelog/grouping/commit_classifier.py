"""
Heuristics for sorting commits into Conventional Commit buckets.

Classification is a fixed priority chain: the rules in
:data:`CATEGORY_RULES` are tried in order and the first match wins.
Breaking-change detection comes first, so it dominates every prefix
check. The classifier is deterministic so that it can be unit tested
without a language model.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Tuple

from ai_changelog.grouping.commit_model import (
    BREAKING,
    CATEGORIES,
    CHORE,
    DOCS,
    FEAT,
    FIX,
    OTHER,
    REFACTOR,
    STYLE,
    TEST,
    CategorySet,
    CommitRecord,
)


def _contains(*needles: str) -> Callable[[str], bool]:
    return lambda message: any(needle in message for needle in needles)


def _starts_with(*prefixes: str) -> Callable[[str], bool]:
    return lambda message: message.startswith(prefixes)


# Ordered (predicate, bucket) pairs. Predicates receive the lower-cased message.
CATEGORY_RULES: List[Tuple[Callable[[str], bool], str]] = [
    (_contains("breaking", "!:"), BREAKING),
    (_starts_with("feat:", "feature:"), FEAT),
    (_starts_with("fix:", "bugfix:"), FIX),
    (_starts_with("docs:", "doc:"), DOCS),
    (_starts_with("style:"), STYLE),
    (_starts_with("refactor:"), REFACTOR),
    (_starts_with("test:"), TEST),
    (_starts_with("chore:"), CHORE),
]


def categorize_commit(commit: CommitRecord) -> str:
    """Return the bucket for a single commit.

    Parameters
    ----------
    commit : CommitRecord
        The commit to classify. A missing message counts as empty.

    Returns
    -------
    str
        One of ``feat``, ``fix``, ``docs``, ``style``, ``refactor``,
        ``test``, ``chore``, ``breaking`` or ``other``.
    """
    message = (commit.message or "").lower()
    for predicate, bucket in CATEGORY_RULES:
        if predicate(message):
            return bucket
    return OTHER


def categorize_commits(commits: Iterable[CommitRecord]) -> CategorySet:
    """Partition commits into buckets, preserving input order within each.

    The result always contains every bucket of :data:`CATEGORIES`, empty
    ones included.
    """
    categories: CategorySet = {category: [] for category in CATEGORIES}
    for commit in commits:
        categories[categorize_commit(commit)].append(commit)
    return categories


def category_counts(categories: CategorySet) -> Dict[str, int]:
    """Return the number of commits in each bucket."""
    return {category: len(commits) for category, commits in categories.items()}
