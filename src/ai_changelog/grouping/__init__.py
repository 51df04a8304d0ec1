"""
Commit parsing and categorization.

Commits arrive as pipe-delimited text and are sorted into Conventional
Commit buckets. See :mod:`ai_changelog.grouping.commit_model` and
:mod:`ai_changelog.grouping.commit_classifier` for details.
"""

from .commit_classifier import categorize_commit, categorize_commits, category_counts  # noqa: F401
from .commit_model import CATEGORIES, CommitRecord, parse_commit_data  # noqa: F401
