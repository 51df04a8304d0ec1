"""
Building the generation prompt.

:class:`GenerationContext` gathers everything one run knows about the
change: the categorized commits, the changed files, a bounded diff, and
an excerpt of the current changelog. :func:`build_prompt` turns it into
a single request whose output contract is either a changelog entry that
starts with the version header or the literal ``NO_UPDATE_NEEDED``.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from textwrap import dedent
from typing import Dict, List, Optional

from ai_changelog.grouping.commit_model import CategorySet, CommitRecord


NO_UPDATE_TOKEN = "NO_UPDATE_NEEDED"
MAX_DIFF_CHARS = 20000
DIFF_TRUNCATION_NOTICE = "... [diff truncated] ..."


@dataclass
class GenerationContext:
    """Inputs for one generation request. Never persisted."""

    target: str
    latest_tag: str
    commit_count: int
    commits_data: str
    changed_files_data: str
    recent_diff: str
    current_changelog: str
    new_version: str
    commit_categories: CategorySet = field(default_factory=dict)


def format_category_tally(categories: Dict[str, List[CommitRecord]]) -> str:
    """Summarize non-empty buckets, e.g. ``"feat: 2 commits, fix: 1 commit"``."""
    parts = [
        f"{category}: {len(commits)} commit{'s' if len(commits) != 1 else ''}"
        for category, commits in categories.items()
        if commits
    ]
    return ", ".join(parts) if parts else "none"


def truncate_diff(diff: str, max_chars: int = MAX_DIFF_CHARS) -> str:
    """Cap the diff at ``max_chars`` characters, cutting at a line boundary."""
    if len(diff) <= max_chars:
        return diff
    cut = diff.rfind("\n", 0, max_chars)
    return f"{diff[:cut if cut > 0 else max_chars]}\n{DIFF_TRUNCATION_NOTICE}"


def version_header(version: str, today: Optional[datetime.date] = None) -> str:
    """Return the entry header, e.g. ``## [1.5.0] - March 2024``."""
    today = today or datetime.date.today()
    return f"## [{version}] - {today:%B %Y}"


def build_prompt(context: GenerationContext, today: Optional[datetime.date] = None) -> str:
    """Construct the prompt for the changelog entry.

    The prompt instructs the model to output only the raw entry, starting
    with the version header, using Keep a Changelog style sections, or
    ``NO_UPDATE_NEEDED`` if nothing in the change warrants an entry.
    """
    header = version_header(context.new_version, today)
    return dedent(
        """
        Generate ONLY a raw changelog entry. No explanations, no commentary, no extra text.

        CONTEXT:
        - Target: {target}
        - Latest tag: {latest_tag}
        - Suggested version: {new_version}
        - Commits analyzed: {commit_count} (ONLY from this PR/change)
        - Commit categories detected: {tally}

        IMPORTANT: Only analyze the commits listed below. These are the NEW commits in this PR/change.
        Do NOT include changes from commits that are already in the main branch.

        PR/CHANGE COMMITS:
        {commits}

        PR/CHANGE CHANGED FILES:
        {changed_files}

        PR/CHANGE DIFF:
        {diff}

        CURRENT CHANGELOG (showing recent entries for context - new version is {new_version}):
        {changelog}

        STRICT OUTPUT REQUIREMENTS:
        - Output MUST start with "{header}"
        - NO introductory text or explanations
        - NO "Based on the analyzed commits" or similar phrases
        - Include a high-level summary paragraph after the version header
        - Use sections: Added, Changed, Fixed, Removed, Security, Technical Details (as needed)
        - Focus on user-facing changes, API improvements, UI enhancements
        - If no significant changes warrant a changelog entry, output exactly: {no_update}

        EXAMPLE OUTPUT (start exactly like this):
        {header}

        Brief summary of key changes introduced in this version, highlighting the most important user-facing improvements and technical enhancements.

        ### Added
        - New feature descriptions

        ### Changed
        - Improved functionality descriptions

        ### Fixed
        - Bug fix descriptions

        OUTPUT ONLY the changelog entry starting with "## [" or {no_update}. Nothing else.
        """
    ).strip().format(
        target=context.target,
        latest_tag=context.latest_tag,
        new_version=context.new_version,
        commit_count=context.commit_count,
        tally=format_category_tally(context.commit_categories),
        commits=context.commits_data,
        changed_files=context.changed_files_data,
        diff=truncate_diff(context.recent_diff),
        changelog=context.current_changelog,
        header=header,
        no_update=NO_UPDATE_TOKEN,
    )
