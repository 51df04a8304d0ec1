"""
The changelog run, from input files to written outputs.

A run moves through the states of :class:`RunState`::

    NOT_STARTED -> NO_COMMITS
                -> ANALYZED -> REQUESTED -> NO_UPDATE_NEEDED | UPDATED

Any exception escaping :func:`run_pipeline` puts the run in ``ERROR``;
the CLI records that state. The changelog is loaded once into a
:class:`~ai_changelog.changelog.document.ChangelogDocument` and passed
along explicitly until the new text is written back in full.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional

from ai_changelog.changelog.document import load_changelog
from ai_changelog.changelog.splicer import splice_entry
from ai_changelog.config.loader import RunConfig
from ai_changelog.grouping.commit_classifier import categorize_commits, category_counts
from ai_changelog.grouping.commit_model import CategorySet, CommitRecord, parse_commit_data
from ai_changelog.llm.changelog_generator import ChangelogGenerator
from ai_changelog.llm.prompt_builder import GenerationContext
from ai_changelog.outputs import RunStatus, write_new_content, write_status, write_version_info
from ai_changelog.versioning.resolver import VersionIncrement, determine_version_increment, generate_version
from ai_changelog.vcs.git_client import GitClient, GitError


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


PREVIEW_CHARS = 500


class RunState(Enum):
    NOT_STARTED = "not_started"
    NO_COMMITS = "no_commits"
    ANALYZED = "analyzed"
    REQUESTED = "requested"
    NO_UPDATE_NEEDED = "no_update_needed"
    UPDATED = "updated"
    ERROR = "error"


STATUS_FOR_STATE = {
    RunState.NO_COMMITS: RunStatus.NO_UPDATE,
    RunState.NO_UPDATE_NEEDED: RunStatus.NO_UPDATE,
    RunState.UPDATED: RunStatus.UPDATED,
    RunState.ERROR: RunStatus.ERROR,
}


@dataclass
class CommitAnalysis:
    """Parsed and categorized commits with the resulting version bump."""

    commits: List[CommitRecord]
    categories: CategorySet
    increment: VersionIncrement
    new_version: str


@dataclass
class RunOutcome:
    """Terminal state of a run and what it produced."""

    state: RunState
    previous_version: str = ""
    increment: Optional[VersionIncrement] = None
    new_version: Optional[str] = None
    entry: Optional[str] = None

    @property
    def status(self) -> Optional[RunStatus]:
        return STATUS_FOR_STATE.get(self.state)


def read_input_file(path: Path) -> str:
    """Read a caller-provided input file. A missing file is an error."""
    return path.read_text(encoding="utf-8").strip()


def analyze_commits(commits_data: str, latest_tag: str, manual_increment: str = "auto") -> CommitAnalysis:
    """Parse, categorize, and derive the version bump. No I/O."""
    commits = parse_commit_data(commits_data)
    categories = categorize_commits(commits)
    increment = determine_version_increment(categories, latest_tag, manual_increment)
    new_version = generate_version(latest_tag, increment)
    return CommitAnalysis(commits=commits, categories=categories, increment=increment, new_version=new_version)


def load_recent_diff(git_client: Optional[GitClient], config: RunConfig) -> str:
    """Return the commit log with file statistics, or ``""`` if git fails."""
    if git_client is None:
        logger.info("Not inside a Git repository, continuing without diff")
        return ""
    try:
        return git_client.log_with_stats(rev_range=config.diff_range, max_count=config.commit_count)
    except GitError as exc:
        logger.warning("Could not get git diff (%s), continuing without it", exc)
        return ""


def run_pipeline(
    config: RunConfig,
    generator: ChangelogGenerator,
    git_client: Optional[GitClient] = None,
    today: Optional[datetime.date] = None,
) -> RunOutcome:
    """Run one changelog update and write its outputs.

    Parameters
    ----------
    config : RunConfig
        Settings for the run.
    generator : ChangelogGenerator
        Used for the single generation request.
    git_client : GitClient, optional
        Source of the remote changelog and the diff. Without one both
        fall back (local file, empty diff).
    today : datetime.date, optional
        Date used in the version header. Defaults to today.

    Returns
    -------
    RunOutcome
        With state ``NO_COMMITS``, ``NO_UPDATE_NEEDED`` or ``UPDATED``.

    Raises
    ------
    Exception
        Anything unrecoverable (missing input files, generation failure,
        write errors) propagates to the caller.
    """
    output_dir = config.output_dir
    output_dir.mkdir(parents=True, exist_ok=True)

    commits_data = read_input_file(config.commits_file)
    changed_files_data = read_input_file(config.changed_files_file)
    if not commits_data:
        logger.info("No commits found to analyze")
        write_status(output_dir, RunStatus.NO_UPDATE)
        return RunOutcome(state=RunState.NO_COMMITS, previous_version=config.latest_tag)

    analysis = analyze_commits(commits_data, config.latest_tag, config.version_increment)
    logger.info("Commit categories: %s", category_counts(analysis.categories))
    logger.info("Version increment: %s, New version: %s", analysis.increment.value, analysis.new_version)
    logger.debug("Run state: %s", RunState.ANALYZED.value)

    document = load_changelog(config.changelog_path, git_client, config.remote_ref)
    excerpt = document.excerpt()
    logger.info("Using %d lines of changelog for context", len(excerpt.split("\n")) if excerpt else 0)
    recent_diff = load_recent_diff(git_client, config)

    context = GenerationContext(
        target=config.target,
        latest_tag=config.latest_tag,
        commit_count=len(analysis.commits),
        commits_data=commits_data,
        changed_files_data=changed_files_data,
        recent_diff=recent_diff,
        current_changelog=excerpt,
        new_version=analysis.new_version,
        commit_categories=analysis.categories,
    )
    logger.debug("Run state: %s", RunState.REQUESTED.value)
    result = generator.generate(context, today)

    outcome = RunOutcome(
        state=RunState.NO_UPDATE_NEEDED,
        previous_version=config.latest_tag,
        increment=analysis.increment,
        new_version=analysis.new_version,
    )
    if not result.needs_update:
        write_status(output_dir, RunStatus.NO_UPDATE)
        return outcome

    document.path.parent.mkdir(parents=True, exist_ok=True)
    document.path.write_text(splice_entry(document.text, result.entry), encoding="utf-8")
    write_new_content(output_dir, result.entry)
    write_status(output_dir, RunStatus.UPDATED)
    write_version_info(output_dir, analysis.new_version, analysis.increment.value, config.latest_tag)

    logger.info("Successfully updated %s", document.path)
    logger.info("New content preview: %s...", result.entry[:PREVIEW_CHARS])
    outcome.state = RunState.UPDATED
    outcome.entry = result.entry
    return outcome
