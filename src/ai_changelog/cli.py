"""
Command line interface for the ai_changelog tool.

This module defines the ``main`` function used as the entry point of
the ``aichangelog`` command. It loads the configuration, sets up the
Git and generation clients, and runs
:func:`~ai_changelog.pipeline.run_pipeline`. Every failure is turned
into an ``ERROR`` status file and a non-zero exit code so the calling
CI pipeline can react to it.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import click

from ai_changelog import __version__
from ai_changelog.config.loader import VALID_INCREMENTS, ConfigError, load_config, resolve_setting
from ai_changelog.llm.changelog_generator import ChangelogGenerator
from ai_changelog.llm.errors import LLMError
from ai_changelog.llm.factory import create_client
from ai_changelog.outputs import RunStatus, write_status
from ai_changelog.pipeline import RunState, run_pipeline
from ai_changelog.vcs.git_client import GitClient

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_GENERIC_ERROR = 1
EXIT_CONFIG_ERROR = 5
EXIT_LLM_FAILURE = 7


# ---------------------------------------------------------------------------
# Status display utilities
# ---------------------------------------------------------------------------

def print_step(step_num: int, total_steps: int, message: str):
    """Print a step indicator."""
    click.echo(f"\n{'='*60}")
    click.echo(f"Step {step_num}/{total_steps}: {message}")
    click.echo(f"{'='*60}")


def print_info(message: str, indent: int = 0):
    prefix = "  " * indent
    click.echo(f"{prefix}ℹ {message}")


def print_success(message: str, indent: int = 0):
    prefix = "  " * indent
    click.echo(f"{prefix}✓ {message}")


def print_warning(message: str, indent: int = 0):
    prefix = "  " * indent
    click.echo(f"{prefix}⚠ {message}")


def print_error(message: str, indent: int = 0):
    prefix = "  " * indent
    click.echo(f"{prefix}✗ {message}", err=True)


def print_summary_box(title: str, items: List[str]):
    """Print a formatted summary box."""
    max_width = max(len(title), max(len(item) for item in items) if items else 0)
    box_width = min(max_width + 4, 60)

    click.echo(f"\n┌{'─' * box_width}┐")
    click.echo(f"│ {title.ljust(box_width - 2)}│")
    click.echo(f"├{'─' * box_width}┤")
    for item in items:
        click.echo(f"│ {item.ljust(box_width - 2)}│")
    click.echo(f"└{'─' * box_width}┘")


def record_error(output_dir: Path) -> None:
    """Write the ERROR status token, logging rather than raising on failure."""
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        write_status(output_dir, RunStatus.ERROR)
    except OSError as exc:
        logger.error("Could not write error status to %s: %s", output_dir, exc)


@click.command()
@click.option("--changelog-path", type=click.Path(path_type=Path), help="Changelog to update [env: CHANGELOG_PATH].")
@click.option("--target", help="Label for the changed component, included in the prompt [env: TARGET].")
@click.option("--latest-tag", help="Current version, 'v'-prefixed or bare [env: LATEST_TAG].")
@click.option("--commit-count", type=int, help="Number of recent commits to diff outside pull requests [env: COMMIT_COUNT].")
@click.option("--event-name", help="CI event name; 'pull_request' selects base..head mode [env: GITHUB_EVENT_NAME].")
@click.option("--base-sha", help="Pull request base revision [env: PR_BASE_SHA].")
@click.option("--head-sha", help="Pull request head revision [env: PR_HEAD_SHA].")
@click.option(
    "--increment",
    "version_increment",
    type=click.Choice(VALID_INCREMENTS, case_sensitive=False),
    help="Version increment override [env: VERSION_INCREMENT].",
)
@click.option("--remote-ref", help="Revision holding the authoritative changelog [env: CHANGELOG_REMOTE_REF].")
@click.option("--commits-file", type=click.Path(path_type=Path), help="Pipe-delimited commits input [env: COMMITS_FILE].")
@click.option("--changed-files", "changed_files_file", type=click.Path(path_type=Path), help="Changed files listing [env: CHANGED_FILES_FILE].")
@click.option("--output-dir", type=click.Path(path_type=Path), help="Directory for status and result files [env: CHANGELOG_OUTPUT_DIR].")
@click.option("--llm-config", type=click.Path(path_type=Path), help="JSON file with generation backend settings [env: CHANGELOG_LLM_CONFIG].")
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="aichangelog")
def main(
    changelog_path: Optional[Path],
    target: Optional[str],
    latest_tag: Optional[str],
    commit_count: Optional[int],
    event_name: Optional[str],
    base_sha: Optional[str],
    head_sha: Optional[str],
    version_increment: Optional[str],
    remote_ref: Optional[str],
    commits_file: Optional[Path],
    changed_files_file: Optional[Path],
    output_dir: Optional[Path],
    llm_config: Optional[Path],
    verbose: bool,
) -> None:
    """📝 Draft a changelog entry and version bump from recent commits.

    Options not given on the command line are read from the environment
    variables named in their help text.
    """
    # force=True reconfigures handlers on repeated invocations (tests).
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        force=True,
    )

    click.echo("\n" + "="*60)
    click.echo("🤖 AI Changelog Assistant".center(60))
    click.echo("="*60)

    status_dir = Path(resolve_setting("output_dir", {"output_dir": output_dir}))
    total_steps = 3

    try:
        # Step 1: Load configuration
        print_step(1, total_steps, "Loading Configuration")
        try:
            config = load_config(
                changelog_path=changelog_path,
                target=target,
                latest_tag=latest_tag,
                commit_count=commit_count,
                event_name=event_name,
                base_sha=base_sha,
                head_sha=head_sha,
                version_increment=version_increment,
                remote_ref=remote_ref,
                commits_file=commits_file,
                changed_files_file=changed_files_file,
                output_dir=output_dir,
                llm_config=llm_config,
            )
        except ConfigError as exc:
            print_error(f"Configuration error: {exc}")
            record_error(status_dir)
            raise click.exceptions.Exit(EXIT_CONFIG_ERROR)

        status_dir = config.output_dir
        print_success("Configuration loaded successfully")
        print_info(f"Changelog: {config.changelog_path}", indent=1)
        print_info(f"Target: {config.target or '(none)'}", indent=1)
        print_info(f"Latest tag: {config.latest_tag or '(none)'}", indent=1)
        print_info(f"Version increment: {config.version_increment}", indent=1)
        print_info(f"Diff mode: {config.diff_range or f'last {config.commit_count} commits'}", indent=1)

        # Step 2: Set up clients
        print_step(2, total_steps, "Initializing Clients")
        repo_root = GitClient.find_repo_root(Path.cwd())
        git_client = GitClient(repo_root) if repo_root else None
        if git_client:
            print_success(f"Found Git repository at: {repo_root}")
        else:
            print_warning("No Git repository found; remote changelog and diff are unavailable")

        llm_client = create_client(config.llm)
        generator = ChangelogGenerator(llm_client)
        print_success(f"Using {llm_client.name}")

        # Step 3: Update changelog
        print_step(3, total_steps, "Updating Changelog")
        try:
            outcome = run_pipeline(config, generator, git_client)
        except LLMError as exc:
            print_error(f"LLM error: {exc}")
            record_error(status_dir)
            raise click.exceptions.Exit(EXIT_LLM_FAILURE)

        if outcome.state is RunState.NO_COMMITS:
            print_warning("No commits found to analyze; changelog left unchanged.")
        elif outcome.state is RunState.NO_UPDATE_NEEDED:
            print_warning("No changelog update needed for these commits.")
        else:
            print_success(f"Updated {config.changelog_path}")

        summary_items = [f"Status: {outcome.status.value}"]
        if outcome.new_version:
            summary_items.append(f"Version: {outcome.previous_version or '(none)'} -> {outcome.new_version}")
            summary_items.append(f"Increment: {outcome.increment.value}")
        print_summary_box("✨ Summary", summary_items)

        raise click.exceptions.Exit(EXIT_SUCCESS)

    except click.exceptions.Exit:
        raise
    except Exception as exc:
        logging.exception("Unhandled error: %s", exc)
        print_error(f"Unexpected error: {exc}")
        record_error(status_dir)
        raise click.exceptions.Exit(EXIT_GENERIC_ERROR)
