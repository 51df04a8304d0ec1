"""
Files written for the calling CI pipeline.

Besides the changelog itself, a run leaves a status token file and, on
success, the new entry on its own and a JSON record of the version bump.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


STATUS_FILE = "changelog_status.txt"
NEW_CONTENT_FILE = "new_content.txt"
VERSION_INFO_FILE = "version_info.txt"


class RunStatus(str, Enum):
    """Status token read by the calling pipeline."""

    NO_UPDATE = "NO_UPDATE"
    UPDATED = "UPDATED"
    ERROR = "ERROR"


def write_status(output_dir: Path, status: RunStatus) -> Path:
    path = output_dir / STATUS_FILE
    path.write_text(status.value, encoding="utf-8")
    logger.debug("Wrote status %s to %s", status.value, path)
    return path


def write_new_content(output_dir: Path, entry: str) -> Path:
    """Write the new entry alone, without the append marker."""
    path = output_dir / NEW_CONTENT_FILE
    path.write_text(entry, encoding="utf-8")
    return path


def write_version_info(output_dir: Path, version: str, increment: str, previous_version: str) -> Path:
    """Write ``{"version", "increment", "previousVersion"}`` as JSON."""
    path = output_dir / VERSION_INFO_FILE
    info = {"version": version, "increment": increment, "previousVersion": previous_version}
    path.write_text(json.dumps(info), encoding="utf-8")
    return path
