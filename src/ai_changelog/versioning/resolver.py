"""
Semantic version increments derived from categorized commits.

:func:`determine_version_increment` maps a category set (or a manual
override) to ``major``, ``minor`` or ``patch``, and
:func:`generate_version` applies that increment to the latest tag.
Version parsing never fails the run: an unusable tag falls back to
:data:`FALLBACK_VERSION`.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Optional

from ai_changelog.grouping.commit_model import BREAKING, FEAT, CategorySet


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


FALLBACK_VERSION = "0.1.0"
AUTO = "auto"

# Official semver.org pattern (no leading zeros, optional pre-release and build).
SEMVER_PATTERN = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)


class VersionIncrement(str, Enum):
    """Kind of semantic version bump."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"


def determine_version_increment(
    categories: CategorySet,
    current_version: Optional[str] = None,
    manual_increment: Optional[str] = AUTO,
) -> VersionIncrement:
    """Decide how far to bump the version.

    Parameters
    ----------
    categories : CategorySet
        Commits grouped by bucket.
    current_version : str, optional
        The latest tag. Accepted for symmetry with :func:`generate_version`;
        the decision does not depend on it.
    manual_increment : str, optional
        ``"auto"`` (or ``None``) to derive the increment from the
        categories; any other value overrides them completely.

    Returns
    -------
    VersionIncrement
        ``MAJOR`` for any breaking change, else ``MINOR`` for any feature,
        else ``PATCH``.

    Raises
    ------
    ValueError
        If a manual increment is not ``major``, ``minor`` or ``patch``.
    """
    if manual_increment and manual_increment.strip().lower() != AUTO:
        return VersionIncrement(manual_increment.strip().lower())

    if categories.get(BREAKING):
        return VersionIncrement.MAJOR
    if categories.get(FEAT):
        return VersionIncrement.MINOR
    # Every remaining bucket (other included) is a patch; so is an empty set.
    return VersionIncrement.PATCH


def _bump(version: str, increment: VersionIncrement) -> str:
    match = SEMVER_PATTERN.match(version)
    if match is None:
        raise ValueError(f"not a semantic version: {version}")
    major, minor, patch = (int(part) for part in match.group(1, 2, 3))
    prerelease = match.group(4)

    # A pre-release is released by the bump that reaches it (1.3.0-rc.1 -> 1.3.0).
    if increment is VersionIncrement.MAJOR:
        if not (prerelease and minor == 0 and patch == 0):
            major += 1
        return f"{major}.0.0"
    if increment is VersionIncrement.MINOR:
        if not (prerelease and patch == 0):
            minor += 1
        return f"{major}.{minor}.0"
    if increment is VersionIncrement.PATCH:
        if not prerelease:
            patch += 1
        return f"{major}.{minor}.{patch}"
    raise ValueError(f"unsupported increment: {increment}")


def generate_version(current_version: Optional[str], increment: str) -> str:
    """Apply ``increment`` to ``current_version``.

    A leading ``v`` is stripped first. Invalid versions, unknown
    increments, and any other failure fall back to :data:`FALLBACK_VERSION`.

    >>> generate_version("v1.2.3", "minor")
    '1.3.0'
    >>> generate_version("not-a-version", "minor")
    '0.1.0'
    """
    clean_version = re.sub(r"^v", "", (current_version or "").strip())
    if not SEMVER_PATTERN.match(clean_version):
        logger.warning("Invalid semver: %r, using fallback version %s", clean_version, FALLBACK_VERSION)
        return FALLBACK_VERSION
    try:
        return _bump(clean_version, VersionIncrement(increment))
    except Exception as exc:
        logger.warning("Error bumping version: %s, using fallback version %s", exc, FALLBACK_VERSION)
        return FALLBACK_VERSION
