"""
Semantic version resolution.

See :mod:`ai_changelog.versioning.resolver`.
"""

from .resolver import (  # noqa: F401
    FALLBACK_VERSION,
    VersionIncrement,
    determine_version_increment,
    generate_version,
)
