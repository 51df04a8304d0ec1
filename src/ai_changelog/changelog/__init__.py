"""
Changelog document handling.

:mod:`ai_changelog.changelog.document` loads the changelog and builds a
bounded excerpt for the generation context;
:mod:`ai_changelog.changelog.splicer` inserts new entries at the
``<!-- AI_APPEND_HERE -->`` marker.
"""

from .document import APPEND_MARKER, ChangelogDocument, load_changelog  # noqa: F401
from .splicer import splice_entry  # noqa: F401
