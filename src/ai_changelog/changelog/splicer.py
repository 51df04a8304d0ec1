"""
Inserting generated entries into the changelog.

Entries are inserted immediately before the append marker, so the
marker always follows the newest entry and the rest of the document is
left untouched.
"""

from __future__ import annotations

from ai_changelog.changelog.document import APPEND_MARKER


def splice_entry(document_text: str, entry: str) -> str:
    """Return the full changelog text with ``entry`` inserted.

    If the marker is present, its first occurrence is replaced by the
    entry followed by the marker. Otherwise the entry is appended after
    the existing content (which is first given a trailing newline) and a
    new marker is added at the end.
    """
    if APPEND_MARKER in document_text:
        return document_text.replace(APPEND_MARKER, f"{entry}\n\n{APPEND_MARKER}", 1)

    if not document_text:
        return f"{entry}\n\n{APPEND_MARKER}\n"
    spliced = document_text
    if not spliced.endswith("\n"):
        spliced += "\n"
    return f"{spliced}\n{entry}\n\n{APPEND_MARKER}\n"
