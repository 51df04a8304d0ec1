"""
Top-level package for ai_changelog.

This package drafts changelog entries and semantic version bumps from a
batch of git commits. The command line entry point lives in
``ai_changelog.cli``.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
