"""
Version control integration.

Only Git is supported. The client reads the changelog from a remote
reference and produces commit logs with file statistics for the
generation context.
"""

from .git_client import GitClient, GitError  # noqa: F401
