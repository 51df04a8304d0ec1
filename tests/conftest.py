import logging

import pytest

from ai_changelog.config.loader import ENV_VARS


@pytest.fixture(autouse=True)
def isolate_ci_environment(monkeypatch):
    """Hide the CI variables of the machine running the tests.

    Tests that need them set them explicitly, so a test run inside a
    GitHub Actions job behaves like one on a workstation.
    """
    for name in list(ENV_VARS.values()) + ["ANTHROPIC_API_KEY"]:
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Undo the CLI's ``logging.basicConfig(force=True)`` after each test.

    The CLI binds a handler to the stream of the ``CliRunner``; once the
    runner closes it, later log records would fail to emit.
    """
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
