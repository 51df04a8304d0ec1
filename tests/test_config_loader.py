import json
import tempfile
import unittest
from pathlib import Path

from ai_changelog.config.loader import ConfigError, LLMSettings, load_config, load_llm_settings, resolve_setting


class TestLoadConfig(unittest.TestCase):
    """Tests for the run configuration loader."""

    def test_defaults(self) -> None:
        config = load_config(environ={})
        self.assertEqual(config.changelog_path, Path("CHANGELOG.md"))
        self.assertEqual(config.commits_file, Path("recent_commits.txt"))
        self.assertEqual(config.changed_files_file, Path("changed_files.txt"))
        self.assertEqual(config.output_dir, Path("."))
        self.assertEqual(config.commit_count, 10)
        self.assertEqual(config.version_increment, "auto")
        self.assertEqual(config.remote_ref, "origin/main")
        self.assertFalse(config.is_pull_request)
        self.assertIsNone(config.diff_range)
        self.assertEqual(config.llm, LLMSettings())

    def test_reads_environment(self) -> None:
        environ = {
            "CHANGELOG_PATH": "docs/CHANGELOG.md",
            "TARGET": "backend",
            "LATEST_TAG": "v1.4.0",
            "COMMIT_COUNT": "25",
            "GITHUB_EVENT_NAME": "pull_request",
            "PR_BASE_SHA": "abc",
            "PR_HEAD_SHA": "def",
            "VERSION_INCREMENT": "MINOR",
            "ANTHROPIC_API_KEY": "sk-env",
        }
        config = load_config(environ=environ)
        self.assertEqual(config.changelog_path, Path("docs/CHANGELOG.md"))
        self.assertEqual(config.target, "backend")
        self.assertEqual(config.latest_tag, "v1.4.0")
        self.assertEqual(config.commit_count, 25)
        self.assertTrue(config.is_pull_request)
        self.assertEqual(config.diff_range, "abc..def")
        self.assertEqual(config.version_increment, "minor")
        self.assertEqual(config.llm.api_key, "sk-env")

    def test_overrides_win_over_environment(self) -> None:
        config = load_config(environ={"TARGET": "env", "COMMIT_COUNT": "3"}, target="cli", commit_count=None)
        self.assertEqual(config.target, "cli")
        self.assertEqual(config.commit_count, 3)

    def test_resolve_setting_order(self) -> None:
        environ = {"CHANGELOG_OUTPUT_DIR": "from-env", "TARGET": ""}
        self.assertEqual(resolve_setting("output_dir", {"output_dir": "cli"}, environ), "cli")
        self.assertEqual(resolve_setting("output_dir", {"output_dir": None}, environ), "from-env")
        self.assertEqual(resolve_setting("output_dir", environ={}), ".")
        self.assertEqual(resolve_setting("target", environ=environ), "")

    def test_pull_request_without_shas_uses_commit_count(self) -> None:
        with self.assertLogs("ai_changelog.config.loader", level="WARNING"):
            config = load_config(environ={"GITHUB_EVENT_NAME": "pull_request", "PR_BASE_SHA": "abc"})
        self.assertIsNone(config.diff_range)

    def test_push_event_ignores_shas(self) -> None:
        config = load_config(environ={"GITHUB_EVENT_NAME": "push", "PR_BASE_SHA": "a", "PR_HEAD_SHA": "b"})
        self.assertIsNone(config.diff_range)

    def test_invalid_values(self) -> None:
        for environ in ({"COMMIT_COUNT": "many"}, {"COMMIT_COUNT": "0"}, {"VERSION_INCREMENT": "huge"}):
            with self.subTest(environ=environ):
                with self.assertRaises(ConfigError):
                    load_config(environ=environ)


class TestLoadLLMSettings(unittest.TestCase):
    """Tests for the generation backend configuration."""

    def test_load_from_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "llm.json"
            path.write_text(json.dumps({
                "provider": "ollama",
                "base_url": "http://gpu",
                "port": 11434,
                "model": "llama3",
                "request_timeout": 30,
                "max_tokens": 512,
                "temperature": 0,
            }))
            settings = load_llm_settings(path, environ={})
        self.assertEqual(settings.provider, "ollama")
        self.assertEqual(settings.base_url, "http://gpu")
        self.assertEqual(settings.port, 11434)
        self.assertEqual(settings.request_timeout, 30.0)
        self.assertEqual(settings.max_tokens, 512)
        self.assertEqual(settings.temperature, 0.0)

    def test_provider_default_model(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "llm.json"
            path.write_text(json.dumps({"provider": "ollama"}))
            self.assertEqual(load_llm_settings(path, environ={}).model, "llama3")

    def test_config_file_via_environment(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "llm.json"
            path.write_text(json.dumps({"model": "claude-custom"}))
            config = load_config(environ={"CHANGELOG_LLM_CONFIG": str(path)})
        self.assertEqual(config.llm.model, "claude-custom")

    def test_missing_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(ConfigError):
                load_llm_settings(Path(tmp) / "missing.json", environ={})

    def test_invalid_json(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "llm.json"
            path.write_text("{invalid}")
            with self.assertRaises(ConfigError):
                load_llm_settings(path, environ={})

    def test_invalid_fields(self) -> None:
        cases = [
            [],
            {"provider": "openai"},
            {"model": 3},
            {"port": "11434"},
            {"request_timeout": "slow"},
            {"max_tokens": 1.5},
            {"temperature": "hot"},
        ]
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "llm.json"
            for data in cases:
                with self.subTest(data=data):
                    path.write_text(json.dumps(data))
                    with self.assertRaises(ConfigError):
                        load_llm_settings(path, environ={})


if __name__ == "__main__":
    unittest.main()
