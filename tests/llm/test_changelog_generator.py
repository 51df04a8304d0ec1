import datetime
import unittest
from unittest.mock import Mock

from ai_changelog.changelog.document import APPEND_MARKER
from ai_changelog.llm.changelog_generator import ChangelogGenerator, extract_changelog_entry
from ai_changelog.llm.errors import LLMError
from ai_changelog.llm.prompt_builder import GenerationContext


def make_context():
    return GenerationContext(
        target="api",
        latest_tag="1.0.0",
        commit_count=1,
        commits_data="a1|fix: x|alice|2024-01-01",
        changed_files_data="x.py",
        recent_diff="",
        current_changelog="",
        new_version="1.0.1",
    )


class TestExtractChangelogEntry(unittest.TestCase):
    def test_clean_entry_is_unchanged(self) -> None:
        entry = "## [1.0.1] - May 2024\n\n### Fixed\n- x"
        self.assertEqual(extract_changelog_entry(entry), entry)

    def test_preamble_is_removed(self) -> None:
        raw = "Based on the analyzed commits, here is the entry:\n\n## [1.0.1] - May 2024\n- x"
        with self.assertLogs("ai_changelog.llm.changelog_generator", level="INFO"):
            self.assertEqual(extract_changelog_entry(raw), "## [1.0.1] - May 2024\n- x")

    def test_only_text_before_first_header_is_removed(self) -> None:
        raw = "Intro\n## [1.0.1] - May 2024\n- x\n## [1.0.0] - April 2024\n- y"
        self.assertEqual(
            extract_changelog_entry(raw), "## [1.0.1] - May 2024\n- x\n## [1.0.0] - April 2024\n- y"
        )

    def test_text_without_header_is_kept(self) -> None:
        self.assertEqual(extract_changelog_entry("  just prose  "), "just prose")

    def test_marker_lines_are_removed(self) -> None:
        raw = f"## [1.0.1] - May 2024\n- x\n\n{APPEND_MARKER}\n"
        self.assertNotIn(APPEND_MARKER, extract_changelog_entry(raw))

    def test_empty_response_raises(self) -> None:
        for raw in ("", "   \n", None):
            with self.subTest(raw=raw):
                with self.assertRaises(LLMError):
                    extract_changelog_entry(raw)

    def test_marker_only_response_raises(self) -> None:
        for raw in (APPEND_MARKER, f"\n{APPEND_MARKER}\n", f"{APPEND_MARKER}\n  {APPEND_MARKER}  \n"):
            with self.subTest(raw=raw):
                with self.assertRaisesRegex(LLMError, "after cleanup"):
                    extract_changelog_entry(raw)


class TestChangelogGenerator(unittest.TestCase):
    def test_generate_entry(self) -> None:
        client = Mock()
        client.generate.return_value = "Sure!\n## [1.0.1] - May 2024\n\n### Fixed\n- x"
        result = ChangelogGenerator(client).generate(make_context(), today=datetime.date(2024, 5, 1))
        self.assertTrue(result.needs_update)
        self.assertEqual(result.entry, "## [1.0.1] - May 2024\n\n### Fixed\n- x")
        prompt = client.generate.call_args[0][0]
        self.assertIn("## [1.0.1] - May 2024", prompt)

    def test_no_update_needed(self) -> None:
        client = Mock()
        client.generate.return_value = "  NO_UPDATE_NEEDED\n"
        result = ChangelogGenerator(client).generate(make_context())
        self.assertFalse(result.needs_update)
        self.assertIsNone(result.entry)

    def test_quoted_no_update_token(self) -> None:
        client = Mock()
        for raw in ('"NO_UPDATE_NEEDED"', "'NO_UPDATE_NEEDED'\n", "`NO_UPDATE_NEEDED`", ' " NO_UPDATE_NEEDED " '):
            with self.subTest(raw=raw):
                client.generate.return_value = raw
                result = ChangelogGenerator(client).generate(make_context())
                self.assertFalse(result.needs_update)

    def test_token_inside_prose_is_not_no_update(self) -> None:
        client = Mock()
        client.generate.return_value = "The answer is NO_UPDATE_NEEDED"
        result = ChangelogGenerator(client).generate(make_context())
        self.assertTrue(result.needs_update)

    def test_marker_only_response_is_an_error(self) -> None:
        client = Mock()
        client.generate.return_value = f"{APPEND_MARKER}\n"
        with self.assertRaises(LLMError):
            ChangelogGenerator(client).generate(make_context())

    def test_client_errors_propagate(self) -> None:
        client = Mock()
        client.generate.side_effect = LLMError("Connection failed")
        with self.assertRaises(LLMError):
            ChangelogGenerator(client).generate(make_context())


if __name__ == "__main__":
    unittest.main()
