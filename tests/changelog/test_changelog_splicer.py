import unittest

from ai_changelog.changelog.document import APPEND_MARKER
from ai_changelog.changelog.splicer import splice_entry


ENTRY = "## [1.5.0] - March 2024\n\nSummary.\n\n### Added\n- Login"


class TestSpliceEntry(unittest.TestCase):
    def test_inserts_before_marker(self) -> None:
        document = f"# Changelog\n\n{APPEND_MARKER}\n\n## [1.4.0] - February 2024\n- old\n"
        result = splice_entry(document, ENTRY)
        self.assertEqual(result.count(APPEND_MARKER), 1)
        self.assertLess(result.index(ENTRY), result.index(APPEND_MARKER))
        self.assertTrue(result.startswith("# Changelog\n\n" + ENTRY + "\n\n" + APPEND_MARKER))
        self.assertTrue(result.endswith("## [1.4.0] - February 2024\n- old\n"))

    def test_repeated_splices_keep_single_marker(self) -> None:
        document = f"# Changelog\n\n{APPEND_MARKER}\n"
        first = splice_entry(document, "## [1.0.0] - May 2024\n- a")
        second = splice_entry(first, "## [1.1.0] - June 2024\n- b")
        self.assertEqual(second.count(APPEND_MARKER), 1)
        self.assertLess(second.index("1.0.0"), second.index("1.1.0"))
        self.assertLess(second.index("1.1.0"), second.index(APPEND_MARKER))

    def test_appends_marker_when_missing(self) -> None:
        document = "# Changelog\n\n## [1.4.0] - February 2024\n- old"
        result = splice_entry(document, ENTRY)
        self.assertTrue(result.startswith(document + "\n"))
        self.assertEqual(result.count(APPEND_MARKER), 1)
        self.assertTrue(result.rstrip("\n").endswith(APPEND_MARKER))
        self.assertLess(result.index(ENTRY), result.index(APPEND_MARKER))

    def test_existing_trailing_newline_is_kept(self) -> None:
        result = splice_entry("# Changelog\n", ENTRY)
        self.assertEqual(result, f"# Changelog\n\n{ENTRY}\n\n{APPEND_MARKER}\n")

    def test_empty_document(self) -> None:
        self.assertEqual(splice_entry("", ENTRY), f"{ENTRY}\n\n{APPEND_MARKER}\n")


if __name__ == "__main__":
    unittest.main()
