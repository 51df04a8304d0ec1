import unittest

from ai_changelog.grouping.commit_model import CommitRecord, parse_commit_data


class TestParseCommitData(unittest.TestCase):
    def test_parses_fields_in_order(self) -> None:
        data = "a1|feat: add login|alice|2024-01-01\na2|fix: null check|bob|2024-01-02"
        commits = parse_commit_data(data)
        self.assertEqual(
            commits,
            [
                CommitRecord("a1", "feat: add login", "alice", "2024-01-01"),
                CommitRecord("a2", "fix: null check", "bob", "2024-01-02"),
            ],
        )

    def test_skips_blank_lines(self) -> None:
        commits = parse_commit_data("\n\na1|docs: readme|alice|2024-01-01\n   \n")
        self.assertEqual(len(commits), 1)
        self.assertEqual(commits[0].hash, "a1")

    def test_short_line_leaves_trailing_fields_empty(self) -> None:
        commits = parse_commit_data("a1|fix: typo")
        self.assertEqual(commits[0].message, "fix: typo")
        self.assertIsNone(commits[0].author)
        self.assertIsNone(commits[0].date)

    def test_line_without_delimiter(self) -> None:
        commits = parse_commit_data("just a message")
        self.assertEqual(commits[0].hash, "just a message")
        self.assertIsNone(commits[0].message)

    def test_extra_fields_are_ignored(self) -> None:
        commits = parse_commit_data("a1|chore: x|carol|2024-01-01|extra")
        self.assertEqual(commits[0], CommitRecord("a1", "chore: x", "carol", "2024-01-01"))

    def test_empty_input(self) -> None:
        self.assertEqual(parse_commit_data(""), [])
        self.assertEqual(parse_commit_data("\n  \n"), [])

    def test_records_are_immutable(self) -> None:
        commit = parse_commit_data("a1|feat: x|alice|2024-01-01")[0]
        with self.assertRaises(AttributeError):
            commit.message = "changed"  # type: ignore[misc]


if __name__ == "__main__":
    unittest.main()
