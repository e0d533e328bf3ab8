"""Tests for sorted tag-file lookup and tag-line parsing.

Covers prefix completeness, the sorted-run early exit and locator parsing.
Also checks relative path resolution and silent skipping of missing files.
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from tagjump.tags import (
    LineNumber,
    SearchPattern,
    complete_tag_names,
    parse_locator,
    parse_tag_line,
    search_tags,
)

SORTED_TAGS = "\n".join(
    [
        "!_TAG_FILE_SORTED\t1\t/0=unsorted, 1=sorted/",
        "alpha\tsrc/a.py\t/^def alpha():$/;\"\tf",
        "beta\tsrc/b.py\t12;\"\tf\tline:12",
        "beta_helper\tsrc/b.py\t/^def beta_helper(x):$/;\"\tf",
        "betamax\t/abs/c.py\t3;\"",
        "gamma\tsrc/g.py\t/^class gamma:$/;\"\tc",
    ]
)


def _write(directory: Path, name: str, text: str) -> Path:
    path = directory / name
    path.write_text(text + "\n", encoding="utf-8")
    return path


class SearchTagsTests(unittest.TestCase):
    def test_returns_exactly_prefix_matches_in_file_order(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            tags = _write(Path(tmp), "tags", SORTED_TAGS)

            records = search_tags("beta", [tags])

        self.assertEqual([record.name for record in records], ["beta", "beta_helper", "betamax"])

    def test_relative_files_resolve_against_tag_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            tags = _write(root, "tags", SORTED_TAGS)

            records = search_tags("beta", [tags])

        self.assertEqual(records[0].file_path, root / "src" / "b.py")
        self.assertEqual(records[2].file_path, Path("/abs/c.py"))

    def test_locators_and_fields(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            tags = _write(Path(tmp), "tags", SORTED_TAGS)

            alpha, = search_tags("alpha", [tags])
            beta = search_tags("beta", [tags])[0]

        self.assertEqual(alpha.locator, SearchPattern("def alpha():"))
        self.assertEqual(alpha.extension_fields, "f")
        self.assertEqual(beta.locator, LineNumber(12))
        self.assertEqual(beta.extension_fields, "f\tline:12")

    def test_scan_stops_after_matching_run(self) -> None:
        unsorted = "\n".join(
            [
                "alpha\ta.py\t1;\"",
                "beta\tb.py\t2;\"",
                "alpha_late\ta.py\t3;\"",
            ]
        )
        with tempfile.TemporaryDirectory() as tmp:
            tags = _write(Path(tmp), "tags", unsorted)

            records = search_tags("alpha", [tags])

        self.assertEqual([record.name for record in records], ["alpha"])

    def test_malformed_lines_before_matches_are_skipped(self) -> None:
        text = "\n".join(["garbage line", "alpha\ta.py\t1;\"", "alphabet\ta.py\t2;\""])
        with tempfile.TemporaryDirectory() as tmp:
            tags = _write(Path(tmp), "tags", text)

            records = search_tags("alpha", [tags])

        self.assertEqual([record.name for record in records], ["alpha", "alphabet"])

    def test_results_concatenate_sources_without_dedup(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "one").mkdir()
            (root / "two").mkdir()
            first = _write(root / "one", "tags", "main\tm.c\t5;\"")
            second = _write(root / "two", "tags", "main\tm.c\t9;\"")

            records = search_tags("main", [second, first])

        self.assertEqual(
            [(record.file_path, record.locator) for record in records],
            [(root / "two" / "m.c", LineNumber(9)), (root / "one" / "m.c", LineNumber(5))],
        )

    def test_missing_sources_are_skipped(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            tags = _write(Path(tmp), "tags", SORTED_TAGS)

            records = search_tags("gamma", [Path(tmp) / "missing", tags, Path(tmp)])

        self.assertEqual([record.name for record in records], ["gamma"])

    def test_complete_tag_names_keeps_duplicates(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            tags = _write(Path(tmp), "tags", SORTED_TAGS)

            names = complete_tag_names("be", [tags, tags])

        self.assertEqual(names, ["beta", "beta_helper", "betamax"] * 2)


class ParseTagLineTests(unittest.TestCase):
    def test_pattern_anchors_and_escapes_are_removed(self) -> None:
        self.assertEqual(parse_locator("/^int main(void)$/"), SearchPattern("int main(void)"))
        self.assertEqual(parse_locator(r"/^  a \/ b \\ c$/"), SearchPattern("  a / b \\ c"))
        self.assertEqual(parse_locator("/unanchored/"), SearchPattern("unanchored"))

    def test_numeric_ex_command_is_line_locator(self) -> None:
        self.assertEqual(parse_locator("42"), LineNumber(42))

    def test_missing_extension_fields(self) -> None:
        record = parse_tag_line("name\tfile.c\t7;\"\n", Path("/proj"))

        self.assertIsNotNone(record)
        assert record is not None
        self.assertEqual(record.extension_fields, "")
        self.assertEqual(record.file_path, Path("/proj/file.c"))

    def test_windows_paths_are_absolute_and_unescaped(self) -> None:
        record = parse_tag_line("name\tC:\\\\src\\\\file.c\t7;\"", Path("/proj"))

        assert record is not None
        self.assertEqual(str(record.file_path), "C:\\src\\file.c")

    def test_malformed_line_returns_none(self) -> None:
        self.assertIsNone(parse_tag_line("no tabs here", Path("/proj")))
        self.assertIsNone(parse_tag_line("name\tfile.c\t7", Path("/proj")))


if __name__ == "__main__":
    unittest.main()
