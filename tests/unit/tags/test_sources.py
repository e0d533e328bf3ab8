"""Tests for tag-file discovery order and deduplication."""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path

from tagjump.config import TagSettings
from tagjump.navigation import tag_sources_for
from tagjump.tags import resolve_tag_sources


class ResolveTagSourcesTests(unittest.TestCase):
    def test_priority_order(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / "pkg").mkdir()
            active = root / "pkg" / "mod.py"
            active.write_text("", encoding="utf-8")
            (root / "pkg" / "tags").write_text("", encoding="utf-8")
            (root / "tags").write_text("", encoding="utf-8")
            configured = [root / "lib" / "tags", root / "more" / "tags"]
            global_tags = [root / "share" / "tags"]

            sources = resolve_tag_sources(active, root, {root: configured}, global_tags)

        self.assertEqual(
            sources,
            [root / "pkg" / "tags", root / "tags", *configured, *global_tags],
        )

    def test_duplicate_kept_at_first_discovery(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            active = root / "main.c"
            active.write_text("", encoding="utf-8")
            (root / "tags").write_text("", encoding="utf-8")
            shared = root / "shared" / "tags"

            sources = resolve_tag_sources(
                active,
                root,
                {root: [root / "tags", shared]},
                [shared, root / "tags"],
            )

        self.assertEqual(sources, [root / "tags", shared])

    def test_single_configured_path(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            single = root / "only" / "tags"

            sources = resolve_tag_sources(root / "x.py", root, {root: single})

        self.assertEqual(sources, [single])

    def test_missing_files_and_unknown_root_yield_empty(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            sources = resolve_tag_sources(Path(tmp) / "x.py", None, {Path(tmp): [Path("/ignored")]})

        self.assertEqual(sources, [])

    def test_unknown_active_file_uses_working_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            cwd = Path(tmp).resolve()
            (cwd / "tags").write_text("", encoding="utf-8")
            previous = os.getcwd()
            os.chdir(cwd)
            try:
                sources = resolve_tag_sources(None, None)
            finally:
                os.chdir(previous)

        self.assertEqual(sources, [cwd / "tags"])

    def test_relative_active_file_in_root_lists_tags_once(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / ".git").mkdir()
            (root / "shapes.py").write_text("", encoding="utf-8")
            (root / "tags").write_text("", encoding="utf-8")
            previous = os.getcwd()
            os.chdir(root)
            try:
                sources = tag_sources_for(Path("shapes.py"), TagSettings())
            finally:
                os.chdir(previous)

        self.assertEqual(sources, [root / "tags"])

    def test_symlinked_root_matches_configured_project(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            base = Path(tmp).resolve()
            repo = base / "repo"
            repo.mkdir()
            (repo / ".git").mkdir()
            (repo / "a.py").write_text("", encoding="utf-8")
            link = base / "link"
            try:
                link.symlink_to(repo, target_is_directory=True)
            except (OSError, NotImplementedError) as exc:
                self.skipTest(f"symlinks unavailable: {exc}")
            extra = base / "vendor" / "tags"

            from_link = tag_sources_for(link / "a.py", TagSettings(tag_files={link: [extra]}))
            from_repo = resolve_tag_sources(repo / "a.py", link, {repo: [extra]})

        self.assertEqual(from_link, [extra])
        self.assertEqual(from_repo, [extra])


if __name__ == "__main__":
    unittest.main()
