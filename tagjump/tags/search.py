"""Prefix lookup over sorted ctags files.

Each tag file is streamed line by line. Because ctags output is sorted by
name, the matches for a prefix form one contiguous run and the scan of a file
stops at the first non-matching line after that run. Unsorted input is not
detected; it simply yields an incomplete result.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable
from pathlib import Path

from .types import LineNumber, Locator, SearchPattern, TagFileRecord

logger = logging.getLogger(__name__)

_TAG_LINE_RE = re.compile(r'^(?P<name>\S*)\t(?P<file>[^\t]+)\t(?P<ex>.*?);"\t?(?P<fields>.*)$')
_SEARCH_EX_RE = re.compile(r"^/\^?(?P<text>.*?)\$?/$")
_PATTERN_ESCAPE_RE = re.compile(r"\\([/\\])")
_ABSOLUTE_FILE_RE = re.compile(r"^[A-Za-z]?:?[/\\]")


def is_search_command(ex_command: str) -> bool:
    """Whether ``ex_command`` is a forward ``/pattern/`` search."""
    return _SEARCH_EX_RE.match(ex_command) is not None


def parse_locator(ex_command: str) -> Locator:
    """Turn a tag ex command into a line or literal-pattern locator."""
    if ex_command.isdecimal():
        return LineNumber(int(ex_command))
    match = _SEARCH_EX_RE.match(ex_command)
    if match is None:
        return SearchPattern(ex_command)
    return SearchPattern(_PATTERN_ESCAPE_RE.sub(r"\1", match.group("text")))


def _resolve_file(raw_file: str, tag_dir: Path) -> Path:
    if _ABSOLUTE_FILE_RE.match(raw_file):
        file_text = raw_file
    else:
        file_text = os.path.join(str(tag_dir), raw_file)
    return Path(file_text.replace("\\\\", "\\"))


def split_tag_line(line: str) -> dict[str, str] | None:
    """Return the raw ``name``, ``file``, ``ex`` and ``fields`` columns of a tag line."""
    match = _TAG_LINE_RE.match(line.rstrip("\r\n"))
    return match.groupdict() if match is not None else None


def parse_tag_line(line: str, tag_dir: Path) -> TagFileRecord | None:
    """Parse one tag-file line, returning ``None`` when it is malformed."""
    fields = split_tag_line(line)
    if fields is None:
        return None
    return TagFileRecord(
        name=fields["name"],
        file_path=_resolve_file(fields["file"], tag_dir),
        locator=parse_locator(fields["ex"]),
        extension_fields=fields["fields"],
    )


def _search_file(query: str, tag_file: Path) -> list[TagFileRecord]:
    matches: list[TagFileRecord] = []
    tag_dir = tag_file.parent
    try:
        with tag_file.open("r", encoding="utf-8", errors="replace") as handle:
            for line in handle:
                record = parse_tag_line(line, tag_dir)
                if record is not None and record.name.startswith(query):
                    matches.append(record)
                elif matches:
                    break
    except OSError as exc:
        logger.debug("skipping tag file %s: %s", tag_file, exc)
        return []
    return matches


def search_tags(query: str, sources: Iterable[Path]) -> list[TagFileRecord]:
    """Return records whose name starts with ``query`` across ``sources``.

    Results keep source order, then line order within each file. Duplicate
    names found in several files are all returned.
    """
    results: list[TagFileRecord] = []
    for tag_file in sources:
        found = _search_file(query, Path(tag_file))
        logger.debug("%d match(es) for %r in %s", len(found), query, tag_file)
        results.extend(found)
    return results


def complete_tag_names(prefix: str, sources: Iterable[Path]) -> list[str]:
    """Return tag names starting with ``prefix``; duplicates are kept."""
    return [record.name for record in search_tags(prefix, sources)]
