"""Jump-to-definition orchestration over tag lookup and position history.

The controller talks to the host editor only through :class:`EditorView` and
an optional selection callback, so any front end (including the CLI) can
drive it.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from .config import TagSettings
from .history import HistoryRecord, HistoryStack
from .project import find_project_root
from .tags import (
    LineNumber,
    TagFileRecord,
    complete_tag_names,
    generate_and_search,
    resolve_tag_sources,
    search_tags,
)

logger = logging.getLogger(__name__)

_WORD_CHAR_RE = re.compile(r"\w")
_KIND_PREFIX_RE = re.compile(r"^[A-Za-z](?:\s+|$)")


class EditorView(Protocol):
    """Host editor surface for one navigation context."""

    @property
    def file_path(self) -> Path | None: ...

    @property
    def location_id(self) -> str: ...

    def caret(self) -> tuple[int, int]:
        """Return the 0-based ``(line, column)`` of the caret."""
        ...

    def line_text(self, line: int) -> str: ...

    def line_count(self) -> int: ...

    def open_location(self, location_id: str) -> None:
        """Show the file or buffer identified by ``location_id``."""
        ...

    def goto_line(self, line: int) -> None: ...

    def goto_position(self, line: int, column: int) -> None: ...


@dataclass(frozen=True)
class TagCandidate:
    """Flattened row shown when several tags match."""

    name: str
    file_name: str
    locator_text: str
    extra: str


SelectTag = Callable[[Sequence[TagCandidate]], int | None]


def identifier_bounds(text: str, column: int) -> tuple[int, int]:
    """Return ``(start, end)`` of the identifier touching ``column`` in ``text``."""
    column = max(0, min(column, len(text)))
    start = column
    while start > 0 and _WORD_CHAR_RE.match(text[start - 1]):
        start -= 1
    end = column
    while end < len(text) and _WORD_CHAR_RE.match(text[end]):
        end += 1
    return start, end


def tag_sources_for(
    active_file: Path | None,
    settings: TagSettings,
    project_root_for: Callable[[Path | None], Path | None] = find_project_root,
) -> list[Path]:
    """Resolve tag files for ``active_file`` using configured sources."""
    project_root = project_root_for(active_file) if active_file is not None else None
    return resolve_tag_sources(
        active_file,
        project_root,
        settings.tag_files,
        settings.global_tag_files,
    )


def tag_candidate(record: TagFileRecord) -> TagCandidate:
    return TagCandidate(
        name=record.name,
        file_name=record.file_path.name,
        locator_text=record.locator_text.lstrip(),
        extra=_KIND_PREFIX_RE.sub("", record.extension_fields, count=1),
    )


class NavigationController:
    """Resolves tag jumps for one view and records them in its history."""

    def __init__(
        self,
        view: EditorView,
        history: HistoryStack,
        settings: TagSettings | None = None,
        select: SelectTag | None = None,
        project_root_for: Callable[[Path | None], Path | None] = find_project_root,
    ) -> None:
        self.view = view
        self.history = history
        self.settings = settings if settings is not None else TagSettings()
        self.select = select
        self.project_root_for = project_root_for

    def _word_at_caret(self) -> str:
        """Return the identifier under the caret."""
        line, column = self.view.caret()
        text = self.view.line_text(line)
        start, end = identifier_bounds(text, column)
        return text[start:end]

    def _sources(self) -> list[Path]:
        return tag_sources_for(self.view.file_path, self.settings, self.project_root_for)

    def find_tags(self, name: str) -> list[TagFileRecord]:
        """Search configured tag files, generating tags for the active file as a last resort."""
        records = search_tags(name, self._sources())
        if records:
            return records
        logger.debug("no tags for %r; trying the active file", name)
        return generate_and_search(self.view.file_path, name, self.settings.ctags)

    def complete_tag(self) -> tuple[int, list[str]]:
        """Return ``(word_length, names)`` completing the identifier under the caret."""
        word = self._word_at_caret()
        if not word:
            return 0, []
        return len(word), complete_tag_names(word, self._sources())

    def record_caret(self) -> None:
        line, column = self.view.caret()
        self.history.append(HistoryRecord(self.view.location_id, line, column))

    def _choose(self, records: list[TagFileRecord]) -> TagFileRecord | None:
        if len(records) == 1:
            return records[0]
        if self.select is None:
            return None
        index = self.select([tag_candidate(record) for record in records])
        if index is None or index < 0 or index >= len(records):
            return None
        return records[index]

    def _move_to(self, record: TagFileRecord) -> None:
        self.view.open_location(str(record.file_path))
        if isinstance(record.locator, LineNumber):
            self.view.goto_line(max(0, record.locator.line - 1))
            return
        needle = record.locator.text
        for line in range(self.view.line_count()):
            if needle in self.view.line_text(line):
                self.view.goto_line(line)
                return
        logger.debug("pattern %r not found in %s", needle, record.file_path)

    def goto_tag(self, name: str | None = None, previous: bool | None = None) -> bool:
        """Jump to the definition of ``name`` or move through history.

        With neither argument, the identifier under the caret is looked up.
        With only ``previous``, navigates history backwards (``True``) or
        forwards (``False``). Returns whether the view was moved.
        """
        if name is None:
            if previous is not None:
                return self.history_back() if previous else self.history_forward()
            name = self._word_at_caret()
        if not name:
            return False

        records = self.find_tags(name)
        if not records:
            return False
        target = self._choose(records)
        if target is None:
            return False

        self.record_caret()
        self._move_to(target)
        self.record_caret()
        return True

    def _goto_record(self, record: HistoryRecord) -> None:
        self.view.open_location(record.location_id)
        self.view.goto_position(record.line, record.column)

    def history_back(self) -> bool:
        line, column = self.view.caret()
        target = self.history.back(HistoryRecord(self.view.location_id, line, column))
        if target is None:
            return False
        self._goto_record(target)
        return True

    def history_forward(self) -> bool:
        target = self.history.forward()
        if target is None:
            return False
        self._goto_record(target)
        return True
