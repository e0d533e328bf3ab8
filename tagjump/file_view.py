"""File-backed :class:`~tagjump.navigation.EditorView` for non-interactive hosts."""

from __future__ import annotations

from pathlib import Path

from .history import UNTITLED


def read_lines(path: Path) -> list[str]:
    """Read ``path`` as text lines; unreadable files yield no lines."""
    try:
        return path.read_text(encoding="utf-8", errors="replace").splitlines()
    except OSError:
        return []


class FileView:
    """Minimal editor view: one open file plus a caret."""

    def __init__(self, path: Path | None = None, line: int = 0, column: int = 0) -> None:
        self.path: Path | None = None
        self.buffer_id: str | None = None
        self.lines: list[str] = []
        self.line = 0
        self.column = 0
        if path is not None:
            self.open_location(str(path))
        self.goto_position(line, column)

    @property
    def file_path(self) -> Path | None:
        return self.path

    @property
    def location_id(self) -> str:
        if self.path is not None:
            return str(self.path)
        return self.buffer_id or UNTITLED

    def caret(self) -> tuple[int, int]:
        return self.line, self.column

    def line_text(self, line: int) -> str:
        if 0 <= line < len(self.lines):
            return self.lines[line]
        return ""

    def line_count(self) -> int:
        return len(self.lines)

    def open_location(self, location_id: str) -> None:
        """Open a file path; identifiers that are not files become empty buffers."""
        if location_id == self.location_id and (self.path is not None or self.buffer_id is not None):
            return
        target = Path(location_id)
        if target.is_file():
            self.path = target
            self.buffer_id = None
            self.lines = read_lines(target)
        else:
            self.path = None
            self.buffer_id = location_id
            self.lines = []
        self.line = 0
        self.column = 0

    def goto_line(self, line: int) -> None:
        self.goto_position(line, 0)

    def goto_position(self, line: int, column: int) -> None:
        last_line = max(0, len(self.lines) - 1)
        self.line = max(0, min(line, last_line))
        self.column = max(0, min(column, len(self.line_text(self.line))))
