"""Shared tag datatypes."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class LineNumber:
    """Absolute 1-based line locator as written in the tag file."""

    line: int


@dataclass(frozen=True)
class SearchPattern:
    """Literal text to look for inside the target file."""

    text: str


Locator = LineNumber | SearchPattern


@dataclass(frozen=True)
class TagFileRecord:
    """One parsed tag entry pointing at a symbol definition."""

    name: str
    file_path: Path
    locator: Locator
    extension_fields: str = ""

    @property
    def locator_text(self) -> str:
        """Return the locator as display text."""
        if isinstance(self.locator, LineNumber):
            return str(self.locator.line)
        return self.locator.text
