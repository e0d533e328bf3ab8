"""Position history: per-context stacks, merging and edit recording.

This module intentionally has no UI concerns.
Callers move the caret themselves using the records returned here.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable
from dataclasses import dataclass, replace

from .config import DEFAULT_MAXIMUM_HISTORY_SIZE, DEFAULT_MINIMUM_LINE_DISTANCE

UNTITLED = "Untitled"

MOD_INSERT_TEXT = 0x01
MOD_DELETE_TEXT = 0x02
PERFORMED_UNDO = 0x20
PERFORMED_REDO = 0x40

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryRecord:
    """Visited position; ``location_id`` is a file path or buffer identifier."""

    location_id: str
    line: int = 0
    column: int = 0

    def normalized(self) -> HistoryRecord:
        """Return a variant with non-negative line and column."""
        return HistoryRecord(self.location_id, max(0, self.line), max(0, self.column))


class HistoryStack:
    """Bounded position history with a cursor.

    ``cursor`` ranges over ``[0, len(records)]``; ``0`` means there is no
    current position, otherwise ``records[cursor - 1]`` is current. Appends
    close to the current record (same location, within
    ``minimum_line_distance`` lines) amend it instead of growing the stack.
    """

    def __init__(
        self,
        minimum_line_distance: int = DEFAULT_MINIMUM_LINE_DISTANCE,
        maximum_history_size: int = DEFAULT_MAXIMUM_HISTORY_SIZE,
    ) -> None:
        self.minimum_line_distance = max(0, minimum_line_distance)
        self.maximum_history_size = max(1, maximum_history_size)
        self.records: list[HistoryRecord] = []
        self.cursor = 0

    def __len__(self) -> int:
        return len(self.records)

    @property
    def current(self) -> HistoryRecord | None:
        if self.cursor == 0:
            return None
        return self.records[self.cursor - 1]

    def _is_near(self, record: HistoryRecord, other: HistoryRecord) -> bool:
        return (
            record.location_id == other.location_id
            and abs(record.line - other.line) <= self.minimum_line_distance
        )

    def append(self, record: HistoryRecord) -> None:
        """Record ``record`` as the current position."""
        record = record.normalized()
        current = self.current
        if current is not None and self._is_near(record, current):
            self.records[self.cursor - 1] = replace(current, line=record.line, column=record.column)
            return

        del self.records[self.cursor :]
        self.records.append(record)
        self.cursor = len(self.records)
        if len(self.records) > self.maximum_history_size:
            del self.records[0]
            self.cursor -= 1

    def back(self, position: HistoryRecord) -> HistoryRecord | None:
        """Step back from the caller's live ``position``.

        When ``position`` has drifted away from the current record, the
        current record is returned without moving so the caller re-syncs
        first. Returns ``None`` when there is nothing behind the cursor.
        """
        if self.cursor <= 1:
            return None
        current = self.records[self.cursor - 1]
        if not self._is_near(position, current):
            return current
        self.cursor -= 1
        return self.records[self.cursor - 1]

    def forward(self) -> HistoryRecord | None:
        """Step forward, returning ``None`` at the newest record."""
        if self.cursor >= len(self.records):
            return None
        self.cursor += 1
        return self.records[self.cursor - 1]

    def clear(self) -> None:
        self.records.clear()
        self.cursor = 0


class HistoryContexts:
    """One :class:`HistoryStack` per navigation context (view or pane)."""

    def __init__(
        self,
        minimum_line_distance: int = DEFAULT_MINIMUM_LINE_DISTANCE,
        maximum_history_size: int = DEFAULT_MAXIMUM_HISTORY_SIZE,
    ) -> None:
        self.minimum_line_distance = minimum_line_distance
        self.maximum_history_size = maximum_history_size
        self._stacks: dict[Hashable, HistoryStack] = {}

    def open(self, context: Hashable) -> HistoryStack:
        """Create (or return the existing) stack for ``context``."""
        stack = self._stacks.get(context)
        if stack is None:
            stack = HistoryStack(self.minimum_line_distance, self.maximum_history_size)
            self._stacks[context] = stack
        return stack

    def close(self, context: Hashable) -> None:
        self._stacks.pop(context, None)

    def reset(self) -> None:
        """Empty every open stack."""
        for stack in self._stacks.values():
            stack.clear()

    def __contains__(self, context: object) -> bool:
        return context in self._stacks


@dataclass(frozen=True)
class EditEvent:
    """Buffer modification notification.

    ``flags`` combines ``MOD_*`` and ``PERFORMED_*`` bits. ``line`` and
    ``column`` locate the end of an insertion or the point of a deletion.
    """

    flags: int
    location_id: str | None
    length: int
    buffer_length: int
    line: int
    column: int


class EditHistoryRecorder:
    """Appends text insertion and deletion locations to a history stack."""

    def __init__(self, history: HistoryStack, listening: bool = True) -> None:
        self.history = history
        self.listening = listening

    def enable_listening(self) -> None:
        self.listening = True

    def disable_listening(self) -> None:
        """Stop recording edits and clear the history."""
        self.listening = False
        self.history.clear()

    def on_modified(self, event: EditEvent) -> bool:
        """Record ``event`` when it is a user edit; return whether it was recorded."""
        if not self.listening:
            return False
        if event.flags & MOD_INSERT_TEXT:
            if event.length == event.buffer_length:
                return False  # file load
        elif event.flags & MOD_DELETE_TEXT:
            if event.buffer_length == 0:
                return False  # whole buffer replaced
        else:
            return False
        if event.flags & (PERFORMED_UNDO | PERFORMED_REDO):
            return False

        record = HistoryRecord(event.location_id or UNTITLED, event.line, event.column)
        logger.debug("recording edit at %s", record)
        self.history.append(record)
        return True
