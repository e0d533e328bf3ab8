"""Tag-file discovery for a lookup request.

Collects candidate ``tags`` files from the active file's directory, the
project root, per-project configuration and the global list, in that order.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path

from ..config import normalize_path, project_setting

TAGS_FILENAME = "tags"

logger = logging.getLogger(__name__)

ProjectSources = Mapping[Path, Path | Sequence[Path]]


def _add_unique(sources: list[Path], candidate: Path) -> None:
    candidate = normalize_path(candidate)
    if candidate in sources:
        return
    sources.append(candidate)


def resolve_tag_sources(
    active_file: Path | None,
    project_root: Path | None,
    per_project_sources: ProjectSources | None = None,
    global_sources: Sequence[Path] = (),
) -> list[Path]:
    """Return ordered, deduplicated tag files applicable to ``active_file``.

    Colocated and project-root ``tags`` files are included only when they
    exist. Configured paths are not checked; the searcher skips whatever
    cannot be opened. Every path is normalized before deduplication, so a
    relative or symlinked spelling of an already listed file is dropped.
    """
    sources: list[Path] = []

    directory = active_file.parent if active_file is not None else Path.cwd()
    colocated = directory / TAGS_FILENAME
    if colocated.is_file():
        _add_unique(sources, colocated)

    if project_root is not None:
        root_tags = project_root / TAGS_FILENAME
        if root_tags.is_file():
            _add_unique(sources, root_tags)

        configured = project_setting(per_project_sources or {}, project_root)
        if isinstance(configured, (str, Path)):
            _add_unique(sources, Path(configured))
        elif configured:
            for entry in configured:
                _add_unique(sources, Path(entry))

    for entry in global_sources:
        _add_unique(sources, Path(entry))

    logger.debug("resolved %d tag source(s): %s", len(sources), sources)
    return sources
