"""Project-root detection by version-control marker directories."""

from __future__ import annotations

from pathlib import Path

VCS_MARKERS = (".bzr", ".git", ".hg", ".svn", "_FOSSIL_")


def find_project_root(path: Path | None) -> Path | None:
    """Return the nearest ancestor of ``path`` holding a VCS marker.

    ``path`` may be a file or a directory. Returns ``None`` when ``path`` is
    unknown or no ancestor is under version control.
    """
    if path is None:
        return None
    try:
        current = path.resolve()
    except OSError:
        current = path.absolute()
    if not current.is_dir():
        current = current.parent
    while True:
        if any((current / marker).exists() for marker in VCS_MARKERS):
            return current
        parent = current.parent
        if parent == current:
            return None
        current = parent
