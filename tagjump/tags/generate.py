"""ctags invocation: single-file fallback lookup and project generation.

Both entry points block until the external process exits. Exit statuses are
logged but not acted on; a failed run just leaves an empty or stale tags
file, which lookup treats as having no matches.
"""

from __future__ import annotations

import logging
import os
import re
import shlex
import subprocess
import tempfile
from pathlib import Path

from ..config import TagSettings, project_setting, resolve_command
from .search import is_search_command, parse_locator, search_tags, split_tag_line
from .sources import TAGS_FILENAME
from .types import TagFileRecord

API_FILENAME = "api"
DEFAULT_CTAGS_FLAGS = "-R"

logger = logging.getLogger(__name__)

_API_NAME_RE = re.compile(r"^\w+$")


def _run(cmd: list[str], cwd: Path | None = None) -> bool:
    """Run ``cmd`` to completion, returning whether it could be launched."""
    if not cmd:
        return False
    logger.debug("running %s (cwd=%s)", cmd, cwd)
    try:
        proc = subprocess.run(
            cmd,
            cwd=cwd,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            text=True,
            check=False,
        )
    except OSError as exc:
        logger.warning("failed to run %s: %s", cmd[0], exc)
        return False
    if proc.returncode != 0:
        logger.debug("%s exited with %s: %s", cmd[0], proc.returncode, (proc.stderr or "").strip())
    return True


def _split_command(command: str) -> list[str] | None:
    """Split a configured command line, returning ``None`` when it cannot be parsed."""
    try:
        return shlex.split(command)
    except ValueError as exc:
        logger.warning("ignoring malformed command %r: %s", command, exc)
        return None


def generate_and_search(
    active_file: Path | None,
    query: str,
    ctags: str = "ctags",
) -> list[TagFileRecord]:
    """Generate tags for ``active_file`` alone and search them for ``query``.

    The temporary tags file is removed on every exit path.
    """
    if active_file is None:
        return []

    fd, tmp_name = tempfile.mkstemp(prefix="tagjump-", suffix=".tags")
    os.close(fd)
    tmp_path = Path(tmp_name)
    try:
        if not _run([ctags, "-o", str(tmp_path), str(active_file)]):
            return []
        return search_tags(query, [tmp_path])
    finally:
        try:
            tmp_path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("failed to remove temporary tags %s: %s", tmp_path, exc)


def write_default_api(tags_path: Path, api_path: Path) -> int:
    """Write ``name pattern\\nfile`` api entries for ``/pattern/`` tags.

    Only plain identifiers are included. Returns the number of entries
    written.
    """
    count = 0
    with tags_path.open("r", encoding="utf-8", errors="replace") as source, api_path.open(
        "w", encoding="utf-8", newline="\n"
    ) as out:
        for line in source:
            fields = split_tag_line(line)
            if fields is None or not is_search_command(fields["ex"]):
                continue
            if not _API_NAME_RE.match(fields["name"]):
                continue
            pattern = parse_locator(fields["ex"]).text
            out.write(f"{fields['name']} {pattern}\\n{fields['file']}\n")
            count += 1
    return count


def generate_project_tags(project_root: Path, settings: TagSettings) -> Path | None:
    """Regenerate ``tags`` (and an api file) inside ``project_root``.

    Returns the api file path when one was produced by the built-in
    generator or configured command, ``None`` otherwise.
    """
    flags = resolve_command(project_setting(settings.ctags_flags, project_root)) or DEFAULT_CTAGS_FLAGS
    flag_args = _split_command(flags)
    if flag_args is not None:
        _run([settings.ctags, *flag_args], cwd=project_root)

    api_path = project_root / API_FILENAME
    api_command = resolve_command(project_setting(settings.api_commands, project_root))
    if api_command:
        api_args = _split_command(api_command)
        if api_args is None or not _run(api_args, cwd=project_root):
            return None
        return api_path if api_path.exists() else None

    if not settings.generate_default_api:
        return None

    tags_path = project_root / TAGS_FILENAME
    if not tags_path.is_file():
        logger.warning("no %s produced in %s; skipping api generation", TAGS_FILENAME, project_root)
        return None
    try:
        count = write_default_api(tags_path, api_path)
    except OSError as exc:
        logger.warning("failed to write %s: %s", api_path, exc)
        return None
    logger.info("wrote %d api entr%s to %s", count, "y" if count == 1 else "ies", api_path)
    return api_path
