"""Persistent JSON config helpers.

Stores the ctags executable, per-project generation commands, configured tag
files and history limits. All access is defensive: malformed or missing
config falls back to defaults key by key.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import TypeVar

from platformdirs import user_config_dir

APP_NAME = "tagjump"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

DEFAULT_CTAGS = "ctags"
DEFAULT_MINIMUM_LINE_DISTANCE = 3
DEFAULT_MAXIMUM_HISTORY_SIZE = 100

logger = logging.getLogger(__name__)

# Either a literal command-line string or a zero-argument callable producing one.
CommandSetting = str | Callable[[], str]

T = TypeVar("T")


@dataclass
class TagSettings:
    """Resolved settings for tag lookup, generation and history."""

    ctags: str = DEFAULT_CTAGS
    generate_default_api: bool = True
    ctags_flags: dict[Path, CommandSetting] = field(default_factory=dict)
    api_commands: dict[Path, CommandSetting] = field(default_factory=dict)
    tag_files: dict[Path, list[Path]] = field(default_factory=dict)
    global_tag_files: list[Path] = field(default_factory=list)
    minimum_line_distance: int = DEFAULT_MINIMUM_LINE_DISTANCE
    maximum_history_size: int = DEFAULT_MAXIMUM_HISTORY_SIZE


def normalize_path(path: str | Path) -> Path:
    """Expand ``~`` and resolve symlinks so equal locations compare equal."""
    return Path(path).expanduser().resolve()


def project_setting(settings: Mapping[Path, T], project_root: Path) -> T | None:
    """Look up the entry configured for ``project_root``, matching normalized keys."""
    if project_root in settings:
        return settings[project_root]
    root = normalize_path(project_root)
    for key, value in settings.items():
        if normalize_path(key) == root:
            return value
    return None


def resolve_command(setting: CommandSetting | None) -> str | None:
    """Return the command string for ``setting``, calling it when callable."""
    if setting is None:
        return None
    if callable(setting):
        return setting()
    return setting


def load_config(config_path: Path | None = None) -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    path = config_path if config_path is not None else CONFIG_PATH
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object], config_path: Path | None = None) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are logged and otherwise ignored.
    """
    path = config_path if config_path is not None else CONFIG_PATH
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning("failed to write config %s: %s", path, exc)


def _coerce_int(value: object, default: int, minimum: int) -> int:
    """Booleans, non-integers and values below ``minimum`` fall back to ``default``."""
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    if value < minimum:
        return default
    return value


def _string_map(value: object) -> dict[Path, CommandSetting]:
    if not isinstance(value, dict):
        return {}
    return {
        normalize_path(key): command
        for key, command in value.items()
        if isinstance(key, str) and key and isinstance(command, str)
    }


def _path_list(value: object) -> list[Path]:
    if isinstance(value, str):
        return [Path(value).expanduser()] if value else []
    if not isinstance(value, list):
        return []
    return [Path(item).expanduser() for item in value if isinstance(item, str) and item]


def _tag_file_map(value: object) -> dict[Path, list[Path]]:
    if not isinstance(value, dict):
        return {}
    mapped: dict[Path, list[Path]] = {}
    for key, raw_paths in value.items():
        if not isinstance(key, str) or not key:
            continue
        paths = _path_list(raw_paths)
        if paths:
            mapped[normalize_path(key)] = paths
    return mapped


def load_settings(config_path: Path | None = None) -> TagSettings:
    """Build :class:`TagSettings` from the JSON config, dropping invalid entries."""
    data = load_config(config_path)

    ctags = data.get("ctags")
    generate_default_api = data.get("generate_default_api")
    return TagSettings(
        ctags=ctags.strip() if isinstance(ctags, str) and ctags.strip() else DEFAULT_CTAGS,
        generate_default_api=generate_default_api if isinstance(generate_default_api, bool) else True,
        ctags_flags=_string_map(data.get("ctags_flags")),
        api_commands=_string_map(data.get("api_commands")),
        tag_files=_tag_file_map(data.get("tag_files")),
        global_tag_files=_path_list(data.get("global_tag_files")),
        minimum_line_distance=_coerce_int(
            data.get("minimum_line_distance"), DEFAULT_MINIMUM_LINE_DISTANCE, minimum=0
        ),
        maximum_history_size=_coerce_int(
            data.get("maximum_history_size"), DEFAULT_MAXIMUM_HISTORY_SIZE, minimum=1
        ),
    )


def add_global_tag_file(tag_file: Path, config_path: Path | None = None) -> None:
    """Append ``tag_file`` to the persisted global list unless already present."""
    config = load_config(config_path)
    existing = [str(path) for path in _path_list(config.get("global_tag_files"))]
    entry = str(tag_file)
    if entry in existing:
        return
    config["global_tag_files"] = [*existing, entry]
    save_config(config, config_path)
