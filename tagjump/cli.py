"""Command-line front door for tagjump.

Parses CLI options, loads settings and dispatches to tag lookup, completion,
jump resolution or project tag generation.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from . import config
from .file_view import FileView
from .history import HistoryStack
from .navigation import NavigationController, TagCandidate, tag_candidate, tag_sources_for
from .project import find_project_root
from .tags import complete_tag_names, generate_project_tags

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _positive_int(value: str) -> int:
    """argparse type for 1-based line and column numbers."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def setup_logging(verbose: bool) -> None:
    """Attach one stderr handler to the root logger."""
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    has_console = any(
        isinstance(handler, logging.StreamHandler) and getattr(handler, "stream", None) is sys.stderr
        for handler in root.handlers
    )
    if not has_console:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)


def _existing_file(raw: str | None) -> Path | None:
    if raw is None:
        return None
    path = Path(raw)
    if not path.is_file():
        raise SystemExit(f"File not found: {path}")
    return path


def prompt_selection(candidates: Sequence[TagCandidate]) -> int | None:
    """Ask on stdin which candidate to use; returns ``None`` when cancelled."""
    for index, candidate in enumerate(candidates, start=1):
        sys.stderr.write(
            f"{index:>3}  {candidate.name}  {candidate.file_name}  {candidate.locator_text}  {candidate.extra}\n"
        )
    sys.stderr.write("Go to [number, empty to cancel]: ")
    sys.stderr.flush()
    answer = sys.stdin.readline().strip()
    if not answer.isdigit():
        return None
    return int(answer) - 1


def _cmd_find(args: argparse.Namespace, settings: config.TagSettings) -> int:
    active_file = _existing_file(args.file)
    controller = NavigationController(FileView(active_file), HistoryStack(), settings)
    records = controller.find_tags(args.name)
    if args.json:
        payload = [
            {
                "name": record.name,
                "file": str(record.file_path),
                "locator": record.locator_text,
                "fields": record.extension_fields,
            }
            for record in records
        ]
        sys.stdout.write(json.dumps(payload, indent=2) + "\n")
    else:
        for record in records:
            candidate = tag_candidate(record)
            sys.stdout.write(f"{record.name}\t{record.file_path}\t{candidate.locator_text}\t{candidate.extra}\n")
    return 0 if records else 1


def _cmd_complete(args: argparse.Namespace, settings: config.TagSettings) -> int:
    active_file = _existing_file(args.file)
    for name in complete_tag_names(args.prefix, tag_sources_for(active_file, settings)):
        sys.stdout.write(name + "\n")
    return 0


def _cmd_goto(args: argparse.Namespace, settings: config.TagSettings) -> int:
    active_file = _existing_file(args.file)
    view = FileView(active_file, line=args.line - 1, column=args.column - 1)
    history = HistoryStack(settings.minimum_line_distance, settings.maximum_history_size)
    controller = NavigationController(view, history, settings, select=prompt_selection)
    if not controller.goto_tag(args.name):
        raise SystemExit(f"No tag found for {args.name or 'word under caret'}.")
    line, column = view.caret()
    sys.stdout.write(f"{view.location_id}:{line + 1}:{column + 1}\n")
    return 0


def _cmd_generate(args: argparse.Namespace, settings: config.TagSettings) -> int:
    root = Path(args.root) if args.root else find_project_root(Path.cwd())
    if root is None:
        raise SystemExit("No project root found; pass one explicitly.")
    if not root.is_dir():
        raise SystemExit(f"Path not found: {root}")
    api_path = generate_project_tags(root.resolve(), settings)
    if api_path is not None:
        sys.stdout.write(f"{api_path}\n")
    return 0


def _cmd_add_tags(args: argparse.Namespace, settings: config.TagSettings) -> int:
    tag_file = Path(args.tags).expanduser().resolve()
    config.add_global_tag_file(tag_file, args.config_path)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Look up ctags definitions and jump to them.")
    parser.add_argument("--config", dest="config_path", type=Path, default=None, help="Settings file to use.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr.")
    commands = parser.add_subparsers(dest="command", required=True)

    find = commands.add_parser("find", help="List tags whose name starts with NAME.")
    find.add_argument("name")
    find.add_argument("--file", default=None, help="Active file used to locate tag files.")
    find.add_argument("--json", action="store_true", help="Print matches as JSON.")
    find.set_defaults(handler=_cmd_find)

    complete = commands.add_parser("complete", help="Print tag names completing PREFIX.")
    complete.add_argument("prefix")
    complete.add_argument("--file", default=None, help="Active file used to locate tag files.")
    complete.set_defaults(handler=_cmd_complete)

    goto = commands.add_parser("goto", help="Resolve a jump and print path:line:column.")
    goto.add_argument("name", nargs="?", default=None, help="Tag name. Defaults to the word at --line/--column.")
    goto.add_argument("--file", required=True, help="File the caret is in.")
    goto.add_argument("--line", type=_positive_int, default=1, help="1-based caret line.")
    goto.add_argument("--column", type=_positive_int, default=1, help="1-based caret column.")
    goto.set_defaults(handler=_cmd_goto)

    generate = commands.add_parser("generate", help="Generate project tags and api files.")
    generate.add_argument("root", nargs="?", default=None, help="Project root. Defaults to the enclosing repository.")
    generate.set_defaults(handler=_cmd_generate)

    add_tags = commands.add_parser("add-tags", help="Add a tags file searched for every project.")
    add_tags.add_argument("tags")
    add_tags.set_defaults(handler=_cmd_add_tags)
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Parse CLI arguments and run the selected command.

    ``argv`` is primarily for tests; when omitted ``sys.argv`` is used.
    """
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    settings = config.load_settings(args.config_path)
    status = args.handler(args, settings)
    if status:
        raise SystemExit(status)


if __name__ == "__main__":
    main()
