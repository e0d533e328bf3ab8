"""Tag lookup package exports.

Combines source discovery, sorted-file search and ctags generation in one
import surface.
"""

from __future__ import annotations

from .generate import generate_and_search, generate_project_tags, write_default_api
from .search import complete_tag_names, parse_locator, parse_tag_line, search_tags
from .sources import TAGS_FILENAME, resolve_tag_sources
from .types import LineNumber, Locator, SearchPattern, TagFileRecord

__all__ = [
    "LineNumber",
    "Locator",
    "SearchPattern",
    "TAGS_FILENAME",
    "TagFileRecord",
    "complete_tag_names",
    "generate_and_search",
    "generate_project_tags",
    "parse_locator",
    "parse_tag_line",
    "resolve_tag_sources",
    "search_tags",
    "write_default_api",
]
