"""Suffix groups ("presets") and the suffix hints shown by `dutis suffixes`."""
from __future__ import annotations

from typing import Mapping

from .errors import UnknownGroup
from .utils import normalize_suffix

DEFAULT_GROUPS: dict[str, tuple[str, ...]] = {
    "code": (
        ".py", ".go", ".js", ".ts", ".jsx", ".tsx", ".c", ".cpp", ".h", ".hpp",
        ".java", ".rs", ".swift", ".kt", ".dart", ".rb", ".php", ".sh", ".zsh",
        ".bash", ".fish", ".sql", ".vue", ".css", ".scss", ".sass", ".less",
    ),
    "text": (
        ".txt", ".md", ".log", ".csv", ".tsv", ".json", ".xml", ".yml", ".yaml",
        ".toml", ".ini", ".conf",
    ),
    "image": (".png", ".jpg", ".jpeg", ".gif", ".bmp", ".tiff", ".webp", ".heic", ".svg"),
    "video": (".mp4", ".mov", ".mkv", ".avi", ".webm", ".m4v"),
    "audio": (".mp3", ".wav", ".flac", ".aac", ".m4a", ".ogg"),
}

SUFFIX_HINTS: dict[str, str] = {
    ".txt": "text files",
    ".md": "markdown files",
    ".go": "golang files",
    ".py": "python files",
    ".js": "javascript files",
    ".ts": "typescript files",
    ".c": "c files",
    ".cpp": "c++ files",
    ".h": "header files",
    ".hpp": "header files",
    ".java": "java files",
    ".sh": "shell files",
    ".zsh": "zsh files",
    ".bash": "bash files",
    ".fish": "fish files",
    ".json": "json files",
    ".xml": "xml files",
    ".html": "html files",
    ".css": "css files",
    ".scss": "scss files",
    ".sass": "sass files",
    ".less": "less files",
    ".vue": "vue files",
    ".tsx": "typescript files",
    ".jsx": "javascript files",
    ".php": "php files",
    ".rb": "ruby files",
    ".rs": "rust files",
    ".swift": "swift files",
    ".kt": "kotlin files",
    ".dart": "dart files",
    ".sql": "sql files",
    ".yml": "yaml files",
    ".yaml": "yaml files",
    ".toml": "toml files",
    ".ini": "ini files",
    ".conf": "conf files",
    ".log": "log files",
    ".csv": "csv files",
    ".tsv": "tsv files",
}


def resolve_groups(overrides: Mapping[str, list[str]] | None = None) -> dict[str, tuple[str, ...]]:
    """Merge configured groups over the built-in ones, normalising suffixes.

    A configured group replaces a built-in group of the same name. Duplicate
    suffixes within a group collapse to their first occurrence.
    """
    merged: dict[str, tuple[str, ...]] = dict(DEFAULT_GROUPS)
    for name, suffixes in (overrides or {}).items():
        merged[name.lower()] = tuple(suffixes)
    return {
        name: tuple(dict.fromkeys(normalize_suffix(s) for s in suffixes))
        for name, suffixes in merged.items()
    }


def get_group(name: str, groups: Mapping[str, tuple[str, ...]]) -> tuple[str, ...]:
    key = name.strip().lower()
    if key not in groups:
        raise UnknownGroup(name, sorted(groups))
    return groups[key]
