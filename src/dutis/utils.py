from __future__ import annotations

import re
from urllib.parse import unquote

_SUFFIX_RE = re.compile(r"^\.[^\s/\\]+$")

def normalize_suffix(suffix: str) -> str:
    """Return `suffix` lower-cased with exactly one leading dot.

    Raises ValueError for empty input or suffixes containing whitespace or
    path separators.
    """
    s = suffix.strip().lower()
    if not s or s == ".":
        raise ValueError("Empty suffix")
    if not s.startswith("."):
        s = "." + s
    if not _SUFFIX_RE.match(s):
        raise ValueError(f"Invalid suffix: {suffix!r}")
    return s

def display_name(entry_name: str, bundle_suffix: str, strip: bool = True) -> str:
    if strip and bundle_suffix and entry_name.endswith(bundle_suffix) and entry_name != bundle_suffix:
        return entry_name[: -len(bundle_suffix)]
    return entry_name

def short_app_path(url: str, prefix: str) -> str:
    """Turn `file:///Applications/Foo%20Bar.app/` into `Foo Bar.app`."""
    s = url.strip()
    if prefix and s.startswith(prefix):
        s = s[len(prefix):]
    return unquote(s).rstrip("/")
