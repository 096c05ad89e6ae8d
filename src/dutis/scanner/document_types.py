"""Document types that bundles declare in their Info.plist."""
from __future__ import annotations

import logging
import plistlib
from pathlib import Path
from typing import Iterable

from ..utils import display_name, normalize_suffix

logger = logging.getLogger(__name__)


def read_declared_extensions(bundle: Path) -> set[str]:
    """Extensions listed under CFBundleDocumentTypes, lower-cased and without a dot.

    A bundle without a readable Info.plist declares nothing.
    """
    plist_path = Path(bundle) / "Contents" / "Info.plist"
    try:
        with open(plist_path, "rb") as f:
            info = plistlib.load(f)
    except (OSError, plistlib.InvalidFileException) as e:
        logger.debug(f"No readable Info.plist in {bundle}: {e}")
        return set()

    extensions: set[str] = set()
    doc_types = info.get("CFBundleDocumentTypes") if isinstance(info, dict) else None
    if not isinstance(doc_types, list):
        return extensions
    for doc_type in doc_types:
        if not isinstance(doc_type, dict):
            continue
        exts = doc_type.get("CFBundleTypeExtensions", [])
        if not isinstance(exts, list):
            continue
        for ext in exts:
            if isinstance(ext, str) and ext.strip():
                extensions.add(ext.strip().lstrip(".").lower())
    return extensions


def find_declaring_apps(
    dirs: Iterable[Path],
    suffix: str,
    bundle_suffix: str = ".app",
    strip: bool = True,
) -> list[str]:
    """Sorted names of the bundles in `dirs` that declare `suffix`."""
    wanted = normalize_suffix(suffix)[1:]
    found: set[str] = set()
    for d in dirs:
        d = Path(d)
        if not d.is_dir():
            logger.debug(f"Skipping missing directory {d}")
            continue
        try:
            entries = sorted(d.iterdir())
        except OSError as e:
            logger.warning(f"Cannot list {d}: {e}")
            continue
        for entry in entries:
            if not entry.name.endswith(bundle_suffix):
                continue
            if wanted in read_declared_extensions(entry):
                found.add(display_name(entry.name, bundle_suffix, strip))
    return sorted(found)
