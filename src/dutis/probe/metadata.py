from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from ..errors import QueryFailed
from ..tools import run_tool

logger = logging.getLogger(__name__)

BUNDLE_IDENTIFIER_ATTR = "kMDItemCFBundleIdentifier"
CONTENT_TYPE_ATTR = "kMDItemContentType"


@lru_cache(maxsize=32)
def attribute_pattern(attribute_name: str) -> re.Pattern[str]:
    # mdls prints `name = "value"` or `name = (null)`
    return re.compile(re.escape(attribute_name) + r'\s*=\s*"(.+)"', re.IGNORECASE)


def extract_attribute(output: str, attribute_name: str) -> str | None:
    m = attribute_pattern(attribute_name).search(output)
    if m is None:
        return None
    return m.group(1)


@dataclass
class MetadataProbe:
    """Read one Spotlight metadata attribute of a file via `mdls`.

    Safe to share across threads: each call spawns its own process and keeps
    no state.
    """

    mdls_bin: str = "mdls"
    timeout: float | None = 10.0

    def probe(self, target_path: str | Path, attribute_name: str) -> str | None:
        """Return the attribute value, or None when the file has no such attribute.

        Raises ToolMissing if mdls cannot be started and QueryFailed if it
        exits non-zero, times out, or prints undecodable output.
        """
        out = run_tool(
            [self.mdls_bin, "-name", attribute_name, str(target_path)],
            timeout=self.timeout,
        )
        if not out.ok:
            raise QueryFailed(self.mdls_bin, out.returncode, out.stderr.strip())
        value = extract_attribute(out.stdout, attribute_name)
        if value is None:
            logger.debug(f"{attribute_name} absent for {target_path}")
        return value

    def bundle_identifier(self, bundle_path: str | Path) -> str | None:
        return self.probe(bundle_path, BUNDLE_IDENTIFIER_ATTR)

    def content_type(self, file_path: str | Path) -> str | None:
        return self.probe(file_path, CONTENT_TYPE_ATTR)
