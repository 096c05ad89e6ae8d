from __future__ import annotations

from dataclasses import dataclass

@dataclass(frozen=True)
class ApplicationRecord:
    """One discovered application bundle.

    `name` is the display name users type, `path` the on-disk bundle path and
    `type_identifier` the bundle identifier reported by mdls (never empty).
    """
    name: str
    path: str
    type_identifier: str

# display name -> record; no ordering guarantee across runs
ApplicationIndex = dict[str, ApplicationRecord]

# short application paths in registry order
RecommendationList = list[str]

@dataclass(frozen=True)
class AssignmentRequest:
    type_identifier: str
    suffix: str

@dataclass(frozen=True)
class AssignmentResult:
    suffix: str
    ok: bool
    error: str | None = None

@dataclass
class ScanStats:
    """Statistics from a bundle scan."""

    entries_seen: int = 0
    entries_skipped: int = 0
    probes_dispatched: int = 0
    records_indexed: int = 0
    attributes_absent: int = 0
    probes_failed: int = 0
    elapsed_seconds: float = 0.0
