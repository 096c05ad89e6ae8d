from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from ..config import DutisConfig
from ..errors import QueryFailed, ScanError, ToolMissing
from ..models import ApplicationIndex, ApplicationRecord, ScanStats
from ..probe.metadata import MetadataProbe
from ..utils import display_name

logger = logging.getLogger(__name__)

@dataclass
class BundleScanner:
    """Build an application index by probing every bundle in a directory.

    One mdls call per bundle runs on a thread pool; results are gathered on
    the calling thread, which is the only writer of the index.
    """

    probe: MetadataProbe
    max_workers: int | None = None
    bundles_only: bool = True
    bundle_suffix: str = ".app"
    strip_bundle_suffix: bool = True

    last_stats: ScanStats = field(default_factory=ScanStats, init=False)

    @classmethod
    def from_config(cls, cfg: DutisConfig, probe: MetadataProbe | None = None) -> "BundleScanner":
        return cls(
            probe=probe or MetadataProbe(mdls_bin=cfg.mdls_bin, timeout=cfg.probe_timeout),
            max_workers=cfg.scan_workers,
            bundles_only=cfg.bundles_only,
            bundle_suffix=cfg.bundle_suffix,
            strip_bundle_suffix=cfg.strip_bundle_suffix,
        )

    def is_bundle(self, entry: Path) -> bool:
        if not self.bundles_only:
            return True
        if entry.name.startswith("."):
            return False
        return entry.suffix == self.bundle_suffix

    def list_entries(self, directory: str | Path) -> list[Path]:
        """List the directory non-recursively. Raises ScanError if it cannot be read."""
        root = Path(directory)
        try:
            return sorted(root.iterdir())
        except OSError as e:
            raise ScanError(root, str(e)) from e

    def scan(self, directory: str | Path) -> ApplicationIndex:
        """Probe every bundle under `directory` and return name -> record.

        Waits for every dispatched probe before returning. Entries whose
        identifier is absent or whose probe fails are left out; a missing
        mdls binary is raised once all probes have settled.
        """
        start = time.time()
        entries = self.list_entries(directory)
        candidates = [p for p in entries if self.is_bundle(p)]
        stats = ScanStats(
            entries_seen=len(entries),
            entries_skipped=len(entries) - len(candidates),
        )
        logger.info(f"Found {len(candidates)} bundles in {directory}")

        index: ApplicationIndex = {}
        if not candidates:
            stats.elapsed_seconds = time.time() - start
            self.last_stats = stats
            return index

        tool_missing: ToolMissing | None = None
        workers = self.max_workers or len(candidates)

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="dutis-probe") as executor:
            futures = {
                executor.submit(self._probe_entry, p): p
                for p in candidates
            }
            stats.probes_dispatched = len(futures)

            for future in as_completed(futures):
                entry = futures[future]
                try:
                    record = future.result()
                except ToolMissing as e:
                    if tool_missing is None:
                        tool_missing = e
                    stats.probes_failed += 1
                    continue
                except QueryFailed as e:
                    logger.warning(f"Skipping {entry.name}: {e}")
                    stats.probes_failed += 1
                    continue

                if record is None:
                    logger.debug(f"No bundle identifier for {entry.name}")
                    stats.attributes_absent += 1
                    continue

                index[record.name] = record

        stats.records_indexed = len(index)
        stats.elapsed_seconds = time.time() - start
        self.last_stats = stats

        if tool_missing is not None:
            raise tool_missing

        logger.info(
            f"Indexed {stats.records_indexed} applications from {directory} "
            f"({stats.attributes_absent} without identifier, {stats.probes_failed} failed) "
            f"in {stats.elapsed_seconds:.2f}s"
        )
        return index

    def scan_many(self, directories: Iterable[str | Path]) -> ApplicationIndex:
        """Scan several directories in order; later directories win on name collisions.

        Directories that do not exist are skipped.
        """
        index: ApplicationIndex = {}
        total = ScanStats()
        for d in directories:
            if not Path(d).is_dir():
                logger.debug(f"Skipping missing application directory {d}")
                continue
            index.update(self.scan(d))
            total = self._merge_stats(total, self.last_stats)
        total.records_indexed = len(index)
        self.last_stats = total
        return index

    def _probe_entry(self, entry: Path) -> ApplicationRecord | None:
        uti = self.probe.bundle_identifier(entry)
        if not uti:
            return None
        return ApplicationRecord(
            name=display_name(entry.name, self.bundle_suffix, self.strip_bundle_suffix),
            path=str(entry),
            type_identifier=uti,
        )

    def _merge_stats(self, a: ScanStats, b: ScanStats) -> ScanStats:
        return ScanStats(
            entries_seen=a.entries_seen + b.entries_seen,
            entries_skipped=a.entries_skipped + b.entries_skipped,
            probes_dispatched=a.probes_dispatched + b.probes_dispatched,
            records_indexed=a.records_indexed + b.records_indexed,
            attributes_absent=a.attributes_absent + b.attributes_absent,
            probes_failed=a.probes_failed + b.probes_failed,
            elapsed_seconds=a.elapsed_seconds + b.elapsed_seconds,
        )
