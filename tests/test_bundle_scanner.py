"""Tests for the parallel bundle scan."""
from __future__ import annotations

import threading
import time
from pathlib import Path

import pytest

from dutis.config import DutisConfig
from dutis.errors import DutisError, QueryFailed, ScanError, ToolMissing
from dutis.models import ApplicationRecord
from dutis.probe.metadata import MetadataProbe
from dutis.scanner.bundle_scanner import BundleScanner


class FakeProbe:
    """Stands in for MetadataProbe; answers by bundle file name."""

    def __init__(self, answers: dict[str, object] | None = None, delay: float = 0.0,
                 barrier: threading.Barrier | None = None):
        self.answers = answers or {}
        self.delay = delay
        self.barrier = barrier
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def bundle_identifier(self, path: Path) -> str | None:
        with self._lock:
            self.calls.append(path.name)
        if self.barrier is not None:
            self.barrier.wait(timeout=5)
        if self.delay:
            time.sleep(self.delay)
        answer = self.answers.get(path.name, f"com.example.{path.stem.lower()}")
        if isinstance(answer, Exception):
            raise answer
        return answer


def _make_apps(root: Path, *names: str) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    for n in names:
        (root / n).mkdir()
    return root


class TestScan:
    """BundleScanner.scan fan-out/fan-in behaviour."""

    def test_indexes_every_bundle(self, tmp_path: Path):
        apps = _make_apps(tmp_path / "Applications", "Safari.app", "Notes.app", "Xcode.app")
        probe = FakeProbe({"Safari.app": "com.apple.Safari"})
        index = BundleScanner(probe=probe).scan(apps)

        assert set(index) == {"Safari", "Notes", "Xcode"}
        assert index["Safari"] == ApplicationRecord(
            name="Safari",
            path=str(apps / "Safari.app"),
            type_identifier="com.apple.Safari",
        )

    def test_dispatches_one_probe_per_entry(self, tmp_path: Path):
        names = [f"App{i}.app" for i in range(12)]
        apps = _make_apps(tmp_path / "Applications", *names)
        probe = FakeProbe()
        scanner = BundleScanner(probe=probe)

        index = scanner.scan(apps)

        assert sorted(probe.calls) == sorted(names)
        assert len(index) == 12
        assert scanner.last_stats.probes_dispatched == 12

    def test_probes_run_concurrently(self, tmp_path: Path):
        """Every probe must be in flight at once when no worker cap is set."""
        names = [f"App{i}.app" for i in range(8)]
        apps = _make_apps(tmp_path / "Applications", *names)
        probe = FakeProbe(barrier=threading.Barrier(len(names)))

        index = BundleScanner(probe=probe).scan(apps)

        assert len(index) == 8

    def test_waits_for_slow_probes(self, tmp_path: Path):
        apps = _make_apps(tmp_path / "Applications", "Fast.app", "Slow.app")

        class SlowProbe(FakeProbe):
            def bundle_identifier(self, path: Path) -> str | None:
                if path.name == "Slow.app":
                    time.sleep(0.3)
                return super().bundle_identifier(path)

        index = BundleScanner(probe=SlowProbe()).scan(apps)
        assert set(index) == {"Fast", "Slow"}

    def test_bounded_worker_pool(self, tmp_path: Path):
        names = [f"App{i}.app" for i in range(10)]
        apps = _make_apps(tmp_path / "Applications", *names)
        active = 0
        peak = 0
        lock = threading.Lock()

        class CountingProbe(FakeProbe):
            def bundle_identifier(self, path: Path) -> str | None:
                nonlocal active, peak
                with lock:
                    active += 1
                    peak = max(peak, active)
                time.sleep(0.02)
                with lock:
                    active -= 1
                return super().bundle_identifier(path)

        index = BundleScanner(probe=CountingProbe(), max_workers=2).scan(apps)

        assert len(index) == 10
        assert peak <= 2

    def test_absent_identifier_is_dropped(self, tmp_path: Path):
        apps = _make_apps(tmp_path / "Applications", "Good.app", "Broken.app", "Empty.app")
        probe = FakeProbe({"Broken.app": None, "Empty.app": ""})
        scanner = BundleScanner(probe=probe)

        index = scanner.scan(apps)

        assert set(index) == {"Good"}
        assert all(r.type_identifier for r in index.values())
        assert scanner.last_stats.attributes_absent == 2

    def test_failed_probe_skips_only_that_entry(self, tmp_path: Path):
        apps = _make_apps(tmp_path / "Applications", "Good.app", "Bad.app")
        probe = FakeProbe({"Bad.app": QueryFailed("mdls", 1, "boom")})
        scanner = BundleScanner(probe=probe)

        index = scanner.scan(apps)

        assert set(index) == {"Good"}
        assert scanner.last_stats.probes_failed == 1

    def test_missing_tool_raised_after_all_probes_settle(self, tmp_path: Path):
        apps = _make_apps(tmp_path / "Applications", "A.app", "B.app", "C.app")
        probe = FakeProbe({n: ToolMissing("mdls") for n in ("A.app", "B.app", "C.app")})

        with pytest.raises(ToolMissing):
            BundleScanner(probe=probe).scan(apps)
        assert len(probe.calls) == 3

    def test_empty_directory_dispatches_nothing(self, tmp_path: Path):
        apps = _make_apps(tmp_path / "Applications")
        probe = FakeProbe()
        scanner = BundleScanner(probe=probe)

        assert scanner.scan(apps) == {}
        assert probe.calls == []
        assert scanner.last_stats.probes_dispatched == 0

    def test_unreadable_directory_raises_scan_error(self, tmp_path: Path):
        with pytest.raises(ScanError):
            BundleScanner(probe=FakeProbe()).scan(tmp_path / "missing")

    def test_skips_non_bundle_entries(self, tmp_path: Path):
        apps = _make_apps(tmp_path / "Applications", "Safari.app", "Utilities")
        (apps / ".DS_Store").write_text("")
        (apps / ".localized").mkdir()
        probe = FakeProbe()
        scanner = BundleScanner(probe=probe)

        index = scanner.scan(apps)

        assert set(index) == {"Safari"}
        assert probe.calls == ["Safari.app"]
        assert scanner.last_stats.entries_seen == 4
        assert scanner.last_stats.entries_skipped == 3

    def test_bundles_only_off_probes_every_entry(self, tmp_path: Path):
        apps = _make_apps(tmp_path / "Applications", "Safari.app", "Utilities")
        probe = FakeProbe({"Utilities": None})

        index = BundleScanner(probe=probe, bundles_only=False).scan(apps)

        assert sorted(probe.calls) == ["Safari.app", "Utilities"]
        assert set(index) == {"Safari"}

    def test_keep_bundle_suffix_in_names(self, tmp_path: Path):
        apps = _make_apps(tmp_path / "Applications", "Safari.app")
        index = BundleScanner(probe=FakeProbe(), strip_bundle_suffix=False).scan(apps)
        assert set(index) == {"Safari.app"}

    def test_result_is_order_independent(self, tmp_path: Path):
        names = [f"App{i}.app" for i in range(6)]
        apps = _make_apps(tmp_path / "Applications", *names)

        class JitterProbe(FakeProbe):
            def bundle_identifier(self, path: Path) -> str | None:
                time.sleep((hash(path.name) % 5) / 100)
                return super().bundle_identifier(path)

        first = BundleScanner(probe=JitterProbe()).scan(apps)
        second = BundleScanner(probe=JitterProbe(), max_workers=1).scan(apps)
        assert first == second

    def test_unrunnable_mdls_fails_the_scan(self, tmp_path: Path):
        """A real MetadataProbe pointed at a file that cannot be executed."""
        apps = _make_apps(tmp_path / "Applications", "Safari.app", "Notes.app")
        bogus = tmp_path / "mdls"
        bogus.write_bytes(b"\x00\x01\x02\x03 not an executable\n")
        bogus.chmod(0o755)
        scanner = BundleScanner(probe=MetadataProbe(mdls_bin=str(bogus), timeout=5))

        with pytest.raises(DutisError):
            scanner.scan(apps)
        assert scanner.last_stats.probes_failed == 2

    def test_unexpected_error_propagates_after_all_entries_ran(self, tmp_path: Path):
        apps = _make_apps(tmp_path / "Applications", "A.app", "B.app", "C.app")
        probe = FakeProbe({"B.app": RuntimeError("unexpected")}, delay=0.05)

        with pytest.raises(RuntimeError, match="unexpected"):
            BundleScanner(probe=probe).scan(apps)
        assert sorted(probe.calls) == ["A.app", "B.app", "C.app"]

    def test_single_worker_keeps_slow_entry_and_drops_absent(self, tmp_path: Path):
        apps = _make_apps(tmp_path / "Applications", "Absent.app", "Slow.app")

        class SlowProbe(FakeProbe):
            def bundle_identifier(self, path: Path) -> str | None:
                if path.name == "Slow.app":
                    time.sleep(0.2)
                return super().bundle_identifier(path)

        scanner = BundleScanner(probe=SlowProbe({"Absent.app": None}), max_workers=1)
        index = scanner.scan(apps)

        assert set(index) == {"Slow"}
        assert index["Slow"].type_identifier == "com.example.slow"
        assert scanner.last_stats.attributes_absent == 1
        assert scanner.last_stats.probes_dispatched == 2


class TestScanMany:
    """Merging several application directories."""

    def test_later_directory_wins_on_collision(self, tmp_path: Path):
        system = _make_apps(tmp_path / "System", "Notes.app")
        user = _make_apps(tmp_path / "User", "Notes.app", "Extra.app")

        class DirProbe(FakeProbe):
            def bundle_identifier(self, path: Path) -> str | None:
                return f"{path.parent.name.lower()}.{path.stem.lower()}"

        scanner = BundleScanner(probe=DirProbe())
        index = scanner.scan_many([system, user])

        assert index["Notes"].type_identifier == "user.notes"
        assert set(index) == {"Notes", "Extra"}
        assert scanner.last_stats.probes_dispatched == 3

    def test_missing_directories_are_skipped(self, tmp_path: Path):
        apps = _make_apps(tmp_path / "Applications", "Safari.app")
        index = BundleScanner(probe=FakeProbe()).scan_many([tmp_path / "nope", apps])
        assert set(index) == {"Safari"}


class TestFromConfig:
    def test_uses_config_values(self):
        cfg = DutisConfig(scan_workers=4, bundle_suffix=".bundle", strip_bundle_suffix=False,
                          mdls_bin="/opt/mdls", probe_timeout=2.0)
        scanner = BundleScanner.from_config(cfg)
        assert scanner.max_workers == 4
        assert scanner.bundle_suffix == ".bundle"
        assert scanner.strip_bundle_suffix is False
        assert scanner.probe.mdls_bin == "/opt/mdls"
        assert scanner.probe.timeout == 2.0
