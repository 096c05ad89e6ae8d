from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
import os
import tomllib

ENV_CONFIG = "DUTIS_CONFIG"

def _expand(p: str) -> str:
    return os.path.expandvars(os.path.expanduser(p))

def default_config_path() -> Path:
    env = os.environ.get(ENV_CONFIG)
    if env:
        return Path(_expand(env))
    return Path.home() / ".config" / "dutis" / "config.toml"

@dataclass(frozen=True)
class DutisConfig:
    """Runtime configuration for scanning, recommending and assigning.

    Every field has a default, so an empty config file (or none at all) gives
    the stock behaviour: scan /Applications with one probe per bundle.
    """

    application_dirs: tuple[Path, ...] = (Path("/Applications"),)

    # Scan
    scan_workers: int | None = None  # None = one worker per entry
    probe_timeout: float | None = 10.0
    bundles_only: bool = True
    bundle_suffix: str = ".app"
    strip_bundle_suffix: bool = True

    # Recommendations
    recommend: bool = True
    app_url_prefix: str = "file:///Applications/"
    script_timeout: float | None = 60.0

    # External tools
    mdls_bin: str = "mdls"
    duti_bin: str = "duti"
    swift_bin: str = "swift"

    # Extra or overriding suffix groups, merged over the built-in ones
    groups: dict[str, list[str]] = field(default_factory=dict)

    def __post_init__(self):
        """Normalise directory entries to expanded Path objects."""
        dirs = self.application_dirs
        if isinstance(dirs, (str, Path)):
            dirs = (dirs,)
        object.__setattr__(
            self,
            "application_dirs",
            tuple(Path(_expand(str(d))) for d in dirs),
        )

    @staticmethod
    def from_toml(path: str | Path) -> "DutisConfig":
        data = tomllib.loads(Path(path).read_text(encoding="utf-8"))
        scan = data.get("scan", {})
        rec = data.get("recommend", {})
        tools = data.get("tools", {})
        groups = data.get("groups", {})

        dirs = scan.get("dirs", ["/Applications"])
        if isinstance(dirs, str):
            dirs = [dirs]
        if not isinstance(dirs, list) or not dirs:
            raise ValueError("Invalid scan.dirs: must be a non-empty list of paths.")

        workers = int(scan.get("workers", 0))
        if workers < 0 or workers > 1024:
            raise ValueError(f"Invalid scan.workers: {workers}. Must be between 0 and 1024 (0 = one per entry).")

        probe_timeout = _timeout(scan.get("probe_timeout", 10.0), "scan.probe_timeout")
        script_timeout = _timeout(rec.get("script_timeout", 60.0), "recommend.script_timeout")

        bundle_suffix = str(scan.get("bundle_suffix", ".app"))
        if not bundle_suffix.startswith("."):
            raise ValueError(f"Invalid scan.bundle_suffix: {bundle_suffix!r}. Must start with '.'.")

        if not isinstance(groups, dict):
            raise ValueError("Invalid [groups]: must be a table of name = [suffixes].")
        for name, suffixes in groups.items():
            if not isinstance(suffixes, list) or not all(isinstance(s, str) for s in suffixes):
                raise ValueError(f"Invalid group {name!r}: must be a list of suffix strings.")

        return DutisConfig(
            application_dirs=tuple(Path(_expand(str(d))) for d in dirs),
            scan_workers=workers or None,
            probe_timeout=probe_timeout,
            bundles_only=bool(scan.get("bundles_only", True)),
            bundle_suffix=bundle_suffix,
            strip_bundle_suffix=bool(scan.get("strip_bundle_suffix", True)),
            recommend=bool(rec.get("enabled", True)),
            app_url_prefix=str(rec.get("app_url_prefix", "file:///Applications/")),
            script_timeout=script_timeout,
            mdls_bin=str(tools.get("mdls", "mdls")),
            duti_bin=str(tools.get("duti", "duti")),
            swift_bin=str(tools.get("swift", "swift")),
            groups={str(k): list(v) for k, v in groups.items()},
        )

def _timeout(value: object, key: str) -> float | None:
    t = float(value)
    if t < 0 or t > 3600:
        raise ValueError(f"Invalid {key}: {t}. Must be between 0 and 3600 (0 = no timeout).")
    return t or None

def load_config(path: str | Path | None = None) -> DutisConfig:
    """Load config from `path`, or from the default location if it exists.

    An explicitly given path must exist; a missing default file yields the
    built-in defaults.
    """
    if path is not None:
        p = Path(_expand(str(path)))
        if not p.exists():
            raise FileNotFoundError(f"Config file not found: {p}")
        return DutisConfig.from_toml(p)
    p = default_config_path()
    if p.exists():
        return DutisConfig.from_toml(p)
    return DutisConfig()
