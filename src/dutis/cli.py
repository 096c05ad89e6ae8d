from __future__ import annotations

import dataclasses
import json
import logging
from shutil import which
from pathlib import Path

import typer

from .assigner import DefaultHandlerAssigner, lookup
from .config import DutisConfig, load_config
from .errors import DutisError, NameNotFound
from .groups import SUFFIX_HINTS, get_group, resolve_groups
from .models import ApplicationIndex
from .names import friendly_name
from .resolver.content_type import ContentTypeResolver
from .scanner.bundle_scanner import BundleScanner
from .scanner.document_types import find_declaring_apps
from .utils import normalize_suffix

app = typer.Typer(add_completion=False, no_args_is_help=True)

@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")):
    """Inspect installed applications and set default handlers for file suffixes."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

def _cfg(config: str | None) -> DutisConfig:
    try:
        cfg = load_config(config)
        resolve_groups(cfg.groups)
        return cfg
    except (OSError, ValueError) as e:
        raise typer.BadParameter(str(e), param_hint="--config")

def _suffix(suffix: str) -> str:
    try:
        return normalize_suffix(suffix)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="SUFFIX")

def _fail(err: DutisError) -> typer.Exit:
    typer.echo(f"Error: {err}", err=True)
    if isinstance(err, NameNotFound) and err.suggestions:
        typer.echo(f"Did you mean: {', '.join(err.suggestions)}?", err=True)
    return typer.Exit(code=1)

def _index(cfg: DutisConfig) -> ApplicationIndex:
    return BundleScanner.from_config(cfg).scan_many(cfg.application_dirs)

def _print_apps(apps: list[str], title: str = "Recommended applications") -> None:
    header = "=" * 10 + f" {title} " + "=" * 10
    typer.echo(header)
    if apps:
        for a in apps:
            typer.echo(a)
    else:
        typer.echo("No recommended applications")
    typer.echo("=" * len(header))

@app.command()
def init(out: str = typer.Option("config.toml", help="Write example config to this path")):
    """Write a starter config.toml."""
    outp = Path(out)
    outp.write_text("""[scan]
dirs = ["/Applications", "/System/Applications", "~/Applications"]
# 0 = one probe per bundle
workers = 0
probe_timeout = 10.0
bundles_only = true
bundle_suffix = ".app"
strip_bundle_suffix = true

[recommend]
enabled = true
app_url_prefix = "file:///Applications/"
script_timeout = 60.0

[tools]
mdls = "mdls"
duti = "duti"
swift = "swift"

[groups]
# web = [".html", ".css", ".js"]
""", encoding="utf-8")
    typer.echo(f"Wrote {outp}")

@app.command()
def apps(config: str = typer.Option(None, help="Config file (default: ~/.config/dutis/config.toml)"),
         as_json: bool = typer.Option(False, "--json", help="Print JSON")):
    """List installed applications and their type identifiers."""
    cfg = _cfg(config)
    try:
        index = _index(cfg)
    except DutisError as e:
        raise _fail(e)

    records = sorted(index.values(), key=lambda r: r.name.lower())
    if as_json:
        typer.echo(json.dumps([dataclasses.asdict(r) for r in records], indent=2))
        return
    for r in records:
        typer.echo(f"{r.name}\t{r.type_identifier}\t{r.path}")
    typer.echo(f"{len(records)} applications", err=True)

@app.command()
def recommend(suffix: str, config: str = typer.Option(None, help="Config file")):
    """Show the content type and the applications registered for SUFFIX."""
    cfg = _cfg(config)
    suffix = _suffix(suffix)
    resolver = ContentTypeResolver.from_config(cfg)
    content_type = resolver.content_type_for(suffix)
    if content_type is None:
        typer.echo(f"No content type known for {suffix}")
        return
    typer.echo(f"Content type: {content_type} ({friendly_name(content_type)})")
    apps = resolver.recommend_for_content_type(content_type)
    if not apps:
        typer.echo("No recommended applications")
        return
    for a in apps:
        typer.echo(a)

@app.command(name="set")
def set_default(name: str, suffix: str,
                config: str = typer.Option(None, help="Config file"),
                show_recommend: bool = typer.Option(None, "--recommend/--no-recommend",
                                                    help="Override recommend.enabled config")):
    """Make application NAME the default handler for SUFFIX."""
    cfg = _cfg(config)
    suffix = _suffix(suffix)
    if show_recommend is not None:
        cfg = dataclasses.replace(cfg, recommend=show_recommend)

    if cfg.recommend:
        _print_apps(ContentTypeResolver.from_config(cfg).recommend(suffix))

    try:
        index = _index(cfg)
        req = DefaultHandlerAssigner.from_config(cfg).assign_by_name(index, name, suffix)
    except DutisError as e:
        raise _fail(e)
    typer.echo(f"Set default application for {req.suffix} to {name} ({req.type_identifier})")

@app.command(name="set-group")
def set_group(name: str, group: str,
              config: str = typer.Option(None, help="Config file"),
              show_recommend: bool = typer.Option(None, "--recommend/--no-recommend",
                                                  help="Override recommend.enabled config")):
    """Make application NAME the default handler for every suffix in GROUP."""
    cfg = _cfg(config)
    if show_recommend is not None:
        cfg = dataclasses.replace(cfg, recommend=show_recommend)
    try:
        suffixes = get_group(group, resolve_groups(cfg.groups))
        if cfg.recommend:
            _print_apps(ContentTypeResolver.from_config(cfg).recommend_common(suffixes),
                        title=f"Recommended for all of {group}")
        index = _index(cfg)
        record = lookup(index, name)
        results = DefaultHandlerAssigner.from_config(cfg).assign_group(record.type_identifier, suffixes)
    except DutisError as e:
        raise _fail(e)

    failed = [r for r in results if not r.ok]
    for r in results:
        status = "ok" if r.ok else f"failed: {r.error}"
        typer.echo(f"  {r.suffix}: {status}")
    typer.echo(f"Set {record.name} for {len(results) - len(failed)}/{len(results)} suffixes in {group}")
    if failed:
        raise typer.Exit(code=1)

@app.command()
def groups(config: str = typer.Option(None, help="Config file")):
    """List suffix groups."""
    cfg = _cfg(config)
    for name, suffixes in sorted(resolve_groups(cfg.groups).items()):
        typer.echo(f"{name}: {' '.join(suffixes)}")

@app.command()
def suffixes():
    """List common suffixes."""
    for s, desc in SUFFIX_HINTS.items():
        typer.echo(f"{s}\tFor {desc}")

@app.command()
def declared(suffix: str, config: str = typer.Option(None, help="Config file")):
    """List applications whose Info.plist declares SUFFIX as a document type."""
    cfg = _cfg(config)
    suffix = _suffix(suffix)
    names = find_declaring_apps(cfg.application_dirs, suffix, cfg.bundle_suffix, cfg.strip_bundle_suffix)
    if not names:
        typer.echo(f"No applications declare {suffix}")
        return
    for n in names:
        typer.echo(n)

@app.command()
def doctor(config: str = typer.Option(None, help="Config file")):
    """Check that the external tools are available."""
    cfg = _cfg(config)
    missing_required = False
    for tool, required in ((cfg.mdls_bin, True), (cfg.duti_bin, True), (cfg.swift_bin, False)):
        path = which(tool)
        if path:
            typer.echo(f"{tool}: {path}")
            continue
        note = "required" if required else "optional, needed for recommendations"
        typer.echo(f"{tool}: missing ({note})")
        missing_required = missing_required or required
    if missing_required:
        typer.echo("Install duti with: brew install duti", err=True)
        raise typer.Exit(code=1)

if __name__ == "__main__":
    app()
