"""CLI interface for devjunk."""

from __future__ import annotations

import json
import logging
import sys
import threading

import click

from devjunk import __version__
from devjunk.core.engine import DevJunkEngine
from devjunk.core.errors import DevJunkError, ScanCancelledError
from devjunk.kinds import default_catalog
from devjunk.models.clean_result import CleanResult
from devjunk.models.scan_options import ScanOptions
from devjunk.models.scan_result import ScanItem, ScanProgress, ScanResult

log = logging.getLogger(__name__)

_PATH_WIDTH = 60
_SORT_CHOICES = ("size", "path", "none")


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _build_engine(kinds: tuple[str, ...] = ()) -> DevJunkEngine:
    catalog = default_catalog()
    if kinds:
        try:
            catalog = catalog.select(kinds)
        except DevJunkError as e:
            raise click.BadParameter(str(e), param_hint="--kind") from e
    return DevJunkEngine(catalog)


def _run_scan(engine: DevJunkEngine, paths: tuple[str, ...], options: ScanOptions, quiet: bool) -> ScanResult:
    """Run a scan with live progress on stderr and Ctrl-C cancellation."""
    show_progress = not quiet and sys.stderr.isatty()
    cancel = threading.Event()

    def on_progress(progress: ScanProgress) -> None:
        click.echo(
            f"\r  Scanning... {progress.dirs_scanned:,} directories, {progress.items_found:,} found",
            err=True,
            nl=False,
        )

    try:
        result = engine.scan(
            paths or (".",),
            options,
            on_progress=on_progress if show_progress else None,
            cancel=cancel,
        )
    except KeyboardInterrupt:
        cancel.set()
        raise click.Abort()
    except ScanCancelledError:
        raise click.Abort()
    except DevJunkError as e:
        raise click.ClickException(str(e)) from e
    finally:
        if show_progress:
            click.echo("\r\033[K", err=True, nl=False)

    for invalid in result.invalid_roots:
        click.echo(f"  {click.style('✗', fg='red')} {invalid.error}: {invalid.path}", err=True)
    if result.skipped and not quiet:
        click.echo(
            click.style(f"  {len(result.skipped)} unreadable directories skipped (use -v for details)", fg="yellow"),
            err=True,
        )
        for skipped in result.skipped:
            log.info("Skipped %s: %s", skipped.path, skipped.error)
    return result


def _truncate(text: str, width: int) -> str:
    if len(text) <= width - 2:
        return text
    return "..." + text[-(width - 5):]


def _print_items(result: ScanResult) -> None:
    if not result.items:
        click.echo("No junk directories found.")
        return

    click.echo()
    click.echo(f"{'Path':<{_PATH_WIDTH}} {'Type':<15} {'Size':>12} {'Files':>10}")
    click.echo("-" * 100)
    for item in result.items:
        click.echo(
            f"{_truncate(str(item.path), _PATH_WIDTH):<{_PATH_WIDTH}} {item.kind.name:<15} "
            f"{item.size_display:>12} {item.file_count:>10,}"
        )
    click.echo("-" * 100)
    click.echo(
        f"Total: {result.item_count} directories, "
        f"{click.style(result.total_size_display, fg='green', bold=True)}, "
        f"{result.total_file_count:,} files"
    )
    click.echo()


def _sort(result: ScanResult, order: str) -> ScanResult:
    match order:
        case "size":
            return result.sorted_by_size()
        case "path":
            return result.sorted_by_path()
        case _:
            return result


@click.group()
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug)")
@click.version_option(__version__, prog_name="devjunk")
def main(verbose: int) -> None:
    """devjunk — find and remove development build and cache directories."""
    _setup_logging(verbose)


# ── scan ─────────────────────────────────────────────────────────────────

@main.command()
@click.argument("paths", nargs=-1, type=click.Path())
@click.option("--max-depth", "-d", type=click.IntRange(min=0), default=None, help="Maximum depth to scan")
@click.option("--include-hidden", is_flag=True, help="Descend into hidden directories")
@click.option(
    "--exclude", "-e", "excludes", multiple=True, type=click.Path(),
    help="Skip this path and everything below it (repeatable)",
)
@click.option("--sort", "order", type=click.Choice(_SORT_CHOICES), default="size", show_default=True)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def scan(
    paths: tuple[str, ...],
    max_depth: int | None,
    include_hidden: bool,
    excludes: tuple[str, ...],
    order: str,
    as_json: bool,
) -> None:
    """Scan directories for development junk (preview only, never deletes)."""
    engine = _build_engine()
    options = ScanOptions(max_depth=max_depth, include_hidden=include_hidden, exclude_paths=excludes)
    result = _sort(_run_scan(engine, paths, options, quiet=as_json), order)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return
    _print_items(result)


# ── clean ────────────────────────────────────────────────────────────────

@main.command()
@click.argument("paths", nargs=-1, type=click.Path())
@click.option("--dry-run", is_flag=True, help="Show what would be deleted without doing it")
@click.option("--kind", "-k", "kinds", multiple=True, help="Only clean kinds whose id contains this (repeatable)")
@click.option("--max-depth", "-d", type=click.IntRange(min=0), default=None, help="Maximum depth to scan")
@click.option("--include-hidden", is_flag=True, help="Descend into hidden directories")
@click.option(
    "--exclude", "-e", "excludes", multiple=True, type=click.Path(),
    help="Skip this path and everything below it (repeatable)",
)
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def clean(
    paths: tuple[str, ...],
    dry_run: bool,
    kinds: tuple[str, ...],
    max_depth: int | None,
    include_hidden: bool,
    excludes: tuple[str, ...],
    yes: bool,
    as_json: bool,
) -> None:
    """Scan and delete development junk directories."""
    engine = _build_engine(kinds)
    options = ScanOptions(max_depth=max_depth, include_hidden=include_hidden, exclude_paths=excludes)
    result = _run_scan(engine, paths, options, quiet=as_json).sorted_by_size()

    if not result.items:
        if as_json:
            click.echo(json.dumps(CleanResult(was_dry_run=dry_run).to_dict(), indent=2))
        else:
            click.echo("No junk directories found.")
        return

    if not as_json:
        _print_items(result)

    selected = list(result.items)
    if not yes and not dry_run and not as_json:
        click.echo(
            f"⚠️  This will permanently delete {result.item_count} directories "
            f"({result.total_size_display})."
        )
        choice = click.prompt("Clean all? [y/N/select]", default="n", show_default=False)
        match choice.lower():
            case "y" | "yes":
                pass
            case "select":
                selected = _interactive_select(selected)
                if not selected:
                    click.echo("Nothing selected.")
                    return
            case _:
                click.echo("Aborted.")
                return

    cancel = threading.Event()
    try:
        clean_result = engine.clean([item.path for item in selected], dry_run, cancel=cancel)
    except KeyboardInterrupt:
        cancel.set()
        raise click.Abort()

    if as_json:
        click.echo(json.dumps(clean_result.to_dict(), indent=2))
    else:
        _print_clean_result(clean_result)

    if not clean_result.is_success:
        sys.exit(1)


def _interactive_select(items: list[ScanItem]) -> list[ScanItem]:
    """Let the user pick which directories to delete."""
    click.echo("\nSelect directories to delete (enter numbers, comma-separated):\n")
    for i, item in enumerate(items, 1):
        click.echo(f"  [{i}] {_truncate(str(item.path), _PATH_WIDTH):{_PATH_WIDTH}s} — {item.size_display}")
    click.echo()
    raw = click.prompt("Selection", default="")
    if not raw.strip():
        return []
    selected: list[ScanItem] = []
    for part in raw.split(","):
        part = part.strip()
        if part.isdigit():
            idx = int(part) - 1
            if 0 <= idx < len(items) and items[idx] not in selected:
                selected.append(items[idx])
    return selected


def _print_clean_result(result: CleanResult) -> None:
    click.echo()
    if result.was_dry_run:
        click.echo(f"{click.style('🔍', bold=True)} DRY RUN — no files were deleted\n")

    if result.deleted:
        action = "Would delete" if result.was_dry_run else "Deleted"
        click.echo(
            f"  {click.style('✓', fg='green')} {action}: {result.deleted_count} directories "
            f"({click.style(result.bytes_freed_display, fg='green', bold=True)})"
        )

    if result.failed:
        click.echo(f"  {click.style('✗', fg='red')} Failed to delete {result.failed_count} directories:")
        for failure in result.failed:
            click.echo(f"      {failure.path} — {failure.error}")
    click.echo()


# ── types ────────────────────────────────────────────────────────────────

@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def types(as_json: bool) -> None:
    """List supported junk directory types."""
    kinds = default_catalog().list_kinds()

    if as_json:
        click.echo(json.dumps([k.to_dict() for k in kinds], indent=2))
        return

    grouped: dict[str, list] = {}
    for kind in kinds:
        key = kind.group.name if kind.group else "Other"
        grouped.setdefault(key, []).append(kind)

    for group_name, members in grouped.items():
        click.echo(f"\n  {click.style(group_name, fg='blue', bold=True)}")
        for kind in members:
            patterns = ", ".join(kind.patterns)
            click.echo(f"    {click.style(kind.id, fg='cyan', bold=True):30s}  {kind.name:15s} {patterns}")
    click.echo()


# ── service ──────────────────────────────────────────────────────────────

@main.group()
def service() -> None:
    """D-Bus service management."""


@service.command("start")
def service_start() -> None:
    """Start the D-Bus service in foreground."""
    from devjunk.dbus_service import start_service

    click.echo("Starting devjunk D-Bus service...")
    start_service()

