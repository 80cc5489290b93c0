# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# fs-changeset/src/fs_changeset/cli.py

"""Command line interface for inspecting serialized changesets."""

import logging
import sys
from collections import Counter
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .change import Ordering
from .errors import DecodeError, WireFormatError
from .types import (
    Added,
    Changeset,
    Deleted,
    EntryChange,
    EntryDiff,
    FileChanged,
    Gid,
    MetaEntryDiff,
    MetaOnlyChange,
    MetadataChange,
    NamedStream,
    Nlink,
    NtfsAttributes,
    OtherChange,
    Size,
    SymlinkChanged,
    TypeChange,
    Uid,
    UnixPermissions,
)
from .wire import dumps, loads

app = typer.Typer(help="Inspect and validate serialized filesystem changesets")
console = Console()
err_console = Console(stderr=True)
logger = logging.getLogger(__name__)

DEBUG_ENVVAR = "FS_CHANGESET_DEBUG"


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _load(source: str) -> Changeset:
    """Read and decode a changeset from a file path, or stdin for "-"."""
    try:
        if source == "-":
            text = sys.stdin.read()
        else:
            text = Path(source).read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise WireFormatError(f"Input is not valid UTF-8: {e}") from e
    logger.debug(f"Read {len(text)} characters from {source}")
    return loads(text)


def _load_or_exit(source: str) -> Changeset:
    try:
        return _load(source)
    except (DecodeError, OSError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def check(
    source: str = typer.Argument(..., help="Changeset JSON file, or - for stdin"),
    debug: bool = typer.Option(False, "--debug", envvar=DEBUG_ENVVAR,
                               help="Enable debug output")
) -> None:
    """Check that a file holds a well-formed changeset."""
    _configure_logging(debug)
    changeset = _load_or_exit(source)
    console.print(f"[green]OK[/green] {len(changeset)} changes, "
                  f"earliest timestamp {changeset.earliest_timestamp}")


@app.command()
def summary(
    source: str = typer.Argument(..., help="Changeset JSON file, or - for stdin"),
    debug: bool = typer.Option(False, "--debug", envvar=DEBUG_ENVVAR,
                               help="Enable debug output")
) -> None:
    """Print counts of diffs and metadata changes by kind."""
    _configure_logging(debug)
    changeset = _load_or_exit(source)

    by_kind = Counter(diff_kind(diff) for _, diff in changeset.items())
    by_field = Counter(
        metadata_label(change)
        for _, diff in changeset.items()
        for change in diff.meta_info().changes
    )

    console.print(f"\n[bold]Summary of {len(changeset)} changes:[/bold]")
    console.print(f"  Earliest timestamp: {changeset.earliest_timestamp}")
    for kind in ("added", "deleted", "metadata", "entry"):
        console.print(f"  {kind.title()}: {by_kind.get(kind, 0)}")

    if by_field:
        console.print(f"\n[bold]Metadata changes by field:[/bold]")
        for label, count in by_field.most_common():
            console.print(f"  {label}: {count}")


@app.command()
def show(
    source: str = typer.Argument(..., help="Changeset JSON file, or - for stdin"),
    limit: int = typer.Option(50, "--limit", "-n", min=0, help="Maximum number of rows"),
    debug: bool = typer.Option(False, "--debug", envvar=DEBUG_ENVVAR,
                               help="Enable debug output")
) -> None:
    """Print changes in table format."""
    _configure_logging(debug)
    changeset = _load_or_exit(source)

    table = Table(title=f"Changes since {changeset.earliest_timestamp}")
    table.add_column("Kind", style="cyan")
    table.add_column("Path", style="green")
    table.add_column("Entry", style="yellow")
    table.add_column("Metadata", style="magenta")

    items = changeset.items()
    for path, diff in items[:limit]:
        entry = describe_entry(diff.entry) if isinstance(diff, EntryChange) else ""
        metadata = ", ".join(describe_metadata(c) for c in diff.meta_info().changes)
        table.add_row(
            diff_kind(diff),
            path[:60] + "..." if len(path) > 60 else path,
            entry,
            metadata,
        )

    if len(items) > limit:
        table.add_row("...", f"({len(items) - limit} more)", "", "")

    console.print(table)


@app.command()
def normalize(
    source: str = typer.Argument(..., help="Changeset JSON file, or - for stdin"),
    indent: Optional[int] = typer.Option(None, "--indent", "-i", help="Pretty-print with this indent"),
    debug: bool = typer.Option(False, "--debug", envvar=DEBUG_ENVVAR,
                               help="Enable debug output")
) -> None:
    """Re-emit a changeset in canonical form (path order, lowercase hashes)."""
    _configure_logging(debug)
    changeset = _load_or_exit(source)
    typer.echo(dumps(changeset, indent=indent))


def diff_kind(diff: MetaEntryDiff) -> str:
    if isinstance(diff, Added):
        return "added"
    if isinstance(diff, Deleted):
        return "deleted"
    if isinstance(diff, MetaOnlyChange):
        return "metadata"
    if isinstance(diff, EntryChange):
        return "entry"
    raise TypeError(f"Unhandled MetaEntryDiff variant: {type(diff).__name__}")


def describe_entry(entry: EntryDiff) -> str:
    if isinstance(entry, FileChanged):
        change = entry.hash_change
        return f"content {change.from_.to_hex()[:12]} → {change.to.to_hex()[:12]}"
    if isinstance(entry, SymlinkChanged):
        return f"symlink {entry.path_change.from_} → {entry.path_change.to}"
    if isinstance(entry, TypeChange):
        return f"type {entry.change.from_} → {entry.change.to}"
    if isinstance(entry, OtherChange):
        return "other"
    raise TypeError(f"Unhandled EntryDiff variant: {type(entry).__name__}")


def metadata_label(change: MetadataChange) -> str:
    labels = {
        Size: "size",
        NtfsAttributes: "attributes",
        UnixPermissions: "permissions",
        Nlink: "nlink",
        Uid: "uid",
        Gid: "gid",
        NamedStream: "named stream",
    }
    try:
        return labels[type(change)]
    except KeyError:
        raise TypeError(f"Unhandled MetadataChange variant: {type(change).__name__}") from None


def _value(value: object) -> str:
    return "-" if value is None else str(value)


def describe_metadata(change: MetadataChange) -> str:
    label = metadata_label(change)
    if isinstance(change, Size):
        delta = change.change.to - change.change.from_
        sign = {Ordering.LESS: "+", Ordering.GREATER: "-", Ordering.EQUAL: "±"}[change.change.compare()]
        return f"{label} {change.change.from_} → {change.change.to} ({sign}{abs(delta)})"
    if isinstance(change, UnixPermissions):
        from_, to = (None if v is None else oct(v) for v in (change.change.from_, change.change.to))
        return f"{label} {_value(from_)} → {_value(to)}"
    if isinstance(change, NamedStream):
        return f"{label} {type(change.stream).__name__}"
    return f"{label} {_value(change.change.from_)} → {_value(change.change.to)}"


def main() -> None:
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
