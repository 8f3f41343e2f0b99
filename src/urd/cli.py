"""Command-line interface for the tracker."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import typer

from .config import TrackerSettings
from .errors import StoreError
from .models import Stream
from .paths import get_store_path
from .reporting import render_streams
from .storage import load_store, save_store
from .store import Store

app = typer.Typer(help="Track time across concurrently running streams of work.")


def _store_option() -> Any:
    return typer.Option(
        None,
        "--store",
        path_type=Path,
        help="Location of the JSON state file.",
    )


@app.callback(no_args_is_help=True)
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs.")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def _open(store_path: Optional[Path]) -> Store:
    path = store_path or get_store_path()
    try:
        return load_store(path)
    except StoreError as exc:
        typer.echo(f"Error loading data: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def _commit(store: Store) -> None:
    store.sort_streams()
    try:
        save_store(store)
    except StoreError as exc:
        typer.echo(f"Error saving data: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def _find(store: Store, ref: str) -> Stream:
    stream = store.resolve(ref)
    if stream is None:
        typer.echo(f"No stream matches {ref!r}.", err=True)
        raise typer.Exit(code=1)
    return stream


def _echo_streams(store: Store) -> None:
    for line in render_streams(store):
        typer.echo(line)


@app.command("list")
def list_streams(store_path: Optional[Path] = _store_option()) -> None:
    """Show every stream with its elapsed time."""
    store = _open(store_path)
    store.sort_streams()
    _echo_streams(store)


@app.command()
def add(
    name: str = typer.Argument(..., help="Display name of the new stream."),
    at: Optional[int] = typer.Option(
        None,
        "--at",
        help="1-based position to insert at. Defaults to the end of the list.",
    ),
    store_path: Optional[Path] = _store_option(),
) -> None:
    """Add a new, inactive stream."""
    name = name.strip()
    if not name:
        typer.echo("Stream name must not be empty.", err=True)
        raise typer.Exit(code=1)

    store = _open(store_path)
    position = len(store.streams) if at is None else at - 1
    stream = store.add_stream(name, position)
    _commit(store)
    typer.echo(f"Added {stream.name} ({stream.id}).")


@app.command()
def toggle(
    ref: str = typer.Argument(..., help="Stream position or id."),
    store_path: Optional[Path] = _store_option(),
) -> None:
    """Start or stop a single stream."""
    store = _open(store_path)
    stream = _find(store, ref)
    store.toggle_stream(stream.id)
    _commit(store)
    state = "Started" if stream.active else "Stopped"
    typer.echo(f"{state} {stream.name}.")
    _echo_streams(store)


@app.command()
def stop(store_path: Optional[Path] = _store_option()) -> None:
    """Stop every running stream and remember them for 'continue'."""
    store = _open(store_path)
    stopped = store.stop_all()
    _commit(store)
    typer.echo(f"Stopped {len(stopped)} stream(s).")


@app.command("continue")
def continue_(store_path: Optional[Path] = _store_option()) -> None:
    """Restart the streams that were running at the last 'stop'."""
    store = _open(store_path)
    resumed = store.continue_all()
    _commit(store)
    typer.echo(f"Continued {len(resumed)} stream(s).")
    if resumed:
        _echo_streams(store)


@app.command()
def delete(
    ref: str = typer.Argument(..., help="Stream position or id."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
    store_path: Optional[Path] = _store_option(),
) -> None:
    """Delete a stream, asking first when it has recorded time."""
    store = _open(store_path)
    stream = _find(store, ref)
    if not yes and stream.elapsed(store.now()) > 0:
        typer.confirm(f'Delete "{stream.name}"? It has recorded time.', abort=True)
    store.delete_stream(stream.id)
    _commit(store)
    typer.echo(f"Deleted {stream.name}.")


@app.command()
def watch(
    refresh_seconds: float = typer.Option(
        1.0,
        "--interval",
        min=0.2,
        help="Seconds between screen refreshes.",
    ),
    flush_seconds: Optional[float] = typer.Option(
        None,
        "--flush-interval",
        min=5.0,
        help="Seconds between checkpoint saves (defaults to 60x the refresh interval).",
    ),
    store_path: Optional[Path] = _store_option(),
) -> None:
    """Continuously display the streams until interrupted."""
    from .watcher import StoreWatcher

    store = _open(store_path)
    settings = TrackerSettings.from_intervals(
        refresh_seconds=refresh_seconds, flush_seconds=flush_seconds
    )

    def render(current: Store) -> None:
        current.sort_streams()
        typer.clear()
        typer.echo("urd - Time Tracker\n")
        _echo_streams(current)

    watcher = StoreWatcher(store=store, settings=settings, render=render)
    try:
        watcher.run_forever()
    except StoreError as exc:
        typer.echo(f"Error saving data: {exc}", err=True)
        raise typer.Exit(code=1) from exc
