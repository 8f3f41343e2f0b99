"""Plain-text rendering of the stream list for console output."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from .store import Store

ACTIVE_MARKER = "●"
NAME_WIDTH = 20


def format_duration(seconds: float) -> str:
    total_seconds = max(int(seconds), 0)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours}h {minutes:02d}m {secs:02d}s"


def format_share(seconds: int, wall_clock: int) -> str:
    if wall_clock <= 0:
        return ""
    return f"  {seconds / wall_clock * 100:5.1f}%"


def render_streams(store: Store, now: Optional[datetime] = None) -> list[str]:
    """Numbered stream lines followed by the wall-clock and total footer."""
    now = now or store.now()
    if not store.streams:
        return ["  No streams. Run 'urd add NAME' to add one."]

    wall_clock = store.total_wall_clock(now)
    lines: list[str] = []
    for position, stream in enumerate(store.streams, start=1):
        elapsed = stream.elapsed(now)
        line = f"{position:>2} {stream.name:<{NAME_WIDTH}} {format_duration(elapsed)}"
        line += format_share(elapsed, wall_clock)
        if stream.active:
            line += f"  {ACTIVE_MARKER}"
        lines.append(line)

    if wall_clock > 0 or store.has_active():
        lines.append("")
        lines.append(f"  Wall clock: {format_duration(wall_clock)}")
        lines.append(f"  Total:      {format_duration(store.stream_total(now))}")
    return lines

