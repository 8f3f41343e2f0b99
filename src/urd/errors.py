"""Exceptions raised while loading or saving tracker state."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class StoreError(Exception):
    """Base class for persistence failures."""


class MalformedDataError(StoreError):
    """The state file could not be decoded into a store."""


class InconsistentDataError(StoreError):
    """Banked stream time is lower than the recorded wall-clock time."""

    def __init__(self, stream_total: int, wall_clock: int, path: Optional[Path] = None) -> None:
        self.stream_total = stream_total
        self.wall_clock = wall_clock
        self.path = path
        where = f" in {path}" if path is not None else ""
        super().__init__(
            f"inconsistent data{where}: total stream time ({stream_total}s) "
            f"is less than wall-clock time ({wall_clock}s)"
        )


class StoreIOError(StoreError):
    """Writing or replacing the state file failed."""
