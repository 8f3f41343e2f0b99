"""Configuration models and helpers for the tracker front-ends."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional


@dataclass(slots=True)
class TrackerSettings:
    """Timing configuration for long-running views of the store."""

    refresh_interval: timedelta = timedelta(seconds=1)
    flush_interval: timedelta = timedelta(seconds=60)

    @classmethod
    def from_intervals(
        cls,
        refresh_seconds: float,
        flush_seconds: Optional[float] = None,
    ) -> "TrackerSettings":
        flush = flush_seconds if flush_seconds is not None else max(refresh_seconds * 60, 30.0)
        return cls(
            refresh_interval=timedelta(seconds=refresh_seconds),
            flush_interval=timedelta(seconds=flush),
        )
