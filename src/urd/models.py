"""Domain models for tracked streams and wall-clock sessions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def whole_seconds(start: datetime, end: datetime) -> int:
    """Seconds between two instants, rounded down and never negative."""
    return max(int((end - start).total_seconds()), 0)


@dataclass(slots=True)
class Stream:
    """A named unit of work that accrues time while active."""

    id: str
    name: str
    created_at: datetime
    seconds: int = 0
    active: bool = False
    started_at: Optional[datetime] = None

    def elapsed(self, now: datetime) -> int:
        """Banked seconds plus the running period, if any."""
        total = self.seconds
        if self.active and self.started_at is not None:
            total += whole_seconds(self.started_at, now)
        return total

    def activate(self, now: datetime) -> None:
        self.active = True
        self.started_at = now

    def deactivate(self, now: datetime) -> int:
        """Bank the running period and return the seconds added."""
        delta = 0
        if self.started_at is not None:
            delta = whole_seconds(self.started_at, now)
            self.seconds += delta
        self.active = False
        self.started_at = None
        return delta


@dataclass(slots=True)
class Session:
    """A contiguous interval during which at least one stream was active."""

    start: datetime
    end: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.end is None

    def duration(self, now: datetime) -> float:
        end = self.end if self.end is not None else now
        return (end - self.start).total_seconds()
