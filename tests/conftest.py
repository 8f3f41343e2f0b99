from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from urd.store import Store


class FakeClock:
    """Deterministic clock that only moves when told to."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 3, 2, 9, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "urd.json"


@pytest.fixture
def store(store_path: Path, clock: FakeClock) -> Store:
    return Store(path=store_path, clock=clock)
