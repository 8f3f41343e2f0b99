"""In-memory tracking engine: streams, wall-clock sessions and their transitions."""

from __future__ import annotations

import logging
import secrets
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, Optional

from .errors import InconsistentDataError
from .models import Session, Stream, utc_now, whole_seconds

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

ID_BYTES = 3


class Store:
    """Aggregate root owning the stream list and the session log.

    Every public operation reads the clock once, truncated to the whole
    second, and uses that instant for all of its bookkeeping. The store
    never persists itself; callers save through
    :func:`urd.storage.save_store` after mutating.
    """

    def __init__(
        self,
        streams: Optional[Iterable[Stream]] = None,
        sessions: Optional[Iterable[Session]] = None,
        last_active: Optional[Iterable[str]] = None,
        retired_seconds: int = 0,
        *,
        path: Optional[Path] = None,
        clock: Clock = utc_now,
    ) -> None:
        self.streams: list[Stream] = list(streams or [])
        self.sessions: list[Session] = list(sessions or [])
        self.last_active: list[str] = list(last_active or [])
        self.retired_seconds = retired_seconds
        self.path = Path(path) if path is not None else None
        self._clock = clock

    def now(self) -> datetime:
        return self._clock().replace(microsecond=0)

    # Queries

    def has_active(self) -> bool:
        return any(stream.active for stream in self.streams)

    def get_stream(self, stream_id: str) -> Optional[Stream]:
        for stream in self.streams:
            if stream.id == stream_id:
                return stream
        return None

    def resolve(self, ref: str) -> Optional[Stream]:
        """Find a stream by 1-based display position or by id."""
        ref = ref.strip()
        stream = self.get_stream(ref)
        if stream is not None:
            return stream
        if ref.isdigit():
            index = int(ref) - 1
            if 0 <= index < len(self.streams):
                return self.streams[index]
        return None

    def total_wall_clock(self, now: Optional[datetime] = None) -> int:
        """De-duplicated tracked time; an open session counts up to now."""
        now = now or self.now()
        total = sum(session.duration(now) for session in self.sessions)
        return max(int(total), 0)

    def stream_total(self, now: Optional[datetime] = None) -> int:
        now = now or self.now()
        return sum(stream.elapsed(now) for stream in self.streams)

    def open_session(self) -> Optional[Session]:
        for session in reversed(self.sessions):
            if session.is_open:
                return session
        return None

    # Mutations

    def add_stream(self, name: str, position: int) -> Stream:
        now = self.now()
        stream = Stream(id=self._new_id(), name=name, created_at=now)
        position = min(max(position, 0), len(self.streams))
        self.streams.insert(position, stream)
        logger.debug("Added stream %s (%r) at %d", stream.id, name, position)
        return stream

    def delete_stream(self, stream_id: str) -> Optional[Stream]:
        """Remove a stream, deactivating it first when it is running."""
        for index, stream in enumerate(self.streams):
            if stream.id != stream_id:
                continue
            now = self.now()
            had_active = self.has_active()
            if stream.active:
                stream.deactivate(now)
            del self.streams[index]
            self.retired_seconds += stream.seconds
            self._update_session(had_active, now)
            logger.debug("Deleted stream %s (%d seconds retired)", stream.id, stream.seconds)
            return stream
        return None

    def toggle_stream(self, stream_id: str) -> Optional[Stream]:
        stream = self.get_stream(stream_id)
        if stream is None:
            logger.debug("Ignoring toggle for unknown stream %s", stream_id)
            return None

        now = self.now()
        had_active = self.has_active()
        if stream.active:
            delta = stream.deactivate(now)
            logger.debug("Stream %s stopped after %d seconds", stream.id, delta)
        else:
            stream.activate(now)
            logger.debug("Stream %s started", stream.id)
        self._update_session(had_active, now)
        return stream

    def stop_all(self) -> list[str]:
        """Deactivate every running stream and remember which ones ran."""
        now = self.now()
        stopped: list[str] = []
        for stream in self.streams:
            if stream.active:
                stopped.append(stream.id)
                stream.deactivate(now)
        self.last_active = stopped
        if stopped:
            self._close_session(now)
            logger.debug("Stopped %d streams", len(stopped))
        return stopped

    def continue_all(self) -> list[str]:
        """Reactivate the streams recorded by the last :meth:`stop_all`."""
        if not self.last_active:
            return []

        now = self.now()
        wanted = set(self.last_active)
        had_active = self.has_active()
        resumed: list[str] = []
        for stream in self.streams:
            if stream.id in wanted and not stream.active:
                stream.activate(now)
                resumed.append(stream.id)
        self._update_session(had_active, now)
        self.last_active = []
        logger.debug("Continued %d streams", len(resumed))
        return resumed

    def sort_streams(self) -> None:
        """Active streams first, then by elapsed time, longest first."""
        now = self.now()
        self.streams.sort(key=lambda stream: (not stream.active, -stream.elapsed(now)))

    def checkpoint(self) -> int:
        """Bank running time of active streams without ending their periods."""
        now = self.now()
        flushed = 0
        for stream in self.streams:
            if stream.active and stream.started_at is not None:
                stream.seconds += whole_seconds(stream.started_at, now)
                stream.started_at = now
                flushed += 1
        return flushed

    # Load-time checks

    def validate(self) -> None:
        """Raise when tracked stream time is lower than the de-duplicated wall clock."""
        now = self.now()
        stream_total = self.stream_total(now) + self.retired_seconds
        wall_clock = self.total_wall_clock(now)
        if wall_clock > 0 and stream_total < wall_clock:
            raise InconsistentDataError(stream_total, wall_clock, self.path)

    def repair(self) -> list[str]:
        """Restore "started_at iff active" on streams loaded from disk."""
        now = self.now()
        repaired: list[str] = []
        for stream in self.streams:
            if stream.active and stream.started_at is None:
                stream.started_at = now
                repaired.append(stream.id)
            elif not stream.active and stream.started_at is not None:
                stream.started_at = None
                repaired.append(stream.id)
        return repaired

    # Internals

    def _update_session(self, had_active: bool, now: datetime) -> None:
        has_active = self.has_active()
        if not had_active and has_active:
            self.sessions.append(Session(start=now))
            logger.debug("Opened session at %s", now.isoformat())
        elif had_active and not has_active:
            self._close_session(now)

    def _close_session(self, now: datetime) -> None:
        session = self.open_session()
        if session is None:
            return
        session.end = now
        logger.debug("Closed session at %s", now.isoformat())

    def _new_id(self) -> str:
        while True:
            candidate = secrets.token_hex(ID_BYTES)
            if self.get_stream(candidate) is None:
                return candidate
