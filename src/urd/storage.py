"""JSON persistence for the tracker store with atomic replacement."""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import MalformedDataError, StoreIOError
from .models import Session, Stream, utc_now
from .store import Clock, Store

logger = logging.getLogger(__name__)

TMP_SUFFIX = ".tmp"


def _assume_utc(value: Optional[datetime]) -> Optional[datetime]:
    # Offset-less timestamps are read as UTC.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class StreamRecord(BaseModel):
    id: str
    name: str
    seconds: int = Field(default=0, ge=0)
    active: bool = False
    started_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(extra="ignore")

    @field_validator("started_at", "created_at")
    @classmethod
    def _normalize_timestamp(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _assume_utc(value)


class SessionRecord(BaseModel):
    start: datetime
    end: Optional[datetime] = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("start", "end")
    @classmethod
    def _normalize_timestamp(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _assume_utc(value)


class StoreDocument(BaseModel):
    """On-disk layout of the state file."""

    streams: list[StreamRecord] = Field(default_factory=list)
    sessions: list[SessionRecord] = Field(default_factory=list)
    last_active: Optional[list[str]] = None
    retired_seconds: Optional[int] = Field(default=None, ge=0)

    model_config = ConfigDict(extra="ignore")

    @classmethod
    def from_store(cls, store: Store) -> "StoreDocument":
        return cls(
            streams=[
                StreamRecord(
                    id=stream.id,
                    name=stream.name,
                    seconds=stream.seconds,
                    active=stream.active,
                    started_at=stream.started_at,
                    created_at=stream.created_at,
                )
                for stream in store.streams
            ],
            sessions=[
                SessionRecord(start=session.start, end=session.end)
                for session in store.sessions
            ],
            last_active=list(store.last_active) or None,
            retired_seconds=store.retired_seconds or None,
        )

    def to_store(self, *, path: Optional[Path] = None, clock: Clock = utc_now) -> Store:
        return Store(
            streams=[
                Stream(
                    id=record.id,
                    name=record.name,
                    created_at=record.created_at,
                    seconds=record.seconds,
                    active=record.active,
                    started_at=record.started_at,
                )
                for record in self.streams
            ],
            sessions=[Session(start=record.start, end=record.end) for record in self.sessions],
            last_active=self.last_active or [],
            retired_seconds=self.retired_seconds or 0,
            path=path,
            clock=clock,
        )


def load_store(path: Path, *, clock: Clock = utc_now) -> Store:
    """Load and validate the store at ``path``; a missing file yields an empty store."""
    path = Path(path)
    try:
        raw = path.read_bytes()
    except FileNotFoundError:
        logger.debug("No state file at %s; starting empty.", path)
        return Store(path=path, clock=clock)
    except OSError as exc:
        raise StoreIOError(f"could not read {path}: {exc}") from exc

    try:
        document = StoreDocument.model_validate_json(raw.decode("utf-8"))
    except (UnicodeDecodeError, ValidationError) as exc:
        raise MalformedDataError(f"could not parse {path}: {exc}") from exc

    store = document.to_store(path=path, clock=clock)
    store.validate()
    repaired = store.repair()
    if repaired:
        logger.warning(
            "Repaired start times on %d stream(s): %s",
            len(repaired),
            ", ".join(repaired),
        )
    logger.debug(
        "Loaded %d streams and %d sessions from %s",
        len(store.streams),
        len(store.sessions),
        path,
    )
    return store


def save_store(store: Store, path: Optional[Path] = None) -> Path:
    """Write the store to disk via a temporary file and an atomic rename."""
    target = Path(path) if path is not None else store.path
    if target is None:
        raise ValueError("store has no path to save to")

    payload = StoreDocument.from_store(store).model_dump_json(indent=2, exclude_none=True)
    tmp = target.with_name(target.name + TMP_SUFFIX)
    try:
        tmp.write_text(payload, encoding="utf-8")
    except OSError as exc:
        logger.error("Failed to write %s: %s", tmp, exc)
        raise StoreIOError(f"could not write {tmp}: {exc}") from exc

    try:
        os.replace(tmp, target)
    except OSError as exc:
        logger.error("Failed to replace %s: %s", target, exc)
        raise StoreIOError(f"could not replace {target}: {exc}") from exc

    logger.debug("Saved %d streams to %s", len(store.streams), target)
    return target
