"""Periodic refresh loop that keeps a live view of the store and checkpoints it."""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Callable

from .config import TrackerSettings
from .storage import save_store
from .store import Store

logger = logging.getLogger(__name__)

Renderer = Callable[[Store], None]


class StoreWatcher:
    """Redraws the store at a fixed interval and saves checkpoints while streams run."""

    def __init__(
        self,
        store: Store,
        settings: TrackerSettings,
        render: Renderer,
    ) -> None:
        self.store = store
        self.settings = settings
        self._render = render
        self._last_flush_time: datetime = store.now()

    def run_forever(self) -> None:
        stop_event = threading.Event()
        try:
            self._run_loop(stop_event)
        except KeyboardInterrupt:
            logger.info("Watcher interrupted; saving state.")
        finally:
            self._shutdown()

    def run_until_stopped(self, stop_event: threading.Event) -> None:
        """Run the watcher until the provided event is set."""
        try:
            self._run_loop(stop_event)
        finally:
            self._shutdown()

    def refresh_once(self) -> None:
        self._render(self.store)

    def flush_if_needed(self) -> bool:
        now = self.store.now()
        if now - self._last_flush_time < self.settings.flush_interval:
            return False
        self._last_flush_time = now
        if not self.store.has_active():
            return False
        self.flush()
        return True

    def flush(self) -> None:
        flushed = self.store.checkpoint()
        save_store(self.store)
        logger.debug("Checkpointed %d active streams.", flushed)

    def _run_loop(self, stop_event: threading.Event) -> None:
        logger.info("Watching %s", self.store.path)
        interval = self.settings.refresh_interval.total_seconds()
        while not stop_event.is_set():
            self.refresh_once()
            self.flush_if_needed()
            stop_event.wait(interval)

    def _shutdown(self) -> None:
        if self.store.has_active():
            self.flush()
        logger.info("Watcher stopped.")
