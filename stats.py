#!/usr/bin/env python3
# stats.py – rev-h6  (2026-10-14)
"""
Listening statistics: play history + cumulative listening seconds.

Every mutation is written straight through to the key/value store under
``stats``; nothing is batched.  Listening time is counted by a 1-second
``TickTask`` that runs only while the controller is in the Playing state.
"""

from __future__ import annotations
import logging, threading, time
from typing  import Callable, List, Optional

from models import PlayHistoryEntry, Stats

logger = logging.getLogger(__name__)

STORE_KEY = "stats"

# ────────────────────────── cancellable tick ─────────────────
class TickTask:
    """Call *callback* every *interval* seconds until ``cancel()``."""

    def __init__(self, callback: Callable[[], None], interval: float = 1.0):
        self._cb       = callback
        self._interval = float(interval)
        self._stop     = threading.Event()
        self._th       = threading.Thread(target=self._loop, daemon=True)

    def start(self) -> "TickTask":
        self._th.start()
        return self

    def _loop(self):
        while not self._stop.wait(self._interval):
            try:
                self._cb()
            except Exception:
                logger.exception("stats tick failed")

    def cancel(self, timeout: float = 0.6):
        self._stop.set()
        if self._th.is_alive() and self._th is not threading.current_thread():
            self._th.join(timeout)

    @property
    def cancelled(self) -> bool:
        return self._stop.is_set()

# ────────────────────────── recorder ─────────────────────────
class StatsRecorder:
    TICK_SECONDS = 1.0

    def __init__(self, store, *,
                 clock: Callable[[], float] = time.time,
                 tick_factory: Optional[Callable[[Callable[[], None]], TickTask]] = None):
        self._store = store
        self._clock = clock
        self._lock  = threading.Lock()
        self._tick_factory = tick_factory or (
            lambda cb: TickTask(cb, self.TICK_SECONDS).start())
        self._tick: Optional[TickTask] = None
        self._stats = Stats.from_dict(store.get(STORE_KEY))

    # ---------- read side
    def snapshot(self) -> Stats:
        with self._lock:
            return Stats(self._stats.total_time, list(self._stats.play_history))

    @property
    def total_time(self) -> int:
        with self._lock:
            return self._stats.total_time

    @property
    def history(self) -> List[PlayHistoryEntry]:
        with self._lock:
            return list(self._stats.play_history)

    # ---------- write side
    def record_start(self, path: str):
        with self._lock:
            self._stats.play_history.append(PlayHistoryEntry(path, self._clock()))
            self._persist()
        logger.debug("history += %s", path)

    def add_seconds(self, seconds: int = 1):
        with self._lock:
            self._stats.total_time += seconds
            self._persist()

    def _persist(self):
        self._store.set(STORE_KEY, self._stats.to_dict())

    # ---------- playing session
    def playing_changed(self, playing: bool):
        """Start the tick on entering Playing, cancel it on leaving."""
        if playing:
            if self._tick is None:
                self._tick = self._tick_factory(self.add_seconds)
        elif self._tick is not None:
            self._tick.cancel()
            self._tick = None

    @property
    def ticking(self) -> bool:
        return self._tick is not None

    def close(self):
        self.playing_changed(False)
