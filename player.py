#!/usr/bin/env python3
# player.py – rev-e12  (2026-10-15)
"""
Playback controller: the single owner of the audio resource.

State is {Stopped, Playing, Paused} × queue position.  Queue changes go
through ``playqueue``; transport commands to the resource are fire-and-forget.
The resource reports back through three callbacks which the controller
installs on construction:

    audio.on_time_update(seconds)
    audio.on_loaded_metadata(duration)
    audio.on_ended()

Anything with ``load(path)``, ``play()``, ``pause()`` and read/write
``current_time`` / ``volume`` attributes will do (see ``audio.VLCAudio``).
"""

from __future__ import annotations
import logging, random
from typing  import Callable, List, Optional, Sequence

import playqueue
from models    import PlayState, RepeatMode, Song
from playqueue import QueueState

logger = logging.getLogger(__name__)


class PlaybackController:
    RESTART_THRESHOLD = 3.0       # seconds; prev() past this rewinds instead

    def __init__(self, audio, recorder=None, *,
                 on_track_change: Optional[Callable[[], None]] = None,
                 on_state_change: Optional[Callable[[], None]] = None,
                 rng: Optional[random.Random] = None):
        self._audio     = audio
        self._recorder  = recorder
        self._on_track  = on_track_change or (lambda: None)
        self._on_state  = on_state_change or (lambda: None)
        self._rng       = rng

        self.catalog: List[Song] = []
        self.queue     = QueueState()
        self.state     = PlayState.STOPPED
        self.current_time = 0.0
        self.duration     = 0.0
        self.volume       = 1.0
        self._loaded: Optional[str] = None

        audio.on_time_update     = self.handle_time_update
        audio.on_loaded_metadata = self.handle_loaded_metadata
        audio.on_ended           = self.handle_ended

    # ─────────────────────────────── read side
    @property
    def current_song(self) -> Optional[Song]:
        return self.queue.current

    @property
    def is_playing(self) -> bool:
        return self.state == PlayState.PLAYING

    @property
    def has_track(self) -> bool:
        return self._loaded is not None

    # ─────────────────────────────── internals
    def _set_state(self, new: PlayState):
        if new == self.state:
            return
        logger.debug("state %s -> %s", self.state.value, new.value)
        self.state = new
        if self._recorder is not None:
            self._recorder.playing_changed(new == PlayState.PLAYING)
        self._on_state()

    def _start_current(self):
        song = self.queue.current
        if song is None:
            return
        self._loaded = song.path
        self.current_time = 0.0
        self.duration = song.duration or 0.0
        self._audio.load(song.path)
        self._audio.play()
        if self._recorder is not None:
            self._recorder.record_start(song.path)
        self._set_state(PlayState.PLAYING)
        self._on_track()

    def _apply(self, new: Optional[QueueState]) -> bool:
        if new is None:
            return False
        self.queue = new
        self._start_current()
        return True

    def _rewind(self):
        self._audio.current_time = 0.0
        self.current_time = 0.0

    # ─────────────────────────────── transport
    def play_song(self, song: Song, context: Optional[Sequence[Song]] = None) -> bool:
        """Make *context* (default: whole catalog) the queue and play *song*."""
        ctx = self.catalog if context is None else context
        new = playqueue.select(self.queue, song, ctx, self._rng)
        if new is None:
            logger.debug("play_song: %s not in queue", song.path)
        return self._apply(new)

    def toggle_play(self):
        if not self.has_track:
            return
        if self.state == PlayState.PLAYING:
            self._audio.pause()
            self._set_state(PlayState.PAUSED)
        else:
            self._audio.play()
            self._set_state(PlayState.PLAYING)

    def next(self, auto: bool = False):
        new = playqueue.step_forward(self.queue)
        if new is not None:
            self._apply(new)
            return
        if self.has_track:
            if not auto:
                self._audio.pause()
            self._set_state(PlayState.STOPPED)

    def prev(self):
        if self.has_track and self._audio.current_time > self.RESTART_THRESHOLD:
            self._rewind()
            return
        self._apply(playqueue.step_back(self.queue))

    def seek(self, seconds: float):
        if not self.has_track:
            return
        self._audio.current_time = seconds
        self.current_time = seconds

    def set_volume(self, level: float):
        self._audio.volume = level
        self.volume = level

    # ─────────────────────────────── modes
    def toggle_shuffle(self):
        self.queue = playqueue.toggle_shuffle(self.queue, self.catalog, self._rng)
        self._on_state()

    def toggle_repeat(self) -> RepeatMode:
        self.queue = playqueue.cycle_repeat(self.queue)
        self._on_state()
        return self.queue.repeat

    # ─────────────────────────────── resource events
    def handle_time_update(self, seconds: float):
        self.current_time = seconds

    def handle_loaded_metadata(self, duration: float):
        self.duration = duration

    def handle_ended(self):
        if self.queue.repeat == RepeatMode.ONE and self.queue.current is not None:
            self._rewind()
            self._audio.play()
            self._set_state(PlayState.PLAYING)
            return
        self.next(auto=True)

    def close(self):
        if self.has_track and self.is_playing:
            self._audio.pause()
        self._set_state(PlayState.STOPPED)
