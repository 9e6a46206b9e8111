#!/usr/bin/env python3
# audio.py – rev-a3  (2026-10-15)
"""
libVLC audio resource.

VLC raises its events on its own thread; here they only set flags.  The GUI
calls ``poll()`` from its 100 ms timer and the flagged events are dispatched
there, so the controller is only ever touched from the GUI thread.
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing  import Callable, Optional

import vlc

logger = logging.getLogger(__name__)

VLC_OPTS = ["--no-video", "--quiet"]


def _noop(*_):
    pass


class VLCAudio:
    def __init__(self, opts=None):
        self._instance = vlc.Instance(list(opts or VLC_OPTS))
        self.player: Optional[vlc.MediaPlayer] = None
        self._volume       = 1.0
        self._ended        = False
        self._meta_pending = False

        self.on_time_update:     Callable[[float], None] = _noop
        self.on_loaded_metadata: Callable[[float], None] = _noop
        self.on_ended:           Callable[[], None]      = _noop

    # ─────────────────────────────── media
    def _attach_events(self):
        em = self.player.event_manager()
        em.event_attach(vlc.EventType.MediaPlayerEndReached,
                        lambda *_: setattr(self, "_ended", True))
        em.event_attach(vlc.EventType.MediaPlayerLengthChanged,
                        lambda *_: setattr(self, "_meta_pending", True))

    def load(self, path: str):
        if self.player:
            self.player.stop()
        self.player = self._instance.media_player_new()
        self.player.set_media(self._instance.media_new(str(Path(path))))
        self._attach_events()
        self.player.audio_set_volume(int(round(self._volume * 100)))
        self._ended = self._meta_pending = False

    # ─────────────────────────────── transport
    def play(self):
        if not self.player:
            return
        if self.player.get_state() == vlc.State.Ended:
            # an ended media player must be stopped before it plays again
            self.player.stop()
        self.player.play()

    def pause(self):
        if self.player:
            self.player.set_pause(1)

    @property
    def current_time(self) -> float:
        return (self.player.get_time() or 0) / 1000 if self.player else 0.0

    @current_time.setter
    def current_time(self, seconds: float):
        if self.player:
            self.player.set_time(int(seconds * 1000))

    @property
    def duration(self) -> float:
        return max(0, self.player.get_length() or 0) / 1000 if self.player else 0.0

    @property
    def volume(self) -> float:
        return self._volume

    @volume.setter
    def volume(self, level: float):
        self._volume = float(level)
        if self.player:
            self.player.audio_set_volume(int(round(self._volume * 100)))

    # ─────────────────────────────── GUI tick (every 0.1 s)
    def poll(self):
        if not self.player:
            return
        if self._meta_pending:
            self._meta_pending = False
            self.on_loaded_metadata(self.duration)
        if self._ended:
            self._ended = False
            self.on_ended()
            return
        if self.player.is_playing():
            self.on_time_update(self.current_time)

    def close(self):
        if self.player:
            self.player.stop()
            self.player = None
        self._instance.release()
