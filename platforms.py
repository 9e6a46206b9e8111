#!/usr/bin/env python3
# platforms.py – rev-p2  (2026-10-17)
"""
Platform seam + the session object that owns the core.

A ``Platform`` is handed to ``PlayerSession`` at construction; there is one
implementation per target (``main.DesktopPlatform`` for the Qt build).  The
session never asks which platform it is on.
"""

from __future__ import annotations
import logging
from typing  import List, Optional, Sequence

import scanner, smart
from models    import SMART_PLAYLISTS, Song, UserPlaylist
from player    import PlaybackController
from playlists import Favorites, PlaylistStore
from stats     import StatsRecorder

logger = logging.getLogger(__name__)

FOLDER_KEY = "musicFolder"
FULL_SIZE  = (1000, 800)
MINI_SIZE  = (300, 330)


class Platform:
    """Everything the core needs from its host environment."""

    store = None            # object with get(key) / set(key, value)

    def select_folder(self) -> Optional[str]:
        raise NotImplementedError

    def scan_folder(self, folder: str) -> List[Song]:
        return scanner.scan_folder(folder)

    def resize(self, width: int, height: int) -> None:
        pass

    def confirm(self, message: str) -> bool:
        raise NotImplementedError

    def prompt(self, message: str) -> Optional[str]:
        raise NotImplementedError

    def notify(self, message: str) -> None:
        logger.info("%s", message)


def search(songs: Sequence[Song], query: str) -> List[Song]:
    """Case-insensitive match on title or artist."""
    q = (query or "").strip().lower()
    if not q:
        return list(songs)
    return [s for s in songs if q in s.title.lower() or q in s.artist.lower()]


class PlayerSession:
    def __init__(self, platform: Platform, audio, *, rng=None, recorder=None,
                 on_track_change=None, on_state_change=None):
        self.platform  = platform
        store          = platform.store
        self.recorder  = recorder or StatsRecorder(store)
        self.playlists = PlaylistStore(store)
        self.favorites = Favorites(store)
        self.player    = PlaybackController(audio, self.recorder,
                                            on_track_change=on_track_change,
                                            on_state_change=on_state_change,
                                            rng=rng)
        self.folder: Optional[str] = store.get(FOLDER_KEY)
        self.mini_mode = False

    # ─────────────────────────────── catalog
    @property
    def catalog(self) -> List[Song]:
        return self.player.catalog

    def set_catalog(self, songs: Sequence[Song]):
        self.player.catalog = list(songs)

    def rescan(self) -> List[Song]:
        if not self.folder:
            return []
        if not scanner.is_readable(self.folder):
            self.platform.notify(f"Cannot read music folder:\n{self.folder}")
            self.set_catalog([])
            return []
        self.set_catalog(self.platform.scan_folder(self.folder))
        return self.catalog

    def choose_folder(self) -> Optional[str]:
        folder = self.platform.select_folder()
        if not folder:
            return None
        self.folder = folder
        self.platform.store.set(FOLDER_KEY, folder)
        return folder

    # ─────────────────────────────── playlists
    @property
    def smart_playlists(self):
        return SMART_PLAYLISTS

    def find_playlist(self, playlist_id: str):
        return (next((p for p in SMART_PLAYLISTS if p.id == playlist_id), None)
                or self.playlists.get(playlist_id))

    def songs_in(self, playlist) -> List[Song]:
        if isinstance(playlist, str):
            playlist = self.find_playlist(playlist)
            if playlist is None:
                return []
        if isinstance(playlist, UserPlaylist):
            return self.playlists.resolve(playlist.id, self.catalog)
        return smart.songs_for(playlist, self.recorder.snapshot(),
                               self.favorites.paths, self.catalog)

    def create_playlist(self, name: Optional[str] = None) -> Optional[UserPlaylist]:
        if name is None:
            name = self.platform.prompt("Enter Playlist Name")
        return self.playlists.create(name)

    def delete_playlist(self, playlist_id: str) -> bool:
        return self.playlists.delete(playlist_id, self.platform.confirm)

    def add_to_playlist(self, playlist_id: str, songs) -> Optional[UserPlaylist]:
        return self.playlists.add_songs(playlist_id, songs)

    def toggle_favorite(self, path: Optional[str] = None) -> bool:
        if path is None:
            cur = self.player.current_song
            path = cur.path if cur else None
        return self.favorites.toggle(path)

    def is_favorite(self, song: Optional[Song]) -> bool:
        return song is not None and song.path in self.favorites

    # ─────────────────────────────── views
    def dashboard(self, window: str = "lifetime", now: Optional[float] = None) -> smart.Dashboard:
        return smart.dashboard(self.recorder.snapshot(), self.catalog, window, now)

    def search(self, query: str) -> List[Song]:
        return search(self.catalog, query)

    def toggle_mini_mode(self) -> bool:
        self.mini_mode = not self.mini_mode
        self.platform.resize(*(MINI_SIZE if self.mini_mode else FULL_SIZE))
        return self.mini_mode

    def close(self):
        self.player.close()
        self.recorder.close()
