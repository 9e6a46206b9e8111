#!/usr/bin/env python3
# playlists.py – rev-p4  (2026-10-16)
"""
User playlists and the favorites set, both written through to the store.

Stored shapes
-------------
playlists : [{"id": "pl-1760000000000", "name": "Road trip", "songs": ["/music/a.flac", …]}, …]
favorites : ["/music/a.flac", …]
"""

from __future__ import annotations
import logging, time
from dataclasses import replace
from typing  import Callable, Iterable, List, Optional, Sequence, Union

from models import Song, UserPlaylist, index_by_path

logger = logging.getLogger(__name__)

PLAYLISTS_KEY = "playlists"
FAVORITES_KEY = "favorites"

# ────────────────────────── user playlists ───────────────────
class PlaylistStore:
    def __init__(self, store, *, clock: Callable[[], float] = time.time):
        self._store = store
        self._clock = clock
        self._items: List[UserPlaylist] = []
        for rec in store.get(PLAYLISTS_KEY) or []:
            try:
                self._items.append(UserPlaylist.from_dict(rec))
            except (AttributeError, KeyError, TypeError):
                logger.warning("dropping malformed playlist record %r", rec)

    def __iter__(self):
        return iter(list(self._items))

    def __len__(self):
        return len(self._items)

    def get(self, playlist_id: str) -> Optional[UserPlaylist]:
        return next((p for p in self._items if p.id == playlist_id), None)

    def _save(self):
        self._store.set(PLAYLISTS_KEY, [p.to_dict() for p in self._items])

    def _new_id(self) -> str:
        stamp = int(self._clock() * 1000)
        while self.get(f"pl-{stamp}") is not None:
            stamp += 1
        return f"pl-{stamp}"

    # ---------- operations
    def create(self, name: Optional[str]) -> Optional[UserPlaylist]:
        name = (name or "").strip()
        if not name:
            return None
        pl = UserPlaylist(id=self._new_id(), name=name)
        self._items.append(pl)
        self._save()
        logger.info("created playlist %s (%s)", pl.name, pl.id)
        return pl

    def add_songs(self, playlist_id: str, songs: Union[Song, Iterable[Song]]) -> Optional[UserPlaylist]:
        batch = [songs] if isinstance(songs, Song) else list(songs)
        for i, pl in enumerate(self._items):
            if pl.id != playlist_id:
                continue
            paths = list(pl.songs)
            for s in batch:
                if s.path not in paths:
                    paths.append(s.path)
            if len(paths) == len(pl.songs):
                return pl
            self._items[i] = replace(pl, songs=tuple(paths))
            self._save()
            return self._items[i]
        return None

    def delete(self, playlist_id: str, confirm: Callable[[str], bool]) -> bool:
        pl = self.get(playlist_id)
        if pl is None or not confirm(f"Delete playlist “{pl.name}”?"):
            return False
        self._items = [p for p in self._items if p.id != playlist_id]
        self._save()
        logger.info("deleted playlist %s", playlist_id)
        return True

    def resolve(self, playlist_id: str, catalog: Sequence[Song]) -> List[Song]:
        pl = self.get(playlist_id)
        if pl is None:
            return []
        table = index_by_path(catalog)
        return [table[p] for p in pl.songs if p in table]

# ────────────────────────── favorites ────────────────────────
class Favorites:
    def __init__(self, store):
        self._store = store
        self._paths: List[str] = []
        raw = store.get(FAVORITES_KEY)
        if not isinstance(raw, list):
            if raw is not None:
                logger.warning("ignoring malformed favorites value %r", raw)
            raw = []
        for p in raw:
            if isinstance(p, str) and p not in self._paths:
                self._paths.append(p)

    def __contains__(self, path) -> bool:
        return path in self._paths

    def __iter__(self):
        return iter(list(self._paths))

    def __len__(self):
        return len(self._paths)

    @property
    def paths(self) -> List[str]:
        return list(self._paths)

    def toggle(self, path: Optional[str]) -> bool:
        """Flip membership of *path*; returns the new state."""
        if not path:
            return False
        if path in self._paths:
            self._paths.remove(path)
            now = False
        else:
            self._paths.append(path)
            now = True
        self._store.set(FAVORITES_KEY, list(self._paths))
        return now
