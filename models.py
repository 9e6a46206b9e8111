#!/usr/bin/env python3
# models.py – rev-m3  (2026-10-12)
"""
Plain data shared by every part of the player.

Songs come from the scanner and never change afterwards; identity is the
absolute ``path``.  Playlists are a tagged variant: a ``UserPlaylist`` owns
an ordered list of paths, a ``SmartPlaylist`` only names the rule that
computes its members on read.
"""

from __future__ import annotations
import enum
from dataclasses import dataclass, field
from typing  import Any, Dict, List, Optional, Tuple, Union

# ────────────────────────── songs ────────────────────────────
@dataclass(frozen=True)
class Song:
    path:            str
    title:           str
    artist:          str = "Unknown Artist"
    album:           str = ""
    composer:        str = ""
    duration:        float = 0.0
    bitrate:         Optional[int] = None
    sample_rate:     Optional[int] = None
    bits_per_sample: Optional[int] = None
    lossless:        bool = False
    picture:         Optional[bytes] = field(default=None, repr=False, compare=False)
    picture_mime:    Optional[str]   = field(default=None, repr=False, compare=False)


def index_by_path(songs) -> Dict[str, Song]:
    """Map path → Song; later duplicates never shadow the first."""
    table: Dict[str, Song] = {}
    for s in songs:
        table.setdefault(s.path, s)
    return table

# ────────────────────────── stats ────────────────────────────
@dataclass(frozen=True)
class PlayHistoryEntry:
    path:      str
    timestamp: float            # unix seconds


@dataclass
class Stats:
    total_time:   int = 0
    play_history: List[PlayHistoryEntry] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalTime":   self.total_time,
            "playHistory": [{"path": e.path, "timestamp": e.timestamp}
                            for e in self.play_history],
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Stats":
        if not isinstance(data, dict):
            return cls()
        history = []
        for rec in data.get("playHistory") or []:
            try:
                history.append(PlayHistoryEntry(str(rec["path"]), float(rec["timestamp"])))
            except (KeyError, TypeError, ValueError):
                continue
        try:
            total = int(float(data.get("totalTime") or 0))
        except (OverflowError, TypeError, ValueError):
            total = 0
        return cls(total_time=total, play_history=history)

# ────────────────────────── playback ─────────────────────────
class RepeatMode(enum.IntEnum):
    OFF = 0
    ALL = 1
    ONE = 2

    def cycled(self) -> "RepeatMode":
        return RepeatMode((self + 1) % 3)


class PlayState(enum.Enum):
    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED  = "paused"

# ────────────────────────── playlists ────────────────────────
@dataclass(frozen=True)
class UserPlaylist:
    id:    str
    name:  str
    songs: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "songs": list(self.songs)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserPlaylist":
        seen: List[str] = []
        for p in data.get("songs") or []:
            if p not in seen:
                seen.append(p)
        return cls(id=str(data["id"]), name=str(data.get("name", "")), songs=tuple(seen))


class SmartKind(enum.Enum):
    FAVORITES       = "favorites"
    TOP_TRACKS      = "top-tracks"
    RECENT          = "recent"
    RECOMMENDATIONS = "recommendations"


SMART_NAMES = {
    SmartKind.FAVORITES:       "Favorites",
    SmartKind.TOP_TRACKS:      "Top Tracks",
    SmartKind.RECENT:          "Recently Played",
    SmartKind.RECOMMENDATIONS: "Discovery",
}


@dataclass(frozen=True)
class SmartPlaylist:
    kind: SmartKind

    @property
    def id(self) -> str:
        return self.kind.value

    @property
    def name(self) -> str:
        return SMART_NAMES[self.kind]


SMART_PLAYLISTS: Tuple[SmartPlaylist, ...] = tuple(SmartPlaylist(k) for k in SmartKind)

Playlist = Union[UserPlaylist, SmartPlaylist]
