#!/usr/bin/env python3
# smart.py – rev-s4  (2026-10-16)
"""
Smart playlists and dashboard numbers, computed on read.

Everything here is a pure function of (stats, favorites, catalog).  Paths
that no longer resolve to a catalog song are dropped silently: songs vanish
from a folder between scans and that is not an error.
"""

from __future__ import annotations
import time
from collections import Counter
from dataclasses import dataclass
from typing  import Dict, Iterable, List, Optional, Sequence, Tuple

from models import (PlayHistoryEntry, Playlist, SmartKind, SmartPlaylist, Song, Stats,
                    UserPlaylist, index_by_path)

SMART_LIMIT     = 30
DASHBOARD_LIMIT = 10
RECENT_WINDOW   = 50        # recommendations skip anything in the last 50 plays

_DAY = 24 * 60 * 60
TIME_WINDOWS: Dict[str, float] = {
    "today":    _DAY,
    "7d":       7 * _DAY,
    "28d":      28 * _DAY,
    "90d":      90 * _DAY,
    "1y":       365 * _DAY,
    "lifetime": float("inf"),
}


def _resolve(paths: Iterable[str], catalog: Sequence[Song]) -> List[Song]:
    table = index_by_path(catalog)
    return [table[p] for p in paths if p in table]


def _ranked(history: Iterable[PlayHistoryEntry]) -> List[Tuple[str, int]]:
    # Counter keeps first-seen order and most_common() sorts stably
    return Counter(e.path for e in history).most_common()

# ────────────────────────── the four smart views ─────────────
def favorites(favs: Sequence[str], catalog: Sequence[Song]) -> List[Song]:
    return _resolve(favs, catalog)


def recent(stats: Stats, catalog: Sequence[Song], limit: int = SMART_LIMIT) -> List[Song]:
    table = index_by_path(catalog)
    seen, out = set(), []
    for e in reversed(stats.play_history):
        if e.path in seen or e.path not in table:
            continue
        seen.add(e.path)
        out.append(table[e.path])
        if len(out) == limit:
            break
    return out


def top_tracks(stats: Stats, catalog: Sequence[Song], limit: int = SMART_LIMIT) -> List[Song]:
    ranked = _ranked(stats.play_history)[:limit]
    return _resolve((p for p, _ in ranked), catalog)


def recommendations(stats: Stats, catalog: Sequence[Song],
                    limit: int = SMART_LIMIT) -> List[Song]:
    """Unplayed-lately songs by the single most played artist."""
    table = index_by_path(catalog)
    artists = Counter(table[e.path].artist for e in stats.play_history if e.path in table)
    if not artists:
        return []
    top_artist = artists.most_common(1)[0][0]
    recent_paths = {e.path for e in stats.play_history[-RECENT_WINDOW:]}
    return [s for s in catalog
            if s.artist == top_artist and s.path not in recent_paths][:limit]


def evaluate(playlist: SmartPlaylist, stats: Stats, favs: Sequence[str],
             catalog: Sequence[Song]) -> List[Song]:
    kind = playlist.kind
    if kind is SmartKind.FAVORITES:
        return favorites(favs, catalog)
    if kind is SmartKind.RECENT:
        return recent(stats, catalog)
    if kind is SmartKind.TOP_TRACKS:
        return top_tracks(stats, catalog)
    if kind is SmartKind.RECOMMENDATIONS:
        return recommendations(stats, catalog)
    raise ValueError(f"unknown smart playlist: {kind!r}")


def songs_for(playlist: Playlist, stats: Stats, favs: Sequence[str],
              catalog: Sequence[Song]) -> List[Song]:
    """Members of either playlist variant."""
    if isinstance(playlist, SmartPlaylist):
        return evaluate(playlist, stats, favs, catalog)
    if isinstance(playlist, UserPlaylist):
        return _resolve(playlist.songs, catalog)
    raise ValueError(f"not a playlist: {playlist!r}")

# ────────────────────────── dashboard ────────────────────────
@dataclass(frozen=True)
class RankedSong:
    song:  Song
    count: int


@dataclass(frozen=True)
class Dashboard:
    window:       str
    history:      List[PlayHistoryEntry]
    top_songs:    List[RankedSong]
    total_tracks: int
    total_hours:  float


def filter_history(history: Sequence[PlayHistoryEntry], window: str = "lifetime",
                   now: Optional[float] = None) -> List[PlayHistoryEntry]:
    if window not in TIME_WINDOWS:
        raise ValueError(f"unknown time window: {window!r}")
    if window == "lifetime":
        return list(history)
    now  = time.time() if now is None else now
    span = TIME_WINDOWS[window]
    return [e for e in history if now - e.timestamp < span]


def top_songs(stats: Stats, catalog: Sequence[Song], window: str = "lifetime",
              now: Optional[float] = None, limit: int = DASHBOARD_LIMIT) -> List[RankedSong]:
    table  = index_by_path(catalog)
    ranked = _ranked(filter_history(stats.play_history, window, now))[:limit]
    return [RankedSong(table[p], n) for p, n in ranked if p in table]


def dashboard(stats: Stats, catalog: Sequence[Song], window: str = "lifetime",
              now: Optional[float] = None) -> Dashboard:
    hist = filter_history(stats.play_history, window, now)
    return Dashboard(
        window       = window,
        history      = hist,
        top_songs    = top_songs(stats, catalog, window, now),
        total_tracks = len({e.path for e in hist}),
        total_hours  = round(stats.total_time / 3600, 1),
    )


def format_duration(songs: Sequence[Song]) -> str:
    total = sum(s.duration or 0 for s in songs)
    mins, secs = int(total // 60), int(total % 60)
    return f"{mins} min {secs:02d} sec"
