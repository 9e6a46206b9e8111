#!/usr/bin/env python3
# lyrics.py – rev-l2  (2026-10-17)
"""
Lyrics lookup against LRCLIB.

``fetch_lyrics`` is the blocking call.  ``LyricsFetcher`` runs it on a worker
thread per request; starting a request for a new song supersedes the old one
and a superseded result is never delivered, even if it arrives last.
"""

from __future__ import annotations
import bisect, itertools, logging, re, threading
from dataclasses import dataclass
from typing  import Callable, List, Optional

import requests

from models import Song

logger = logging.getLogger(__name__)

LRCLIB_URL  = "https://lrclib.net/api/get"
TIMEOUT     = 10
NOT_FOUND   = "Could not find lyrics for this track."
_LRC_LINE   = re.compile(r"\[(\d+):(\d+\.\d+)\](.*)")

_HTTP = requests.Session()
_HTTP.headers["User-Agent"] = "Waveshelf (https://github.com/waveshelf/waveshelf)"


@dataclass(frozen=True)
class LyricLine:
    time: float
    text: str


@dataclass(frozen=True)
class Lyrics:
    synced: List[LyricLine]
    plain:  Optional[str] = None

    @property
    def is_synced(self) -> bool:
        return bool(self.synced)


def parse_synced(text: Optional[str]) -> List[LyricLine]:
    """``[mm:ss.xx]text`` lines → LyricLine list (blank lines dropped)."""
    out: List[LyricLine] = []
    for ln in (text or "").splitlines():
        m = _LRC_LINE.match(ln)
        if not m:
            continue
        words = m.group(3).strip()
        if words:
            out.append(LyricLine(int(m.group(1)) * 60 + float(m.group(2)), words))
    return out


def active_line(lines: List[LyricLine], seconds: float) -> int:
    """Index of the line being sung at *seconds*, -1 before the first."""
    return bisect.bisect_right([l.time for l in lines], seconds) - 1


def fetch_lyrics(song: Song, session: Optional[requests.Session] = None,
                 timeout: float = TIMEOUT) -> Optional[Lyrics]:
    """Blocking lookup; None when not found or on any network failure."""
    params = {
        "artist_name": song.artist,
        "track_name":  song.title,
        "album_name":  song.album,
        "duration":    round(song.duration or 0),
    }
    try:
        r = (session or _HTTP).get(LRCLIB_URL, params=params, timeout=timeout)
        r.raise_for_status()
        data = r.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning("lyrics lookup failed for %s – %s: %s", song.artist, song.title, e)
        return None
    if not isinstance(data, dict):
        return None
    synced = parse_synced(data.get("syncedLyrics"))
    plain  = data.get("plainLyrics")
    if not synced and not plain:
        return None
    return Lyrics(synced=synced, plain=plain)

# ────────────────────────── supersedable requests ───────────
class LyricsRequest:
    def __init__(self, token: int, path: str):
        self.token = token
        self.path  = path
        self._discarded = threading.Event()

    def discard(self):
        self._discarded.set()

    @property
    def discarded(self) -> bool:
        return self._discarded.is_set()


class LyricsFetcher:
    """One live request at a time; older results are dropped on arrival."""

    def __init__(self, fetch: Callable[[Song], Optional[Lyrics]] = fetch_lyrics,
                 spawn: Optional[Callable[[Callable[[], None]], None]] = None):
        self._fetch   = fetch
        self._spawn   = spawn or (lambda fn: threading.Thread(target=fn, daemon=True).start())
        self._tokens  = itertools.count(1)
        self._lock    = threading.Lock()
        self._current: Optional[LyricsRequest] = None

    @property
    def current(self) -> Optional[LyricsRequest]:
        return self._current

    def request(self, song: Song,
                deliver: Callable[[Song, Optional[Lyrics]], None]) -> LyricsRequest:
        with self._lock:
            if self._current is not None:
                self._current.discard()
            req = LyricsRequest(next(self._tokens), song.path)
            self._current = req

        def run():
            try:
                result = self._fetch(song)
            except Exception:
                logger.exception("lyrics worker crashed")
                result = None
            with self._lock:
                stale = req.discarded or self._current is not req
            if stale:
                logger.debug("dropping stale lyrics for %s", song.path)
                return
            deliver(song, result)

        self._spawn(run)
        return req

    def cancel(self):
        with self._lock:
            if self._current is not None:
                self._current.discard()
            self._current = None
