#!/usr/bin/env python3
# scanner.py – rev-s10  (2026-10-13)
"""
Music-folder discovery & tag reading.

• Walks a folder recursively for .flac / .mp3 / .ogg / .opus / .m4a / .wav
• Tags via mutagen (easy interface); falls back to file / folder names
• Keeps the largest embedded picture (front cover preferred) as raw bytes
• A file that fails to parse is logged and skipped, never fatal
"""

from __future__ import annotations
import base64, io, logging, os
from pathlib import Path
from typing  import Iterable, List, Optional, Tuple

from mutagen      import File as MFile, MutagenError
from mutagen.flac import Picture
from mutagen.id3  import ID3
from PIL          import Image, UnidentifiedImageError

from models import Song

logger = logging.getLogger(__name__)

AUDIO_EXTS = {".flac", ".mp3", ".ogg", ".opus", ".m4a", ".wav"}
LOSSLESS_EXTS = {".flac", ".wav"}

# ───────────────────────── cover art ─────────────────────────
def _probe(data: bytes, mime: str, prio: int):
    area = 0
    try:
        with Image.open(io.BytesIO(data)) as im:
            area = im.width * im.height
    except (UnidentifiedImageError, OSError):
        pass
    return (prio, area, len(data), data, mime)


def _pictures(audio) -> Iterable[Tuple[bytes, str, int]]:
    tags = getattr(audio, "tags", None)
    if isinstance(tags, ID3):
        for ap in tags.getall("APIC"):
            yield ap.data, ap.mime or "image/jpeg", ap.type
    for pic in getattr(audio, "pictures", None) or []:
        yield pic.data, pic.mime or "image/jpeg", getattr(pic, "type", 3)
    # ogg/opus keep FLAC picture blocks base64-encoded in a comment
    if tags is not None and hasattr(tags, "get") and not isinstance(tags, ID3):
        for raw in tags.get("metadata_block_picture", []) or []:
            try:
                pic = Picture(base64.b64decode(raw))
            except (ValueError, MutagenError):
                continue
            yield pic.data, pic.mime or "image/jpeg", pic.type
        for cov in tags.get("covr", []) or []:          # mp4
            yield bytes(cov), "image/png" if getattr(cov, "imageformat", 0) == 14 else "image/jpeg", 3


def extract_picture(audio) -> Tuple[Optional[bytes], Optional[str]]:
    cand = [_probe(d, m, 2 if t == 3 else 1) for d, m, t in _pictures(audio)]
    if not cand:
        return None, None
    cand.sort(key=lambda c: c[:3], reverse=True)
    *_, data, mime = cand[0]
    return data, mime

# ───────────────────────── tags ──────────────────────────────
def _first(tags, *keys) -> str:
    if not tags:
        return ""
    for k in keys:
        try:
            val = tags.get(k)
        except (KeyError, ValueError):
            continue
        if val:
            return str(val[0] if isinstance(val, list) else val).strip()
    return ""


def read_song(path: Path) -> Optional[Song]:
    """Return a Song for *path*, or None if mutagen does not recognise it."""
    audio = MFile(str(path))
    if audio is None:
        return None
    easy = MFile(str(path), easy=True)
    tags = getattr(easy, "tags", None)
    info = audio.info
    picture, mime = extract_picture(audio)
    bits = getattr(info, "bits_per_sample", None)
    bitrate = getattr(info, "bitrate", None)
    return Song(
        path            = str(path),
        title           = _first(tags, "title") or path.name,
        artist          = _first(tags, "artist") or "Unknown Artist",
        album           = _first(tags, "album") or path.parent.name,
        composer        = _first(tags, "composer"),
        duration        = float(getattr(info, "length", 0.0) or 0.0),
        bitrate         = int(bitrate) if bitrate else None,
        sample_rate     = getattr(info, "sample_rate", None),
        bits_per_sample = bits,
        lossless        = path.suffix.lower() in LOSSLESS_EXTS or bool(bits and not bitrate),
        picture         = picture,
        picture_mime    = mime,
    )

# ───────────────────────── public API ────────────────────────
def _walk(root: Path) -> Iterable[Path]:
    def onerror(err: OSError):
        logger.warning("cannot read %s: %s", err.filename, err.strerror)
    for dirpath, dirnames, filenames in os.walk(root, onerror=onerror):
        dirnames.sort(key=str.lower)
        for name in sorted(filenames, key=str.lower):
            if Path(name).suffix.lower() in AUDIO_EXTS:
                yield Path(dirpath) / name


def is_readable(root) -> bool:
    root = Path(root)
    return root.is_dir() and os.access(root, os.R_OK | os.X_OK)


def scan_folder(root) -> List[Song]:
    """Return Song objects for every playable file under *root*."""
    root = Path(root).resolve()
    if not is_readable(root):
        logger.warning("music folder not readable: %s", root)
        return []
    songs: List[Song] = []
    for p in _walk(root):
        try:
            song = read_song(p)
        except (MutagenError, OSError, ValueError) as e:
            logger.warning("skipping %s: %s", p, e)
            continue
        if song is not None:
            songs.append(song)
    logger.info("scanned %s: %d songs", root, len(songs))
    return songs
