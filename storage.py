#!/usr/bin/env python3
# storage.py – rev-s9 (2026-10-13)

r"""
Resilient key/value store
═════════════════════════
* One JSON document holds every key (``stats``, ``playlists``,
  ``favorites``, ``musicFolder``)
  – Windows  : %APPDATA%\Waveshelf\appstate.json
  – macOS/*nix: ~/.config/waveshelf/appstate.json
  – WAVESHELF_CONFIG_DIR overrides both
* Every ``set()`` rewrites the document atomically (tmp + replace) and keeps
  the previous version as appstate.bak; a corrupt file rolls back to it.
"""

from __future__ import annotations
import copy, json, logging, os, shutil, threading
from pathlib import Path
from typing  import Any, Dict, Optional

logger = logging.getLogger(__name__)

# ────────────────────────────────────────────────────────────
# 1. resolve canonical config path
# ────────────────────────────────────────────────────────────
def config_dir() -> Path:
    override = os.getenv("WAVESHELF_CONFIG_DIR")
    if override:
        return Path(override)
    if os.name == "nt":
        # %APPDATA% should exist for *all* normal accounts.
        appdata = Path(os.getenv("APPDATA") or Path.home() / "AppData" / "Roaming")
        return appdata / "Waveshelf"
    # Follow XDG spec; ~/.config if XDG_CONFIG_HOME not set.
    return Path(os.getenv("XDG_CONFIG_HOME", Path.home() / ".config")) / "waveshelf"

# ────────────────────────────────────────────────────────────
# 2. atomic writer (+ backup)
# ────────────────────────────────────────────────────────────
def _atomic_write(path: Path, data: Any) -> None:
    """Write *data* as UTF-8 JSON atomically and keep a .bak copy."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(".tmp")
    with tmp.open("w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
        f.flush()
        os.fsync(f.fileno())
    # create/refresh backup *before* replacement
    if path.exists():
        shutil.copy2(path, path.with_suffix(".bak"))
    tmp.replace(path)


def _load_json(path: Path) -> Optional[Dict]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
    return data if isinstance(data, dict) else None

# ────────────────────────────────────────────────────────────
# 3. public API
# ────────────────────────────────────────────────────────────
class JsonStore:
    FILE_NAME = "appstate.json"

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else config_dir() / self.FILE_NAME
        self._lock = threading.Lock()
        self._data = self._load()

    def _load(self) -> Dict[str, Any]:
        data = _load_json(self.path)
        if data is not None:
            return data
        bak = self.path.with_suffix(".bak")
        data = _load_json(bak)
        if data is None:
            return {}
        logger.warning("state file unreadable, restored %s", bak)
        # restore working copy
        shutil.copy2(bak, self.path)
        return data

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            if key not in self._data:
                return default
            return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = copy.deepcopy(value)
            try:
                _atomic_write(self.path, self._data)
            except OSError:
                logger.exception("could not write %s", self.path)


class MemoryStore:
    """Same interface as JsonStore, nothing touches disk."""

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self._data = copy.deepcopy(data) if data else {}
        self.writes = 0

    def get(self, key: str, default: Any = None) -> Any:
        return copy.deepcopy(self._data.get(key, default))

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)
        self.writes += 1
