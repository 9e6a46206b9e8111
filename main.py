#!/usr/bin/env python3
# main.py – rev-w51  (2026-10-18)
"""
Waveshelf
─────────
Local music-folder player (PySide6 + libVLC).

Key features
• Scan a music folder (FLAC / MP3 / Ogg / Opus / M4A / WAV) into a library
• Queue playback with shuffle (current track pinned first) and repeat off/all/one
• Listening history + total listening time, written through on every change
• Smart playlists: Favorites, Top Tracks, Recently Played, Discovery
• User playlists, dashboard with time-window filter, synced lyrics (LRCLIB)
• Global media keys, mini-player mode
"""

from __future__ import annotations
import logging, os, sys, time
from typing import List, Optional

from PySide6.QtWidgets import (
    QApplication, QWidget, QListWidget, QListWidgetItem, QVBoxLayout,
    QHBoxLayout, QSplitter, QPushButton, QFileDialog, QInputDialog,
    QLabel, QMessageBox, QFrame, QComboBox, QSlider, QDialog,
    QDialogButtonBox, QLineEdit, QStackedWidget
)
from PySide6.QtGui  import QPalette, QPixmap
from PySide6.QtCore import Qt, QObject, QThread, QTimer, Signal
try:
    import keyboard
except Exception:           # needs root on Linux, may be missing on macOS
    keyboard = None

import lyrics, smart, storage
from audio     import VLCAudio
from models    import RepeatMode, SmartPlaylist, Song, UserPlaylist
from platforms import Platform, PlayerSession, search
from scanner   import is_readable

logger = logging.getLogger("waveshelf")

# ═════════════════ 1. constants & helpers ═════════════════
TICKS, MAX_SECONDS = 10, 86_400   # slider: 100 ms per tick; clamp 24 h

# global hot-keys → controller action
MEDIA_KEYS = {
    "play/pause media":    "toggle_play",
    "next track":          "next",
    "previous track":      "prev",
}

WINDOW_LABELS = [("today", "Today"), ("7d", "7 Days"), ("28d", "28 Days"),
                 ("90d", "90 Days"), ("1y", "1 Year"), ("lifetime", "Lifetime")]
REPEAT_LABELS = {RepeatMode.OFF: "Repeat: off", RepeatMode.ALL: "Repeat: all",
                 RepeatMode.ONE: "Repeat: one"}

VIEW_DASHBOARD, VIEW_LIBRARY, VIEW_LYRICS = "dashboard", "library", "lyrics"


def fmt_time(s: float) -> str:
    s = int(max(0, s))
    return f"{s//60:02}:{s%60:02}"


def strip_dpr(px: QPixmap) -> QPixmap:
    dpr = px.devicePixelRatioF()
    if dpr == 1.0: return px
    cp = px.scaled(int(px.width()*dpr), int(px.height()*dpr),
                   Qt.IgnoreAspectRatio, Qt.SmoothTransformation)
    cp.setDevicePixelRatio(1.0)
    return cp


def song_label(s: Song) -> str:
    return f"{s.artist} – {s.title}"


class TimelineSlider(QSlider):
    """Clickable / draggable / wheel-seek slider (Ctrl = ±1 s, else ±5 s)."""
    jumpRequested = Signal(float)          # seconds (float)

    def __init__(self,*a,**k):
        super().__init__(*a,**k); self.setOrientation(Qt.Horizontal)

    def _val(self,x:int)->int:
        r = max(0, min(x/max(1,self.width()), 1))
        return int(self.minimum() + r*(self.maximum()-self.minimum()))

    def mousePressEvent(self,e):
        if e.button()==Qt.LeftButton:
            self.setSliderDown(True)
            v=self._val(int(e.position().x()))
            self.setValue(v); self.jumpRequested.emit(v/TICKS); e.accept()
        super().mousePressEvent(e)

    def mouseMoveEvent(self,e):
        if self.isSliderDown():
            v=self._val(int(e.position().x()))
            self.setValue(v); self.jumpRequested.emit(v/TICKS); e.accept()
        super().mouseMoveEvent(e)

    def mouseReleaseEvent(self,e):
        if self.isSliderDown(): self.setSliderDown(False); e.accept()
        super().mouseReleaseEvent(e)

    def wheelEvent(self,e):
        step = 1 if e.modifiers() & Qt.ControlModifier else 5
        delta = step * (e.angleDelta().y() // 120)
        self.setValue(max(self.minimum(), min(self.maximum(), self.value()+delta*TICKS)))
        self.jumpRequested.emit(self.value()/TICKS); e.accept()

# ═════════════════ 2. desktop platform ═════════════════
class DesktopPlatform(Platform):
    def __init__(self, store: storage.JsonStore):
        self.store  = store
        self.window: Optional[QWidget] = None

    def select_folder(self) -> Optional[str]:
        return QFileDialog.getExistingDirectory(self.window, "Choose music folder") or None

    def resize(self, width: int, height: int) -> None:
        if self.window is not None:
            self.window.setMinimumSize(0, 0); self.window.resize(width, height)

    def confirm(self, message: str) -> bool:
        return QMessageBox.question(self.window, "Waveshelf", message,
                                    QMessageBox.Yes|QMessageBox.No) == QMessageBox.Yes

    def prompt(self, message: str) -> Optional[str]:
        text, ok = QInputDialog.getText(self.window, "Waveshelf", message)
        return text if ok else None

    def notify(self, message: str) -> None:
        QMessageBox.information(self.window, "Waveshelf", message)

# ═════════════════ 3. background work ═════════════════
class ScanWorker(QThread):
    scanned = Signal(list)

    def __init__(self, platform: Platform, folder: str, parent=None):
        super().__init__(parent)
        self._platform, self._folder = platform, folder

    def run(self):
        self.scanned.emit(self._platform.scan_folder(self._folder))


class LyricsBridge(QObject):
    """Hands worker-thread lyrics results to the GUI thread."""
    arrived = Signal(object, object)       # Song, Lyrics | None

# ═════════════════ 4. AddSongsDialog ═════════════════
class AddSongsDialog(QDialog):
    def __init__(self, session: PlayerSession, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Add songs"); self.resize(500,450)
        self._session = session
        self.search = QLineEdit(placeholderText="Filter library...")
        self.list = QListWidget(); self.list.setSelectionMode(QListWidget.ExtendedSelection)
        buttons = QDialogButtonBox(QDialogButtonBox.Ok|QDialogButtonBox.Cancel)
        lay = QVBoxLayout(self); lay.addWidget(self.search); lay.addWidget(self.list,1); lay.addWidget(buttons)
        self.search.textChanged.connect(self._fill)
        buttons.accepted.connect(self.accept); buttons.rejected.connect(self.reject)
        self._fill("")

    def _fill(self, text: str):
        self.list.clear()
        for s in self._session.search(text):
            it = QListWidgetItem(song_label(s)); it.setData(Qt.UserRole, s)
            self.list.addItem(it)

    def songs(self) -> List[Song]:
        return [it.data(Qt.UserRole) for it in self.list.selectedItems()]

# ═════════════════ 5. MainWindow ═════════════════
class MainWindow(QWidget):
    def __init__(self, platform: DesktopPlatform):
        super().__init__()
        self.setWindowTitle("Waveshelf"); self.resize(1000,800)
        self._platform = platform; platform.window = self
        self._audio   = VLCAudio()
        self.session  = PlayerSession(platform, self._audio,
                                      on_track_change=self._on_track_change,
                                      on_state_change=self._refresh_transport)
        self._lyrics  = lyrics.LyricsFetcher()
        self._bridge  = LyricsBridge(); self._bridge.arrived.connect(self._on_lyrics)
        self._lyric_lines: List[lyrics.LyricLine] = []
        self._lyric_row = -1
        self._view    = VIEW_DASHBOARD
        self._open_playlist = None
        self._scan_th: Optional[ScanWorker] = None
        self._last_media_evt = 0.0

        self._build_widgets(); self._wire_signals()
        self._refresh_sidebar(); self._show_view(VIEW_DASHBOARD); self._refresh_transport()
        QTimer(self,interval=100,timeout=self._tick).start()
        self._bind_media_keys()
        if self.session.folder: self._start_scan()

    # ---------- UI
    def _build_widgets(self):
        self.sidebar = QListWidget(frameShape=QFrame.NoFrame)
        self.btn_scan, self.btn_new, self.btn_delete = (QPushButton(t) for t in ("Scan folder","New playlist","Delete playlist"))
        side = QWidget(); sv = QVBoxLayout(side); sv.setContentsMargins(0,0,0,0)
        sv.addWidget(self.sidebar,1); sv.addWidget(self.btn_scan); sv.addWidget(self.btn_new); sv.addWidget(self.btn_delete)

        # dashboard page
        self.cmb_window = QComboBox(); [self.cmb_window.addItem(lbl, key) for key,lbl in WINDOW_LABELS]
        self.cmb_window.setCurrentIndex(len(WINDOW_LABELS)-1)
        self.lbl_summary = QLabel(); self.top_list = QListWidget(frameShape=QFrame.NoFrame)
        dash = QWidget(); dv = QVBoxLayout(dash)
        dh = QHBoxLayout(); dh.addWidget(self.lbl_summary,1); dh.addWidget(self.cmb_window)
        dv.addLayout(dh); dv.addWidget(QLabel("Top songs")); dv.addWidget(self.top_list,1)

        # song list page (library / playlists)
        self.lbl_header = QLabel(); f=self.lbl_header.font(); f.setPointSize(f.pointSize()+4); f.setBold(True); self.lbl_header.setFont(f)
        self.lbl_sub = QLabel()
        self.search = QLineEdit(placeholderText="Search title or artist...")
        self.btn_add = QPushButton("Add songs"); self.btn_fav_sel = QPushButton("♥ Toggle favorite")
        self.songs_list = QListWidget(frameShape=QFrame.NoFrame); self.songs_list.setSelectionMode(QListWidget.ExtendedSelection)
        lib = QWidget(); lv = QVBoxLayout(lib)
        lh = QHBoxLayout(); lh.addWidget(self.search,1); lh.addWidget(self.btn_add); lh.addWidget(self.btn_fav_sel)
        lv.addWidget(self.lbl_header); lv.addWidget(self.lbl_sub); lv.addLayout(lh); lv.addWidget(self.songs_list,1)

        # lyrics page
        self.lbl_lyr_head = QLabel(alignment=Qt.AlignCenter); self.lbl_lyr_head.setFont(self.lbl_header.font())
        self.lyr_list = QListWidget(frameShape=QFrame.NoFrame); self.lyr_list.setSelectionMode(QListWidget.NoSelection)
        self.lyr_plain = QLabel(alignment=Qt.AlignHCenter|Qt.AlignTop); self.lyr_plain.setWordWrap(True)
        lyr = QWidget(); yv = QVBoxLayout(lyr); yv.addWidget(self.lbl_lyr_head); yv.addWidget(self.lyr_list,1); yv.addWidget(self.lyr_plain,1)

        self.pages = QStackedWidget(); [self.pages.addWidget(w) for w in (dash, lib, lyr)]
        split = QSplitter(Qt.Horizontal); split.addWidget(side); split.addWidget(self.pages); split.setSizes([220,780])

        # transport
        self.lbl_cover = QLabel(alignment=Qt.AlignCenter); self.lbl_cover.setFixedSize(64,64); self.lbl_cover.setStyleSheet("background:palette(Base);")
        self.lbl_now = QLabel("Nothing playing")
        self.btn_prev, self.btn_play, self.btn_next = (QPushButton(t) for t in ("⏮","▶","⏭"))
        self.btn_shuffle = QPushButton("Shuffle"); self.btn_shuffle.setCheckable(True)
        self.btn_repeat  = QPushButton(REPEAT_LABELS[RepeatMode.OFF])
        self.btn_fav     = QPushButton("♡"); self.btn_lyrics = QPushButton("Lyrics"); self.btn_mini = QPushButton("Mini")
        self.slider   = TimelineSlider(); self.slider.setEnabled(False)
        self.lbl_time = QLabel("00:00 / 00:00",alignment=Qt.AlignRight|Qt.AlignVCenter); self.lbl_time.setFixedWidth(110)
        self.vol = QSlider(Qt.Horizontal); self.vol.setRange(0,100); self.vol.setValue(100); self.vol.setFixedWidth(100)
        tb = QHBoxLayout()
        [tb.addWidget(w) for w in (self.lbl_cover, self.lbl_now)]; tb.addStretch()
        [tb.addWidget(w) for w in (self.btn_fav, self.btn_shuffle, self.btn_prev, self.btn_play, self.btn_next,
                                   self.btn_repeat, self.btn_lyrics, self.btn_mini, QLabel("Vol"), self.vol)]
        pb = QHBoxLayout(); pb.addWidget(self.slider,1); pb.addWidget(self.lbl_time)

        root = QVBoxLayout(self); root.addWidget(split,1); root.addLayout(tb); root.addLayout(pb)
        self._split = split

    def _wire_signals(self):
        ctl = self.session.player
        self.sidebar.currentRowChanged.connect(lambda *_: self._on_sidebar())
        self.btn_scan.clicked.connect(self._choose_folder)
        self.btn_new.clicked.connect(self._create_playlist)
        self.btn_delete.clicked.connect(self._delete_playlist)
        self.btn_add.clicked.connect(self._add_songs)
        self.btn_fav_sel.clicked.connect(self._favorite_selected)
        self.cmb_window.currentIndexChanged.connect(lambda *_: self._refresh_dashboard())
        self.search.textChanged.connect(lambda *_: self._refresh_songs())
        self.songs_list.itemDoubleClicked.connect(self._play_item)
        self.top_list.itemDoubleClicked.connect(lambda it: it.data(Qt.UserRole) and ctl.play_song(it.data(Qt.UserRole)))
        self.btn_play.clicked.connect(ctl.toggle_play)
        self.btn_next.clicked.connect(lambda: ctl.next())
        self.btn_prev.clicked.connect(ctl.prev)
        self.btn_shuffle.clicked.connect(ctl.toggle_shuffle)
        self.btn_repeat.clicked.connect(ctl.toggle_repeat)
        self.btn_fav.clicked.connect(self._toggle_current_favorite)
        self.btn_lyrics.clicked.connect(lambda: self._show_view(VIEW_LIBRARY if self._view == VIEW_LYRICS else VIEW_LYRICS))
        self.btn_mini.clicked.connect(self._toggle_mini)
        self.slider.jumpRequested.connect(ctl.seek)
        self.vol.valueChanged.connect(lambda v: ctl.set_volume(v/100))

    # ═════════════════ 6. sidebar & views ═════════════════
    def _refresh_sidebar(self):
        self.sidebar.blockSignals(True); self.sidebar.clear()
        for key,label in ((VIEW_DASHBOARD,"Dashboard"),(VIEW_LIBRARY,"Library"),(VIEW_LYRICS,"Lyrics")):
            it = QListWidgetItem(label); it.setData(Qt.UserRole, key); self.sidebar.addItem(it)
        for pl in list(self.session.smart_playlists) + list(self.session.playlists):
            prefix = "✦ " if isinstance(pl, SmartPlaylist) else "♫ "
            it = QListWidgetItem(prefix + pl.name); it.setData(Qt.UserRole, pl); self.sidebar.addItem(it)
        self.sidebar.blockSignals(False)

    def _on_sidebar(self):
        it = self.sidebar.currentItem()
        if it is None: return
        target = it.data(Qt.UserRole)
        if isinstance(target, str):
            self._open_playlist = None; self._show_view(target)
        else:
            self._open_playlist = target; self._show_view(VIEW_LIBRARY)

    def _show_view(self, view: str):
        self._view = view
        self.pages.setCurrentIndex({VIEW_DASHBOARD:0, VIEW_LIBRARY:1, VIEW_LYRICS:2}[view])
        if view == VIEW_DASHBOARD: self._refresh_dashboard()
        elif view == VIEW_LIBRARY: self._refresh_songs()
        else: self._refresh_lyrics_header()

    def _visible_songs(self) -> List[Song]:
        if self._open_playlist is None:
            return self.session.search(self.search.text())
        return search(self.session.songs_in(self._open_playlist), self.search.text())

    def _refresh_songs(self):
        pl = self._open_playlist
        if pl is None:
            self.lbl_header.setText("Library"); songs_all = self.session.catalog
        else:
            kind = "SMART PLAYLIST" if isinstance(pl, SmartPlaylist) else "USER PLAYLIST"
            self.lbl_header.setText(f"{pl.name}  ·  {kind}"); songs_all = self.session.songs_in(pl)
        self.lbl_sub.setText(f"{len(songs_all)} songs  ·  {smart.format_duration(songs_all)}")
        self.btn_add.setVisible(isinstance(pl, UserPlaylist))
        cur = self.session.player.current_song
        self.songs_list.clear()
        for s in self._visible_songs():
            fav = "♥ " if self.session.is_favorite(s) else ""
            it = QListWidgetItem(f"{fav}{song_label(s)}   [{fmt_time(s.duration)}]"); it.setData(Qt.UserRole, s)
            if cur and s.path == cur.path:
                f=it.font(); f.setBold(True); it.setFont(f)
            self.songs_list.addItem(it)

    def _refresh_dashboard(self):
        d = self.session.dashboard(self.cmb_window.currentData())
        self.lbl_summary.setText(f"{d.total_hours} h listened  ·  {d.total_tracks} tracks  ·  {len(d.history)} plays")
        self.top_list.clear()
        if not d.top_songs:
            self.top_list.addItem("No plays in this period yet.")
        for i, r in enumerate(d.top_songs, 1):
            it = QListWidgetItem(f"{i:>2}. {song_label(r.song)}   {r.count} plays"); it.setData(Qt.UserRole, r.song)
            self.top_list.addItem(it)

    # ═════════════════ 7. folder & playlists ═════════════════
    def _choose_folder(self):
        if self.session.choose_folder(): self._start_scan()

    def _start_scan(self):
        folder = self.session.folder
        if not folder or (self._scan_th and self._scan_th.isRunning()): return
        if not is_readable(folder):
            self.session.rescan(); return        # notifies + empties catalog
        self.btn_scan.setEnabled(False); self.btn_scan.setText("Scanning…")
        self._scan_th = ScanWorker(self._platform, folder, self)
        self._scan_th.scanned.connect(self._on_scanned); self._scan_th.start()

    def _on_scanned(self, songs: list):
        self.btn_scan.setEnabled(True); self.btn_scan.setText("Scan folder")
        self.session.set_catalog(songs)
        if self._view == VIEW_DASHBOARD and songs: self._show_view(VIEW_LIBRARY)
        else: self._show_view(self._view)

    def _create_playlist(self):
        if self.session.create_playlist(): self._refresh_sidebar()

    def _delete_playlist(self):
        pl = self._open_playlist
        if not isinstance(pl, UserPlaylist): return
        if self.session.delete_playlist(pl.id):
            self._open_playlist = None; self._refresh_sidebar(); self._show_view(VIEW_DASHBOARD)

    def _add_songs(self):
        pl = self._open_playlist
        if not isinstance(pl, UserPlaylist): return
        dlg = AddSongsDialog(self.session, self)
        if dlg.exec() != QDialog.Accepted: return
        picked = dlg.songs()
        if not picked: return
        self._open_playlist = self.session.add_to_playlist(pl.id, picked) or pl
        self._refresh_songs()

    def _favorite_selected(self):
        for it in self.songs_list.selectedItems():
            self.session.toggle_favorite(it.data(Qt.UserRole).path)
        self._refresh_songs(); self._refresh_transport()

    def _toggle_current_favorite(self):
        self.session.toggle_favorite(); self._refresh_transport()
        if self._view == VIEW_LIBRARY: self._refresh_songs()

    # ═════════════════ 8. playback helpers ═════════════════
    def _play_item(self, it: QListWidgetItem):
        ctx = None if self._open_playlist is None else self.session.songs_in(self._open_playlist)
        self.session.player.play_song(it.data(Qt.UserRole), ctx)

    def _toggle_mini(self):
        mini = self.session.toggle_mini_mode()
        self._split.setVisible(not mini); self.btn_mini.setText("Full" if mini else "Mini")

    def _refresh_transport(self):
        ctl = self.session.player; cur = ctl.current_song
        self.btn_play.setText("⏸" if ctl.is_playing else "▶")
        self.btn_shuffle.setChecked(ctl.queue.shuffle)
        self.btn_repeat.setText(REPEAT_LABELS[ctl.queue.repeat])
        self.btn_fav.setText("♥" if self.session.is_favorite(cur) else "♡")
        self.lbl_now.setText(song_label(cur) if cur else "Nothing playing")
        self.slider.setEnabled(ctl.has_track)

    # ═════════════════ 9. lyrics ═════════════════
    def _refresh_lyrics_header(self):
        cur = self.session.player.current_song
        self.lbl_lyr_head.setText(f"{cur.title}\n{cur.artist}" if cur else "Play a song to see lyrics")

    def _request_lyrics(self, song: Song):
        self._lyric_lines, self._lyric_row = [], -1
        self.lyr_list.clear(); self.lyr_list.hide()
        self.lyr_plain.show(); self.lyr_plain.setText("Searching for lyrics...")
        self._lyrics.request(song, self._bridge.arrived.emit)

    def _on_lyrics(self, song: Song, result: Optional[lyrics.Lyrics]):
        cur = self.session.player.current_song
        if cur is None or cur.path != song.path: return      # late result for an old track
        if result is None:
            self.lyr_plain.setText(lyrics.NOT_FOUND); return
        if result.is_synced:
            self._lyric_lines = result.synced
            self.lyr_list.addItems([l.text for l in result.synced])
            self.lyr_plain.hide(); self.lyr_list.show()
        else:
            self.lyr_plain.setText(result.plain or "Lyrics format not supported")

    def _highlight_lyric(self, seconds: float):
        if not self._lyric_lines: return
        row = lyrics.active_line(self._lyric_lines, seconds)
        if row == self._lyric_row: return
        for r, bold in ((self._lyric_row, False), (row, True)):
            if 0 <= r < self.lyr_list.count():
                it = self.lyr_list.item(r); f = it.font(); f.setBold(bold); it.setFont(f)
                it.setForeground(self.palette().color(QPalette.Highlight) if bold else self.palette().color(QPalette.Text))
        self._lyric_row = row
        if row >= 0: self.lyr_list.scrollToItem(self.lyr_list.item(row), QListWidget.PositionAtCenter)

    # ═════════════════ 10. controller callbacks ═════════════════
    def _on_track_change(self):
        cur = self.session.player.current_song
        if cur is None: return
        pix = QPixmap()
        if cur.picture and pix.loadFromData(cur.picture):
            self.lbl_cover.setPixmap(strip_dpr(pix).scaled(64,64,Qt.KeepAspectRatio,Qt.SmoothTransformation))
        else:
            self.lbl_cover.setPixmap(QPixmap())
        self._refresh_transport(); self._refresh_lyrics_header(); self._request_lyrics(cur)
        if self._view == VIEW_LIBRARY: self._refresh_songs()
        elif self._view == VIEW_DASHBOARD: self._refresh_dashboard()

    # ═════════════════ 11. keys ═════════════════
    def keyPressEvent(self, e):
        if self.search.hasFocus(): return super().keyPressEvent(e)
        ctl = self.session.player
        if e.key() == Qt.Key_Space: ctl.toggle_play()
        elif e.key() == Qt.Key_Right: ctl.next()
        elif e.key() == Qt.Key_Left: ctl.prev()
        else: return super().keyPressEvent(e)
        e.accept()

    def _bind_media_keys(self):
        self._hotkey_ids: list = []
        if not keyboard: return
        for alias, action in MEDIA_KEYS.items():
            try:
                hid = keyboard.add_hotkey(alias, lambda a=action: self._on_media_key(a), suppress=False)
                self._hotkey_ids.append(hid)
                logger.info("media key bound: %r", alias)
            except (ValueError, ImportError, OSError) as e:
                logger.warning("media key %r unavailable: %s", alias, e)

    def _on_media_key(self, action: str) -> None:
        """Runs on the keyboard thread; debounce then hop to the GUI thread."""
        now = time.monotonic()
        if now - self._last_media_evt < 0.25:   # 250 ms guard
            return
        self._last_media_evt = now
        QTimer.singleShot(0, self, getattr(self.session.player, action))

    # ═════════════════ 12. timer tick ═════════════════
    def _tick(self):
        self._audio.poll()
        ctl = self.session.player
        if not ctl.has_track: return
        length = max(1, min(MAX_SECONDS, ctl.duration))
        pos = max(0, min(ctl.current_time, length))
        if not self.slider.isSliderDown():
            self.slider.setMaximum(int(length*TICKS)); self.slider.setValue(int(pos*TICKS))
        self.lbl_time.setText(f"{fmt_time(pos)} / {fmt_time(length)}")
        self._highlight_lyric(pos)

    # ═════════════════ 13. close ═════════════════
    def closeEvent(self, e):
        if keyboard:
            for hid in getattr(self, "_hotkey_ids", []):
                try:
                    keyboard.remove_hotkey(hid)
                except (KeyError, ValueError):
                    pass
        if self._scan_th and self._scan_th.isRunning():
            self._scan_th.wait(2000)
        self._lyrics.cancel(); self.session.close(); self._audio.close()
        super().closeEvent(e)

# ═════════════════ 14. entry-point ═════════════════
def main() -> int:
    logging.basicConfig(
        level=os.getenv("WAVESHELF_LOG", "INFO").upper(),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )
    app = QApplication(sys.argv)
    app.setApplicationName("Waveshelf")
    win = MainWindow(DesktopPlatform(storage.JsonStore())); win.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
