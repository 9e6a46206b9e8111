import threading
from unittest import TestCase

from models import PlayHistoryEntry, Stats
from stats import STORE_KEY, StatsRecorder, TickTask
from storage import MemoryStore

from fakes import ManualTick


class StatsRecorderTests(TestCase):
    def setUp(self):
        self.store = MemoryStore({STORE_KEY: {
            "totalTime": 10,
            "playHistory": [{"path": "/m/a.flac", "timestamp": 1.0}],
        }})
        self.ticks = []
        self.rec = StatsRecorder(self.store, clock=lambda: 99.0,
                                 tick_factory=lambda cb: self.ticks.append(ManualTick(cb)) or self.ticks[-1])

    def test_loads_prior_state(self):
        self.assertEqual(self.rec.total_time, 10)
        self.assertEqual(self.rec.history, [PlayHistoryEntry("/m/a.flac", 1.0)])

    def test_missing_key_means_empty(self):
        rec = StatsRecorder(MemoryStore())
        self.assertEqual(rec.snapshot(), Stats())

    def test_record_start_writes_through(self):
        writes = self.store.writes
        self.rec.record_start("/m/b.flac")
        self.assertEqual(self.store.writes, writes + 1)
        saved = self.store.get(STORE_KEY)
        self.assertEqual(saved["playHistory"][-1], {"path": "/m/b.flac", "timestamp": 99.0})

    def test_each_tick_persisted(self):
        self.rec.playing_changed(True)
        self.ticks[0].fire(2)
        self.assertEqual(self.store.get(STORE_KEY)["totalTime"], 12)

    def test_playing_changed_is_idempotent(self):
        self.rec.playing_changed(True)
        self.rec.playing_changed(True)
        self.assertEqual(len(self.ticks), 1)
        self.rec.playing_changed(False)
        self.rec.playing_changed(False)
        self.assertTrue(self.ticks[0].cancelled)
        self.assertFalse(self.rec.ticking)

    def test_snapshot_is_a_copy(self):
        snap = self.rec.snapshot()
        snap.play_history.clear()
        self.assertEqual(len(self.rec.history), 1)

    def test_malformed_history_entries_skipped(self):
        store = MemoryStore({STORE_KEY: {"totalTime": 3, "playHistory": [
            {"path": "/m/a.flac"}, {"path": "/m/b.flac", "timestamp": 5}]}})
        rec = StatsRecorder(store)
        self.assertEqual([e.path for e in rec.history], ["/m/b.flac"])

    def test_malformed_total_time_tolerated(self):
        rec = StatsRecorder(MemoryStore({STORE_KEY: {"totalTime": "12.5", "playHistory": []}}))
        self.assertEqual(rec.total_time, 12)
        rec = StatsRecorder(MemoryStore({STORE_KEY: {"totalTime": "lots", "playHistory": []}}))
        self.assertEqual(rec.total_time, 0)
        rec = StatsRecorder(MemoryStore({STORE_KEY: {"totalTime": "inf", "playHistory": []}}))
        self.assertEqual(rec.total_time, 0)


class TickTaskTests(TestCase):
    def test_fires_until_cancelled(self):
        hits = threading.Event()
        count = []

        def cb():
            count.append(1)
            if len(count) >= 2:
                hits.set()

        task = TickTask(cb, interval=0.01).start()
        self.assertTrue(hits.wait(2))
        task.cancel()
        self.assertTrue(task.cancelled)

    def test_cancel_joins_thread(self):
        task = TickTask(lambda: None, interval=30).start()
        task.cancel()
        self.assertFalse(task._th.is_alive())

    def test_cancel_before_start(self):
        task = TickTask(lambda: None)
        task.cancel()
        self.assertTrue(task.cancelled)
