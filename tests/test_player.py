import random
from unittest import TestCase

from models import PlayState, RepeatMode
from player import PlaybackController
from stats import StatsRecorder
from storage import MemoryStore

from fakes import FakeAudio, ManualTick, song

SONGS = [song(n) for n in "abcde"]


class ControllerTestCase(TestCase):
    def setUp(self):
        self.audio = FakeAudio()
        self.ticks = []
        self.store = MemoryStore()
        self.clock = iter(range(1000, 2000)).__next__
        self.rec = StatsRecorder(self.store, clock=lambda: float(self.clock()),
                                 tick_factory=self._tick)
        self.tracks = []
        self.ctl = PlaybackController(self.audio, self.rec, rng=random.Random(4),
                                      on_track_change=lambda: self.tracks.append(self.ctl.current_song))
        self.ctl.catalog = list(SONGS)

    def _tick(self, cb):
        t = ManualTick(cb)
        self.ticks.append(t)
        return t


class PlaySongTests(ControllerTestCase):
    def test_play_song_loads_and_records(self):
        self.assertTrue(self.ctl.play_song(SONGS[1]))
        self.assertEqual(self.audio.loaded, SONGS[1].path)
        self.assertEqual(self.ctl.state, PlayState.PLAYING)
        self.assertEqual(self.ctl.queue.index, 1)
        self.assertEqual([e.path for e in self.rec.history], [SONGS[1].path])
        self.assertEqual(self.tracks, [SONGS[1]])

    def test_play_song_with_context(self):
        ctx = SONGS[2:]
        self.ctl.play_song(SONGS[3], ctx)
        self.assertEqual(self.ctl.queue.linear, tuple(ctx))
        self.assertEqual(self.ctl.queue.index, 1)

    def test_play_song_absent_is_noop(self):
        self.assertFalse(self.ctl.play_song(song("zz")))
        self.assertIsNone(self.audio.loaded)
        self.assertEqual(self.ctl.state, PlayState.STOPPED)
        self.assertEqual(self.rec.history, [])

    def test_play_song_while_shuffled(self):
        self.ctl.toggle_shuffle()
        self.ctl.play_song(SONGS[4])
        self.assertEqual(self.ctl.queue.index, 0)
        self.assertEqual(self.ctl.current_song, SONGS[4])
        self.assertEqual(self.audio.loaded, SONGS[4].path)


class TransportTests(ControllerTestCase):
    def test_toggle_play_without_track(self):
        self.ctl.toggle_play()
        self.assertEqual(self.audio.calls, [])
        self.assertEqual(self.ctl.state, PlayState.STOPPED)

    def test_toggle_play_pause_resume(self):
        self.ctl.play_song(SONGS[0])
        self.ctl.toggle_play()
        self.assertEqual(self.ctl.state, PlayState.PAUSED)
        self.assertEqual(self.audio.calls[-1], ("pause",))
        self.ctl.toggle_play()
        self.assertEqual(self.ctl.state, PlayState.PLAYING)
        self.assertEqual(self.audio.calls[-1], ("play",))

    def test_next_advances(self):
        self.ctl.play_song(SONGS[0])
        self.ctl.next()
        self.assertEqual(self.ctl.current_song, SONGS[1])
        self.assertEqual(len(self.rec.history), 2)

    def test_next_at_end_repeat_off_stops(self):
        self.ctl.play_song(SONGS[-1])
        self.ctl.next()
        self.assertEqual(self.ctl.state, PlayState.STOPPED)
        self.assertEqual(self.ctl.queue.index, len(SONGS) - 1)
        self.assertEqual(self.audio.calls[-1], ("pause",))

    def test_next_at_end_repeat_all_wraps(self):
        self.ctl.play_song(SONGS[-1])
        self.ctl.toggle_repeat()
        self.ctl.next()
        self.assertEqual(self.ctl.queue.index, 0)
        self.assertEqual(self.audio.loaded, SONGS[0].path)

    def test_next_on_empty_queue(self):
        self.ctl.next()
        self.assertEqual(self.audio.calls, [])

    def test_prev_restarts_after_threshold(self):
        self.ctl.play_song(SONGS[2])
        self.audio.current_time = 3.01
        self.ctl.prev()
        self.assertEqual(self.ctl.queue.index, 2)
        self.assertEqual(self.audio.current_time, 0.0)
        self.assertEqual(len(self.rec.history), 1)

    def test_prev_moves_back_before_threshold(self):
        self.ctl.play_song(SONGS[2])
        self.audio.current_time = 2.99
        self.ctl.prev()
        self.assertEqual(self.ctl.current_song, SONGS[1])

    def test_prev_at_start(self):
        self.ctl.play_song(SONGS[0])
        self.ctl.prev()
        self.assertEqual(self.ctl.queue.index, 0)
        self.assertEqual(len(self.rec.history), 1)
        self.ctl.toggle_repeat()
        self.ctl.prev()
        self.assertEqual(self.ctl.queue.index, len(SONGS) - 1)

    def test_seek_updates_time_immediately(self):
        self.ctl.play_song(SONGS[0])
        self.ctl.seek(42.5)
        self.assertEqual(self.audio.current_time, 42.5)
        self.assertEqual(self.ctl.current_time, 42.5)

    def test_set_volume_forwarded(self):
        self.ctl.set_volume(0.25)
        self.assertEqual(self.audio.volume, 0.25)


class EventTests(ControllerTestCase):
    def test_callbacks_installed(self):
        self.ctl.play_song(SONGS[0])
        self.audio.on_time_update(12.0)
        self.audio.on_loaded_metadata(201.0)
        self.assertEqual(self.ctl.current_time, 12.0)
        self.assertEqual(self.ctl.duration, 201.0)

    def test_ended_advances(self):
        self.ctl.play_song(SONGS[0])
        self.audio.on_ended()
        self.assertEqual(self.ctl.current_song, SONGS[1])

    def test_ended_repeat_one_restarts_same_track(self):
        self.ctl.play_song(SONGS[1])
        self.ctl.toggle_repeat(); self.ctl.toggle_repeat()
        self.assertEqual(self.ctl.queue.repeat, RepeatMode.ONE)
        self.audio.current_time = 180.0
        loads = [c for c in self.audio.calls if c[0] == "load"]
        self.audio.on_ended()
        self.assertEqual(self.ctl.queue.index, 1)
        self.assertEqual(self.audio.current_time, 0.0)
        self.assertEqual([c for c in self.audio.calls if c[0] == "load"], loads)
        self.assertEqual(self.ctl.state, PlayState.PLAYING)

    def test_ended_at_last_track_stops(self):
        self.ctl.play_song(SONGS[-1])
        self.audio.on_ended()
        self.assertEqual(self.ctl.state, PlayState.STOPPED)
        self.assertEqual(self.ctl.current_song, SONGS[-1])


class ShuffleToggleTests(ControllerTestCase):
    def _shuffled_from(self, start):
        self.ctl.toggle_shuffle()
        self.ctl.play_song(start)
        return list(self.ctl.queue.shuffled)

    def test_next_walks_shuffled_queue(self):
        order = self._shuffled_from(SONGS[2])
        self.assertEqual(order[0], SONGS[2])
        seen = [self.ctl.current_song]
        for _ in range(len(SONGS) - 1):
            self.ctl.next()
            seen.append(self.ctl.current_song)
        self.assertEqual(seen, order)
        self.assertEqual(self.audio.loaded, order[-1].path)
        self.ctl.toggle_repeat()
        self.ctl.next()
        self.assertEqual(self.ctl.queue.index, 0)
        self.assertEqual(self.ctl.current_song, order[0])
        self.assertEqual(self.audio.loaded, order[0].path)

    def test_prev_wraps_to_end_of_shuffled_queue(self):
        order = self._shuffled_from(SONGS[2])
        self.ctl.toggle_repeat()
        self.ctl.prev()
        self.assertEqual(self.ctl.queue.index, len(SONGS) - 1)
        self.assertEqual(self.ctl.current_song, order[-1])
        self.ctl.prev()
        self.assertEqual(self.ctl.current_song, order[-2])

    def test_on_then_off_returns_to_same_song(self):
        self.ctl.play_song(SONGS[3])
        self.ctl.toggle_shuffle()
        self.assertEqual(self.ctl.current_song, SONGS[3])
        self.ctl.toggle_shuffle()
        self.assertEqual(self.ctl.queue.index, 3)
        self.assertEqual(self.ctl.current_song, SONGS[3])

    def test_toggle_does_not_restart_track(self):
        self.ctl.play_song(SONGS[3])
        before = list(self.audio.calls)
        self.ctl.toggle_shuffle(); self.ctl.toggle_shuffle()
        self.assertEqual(self.audio.calls, before)


class TickTests(ControllerTestCase):
    def test_tick_only_while_playing(self):
        self.ctl.play_song(SONGS[0])
        self.assertEqual(len(self.ticks), 1)
        self.ticks[0].fire(3)
        self.ctl.toggle_play()                      # pause
        self.assertTrue(self.ticks[0].cancelled)
        self.ticks[0].fire(5)
        self.assertEqual(self.rec.total_time, 3)
        self.ctl.toggle_play()                      # resume
        self.assertEqual(len(self.ticks), 2)
        self.ticks[1].fire()
        self.assertEqual(self.rec.total_time, 4)

    def test_track_change_keeps_single_tick(self):
        self.ctl.play_song(SONGS[0])
        self.ctl.next()
        self.assertEqual(len(self.ticks), 1)

    def test_stop_cancels_tick(self):
        self.ctl.play_song(SONGS[-1])
        self.ctl.next()
        self.assertTrue(self.ticks[0].cancelled)
        self.assertFalse(self.rec.ticking)
