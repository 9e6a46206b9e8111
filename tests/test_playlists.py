from unittest import TestCase

from playlists import FAVORITES_KEY, PLAYLISTS_KEY, Favorites, PlaylistStore
from storage import MemoryStore

from fakes import song

A, B, C = song("a"), song("b"), song("c")


class PlaylistStoreTests(TestCase):
    def setUp(self):
        self.store = MemoryStore()
        self.pls = PlaylistStore(self.store, clock=lambda: 1760000000.123)

    def test_create_trims_and_persists(self):
        pl = self.pls.create("  Road trip ")
        self.assertEqual(pl.name, "Road trip")
        self.assertEqual(pl.id, "pl-1760000000123")
        self.assertEqual(pl.songs, ())
        self.assertEqual(self.store.get(PLAYLISTS_KEY),
                         [{"id": pl.id, "name": "Road trip", "songs": []}])

    def test_create_blank_name_is_noop(self):
        self.assertIsNone(self.pls.create("   "))
        self.assertIsNone(self.pls.create(None))
        self.assertEqual(len(self.pls), 0)
        self.assertEqual(self.store.writes, 0)

    def test_ids_unique_within_same_millisecond(self):
        a = self.pls.create("one")
        b = self.pls.create("two")
        self.assertNotEqual(a.id, b.id)

    def test_add_songs_dedupes(self):
        pl = self.pls.create("mix")
        self.pls.add_songs(pl.id, [A, A])
        self.assertEqual(self.pls.get(pl.id).songs, (A.path,))
        self.pls.add_songs(pl.id, B)
        self.pls.add_songs(pl.id, [A, C, B])
        self.assertEqual(self.pls.get(pl.id).songs, (A.path, B.path, C.path))

    def test_add_songs_unknown_or_empty(self):
        pl = self.pls.create("mix")
        writes = self.store.writes
        self.assertIsNone(self.pls.add_songs("pl-missing", [A]))
        self.pls.add_songs(pl.id, [])
        self.assertEqual(self.store.writes, writes)

    def test_delete_asks_first(self):
        pl = self.pls.create("mix")
        asked = []
        self.assertFalse(self.pls.delete(pl.id, lambda msg: asked.append(msg) or False))
        self.assertIsNotNone(self.pls.get(pl.id))
        self.assertIn("mix", asked[0])
        self.assertTrue(self.pls.delete(pl.id, lambda msg: True))
        self.assertIsNone(self.pls.get(pl.id))
        self.assertEqual(self.store.get(PLAYLISTS_KEY), [])

    def test_resolve_drops_missing(self):
        pl = self.pls.create("mix")
        self.pls.add_songs(pl.id, [A, B, C])
        self.assertEqual(self.pls.resolve(pl.id, [C, A]), [A, C])
        self.assertEqual(self.pls.resolve("pl-missing", [A]), [])

    def test_reload_from_store(self):
        pl = self.pls.create("mix")
        self.pls.add_songs(pl.id, [B, A])
        again = PlaylistStore(self.store)
        self.assertEqual(again.get(pl.id).songs, (B.path, A.path))


class FavoritesTests(TestCase):
    def test_toggle(self):
        store = MemoryStore()
        favs = Favorites(store)
        self.assertTrue(favs.toggle(A.path))
        self.assertTrue(favs.toggle(B.path))
        self.assertIn(A.path, favs)
        self.assertFalse(favs.toggle(A.path))
        self.assertEqual(store.get(FAVORITES_KEY), [B.path])

    def test_empty_path_ignored(self):
        store = MemoryStore()
        self.assertFalse(Favorites(store).toggle(None))
        self.assertEqual(store.writes, 0)

    def test_loads_array(self):
        favs = Favorites(MemoryStore({FAVORITES_KEY: [A.path, A.path, C.path]}))
        self.assertEqual(favs.paths, [A.path, C.path])

    def test_non_list_value_ignored(self):
        with self.assertLogs("playlists", level="WARNING"):
            favs = Favorites(MemoryStore({FAVORITES_KEY: "/music/a.flac"}))
        self.assertEqual(favs.paths, [])
        self.assertTrue(favs.toggle(A.path))
        self.assertEqual(favs.paths, [A.path])
