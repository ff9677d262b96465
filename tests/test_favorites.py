import json
import unittest

from app.favorites import FavoritesRepository
from app.kv_store import InMemoryKeyValueStore


class CountingStore(InMemoryKeyValueStore):
    def __init__(self):
        super().__init__()
        self.reads = 0
        self.writes = 0

    def get(self, key):
        self.reads += 1
        return super().get(key)

    def set(self, key, value):
        self.writes += 1
        super().set(key, value)


class TestFavoritesRepository(unittest.TestCase):
    def test_loads_once_and_writes_on_every_toggle(self):
        store = CountingStore()
        store.set("favorites", json.dumps(["Paris"]))
        store.writes = 0

        repo = FavoritesRepository(store)
        self.assertEqual(repo.names(), ["Paris"])
        self.assertTrue(repo.contains("Paris"))

        repo.toggle("Rome")
        repo.toggle("Paris")
        self.assertEqual(repo.names(), ["Rome"])
        self.assertEqual(store.reads, 1)
        self.assertEqual(store.writes, 2)
        self.assertEqual(json.loads(store.get("favorites")), ["Rome"])

    def test_survives_restart(self):
        store = InMemoryKeyValueStore()
        FavoritesRepository(store, key="favs").toggle("Tokyo")
        self.assertEqual(FavoritesRepository(store, key="favs").names(), ["Tokyo"])

    def test_failed_write_leaves_favorites_unchanged(self):
        class FailingStore(InMemoryKeyValueStore):
            fail = False

            def set(self, key, value):
                if self.fail:
                    raise OSError("disk full")
                super().set(key, value)

        store = FailingStore()
        repo = FavoritesRepository(store)
        repo.toggle("Paris")
        store.fail = True

        with self.assertRaises(OSError):
            repo.toggle("Rome")
        self.assertEqual(repo.names(), ["Paris"])
        self.assertFalse(repo.contains("Rome"))
        self.assertEqual(json.loads(store.get("favorites")), ["Paris"])

    def test_corrupt_value_starts_empty(self):
        store = InMemoryKeyValueStore()
        store.set("favorites", "{not json")
        self.assertEqual(FavoritesRepository(store).names(), [])
        store.set("favorites", json.dumps({"a": 1}))
        self.assertEqual(FavoritesRepository(store).names(), [])


if __name__ == "__main__":
    unittest.main()
