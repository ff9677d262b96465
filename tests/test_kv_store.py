import json
import tempfile
import unittest
from pathlib import Path

from app.kv_store import InMemoryKeyValueStore, JsonFileKeyValueStore, RedisKeyValueStore, build_kv_store


class FakeRedis:
    def __init__(self):
        self.store = {}

    def get(self, key):
        return self.store.get(key)

    def set(self, key, value):
        self.store[key] = value

    def delete(self, key):
        self.store.pop(key, None)


class DummySettings:
    def __init__(self, **kwargs):
        self.favorites_redis_url = kwargs.get("favorites_redis_url")
        self.favorites_path = kwargs.get("favorites_path")


class TestInMemoryKeyValueStore(unittest.TestCase):
    def test_get_set_delete(self):
        store = InMemoryKeyValueStore()
        self.assertIsNone(store.get("a"))
        store.set("a", "1")
        self.assertEqual(store.get("a"), "1")
        store.delete("a")
        store.delete("a")
        self.assertIsNone(store.get("a"))


class TestJsonFileKeyValueStore(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "nested" / "kv.json"

    def tearDown(self):
        self._tmp.cleanup()

    def test_persists_across_instances(self):
        JsonFileKeyValueStore(self.path).set("favorites", '["Paris"]')
        self.assertEqual(JsonFileKeyValueStore(self.path).get("favorites"), '["Paris"]')
        self.assertEqual(json.loads(self.path.read_text(encoding="utf-8")), {"favorites": '["Paris"]'})

    def test_missing_file_reads_empty(self):
        self.assertIsNone(JsonFileKeyValueStore(self.path).get("favorites"))

    def test_corrupt_file_reads_empty(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text("not json", encoding="utf-8")
        store = JsonFileKeyValueStore(self.path)
        self.assertIsNone(store.get("favorites"))
        store.set("favorites", "[]")
        self.assertEqual(store.get("favorites"), "[]")

    def test_delete(self):
        store = JsonFileKeyValueStore(self.path)
        store.set("a", "1")
        store.set("b", "2")
        store.delete("a")
        self.assertIsNone(store.get("a"))
        self.assertEqual(store.get("b"), "2")


class TestRedisKeyValueStore(unittest.TestCase):
    def test_prefix_and_decoding(self):
        client = FakeRedis()
        store = RedisKeyValueStore(client, prefix="t:")
        store.set("favorites", '["Zürich"]')
        self.assertIn("t:favorites", client.store)
        self.assertEqual(store.get("favorites"), '["Zürich"]')
        store.delete("favorites")
        self.assertIsNone(store.get("favorites"))


class TestBuildKvStore(unittest.TestCase):
    def test_defaults_to_memory(self):
        self.assertIsInstance(build_kv_store(DummySettings()), InMemoryKeyValueStore)

    def test_file_when_path_set(self):
        with tempfile.TemporaryDirectory() as tmp:
            store = build_kv_store(DummySettings(favorites_path=str(Path(tmp) / "kv.json")))
            self.assertIsInstance(store, JsonFileKeyValueStore)


if __name__ == "__main__":
    unittest.main()
