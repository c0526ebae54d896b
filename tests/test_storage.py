import pytest
from pymongo.errors import PyMongoError

from assistant.config import ConfigError, Settings
from assistant.storage import MemoryStore, MongoStore, StoreError, open_store


class FakeCollection:
    def __init__(self):
        self.docs = {}
        self.fail = False

    def _check(self):
        if self.fail:
            raise PyMongoError("connection refused")

    def find_one(self, flt):
        self._check()
        return self.docs.get(flt["_id"])

    def replace_one(self, flt, doc, upsert=False):
        self._check()
        assert upsert
        self.docs[flt["_id"]] = dict(doc)

    def delete_one(self, flt):
        self._check()
        self.docs.pop(flt["_id"], None)


def test_memory_store_read_write_delete():
    store = MemoryStore()
    assert store.read("k") is None
    store.write("k", b"v")
    assert store.read("k") == b"v"
    assert "k" in store and len(store) == 1
    store.delete("k")
    store.delete("k")
    assert store.read("k") is None


def test_mongo_store_upserts_one_document_per_key():
    col = FakeCollection()
    store = MongoStore(col)
    store.write("k", b"one")
    store.write("k", b"two")
    assert store.read("k") == b"two"
    assert set(col.docs["k"]) == {"_id", "value", "updated_at"}
    store.delete("k")
    assert store.read("k") is None


def test_mongo_errors_become_store_errors():
    col = FakeCollection()
    col.fail = True
    store = MongoStore(col)
    with pytest.raises(StoreError):
        store.read("k")
    with pytest.raises(StoreError):
        store.write("k", b"v")
    with pytest.raises(StoreError):
        store.delete("k")


def test_open_store_memory_backend():
    assert isinstance(open_store(Settings()), MemoryStore)


def test_open_store_mongo_requires_uri():
    with pytest.raises(ConfigError):
        open_store(Settings(store="mongo"))


def test_open_store_rejects_unknown_backend():
    with pytest.raises(ConfigError):
        open_store(Settings(store="redis"))


@pytest.mark.parametrize("value", ["not-bytes", 42, {"nested": True}])
def test_mongo_non_bytes_value_is_a_store_error(value):
    col = FakeCollection()
    col.docs["k"] = {"_id": "k", "value": value}
    with pytest.raises(StoreError):
        MongoStore(col).read("k")


def test_cache_over_mongo_treats_malformed_value_as_miss():
    from assistant.cache import ResponseCache, cache_key

    col = FakeCollection()
    col.docs[cache_key("fr", "carte")] = {"_id": cache_key("fr", "carte"), "value": "not-bytes"}
    assert ResponseCache(MongoStore(col)).get("fr", "carte") is None
