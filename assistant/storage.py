# -*- coding: utf-8 -*-
"""
Byte-valued key/value stores behind the response cache and the usage counter.

- MemoryStore : process-local dict (tests, offline mode)
- MongoStore  : one MongoDB collection, one document per key
"""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Dict, Optional, Protocol

from pymongo import MongoClient
from pymongo.errors import PyMongoError

from .config import ConfigError, Settings


class StoreError(RuntimeError):
    """Backing store could not serve a read/write/delete."""


class KeyValueStore(Protocol):
    def read(self, key: str) -> Optional[bytes]: ...

    def write(self, key: str, value: bytes) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStore:
    def __init__(self) -> None:
        self._data: Dict[str, bytes] = {}
        self._lock = threading.Lock()

    def read(self, key: str) -> Optional[bytes]:
        with self._lock:
            return self._data.get(key)

    def write(self, key: str, value: bytes) -> None:
        with self._lock:
            self._data[key] = bytes(value)

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._data


class MongoStore:
    """Documents look like {_id: key, value: <bytes>, updated_at: <BSON date>}."""

    def __init__(self, collection) -> None:
        self.col = collection

    @classmethod
    def from_uri(cls, uri: str, db: str, col: str) -> "MongoStore":
        client = MongoClient(uri)
        return cls(client[db][col])

    def read(self, key: str) -> Optional[bytes]:
        try:
            doc = self.col.find_one({"_id": key})
        except PyMongoError as exc:
            raise StoreError(f"mongo read failed for {key!r}: {exc}") from exc
        if not doc:
            return None
        value = doc.get("value")
        if value is None:
            return None
        # bson Binary subclasses bytes
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise StoreError(f"mongo value for {key!r} is {type(value).__name__}, not bytes")
        return bytes(value)

    def write(self, key: str, value: bytes) -> None:
        try:
            self.col.replace_one(
                {"_id": key},
                {"_id": key, "value": bytes(value), "updated_at": datetime.now(timezone.utc)},
                upsert=True,
            )
        except PyMongoError as exc:
            raise StoreError(f"mongo write failed for {key!r}: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            self.col.delete_one({"_id": key})
        except PyMongoError as exc:
            raise StoreError(f"mongo delete failed for {key!r}: {exc}") from exc


def open_store(settings: Settings) -> KeyValueStore:
    if settings.store == "memory":
        return MemoryStore()
    if settings.store == "mongo":
        if not settings.mongo_uri:
            raise ConfigError("ASSISTANT_STORE=mongo needs MONGO_URI")
        return MongoStore.from_uri(settings.mongo_uri, settings.mongo_db, settings.mongo_col)
    raise ConfigError(f"unknown store backend {settings.store!r}")


__all__ = ["KeyValueStore", "MemoryStore", "MongoStore", "StoreError", "open_store"]
