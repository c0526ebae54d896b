# -*- coding: utf-8 -*-
"""
Answer cache keyed by (language, normalized query), with a 7-day TTL.

Expiry is lazy: a stale entry is deleted the first time it is read.
Any store or decoding failure degrades to a cache miss.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from typing import Callable, Optional

from .config import DAY_MS
from .retriever import Provenance, SearchResult
from .storage import KeyValueStore
from .textnorm import normalize

logger = logging.getLogger(__name__)

CACHE_PREFIX = "assistant_cache::"
DEFAULT_TTL_MS = 7 * DAY_MS

_B36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _now_ms() -> int:
    return int(time.time() * 1000)


def rolling_hash32(text: str) -> int:
    """h = h * 31 + ord(ch), wrapped to a signed 32-bit int."""
    h = 0
    for ch in text:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    if h & 0x80000000:
        h -= 1 << 32
    return h


def _base36(n: int) -> str:
    if n == 0:
        return "0"
    out = []
    while n:
        n, r = divmod(n, 36)
        out.append(_B36[r])
    return "".join(reversed(out))


def cache_key(lang: str, query: str) -> str:
    return f"{CACHE_PREFIX}{lang}::{_base36(abs(rolling_hash32(normalize(query))))}"


class ResponseCache:
    def __init__(
        self,
        store: KeyValueStore,
        ttl_ms: int = DEFAULT_TTL_MS,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self.store = store
        self.ttl_ms = ttl_ms
        self._clock = clock or _now_ms
        self._write_lock = threading.Lock()

    def get(self, lang: str, query: str) -> Optional[SearchResult]:
        key = cache_key(lang, query)
        try:
            raw = self.store.read(key)
        except Exception as exc:  # any backend failure is a miss
            logger.warning("cache read failed (%s): %s", key, exc)
            return None
        if raw is None:
            return None

        try:
            payload = json.loads(raw.decode("utf-8"))
            stored_at = int(payload["ts"])
            stored_query = payload.get("query")
            result = SearchResult.from_dict(payload["result"])
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.warning("corrupt cache entry %s: %s", key, exc)
            return None

        if self._clock() - stored_at >= self.ttl_ms:
            self._evict(key)
            return None

        # two queries can share a 32-bit hash; only the owner may hit
        if stored_query is not None and stored_query != normalize(query):
            return None

        return result.with_provenance(Provenance.CACHED)

    def put(self, lang: str, query: str, result: SearchResult) -> None:
        key = cache_key(lang, query)
        payload = {
            "ts": self._clock(),
            "query": normalize(query),
            "result": result.to_dict(),
        }
        data = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        with self._write_lock:
            try:
                self.store.write(key, data)
            except Exception as exc:
                logger.warning("cache write failed (%s): %s", key, exc)

    def _evict(self, key: str) -> None:
        try:
            self.store.delete(key)
        except Exception as exc:
            logger.warning("cache eviction failed (%s): %s", key, exc)


__all__ = ["CACHE_PREFIX", "DEFAULT_TTL_MS", "ResponseCache", "cache_key", "rolling_hash32"]
