# -*- coding: utf-8 -*-
"""
Questions-answered counter and the one-time "Expert démarches" badge.
Both live in the same key/value store as the cache.
"""

from __future__ import annotations

import logging
import threading

from .storage import KeyValueStore, StoreError

logger = logging.getLogger(__name__)

QUESTIONS_KEY = "assistant_questions_count"
BADGE_KEY = "badge_shown"


class UsageCounter:
    def __init__(self, store: KeyValueStore) -> None:
        self.store = store
        self._lock = threading.Lock()
        self._badge_claimed = False

    def _read_raw(self) -> int:
        raw = self.store.read(QUESTIONS_KEY)
        if raw is None:
            return 0
        try:
            return max(0, int(raw.decode("utf-8").strip()))
        except (UnicodeDecodeError, ValueError):
            logger.warning("usage counter holds garbage %r, treating as 0", raw[:32])
            return 0

    def read(self) -> int:
        try:
            return self._read_raw()
        except StoreError as exc:
            logger.warning("usage counter read failed: %s", exc)
            return 0

    def increment(self) -> int:
        with self._lock:
            try:
                count = self._read_raw() + 1
            except StoreError as exc:
                logger.warning("usage counter read failed: %s", exc)
                return 1
            try:
                self.store.write(QUESTIONS_KEY, str(count).encode("utf-8"))
            except StoreError as exc:
                logger.warning("usage counter write failed: %s", exc)
            return count

    def badge_shown(self) -> bool:
        if self._badge_claimed:
            return True
        try:
            return self.store.read(BADGE_KEY) == b"true"
        except StoreError as exc:
            logger.warning("badge flag read failed: %s", exc)
            return False

    def claim_badge(self, threshold: int = 3, count: int | None = None) -> bool:
        """True only the first time the count has reached `threshold`.

        The claim is remembered in memory too, so a store that cannot persist
        the flag still shows the badge at most once per counter.
        """
        current = self.read() if count is None else count
        if current < threshold:
            return False
        with self._lock:
            if self.badge_shown():
                return False
            self._badge_claimed = True
            try:
                self.store.write(BADGE_KEY, b"true")
            except StoreError as exc:
                logger.warning("badge flag write failed: %s", exc)
        return True


__all__ = ["BADGE_KEY", "QUESTIONS_KEY", "UsageCounter"]
