# -*- coding: utf-8 -*-
"""Runtime settings read from the environment (and `.env` at project root)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .corpus_loader import SUPPORTED_LANGS

PROJECT_ROOT = Path(__file__).resolve().parents[1]

DAY_MS = 24 * 60 * 60 * 1000

_STORES = {"memory", "mongo"}


class ConfigError(ValueError):
    """Raised when the environment describes an unusable setup."""


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw.strip())
    except ValueError:
        return default
    if value != value:  # NaN
        return default
    return value


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    return value if value > 0 else default


def _clamp_unit(value: float) -> float:
    return max(0.0, min(1.0, value))


@dataclass(frozen=True)
class Settings:
    confidence_threshold: float = 0.25
    rule_confidence: float = 0.4
    top_k: int = 5
    cache_ttl_days: int = 7
    badge_threshold: int = 3
    store: str = "memory"
    mongo_uri: Optional[str] = None
    mongo_db: str = "faq_assistant"
    mongo_col: str = "kv"
    default_lang: str = "fr"

    @property
    def cache_ttl_ms(self) -> int:
        return self.cache_ttl_days * DAY_MS

    @classmethod
    def from_env(cls, dotenv_path: Optional[Path] = None) -> "Settings":
        load_dotenv(dotenv_path=dotenv_path or PROJECT_ROOT / ".env")

        store = (os.getenv("ASSISTANT_STORE", "memory") or "memory").strip().lower()
        if store not in _STORES:
            raise ConfigError(f"ASSISTANT_STORE must be one of {sorted(_STORES)}, got {store!r}")

        mongo_uri = (os.getenv("MONGO_URI") or "").strip() or None
        if store == "mongo" and not mongo_uri:
            raise ConfigError("ASSISTANT_STORE=mongo needs MONGO_URI")

        default_lang = (os.getenv("ASSISTANT_DEFAULT_LANG") or "").strip().lower() or "fr"
        if default_lang not in SUPPORTED_LANGS:
            raise ConfigError(
                f"ASSISTANT_DEFAULT_LANG must be one of {list(SUPPORTED_LANGS)}, got {default_lang!r}"
            )

        return cls(
            confidence_threshold=_clamp_unit(_env_float("ASSISTANT_CONFIDENCE_THRESHOLD", 0.25)),
            rule_confidence=_clamp_unit(_env_float("ASSISTANT_RULE_CONFIDENCE", 0.4)),
            top_k=_env_int("ASSISTANT_TOP_K", 5),
            cache_ttl_days=_env_int("ASSISTANT_CACHE_TTL_DAYS", 7),
            badge_threshold=_env_int("ASSISTANT_BADGE_THRESHOLD", 3),
            store=store,
            mongo_uri=mongo_uri,
            mongo_db=(os.getenv("MONGO_DB", "faq_assistant") or "faq_assistant").strip(),
            mongo_col=(os.getenv("MONGO_COL", "kv") or "kv").strip(),
            default_lang=default_lang,
        )


__all__ = ["ConfigError", "DAY_MS", "PROJECT_ROOT", "Settings"]
