# -*- coding: utf-8 -*-
"""FAQ corpus records and the per-language JSON loader."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent / "data"
FAQ_DIR = DATA_DIR / "faq"

SUPPORTED_LANGS = ("fr", "ar")

_REQUIRED_TEXT = ("id", "title", "question", "answer", "category", "lang")


class CorpusError(ValueError):
    """Static FAQ data (corpus or rule table) is malformed."""


@dataclass(frozen=True)
class FAQItem:
    id: str
    title: str
    question: str
    keywords: Tuple[str, ...]
    answer: str
    category: str
    lang: str
    steps: Tuple[str, ...] = field(default_factory=tuple)
    link: Optional[str] = None
    # extra (title, url) references, e.g. from a remote responder
    links: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    @property
    def search_text(self) -> str:
        """Field the index tokenizes: title, question, keywords, answer."""
        return f"{self.title} {self.question} {' '.join(self.keywords)} {self.answer}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "question": self.question,
            "keywords": list(self.keywords),
            "answer": self.answer,
            "steps": list(self.steps),
            "link": self.link,
            "links": [list(pair) for pair in self.links],
            "category": self.category,
            "lang": self.lang,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "FAQItem":
        if not isinstance(raw, Mapping):
            raise CorpusError(f"FAQ entry must be an object, got {type(raw).__name__}")
        label = raw.get("id") or "<no id>"

        for name in _REQUIRED_TEXT:
            value = raw.get(name)
            if not isinstance(value, str):
                raise CorpusError(f"FAQ entry {label!r}: field {name!r} missing or not a string")
        if not raw["id"].strip():
            raise CorpusError("FAQ entry with an empty id")

        keywords = _string_list(raw.get("keywords"), label, "keywords", required=True)
        steps = _string_list(raw.get("steps"), label, "steps", required=False)

        link = raw.get("link")
        if link is not None and not isinstance(link, str):
            raise CorpusError(f"FAQ entry {label!r}: field 'link' must be a string")

        return cls(
            id=raw["id"],
            title=raw["title"],
            question=raw["question"],
            keywords=keywords,
            answer=raw["answer"],
            category=raw["category"],
            lang=raw["lang"],
            steps=steps,
            link=link or None,
            links=_link_pairs(raw.get("links"), label),
        )


def _string_list(value: Any, label: str, name: str, *, required: bool) -> Tuple[str, ...]:
    if value is None:
        if required:
            raise CorpusError(f"FAQ entry {label!r}: field {name!r} missing")
        return ()
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise CorpusError(f"FAQ entry {label!r}: field {name!r} must be a list of strings")
    return tuple(value)


def _link_pairs(value: Any, label: str) -> Tuple[Tuple[str, str], ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise CorpusError(f"FAQ entry {label!r}: field 'links' must be a list of [title, url] pairs")
    pairs = []
    for pair in value:
        if (
            not isinstance(pair, (list, tuple))
            or len(pair) != 2
            or not all(isinstance(part, str) for part in pair)
        ):
            raise CorpusError(f"FAQ entry {label!r}: field 'links' must be a list of [title, url] pairs")
        pairs.append((pair[0], pair[1]))
    return tuple(pairs)


def parse_corpus(raw_items: Sequence[Any], lang: Optional[str] = None) -> List[FAQItem]:
    """Validate raw records; duplicate ids and foreign-language entries are rejected."""
    items: List[FAQItem] = []
    seen: set[str] = set()
    for raw in raw_items:
        item = FAQItem.from_dict(raw)
        if item.id in seen:
            raise CorpusError(f"duplicate FAQ id {item.id!r}")
        if lang is not None and item.lang != lang:
            raise CorpusError(f"FAQ entry {item.id!r} has lang {item.lang!r}, expected {lang!r}")
        seen.add(item.id)
        items.append(item)
    return items


def faq_path(lang: str) -> Path:
    return FAQ_DIR / f"faq_{lang}.json"


@lru_cache(maxsize=len(SUPPORTED_LANGS))
def _load_cached(lang: str) -> Tuple[FAQItem, ...]:
    return tuple(load_faq_file(faq_path(lang), lang=lang))


def load_faq_file(path: Path, lang: Optional[str] = None) -> List[FAQItem]:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise CorpusError(f"cannot read FAQ file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise CorpusError(f"FAQ file {path} is not valid JSON: {exc}") from exc
    if not isinstance(raw, list):
        raise CorpusError(f"FAQ file {path} must hold a JSON array")
    items = parse_corpus(raw, lang=lang)
    logger.info("loaded %d FAQ entries from %s", len(items), path.name)
    return items


def load_faq(lang: str) -> List[FAQItem]:
    """Bundled corpus for `lang` ("fr" | "ar")."""
    if lang not in SUPPORTED_LANGS:
        raise CorpusError(f"unsupported language {lang!r}")
    return list(_load_cached(lang))


__all__ = [
    "CorpusError",
    "FAQItem",
    "SUPPORTED_LANGS",
    "faq_path",
    "load_faq",
    "load_faq_file",
    "parse_corpus",
]
