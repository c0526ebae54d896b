# -*- coding: utf-8 -*-
"""
Text canonicalisation shared by the index, the rule matcher and the cache keys.
Works on French (Latin script) and Arabic alike.
"""

from __future__ import annotations

import re
import unicodedata
from typing import List, Optional

_LATIN_MARKS = re.compile(r"[\u0300-\u036f]")
_ARABIC_MARKS = re.compile(r"[\u064b-\u065f]")
_NOT_KEPT = re.compile(r"[^A-Za-z0-9_\s\u0600-\u06ff]")
_SPACES = re.compile(r"\s+")


def normalize(text: Optional[str]) -> str:
    """Lower-case, strip diacritics (Latin + harakat), drop punctuation, squeeze spaces."""
    if not text:
        return ""
    s = unicodedata.normalize("NFD", text.lower())
    s = _LATIN_MARKS.sub("", s)
    s = _ARABIC_MARKS.sub("", s)
    s = _NOT_KEPT.sub(" ", s)
    s = _SPACES.sub(" ", s)
    return s.strip()


def tokenize(text: Optional[str]) -> List[str]:
    normalized = normalize(text)
    return [tok for tok in normalized.split(" ") if len(tok) > 1]


__all__ = ["normalize", "tokenize"]
