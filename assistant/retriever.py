# -*- coding: utf-8 -*-
"""
Brute-force cosine ranking of a query against an in-memory TF-IDF index.

The corpus is small and static, so every document is scored on each query;
no inverted index.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, List, Mapping

import numpy as np
from sklearn.metrics.pairwise import cosine_similarity as pairwise_cosine

from .corpus_loader import FAQItem
from .tfidf_index import Index, Vector


class Provenance(str, Enum):
    CORPUS = "corpus-match"
    RULE = "rule-match"
    CACHED = "cached"
    REMOTE = "remote"


@dataclass(frozen=True)
class SearchResult:
    item: FAQItem
    score: float
    provenance: Provenance = Provenance.CORPUS

    def with_provenance(self, provenance: Provenance) -> "SearchResult":
        return replace(self, provenance=provenance)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "item": self.item.to_dict(),
            "score": self.score,
            "provenance": self.provenance.value,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "SearchResult":
        return cls(
            item=FAQItem.from_dict(raw["item"]),
            score=float(raw["score"]),
            provenance=Provenance(raw["provenance"]),
        )


def query_to_vector(query: str, index: Index) -> Dict[str, float]:
    return index.query_vector(query)


def cosine_similarity(a: Vector, b: Vector) -> float:
    """Cosine of two sparse vectors; 0.0 when either one has no magnitude."""
    terms = sorted(set(a) | set(b))
    if not terms:
        return 0.0
    left = np.array([[a.get(t, 0.0) for t in terms]])
    right = np.array([[b.get(t, 0.0) for t in terms]])
    score = float(pairwise_cosine(left, right)[0, 0])
    return max(0.0, min(1.0, score))


def search(query: str, index: Index, top_k: int = 5) -> List[SearchResult]:
    if top_k <= 0:
        return []
    qrow = index.weigh(query)
    if qrow is None or qrow.nnz == 0:
        return []

    scores = pairwise_cosine(qrow, index.matrix)[0]
    results: List[SearchResult] = []
    for doc, raw in zip(index.documents, scores):
        score = min(1.0, float(raw))
        if score > 0:
            results.append(SearchResult(item=doc, score=score, provenance=Provenance.CORPUS))

    # sorted() is stable: equal scores keep corpus order
    results = sorted(results, key=lambda r: r.score, reverse=True)
    return results[:top_k]


__all__ = [
    "Provenance",
    "SearchResult",
    "cosine_similarity",
    "query_to_vector",
    "search",
]
