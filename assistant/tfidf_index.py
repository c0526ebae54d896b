# -*- coding: utf-8 -*-
"""
TF-IDF index over one language's FAQ corpus.

    IDF(t)    = ln(N / df(t)) + 1
    TF(t, d)  = count(t in d) / len(tokens(d))
    w(t, d)   = TF(t, d) * IDF(t)

scikit-learn's TfidfVectorizer with `smooth_idf=False, norm=None` yields
raw count * IDF; each row is then divided by the document's token count.

The index is rebuilt from scratch whenever the corpus or the language
changes; nothing is updated in place.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np
from sklearn.feature_extraction.text import TfidfVectorizer

from .corpus_loader import CorpusError, FAQItem
from .textnorm import tokenize

logger = logging.getLogger(__name__)

Vector = Mapping[str, float]


def make_vectorizer() -> TfidfVectorizer:
    # tokenize() already lowercases and strips marks
    return TfidfVectorizer(
        tokenizer=tokenize,
        preprocessor=None,
        lowercase=False,
        token_pattern=None,
        smooth_idf=False,
        norm=None,
    )


def row_to_vector(matrix: Any, row: int, terms: Sequence[str]) -> Dict[str, float]:
    """One CSR row as a {term: weight} dict."""
    start, end = matrix.indptr[row], matrix.indptr[row + 1]
    return {
        terms[col]: float(weight)
        for col, weight in zip(matrix.indices[start:end], matrix.data[start:end])
    }


@dataclass(frozen=True)
class Index:
    lang: Optional[str]
    documents: Tuple[FAQItem, ...]
    idf: Mapping[str, float]
    vectors: Mapping[str, Vector]
    terms: Tuple[str, ...] = ()
    # None when the corpus has no vocabulary at all
    vectorizer: Optional[TfidfVectorizer] = field(default=None, compare=False, repr=False)
    matrix: Any = field(default=None, compare=False, repr=False)

    def __len__(self) -> int:
        return len(self.documents)

    @property
    def vocabulary_size(self) -> int:
        return len(self.idf)

    def weigh(self, text: str) -> Any:
        """TF-IDF row for `text` in this index's term space, or None.

        Terms the corpus never saw are dropped, i.e. they weigh 0.
        """
        tokens = tokenize(text)
        if self.vectorizer is None or not tokens:
            return None
        counts = self.vectorizer.transform([text])
        return counts.multiply(1.0 / len(tokens)).tocsr()

    def query_vector(self, text: str) -> Dict[str, float]:
        row = self.weigh(text)
        if row is None:
            return {}
        return row_to_vector(row, 0, self.terms)


def _check_documents(documents: Sequence[FAQItem], lang: Optional[str]) -> List[FAQItem]:
    docs: List[FAQItem] = []
    seen: set[str] = set()
    for doc in documents:
        if not isinstance(doc, FAQItem):
            raise CorpusError(f"index input must be FAQItem, got {type(doc).__name__}")
        if doc.id in seen:
            raise CorpusError(f"duplicate FAQ id {doc.id!r}")
        if lang is not None and doc.lang != lang:
            raise CorpusError(f"FAQ entry {doc.id!r} has lang {doc.lang!r}, expected {lang!r}")
        seen.add(doc.id)
        docs.append(doc)
    return docs


def build_index(documents: Sequence[FAQItem], lang: Optional[str] = None) -> Index:
    docs = _check_documents(documents, lang)
    texts = [doc.search_text for doc in docs]
    lengths = [len(tokenize(text)) for text in texts]

    # TfidfVectorizer refuses an empty vocabulary
    if not any(lengths):
        logger.info("built empty TF-IDF index lang=%s docs=%d", lang or "-", len(docs))
        return Index(
            lang=lang,
            documents=tuple(docs),
            idf=MappingProxyType({}),
            vectors=MappingProxyType({doc.id: MappingProxyType({}) for doc in docs}),
        )

    vectorizer = make_vectorizer()
    counts = vectorizer.fit_transform(texts)
    # empty documents keep an all-zero row
    scale = np.array([[1.0 / n if n else 0.0] for n in lengths])
    matrix = counts.multiply(scale).tocsr()

    terms = tuple(vectorizer.get_feature_names_out())
    idf = {term: float(weight) for term, weight in zip(terms, vectorizer.idf_)}
    vectors = {
        doc.id: MappingProxyType(row_to_vector(matrix, i, terms))
        for i, doc in enumerate(docs)
    }

    logger.info(
        "built TF-IDF index lang=%s docs=%d vocabulary=%d",
        lang or "-", len(docs), len(idf),
    )
    return Index(
        lang=lang,
        documents=tuple(docs),
        idf=MappingProxyType(idf),
        vectors=MappingProxyType(vectors),
        terms=terms,
        vectorizer=vectorizer,
        matrix=matrix,
    )


__all__ = ["Index", "Vector", "build_index", "make_vectorizer", "row_to_vector"]
