# -*- coding: utf-8 -*-
"""
One decision per (query, language):

    cache -> [remote responder] -> TF-IDF ranking -> keyword rules -> best guess | None

The selector owns its collaborators explicitly: the active-language index is
published by swapping a single reference, the cache and the usage counter are
injected.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Protocol, Sequence, Tuple

from .cache import ResponseCache
from .config import Settings
from .corpus_loader import FAQItem, load_faq
from .faq import RuleTable, apply_rules
from .retriever import Provenance, SearchResult, search
from .tfidf_index import Index, build_index
from .usage import UsageCounter

logger = logging.getLogger(__name__)

CorpusLoader = Callable[[str], Sequence[FAQItem]]


class SelectorState(str, Enum):
    IDLE = "idle"
    CHECKING_CACHE = "checking-cache"
    ASKING_RESPONDER = "asking-responder"
    SCORING = "scoring"
    RULE_FALLBACK = "rule-fallback"
    ANSWERED = "answered"


# ====== remote responder seam ======
@dataclass(frozen=True)
class RemoteAnswer:
    answer: str
    steps: Tuple[str, ...] = ()
    links: Tuple[Tuple[str, str], ...] = ()
    category: str = "autre"


class Responder(Protocol):
    def answer(self, query: str, lang: str) -> Optional[RemoteAnswer]: ...


_REMOTE_TITLES = {"fr": "Réponse de l'assistant", "ar": "إجابة المساعد"}


def _remote_result(query: str, lang: str, remote: RemoteAnswer) -> SearchResult:
    links = tuple((title, url) for title, url in remote.links)
    item = FAQItem(
        id=f"remote-{lang}",
        title=_REMOTE_TITLES.get(lang, _REMOTE_TITLES["fr"]),
        question=query,
        keywords=(),
        answer=remote.answer,
        category=remote.category or "autre",
        lang=lang,
        steps=tuple(remote.steps),
        link=links[0][1] if links else None,
        links=links,
    )
    return SearchResult(item=item, score=1.0, provenance=Provenance.REMOTE)


# ====== outcomes ======
@dataclass(frozen=True)
class Resolution:
    result: Optional[SearchResult]
    trail: Tuple[SelectorState, ...] = field(default_factory=tuple)

    @property
    def found(self) -> bool:
        return self.result is not None


@dataclass(frozen=True)
class Reply:
    resolution: Resolution
    questions_count: int
    badge_unlocked: bool

    @property
    def result(self) -> Optional[SearchResult]:
        return self.resolution.result


class AnswerSelector:
    def __init__(
        self,
        cache: ResponseCache,
        usage: Optional[UsageCounter] = None,
        settings: Optional[Settings] = None,
        corpus_loader: Optional[CorpusLoader] = None,
        rules: Optional[RuleTable] = None,
        responder: Optional[Responder] = None,
    ) -> None:
        self.cache = cache
        self.usage = usage
        self.settings = settings or Settings()
        self.corpus_loader: CorpusLoader = corpus_loader or load_faq
        self.rules = rules
        self.responder = responder
        self._index: Optional[Index] = None
        self._swap_lock = threading.Lock()

    # ---- index lifecycle ----
    @property
    def active_index(self) -> Optional[Index]:
        return self._index

    def use_language(self, lang: str, documents: Optional[Sequence[FAQItem]] = None) -> Index:
        """Build `lang`'s index off to the side, then publish it in one assignment."""
        docs = self.corpus_loader(lang) if documents is None else documents
        fresh = build_index(docs, lang=lang)
        with self._swap_lock:
            self._index = fresh
        logger.info("active language is now %s (%d documents)", lang, len(fresh))
        return fresh

    def _index_for(self, lang: str) -> Index:
        index = self._index
        if index is None or index.lang != lang:
            index = self.use_language(lang)
        return index

    # ---- decision ----
    def resolve(self, query: str, lang: str) -> Resolution:
        trail: List[SelectorState] = [SelectorState.IDLE]

        def _goto(state: SelectorState) -> None:
            logger.debug("%s -> %s (lang=%s)", trail[-1].value, state.value, lang)
            trail.append(state)

        def _done(result: Optional[SearchResult]) -> Resolution:
            if result is not None:
                _goto(SelectorState.ANSWERED)
            return Resolution(result=result, trail=tuple(trail))

        _goto(SelectorState.CHECKING_CACHE)
        cached = self.cache.get(lang, query)
        if cached is not None:
            return _done(cached)

        if self.responder is not None:
            _goto(SelectorState.ASKING_RESPONDER)
            remote = self._ask_responder(query, lang)
            if remote is not None:
                result = _remote_result(query, lang, remote)
                self.cache.put(lang, query, result)
                return _done(result)

        _goto(SelectorState.SCORING)
        ranked = search(query, self._index_for(lang), self.settings.top_k)
        if ranked and ranked[0].score >= self.settings.confidence_threshold:
            self.cache.put(lang, query, ranked[0])
            return _done(ranked[0])

        _goto(SelectorState.RULE_FALLBACK)
        rule_hit = apply_rules(query, lang, rules=self.rules, confidence=self.settings.rule_confidence)
        if rule_hit is not None:
            self.cache.put(lang, query, rule_hit)
            return _done(rule_hit)

        # low-confidence guess is still returned, just never cached
        if ranked:
            return _done(ranked[0])
        return _done(None)

    def _ask_responder(self, query: str, lang: str) -> Optional[RemoteAnswer]:
        try:
            remote = self.responder.answer(query, lang)
        except Exception as exc:
            logger.warning("remote responder failed, using local search: %s", exc)
            return None
        if remote is None or not (remote.answer or "").strip():
            return None
        return remote

    def answer(self, query: str, lang: str) -> Reply:
        resolution = self.resolve(query, lang)
        if self.usage is None:
            return Reply(resolution=resolution, questions_count=0, badge_unlocked=False)
        count = self.usage.increment()
        unlocked = self.usage.claim_badge(self.settings.badge_threshold, count=count)
        return Reply(resolution=resolution, questions_count=count, badge_unlocked=unlocked)


__all__ = [
    "AnswerSelector",
    "RemoteAnswer",
    "Reply",
    "Resolution",
    "Responder",
    "SelectorState",
]
