# -*- coding: utf-8 -*-
"""
Keyword rules: when a normalized rule keyword occurs anywhere in the normalized
query, answer with the rule's canned response (no index involved).
Rules are tried in the order they are declared in data/rules/rules_<lang>.json.
"""
import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

from .corpus_loader import DATA_DIR, SUPPORTED_LANGS, CorpusError, FAQItem
from .retriever import Provenance, SearchResult
from .textnorm import normalize

RULES_DIR = DATA_DIR / "rules"

DEFAULT_RULE_CONFIDENCE = 0.4

_RULE_TITLES = {
    "fr": "Réponse automatique",
    "ar": "رد تلقائي",
}


@dataclass(frozen=True)
class KeywordRule:
    keyword: str
    response: str
    category: str

    @property
    def pattern(self) -> str:
        return normalize(self.keyword)


RuleTable = Mapping[str, Sequence[KeywordRule]]


def parse_rules(raw: Mapping[str, object], source: str = "<rules>") -> List[KeywordRule]:
    if not isinstance(raw, Mapping):
        raise CorpusError(f"{source}: rule table must be a JSON object")
    rules: List[KeywordRule] = []
    for keyword, body in raw.items():
        if not isinstance(body, Mapping):
            raise CorpusError(f"{source}: rule {keyword!r} must be an object")
        response, category = body.get("response"), body.get("category")
        if not isinstance(response, str) or not response.strip():
            raise CorpusError(f"{source}: rule {keyword!r} has no response")
        if not isinstance(category, str) or not category.strip():
            raise CorpusError(f"{source}: rule {keyword!r} has no category")
        if not normalize(keyword):
            raise CorpusError(f"{source}: rule keyword {keyword!r} normalizes to nothing")
        rules.append(KeywordRule(keyword=keyword, response=response, category=category))
    return rules


def load_rules_file(path: Path) -> List[KeywordRule]:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise CorpusError(f"cannot read rule file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise CorpusError(f"rule file {path} is not valid JSON: {exc}") from exc
    return parse_rules(raw, source=path.name)


@lru_cache(maxsize=1)
def load_rules() -> Dict[str, tuple]:
    """Bundled rule tables, keyed by language."""
    return {
        lang: tuple(load_rules_file(RULES_DIR / f"rules_{lang}.json"))
        for lang in SUPPORTED_LANGS
    }


def apply_rules(
    query: str,
    lang: str,
    rules: Optional[RuleTable] = None,
    confidence: float = DEFAULT_RULE_CONFIDENCE,
) -> Optional[SearchResult]:
    q = normalize(query)
    if not q:
        return None
    table = load_rules() if rules is None else rules
    for rule in table.get(lang, ()):
        pat = rule.pattern
        if pat and pat in q:
            item = FAQItem(
                id=f"rule-{rule.keyword}",
                title=_RULE_TITLES.get(lang, _RULE_TITLES["fr"]),
                question=query,
                keywords=(rule.keyword,),
                answer=rule.response,
                category=rule.category,
                lang=lang,
            )
            return SearchResult(item=item, score=confidence, provenance=Provenance.RULE)
    return None


__all__ = [
    "DEFAULT_RULE_CONFIDENCE",
    "KeywordRule",
    "RuleTable",
    "apply_rules",
    "load_rules",
    "load_rules_file",
    "parse_rules",
]
