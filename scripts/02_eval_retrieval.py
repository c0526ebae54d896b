# scripts/02_eval_retrieval.py
# -*- coding: utf-8 -*-
"""
Hit@k of the TF-IDF ranking against the small gold sets in
assistant/data/eval/retrieval_<lang>.jsonl (one {"query", "gold_id"} per line).

Usage:
  python scripts/02_eval_retrieval.py --lang fr --k 3
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from assistant.corpus_loader import DATA_DIR, SUPPORTED_LANGS, load_faq  # noqa: E402
from assistant.retriever import search  # noqa: E402
from assistant.tfidf_index import Index, build_index  # noqa: E402


def load_gold(lang: str) -> List[Dict[str, str]]:
    path = DATA_DIR / "eval" / f"retrieval_{lang}.jsonl"
    with path.open("r", encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]


def hit_at_k(index: Index, gold: List[Dict[str, str]], k: int) -> float:
    if not gold:
        return 0.0
    hits = 0
    for it in gold:
        got = [r.item.id for r in search(it["query"], index, top_k=k)]
        if it["gold_id"] in got:
            hits += 1
        else:
            print(f"  miss: {it['query']!r} -> {got}")
    return hits / len(gold)


def main() -> None:
    ap = argparse.ArgumentParser(description="Hit@k for the TF-IDF FAQ retriever")
    ap.add_argument("--lang", choices=SUPPORTED_LANGS, default=None, help="default: all languages")
    ap.add_argument("--k", type=int, default=3)
    args = ap.parse_args()

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    langs = [args.lang] if args.lang else list(SUPPORTED_LANGS)
    for lang in langs:
        index = build_index(load_faq(lang), lang=lang)
        score = hit_at_k(index, load_gold(lang), args.k)
        print(f"[{lang}] Hit@{args.k}: {score:.3f}")


if __name__ == "__main__":
    main()
