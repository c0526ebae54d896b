# scripts/ask.py
# -*- coding: utf-8 -*-
"""
Ask the offline assistant one question from the terminal.

Usage:
  python scripts/ask.py "renouveler carte identité"
  python scripts/ask.py --lang ar "جواز السفر" --explain
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from assistant.cache import ResponseCache  # noqa: E402
from assistant.config import Settings  # noqa: E402
from assistant.corpus_loader import SUPPORTED_LANGS  # noqa: E402
from assistant.orchestrator import AnswerSelector  # noqa: E402
from assistant.retriever import search  # noqa: E402
from assistant.storage import open_store  # noqa: E402
from assistant.usage import UsageCounter  # noqa: E402

NO_RESULT = {
    "fr": "Désolé, je n'ai pas trouvé de réponse précise. Essayez de reformuler votre question "
          "ou consultez service-public.fr pour plus d'informations.",
    "ar": "عذراً، لم أجد إجابة دقيقة. حاول إعادة صياغة سؤالك أو راجع service-public.fr.",
}


def main() -> None:
    ap = argparse.ArgumentParser(description="Query the FR/AR FAQ assistant offline")
    ap.add_argument("query")
    ap.add_argument("--lang", choices=SUPPORTED_LANGS, default=None)
    ap.add_argument("--explain", action="store_true", help="print the TF-IDF ranking too")
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    settings = Settings.from_env()
    lang = args.lang or settings.default_lang
    store = open_store(settings)
    selector = AnswerSelector(
        cache=ResponseCache(store, ttl_ms=settings.cache_ttl_ms),
        usage=UsageCounter(store),
        settings=settings,
    )

    reply = selector.answer(args.query, lang)
    result = reply.result
    if result is None:
        print(NO_RESULT[lang])
    else:
        print(f"[{result.provenance.value}] score={result.score:.3f} category={result.item.category}")
        print(result.item.answer)
        for i, step in enumerate(result.item.steps, 1):
            print(f"  {i}. {step}")
        if result.item.links:
            for title, url in result.item.links:
                print(f"  -> {title}: {url}")
        elif result.item.link:
            print(f"  -> {result.item.link}")

    if args.explain and selector.active_index is not None:
        print("\n--- ranking ---")
        for r in search(args.query, selector.active_index, top_k=settings.top_k):
            print(f"{r.score:.4f}  {r.item.id}  {r.item.question}")

    print(f"\n(questions answered: {reply.questions_count})")
    if reply.badge_unlocked:
        print("Badge unlocked: Expert démarches")


if __name__ == "__main__":
    main()
