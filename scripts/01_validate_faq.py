# scripts/01_validate_faq.py
# -*- coding: utf-8 -*-
"""
Validator for the bundled FAQ corpora and keyword rule tables:
- every FAQ entry has id/title/question/keywords/answer/category/lang
- ids are unique and the lang tag matches the file
- each corpus builds a TF-IDF index
- each rule has a response, a category and a keyword that survives normalization
Prints a summary (or a JSON report with --json). Exit code 1 on any error.

Usage:
  python scripts/01_validate_faq.py
  python scripts/01_validate_faq.py --json > faq_report.json
"""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import List

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from assistant.corpus_loader import SUPPORTED_LANGS, CorpusError, faq_path, load_faq_file  # noqa: E402
from assistant.faq import RULES_DIR, load_rules_file  # noqa: E402
from assistant.tfidf_index import build_index  # noqa: E402


@dataclass
class LangReport:
    lang: str
    documents: int = 0
    vocabulary: int = 0
    rules: int = 0
    errors: List[str] = field(default_factory=list)


def validate_lang(lang: str) -> LangReport:
    rpt = LangReport(lang=lang)
    try:
        docs = load_faq_file(faq_path(lang), lang=lang)
        index = build_index(docs, lang=lang)
        rpt.documents = len(index)
        rpt.vocabulary = index.vocabulary_size
    except CorpusError as exc:
        rpt.errors.append(f"corpus: {exc}")
    try:
        rpt.rules = len(load_rules_file(RULES_DIR / f"rules_{lang}.json"))
    except CorpusError as exc:
        rpt.errors.append(f"rules: {exc}")
    return rpt


def main() -> None:
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    json_mode = "--json" in sys.argv
    reports = [validate_lang(lang) for lang in SUPPORTED_LANGS]
    has_errors = any(r.errors for r in reports)

    if json_mode:
        print(json.dumps([asdict(r) for r in reports], ensure_ascii=False, indent=2))
    else:
        print("=== FAQ VALIDATION SUMMARY ===")
        for r in reports:
            print(f"[{r.lang}] documents={r.documents} vocabulary={r.vocabulary} rules={r.rules}")
            for err in r.errors:
                print(f"  - {err}")
        print()
        print("Errors found." if has_errors else "No errors detected.")

    sys.exit(1 if has_errors else 0)


if __name__ == "__main__":
    main()
