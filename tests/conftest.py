import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.append(str(PROJECT_ROOT))

from assistant.corpus_loader import FAQItem
from assistant.storage import MemoryStore, StoreError


def make_item(doc_id: str, *, title="", question="", keywords=(), answer="", category="documents", lang="fr"):
    return FAQItem(
        id=doc_id,
        title=title,
        question=question,
        keywords=tuple(keywords),
        answer=answer,
        category=category,
        lang=lang,
    )


class FakeClock:
    def __init__(self, start_ms: int = 1_700_000_000_000):
        self.now = start_ms

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class BrokenStore:
    """Every operation fails the way an unreachable backend would."""

    def read(self, key):
        raise StoreError("store offline")

    def write(self, key, value):
        raise StoreError("store offline")

    def delete(self, key):
        raise StoreError("store offline")


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def id_card_item():
    return make_item(
        "fr-cni",
        title="Carte d'identité",
        question="Comment renouveler sa carte d'identité ?",
        keywords=["carte", "identité"],
        answer="Prenez rendez-vous en mairie.",
    )
