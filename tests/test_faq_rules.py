import pytest

from assistant.corpus_loader import CorpusError
from assistant.faq import KeywordRule, apply_rules, load_rules, parse_rules
from assistant.retriever import Provenance

PASSPORT_ONLY = {
    "fr": [KeywordRule("passeport", "Rendez-vous sur service-public.fr.", "documents")],
}


def test_passport_rule_matches_french_query():
    hit = apply_rules("je voudrais un passeport", "fr", rules=PASSPORT_ONLY)
    assert hit is not None
    assert hit.provenance is Provenance.RULE
    assert hit.item.category == "documents"
    assert hit.score == pytest.approx(0.4)
    assert hit.item.id == "rule-passeport"
    assert hit.item.question == "je voudrais un passeport"
    assert hit.item.title == "Réponse automatique"


def test_rule_matching_is_substring_not_token():
    assert apply_rules("PASSEPORTS perdus", "fr", rules=PASSPORT_ONLY) is not None


def test_rule_confidence_is_configurable():
    hit = apply_rules("passeport", "fr", rules=PASSPORT_ONLY, confidence=0.7)
    assert hit.score == pytest.approx(0.7)


def test_first_declared_rule_wins():
    rules = {
        "fr": [
            KeywordRule("carte", "générique", "documents"),
            KeywordRule("carte grise", "spécifique", "transport"),
        ]
    }
    hit = apply_rules("ma carte grise", "fr", rules=rules)
    assert hit.item.answer == "générique"
    rules["fr"].reverse()
    hit = apply_rules("ma carte grise", "fr", rules=rules)
    assert hit.item.answer == "spécifique"


def test_no_match_unknown_language_and_empty_query():
    assert apply_rules("bonjour", "fr", rules=PASSPORT_ONLY) is None
    assert apply_rules("passeport", "de", rules=PASSPORT_ONLY) is None
    assert apply_rules("?!", "fr", rules=PASSPORT_ONLY) is None


def test_bundled_rules_keep_declaration_order():
    rules = load_rules()
    assert [r.keyword for r in rules["fr"]][:3] == ["passeport", "naissance", "identité"]
    assert rules["ar"][0].keyword == "جواز"


def test_bundled_french_rule_ignores_accents():
    hit = apply_rules("date limite des impots", "fr")
    assert hit is not None
    assert hit.item.category == "fiscal"


def test_bundled_arabic_rule():
    hit = apply_rules("أريد تجديد جواز السفر", "ar")
    assert hit is not None
    assert hit.item.category == "documents"
    assert hit.item.title == "رد تلقائي"


@pytest.mark.parametrize(
    "raw",
    [
        {"visa": {"category": "immigration"}},
        {"visa": {"response": "ok"}},
        {"visa": "ok"},
        {"?!": {"response": "ok", "category": "x"}},
    ],
)
def test_malformed_rule_table_fails_fast(raw):
    with pytest.raises(CorpusError):
        parse_rules(raw)
