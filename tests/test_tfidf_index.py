import math

import pytest

from assistant.corpus_loader import CorpusError
from assistant.tfidf_index import build_index
from conftest import make_item


@pytest.fixture
def two_docs():
    a = make_item("a", title="alpha", question="beta", keywords=["gamma"], answer="alpha")
    b = make_item("b", title="alpha", question="delta", answer="delta")
    return [a, b]


def test_idf_is_log_ratio_plus_one(two_docs):
    index = build_index(two_docs, lang="fr")
    assert index.idf["alpha"] == pytest.approx(1.0)  # in every document
    assert index.idf["beta"] == pytest.approx(math.log(2) + 1)
    assert index.idf["delta"] == pytest.approx(math.log(2) + 1)
    assert index.vocabulary_size == 4


def test_term_frequency_counts_duplicates(two_docs):
    index = build_index(two_docs, lang="fr")
    vec_a = index.vectors["a"]
    vec_b = index.vectors["b"]
    # a -> [alpha, beta, gamma, alpha]
    assert vec_a["alpha"] == pytest.approx(2 / 4 * 1.0)
    assert vec_a["beta"] == pytest.approx(1 / 4 * (math.log(2) + 1))
    # b -> [alpha, delta, delta]
    assert vec_b["delta"] == pytest.approx(2 / 3 * (math.log(2) + 1))
    assert "beta" not in vec_b


def test_every_vector_belongs_to_a_loaded_document(two_docs):
    index = build_index(two_docs)
    assert set(index.vectors) == {d.id for d in index.documents}
    assert len(index) == 2


def test_index_is_read_only(two_docs):
    index = build_index(two_docs)
    with pytest.raises(TypeError):
        index.idf["new"] = 1.0  # type: ignore[index]


def test_rebuild_recomputes_idf_over_new_set(two_docs):
    first = build_index(two_docs)
    second = build_index(two_docs[:1])
    assert first.idf["beta"] == pytest.approx(math.log(2) + 1)
    assert second.idf["beta"] == pytest.approx(1.0)
    assert "delta" not in second.idf


def test_duplicate_ids_fail_fast():
    docs = [make_item("x", title="un"), make_item("x", title="deux")]
    with pytest.raises(CorpusError):
        build_index(docs)


def test_language_mismatch_fails_fast():
    with pytest.raises(CorpusError):
        build_index([make_item("x", title="bonjour", lang="ar")], lang="fr")


def test_non_item_input_fails_fast():
    with pytest.raises(CorpusError):
        build_index([{"id": "x"}])  # type: ignore[list-item]


def test_empty_corpus_gives_empty_index():
    index = build_index([], lang="fr")
    assert len(index) == 0
    assert index.vocabulary_size == 0


def test_corpus_without_vocabulary_gives_empty_vectors():
    index = build_index([make_item("x", title="?!", question="...", keywords=[], answer="a")])
    assert index.vocabulary_size == 0
    assert index.vectors["x"] == {}
    assert index.weigh("alpha") is None


def test_sparse_matrix_rows_match_vectors(two_docs):
    index = build_index(two_docs)
    assert index.matrix.shape == (2, index.vocabulary_size)
    col = index.terms.index("delta")
    assert index.matrix[1, col] == pytest.approx(index.vectors["b"]["delta"])
    assert index.matrix[0, col] == 0.0


def test_query_weighs_like_a_document(two_docs):
    index = build_index(two_docs)
    assert index.query_vector("alpha beta gamma alpha") == pytest.approx(dict(index.vectors["a"]))
    assert index.query_vector("zeta zeta") == {}
