"""Tests for CorpusIndex."""

from __future__ import annotations

import math

import pytest

from booktagger.errors import CorpusInvariantError
from booktagger.index.corpus import CorpusIndex


@pytest.fixture
def index() -> CorpusIndex:
    corpus = CorpusIndex()
    corpus.accumulate("a", ["dragon", "dragon", "castle"])
    corpus.accumulate("b", ["castle", "knight"])
    corpus.accumulate("c", ["dragon", "knight", "knight"])
    corpus.finalize()
    return corpus


class TestAccumulate:
    """Test corpus accumulation."""

    def test_term_frequencies(self, index):
        """Counts are kept per document."""
        assert index.term_frequencies("a") == {"dragon": 2, "castle": 1}
        assert index.term_frequencies("c") == {"dragon": 1, "knight": 2}

    def test_document_frequency_counts_documents_once(self, index):
        """Repeats inside one document do not inflate df."""
        assert index.document_frequency("dragon") == 2
        assert index.document_frequency("castle") == 2
        assert index.document_frequency("knight") == 2
        assert index.document_frequency("wizard") == 0

    def test_every_term_has_document_frequency(self, index):
        """Each counted term is reflected in df with 1 <= df <= N."""
        for doc_id in index.doc_ids:
            for term in index.term_frequencies(doc_id):
                assert 1 <= index.document_frequency(term) <= index.document_count

    def test_duplicate_document_rejected(self):
        """A document can only be accumulated once."""
        corpus = CorpusIndex()
        corpus.accumulate("a", ["dragon"])

        with pytest.raises(CorpusInvariantError):
            corpus.accumulate("a", ["dragon"])

    def test_finalized_index_closed(self, index):
        """No documents can join after finalize."""
        with pytest.raises(CorpusInvariantError):
            index.accumulate("d", ["wizard"])

    def test_empty_document_counts_toward_total(self):
        """Documents without terms still count in N."""
        corpus = CorpusIndex()
        corpus.accumulate("a", [])
        corpus.accumulate("b", ["dragon"])

        assert corpus.document_count == 2
        assert "a" in corpus
        assert corpus.score("a") == []


class TestScore:
    """Test TF-IDF scoring."""

    def test_three_document_scenario(self, index):
        """All terms have df=2 of N=3, so score is tf * ln(3/2)."""
        idf = math.log(3 / 2)

        scores_a = {s.term: s.score for s in index.score("a")}
        scores_b = {s.term: s.score for s in index.score("b")}

        assert scores_a["dragon"] == pytest.approx(2 * idf)
        assert scores_a["castle"] == pytest.approx(idf)
        assert scores_b["castle"] == pytest.approx(scores_b["knight"])
        assert scores_b["castle"] > 0

    def test_ranking_descending_with_tiebreak(self, index):
        """Higher scores first; equal scores in term order."""
        assert [s.term for s in index.score("a")] == ["dragon", "castle"]
        assert [s.term for s in index.score("b")] == ["castle", "knight"]

    def test_term_in_every_document_scores_zero(self):
        """A ubiquitous term is uninformative."""
        corpus = CorpusIndex()
        corpus.accumulate("a", ["book", "book", "dragon"])
        corpus.accumulate("b", ["book", "knight"])
        corpus.finalize()

        scores = {s.term: s.score for s in corpus.score("a")}

        assert scores["book"] == 0.0
        assert scores["dragon"] > 0.0

    def test_single_document_all_zero(self):
        """With one document every term is in every document."""
        corpus = CorpusIndex()
        corpus.accumulate("a", ["dragon", "castle", "dragon"])
        corpus.finalize()

        ranked = corpus.score("a")

        assert [s.score for s in ranked] == [0.0, 0.0]
        assert [s.term for s in ranked] == ["castle", "dragon"]

    def test_scoring_is_repeatable(self, index):
        """Scoring twice gives the same ranking."""
        assert index.score("c") == index.score("c")

    def test_unknown_document(self, index):
        """Scoring a document that was never added fails loudly."""
        with pytest.raises(KeyError):
            index.score("missing")


class TestInvariants:
    """Test check_invariants."""

    def test_consistent_index_passes(self, index):
        """A normally built index is valid."""
        index.check_invariants()

    def test_document_frequency_above_total_detected(self):
        """df greater than N aborts."""
        corpus = CorpusIndex()
        corpus.accumulate("a", ["dragon"])
        corpus._document_frequencies["dragon"] = 5

        with pytest.raises(CorpusInvariantError):
            corpus.finalize()

    def test_missing_document_frequency_detected(self):
        """A counted term without df aborts."""
        corpus = CorpusIndex()
        corpus.accumulate("a", ["dragon"])
        del corpus._document_frequencies["dragon"]

        with pytest.raises(CorpusInvariantError):
            corpus.check_invariants()
