"""Corpus-wide term statistics and TF-IDF scoring."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, Iterable, List

import numpy as np

from booktagger.errors import CorpusInvariantError
from booktagger.models import ScoredTerm

LOGGER = logging.getLogger(__name__)


class CorpusIndex:
    """Term frequencies per document and document frequencies per term.

    One index lives for one run. Documents are accumulated first; scores
    are only final once :meth:`finalize` has been called, because document
    frequency is a whole-corpus statistic.

    Scores use the natural log: ``tfidf = tf * ln(N / df)``, which is zero
    for a term found in every document.
    """

    def __init__(self) -> None:
        self._term_frequencies: Dict[str, Counter[str]] = {}
        self._document_frequencies: Counter[str] = Counter()
        self._finalized = False

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self._term_frequencies

    @property
    def document_count(self) -> int:
        return len(self._term_frequencies)

    @property
    def doc_ids(self) -> List[str]:
        return list(self._term_frequencies)

    def accumulate(self, doc_id: str, terms: Iterable[str]) -> None:
        """Add one document's filtered terms to the corpus."""
        if self._finalized:
            raise CorpusInvariantError(f"Cannot accumulate {doc_id} into a finalized index")
        if doc_id in self._term_frequencies:
            raise CorpusInvariantError(f"Document {doc_id} accumulated twice")

        counts: Counter[str] = Counter(terms)
        self._term_frequencies[doc_id] = counts
        # Counter keys are distinct, so each document adds at most one per term.
        self._document_frequencies.update(counts.keys())
        LOGGER.debug("Accumulated %s: %d distinct terms", doc_id, len(counts))

    def term_frequencies(self, doc_id: str) -> Dict[str, int]:
        return dict(self._term_frequencies[doc_id])

    def document_frequency(self, term: str) -> int:
        return self._document_frequencies.get(term, 0)

    def check_invariants(self) -> None:
        total = self.document_count
        for term, df in self._document_frequencies.items():
            if df > total:
                raise CorpusInvariantError(
                    f"Document frequency of {term!r} is {df} but only {total} documents exist"
                )
        for doc_id, counts in self._term_frequencies.items():
            for term, tf in counts.items():
                if tf < 1:
                    raise CorpusInvariantError(f"Non-positive count for {term!r} in {doc_id}")
                if self._document_frequencies.get(term, 0) < 1:
                    raise CorpusInvariantError(
                        f"Term {term!r} of {doc_id} missing from document frequencies"
                    )

    def finalize(self) -> None:
        """Validate the statistics and close the index to new documents."""
        self.check_invariants()
        self._finalized = True
        LOGGER.info(
            "Corpus finalized: %d documents, %d distinct terms",
            self.document_count,
            len(self._document_frequencies),
        )

    def score(self, doc_id: str) -> List[ScoredTerm]:
        """Rank the terms of one document by TF-IDF."""
        if not self._finalized:
            LOGGER.debug("Scoring %s before finalize; ranking is provisional", doc_id)

        counts = self._term_frequencies[doc_id]
        if not counts:
            return []

        terms = list(counts)
        tf = np.fromiter((counts[t] for t in terms), dtype=np.float64, count=len(terms))
        df = np.fromiter(
            (max(self._document_frequencies[t], 1) for t in terms),
            dtype=np.float64,
            count=len(terms),
        )
        idf = np.maximum(np.log(self.document_count / df), 0.0)
        scores = tf * idf

        ranked = [ScoredTerm(term, float(score)) for term, score in zip(terms, scores)]
        ranked.sort(key=ScoredTerm.rank_key)
        return ranked
