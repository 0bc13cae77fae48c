"""Turn ranked terms into display-ready keywords."""

from __future__ import annotations

import logging
import unicodedata
from typing import Dict, Iterable, List, Optional, Sequence

from booktagger.config import DEFAULT_TOP_K
from booktagger.keywords.tokenizer import Token
from booktagger.models import ScoredTerm
from booktagger.utils.text import capitalize_first

LOGGER = logging.getLogger(__name__)


class SurfaceForms:
    """Tracks how each term was spelled in the source text.

    The best spelling is the most frequent one; on a tie the spelling seen
    first wins. Insertion order of the inner dicts records first occurrence.
    """

    def __init__(self, counts: Optional[Dict[str, Dict[str, int]]] = None) -> None:
        self.counts: Dict[str, Dict[str, int]] = counts if counts is not None else {}

    @classmethod
    def from_tokens(cls, tokens: Iterable[Token]) -> "SurfaceForms":
        forms = cls()
        for token in tokens:
            forms.add(token)
        return forms

    def add(self, token: Token) -> None:
        spellings = self.counts.setdefault(token.term, {})
        spellings[token.surface] = spellings.get(token.surface, 0) + 1

    def best(self, term: str) -> str:
        spellings = self.counts.get(term)
        if not spellings:
            return term
        winner, top = term, 0
        for surface, count in spellings.items():
            if count > top:
                winner, top = surface, count
        return winner


def recapitalize(surface: str) -> str:
    """Capitalize all-lowercase words; keep deliberate casing like ``NASA``."""
    if surface == surface.lower():
        return capitalize_first(surface)
    return surface


def dedup_key(keyword: str) -> str:
    return unicodedata.normalize("NFKC", keyword).casefold()


class KeywordPostProcessor:
    """Builds the final keyword list for one document.

    Years come first and do not count against ``top_k``; ranked terms
    follow in score order until the budget is spent.
    """

    def __init__(self, top_k: int = DEFAULT_TOP_K) -> None:
        if top_k < 0:
            raise ValueError(f"top_k must be >= 0, got {top_k}")
        self.top_k = top_k

    def process(
        self,
        scored: Sequence[ScoredTerm],
        surface_forms: SurfaceForms,
        years: Iterable[str] = (),
    ) -> List[str]:
        keywords: List[str] = []
        seen: set[str] = set()

        for year in sorted(set(years)):
            seen.add(dedup_key(year))
            keywords.append(year)

        taken = 0
        for item in sorted(scored, key=ScoredTerm.rank_key):
            if taken >= self.top_k:
                break
            keyword = recapitalize(surface_forms.best(item.term))
            key = dedup_key(keyword)
            if key in seen:
                LOGGER.debug("Dropping duplicate keyword %r (score %.4f)", keyword, item.score)
                continue
            seen.add(key)
            keywords.append(keyword)
            taken += 1
        return keywords
