"""Tests for keyword post-processing."""

from __future__ import annotations

import pytest

from booktagger.keywords.postprocess import KeywordPostProcessor, SurfaceForms, recapitalize
from booktagger.keywords.tokenizer import iter_tokens
from booktagger.models import ScoredTerm


class TestSurfaceForms:
    """Test majority voting over spellings."""

    def test_majority_wins(self) -> None:
        """The most frequent spelling is chosen."""
        forms = SurfaceForms.from_tokens(iter_tokens("paris Paris Paris paris Paris"))

        assert forms.best("paris") == "Paris"

    def test_tie_goes_to_first_occurrence(self) -> None:
        """Equal counts fall back to the first spelling seen."""
        forms = SurfaceForms.from_tokens(iter_tokens("NASA nasa nasa NASA"))

        assert forms.best("nasa") == "NASA"

    def test_unknown_term_returns_term(self) -> None:
        """A term without recorded spellings is returned unchanged."""
        assert SurfaceForms().best("dragon") == "dragon"

    def test_wraps_existing_counts(self) -> None:
        """Counts gathered elsewhere can be reused."""
        forms = SurfaceForms({"paris": {"paris": 1, "Paris": 4}})

        assert forms.best("paris") == "Paris"


class TestRecapitalize:
    """Test recapitalize function."""

    @pytest.mark.parametrize(
        ("surface", "expected"),
        [
            ("dragon", "Dragon"),
            ("dragon's", "Dragon's"),
            ("NASA", "NASA"),
            ("iPhone", "iPhone"),
            ("éire", "Éire"),
        ],
    )
    def test_recapitalize(self, surface: str, expected: str) -> None:
        """Lowercase words get a capital; deliberate casing is kept."""
        assert recapitalize(surface) == expected


class TestKeywordPostProcessor:
    """Test KeywordPostProcessor.process."""

    def test_paris_deduplicated_to_majority_form(self) -> None:
        """Mixed-case occurrences collapse into one keyword."""
        forms = SurfaceForms.from_tokens(iter_tokens("Paris paris Paris Paris paris"))
        scored = [ScoredTerm("paris", 1.2)]

        assert KeywordPostProcessor().process(scored, forms) == ["Paris"]

    def test_years_first_and_outside_budget(self) -> None:
        """Years lead the list and do not consume the K budget."""
        scored = [ScoredTerm("dragon", 2.0), ScoredTerm("castle", 1.0), ScoredTerm("knight", 0.5)]

        keywords = KeywordPostProcessor(top_k=2).process(scored, SurfaceForms(), {"2001", "1999"})

        assert keywords == ["1999", "2001", "Dragon", "Castle"]

    def test_fewer_than_k_returns_all(self) -> None:
        """All survivors are returned when below budget."""
        scored = [ScoredTerm("dragon", 2.0)]

        assert KeywordPostProcessor(top_k=10).process(scored, SurfaceForms()) == ["Dragon"]

    def test_ranked_order_and_tiebreak(self) -> None:
        """Unsorted input is ranked by score, then term."""
        scored = [ScoredTerm("knight", 0.4), ScoredTerm("castle", 0.4), ScoredTerm("dragon", 0.8)]

        keywords = KeywordPostProcessor().process(scored, SurfaceForms())

        assert keywords == ["Dragon", "Castle", "Knight"]

    def test_collision_keeps_higher_score(self) -> None:
        """Keywords equal after normalization keep the higher-scoring one."""
        forms = SurfaceForms({"ﬁre": {"ﬁre": 1}, "fire": {"FIRE": 1}})
        scored = [ScoredTerm("ﬁre", 0.3), ScoredTerm("fire", 0.9)]

        keywords = KeywordPostProcessor(top_k=5).process(scored, forms)

        assert keywords == ["FIRE"]

    def test_duplicates_do_not_consume_budget(self) -> None:
        """A dropped duplicate leaves room for the next term."""
        forms = SurfaceForms({"ﬁre": {"ﬁre": 1}, "fire": {"fire": 1}})
        scored = [ScoredTerm("fire", 0.9), ScoredTerm("ﬁre", 0.8), ScoredTerm("water", 0.1)]

        keywords = KeywordPostProcessor(top_k=2).process(scored, forms)

        assert keywords == ["Fire", "Water"]

    def test_zero_budget_keeps_years(self) -> None:
        """top_k=0 still reports years."""
        scored = [ScoredTerm("dragon", 2.0)]

        assert KeywordPostProcessor(top_k=0).process(scored, SurfaceForms(), {"1984"}) == ["1984"]

    def test_negative_budget_rejected(self) -> None:
        """The budget cannot be negative."""
        with pytest.raises(ValueError):
            KeywordPostProcessor(top_k=-1)
