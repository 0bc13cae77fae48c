"""Stop-word and exclusion filtering.

The exclusion list is a CSV file with a header row; the first column of
every following row is one term to keep out of the keyword sets. Bad rows
are skipped one at a time and an unreadable file degrades to the built-in
stop-words, so a broken config never stops a run.
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Iterable, Iterator, List, Optional, Tuple

from booktagger.keywords.stopwords import ENGLISH_STOPWORDS
from booktagger.keywords.tokenizer import WORD_RE, Token, normalize_term

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ConfigWarning:
    """Non-fatal problem found while loading the exclusion file."""

    message: str
    line: Optional[int] = None

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        return f"line {self.line}: {self.message}"


@dataclass(frozen=True, slots=True)
class ExclusionSet:
    stopwords: FrozenSet[str] = ENGLISH_STOPWORDS
    exclusions: FrozenSet[str] = frozenset()
    warnings: Tuple[ConfigWarning, ...] = field(default=(), compare=False)

    def excludes(self, term: str) -> bool:
        """Whether a term is a stop-word or a user exclusion.

        A user exclusion also covers its plain plural, so excluding
        ``tag`` removes ``tags`` as well.
        """
        folded = normalize_term(term)
        if folded in self.stopwords or folded in self.exclusions:
            return True
        return folded.endswith("s") and folded[:-1] in self.exclusions


def _parse_rows(lines: Iterable[str]) -> Iterator[Tuple[int, Optional[str], Optional[str]]]:
    """Yield (line number, term, error) for every data row."""
    for lineno, line in enumerate(lines, start=1):
        if lineno == 1:
            continue  # header
        if not line.strip():
            continue
        try:
            row = next(csv.reader([line]))
        except csv.Error as exc:
            yield lineno, None, f"unparseable row ({exc})"
            continue
        term = row[0].strip() if row else ""
        if not term:
            yield lineno, None, "empty exclusion term"
        elif not WORD_RE.fullmatch(normalize_term(term)):
            yield lineno, None, f"not a single word: {term!r}"
        else:
            yield lineno, term, None


def load_exclusions(
    path: Optional[Path], stopwords: FrozenSet[str] = ENGLISH_STOPWORDS
) -> ExclusionSet:
    """Load user exclusions from ``path`` on top of ``stopwords``.

    Never raises for a bad file; problems are logged and kept on the
    returned set as ``warnings``.
    """
    if path is None:
        return ExclusionSet(stopwords=stopwords)

    warnings: List[ConfigWarning] = []
    terms: set[str] = set()
    try:
        with Path(path).open("r", encoding="utf-8", newline="") as handle:
            for lineno, term, error in _parse_rows(handle):
                if error is not None:
                    warnings.append(ConfigWarning(error, lineno))
                else:
                    terms.add(normalize_term(term))
    except (OSError, UnicodeDecodeError) as exc:
        warning = ConfigWarning(f"cannot read exclusion file {path}: {exc}; using stop-words only")
        LOGGER.warning("%s", warning)
        return ExclusionSet(stopwords=stopwords, warnings=(warning,))

    for warning in warnings:
        LOGGER.warning("Skipping exclusion in %s, %s", path, warning)
    LOGGER.info("Loaded %d exclusions from %s", len(terms), path)
    return ExclusionSet(stopwords=stopwords, exclusions=frozenset(terms), warnings=tuple(warnings))


def keep(term: str, exclusions: ExclusionSet) -> bool:
    return not exclusions.excludes(term)


def filter_tokens(tokens: Iterable[Token], exclusions: ExclusionSet) -> Iterator[Token]:
    """Drop excluded tokens; runs before any frequency counting."""
    return (token for token in tokens if keep(token.term, exclusions))
