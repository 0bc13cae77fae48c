"""Grapheme-aware word tokenizer.

A word is a run of grapheme clusters that each start with a letter or a
digit. Apostrophes split words like any other punctuation, so
``dragon's`` yields ``dragon`` and a one-letter ``s`` that falls under the
minimum length. Matching whole clusters keeps combining marks on their
base letter, so a decomposed ``é`` never splits a word in two.
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from typing import Iterator, List

import regex

from booktagger.utils.text import grapheme_length

_CLUSTER = r"(?:(?=[\p{L}\p{N}])\X)"
WORD_RE = regex.compile(rf"{_CLUSTER}+")
NUMERIC_RE = regex.compile(r"\p{N}+")
_POSSESSIVE_RE = regex.compile(r"['’]s$", regex.IGNORECASE)
_APOSTROPHE_RE = regex.compile(r"['’]")


@dataclass(frozen=True, slots=True)
class Token:
    term: str
    surface: str


def normalize_term(surface: str) -> str:
    """Canonical matching form: NFC, apostrophes removed, case-folded.

    A trailing possessive is dropped first, so ``Dragon's`` and ``dragon``
    compare equal.
    """
    text = unicodedata.normalize("NFC", surface)
    text = _APOSTROPHE_RE.sub("", _POSSESSIVE_RE.sub("", text))
    return text.casefold()


def iter_tokens(text: str, *, min_length: int = 3) -> Iterator[Token]:
    """Lazily yield tokens from raw text.

    Tokens shorter than ``min_length`` graphemes and purely numeric tokens
    are dropped; years are picked up separately from the raw text.
    """
    for match in WORD_RE.finditer(text):
        surface = match.group(0)
        if NUMERIC_RE.fullmatch(surface):
            continue
        if grapheme_length(surface) < min_length:
            continue
        yield Token(term=normalize_term(surface), surface=unicodedata.normalize("NFC", surface))


def tokenize(text: str, *, min_length: int = 3) -> List[str]:
    """Return the normalized terms of ``text`` in order.

    Examples:
        >>> tokenize("The Dragon's castle, 1999!")
        ['the', 'dragon', 'castle']
    """
    return [token.term for token in iter_tokens(text, min_length=min_length)]
