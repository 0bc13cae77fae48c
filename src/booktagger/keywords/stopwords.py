"""English stop-word list.

Union of the classic NLTK English list and a handful of words that are
frequent in book front matter and carry no topical signal.
"""

from __future__ import annotations

from typing import FrozenSet

_ENGLISH: FrozenSet[str] = frozenset([
    "a", "about", "above", "after", "again", "against", "ain", "all", "am", "an",
    "and", "any", "are", "aren", "aren't", "as", "at", "be", "because", "been",
    "before", "being", "below", "between", "both", "but", "by", "can", "could",
    "couldn", "couldn't", "d", "did", "didn", "didn't", "do", "does", "doesn",
    "doesn't", "doing", "don", "don't", "down", "during", "each", "few", "for",
    "from", "further", "had", "hadn", "hadn't", "has", "hasn", "hasn't", "have",
    "haven", "haven't", "having", "he", "he'd", "he'll", "he's", "her", "here",
    "hers", "herself", "him", "himself", "his", "how", "i", "i'd", "i'll", "i'm",
    "i've", "if", "in", "into", "is", "isn", "isn't", "it", "it'd", "it'll",
    "it's", "its", "itself", "just", "ll", "m", "ma", "me", "might", "mightn",
    "mightn't", "more", "most", "must", "mustn", "mustn't", "my", "myself",
    "needn", "needn't", "no", "nor", "not", "now", "o", "of", "off", "on", "once",
    "only", "or", "other", "our", "ours", "ourselves", "out", "over", "own", "re",
    "s", "same", "shan", "shan't", "she", "she'd", "she'll", "she's", "should",
    "should've", "shouldn", "shouldn't", "so", "some", "such", "t", "than", "that",
    "that'll", "the", "their", "theirs", "them", "themselves", "then", "there",
    "these", "they", "they'd", "they'll", "they're", "they've", "this", "those",
    "through", "to", "too", "under", "until", "up", "upon", "us", "ve", "very",
    "was", "wasn", "wasn't", "we", "we'd", "we'll", "we're", "we've", "were",
    "weren", "weren't", "what", "when", "where", "which", "while", "who", "whom",
    "why", "will", "with", "won", "won't", "would", "wouldn", "wouldn't", "y",
    "you", "you'd", "you'll", "you're", "you've", "your", "yours", "yourself",
    "yourselves",
])

_BOOK_NOISE = [
    "also", "another", "chapter", "contents", "copyright", "edition", "even",
    "however", "isbn", "may", "many", "much", "one", "page", "published",
    "rights", "reserved", "said", "see", "shall", "still", "two", "well", "yet",
]

ENGLISH_STOPWORDS: FrozenSet[str] = _ENGLISH.union(_BOOK_NOISE)
