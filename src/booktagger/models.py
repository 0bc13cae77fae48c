"""Core BookTagger data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Set, Tuple


@dataclass(slots=True)
class ExtractedText:
    """Raw text decoded from a source file."""

    path: Path
    title: str
    text: str


@dataclass(slots=True)
class DocumentAnalysis:
    """Everything the pipeline keeps about a document once its raw text is gone."""

    doc_id: str
    path: Path
    title: str
    terms: List[str]
    surface_counts: Dict[str, Dict[str, int]] = field(default_factory=dict)
    years: Set[str] = field(default_factory=set)


@dataclass(frozen=True, slots=True)
class ScoredTerm:
    """Term paired with its TF-IDF weight."""

    term: str
    score: float

    def rank_key(self) -> Tuple[float, str]:
        """Descending score, then the term itself for deterministic ties."""
        return (-self.score, self.term)


@dataclass(frozen=True, slots=True)
class DocumentRecord:
    """Final keyword set for one document."""

    doc_id: str
    path: Path
    title: str
    keywords: Tuple[str, ...] = ()

    @property
    def filename(self) -> str:
        return self.path.name

    def to_dict(self) -> Dict[str, object]:
        return {
            "filename": self.filename,
            "path": str(self.path),
            "title": self.title,
            "keywords": list(self.keywords),
        }
