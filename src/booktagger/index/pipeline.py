"""Two-pass keyword extraction pipeline."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Sequence

from booktagger.config import AppConfig
from booktagger.errors import DecodeError, EmptyDocumentError
from booktagger.index.corpus import CorpusIndex
from booktagger.index.exporter import CorpusExporter, content_id, generate_id
from booktagger.ingestion.loader import extract_text
from booktagger.keywords.dates import extract_years
from booktagger.keywords.filters import ExclusionSet, filter_tokens
from booktagger.keywords.postprocess import KeywordPostProcessor, SurfaceForms
from booktagger.keywords.tokenizer import iter_tokens
from booktagger.models import DocumentAnalysis, DocumentRecord, ExtractedText
from booktagger.utils.files import iter_document_paths

LOGGER = logging.getLogger(__name__)

Extractor = Callable[[Path], ExtractedText]


def find_documents(paths: Sequence[Path]) -> list[Path]:
    """Find all PDF and EPUB files under the given paths."""
    return list(iter_document_paths(paths))


@dataclass(slots=True)
class RunStats:
    recorded: int = 0
    empty: int = 0
    omitted: int = 0
    failed: int = 0
    processed_files: list[Path] = field(default_factory=list)

    def increment(self, status: str, path: Path) -> None:
        if status == "recorded":
            self.recorded += 1
        elif status == "empty":
            self.empty += 1
        elif status == "omitted":
            self.omitted += 1
        else:
            self.failed += 1
        self.processed_files.append(path)


@dataclass(slots=True)
class RunResult:
    exporter: CorpusExporter
    stats: RunStats


class KeywordPipeline:
    """Coordinates extraction, corpus statistics and keyword assembly.

    Pass one decodes and analyzes files on a thread pool, then folds each
    result into the corpus index in path order. Pass two scores every
    document against the finished index.
    """

    def __init__(
        self,
        config: AppConfig,
        exclusions: ExclusionSet,
        *,
        extractor: Extractor = extract_text,
    ) -> None:
        self.config = config
        self.exclusions = exclusions
        self.extractor = extractor
        self.postprocessor = KeywordPostProcessor(top_k=config.top_k)

    def analyze_text(self, doc_id: str, path: Path, title: str, text: str) -> DocumentAnalysis:
        """Reduce raw text to filtered terms, spellings and years."""
        tokens = list(
            filter_tokens(
                iter_tokens(text, min_length=self.config.min_token_length), self.exclusions
            )
        )
        surface_forms = SurfaceForms.from_tokens(tokens)
        years = extract_years(text, min_year=self.config.min_year, max_year=self.config.max_year)
        return DocumentAnalysis(
            doc_id=doc_id,
            path=path,
            title=title,
            terms=[token.term for token in tokens],
            surface_counts=surface_forms.counts,
            years=years,
        )

    def _new_id(self, path: Path) -> str:
        if self.config.id_strategy == "content":
            return content_id(path)
        return generate_id()

    def _analyze_path(self, path: Path) -> DocumentAnalysis:
        extracted = self.extractor(path)
        analysis = self.analyze_text(self._new_id(path), path, extracted.title, extracted.text)
        LOGGER.debug("Analyzed %s: %d terms, %d years", path, len(analysis.terms), len(analysis.years))
        return analysis

    @staticmethod
    def _check_not_empty(analysis: DocumentAnalysis) -> None:
        if not analysis.terms:
            raise EmptyDocumentError(analysis.path)

    def run(self, paths: Sequence[Path]) -> RunResult:
        """Extract keywords for every document found under ``paths``."""
        exporter = CorpusExporter(on_error="fail" if self.config.strict else "skip")
        stats = RunStats()
        documents = find_documents(paths)
        if not documents:
            LOGGER.warning("No PDF or EPUB files found")
            return RunResult(exporter, stats)

        index = CorpusIndex()
        analyses: List[DocumentAnalysis] = []

        with ThreadPoolExecutor(max_workers=self.config.workers) as pool:
            futures = [pool.submit(self._analyze_path, path) for path in documents]
            try:
                for path, future in zip(documents, futures):
                    LOGGER.info("Processing: %s", path)
                    try:
                        analysis = future.result()
                    except DecodeError as exc:
                        stats.increment("failed", path)
                        exporter.record_failure(path, exc.reason)
                        continue
                    except Exception as exc:
                        LOGGER.error("Failed to process %s: %s", path, exc)
                        stats.increment("failed", path)
                        exporter.record_failure(path, str(exc))
                        continue

                    if analysis.doc_id in index:
                        stats.increment("failed", path)
                        exporter.record_failure(
                            path, f"duplicate document id {analysis.doc_id}"
                        )
                        continue

                    try:
                        self._check_not_empty(analysis)
                    except EmptyDocumentError as exc:
                        if self.config.skip_empty:
                            LOGGER.warning("%s; omitting", exc)
                            stats.increment("omitted", path)
                            continue
                        LOGGER.warning("%s; recording without ranked keywords", exc)
                        stats.increment("empty", path)

                    index.accumulate(analysis.doc_id, analysis.terms)
                    analysis.terms = []
                    analyses.append(analysis)
            except BaseException:
                # Queued files are not decoded once the run is aborting.
                pool.shutdown(wait=False, cancel_futures=True)
                raise

        index.finalize()

        for analysis in analyses:
            keywords = self.postprocessor.process(
                index.score(analysis.doc_id),
                SurfaceForms(analysis.surface_counts),
                analysis.years,
            )
            exporter.add(
                DocumentRecord(
                    doc_id=analysis.doc_id,
                    path=analysis.path,
                    title=analysis.title,
                    keywords=tuple(keywords),
                )
            )
            if index.term_frequencies(analysis.doc_id):
                stats.increment("recorded", analysis.path)

        return RunResult(exporter, stats)
