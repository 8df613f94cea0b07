"""Query facade for the in-memory search engine.

``FastSearchEngine`` is the single public entry point: it owns the active
index snapshot, dispatches each query to the free-text ranking path or the
boolean path, highlights the hits and remembers the last response in a
one-slot cache.

Rebuilds construct a complete new snapshot off to the side and publish it
with a single reference swap, so a search never observes a half-built
index. Searches read the snapshot reference once and work against that
snapshot for their whole duration.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
import logging
import threading
import time
from typing import Any

from opentelemetry.trace import Status, StatusCode
from pydantic import ValidationError

from fast_search.config import SearchSettings
from fast_search.domain.search import EngineStats, Match, SearchOptions, SearchResponse, SearchType
from fast_search.errors import NOT_READY_MESSAGE, IndexBuildError
from fast_search.observability.metrics import TELEMETRY, SearchTelemetry
from fast_search.observability.tracing import create_span
from fast_search.search.analyzers import extract_words
from fast_search.search.boolean import BooleanEvaluator, highlight_terms, is_boolean_query, parse_boolean_query
from fast_search.search.filters import matches_metadata_filters
from fast_search.search.highlight import highlight_matches
from fast_search.search.index import IndexBuilder, IndexSnapshot
from fast_search.search.metrics import MetricsCollector, SearchSample
from fast_search.search.models import BooleanTokenType, CandidateSet
from fast_search.search.retriever import CandidateRetriever
from fast_search.search.scorer import RelevanceScorer


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CachedQuery:
    """The single cached query: its key, the snapshot it ran on and its response."""

    key: tuple[Any, ...]
    snapshot: IndexSnapshot
    response: SearchResponse


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000


def _as_collection(documents: object) -> list[object]:
    if documents is None:
        return []
    try:
        return list(documents)  # type: ignore[call-overload]
    except TypeError as exc:
        raise IndexBuildError(f"documents must be an iterable collection, got {type(documents).__name__!r}") from exc


class FastSearchEngine:
    """In-memory ranked and boolean full-text search over a document collection.

    Documents are mappings (their searchable text is assembled from their
    string fields) or objects implementing ``fast_search.documents.Document``.
    A document's id is its position in the collection passed to the
    constructor or to ``update_data``.
    """

    def __init__(
        self,
        documents: Sequence[object] | None = None,
        *,
        settings: SearchSettings | None = None,
        name: str = "default",
        telemetry: SearchTelemetry | None = None,
    ) -> None:
        self.settings = settings or SearchSettings()
        self.name = name
        self.telemetry = telemetry or TELEMETRY
        self._builder = IndexBuilder(self.settings)
        self._retriever = CandidateRetriever(self.settings)
        self._scorer = RelevanceScorer(self.settings)
        self._evaluator = BooleanEvaluator()
        self._metrics = MetricsCollector()

        self._snapshot = IndexSnapshot.empty()
        self._cache: CachedQuery | None = None
        self._state_lock = threading.Lock()
        self._build_lock = threading.Lock()
        self._indexing = False
        self._last_build_error: str | None = None
        self._last_query: str | None = None
        self._last_result_count = 0

        if documents:
            self.update_data(documents)

    # ------------------------------------------------------------------ state

    @property
    def ready(self) -> bool:
        return self._snapshot.ready

    @property
    def snapshot(self) -> IndexSnapshot:
        """The currently published index snapshot."""
        return self._snapshot

    def update_data(self, documents: Iterable[object] | None) -> bool:
        """Rebuild the index from ``documents`` and clear the query cache.

        Returns True when the new index was installed. On a build failure the
        previous index stays active, the error is logged and reported by
        ``get_stats().last_build_error``, and False is returned.
        """

        with self._build_lock:
            with self._state_lock:
                self._indexing = True
            try:
                return self._rebuild(documents)
            finally:
                with self._state_lock:
                    self._indexing = False

    def _rebuild(self, documents: object) -> bool:
        started = time.perf_counter()
        with create_span(
            "fast_search.index.build",
            attributes={"search.engine": self.name},
            log_fields={"engine": self.name},
        ) as span:
            try:
                collection = _as_collection(documents)
                span.set_attribute("search.documents", len(collection))
                snapshot = self._builder.build(collection) if collection else IndexSnapshot.empty()
            except IndexBuildError as exc:
                logger.error("Index build rejected, keeping previous index: %s", exc, exc_info=True)
                self.telemetry.record_build(self.name, False, time.perf_counter() - started)
                span.set_status(Status(StatusCode.ERROR, str(exc)))
                span.set_attribute("search.build_error", str(exc))
                with self._state_lock:
                    self._last_build_error = str(exc)
                return False

            with self._state_lock:
                self._snapshot = snapshot
                self._cache = None
                self._last_build_error = None

            span.set_attribute("search.indexed_words", len(snapshot.word_index))

        self.telemetry.record_build(self.name, True, time.perf_counter() - started, documents=len(snapshot))
        if not snapshot.ready:
            logger.info("Search index cleared; engine %s is not ready", self.name)
        return True

    def clear_cache(self) -> None:
        with self._state_lock:
            self._cache = None

    def get_stats(self) -> EngineStats:
        with self._state_lock:
            snapshot = self._snapshot
            return EngineStats(
                total_documents=len(snapshot),
                indexed_words=len(snapshot.word_index),
                ready=snapshot.ready,
                indexing=self._indexing,
                last_query=self._last_query,
                last_result_count=self._last_result_count,
                last_build_error=self._last_build_error,
                last_build_time_ms=snapshot.build_time_ms,
                search_metrics=self._metrics.get_stats(),
            )

    # ----------------------------------------------------------------- search

    def search(
        self,
        query: str,
        options: SearchOptions | Mapping[str, Any] | None = None,
    ) -> SearchResponse:
        """Run ``query`` and return ranked, highlighted matches.

        Never raises for bad input: short queries yield an empty response,
        an unbuilt index yields an empty response with ``error`` set, and
        unexpected failures are logged and reported through ``error``.
        """

        started = time.perf_counter()
        query = query or ""
        if not isinstance(options, SearchOptions):
            try:
                options = SearchOptions.model_validate(options or {})
            except ValidationError as exc:
                logger.warning("Rejected search options for query %r: %s", query, exc)
                return SearchResponse(query=query, error=str(exc), search_time_ms=_elapsed_ms(started))

        if len(query) < self.settings.min_query_length:
            return SearchResponse(query=query, search_time_ms=_elapsed_ms(started))

        snapshot = self._snapshot
        if not snapshot.ready:
            logger.warning("Search index not ready (engine %s)", self.name)
            return SearchResponse(query=query, error=NOT_READY_MESSAGE, search_time_ms=_elapsed_ms(started))

        key = (query, options.cache_key(self.settings.default_fuzzy))
        with self._state_lock:
            cached = self._cache
        if cached is not None and cached.key == key and cached.snapshot is snapshot:
            response = cached.response.model_copy(update={"cached": True, "search_time_ms": _elapsed_ms(started)})
            self._record(response)
            return response

        search_type: SearchType = "boolean" if is_boolean_query(query) else "fast"
        with create_span(
            "fast_search.search",
            attributes={"search.engine": self.name, "search.type": search_type, "search.query_length": len(query)},
            log_fields={"engine": self.name},
        ) as span:
            try:
                if search_type == "boolean":
                    matches, total = self._boolean_search(snapshot, query, options)
                else:
                    matches, total = self._fast_search(snapshot, query, options)
            except Exception as exc:
                logger.exception("Search failed for query %r", query)
                span.set_status(Status(StatusCode.ERROR, str(exc)))
                return SearchResponse(
                    query=query,
                    error=str(exc),
                    search_time_ms=_elapsed_ms(started),
                    search_type=search_type,
                )
            span.set_attribute("search.total_matches", total)

        response = SearchResponse(
            results=matches,
            query=query,
            total_matches=total,
            search_time_ms=_elapsed_ms(started),
            search_type=search_type,
        )

        with self._state_lock:
            # A rebuild that finished meanwhile must not inherit stale results
            if self._snapshot is snapshot:
                self._cache = CachedQuery(key=key, snapshot=snapshot, response=response)

        logger.debug("Search %r (%s): %d matches in %.2fms", query, search_type, total, response.search_time_ms)
        self._record(response)
        return response

    def _record(self, response: SearchResponse) -> None:
        search_type = response.search_type or "fast"
        with self._state_lock:
            self._last_query = response.query
            self._last_result_count = len(response.results)
        self.telemetry.record_search(self.name, search_type, response.cached, response.search_time_ms / 1000)
        self._metrics.record_search(
            SearchSample(
                latency_ms=response.search_time_ms,
                result_count=len(response.results),
                cached=response.cached,
                search_type=search_type,
            )
        )

    def _filter_ids(self, snapshot: IndexSnapshot, doc_ids: Iterable[int], options: SearchOptions) -> list[int]:
        if not options.metadata_filters:
            return list(doc_ids)
        return [
            doc_id
            for doc_id in doc_ids
            if matches_metadata_filters(snapshot.documents[doc_id], options.metadata_filters)
        ]

    def _fast_search(self, snapshot: IndexSnapshot, query: str, options: SearchOptions) -> tuple[list[Match], int]:
        normalized_query = query.lower().strip()
        words = extract_words(normalized_query)
        if not words:
            return [], 0

        fuzzy = options.fuzzy if options.fuzzy is not None else self.settings.default_fuzzy
        candidates = self._retriever.find_candidates(snapshot, words, fuzzy=fuzzy)
        if options.metadata_filters:
            kept = self._filter_ids(snapshot, sorted(candidates.doc_ids), options)
            candidates = CandidateSet(frozenset(kept), candidates.fuzzy_variants)

        ranked = self._scorer.score(snapshot, candidates, words, normalized_query)
        total = len(ranked)
        if options.limit is not None:
            ranked = ranked[: options.limit]

        highlight_words = list(dict.fromkeys(words))
        matches = [
            Match(
                document_id=doc.doc_id,
                score=doc.score,
                rank=rank,
                highlighted_text=highlight_matches(
                    snapshot.original_text(doc.doc_id), highlight_words, self.settings.highlight_class
                ),
                match_count=doc.match_count,
                search_type="fast",
            )
            for rank, doc in enumerate(ranked, start=1)
        ]
        return matches, total

    def _boolean_search(self, snapshot: IndexSnapshot, query: str, options: SearchOptions) -> tuple[list[Match], int]:
        tokens = parse_boolean_query(query)
        if not any(token.type is not BooleanTokenType.OPERATOR for token in tokens):
            return [], 0

        outcome = self._evaluator.evaluate(snapshot, tokens)
        doc_ids = self._filter_ids(snapshot, outcome.doc_ids, options)
        total = len(doc_ids)
        if options.limit is not None:
            doc_ids = doc_ids[: options.limit]

        terms = highlight_terms(tokens)
        matches = []
        for position, doc_id in enumerate(doc_ids):
            text = snapshot.original_text(doc_id)
            matches.append(
                Match(
                    document_id=doc_id,
                    score=max(100 - position, 1),
                    rank=position + 1,
                    highlighted_text=highlight_matches(text, terms, self.settings.highlight_class) if terms else text,
                    match_count=outcome.hit_counts.get(doc_id, 0),
                    search_type="boolean",
                )
            )
        return matches, total
