"""Index builder producing immutable snapshots of the searchable corpus.

A snapshot bundles the document references, the per-document summary table
and the word -> document-id inverted index. Snapshots are built off to the
side and never mutated afterwards, so swapping the engine's reference to a
new snapshot is the only step a rebuild makes visible.
"""

from __future__ import annotations

from bisect import bisect_left
from collections import defaultdict
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
import logging
import time
from types import MappingProxyType

from fast_search.config import SearchSettings
from fast_search.documents import Document, as_document
from fast_search.errors import IndexBuildError
from fast_search.search.analyzers import unique_words
from fast_search.search.models import DocumentSummary


logger = logging.getLogger(__name__)

_EMPTY_POSTINGS: frozenset[int] = frozenset()


@dataclass(frozen=True)
class IndexSnapshot:
    """Read-only view of one index build."""

    documents: tuple[Document, ...]
    summaries: tuple[DocumentSummary, ...]
    word_index: Mapping[str, frozenset[int]]
    vocabulary: tuple[str, ...] = field(default=())
    build_time_ms: float = 0.0

    @classmethod
    def empty(cls) -> IndexSnapshot:
        return cls((), (), MappingProxyType({}), ())

    def __len__(self) -> int:
        return len(self.documents)

    @property
    def ready(self) -> bool:
        return bool(self.documents)

    @property
    def doc_ids(self) -> range:
        return range(len(self.documents))

    def summary(self, doc_id: int) -> DocumentSummary:
        return self.summaries[doc_id]

    def postings(self, word: str) -> frozenset[int]:
        return self.word_index.get(word, _EMPTY_POSTINGS)

    def original_text(self, doc_id: int) -> str:
        """Recompute the display text of a document."""
        if not 0 <= doc_id < len(self.documents):
            return ""
        return self.documents[doc_id].searchable_text() or ""

    def normalized_text(self, doc_id: int) -> str:
        """Recompute the lower-cased, trimmed match text of a document."""
        return self.original_text(doc_id).lower().strip()

    def words_with_prefix(self, prefix: str) -> Iterator[str]:
        """Yield indexed words starting with ``prefix`` (including ``prefix`` itself)."""

        start = bisect_left(self.vocabulary, prefix)
        for word in self.vocabulary[start:]:
            if not word.startswith(prefix):
                break
            yield word


class IndexBuilder:
    """Build ``IndexSnapshot`` objects from a document collection."""

    def __init__(self, settings: SearchSettings) -> None:
        self.settings = settings

    def build(self, documents: Sequence[object]) -> IndexSnapshot:
        """Index ``documents`` and return a new snapshot.

        Raises:
            IndexBuildError: if any document cannot produce searchable text.
                Nothing partial is returned in that case.
        """

        started = time.perf_counter()
        prefix_words = self.settings.summary_prefix_words
        min_word_length = self.settings.min_indexed_word_length

        resolved: list[Document] = []
        summaries: list[DocumentSummary] = []
        postings: dict[str, set[int]] = defaultdict(set)

        for doc_id, raw in enumerate(documents):
            document = as_document(raw, self.settings, document_id=doc_id)
            normalized = self._normalized_text(document, doc_id)

            words = normalized.split()
            summaries.append(
                DocumentSummary(
                    doc_id=doc_id,
                    word_count=len(words),
                    first_words=" ".join(words[:prefix_words]),
                    text_length=len(normalized),
                )
            )
            resolved.append(document)

            for word in unique_words(normalized):
                if len(word) >= min_word_length:
                    postings[word].add(doc_id)

        word_index = MappingProxyType({word: frozenset(ids) for word, ids in postings.items()})
        elapsed_ms = (time.perf_counter() - started) * 1000
        snapshot = IndexSnapshot(
            documents=tuple(resolved),
            summaries=tuple(summaries),
            word_index=word_index,
            vocabulary=tuple(sorted(word_index)),
            build_time_ms=elapsed_ms,
        )
        logger.info(
            "Search index built: %d documents, %d unique words (%.1fms)",
            len(snapshot),
            len(word_index),
            elapsed_ms,
        )
        return snapshot

    @staticmethod
    def _normalized_text(document: Document, doc_id: int) -> str:
        try:
            text = document.searchable_text()
        except Exception as exc:
            raise IndexBuildError(f"failed to extract searchable text: {exc}", document_id=doc_id) from exc
        if text is None:
            return ""
        if not isinstance(text, str):
            raise IndexBuildError(
                f"searchable text must be a string, got {type(text).__name__!r}",
                document_id=doc_id,
            )
        return text.lower().strip()
