"""Candidate retrieval over the inverted index.

For every query word the retriever unions three strategies:

- exact posting lookup;
- prefix expansion: postings of every indexed word that starts with the
  query word (sorted-vocabulary range scan instead of a full vocabulary walk);
- fuzzy expansion (optional): postings of every indexed word within an
  approximate edit distance of one.

The result is a superset of the documents that can score above zero.
"""

from __future__ import annotations

from collections.abc import Sequence
import logging
from types import MappingProxyType

from fast_search.config import SearchSettings
from fast_search.search.fuzzy import find_fuzzy_matches
from fast_search.search.index import IndexSnapshot
from fast_search.search.models import CandidateSet


logger = logging.getLogger(__name__)


class CandidateRetriever:
    """Find candidate documents for a list of normalized query words."""

    def __init__(self, settings: SearchSettings) -> None:
        self.min_prefix_length = settings.min_prefix_length
        self.min_fuzzy_length = settings.min_fuzzy_length

    def find_candidates(
        self,
        snapshot: IndexSnapshot,
        query_words: Sequence[str],
        *,
        fuzzy: bool = True,
    ) -> CandidateSet:
        candidate_ids: set[int] = set()
        fuzzy_variants: dict[str, tuple[str, ...]] = {}

        for word in dict.fromkeys(query_words):
            candidate_ids.update(snapshot.postings(word))

            if len(word) >= self.min_prefix_length:
                for indexed_word in snapshot.words_with_prefix(word):
                    if indexed_word != word:
                        candidate_ids.update(snapshot.postings(indexed_word))

            if fuzzy and len(word) >= self.min_fuzzy_length:
                variants = self._fuzzy_variants(snapshot, word)
                if variants:
                    fuzzy_variants[word] = variants
                    for variant in variants:
                        candidate_ids.update(snapshot.postings(variant))

        logger.debug(
            "Candidates for %s: %d documents (%d fuzzy-expanded words)",
            list(query_words),
            len(candidate_ids),
            len(fuzzy_variants),
        )
        return CandidateSet(frozenset(candidate_ids), MappingProxyType(fuzzy_variants))

    @staticmethod
    def _fuzzy_variants(snapshot: IndexSnapshot, word: str) -> tuple[str, ...]:
        return tuple(find_fuzzy_matches(word, snapshot.vocabulary))
