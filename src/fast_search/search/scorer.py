"""Heuristic relevance scoring for free-text queries.

Every occurrence of a query word in a document's normalized text is
classified by the characters on either side of it:

- whole word (boundary on both sides): ``exact_word_weight``
- start of a word (boundary before only): ``prefix_word_weight``
- anything else: ``substring_weight``

Document-level bonuses then reward multi-word coverage, verbatim phrase
matches, matches in the first words of the text and early match offsets,
and long documents are damped. Scores are deterministic integers; zero
means "not a match".
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
import math

from fast_search.config import SearchSettings
from fast_search.search.index import IndexSnapshot
from fast_search.search.models import CandidateSet, ScoredDocument


def _is_word_char(char: str) -> bool:
    return char.isalnum() or char == "_"


@dataclass(frozen=True)
class WordMatch:
    """Occurrence counts of one word in one text."""

    exact: int = 0
    prefix: int = 0
    substring: int = 0
    first_offset: int = -1

    @property
    def found(self) -> bool:
        return self.first_offset >= 0


def classify_occurrences(word: str, text: str) -> WordMatch:
    """Scan ``text`` once, classifying each non-overlapping occurrence of ``word``."""

    if not word or not text:
        return WordMatch()

    exact = prefix = substring = 0
    first_offset = -1
    step = len(word)
    start = text.find(word)

    while start != -1:
        if first_offset == -1:
            first_offset = start
        end = start + step
        boundary_before = start == 0 or not _is_word_char(text[start - 1])
        boundary_after = end >= len(text) or not _is_word_char(text[end])

        if boundary_before and boundary_after:
            exact += 1
        elif boundary_before:
            prefix += 1
        else:
            substring += 1
        start = text.find(word, end)

    return WordMatch(exact=exact, prefix=prefix, substring=substring, first_offset=first_offset)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class RelevanceScorer:
    """Assign heuristic scores to candidate documents."""

    def __init__(self, settings: SearchSettings) -> None:
        self.settings = settings

    def word_score(self, match: WordMatch) -> int:
        s = self.settings
        return (
            match.exact * s.exact_word_weight
            + match.prefix * s.prefix_word_weight
            + match.substring * s.substring_weight
        )

    def position_bonus(self, offset: int) -> int:
        if offset < 0:
            return 0
        return max(0, self.settings.position_bonus_max - offset // self.settings.position_bonus_step)

    def score_document(
        self,
        snapshot: IndexSnapshot,
        doc_id: int,
        query_words: Sequence[str],
        full_query: str,
        fuzzy_variants: dict[str, Iterable[str]] | None = None,
    ) -> ScoredDocument:
        """Score one document; a score of 0 means it should be discarded."""

        s = self.settings
        words = list(dict.fromkeys(query_words))
        if not words:
            return ScoredDocument(doc_id=doc_id, score=0, match_count=0)

        text = snapshot.normalized_text(doc_id)
        summary = snapshot.summary(doc_id)
        variants = fuzzy_variants or {}

        total = 0.0
        match_count = 0
        first_word_offset = -1

        for index, word in enumerate(words):
            match = classify_occurrences(word, text)
            word_total = float(self.word_score(match))
            offset = match.first_offset

            if not match.found:
                word_total, offset = self._best_variant(word, text, variants.get(word, ()))

            if word_total > 0:
                total += word_total
                match_count += 1
            if index == 0:
                first_word_offset = offset

        if len(words) > 1 and match_count > 1:
            total += match_count * s.multi_word_bonus

        if len(full_query) > 3 and full_query in text:
            total += s.exact_phrase_bonus

        if words[0] in summary.first_words:
            total += s.leading_words_bonus

        total += self.position_bonus(first_word_offset)

        if summary.word_count > s.long_document_words:
            total *= s.long_document_penalty

        return ScoredDocument(doc_id=doc_id, score=round_half_up(total), match_count=match_count)

    def _best_variant(self, word: str, text: str, variants: Iterable[str]) -> tuple[float, int]:
        best_score = 0.0
        best_offset = -1
        for variant in variants:
            match = classify_occurrences(variant, text)
            if not match.found:
                continue
            score = self.word_score(match) * self.settings.fuzzy_discount
            if score > best_score:
                best_score, best_offset = score, match.first_offset
        return best_score, best_offset

    def score(
        self,
        snapshot: IndexSnapshot,
        candidates: CandidateSet,
        query_words: Sequence[str],
        full_query: str,
    ) -> list[ScoredDocument]:
        """Score all candidates and return the non-zero ones, best first.

        Ties are broken by ascending document id so repeated calls on an
        unchanged index produce the same order.
        """

        normalized_query = full_query.lower().strip()
        variants = dict(candidates.fuzzy_variants)
        scored = (
            self.score_document(snapshot, doc_id, query_words, normalized_query, variants)
            for doc_id in candidates.doc_ids
        )
        ranked = [doc for doc in scored if doc.score > 0]
        ranked.sort(key=lambda doc: (-doc.score, doc.doc_id))
        return ranked
