"""Tests for heuristic relevance scoring."""

import pytest

from fast_search.config import SearchSettings
from fast_search.search.models import CandidateSet
from fast_search.search.scorer import RelevanceScorer, WordMatch, classify_occurrences, round_half_up


CORPUS = ["the quick brown fox", "a quick fox jumps", "totally unrelated text"]


@pytest.fixture
def scorer(settings):
    return RelevanceScorer(settings)


@pytest.mark.unit
class TestClassifyOccurrences:
    def test_whole_word_prefix_and_substring(self):
        match = classify_occurrences("cat", "cat concat category")

        assert (match.exact, match.prefix, match.substring) == (1, 1, 1)
        assert match.first_offset == 0

    def test_occurrences_do_not_overlap(self):
        match = classify_occurrences("aa", "aaaa")

        assert (match.exact, match.prefix, match.substring) == (0, 1, 1)

    def test_punctuation_is_a_boundary(self):
        match = classify_occurrences("fox", "(fox), fox's")

        assert match.exact == 2
        assert match.first_offset == 1

    def test_absent_word(self):
        match = classify_occurrences("dog", "cat")

        assert not match.found
        assert match == WordMatch()


@pytest.mark.unit
class TestRelevanceScorer:
    def test_reference_scores(self, scorer, build_snapshot):
        snapshot = build_snapshot(CORPUS)
        candidates = CandidateSet(frozenset({0, 1, 2}), {})

        ranked = scorer.score(snapshot, candidates, ["quick", "fox"], "quick fox")

        # doc 1: 30 + 30 + 2*10 + phrase 50 + leading 30 + position 25
        # doc 0: 30 + 30 + 2*10 + leading 30 + position 25
        assert [(doc.doc_id, doc.score, doc.match_count) for doc in ranked] == [(1, 185, 2), (0, 135, 2)]

    def test_zero_scores_are_dropped(self, scorer, build_snapshot):
        snapshot = build_snapshot(CORPUS)

        ranked = scorer.score(snapshot, CandidateSet(frozenset({2}), {}), ["quick"], "quick")

        assert ranked == []

    def test_whole_words_beat_substrings(self, scorer, build_snapshot):
        snapshot = build_snapshot(["cat dog", "concatenate hotdogs"])

        whole = scorer.score_document(snapshot, 0, ["cat", "dog"], "cat dog")
        partial = scorer.score_document(snapshot, 1, ["cat", "dog"], "cat dog")

        assert whole.score == 185
        assert partial.score == 105
        assert whole.score > partial.score

    def test_long_documents_are_damped(self, scorer, build_snapshot):
        snapshot = build_snapshot(["fox " + "filler " * 120])

        # (30 exact + 30 leading + 25 position) * 0.9 = 76.5
        assert scorer.score_document(snapshot, 0, ["fox"], "fox").score == 77

    def test_position_bonus_decays_with_offset(self, scorer, build_snapshot):
        snapshot = build_snapshot(["filler " * 7 + "fox"])

        # match at offset 49 -> 25 - 49 // 20 = 23
        assert scorer.score_document(snapshot, 0, ["fox"], "fox").score == 30 + 23

    def test_position_bonus_never_negative(self, scorer):
        assert scorer.position_bonus(10_000) == 0
        assert scorer.position_bonus(-1) == 0
        assert scorer.position_bonus(0) == 25

    def test_fuzzy_variant_is_discounted(self, scorer, build_snapshot):
        snapshot = build_snapshot(CORPUS)
        candidates = CandidateSet(frozenset({0, 1}), {"quack": ("quick",)})

        ranked = scorer.score(snapshot, candidates, ["quack"], "quack")

        # 30 * 0.8 for the variant + position bonus; ties ordered by id
        assert [(doc.doc_id, doc.score) for doc in ranked] == [(0, 49), (1, 49)]

    def test_repeated_query_words_count_once(self, scorer, build_snapshot):
        snapshot = build_snapshot(CORPUS)

        once = scorer.score_document(snapshot, 0, ["fox"], "fox")
        twice = scorer.score_document(snapshot, 0, ["fox", "fox"], "fox fox")

        assert once.score == twice.score
        assert twice.match_count == 1

    def test_weights_follow_settings(self, build_snapshot):
        scorer = RelevanceScorer(SearchSettings(exact_word_weight=100, leading_words_bonus=0, position_bonus_max=0))
        snapshot = build_snapshot(["fox"])

        assert scorer.score_document(snapshot, 0, ["fox"], "fox").score == 100

    def test_empty_query_words(self, scorer, build_snapshot):
        assert scorer.score_document(build_snapshot(CORPUS), 0, [], "").score == 0


@pytest.mark.unit
def test_round_half_up():
    assert round_half_up(76.5) == 77
    assert round_half_up(76.4) == 76
    assert round_half_up(0.5) == 1
