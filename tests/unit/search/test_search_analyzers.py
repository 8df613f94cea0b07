"""Unit tests for the tokenizer and analyzer pipeline."""

from collections.abc import Iterator

import pytest

from fast_search.search.analyzers import (
    AnalyzerPipeline,
    EdgePunctuationFilter,
    LowercaseFilter,
    StandardAnalyzer,
    Token,
    WordTokenizer,
    extract_words,
    iter_words,
    unique_words,
)


@pytest.mark.unit
class TestExtractWords:
    def test_lowercases_and_splits_on_punctuation(self):
        assert extract_words("Hello, World!") == ["hello", "world"]

    def test_keeps_inner_apostrophes_and_hyphens(self):
        assert extract_words("don't stop-me 'quoted' --dash--") == ["don't", "stop-me", "quoted", "dash"]

    def test_underscore_is_a_separator(self):
        assert extract_words("snake_case") == ["snake", "case"]

    def test_drops_tokens_made_only_of_edge_characters(self):
        assert extract_words("--- ' -") == []

    def test_empty_and_whitespace_input(self):
        assert extract_words("") == []
        assert extract_words("   \t\n") == []

    def test_unicode_letters_are_word_characters(self):
        assert extract_words("Café Ünïcode") == ["café", "ünïcode"]

    def test_digits_are_kept(self):
        assert extract_words("HTTP/2 in 2024") == ["http", "2", "in", "2024"]

    def test_duplicates_are_preserved_in_order(self):
        assert extract_words("b a b") == ["b", "a", "b"]


@pytest.mark.unit
class TestIterAndUniqueWords:
    def test_iter_words_is_lazy(self):
        words = iter_words("one two")
        assert isinstance(words, Iterator)
        assert next(words) == "one"

    def test_unique_words_keeps_first_seen_order(self):
        assert unique_words("b a B c a") == ["b", "a", "c"]


@pytest.mark.unit
class TestAnalyzerPipeline:
    def test_offsets_point_into_source_text(self):
        text = "Hi 'there'"
        tokens = list(StandardAnalyzer()(text))

        assert [t.text for t in tokens] == ["hi", "there"]
        assert tokens[1].start_char == 4
        assert tokens[1].end_char == 9
        assert text[tokens[1].start_char : tokens[1].end_char] == "there"

    def test_positions_are_renumbered_after_dropped_tokens(self):
        tokens = list(StandardAnalyzer()("alpha -- beta"))

        assert [(t.text, t.position) for t in tokens] == [("alpha", 0), ("beta", 1)]

    def test_custom_pipeline_without_lowercasing(self):
        pipeline = AnalyzerPipeline(WordTokenizer(), [EdgePunctuationFilter()])

        assert [t.text for t in pipeline("Keep 'Case'")] == ["Keep", "Case"]

    def test_lowercase_filter_reuses_lowercase_tokens(self):
        token = Token(text="lower", position=0, start_char=0, end_char=5)

        assert list(LowercaseFilter()([token]))[0] is token

    def test_tokenizer_yields_nothing_for_empty_text(self):
        assert list(WordTokenizer()("")) == []
