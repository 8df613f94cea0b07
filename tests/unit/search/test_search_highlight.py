"""Tests for match highlighting."""

import pytest

from fast_search.search.highlight import DEFAULT_HIGHLIGHT_CLASS, highlight_markers, highlight_matches


OPEN = f'<mark class="{DEFAULT_HIGHLIGHT_CLASS}">'
CLOSE = "</mark>"


@pytest.mark.unit
class TestHighlightMatches:
    def test_case_insensitive_and_preserves_original_case(self):
        assert highlight_matches("The Quick fox", ["quick"]) == f"The {OPEN}Quick{CLOSE} fox"

    def test_every_occurrence_is_wrapped(self):
        assert highlight_matches("fox and fox", ["fox"]) == f"{OPEN}fox{CLOSE} and {OPEN}fox{CLOSE}"

    def test_matches_inside_words(self):
        assert highlight_matches("foxes", ["fox"]) == f"{OPEN}fox{CLOSE}es"

    def test_regex_metacharacters_are_literal(self):
        assert highlight_matches("a+b = c", ["a+b"]) == f"{OPEN}a+b{CLOSE} = c"
        assert highlight_matches("call f(x", ["f(x"]) == f"call {OPEN}f(x{CLOSE}"

    def test_later_words_do_not_touch_marker_markup(self):
        result = highlight_matches("mark the class", ["mark", "class"])

        assert result == f"{OPEN}mark{CLOSE} the {OPEN}class{CLOSE}"

    def test_earlier_words_take_priority(self):
        result = highlight_matches("quick fox", ["quick fox", "fox"])

        assert result == f"{OPEN}quick fox{CLOSE}"

    def test_nothing_to_highlight(self):
        assert highlight_matches("plain text", []) == "plain text"
        assert highlight_matches("plain text", [""]) == "plain text"
        assert highlight_matches("", ["x"]) == ""

    def test_custom_css_class(self):
        assert highlight_matches("fox", ["fox"], "hit") == '<mark class="hit">fox</mark>'


@pytest.mark.unit
def test_highlight_markers():
    assert highlight_markers("hit") == ('<mark class="hit">', "</mark>")
