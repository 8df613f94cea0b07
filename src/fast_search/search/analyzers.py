"""Tokenizer and normalizer for the in-memory search engine.

Follows a composable tokenizer/filter design: a tokenizer yields raw word
tokens and filters transform the stream. The default analyzer lower-cases
text, treats every character other than letters, digits, apostrophes and
hyphens as a separator, and trims apostrophes and hyphens from token edges.
Output is deterministic and lazy.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, replace
import re
from typing import Protocol


# Underscore is a word character for ``\w`` but not a letter or digit.
_SEPARATOR_PATTERN = re.compile(r"[^\w'\-]|_", re.UNICODE)
_RUN_PATTERN = re.compile(r"\S+")
_EDGE_CHARS = "'-"


@dataclass(frozen=True)
class Token:
    """A word emitted by the analyzer with its offsets in the source text."""

    text: str
    position: int
    start_char: int
    end_char: int


class Tokenizer(Protocol):
    """Protocol implemented by tokenizers."""

    def __call__(self, text: str) -> Iterator[Token]:  # pragma: no cover - interface definition
        ...


class TokenFilter(Protocol):
    """Protocol implemented by token filters."""

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:  # pragma: no cover - interface definition
        ...


class WordTokenizer:
    """Split text on anything that is not a letter, digit, apostrophe or hyphen."""

    def __call__(self, text: str) -> Iterator[Token]:
        if not text:
            return
        cleaned = _SEPARATOR_PATTERN.sub(" ", text)
        for position, match in enumerate(_RUN_PATTERN.finditer(cleaned)):
            yield Token(
                text=match.group(0),
                position=position,
                start_char=match.start(),
                end_char=match.end(),
            )


class LowercaseFilter:
    """Filter that lowercases token text."""

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            if token.text.islower():
                yield token
            else:
                yield replace(token, text=token.text.lower())


class EdgePunctuationFilter:
    """Strip leading/trailing apostrophes and hyphens and drop emptied tokens."""

    def __init__(self, chars: str = _EDGE_CHARS) -> None:
        self.chars = chars

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            stripped = token.text.strip(self.chars)
            if not stripped:
                continue
            if stripped == token.text:
                yield token
                continue
            leading = len(token.text) - len(token.text.lstrip(self.chars))
            start = token.start_char + leading
            yield replace(token, text=stripped, start_char=start, end_char=start + len(stripped))


class AnalyzerPipeline:
    """Composable analyzer pipeline (tokenizer + filters)."""

    def __init__(self, tokenizer: Tokenizer, filters: Sequence[TokenFilter] | None = None) -> None:
        self.tokenizer = tokenizer
        self.filters = list(filters or [])

    def __call__(self, text: str) -> Iterator[Token]:
        stream: Iterable[Token] = self.tokenizer(text)
        for token_filter in self.filters:
            stream = token_filter(stream)
        for position, token in enumerate(stream):
            yield token if token.position == position else replace(token, position=position)


class StandardAnalyzer:
    """Default analyzer shared by indexing and querying."""

    def __init__(self) -> None:
        self.pipeline = AnalyzerPipeline(WordTokenizer(), [LowercaseFilter(), EdgePunctuationFilter()])

    def __call__(self, text: str) -> Iterator[Token]:
        return self.pipeline(text)


_DEFAULT_ANALYZER = StandardAnalyzer()


def iter_words(text: str) -> Iterator[str]:
    """Yield the normalized words of ``text`` in order, duplicates included."""

    for token in _DEFAULT_ANALYZER(text):
        yield token.text


def extract_words(text: str) -> list[str]:
    """Return the normalized words of ``text`` as a list."""

    return list(iter_words(text))


def unique_words(text: str) -> list[str]:
    """Return distinct normalized words of ``text`` in first-seen order."""

    return list(dict.fromkeys(iter_words(text)))
