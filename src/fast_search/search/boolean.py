"""Boolean query language: detection, parsing and set-algebra evaluation.

Supported syntax: ``"exact phrase"``, ``+required``, ``-excluded`` and the
case-insensitive operators ``AND``, ``OR`` and ``NOT``. Parsing never fails:
malformed input (an unterminated quote, a dangling modifier) degrades into
the best-effort token stream.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
import logging
import re

from fast_search.search.analyzers import extract_words
from fast_search.search.index import IndexSnapshot
from fast_search.search.models import BooleanOperator, BooleanToken, BooleanTokenType


logger = logging.getLogger(__name__)

_LEADING_OPERATOR_PATTERN = re.compile(r"^(?:NOT|AND|OR)\s+", re.IGNORECASE)
_SYNTAX_CHARS = frozenset('+-"')
_OPERATORS = {op.value: op for op in BooleanOperator}


def is_boolean_query(query: str) -> bool:
    """Return True when ``query`` uses boolean syntax."""

    if not query:
        return False
    if _SYNTAX_CHARS.intersection(query):
        return True
    upper = query.upper()
    if " AND " in upper or " OR " in upper or " NOT " in upper:
        return True
    return bool(_LEADING_OPERATOR_PATTERN.match(query))


def _flush(buffer: str) -> BooleanToken | None:
    value = buffer.strip()
    if not value:
        return None
    op = _OPERATORS.get(value.upper())
    if op is not None:
        return BooleanToken.operator(op)
    return BooleanToken(BooleanTokenType.TERM, value)


def parse_boolean_query(query: str) -> list[BooleanToken]:
    """Tokenize a boolean query in a single left-to-right scan."""

    tokens: list[BooleanToken] = []
    buffer = ""
    in_phrase = False
    i = 0
    length = len(query)

    while i < length:
        char = query[i]

        if char == '"':
            if in_phrase:
                if buffer.strip():
                    tokens.append(BooleanToken(BooleanTokenType.PHRASE, buffer.strip()))
                in_phrase = False
            else:
                token = _flush(buffer)
                if token is not None:
                    tokens.append(token)
                in_phrase = True
            buffer = ""
        elif in_phrase:
            buffer += char
        elif char in "+-" and not buffer.strip():
            # Modifier at a token boundary: consume the unbroken run after it
            kind = BooleanTokenType.REQUIRED if char == "+" else BooleanTokenType.EXCLUDED
            end = i + 1
            while end < length and not query[end].isspace():
                end += 1
            value = query[i + 1 : end].strip('"')
            if value:
                tokens.append(BooleanToken(kind, value))
            buffer = ""
            i = end
            continue
        elif char.isspace():
            token = _flush(buffer)
            if token is not None:
                tokens.append(token)
            buffer = ""
        else:
            buffer += char
        i += 1

    if buffer.strip():
        if in_phrase:
            tokens.append(BooleanToken(BooleanTokenType.PHRASE, buffer.strip()))
        else:
            token = _flush(buffer)
            if token is not None:
                tokens.append(token)

    return tokens


def highlight_terms(tokens: Iterable[BooleanToken]) -> list[str]:
    """Return the values to highlight for a parsed boolean query.

    Each positive token contributes its whole value followed by its
    space-separated parts, without duplicates.
    """

    terms: list[str] = []
    for token in tokens:
        if not token.is_positive:
            continue
        value = token.value.strip().strip('"').strip()
        if not value:
            continue
        for candidate in (value, *value.split()):
            if candidate and candidate not in terms:
                terms.append(candidate)
    return terms


@dataclass(frozen=True)
class BooleanMatch:
    """Evaluation outcome: matching ids plus per-document positive hit counts."""

    doc_ids: tuple[int, ...]
    hit_counts: dict[int, int]


class BooleanEvaluator:
    """Evaluate a boolean token stream against an index snapshot."""

    def evaluate(self, snapshot: IndexSnapshot, tokens: Sequence[BooleanToken]) -> BooleanMatch:
        result: set[int] = set(snapshot.doc_ids)
        operation = BooleanOperator.AND
        seeded = False
        hit_counts: dict[int, int] = {}

        for token in tokens:
            if token.type is BooleanTokenType.OPERATOR:
                operation = BooleanOperator(token.value)
                continue

            matching = self.matching_documents(snapshot, token)

            if token.type is BooleanTokenType.EXCLUDED:
                result -= matching
                continue

            for doc_id in matching:
                hit_counts[doc_id] = hit_counts.get(doc_id, 0) + 1

            if token.type is BooleanTokenType.REQUIRED or operation is BooleanOperator.AND:
                result &= matching
                seeded = True
            elif operation is BooleanOperator.OR:
                result = result & matching if not seeded else result | matching
                seeded = True
            else:
                result -= matching

        ordered = tuple(sorted(result))
        logger.debug("Boolean query %s matched %d documents", [t.value for t in tokens], len(ordered))
        return BooleanMatch(ordered, {doc_id: hit_counts.get(doc_id, 0) for doc_id in ordered})

    def matching_documents(self, snapshot: IndexSnapshot, token: BooleanToken) -> set[int]:
        """Return the ids of documents satisfying a single non-operator token."""

        if token.type is BooleanTokenType.PHRASE:
            phrase = token.value.lower()
            if not phrase:
                return set()
            return {doc_id for doc_id in snapshot.doc_ids if phrase in snapshot.normalized_text(doc_id)}

        words = list(dict.fromkeys(extract_words(token.value)))
        if not words:
            return set()

        matched: set[int] = set()
        for word in words:
            matched |= snapshot.postings(word)

        # Whole-word scan for hits the index misses: short words and words
        # the tokenizer kept attached to punctuation, e.g. "cat" in "cat's".
        patterns = [re.compile(rf"(?<!\w){re.escape(word)}(?!\w)") for word in words]
        for doc_id in snapshot.doc_ids:
            if doc_id in matched:
                continue
            text = snapshot.normalized_text(doc_id)
            if any(pattern.search(text) for pattern in patterns):
                matched.add(doc_id)
        return matched
