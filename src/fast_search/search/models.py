"""Search data models shared by the index, retriever, scorer and evaluator."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType


@dataclass(frozen=True)
class DocumentSummary:
    """Per-document facts computed once per index build."""

    doc_id: int
    word_count: int
    first_words: str
    text_length: int


@dataclass(frozen=True)
class CandidateSet:
    """Documents that may match a free-text query.

    ``fuzzy_variants`` maps each query word to the indexed words accepted by
    the fuzzy matcher for it, so the scorer can credit typo matches.
    """

    doc_ids: frozenset[int]
    fuzzy_variants: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: MappingProxyType({}))

    def __len__(self) -> int:
        return len(self.doc_ids)

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self.doc_ids


@dataclass(frozen=True)
class ScoredDocument:
    """A candidate with its heuristic relevance score."""

    doc_id: int
    score: int
    match_count: int


class BooleanTokenType(str, Enum):
    """Kinds of tokens produced by the boolean query parser."""

    TERM = "term"
    PHRASE = "phrase"
    REQUIRED = "required"
    EXCLUDED = "excluded"
    OPERATOR = "operator"


class BooleanOperator(str, Enum):
    AND = "AND"
    OR = "OR"
    NOT = "NOT"


@dataclass(frozen=True)
class BooleanToken:
    """One element of a parsed boolean query."""

    type: BooleanTokenType
    value: str

    @property
    def is_positive(self) -> bool:
        """True for tokens whose matches contribute documents to the result."""
        return self.type in (BooleanTokenType.TERM, BooleanTokenType.PHRASE, BooleanTokenType.REQUIRED)

    @classmethod
    def operator(cls, op: BooleanOperator) -> BooleanToken:
        return cls(BooleanTokenType.OPERATOR, op.value)
