"""Domain models for the search API.

- Value Objects are immutable (frozen=True)
- No infrastructure dependencies

These are the only types that cross the engine's public boundary.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from fast_search.search.filters import MetadataFilter


SearchType = Literal["fast", "boolean"]


class SearchOptions(BaseModel):
    """Per-call search options.

    ``fuzzy`` falls back to ``SearchSettings.default_fuzzy`` when unset.
    ``max_results`` caps the returned list only; ``total_matches`` still
    counts every match. Zero or None means no cap.
    """

    model_config = ConfigDict(frozen=True)

    max_results: int | None = Field(default=None, ge=0)
    fuzzy: bool | None = None
    metadata_filters: dict[str, MetadataFilter] = Field(default_factory=dict)

    def cache_key(self, default_fuzzy: bool) -> tuple[Any, ...]:
        """Return a hashable key describing the effective options."""
        fuzzy = self.fuzzy if self.fuzzy is not None else default_fuzzy
        filters = tuple(sorted((name, repr(f.model_dump())) for name, f in self.metadata_filters.items()))
        return (self.limit, fuzzy, filters)

    @property
    def limit(self) -> int | None:
        return self.max_results or None


class Match(BaseModel):
    """Value object for a single ranked search hit."""

    model_config = ConfigDict(frozen=True)

    document_id: int
    score: int
    rank: int
    highlighted_text: str
    match_count: int
    search_type: SearchType = "fast"


class SearchResponse(BaseModel):
    """Value object for a complete search response."""

    model_config = ConfigDict(frozen=True)

    results: list[Match] = Field(default_factory=list)
    query: str = ""
    total_matches: int = 0
    search_time_ms: float = 0.0
    cached: bool = False
    error: str | None = None
    search_type: SearchType | None = None

    @property
    def document_ids(self) -> list[int]:
        return [match.document_id for match in self.results]


class EngineStats(BaseModel):
    """Snapshot of engine state reported by ``FastSearchEngine.get_stats``."""

    model_config = ConfigDict(frozen=True)

    total_documents: int
    indexed_words: int
    ready: bool
    indexing: bool = False
    last_query: str | None = None
    last_result_count: int = 0
    last_build_error: str | None = None
    last_build_time_ms: float = 0.0
    search_metrics: dict[str, Any] = Field(default_factory=dict)
