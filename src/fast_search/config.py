"""Centralized configuration for fast-search using Pydantic Settings."""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SearchSettings(BaseSettings):
    """Strictly typed engine configuration loaded from environment variables.

    Every value can be overridden with a ``FAST_SEARCH_`` prefixed variable,
    e.g. ``FAST_SEARCH_MIN_QUERY_LENGTH=2``.
    """

    model_config = SettingsConfigDict(
        env_prefix="FAST_SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    # Query handling
    min_query_length: int = Field(default=1, ge=1, description="Queries shorter than this return no results")
    default_fuzzy: bool = Field(default=True, description="Fuzzy candidate matching when a search does not say")
    highlight_class: str = Field(default="fast-highlight", description="CSS class applied to highlight markers")

    # Word-level match weights
    exact_word_weight: int = Field(default=30, ge=0, description="Score per whole-word occurrence")
    prefix_word_weight: int = Field(default=20, ge=0, description="Score per occurrence at the start of a word")
    substring_weight: int = Field(default=15, ge=0, description="Score per occurrence inside a word")

    # Document-level bonuses
    multi_word_bonus: int = Field(default=10, ge=0, description="Bonus per matched word for multi-word queries")
    exact_phrase_bonus: int = Field(default=50, ge=0, description="Bonus when the whole query appears verbatim")
    leading_words_bonus: int = Field(default=30, ge=0, description="Bonus when the first query word opens the text")
    position_bonus_max: int = Field(default=25, ge=0, description="Bonus for a match at offset zero")
    position_bonus_step: int = Field(default=20, ge=1, description="Characters per point of position decay")
    long_document_words: int = Field(default=100, ge=1, description="Word count above which the penalty applies")
    long_document_penalty: float = Field(default=0.9, description="Multiplier for long documents")
    fuzzy_discount: float = Field(default=0.8, gt=0.0, le=1.0, description="Weight of matches via a fuzzy variant")

    # Indexing
    summary_prefix_words: int = Field(default=5, ge=1, description="Words kept in each document summary prefix")
    min_indexed_word_length: int = Field(default=2, ge=1, description="Shorter words are not indexed")
    min_prefix_length: int = Field(default=2, ge=1, description="Shortest query word expanded by prefix")
    min_fuzzy_length: int = Field(default=3, ge=1, description="Shortest query word expanded by fuzzy matching")

    # Searchable text extraction
    primary_field: str = Field(default="text", description="Field placed first in the searchable text")
    secondary_fields: list[str] = Field(
        default_factory=lambda: ["title", "content", "description", "summary", "name"],
        description="Fields appended after the primary field, in order",
    )
    excluded_fields: list[str] = Field(
        default_factory=lambda: ["x", "y", "index", "cluster", "doc_id", "chunk_id"],
        description="Fields never included in the searchable text",
    )
    max_extra_field_length: int = Field(
        default=500, ge=1, description="Other string fields at least this long are skipped"
    )

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")

    @model_validator(mode="after")
    def _check_penalty(self) -> "SearchSettings":
        if not 0.0 < self.long_document_penalty <= 1.0:
            raise ValueError("long_document_penalty must be in the interval (0, 1]")
        return self

    def known_fields(self) -> frozenset[str]:
        """Return field names handled explicitly (never picked up as extra fields)."""
        return frozenset([self.primary_field, *self.secondary_fields, *self.excluded_fields])
