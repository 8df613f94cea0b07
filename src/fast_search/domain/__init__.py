"""Domain value objects exposed by the search engine."""

from fast_search.domain.search import EngineStats, Match, SearchOptions, SearchResponse, SearchType


__all__ = ["EngineStats", "Match", "SearchOptions", "SearchResponse", "SearchType"]
