"""In-memory ranked and boolean full-text search.

Typical use::

    from fast_search import FastSearchEngine

    engine = FastSearchEngine([{"text": "the quick brown fox"}, {"text": "a quick fox jumps"}])
    response = engine.search("quick fox")
    for match in response.results:
        print(match.document_id, match.score, match.highlighted_text)
"""

from fast_search.config import SearchSettings
from fast_search.documents import Document, MappingDocument, extract_searchable_text
from fast_search.domain.search import EngineStats, Match, SearchOptions, SearchResponse
from fast_search.engine import FastSearchEngine
from fast_search.errors import FastSearchError, IndexBuildError
from fast_search.search.filters import MetadataFilter


__all__ = [
    "Document",
    "EngineStats",
    "FastSearchEngine",
    "FastSearchError",
    "IndexBuildError",
    "MappingDocument",
    "Match",
    "MetadataFilter",
    "SearchOptions",
    "SearchResponse",
    "SearchSettings",
    "extract_searchable_text",
]

__version__ = "0.1.0"
