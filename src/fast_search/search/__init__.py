"""
Search indexing and query engine package.

This package provides a pure-Python in-memory search stack:
- analyzers: Tokenizer and normalizer
- index: Summary table and inverted index snapshots
- retriever: Exact/prefix/fuzzy candidate retrieval
- scorer: Heuristic relevance scoring
- boolean: Boolean query parser and set-algebra evaluator
- highlight: Match highlighting
- filters: Metadata filters
"""
