"""Fuzzy matching for typo-tolerant candidate retrieval.

Uses a bounded, single-pass approximation of edit distance instead of full
Levenshtein: both strings are walked together, each mismatch is resolved
greedily as a deletion, insertion or substitution, and the walk stops as
soon as more than one edit has been seen. It runs in linear time and may
miss some true distance-1 pairs, but a single insert, delete or substitute
is always recognised and is never confused with a two-edit difference.

Smart Defaults:
- Only terms of 3+ characters are expanded (see ``SearchSettings.min_fuzzy_length``)
- Length differences above 2 are rejected before any comparison
- Exact and substring matches are left to the exact/prefix strategies
"""

from __future__ import annotations

from collections.abc import Iterable


MAX_LENGTH_DIFFERENCE = 2


def approximate_edit_distance(a: str, b: str, max_distance: int = 1) -> int:
    """Return an approximate edit distance between ``a`` and ``b``.

    The walk returns early with a value greater than ``max_distance`` once
    that many edits have been exceeded, so results above the bound are
    lower bounds rather than exact distances.

    Examples:
        >>> approximate_edit_distance("hello", "hallo")
        1
        >>> approximate_edit_distance("cat", "cats")
        1
        >>> approximate_edit_distance("abcd", "bacd") > 1
        True
    """
    if not a:
        return len(b)
    if not b:
        return len(a)

    distance = 0
    i = j = 0
    len_a, len_b = len(a), len(b)

    while i < len_a and j < len_b:
        if a[i] == b[j]:
            i += 1
            j += 1
            continue

        distance += 1
        if distance > max_distance:
            return distance

        if i + 1 < len_a and a[i + 1] == b[j]:
            i += 2  # deletion from a
            j += 1
        elif j + 1 < len_b and a[i] == b[j + 1]:
            i += 1  # insertion into a
            j += 2
        else:
            i += 1  # substitution
            j += 1

    return distance + (len_a - i) + (len_b - j)


def is_fuzzy_match(query: str, target: str) -> bool:
    """Return True when ``target`` is a one-edit typo variant of ``query``."""

    if abs(len(query) - len(target)) > MAX_LENGTH_DIFFERENCE:
        return False
    if query == target or query in target:
        return False
    return approximate_edit_distance(query, target) <= 1


def find_fuzzy_matches(query_term: str, vocabulary: Iterable[str]) -> list[str]:
    """Return vocabulary words accepted by ``is_fuzzy_match``, in vocabulary order."""

    if not query_term:
        return []
    return [term for term in vocabulary if is_fuzzy_match(query_term, term)]
