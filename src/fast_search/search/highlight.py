"""Highlighting of matched query words in display text.

Each word gets one case-insensitive find/replace pass, applied in word
order. Words are regex-escaped so their content is matched literally, and
text already wrapped by an earlier pass is never matched again, so marker
markup cannot be corrupted by a later word (e.g. the query word ``mark``).
"""

from __future__ import annotations

from collections.abc import Sequence
import re


DEFAULT_HIGHLIGHT_CLASS = "fast-highlight"


def highlight_markers(css_class: str = DEFAULT_HIGHLIGHT_CLASS) -> tuple[str, str]:
    """Return the opening and closing marker for a highlight span."""

    return f'<mark class="{css_class}">', "</mark>"


def _split_segment(segment: str, pattern: re.Pattern[str]) -> list[tuple[str, bool]]:
    pieces: list[tuple[str, bool]] = []
    cursor = 0
    for match in pattern.finditer(segment):
        if match.start() > cursor:
            pieces.append((segment[cursor : match.start()], False))
        pieces.append((match.group(0), True))
        cursor = match.end()
    if cursor < len(segment):
        pieces.append((segment[cursor:], False))
    return pieces


def highlight_matches(
    text: str,
    words: Sequence[str],
    css_class: str = DEFAULT_HIGHLIGHT_CLASS,
) -> str:
    """Wrap every case-insensitive occurrence of each word in ``text``.

    Args:
        text: Original display text.
        words: Words to highlight, in priority order. Empty words are ignored.
        css_class: Class attribute of the ``<mark>`` marker.

    Returns:
        The text with matches wrapped in ``<mark class="...">`` markers, or
        the text unchanged when there is nothing to highlight.
    """
    if not text or not words:
        return text

    segments: list[tuple[str, bool]] = [(text, False)]
    for word in words:
        if not word:
            continue
        pattern = re.compile(re.escape(word), re.IGNORECASE)
        updated: list[tuple[str, bool]] = []
        for segment, marked in segments:
            if marked:
                updated.append((segment, True))
            else:
                updated.extend(_split_segment(segment, pattern))
        segments = updated

    opening, closing = highlight_markers(css_class)
    return "".join(f"{opening}{segment}{closing}" if marked else segment for segment, marked in segments)
