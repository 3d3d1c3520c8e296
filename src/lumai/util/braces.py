"""Brace-depth scanning for JSON fragments embedded in free text."""

from __future__ import annotations

import re


def find_matching_brace(text: str, start_index: int) -> int | None:
    """Return the index of the ``}`` closing the ``{`` at ``start_index``.

    Only ``{`` and ``}`` are counted. Returns ``None`` when the depth never
    returns to zero before the end of ``text``.
    """
    depth = 0
    for index in range(start_index, len(text)):
        char = text[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
    return None


def find_marked_block(
    text: str, marker: re.Pattern[str]
) -> tuple[re.Match[str], int, int] | None:
    """Locate the first ``marker`` followed by a balanced ``{...}`` block.

    Returns ``(match, json_start, json_end)`` with ``json_end`` inclusive, or
    ``None`` when there is no marker, no ``{`` after it, or the braces never
    balance.
    """
    match = marker.search(text)
    if match is None:
        return None
    json_start = text.find("{", match.end())
    if json_start == -1:
        return None
    json_end = find_matching_brace(text, json_start)
    if json_end is None:
        return None
    return match, json_start, json_end


def strip_marked_blocks(text: str, marker: re.Pattern[str], max_passes: int = 64) -> str:
    """Remove every marker-through-closing-brace span from ``text``.

    Each removal restarts the search from the beginning. The loop stops when
    nothing more is found or after ``max_passes`` removals.
    """
    result = text
    for _ in range(max_passes):
        found = find_marked_block(result, marker)
        if found is None:
            break
        match, _json_start, json_end = found
        result = f"{result[: match.start()]} {result[json_end + 1 :]}"
    return result
