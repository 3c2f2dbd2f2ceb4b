"""Resolve which argument slot the cursor occupies inside a call expression."""

from __future__ import annotations

from arghint.services.scan_state import LexicalScanner


def _search_backward(
        text: str,
        closers: str,
        separator: str,
        lower: int,
        upper: int,
) -> tuple[int, bool] | None:
    # Nearest hit wins whatever its class; a closer beats a separator starting
    # at the same offset.
    best = -1
    is_separator = False
    if separator:
        idx = text.rfind(separator, lower, upper)
        if idx > best:
            best, is_separator = idx, True
    for ch in closers:
        idx = text.rfind(ch, lower, upper)
        if idx >= best and idx >= 0:
            best, is_separator = idx, False
    if best < 0:
        return None
    return best, is_separator


def resolve_argument_index(
        scanner: LexicalScanner,
        offset: int,
        separator: str = ",",
        start_boundary: int | None = None,
) -> int:
    """Return the 1-based argument index at ``offset``.

    Walks backward from the cursor counting separators that sit directly in
    the enclosing expression. Nested delimited sub-expressions are skipped as
    a whole, and anything inside a string or comment is jumped over.

    ``start_boundary`` is the offset of the enclosing opening delimiter; when
    omitted the innermost delimiter open at ``offset`` is used.
    """
    text = scanner.text
    pos = max(0, min(int(offset), len(text)))
    if start_boundary is None:
        inner = scanner.scan(pos).innermost_open
        start_boundary = -1 if inner is None else int(inner)

    closers = scanner.closing_delimiters
    count = 1
    while pos > start_boundary:
        hit = _search_backward(text, closers, separator, start_boundary + 1, pos)
        if hit is None:
            break
        match_pos, is_separator = hit

        literal_start = scanner.literal_start(match_pos)
        if literal_start is not None and literal_start < match_pos:
            pos = literal_start
            continue

        if is_separator:
            count += 1
            pos = match_pos
            continue

        opener = scanner.matching_open(match_pos)
        pos = opener if opener is not None and opener < match_pos else match_pos
    return count
