"""Lexical scan state over a text snapshot (pure Python).

``TextScanner`` is the reference lexical provider: it tracks delimiter nesting,
string literals and comments the same way the editor's fold providers walk a
buffer, and answers "what is the nesting at offset N" questions for the
argument resolver and the session controller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Protocol

DEFAULT_DELIMITER_PAIRS: dict[str, str] = {
    "(": ")",
    "[": "]",
    "{": "}",
}

CHAR_CLASS_OPEN = "open"
CHAR_CLASS_CLOSE = "close"
CHAR_CLASS_OTHER = "other"


@dataclass(frozen=True, slots=True)
class ScanState:
    offset: int
    depth: int = 0
    open_positions: tuple[int, ...] = ()  # outermost -> innermost
    in_string: bool = False
    in_comment: bool = False
    literal_start: int | None = None
    previous_char_class: str | None = None

    @property
    def innermost_open(self) -> int | None:
        if not self.open_positions:
            return None
        return self.open_positions[-1]

    @property
    def in_literal(self) -> bool:
        return self.in_string or self.in_comment

    def encloses(self, position: object) -> bool:
        return position in self.open_positions


class LexicalScanner(Protocol):
    @property
    def text(self) -> str:
        ...

    @property
    def closing_delimiters(self) -> str:
        ...

    def scan(self, offset: int) -> ScanState:
        ...

    def matching_open(self, close_offset: int) -> int | None:
        ...

    def literal_start(self, offset: int) -> int | None:
        ...


class TextScanner:
    """Scanner for a fixed text snapshot.

    ``scan`` walks from the start of the text up to the requested offset, so a
    state describes everything *before* that offset. Pair and literal indexes
    are built once, on first use, from a full pass.
    """

    def __init__(
        self,
        text: str,
        *,
        pairs: Mapping[str, str] | None = None,
        string_quotes: str = "\"'",
        line_comment: str = "",
        block_comment: tuple[str, str] | None = None,
        escape: str = "\\",
    ):
        self._text = str(text or "")
        pair_map = dict(pairs or DEFAULT_DELIMITER_PAIRS)
        self._openers: dict[str, str] = pair_map
        self._closers: dict[str, str] = {close: open_ for open_, close in pair_map.items()}
        self._quotes = str(string_quotes or "")
        self._line_comment = str(line_comment or "")
        self._block_comment = block_comment if block_comment and all(block_comment) else None
        self._escape = str(escape or "")
        self._pairs: dict[int, int] | None = None
        self._literals: dict[int, int] | None = None

    @property
    def text(self) -> str:
        return self._text

    @property
    def closing_delimiters(self) -> str:
        return "".join(self._closers.keys())

    def is_open(self, ch: str) -> bool:
        return ch in self._openers

    def is_close(self, ch: str) -> bool:
        return ch in self._closers

    def scan(self, offset: int) -> ScanState:
        limit = max(0, min(int(offset), len(self._text)))
        return self._walk(limit)

    def matching_open(self, close_offset: int) -> int | None:
        self._ensure_index()
        return self._pairs.get(int(close_offset))

    def literal_start(self, offset: int) -> int | None:
        self._ensure_index()
        return self._literals.get(int(offset))

    def _ensure_index(self) -> None:
        if self._pairs is not None and self._literals is not None:
            return
        pairs: dict[int, int] = {}
        literals: dict[int, int] = {}
        self._walk(len(self._text), pairs=pairs, literals=literals)
        self._pairs = pairs
        self._literals = literals

    def _previous_char_class(self, limit: int) -> str | None:
        idx = limit - 1
        while idx >= 0 and self._text[idx].isspace():
            idx -= 1
        if idx < 0:
            return None
        ch = self._text[idx]
        if ch in self._openers:
            return CHAR_CLASS_OPEN
        if ch in self._closers:
            return CHAR_CLASS_CLOSE
        return CHAR_CLASS_OTHER

    def _walk(
        self,
        limit: int,
        *,
        pairs: dict[int, int] | None = None,
        literals: dict[int, int] | None = None,
    ) -> ScanState:
        text = self._text
        stack: list[tuple[str, int]] = []
        quote = ""
        in_comment = False
        block_end = ""
        literal_start: int | None = None

        def _mark(start: int, end: int) -> None:
            if literals is None or literal_start is None:
                return
            for pos in range(start, min(end, limit)):
                literals[pos] = literal_start

        i = 0
        while i < limit:
            ch = text[i]

            if quote:
                _mark(i, i + 1)
                if self._escape and ch == self._escape:
                    _mark(i + 1, i + 2)
                    i += 2
                    continue
                if ch == quote:
                    quote = ""
                    literal_start = None
                i += 1
                continue

            if in_comment:
                if block_end:
                    if text.startswith(block_end, i):
                        _mark(i, i + len(block_end))
                        i += len(block_end)
                        in_comment = False
                        block_end = ""
                        literal_start = None
                        continue
                elif ch == "\n":
                    in_comment = False
                    literal_start = None
                    i += 1
                    continue
                _mark(i, i + 1)
                i += 1
                continue

            if self._block_comment and text.startswith(self._block_comment[0], i):
                in_comment = True
                block_end = self._block_comment[1]
                literal_start = i
                i += len(self._block_comment[0])
                _mark(literal_start + 1, i)
                continue

            if self._line_comment and text.startswith(self._line_comment, i):
                in_comment = True
                literal_start = i
                i += len(self._line_comment)
                _mark(literal_start + 1, i)
                continue

            if ch in self._quotes:
                quote = ch
                literal_start = i
                i += 1
                continue

            if ch in self._openers:
                stack.append((ch, i))
            elif ch in self._closers:
                expected = self._closers[ch]
                for idx in range(len(stack) - 1, -1, -1):
                    if stack[idx][0] != expected:
                        continue
                    if pairs is not None:
                        pairs[i] = stack[idx][1]
                    del stack[idx:]
                    break
            i += 1

        return ScanState(
            offset=limit,
            depth=len(stack),
            open_positions=tuple(pos for _, pos in stack),
            in_string=bool(quote),
            in_comment=in_comment,
            literal_start=literal_start if (quote or in_comment) else None,
            previous_char_class=self._previous_char_class(limit),
        )


# Per-language lexical settings for TextScanner. Languages not listed use the
# plain defaults (both quote kinds, no comments).
_LANGUAGE_SCANNER_OPTIONS: dict[str, dict[str, object]] = {
    "python": {"line_comment": "#"},
    "shell": {"line_comment": "#"},
    "c": {"line_comment": "//", "block_comment": ("/*", "*/")},
    "cpp": {"line_comment": "//", "block_comment": ("/*", "*/")},
    "javascript": {"line_comment": "//", "block_comment": ("/*", "*/"), "string_quotes": "\"'`"},
    "typescript": {"line_comment": "//", "block_comment": ("/*", "*/"), "string_quotes": "\"'`"},
    "rust": {"line_comment": "//", "block_comment": ("/*", "*/"), "string_quotes": "\""},
    "php": {"line_comment": "//", "block_comment": ("/*", "*/")},
}


def scanner_for_language(text: str, language_id: str | None = None) -> TextScanner:
    key = str(language_id or "").strip().lower()
    options = _LANGUAGE_SCANNER_OPTIONS.get(key, {})
    return TextScanner(text, **options)
