from __future__ import annotations

import pytest

from arghint.services.arg_hint_session import CursorMoveEvents
from arghint.services.scan_state import scanner_for_language

CURSOR_MARK = "|"


def split_cursor(text_with_cursor: str) -> tuple[str, int]:
    """``"foo(a, |"`` -> ``("foo(a, ", 7)``."""
    offset = text_with_cursor.index(CURSOR_MARK)
    return text_with_cursor.replace(CURSOR_MARK, "", 1), offset


class FakeHost:
    def __init__(self, text_with_cursor: str = "", language_id: str = "plaintext"):
        self.language = language_id
        self.cursor_moved = CursorMoveEvents()
        self.cancel = False
        self.scan_error: Exception | None = None
        self.text = ""
        self.offset = 0
        if text_with_cursor:
            self.set_buffer(text_with_cursor)

    def set_buffer(self, text_with_cursor: str) -> None:
        self.text, self.offset = split_cursor(text_with_cursor)

    def move(self, text_with_cursor: str) -> None:
        self.set_buffer(text_with_cursor)
        self.cursor_moved.emit()

    def scanner(self):
        if self.scan_error is not None:
            raise self.scan_error
        return scanner_for_language(self.text, self.language)

    def cursor_offset(self) -> int:
        return self.offset

    def cancel_requested(self) -> bool:
        pending = self.cancel
        self.cancel = False
        return pending

    def language_id(self) -> str:
        return self.language


class FakeWidgets:
    def __init__(self):
        self.next_id = 0
        self.live: dict[int, str] = {}
        self.log: list[tuple[str, int, str]] = []
        self.fail_create = False

    def create(self, text: str):
        if self.fail_create:
            return None
        self.next_id += 1
        self.live[self.next_id] = text
        self.log.append(("create", self.next_id, text))
        return self.next_id

    def redraw(self, handle, text: str) -> None:
        assert handle in self.live, "redraw on a destroyed widget"
        self.live[handle] = text
        self.log.append(("redraw", handle, text))

    def destroy(self, handle) -> None:
        assert handle in self.live, "widget destroyed twice"
        del self.live[handle]
        self.log.append(("destroy", handle, ""))

    def text(self, handle) -> str:
        return self.live[handle]


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture
def widgets():
    return FakeWidgets()
