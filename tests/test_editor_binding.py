from __future__ import annotations

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

pytest.importorskip("PySide6")

from PySide6.QtCore import Qt  # noqa: E402
from PySide6.QtGui import QTextCursor  # noqa: E402
from PySide6.QtTest import QTest  # noqa: E402
from PySide6.QtWidgets import QApplication, QPlainTextEdit  # noqa: E402

from arghint.widgets import ArgHintBinding, ArgHintManager  # noqa: E402


@pytest.fixture(scope="module")
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def editor(qapp):
    widget = QPlainTextEdit()
    widget.show()
    yield widget
    widget.close()
    widget.deleteLater()


def _set_text(editor: QPlainTextEdit, text: str) -> None:
    editor.setPlainText(text)
    editor.moveCursor(QTextCursor.End)


def _tooltip_text(binding: ArgHintBinding) -> str:
    return binding.controller.session.widget_handle.text()


def test_show_and_refresh_while_typing(editor):
    binding = ArgHintBinding(editor, language_id="plaintext")
    _set_text(editor, "foo(")

    assert binding.show("foo(a, b, c)")
    assert _tooltip_text(binding) == "a, ?, ?"
    assert binding.controller.session.widget_handle.isVisible()

    editor.insertPlainText("1, ")
    assert _tooltip_text(binding) == "., b, ?"

    editor.insertPlainText("2)")
    assert not binding.is_active()
    binding.shutdown()


def test_escape_closes_the_hint(editor):
    binding = ArgHintBinding(editor)
    _set_text(editor, "foo(")
    binding.show("foo(a)")

    QTest.keyClick(editor, Qt.Key_Escape)

    assert not binding.is_active()
    binding.shutdown()


def test_focus_loss_follows_settings(editor):
    binding = ArgHintBinding(editor, settings={"close_on_focus_out": False})
    _set_text(editor, "foo(")
    binding.show("foo(a)")

    binding.host.focusLost.emit()
    assert binding.is_active()

    binding.update_settings({"close_on_focus_out": True})
    binding.host.focusLost.emit()
    assert not binding.is_active()
    binding.shutdown()


def test_show_for_call_at_cursor_uses_buffer_definitions(editor):
    binding = ArgHintBinding(editor, file_path="shapes.py")
    _set_text(editor, "def area(self, w, h=1):\n    pass\n\narea(2, ")

    assert binding.host.language_id() == "python"
    assert binding.show_for_call_at_cursor()
    assert _tooltip_text(binding) == "., h=1"
    binding.shutdown()


def test_show_for_completion(editor):
    binding = ArgHintBinding(editor)
    _set_text(editor, "connect(")

    assert binding.show_for_completion("connect", "def connect(host, port) -> None")
    assert _tooltip_text(binding) == "host, ?"
    assert not binding.show_for_completion("connect", "")
    binding.shutdown()


def test_manager_keeps_one_binding_per_editor(qapp):
    first = QPlainTextEdit()
    second = QPlainTextEdit()
    manager = ArgHintManager()

    binding = manager.attach("one", first)
    manager.attach("two", second, language_id="python")
    assert manager.editor_ids() == ["one", "two"]
    assert manager.attach("", first) is None

    replacement = manager.attach("one", first)
    assert replacement is not binding
    assert manager.binding_for("one") is replacement

    _set_text(first, "foo(")
    assert manager.show("one", "foo(a, b)")
    assert not manager.show("missing", "foo(a)")

    manager.update_settings({"enabled": False})
    assert not replacement.is_active()

    manager.shutdown()
    assert manager.editor_ids() == []
    first.deleteLater()
    second.deleteLater()
