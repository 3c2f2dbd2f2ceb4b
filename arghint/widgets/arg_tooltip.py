from __future__ import annotations

from PySide6.QtCore import QPoint, Qt
from PySide6.QtGui import QFont
from PySide6.QtWidgets import QLabel, QPlainTextEdit
from shiboken6 import isValid as _is_qobject_valid

from arghint.services.signature_text import DEFAULT_WRAP_WIDTH, wrap_signature_text

_TOOLTIP_QSS = """
QLabel#argHintTooltip {
    background-color: #2f2f2f;
    color: #e8e8e8;
    border: 1px solid #4a4a4a;
    padding: 4px 6px;
}
"""

_CURSOR_GAP_PX = 4


class ArgHintTooltip(QLabel):
    """Frameless label that follows the editor cursor."""

    def __init__(
            self,
            editor: QPlainTextEdit,
            *,
            placement: str = "below",
            wrap_width: int = DEFAULT_WRAP_WIDTH,
    ):
        super().__init__(editor)
        self._editor = editor
        self._placement = "above" if str(placement or "").strip().lower() == "above" else "below"
        self._wrap_width = max(20, int(wrap_width))
        self.setObjectName("argHintTooltip")
        self.setWindowFlags(Qt.ToolTip | Qt.FramelessWindowHint)
        self.setAttribute(Qt.WA_ShowWithoutActivating, True)
        self.setTextFormat(Qt.PlainText)
        self.setStyleSheet(_TOOLTIP_QSS)
        font = QFont(editor.font())
        font.setStyleHint(QFont.Monospace)
        self.setFont(font)

    @property
    def placement(self) -> str:
        return self._placement

    def set_hint_text(self, text: str) -> None:
        self.setText(wrap_signature_text(text, self._wrap_width) or str(text or ""))
        self.adjustSize()
        self.reposition()

    def reposition(self) -> None:
        rect = self._editor.cursorRect()
        if self._placement == "above":
            anchor = rect.topLeft() - QPoint(0, self.height() + _CURSOR_GAP_PX)
        else:
            anchor = rect.bottomLeft() + QPoint(0, _CURSOR_GAP_PX)
        self.move(self._editor.viewport().mapToGlobal(anchor))


class TooltipWidgetProvider:
    """Widget provider for ``ArgHintController`` backed by ``ArgHintTooltip``.

    Layout direction is an explicit ``placement`` option.
    """

    def __init__(
            self,
            editor: QPlainTextEdit,
            *,
            placement: str = "below",
            wrap_width: int = DEFAULT_WRAP_WIDTH,
    ):
        self._editor = editor
        self.placement = placement
        self.wrap_width = wrap_width

    def create(self, text: str) -> ArgHintTooltip:
        tip = ArgHintTooltip(self._editor, placement=self.placement, wrap_width=self.wrap_width)
        tip.set_hint_text(text)
        tip.show()
        return tip

    def redraw(self, handle: ArgHintTooltip, text: str) -> None:
        if not _is_qobject_valid(handle):
            raise RuntimeError("arg hint tooltip was deleted")
        handle.set_hint_text(text)
        if not handle.isVisible():
            handle.show()

    def destroy(self, handle: ArgHintTooltip) -> None:
        if not _is_qobject_valid(handle):
            return
        handle.hide()
        handle.deleteLater()
