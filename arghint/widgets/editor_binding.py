"""Qt binding: attach argument hints to a ``QPlainTextEdit``."""

from __future__ import annotations

import logging
from typing import Any

from PySide6.QtCore import QEvent, QObject, Qt, Signal
from PySide6.QtWidgets import QPlainTextEdit

from arghint.services.arg_backend import (
    ArgHintBackend,
    BackendRegistry,
    PythonArgHintBackend,
    language_provider,
)
from arghint.services.arg_hint_session import ArgHintController
from arghint.services.jedi_signatures import jedi_signature_at
from arghint.services.language_id import language_id_for_path
from arghint.services.scan_state import TextScanner, scanner_for_language
from arghint.services.signature_text import (
    callable_label_before,
    extract_compact_signature,
    signature_for_label,
)
from arghint.settings_schema import NormalizedArgHintConfig, default_arg_hint_settings
from arghint.widgets.arg_tooltip import TooltipWidgetProvider

logger = logging.getLogger(__name__)


class EditorArgHintHost(QObject):
    """``ArgHintHost`` over a ``QPlainTextEdit``.

    Escape sets the cancel flag and emits ``cancelRequested`` so the controller
    gets a refresh even though the cursor did not move.
    """

    cancelRequested = Signal()
    focusLost = Signal()

    def __init__(self, editor: QPlainTextEdit, *, language_id: str = "plaintext", parent: QObject | None = None):
        super().__init__(parent)
        self._editor = editor
        self._language_id = str(language_id or "plaintext").strip().lower()
        self._scanner_language = ""
        self._scanner: TextScanner | None = None
        self._cancel_pending = False
        self.cursor_moved = editor.cursorPositionChanged
        editor.installEventFilter(self)

    @property
    def editor(self) -> QPlainTextEdit:
        return self._editor

    def language_id(self) -> str:
        return self._language_id

    def set_language_id(self, language_id: str) -> None:
        self._language_id = str(language_id or "plaintext").strip().lower()
        self._scanner = None

    def scanner(self) -> TextScanner:
        text = self._editor.toPlainText()
        if self._scanner is None or self._scanner_language != self._language_id or self._scanner.text != text:
            self._scanner = scanner_for_language(text, self._language_id)
            self._scanner_language = self._language_id
        return self._scanner

    def cursor_offset(self) -> int:
        return int(self._editor.textCursor().position())

    def cancel_requested(self) -> bool:
        pending = self._cancel_pending
        self._cancel_pending = False
        return pending

    def eventFilter(self, watched, event):
        if watched is self._editor:
            etype = event.type()
            if etype == QEvent.KeyPress:
                if event.key() == Qt.Key_Escape:
                    self._cancel_pending = True
                    self.cancelRequested.emit()
                else:
                    self._cancel_pending = False
            elif etype == QEvent.FocusOut:
                self.focusLost.emit()
        return super().eventFilter(watched, event)

    def detach(self) -> None:
        self._editor.removeEventFilter(self)


def default_backend_registry(host: EditorArgHintHost, settings: Any = None) -> BackendRegistry:
    registry = BackendRegistry(ArgHintBackend(settings))
    python_backend = PythonArgHintBackend(settings)
    registry.register_backend(python_backend)
    registry.add_provider(language_provider("python", python_backend.name, host.language_id))
    return registry


class ArgHintBinding(QObject):
    """Argument hints for one editor: host adapter, tooltip provider and controller."""

    def __init__(
        self,
        editor: QPlainTextEdit,
        *,
        language_id: str | None = None,
        file_path: str | None = None,
        settings: Any = None,
        registry: BackendRegistry | None = None,
        parent: QObject | None = None,
    ):
        super().__init__(parent)
        lang = language_id or language_id_for_path(file_path)
        self._file_path = file_path
        self._settings = settings if settings is not None else default_arg_hint_settings()
        self._cfg = NormalizedArgHintConfig.from_mapping(self._settings)
        self.host = EditorArgHintHost(editor, language_id=lang, parent=self)
        self.widgets = TooltipWidgetProvider(
            editor,
            placement=self._cfg.placement,
            wrap_width=self._cfg.wrap_width,
        )
        if registry is None:
            registry = default_backend_registry(self.host, self._settings)
        self.controller = ArgHintController(
            self.host,
            self.widgets,
            registry=registry,
            settings=self._settings,
        )
        self.host.cancelRequested.connect(self.controller.on_cursor_moved)
        self.host.focusLost.connect(self._on_focus_lost)

    @property
    def editor(self) -> QPlainTextEdit:
        return self.host.editor

    def is_active(self) -> bool:
        return self.controller.is_active()

    def show(self, text: str) -> bool:
        return self.controller.show(text)

    def show_for_completion(self, label: str, detail: str) -> bool:
        """Show the hint after a completion item with signature ``detail`` was accepted."""
        signature = extract_compact_signature(label, detail)
        if not signature:
            return False
        return self.show(signature)

    def show_for_call_at_cursor(self) -> bool:
        """Look up the callable whose argument list holds the cursor and show it."""
        scanner = self.host.scanner()
        state = scanner.scan(self.host.cursor_offset())
        open_pos = state.innermost_open
        if open_pos is None:
            return False
        label = callable_label_before(scanner.text, open_pos)
        if not label:
            return False
        signature = ""
        if self.host.language_id() == "python":
            signature = jedi_signature_at(scanner.text, open_pos + 1, self._file_path)
        if not signature:
            signature = signature_for_label(
                label,
                scanner.text,
                separator=self._cfg.separator,
                opener=self._cfg.opener,
                closer=self._cfg.closer,
            )
        if not signature:
            logger.debug("no signature known for %r", label)
            return False
        return self.show(signature)

    def set_file_path(self, file_path: str | None) -> None:
        self.controller.close()
        self._file_path = file_path
        self.host.set_language_id(language_id_for_path(file_path))

    def update_settings(self, settings: Any) -> None:
        self._settings = settings
        self._cfg = NormalizedArgHintConfig.from_mapping(settings)
        self.widgets.placement = self._cfg.placement
        self.widgets.wrap_width = self._cfg.wrap_width
        self.controller.update_settings(settings)

    def close(self) -> None:
        self.controller.close()

    def shutdown(self) -> None:
        self.controller.close()
        self.host.detach()

    def _on_focus_lost(self) -> None:
        if self._cfg.close_on_focus_out:
            self.controller.close()


class ArgHintManager:
    """One ``ArgHintBinding`` per editor id."""

    def __init__(self, settings: Any = None):
        self._settings = settings if settings is not None else default_arg_hint_settings()
        self._bindings: dict[str, ArgHintBinding] = {}

    def attach(
        self,
        editor_id: str,
        editor: QPlainTextEdit,
        *,
        language_id: str | None = None,
        file_path: str | None = None,
    ) -> ArgHintBinding | None:
        key = str(editor_id or "").strip()
        if not key:
            return None
        self.detach(key)
        binding = ArgHintBinding(
            editor,
            language_id=language_id,
            file_path=file_path,
            settings=self._settings,
        )
        self._bindings[key] = binding
        return binding

    def detach(self, editor_id: str) -> None:
        binding = self._bindings.pop(str(editor_id or "").strip(), None)
        if binding is None:
            return
        binding.shutdown()
        binding.deleteLater()

    def binding_for(self, editor_id: str) -> ArgHintBinding | None:
        return self._bindings.get(str(editor_id or "").strip())

    def editor_ids(self) -> list[str]:
        return list(self._bindings.keys())

    def show(self, editor_id: str, text: str) -> bool:
        binding = self.binding_for(editor_id)
        if binding is None:
            return False
        return binding.show(text)

    def update_settings(self, settings: Any) -> None:
        self._settings = settings
        for binding in self._bindings.values():
            binding.update_settings(settings)

    def shutdown(self) -> None:
        for editor_id in list(self._bindings.keys()):
            self.detach(editor_id)
