"""Argument hint lifecycle: one live session, refreshed on every cursor move.

The controller is host agnostic. It talks to the editor through ``ArgHintHost``
and to the overlay through ``WidgetProvider``; the Qt binding in
``arghint.widgets.editor_binding`` supplies both for a ``QPlainTextEdit``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any, Protocol

from arghint.services.arg_backend import BOUNDARY_PAREN, ArgHintBackend, ArgHintContext, Boundary, BackendRegistry
from arghint.services.errors import ArgHintError
from arghint.services.scan_state import LexicalScanner, ScanState
from arghint.services.signature_mask import render_signature
from arghint.settings_schema import NormalizedArgHintConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ArgHintSession:
    content: str
    anchor: Boundary
    lexical_context: ScanState
    widget_handle: Any
    backend: ArgHintBackend
    display_text: str = ""
    boundary_kind: str = BOUNDARY_PAREN


class CursorEventSource(Protocol):
    def connect(self, callback: Callable[[], None]) -> Any:
        ...

    def disconnect(self, callback: Callable[[], None]) -> Any:
        ...


class ArgHintHost(Protocol):
    cursor_moved: CursorEventSource

    def scanner(self) -> LexicalScanner:
        ...

    def cursor_offset(self) -> int:
        ...

    def cancel_requested(self) -> bool:
        ...


class WidgetProvider(Protocol):
    def create(self, text: str) -> Any:
        ...

    def redraw(self, handle: Any, text: str) -> None:
        ...

    def destroy(self, handle: Any) -> None:
        ...


class CursorMoveEvents:
    """Minimal synchronous event source with Qt-signal-like connect/disconnect."""

    def __init__(self) -> None:
        self._callbacks: list[Callable[[], None]] = []

    def connect(self, callback: Callable[[], None]) -> None:
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def disconnect(self, callback: Callable[[], None]) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def emit(self) -> None:
        for callback in list(self._callbacks):
            callback()

    def __len__(self) -> int:
        return len(self._callbacks)


class ArgHintController:
    """Owns at most one ``ArgHintSession`` for a single editing context."""

    def __init__(
        self,
        host: ArgHintHost,
        widgets: WidgetProvider,
        *,
        registry: BackendRegistry | None = None,
        settings: Any = None,
    ) -> None:
        self._host = host
        self._widgets = widgets
        self._cfg = NormalizedArgHintConfig.from_mapping(settings)
        self._registry = registry if registry is not None else BackendRegistry(ArgHintBackend(settings))
        self._session: ArgHintSession | None = None
        self._connected = False

    @property
    def session(self) -> ArgHintSession | None:
        return self._session

    @property
    def registry(self) -> BackendRegistry:
        return self._registry

    def is_active(self) -> bool:
        return self._session is not None

    def update_settings(self, settings: Any) -> None:
        self._cfg = NormalizedArgHintConfig.from_mapping(settings)
        self._registry.update_settings(settings)
        if not self._cfg.enabled:
            self.close()

    def show(self, text: str) -> bool:
        """Start a session for ``text`` at the cursor. Returns whether one was started."""
        self.close()
        if not self._cfg.enabled:
            return False
        content = str(text or "")
        if not content.strip():
            return False
        # A stale abort from before this session must not close it.
        self._host.cancel_requested()

        try:
            backend = self._registry.resolve()
            context = self._context()
            anchor = backend.boundary(context)
            if anchor is None:
                logger.debug("cursor is outside any delimited expression")
                return False
            result = render_signature(content, backend, context, anchor)
        except ArgHintError as exc:
            logger.debug("arg hint not shown: %s", exc)
            return False
        except Exception:
            logger.debug("arg hint not shown", exc_info=True)
            return False

        try:
            handle = self._widgets.create(result.text)
        except Exception:
            logger.debug("failed to create arg hint widget", exc_info=True)
            return False
        if handle is None:
            return False
        self._session = ArgHintSession(
            content=content,
            anchor=anchor,
            lexical_context=context.state,
            widget_handle=handle,
            backend=backend,
            display_text=result.text,
            boundary_kind=backend.boundary_kind,
        )
        self._connect()
        return True

    def on_cursor_moved(self) -> None:
        session = self._session
        if session is None:
            self._disconnect()
            return
        try:
            if self._host.cancel_requested():
                self.close()
                return
            context = self._context()
            if session.backend.close_predicate(session, context):
                self.close()
                return
            anchor, snapshot = self._refreshed_anchor(session, context)
            result = render_signature(session.content, session.backend, context, anchor)
        except Exception:
            logger.debug("arg hint refresh failed; closing", exc_info=True)
            self.close()
            return

        if self._session is not session:
            return
        try:
            self._widgets.redraw(session.widget_handle, result.text)
        except Exception:
            logger.debug("arg hint redraw failed; closing", exc_info=True)
            self.close()
            return
        self._session = replace(
            session,
            anchor=anchor,
            lexical_context=snapshot,
            display_text=result.text,
        )

    def cancel(self) -> None:
        self.close()

    def close(self) -> None:
        session = self._session
        self._session = None
        self._disconnect()
        if session is None:
            return
        try:
            self._widgets.destroy(session.widget_handle)
        except Exception:
            logger.debug("failed to destroy arg hint widget", exc_info=True)

    def _context(self) -> ArgHintContext:
        return ArgHintContext.at(self._host.scanner(), self._host.cursor_offset())

    @staticmethod
    def _refreshed_anchor(session: ArgHintSession, context: ArgHintContext) -> tuple[Boundary, ScanState]:
        current = session.backend.boundary(context)
        if current != session.anchor:
            # Nested deeper than the tracked call: keep what we anchored on.
            return session.anchor, session.lexical_context
        return current, context.state

    def _connect(self) -> None:
        if self._connected:
            return
        self._host.cursor_moved.connect(self.on_cursor_moved)
        self._connected = True

    def _disconnect(self) -> None:
        if not self._connected:
            return
        self._connected = False
        try:
            self._host.cursor_moved.disconnect(self.on_cursor_moved)
        except (RuntimeError, TypeError):
            # Qt raises when the slot was already disconnected.
            pass
