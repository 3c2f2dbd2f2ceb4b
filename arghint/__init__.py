"""Live argument hints for call expressions in code editors.

Public API
----------
    from arghint import ArgHintController, BackendRegistry, TextScanner

The Qt binding lives in ``arghint.widgets`` and needs PySide6.
"""

from arghint.services.arg_backend import (
    ArgHintBackend,
    ArgHintContext,
    BackendRegistry,
    MaskTokens,
    PythonArgHintBackend,
    language_provider,
)
from arghint.services.arg_hint_session import ArgHintController, ArgHintSession, CursorMoveEvents
from arghint.services.errors import ArgHintError, NoBackendError, TrimError
from arghint.services.position_resolver import resolve_argument_index
from arghint.services.scan_state import ScanState, TextScanner, scanner_for_language
from arghint.services.signature_mask import mask_arguments, mask_signature, render_signature
from arghint.settings_schema import load_arg_hint_settings, normalize_arg_hint_settings

__all__ = [
    "ArgHintBackend",
    "ArgHintContext",
    "ArgHintController",
    "ArgHintError",
    "ArgHintSession",
    "BackendRegistry",
    "CursorMoveEvents",
    "MaskTokens",
    "NoBackendError",
    "PythonArgHintBackend",
    "ScanState",
    "TextScanner",
    "TrimError",
    "language_provider",
    "load_arg_hint_settings",
    "mask_arguments",
    "mask_signature",
    "normalize_arg_hint_settings",
    "render_signature",
    "resolve_argument_index",
    "scanner_for_language",
]
__version__ = "0.1.0"
