"""Error types raised by the argument-hint services.

None of these escape the controller: ``show`` and the cursor-move refresh log
them and degrade to "no tooltip".
"""

from __future__ import annotations


class ArgHintError(RuntimeError):
    """Base class for argument-hint failures."""


class NoBackendError(ArgHintError):
    """No registered provider claimed the current context."""


class TrimError(ArgHintError):
    """The raw signature has no opener/closer pair to trim to."""

    def __init__(self, text: str, opener: str, closer: str):
        super().__init__(f"cannot trim {text!r}: missing {opener!r} or {closer!r}")
        self.text = text
        self.opener = opener
        self.closer = closer
