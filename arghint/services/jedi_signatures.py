"""Call signatures for Python buffers via jedi."""

from __future__ import annotations

import logging

import jedi

logger = logging.getLogger(__name__)


def offset_to_line_col(text: str, offset: int) -> tuple[int, int]:
    """Buffer offset -> jedi's (1-based line, 0-based column)."""
    offset = max(0, min(int(offset), len(text)))
    line = text.count("\n", 0, offset) + 1
    col = offset - (text.rfind("\n", 0, offset) + 1)
    return line, col


def jedi_signature_at(source: str, offset: int, path: str | None = None) -> str:
    """Return ``name(params)`` for the call whose argument list holds ``offset``."""
    if not source:
        return ""
    line, col = offset_to_line_col(source, offset)
    try:
        script = jedi.Script(code=source, path=path or None)
    except Exception:
        logger.debug("jedi could not load buffer %s", path or "<memory>", exc_info=True)
        return ""

    probes = [(line, col)]
    if col > 0:
        probes.append((line, col - 1))

    for pline, pcol in probes:
        try:
            sigs = script.get_signatures(pline, pcol)
        except Exception:
            logger.debug("jedi signature lookup failed at %s:%s", pline, pcol, exc_info=True)
            sigs = []
        if not sigs:
            continue
        try:
            sig_text = str(sigs[0].to_string() or "")
        except Exception:
            sig_text = str(sigs[0] or "")
        if sig_text:
            return sig_text
    return ""
