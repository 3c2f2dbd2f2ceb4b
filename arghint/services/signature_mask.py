"""Signature masking: hide every argument except the one under the cursor."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from arghint.services.arg_backend import ArgHintBackend, ArgHintContext, Boundary, MaskTokens
from arghint.services.errors import TrimError

logger = logging.getLogger(__name__)

MASK_STATUS_MASKED = "masked"
MASK_STATUS_INSIDE = "inside"
MASK_STATUS_OVERFLOW = "overflow"


@dataclass(frozen=True, slots=True)
class MaskResult:
    status: str
    text: str
    index: int = 0
    argument_count: int = 0


def mask_arguments(
        args: Sequence[str],
        nth: int,
        tokens: MaskTokens,
        separator: str = ", ",
) -> str:
    """Join ``args`` with every slot but ``nth`` (1-based) replaced by a mask token.

    Slots after ``nth`` and the last slot take the ``after`` token; earlier
    slots take ``before``.
    """
    total = len(args)
    out: list[str] = []
    for count, arg in enumerate(args, start=1):
        if count == nth:
            out.append(arg)
        elif count > nth or count >= total:
            out.append(tokens.after)
        else:
            out.append(tokens.before)
    return separator.join(out)


def render_signature(
        raw_signature: str,
        backend: ArgHintBackend,
        context: ArgHintContext,
        anchor: Boundary | None = None,
) -> MaskResult:
    """Mask ``raw_signature`` for the cursor described by ``context``.

    ``anchor`` is the nesting identity the hint is scoped to; when the cursor's
    current identity differs (it moved into a nested expression) the backend's
    inside message is returned instead. Raises ``TrimError`` when the signature
    has no parameter list.
    """
    trimmed = backend.trim(backend.normalize(raw_signature))
    args = backend.split(trimmed)

    if anchor is None:
        anchor = backend.boundary(context)
    if backend.boundary(context) != anchor:
        return MaskResult(MASK_STATUS_INSIDE, backend.inside_message, 0, len(args))

    nth = backend.argument_index(context)
    if nth > len(args):
        return MaskResult(MASK_STATUS_OVERFLOW, backend.overflow_message, nth, len(args))

    text = mask_arguments(args, nth, backend.mask_tokens(), backend.join_separator)
    return MaskResult(MASK_STATUS_MASKED, text, nth, len(args))


def mask_signature(
        raw_signature: str,
        backend: ArgHintBackend,
        context: ArgHintContext,
        anchor: Boundary | None = None,
) -> str | None:
    try:
        return render_signature(raw_signature, backend, context, anchor).text
    except TrimError as exc:
        logger.debug("nothing to mask: %s", exc)
        return None
