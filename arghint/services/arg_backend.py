"""Backend contracts for argument hints (pure Python).

A backend is the strategy that knows how to trim, split and mask a signature
for one language, and where the expression a hint is scoped to begins and
ends. ``BackendRegistry`` picks the backend for the current context from an
ordered chain of provider functions.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Hashable

from arghint.services.errors import NoBackendError, TrimError
from arghint.services.position_resolver import resolve_argument_index
from arghint.services.scan_state import LexicalScanner, ScanState
from arghint.services.signature_text import normalize_signature_text, split_top_level
from arghint.settings_schema import NormalizedArgHintConfig

if TYPE_CHECKING:
    from arghint.services.arg_hint_session import ArgHintSession

logger = logging.getLogger(__name__)

Boundary = Hashable

BOUNDARY_PAREN = "paren"


@dataclass(frozen=True, slots=True)
class MaskTokens:
    before: str = "."
    after: str = "?"


@dataclass(frozen=True, slots=True)
class ArgHintContext:
    scanner: LexicalScanner
    offset: int
    state: ScanState

    @classmethod
    def at(cls, scanner: LexicalScanner, offset: int) -> "ArgHintContext":
        return cls(scanner=scanner, offset=int(offset), state=scanner.scan(offset))


class ArgHintBackend:
    """Default backend: parenthesised, comma separated signatures."""

    name = "default"
    boundary_kind = BOUNDARY_PAREN

    def __init__(self, settings: Any = None):
        self.config = NormalizedArgHintConfig.from_mapping(settings)

    def update_settings(self, settings: Any) -> None:
        self.config = NormalizedArgHintConfig.from_mapping(settings)

    @property
    def opener(self) -> str:
        return self.config.opener

    @property
    def closer(self) -> str:
        return self.config.closer

    @property
    def separator(self) -> str:
        return self.config.separator

    @property
    def join_separator(self) -> str:
        return self.config.separator

    @property
    def argument_separator(self) -> str:
        # What separates arguments in the buffer: ", " in a signature, "," in code.
        return self.config.separator.strip() or self.config.separator

    @property
    def inside_message(self) -> str:
        return self.config.inside_message

    @property
    def overflow_message(self) -> str:
        return self.config.overflow_message

    def mask_tokens(self) -> MaskTokens:
        return MaskTokens(before=self.config.mask_before, after=self.config.mask_after)

    def normalize(self, text: str) -> str:
        return normalize_signature_text(text)

    def trim(self, text: str) -> str:
        raw = str(text or "")
        start = raw.find(self.opener)
        end = raw.rfind(self.closer)
        if start < 0 or end < 0 or end < start + len(self.opener):
            raise TrimError(raw, self.opener, self.closer)
        return raw[start + len(self.opener):end]

    def split(self, trimmed: str) -> list[str]:
        if not str(trimmed or "").strip():
            return []
        return str(trimmed).split(self.separator)

    def boundary(self, context: ArgHintContext) -> Boundary | None:
        return context.state.innermost_open

    def argument_index(self, context: ArgHintContext) -> int:
        start = context.state.innermost_open
        return resolve_argument_index(
            context.scanner,
            context.offset,
            self.argument_separator,
            start_boundary=start,
        )

    def close_predicate(self, session: "ArgHintSession", context: ArgHintContext) -> bool:
        return not context.state.encloses(session.anchor)


class PythonArgHintBackend(ArgHintBackend):
    """Python signatures: bracket-aware splitting, no ``self``/``cls`` and no ``/``, ``*`` markers."""

    name = "python"

    _MARKERS = {"/", "*"}
    _IMPLICIT = {"self", "cls"}

    def split(self, trimmed: str) -> list[str]:
        text = str(trimmed or "")
        if not text.strip():
            return []
        args = [part.strip() for part in split_top_level(text, self.argument_separator)]
        args = [arg for arg in args if arg and arg not in self._MARKERS]
        if args and args[0].split(":", 1)[0].strip() in self._IMPLICIT:
            args = args[1:]
        return args


BackendProvider = Callable[[], "ArgHintBackend | str | None"]


class BackendRegistry:
    """Ordered provider chain with a default backend as final fallback.

    Providers take no arguments and return a backend, the name of a registered
    backend, or ``None`` when they do not apply.
    """

    def __init__(self, default: ArgHintBackend | None = None):
        self._default = default if default is not None else ArgHintBackend()
        self._providers: list[BackendProvider] = []
        self._backends_by_name: dict[str, ArgHintBackend] = {}
        self.register_backend(self._default)

    @property
    def default(self) -> ArgHintBackend:
        return self._default

    def providers(self) -> tuple[BackendProvider, ...]:
        return tuple(self._providers)

    def register_backend(self, backend: ArgHintBackend) -> None:
        key = str(getattr(backend, "name", "") or "").strip().lower()
        if key:
            self._backends_by_name[key] = backend

    def backend_named(self, name: str) -> ArgHintBackend | None:
        return self._backends_by_name.get(str(name or "").strip().lower())

    def add_provider(self, provider: BackendProvider, *, first: bool = False) -> None:
        if not callable(provider) or provider in self._providers:
            return
        if first:
            self._providers.insert(0, provider)
        else:
            self._providers.append(provider)

    def remove_provider(self, provider: BackendProvider) -> None:
        if provider in self._providers:
            self._providers.remove(provider)

    def resolve(self) -> ArgHintBackend:
        for provider in self._providers:
            try:
                result = provider()
            except Exception:
                logger.debug("backend provider %r failed", provider, exc_info=True)
                continue
            if result is None:
                continue
            if isinstance(result, ArgHintBackend):
                return result
            backend = self.backend_named(str(result))
            if backend is None:
                raise NoBackendError(f"no backend registered as {result!r}")
            return backend
        return self._default

    def update_settings(self, settings: Any) -> None:
        seen: set[int] = set()
        for backend in self._backends_by_name.values():
            if id(backend) in seen:
                continue
            seen.add(id(backend))
            backend.update_settings(settings)


def language_provider(
        language_ids: Iterable[str] | str,
        backend: ArgHintBackend | str,
        current_language: Callable[[], str],
) -> BackendProvider:
    """Build a provider that answers with ``backend`` for the given language ids."""
    if isinstance(language_ids, str):
        language_iter = [language_ids]
    else:
        language_iter = list(language_ids)
    wanted = {str(raw or "").strip().lower() for raw in language_iter}
    wanted.discard("")

    def _provider() -> ArgHintBackend | str | None:
        lang = str(current_language() or "").strip().lower()
        if lang in wanted:
            return backend
        return None

    return _provider
