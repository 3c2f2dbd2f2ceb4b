from __future__ import annotations

import pytest

from arghint.services.arg_backend import (
    BOUNDARY_PAREN,
    ArgHintBackend,
    ArgHintContext,
    BackendRegistry,
    PythonArgHintBackend,
    language_provider,
)
from arghint.services.arg_hint_session import ArgHintSession
from arghint.services.errors import NoBackendError, TrimError
from arghint.services.scan_state import TextScanner
from tests.conftest import split_cursor


def _context(text_with_cursor: str) -> ArgHintContext:
    text, offset = split_cursor(text_with_cursor)
    return ArgHintContext.at(TextScanner(text), offset)


def test_registry_falls_back_to_default():
    registry = BackendRegistry()
    registry.add_provider(lambda: None)

    assert registry.resolve() is registry.default
    assert registry.resolve().name == "default"


def test_provider_may_answer_with_a_registered_name():
    registry = BackendRegistry()
    python_backend = PythonArgHintBackend()
    registry.register_backend(python_backend)
    registry.add_provider(lambda: "Python")

    assert registry.resolve() is python_backend


def test_unknown_backend_name_raises():
    registry = BackendRegistry()
    registry.add_provider(lambda: "cobol")

    with pytest.raises(NoBackendError):
        registry.resolve()


def test_failing_provider_is_skipped():
    registry = BackendRegistry()
    python_backend = PythonArgHintBackend()

    def broken():
        raise RuntimeError("boom")

    registry.add_provider(broken)
    registry.add_provider(lambda: python_backend)

    assert registry.resolve() is python_backend


def test_first_provider_wins_and_can_be_prepended():
    registry = BackendRegistry()
    late = ArgHintBackend()
    early = PythonArgHintBackend()

    def late_provider():
        return late

    def early_provider():
        return early

    registry.add_provider(late_provider)
    registry.add_provider(early_provider, first=True)
    registry.add_provider(late_provider)

    assert registry.providers() == (early_provider, late_provider)
    assert registry.resolve() is early

    registry.remove_provider(early_provider)
    assert registry.resolve() is late


def test_language_provider_matches_current_language():
    language = {"id": "python"}
    registry = BackendRegistry()
    python_backend = PythonArgHintBackend()
    registry.register_backend(python_backend)
    registry.add_provider(language_provider(["Python", "pyi"], "python", lambda: language["id"]))

    assert registry.resolve() is python_backend
    language["id"] = "javascript"
    assert registry.resolve() is registry.default


def test_update_settings_reaches_every_backend():
    python_backend = PythonArgHintBackend()
    registry = BackendRegistry()
    registry.register_backend(python_backend)

    registry.update_settings({"mask_after": "~"})

    assert registry.default.mask_tokens().after == "~"
    assert python_backend.mask_tokens().after == "~"


def test_trim_takes_first_opener_to_last_closer():
    backend = ArgHintBackend()

    assert backend.trim("foo(a, (b), c) -> int") == "a, (b), c"
    with pytest.raises(TrimError) as info:
        backend.trim("no parens")
    assert info.value.opener == "("


def test_custom_delimiters_and_separator():
    backend = ArgHintBackend({"opener": "[", "closer": "]", "separator": "; "})

    assert backend.trim("cmd[a; b]") == "a; b"
    assert backend.split("a; b") == ["a", "b"]
    assert backend.argument_separator == ";"


def test_split_of_empty_list_is_empty():
    assert ArgHintBackend().split("") == []
    assert ArgHintBackend().split("   ") == []
    assert PythonArgHintBackend().split("self") == []


def test_python_backend_drops_cls_and_markers():
    args = PythonArgHintBackend().split("cls, *args, **kwargs")

    assert args == ["*args", "**kwargs"]


def test_boundary_and_close_predicate():
    backend = ArgHintBackend()
    start = _context("foo(a, |")
    anchor = backend.boundary(start)
    session = ArgHintSession(
        content="foo(a, b)",
        anchor=anchor,
        lexical_context=start.state,
        widget_handle=1,
        backend=backend,
    )

    assert anchor == 3
    assert backend.boundary(_context("x|")) is None
    assert not backend.close_predicate(session, _context("foo(a, bar(|"))
    assert backend.close_predicate(session, _context("foo(a, b)|"))
    assert backend.close_predicate(session, _context("fo|o(a, b"))


def test_backends_scope_hints_to_parenthesised_expressions():
    assert BOUNDARY_PAREN == "paren"
    assert ArgHintBackend.boundary_kind == BOUNDARY_PAREN
    assert PythonArgHintBackend().boundary_kind == BOUNDARY_PAREN
