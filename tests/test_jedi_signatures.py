from __future__ import annotations

from arghint.services.jedi_signatures import jedi_signature_at, offset_to_line_col


def test_offset_to_line_col():
    text = "ab\ncd\n"

    assert offset_to_line_col(text, 0) == (1, 0)
    assert offset_to_line_col(text, 4) == (2, 1)
    assert offset_to_line_col(text, 99) == (3, 0)


def test_signature_for_buffer_function():
    source = "def area(w, h=1):\n    return w * h\n\narea(2, "

    assert jedi_signature_at(source, len(source)) == "area(w, h=1)"


def test_no_call_gives_empty_text():
    assert jedi_signature_at("x = 1\n", 3) == ""
    assert jedi_signature_at("", 0) == ""
