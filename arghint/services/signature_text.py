"""Signature text for the masking engine.

Providers hand back signatures in many shapes (``<Signature (a, b)>``,
``def foo(a, b) -> int``, a completion item detail line). Everything here
reduces them to ``name<opener>a<separator>b<closer>`` so a backend can trim and
split it. Quoted literals are never rewritten: ``sep=','`` stays ``sep=','``.
"""

from __future__ import annotations

import ast
import builtins as py_builtins
import inspect
import re
from collections.abc import Callable, Iterator

DEFAULT_WRAP_WIDTH = 88

_QUOTES = "\"'"
_OPENERS = "([{"
_CLOSERS = ")]}"

_DEF_PREFIX_RE = re.compile(r"^(?:async\s+def|def|function|fn|class)\s+")
_SIGNATURE_WRAPPER_RE = re.compile(r"^<\s*Signature\s*:?\s*(.*?)\s*\??>$", re.IGNORECASE)
_IDENTIFIER_CALL_RE = re.compile(r"[A-Za-z_]\w*\s*\(")


def _walk(text: str) -> Iterator[tuple[int, str, int, bool]]:
    """Yield ``(index, char, depth, quoted)``; brackets report their outer depth."""
    depth = 0
    quote = ""
    escaped = False
    for i, ch in enumerate(text):
        if quote:
            yield i, ch, depth, True
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == quote:
                quote = ""
            continue
        if ch in _QUOTES:
            quote = ch
            yield i, ch, depth, True
            continue
        if ch in _CLOSERS:
            depth = max(0, depth - 1)
        yield i, ch, depth, False
        if ch in _OPENERS:
            depth += 1


def _segments(text: str) -> list[tuple[str, bool]]:
    """Split ``text`` into runs of code and quoted literals (quotes included)."""
    out: list[tuple[str, bool]] = []
    start = 0
    current: bool | None = None
    for i, _ch, _depth, quoted in _walk(text):
        if current is None:
            current = quoted
        elif quoted != current:
            out.append((text[start:i], current))
            start, current = i, quoted
    if text:
        out.append((text[start:], bool(current)))
    return out


def _outside_literals(text: str, rewrite: Callable[[str], str]) -> str:
    return "".join(chunk if literal else rewrite(chunk) for chunk, literal in _segments(text))


def split_top_level(text: str, separator: str) -> list[str]:
    """Split on ``separator`` where it is outside brackets and quotes."""
    if not separator:
        return [text]
    parts: list[str] = []
    start = 0
    for i, _ch, depth, quoted in _walk(text):
        if i < start or quoted or depth:
            continue
        if text.startswith(separator, i):
            parts.append(text[start:i])
            start = i + len(separator)
    parts.append(text[start:])
    return parts


def matching_close(text: str, open_index: int) -> int | None:
    """Index of the bracket closing the one at ``open_index``."""
    if not (0 <= open_index < len(text)) or text[open_index] not in _OPENERS:
        return None
    base = None
    for i, _ch, depth, quoted in _walk(text):
        if i == open_index:
            base = depth
        elif base is not None and not quoted and i > open_index and depth == base and text[i] in _CLOSERS:
            return i
    return None


def _tidy_code(chunk: str) -> str:
    chunk = re.sub(r"\s+", " ", chunk)
    return chunk.replace("( ", "(").replace(" )", ")").replace(" ,", ",")


def clean_signature_whitespace(sig: str) -> str:
    return _outside_literals(str(sig or ""), _tidy_code).strip()


def normalize_signature_text(signature: str, label: str = "") -> str:
    """Reduce provider text to ``name(a, b)`` with ``", "`` between arguments."""
    text = clean_signature_whitespace(signature)
    if not text:
        return ""

    wrapper = _SIGNATURE_WRAPPER_RE.match(text)
    if wrapper:
        text = clean_signature_whitespace(wrapper.group(1))
    if text.lower().startswith("signature:"):
        text = clean_signature_whitespace(text.split(":", 1)[1])
    text = _DEF_PREFIX_RE.sub("", text, count=1)

    if label and text.startswith("("):
        text = f"{label}{text}"

    text = _outside_literals(text, lambda chunk: re.sub(r",\s*", ", ", chunk))
    return clean_signature_whitespace(text)


def wrap_signature_text(text: str, width: int = DEFAULT_WRAP_WIDTH, separator: str = ", ") -> str:
    """Break display text after top-level separators; continuation lines are indented."""
    flat = clean_signature_whitespace(text)
    width = max(8, int(width))
    if len(flat) <= width:
        return flat

    token = separator.rstrip() or separator
    gap = separator[len(token):]
    parts = [part.strip() for part in split_top_level(flat, token)]

    lines: list[str] = []
    current = ""
    for index, part in enumerate(parts):
        piece = part if index == len(parts) - 1 else f"{part}{token}"
        if not current:
            current = piece
        elif len(current) + len(gap) + len(piece) > width:
            lines.append(current)
            current = f"    {piece}"
        else:
            current = f"{current}{gap}{piece}"
    lines.append(current)
    return "\n".join(lines)


def extract_compact_signature(label: str, detail: str) -> str:
    """Pull ``label(...)`` out of a completion detail string."""
    line = next((raw.strip() for raw in str(detail or "").splitlines() if raw.strip()), "")
    if not line:
        return ""
    candidate = normalize_signature_text(line, label)

    label = str(label or "").strip()
    match = None
    if label:
        match = re.search(rf"\b{re.escape(label)}\s*\(", candidate)
    if match is None:
        match = _IDENTIFIER_CALL_RE.search(candidate)
    if match is None:
        return ""
    close = matching_close(candidate, match.end() - 1)
    if close is None:
        return ""
    return clean_signature_whitespace(candidate[match.start():close + 1])


def format_signature(
        name: str,
        params: list[str],
        *,
        separator: str = ", ",
        opener: str = "(",
        closer: str = ")",
) -> str:
    return f"{name}{opener}{separator.join(params)}{closer}"


def _source(expr: ast.AST) -> str:
    try:
        return ast.unparse(expr).strip()
    except (AttributeError, TypeError, ValueError):
        return "..."


def _param(arg: ast.arg, default: ast.AST | None = None, star: str = "") -> str:
    text = f"{star}{arg.arg}"
    if arg.annotation is not None:
        text = f"{text}: {_source(arg.annotation)}"
        if default is not None:
            return f"{text} = {_source(default)}"
    if default is not None:
        text = f"{text}={_source(default)}"
    return text


def _is_static(node: ast.FunctionDef | ast.AsyncFunctionDef) -> bool:
    return any(isinstance(dec, ast.Name) and dec.id == "staticmethod" for dec in node.decorator_list)


def ast_parameters(node: ast.FunctionDef | ast.AsyncFunctionDef, *, bound: bool = False) -> list[str]:
    """Parameters a caller passes, without ``/`` and ``*`` markers.

    ``bound`` drops the receiver (first positional) of a method, unless the
    method is a ``staticmethod``.
    """
    arguments = node.args
    positional = list(arguments.posonlyargs) + list(arguments.args)
    defaults: list[ast.AST | None] = [None] * (len(positional) - len(arguments.defaults)) + list(arguments.defaults)
    pairs = list(zip(positional, defaults))
    if bound and pairs and not _is_static(node):
        pairs = pairs[1:]

    params = [_param(arg, default) for arg, default in pairs]
    if arguments.vararg is not None:
        params.append(_param(arguments.vararg, star="*"))
    params.extend(_param(arg, default) for arg, default in zip(arguments.kwonlyargs, arguments.kw_defaults))
    if arguments.kwarg is not None:
        params.append(_param(arguments.kwarg, star="**"))
    return params


class _ParameterCollector(ast.NodeVisitor):
    """Module-level functions, classes (via ``__init__``) and their methods."""

    def __init__(self) -> None:
        self.found: dict[str, list[str]] = {}
        self._in_class = False

    def visit_FunctionDef(self, node: ast.FunctionDef) -> None:
        self.found[node.name] = ast_parameters(node, bound=self._in_class)

    visit_AsyncFunctionDef = visit_FunctionDef

    def visit_ClassDef(self, node: ast.ClassDef) -> None:
        if self._in_class:
            return
        self._in_class = True
        try:
            self.generic_visit(node)
        finally:
            self._in_class = False
        init = next(
            (sub for sub in node.body if isinstance(sub, (ast.FunctionDef, ast.AsyncFunctionDef)) and sub.name == "__init__"),
            None,
        )
        self.found[node.name] = ast_parameters(init, bound=True) if init is not None else []


def buffer_parameters(source_text: str) -> dict[str, list[str]]:
    """Callable name -> parameter list for definitions in ``source_text``."""
    if not source_text:
        return {}
    try:
        tree = ast.parse(source_text)
    except SyntaxError:
        return {}
    collector = _ParameterCollector()
    collector.visit(tree)
    return collector.found


def builtin_parameters(name: str) -> list[str] | None:
    obj = getattr(py_builtins, name, None)
    if obj is None or not callable(obj):
        return None
    try:
        signature = inspect.signature(obj)
    except (TypeError, ValueError):
        return None
    return [str(param) for param in signature.parameters.values()]


def signature_for_label(
        label: str,
        source_text: str,
        *,
        separator: str = ", ",
        opener: str = "(",
        closer: str = ")",
) -> str:
    """Trim-ready signature for ``label``: buffer definitions first, then builtins."""
    name = str(label or "").strip()
    if not name:
        return ""
    params = buffer_parameters(source_text).get(name)
    if params is None:
        params = builtin_parameters(name)
    if params is None:
        return ""
    return format_signature(name, params, separator=separator, opener=opener, closer=closer)


def callable_label_before(text: str, open_offset: int) -> str:
    """Return the identifier right before ``open_offset`` (last part of a dotted name)."""
    end = max(0, min(int(open_offset), len(text)))
    while end > 0 and text[end - 1] in " \t":
        end -= 1
    start = end
    while start > 0 and (text[start - 1].isalnum() or text[start - 1] in "_."):
        start -= 1
    return text[start:end].strip(".").rsplit(".", 1)[-1]
