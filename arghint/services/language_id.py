"""Language-id resolution for editor files.

The ids select both the lexical scanner options and the arg hint backend.
"""

from __future__ import annotations

from pathlib import Path

_EXTENSION_LANGUAGE_IDS: dict[str, str] = {
    ".py": "python",
    ".pyw": "python",
    ".pyi": "python",
    ".rs": "rust",
    ".c": "c",
    ".h": "c",
    ".cpp": "cpp",
    ".hpp": "cpp",
    ".cxx": "cpp",
    ".cc": "cpp",
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".php": "php",
    ".sh": "shell",
    ".bash": "shell",
    ".zsh": "shell",
}

_FILENAME_LANGUAGE_IDS: dict[str, str] = {
    ".bashrc": "shell",
    ".zshrc": "shell",
}


def language_id_for_path(file_path: str | None, *, default: str = "plaintext") -> str:
    path_text = str(file_path or "").strip()
    if not path_text:
        return str(default or "plaintext").strip().lower() or "plaintext"

    name = Path(path_text).name.lower()
    if name in _FILENAME_LANGUAGE_IDS:
        return _FILENAME_LANGUAGE_IDS[name]

    suffix = Path(path_text).suffix.lower()
    if suffix in _EXTENSION_LANGUAGE_IDS:
        return _EXTENSION_LANGUAGE_IDS[suffix]

    return str(default or "plaintext").strip().lower() or "plaintext"
