"""Map file extensions to syntax highlighting grammars."""

from __future__ import annotations

DEFAULT_LANGUAGE = "plaintext"

EXTENSION_LANGUAGES: dict[str, str] = {
    "java": "java",
    "js": "javascript",
    "html": "xml",
    "htm": "xml",
    "css": "css",
    "py": "python",
    "cpp": "cpp",
    "cxx": "cpp",
    "cc": "cpp",
    "c": "c",
    "sh": "bash",
    "bash": "bash",
    "rs": "rust",
    "md": "markdown",
    "markdown": "markdown",
}


def classify_language(path: str) -> str:
    _, dot, extension = (path or "").rpartition(".")
    if not dot:
        return DEFAULT_LANGUAGE
    return EXTENSION_LANGUAGES.get(extension.lower(), DEFAULT_LANGUAGE)


__all__ = ["DEFAULT_LANGUAGE", "EXTENSION_LANGUAGES", "classify_language"]
