"""Registry of Tree-sitter parsers by language."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Callable

import tree_sitter
import tree_sitter_c_sharp as tscsharp

from ..errors import UnsupportedLanguageError

# Global registry state
_language_factories: dict[str, Callable[[], tree_sitter.Language]] = {}
_extension_to_language: dict[str, str] = {}

# Parsers hold mutable state, so each thread gets its own
_local = threading.local()


def register_language(
    language: str,
    extensions: list[str],
    factory: Callable[[], tree_sitter.Language],
) -> None:
    """Register a Tree-sitter language factory.

    Args:
        language: Language identifier (e.g., "csharp").
        extensions: File extensions to associate (e.g., [".cs"]).
        factory: Callable that returns a tree_sitter.Language.
    """
    _language_factories[language] = factory
    for ext in extensions:
        _extension_to_language[ext.lower()] = language


def detect_language(path: str) -> str:
    """Detect the programming language from a file path.

    Raises:
        UnsupportedLanguageError: If the file extension is not recognized.
    """
    ext = Path(path).suffix.lower()
    if ext not in _extension_to_language:
        raise UnsupportedLanguageError(
            language=ext or "<no extension>",
            supported=supported_languages(),
            hint=f"File '{path}' has no registered parser.",
        )
    return _extension_to_language[ext]


def get_parser(language: str = "csharp") -> tree_sitter.Parser:
    """Get this thread's parser for a language.

    Raises:
        UnsupportedLanguageError: If the language is not supported.
    """
    if language not in _language_factories:
        raise UnsupportedLanguageError(
            language=language,
            supported=supported_languages(),
        )

    parsers: dict[str, tree_sitter.Parser] = getattr(_local, "parsers", None) or {}
    if language not in parsers:
        parsers[language] = tree_sitter.Parser(_language_factories[language]())
        _local.parsers = parsers
    return parsers[language]


def supported_languages() -> list[str]:
    """Get sorted list of supported language identifiers."""
    return sorted(_language_factories.keys())


register_language(
    "csharp", [".cs", ".csx"], lambda: tree_sitter.Language(tscsharp.language())
)
