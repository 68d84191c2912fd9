"""C# syntax trees and event declaration matching."""

from .backing import resolve_backing_identifier
from .matcher import (
    AccessorLikeEvent,
    ElementType,
    EventDeclaration,
    FieldLikeEvent,
    GenericType,
    OtherType,
    Variable,
    match_event,
)
from .modifiers import VIRTUAL, add_modifier, modifiers_of, remove_modifier
from .registry import detect_language, get_parser, supported_languages
from .tree import EVENT_DECLARATION_TYPES, SyntaxTree, TextEdit

__all__ = [
    # Trees
    "SyntaxTree",
    "TextEdit",
    "EVENT_DECLARATION_TYPES",
    # Parsers
    "detect_language",
    "get_parser",
    "supported_languages",
    # Matching
    "match_event",
    "EventDeclaration",
    "FieldLikeEvent",
    "AccessorLikeEvent",
    "ElementType",
    "GenericType",
    "OtherType",
    "Variable",
    "resolve_backing_identifier",
    # Modifier editing
    "VIRTUAL",
    "add_modifier",
    "modifiers_of",
    "remove_modifier",
]
