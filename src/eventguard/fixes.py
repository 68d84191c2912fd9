"""Code fixes for virtual event diagnostics."""

from __future__ import annotations

import logging
from functools import partial

import tree_sitter

from .config import AnalyzerConfig
from .errors import (
    DeclarationNotFoundError,
    MalformedElementTypeError,
    MultipleDeclaratorsError,
    ResolutionError,
)
from .messages import IMPLEMENT_RAISE_METHOD_TITLE, REMOVE_VIRTUAL_TITLE
from .models import FIELD_EVENT, CodeAction, Diagnostic
from .rule import FIELD_EVENT_DIAGNOSTIC_ID, PROPERTY_EVENT_DIAGNOSTIC_ID
from .synthesizer import RaiseMethod, raise_method_for
from .syntax.matcher import EventDeclaration, match_event
from .syntax.modifiers import VIRTUAL, remove_modifier
from .syntax.tree import EVENT_DECLARATION, EVENT_FIELD_DECLARATION, SyntaxTree, TextEdit

logger = logging.getLogger(__name__)

REMOVE_VIRTUAL = "remove-virtual"
IMPLEMENT_RAISE_METHOD = "implement-raise-method"

FIXABLE_DIAGNOSTIC_IDS = (FIELD_EVENT_DIAGNOSTIC_ID, PROPERTY_EVENT_DIAGNOSTIC_ID)


class FixProvider:
    """Offers the two rewrites for a virtual event diagnostic.

    Every action re-locates its declaration in the tree it is applied to, so
    actions never hold on to nodes from another snapshot.
    """

    def __init__(self, config: AnalyzerConfig | None = None):
        self.config = config or AnalyzerConfig()

    def list_fixes(self, diagnostic: Diagnostic, tree: SyntaxTree) -> list[CodeAction]:
        """Actions available for `diagnostic` in `tree`; empty if none apply."""
        if diagnostic.id not in FIXABLE_DIAGNOSTIC_IDS:
            return []

        node_type = _declaration_type(diagnostic)
        try:
            event = _locate(tree, diagnostic.span.start_byte, node_type)
        except DeclarationNotFoundError as e:
            logger.debug("No fix for %s: %s", diagnostic.id, e)
            return []
        if not event.is_virtual:
            return []

        messages = self.config.messages
        decl_start = event.node.start_byte
        actions = [
            CodeAction(
                title=messages.get(REMOVE_VIRTUAL_TITLE),
                equivalence_key=REMOVE_VIRTUAL,
                apply=partial(_remove_virtual, decl_start=decl_start, node_type=node_type),
            )
        ]

        try:
            method = raise_method_for(tree, event, self.config)
        except (MalformedElementTypeError, MultipleDeclaratorsError, ResolutionError) as e:
            logger.debug("Raise method unavailable for %s: %s", event.name, e)
        else:
            actions.append(
                CodeAction(
                    title=messages.get(IMPLEMENT_RAISE_METHOD_TITLE),
                    equivalence_key=IMPLEMENT_RAISE_METHOD,
                    apply=partial(
                        self._implement_raise_method,
                        decl_start=decl_start,
                        node_type=node_type,
                        method=method,
                    ),
                )
            )
        return actions

    def _implement_raise_method(
        self,
        tree: SyntaxTree,
        decl_start: int,
        node_type: str,
        method: RaiseMethod,
    ) -> SyntaxTree:
        """Insert the raise method after the event, then drop `virtual`.

        The insertion re-parses the file, so the declaration is looked up again
        by its mapped offset before the modifier edit.
        """
        decl = _locate(tree, decl_start, node_type).node
        if _has_member_named(tree, decl, method.name):
            logger.debug("%s already declares %s; inserting anyway", tree.path, method.name)

        edit = self._insertion_edit(tree, decl, method)
        intermediate = tree.with_edit(edit)

        relocated = _locate(intermediate, edit.map_offset(decl_start), node_type)
        return remove_modifier(intermediate, relocated.node, VIRTUAL)

    def _insertion_edit(
        self, tree: SyntaxTree, decl: tree_sitter.Node, method: RaiseMethod
    ) -> TextEdit:
        newline = tree.newline
        type_indent = tree.line_indent(_enclosing_type(decl).start_byte)
        if tree.source[tree.line_start(decl.start_byte):decl.start_byte].strip():
            indent = type_indent + self.config.indent_unit
        else:
            indent = tree.line_indent(decl.start_byte)

        text = newline + newline + method.render(indent, self.config.indent_unit, newline)
        start = end = decl.end_byte
        line_end = tree.line_end(start)
        rest = tree.source[start:line_end].strip()
        if not rest or rest.startswith(b"//"):
            # Go past a trailing line comment so it stays with the event
            start = end = line_end
            if _next_line_is_code(tree, start):
                text += newline
        else:
            # Code after the event moves to a line of its own
            while tree.source[end:end + 1] in (b" ", b"\t"):
                end += 1
            if rest.startswith(b"}"):
                text += newline + type_indent
            else:
                text += newline + newline + indent
        return TextEdit(start=start, end=end, replacement=text.encode())


def list_fixes(
    diagnostic: Diagnostic, tree: SyntaxTree, config: AnalyzerConfig | None = None
) -> list[CodeAction]:
    return FixProvider(config).list_fixes(diagnostic, tree)


def _declaration_type(diagnostic: Diagnostic) -> str:
    return EVENT_FIELD_DECLARATION if diagnostic.kind == FIELD_EVENT else EVENT_DECLARATION


def _locate(tree: SyntaxTree, offset: int, node_type: str) -> EventDeclaration:
    node = tree.find_declaration(offset, (node_type,))
    event = match_event(tree, node)
    if event is None:
        raise DeclarationNotFoundError(offset, node_type)
    return event


def _remove_virtual(tree: SyntaxTree, decl_start: int, node_type: str) -> SyntaxTree:
    event = _locate(tree, decl_start, node_type)
    return remove_modifier(tree, event.node, VIRTUAL)


def _enclosing_type(decl: tree_sitter.Node) -> tree_sitter.Node:
    """The type declaration whose body holds `decl` (or `decl` itself)."""
    body = decl.parent
    while body is not None and body.type != "declaration_list":
        body = body.parent
    if body is None or body.parent is None:
        return decl
    return body.parent


def _next_line_is_code(tree: SyntaxTree, offset: int) -> bool:
    """True if the line after `offset` holds something other than a closing brace."""
    newline_at = tree.source.find(b"\n", offset)
    if newline_at == -1:
        return False
    next_start = newline_at + 1
    next_line = tree.source[next_start:tree.line_end(next_start)].strip()
    return bool(next_line) and not next_line.startswith(b"}")


def _has_member_named(tree: SyntaxTree, decl: tree_sitter.Node, name: str) -> bool:
    container = decl.parent
    if container is None:
        return False
    for member in container.named_children:
        if member.type != "method_declaration":
            continue
        name_node = member.child_by_field_name("name")
        if name_node is not None and tree.node_text(name_node) == name:
            return True
    return False
